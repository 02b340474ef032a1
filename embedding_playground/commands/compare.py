from __future__ import annotations

import asyncio
import json

import rich_click as click

from ..core import (
    BACKENDS,
    ConfigManager,
    EmbeddingError,
    ModelHandle,
    display_comparison,
    print_error,
)
from ..core.session import ComparisonSession


def build_session(
    manager: ConfigManager, backend: str | None = None, model_name: str | None = None
) -> ComparisonSession:
    handle = ModelHandle.from_config(manager.as_dict(), backend=backend, model_name=model_name)
    return ComparisonSession(handle)


def display_options(manager: ConfigManager, show_vectors: bool = False) -> dict:
    return {
        "good": float(manager.get("good_threshold")),
        "ok": float(manager.get("ok_threshold")),
        "preview": None if show_vectors else int(manager.get("vector_preview")),
    }


@click.command(name="compare")
@click.argument("user_text")
@click.argument("expected_text")
@click.option("--backend", type=click.Choice(list(BACKENDS)), help="Embedding runtime to use.")
@click.option("--model", "model_name", help="Model name passed to the runtime.")
@click.option("-v", "--show-vectors", is_flag=True, help="Print full pooled vectors instead of a preview.")
@click.option("--json", "as_json", is_flag=True, help="Emit the result as JSON.")
def compare(
    user_text: str,
    expected_text: str,
    backend: str | None,
    model_name: str | None,
    show_vectors: bool,
    as_json: bool,
) -> None:
    """Compare two texts by the cosine similarity of their embeddings."""
    if not user_text.strip() or not expected_text.strip():
        print_error("Both texts are required.")
        raise click.Abort()

    manager = ConfigManager()
    session = build_session(manager, backend=backend, model_name=model_name)

    async def _run_comparison():
        await session.start()
        return await session.compare(user_text, expected_text)

    try:
        result = asyncio.run(_run_comparison())
    except EmbeddingError as exc:
        print_error(str(exc))
        raise click.Abort() from exc

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    display_comparison(result, **display_options(manager, show_vectors))
