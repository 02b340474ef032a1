from __future__ import annotations

import asyncio

import rich_click as click

from ..core import (
    BACKENDS,
    ComparisonError,
    ConfigManager,
    InvalidComparisonRequest,
    ModelLoadError,
    console,
    display_comparison,
    print_error,
    print_success,
    print_warning,
)
from ..core.session import ComparisonSession
from .compare import build_session, display_options


async def _run_playground(session: ComparisonSession, display: dict) -> bool:
    try:
        await session.start()
    except ModelLoadError as exc:
        print_error(str(exc))
        return False
    print_success(f"Model ready: {session.handle.description}")
    console.print("[meta]Leave the user input empty to quit.[/meta]")

    while True:
        user_text = click.prompt("User input", default="", show_default=False)
        if not user_text.strip():
            return True
        expected_text = click.prompt("Expected text", default="", show_default=False)
        try:
            result = await session.compare(user_text, expected_text)
        except InvalidComparisonRequest as exc:
            print_warning(str(exc))
            continue
        except ComparisonError as exc:
            print_error(exc.message)
            continue
        display_comparison(result, **display)


@click.command(name="playground")
@click.option("--backend", type=click.Choice(list(BACKENDS)), help="Embedding runtime to use.")
@click.option("--model", "model_name", help="Model name passed to the runtime.")
@click.option("-v", "--show-vectors", is_flag=True, help="Print full pooled vectors instead of a preview.")
def playground(backend: str | None, model_name: str | None, show_vectors: bool) -> None:
    """Load the model once and compare texts interactively."""
    manager = ConfigManager()
    session = build_session(manager, backend=backend, model_name=model_name)
    if not asyncio.run(_run_playground(session, display_options(manager, show_vectors))):
        raise click.Abort()
