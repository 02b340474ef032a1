from __future__ import annotations

import json
from typing import TextIO

import rich_click as click

from ..core import EmbeddingError, console, normalize, print_error, render_embedding_panel


@click.command(name="normalize")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Emit the pooled vector as JSON.")
def normalize_command(source: TextIO, as_json: bool) -> None:
    """Pool a raw model output (JSON file or stdin) into one vector.

    Arrays are read as nested per-token output; objects need `data` and `dims`.
    """
    try:
        payload = json.load(source)
    except json.JSONDecodeError as err:
        raise click.UsageError(f"Invalid JSON payload: {err}") from err

    try:
        embedding = normalize(payload)
    except EmbeddingError as exc:
        print_error(str(exc))
        raise click.Abort() from exc

    if as_json:
        click.echo(
            json.dumps(
                {
                    "token_count": embedding.token_count,
                    "dimension": embedding.dimension,
                    "vector": embedding.as_list(),
                }
            )
        )
        return

    console.print(render_embedding_panel("Normalized output", embedding))
