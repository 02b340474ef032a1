from __future__ import annotations

import click
from rich.panel import Panel

from ..core import console

HELP_CONTENT = """[bold]embedding-playground quick start[/bold]

• [bold]Compare[/bold]: `embed compare "User text" "Expected text"`
• [bold]Full vectors[/bold]: `embed compare "A" "B" --show-vectors`
• [bold]Interactive[/bold]: `embed playground`
• [bold]Inspect raw output[/bold]: `embed normalize output.json`
• [bold]Pick a runtime[/bold]: `embed config --backend transformers --model sentence-transformers/all-MiniLM-L6-v2`


Tips:
- The `hash` backend needs no download and is deterministic; use it offline.
- Real models need `pip install embedding-playground\\[transformers]`.
- Run with `--debug` for verbose trace output when something breaks.
"""


@click.command(name="help")
@click.argument("topic", required=False)
def help_command(topic: str | None) -> None:
    """Show usage tips and quick links."""
    console.print(Panel.fit(HELP_CONTENT, border_style="cyan"))
    if topic:
        console.print(
            (
                f"[dim]No detailed walkthrough for [bold]{topic}[/bold] yet. "
                "Try `embed help` without a topic.[/dim]"
            )
        )
