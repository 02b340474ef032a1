from __future__ import annotations

import click

from ..core import BACKENDS, console, print_error, render_status_panel
from ..core.config import ConfigManager
from ..core.runtime import HASH_LAYOUTS


@click.command(name="config")
@click.option("--backend", type=click.Choice(list(BACKENDS)), help="Default embedding runtime")
@click.option("--model", "model_name", help="Model name for the transformers runtimes")
@click.option("--dimensions", type=click.IntRange(min=1), help="Vector size produced by the hash runtime")
@click.option("--layout", type=click.Choice(HASH_LAYOUTS), help="Output shape produced by the hash runtime")
@click.option("--good-threshold", type=click.FloatRange(-1.0, 1.0), help="Lowest score shown as a good match")
@click.option("--ok-threshold", type=click.FloatRange(-1.0, 1.0), help="Lowest score shown as an acceptable match")
@click.option("--preview", type=click.IntRange(min=1), help="Coordinates shown per vector (default 8)")
@click.option("--show", is_flag=True, help="Show the current configuration")
def config_command(
    backend: str | None,
    model_name: str | None,
    dimensions: int | None,
    layout: str | None,
    good_threshold: float | None,
    ok_threshold: float | None,
    preview: int | None,
    show: bool,
) -> None:
    """Manage runtime and display settings."""
    manager = ConfigManager()
    updates = {}

    if backend:
        updates["backend"] = backend
    if model_name:
        updates["model_name"] = model_name
    if dimensions is not None:
        updates["hash_dimensions"] = dimensions
    if layout:
        updates["hash_layout"] = layout
    if good_threshold is not None:
        updates["good_threshold"] = good_threshold
    if ok_threshold is not None:
        updates["ok_threshold"] = ok_threshold
    if preview is not None:
        updates["vector_preview"] = preview

    good = updates.get("good_threshold", manager.get("good_threshold"))
    ok = updates.get("ok_threshold", manager.get("ok_threshold"))
    if ok > good:
        print_error(f"OK threshold {ok} cannot exceed good threshold {good}.")
        raise click.Abort()

    if updates:
        manager.update(updates)
        console.print(
            render_status_panel(
                ["[success]Updated configuration[/success]"],
                [f"Updated fields: {', '.join(updates.keys())}"],
            )
        )

    if show or not updates:
        lines = [f"{k}: {v}" for k, v in manager.as_dict().items() if v is not None]
        console.print(
            render_status_panel(["[bold]Current Configuration[/bold]"], lines)
        )
