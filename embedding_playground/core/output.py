"""Rich console helpers for consistent CLI styling."""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Sequence

from rich import box
from rich.console import Console, Group
from rich.logging import RichHandler
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from .normalize import NormalizedEmbedding
from .similarity import BAND_GOOD, BAND_OK, GOOD_THRESHOLD, OK_THRESHOLD, classify_similarity

if TYPE_CHECKING:
    from ..models.comparison import ComparisonResult

# --- Theme & Constants ---
INK = "white"
SUBDUED = "grey70"
ACCENT = "cyan"
SUCCESS = "bright_green"
WARNING = "yellow"
ERROR = "red"
VECTOR = "green"
BAR_EMPTY = "grey30"
BAR_WIDTH = 40

BAND_COLOURS = {
    BAND_GOOD: "green",
    BAND_OK: "orange1",
}

_THEME = Theme({
    "success": f"bold {SUCCESS}",
    "warning": WARNING,
    "error": f"bold {ERROR}",
    "panel.title": f"bold {ACCENT} italic",
    "meta": f"{SUBDUED} italic",
    "vector": VECTOR,
    "ink": INK,
})

console = Console(theme=_THEME)


def configure_logging(debug: bool = False) -> None:
    """Route log records through the shared console."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug, markup=False)],
        force=True,
    )


# --- Low-Level Helpers & Primitives ---

def _print_status(prefix: str, color: str, message: str):
    console.print(Text.assemble(
        Text(prefix, style=Style.parse(f"bold {color}")),
        Text(message, style="ink"),
    ))


def print_success(message: str) -> None:
    _print_status("✓ ", SUCCESS, message)


def print_warning(message: str) -> None:
    _print_status("! ", WARNING, message)


def print_error(message: str) -> None:
    _print_status("✗ ", ERROR, message)


def format_vector(vector: Sequence[float], preview: int | None = None) -> str:
    """Render coordinates to four decimals, optionally truncated to ``preview``."""
    values = list(vector)
    if preview is None or preview >= len(values):
        return json.dumps([round(float(v), 4) for v in values], indent=2)
    if preview <= 0:
        return f"… {len(values)} values"
    shown = ", ".join(f"{float(v):.4f}" for v in values[:preview])
    return f"[{shown}, … +{len(values) - preview} more]"


def legend_text(good: float = GOOD_THRESHOLD, ok: float = OK_THRESHOLD) -> str:
    return f"Good: ≥{good:g}; OK: {ok:g}–{good:g}; Bad: <{ok:g}"


def similarity_bar(score: float, band: str, width: int = BAR_WIDTH) -> Text:
    """A horizontal bar filled to ``score`` as a fraction of ``width``."""
    filled = int(round(max(0.0, min(score, 1.0)) * width))
    colour = BAND_COLOURS.get(band, ERROR)
    return Text.assemble(
        Text("█" * filled, style=colour),
        Text("░" * (width - filled), style=BAR_EMPTY),
    )


# --- Core UI Building Blocks ---

def render_status_panel(status_lines: Sequence[str], context_lines: Sequence[str] | None = None) -> Panel:
    """Returns a status panel, one markup line per entry."""
    body_lines = list(status_lines)
    if context_lines:
        body_lines.append("")
        body_lines.extend(context_lines)

    return Panel(
        Text.from_markup("\n".join(body_lines)),
        title=Text("status", style=Style.parse(f"bold {ACCENT} italic")),
        box=box.ROUNDED,
        border_style=ACCENT,
        padding=(1, 2),
    )


def render_embedding_panel(
    title: str, embedding: NormalizedEmbedding, preview: int | None = None
) -> Panel:
    """Token count, dimension and (a preview of) the pooled vector."""
    meta = Text.assemble(
        Text("tokens ", style="meta"),
        Text(str(embedding.token_count), style="ink"),
        Text("  •  dims ", style="meta"),
        Text(str(embedding.dimension), style="ink"),
    )
    vector = Text(format_vector(embedding.vector, preview), style="vector")
    return Panel(
        Group(meta, Text(" "), vector),
        title=Text(f"◇ {title}", style=Style.parse(f"bold {ACCENT} italic")),
        border_style=ACCENT,
        box=box.ROUNDED,
        padding=(0, 1),
    )


def render_similarity_panel(
    score: float, good: float = GOOD_THRESHOLD, ok: float = OK_THRESHOLD
) -> Panel:
    band = classify_similarity(score, good=good, ok=ok)
    grid = Table.grid(padding=(0, 2))
    grid.add_column(no_wrap=True)
    grid.add_column(no_wrap=True)
    grid.add_row(similarity_bar(score, band), Text(f"{score:.4f}", style=f"bold {BAND_COLOURS.get(band, ERROR)}"))
    return Panel(
        Group(Text(legend_text(good, ok), style="meta"), grid),
        title=Text("◇ Similarity", style=Style.parse(f"bold {ACCENT} italic")),
        border_style=ACCENT,
        box=box.ROUNDED,
        padding=(0, 1),
    )


def render_comparison(
    result: "ComparisonResult",
    good: float = GOOD_THRESHOLD,
    ok: float = OK_THRESHOLD,
    preview: int | None = 8,
) -> Group:
    return Group(
        render_embedding_panel("User Input", result.user, preview),
        render_embedding_panel("Expected Text", result.expected, preview),
        render_similarity_panel(result.similarity, good=good, ok=ok),
    )


# --- High-Level Display Functions ---

def display_comparison(
    result: "ComparisonResult",
    good: float = GOOD_THRESHOLD,
    ok: float = OK_THRESHOLD,
    preview: int | None = 8,
) -> None:
    """Prints both embeddings and the similarity panel."""
    console.print(render_comparison(result, good=good, ok=ok, preview=preview))
