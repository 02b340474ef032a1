"""CLI entrypoint for embedding-playground."""
from __future__ import annotations

import rich_click as click
from rich_click import rich_click
from dotenv import load_dotenv, find_dotenv

from .commands import register
from .core.output import ACCENT, SUBDUED, configure_logging

# Load environment variables from .env file (searches up directory tree)
load_dotenv(find_dotenv(usecwd=True))

rich_click.TEXT_MARKUP = True
rich_click.MAX_WIDTH = 100
rich_click.STYLE_HELPTEXT = SUBDUED
rich_click.STYLE_HEADER_TEXT = f"bold {ACCENT}"
rich_click.GROUP_ARGUMENTS_OPTIONS = True
rich_click.SHOW_ARGUMENTS = True
rich_click.OPTIONS_TABLE_COLUMN_TYPES = ["required", "opt_long", "help"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="embedding-playground")
@click.option("--debug", is_flag=True, help="Show verbose log output.")
def cli(debug: bool) -> None:
    """Compare two texts by the similarity of their sentence embeddings.

    **Popular commands**

    • `embed compare "The cat sat" "A cat was sitting"`
    • `embed playground`
    • `embed normalize output.json`
    """
    configure_logging(debug)


register(cli)
