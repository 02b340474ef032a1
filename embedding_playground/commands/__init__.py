"""CLI command registrations."""

from __future__ import annotations

from typing import Iterable

from click import Group

from .compare import compare
from .config import config_command
from .help import help_command
from .normalize import normalize_command
from .playground import playground

COMMANDS = (
    compare,
    playground,
    normalize_command,
    config_command,
    help_command,
)


def register(group: Group, commands: Iterable = COMMANDS) -> None:
    for command in commands:
        group.add_command(command)


__all__ = ["register"]
