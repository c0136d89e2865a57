"""Command-line front end for TaskDeck."""

from taskdeck.cli.app import TaskDeckApp
from taskdeck.cli.commands import (
    Command,
    CommandCategory,
    CommandError,
    CommandRegistry,
    ParsedArgs,
)

__all__ = [
    "Command",
    "CommandCategory",
    "CommandError",
    "CommandRegistry",
    "ParsedArgs",
    "TaskDeckApp",
]
