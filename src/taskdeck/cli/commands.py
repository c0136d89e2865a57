"""Command registry and base command class.

Provides the foundation for the `taskdeck` subcommands.

Example of creating a custom command:

    from taskdeck.cli.commands import Command, CommandCategory

    class OverdueCommand(Command):
        '''List overdue tasks.'''

        def __init__(self):
            super().__init__(
                name="overdue",
                description="List overdue tasks",
                usage="taskdeck overdue [--category=NAME]",
                examples=["taskdeck overdue --category Work"],
                category=CommandCategory.TASKS,
            )

        async def execute(self, args: list[str], app: Any) -> None:
            parsed = self.parse_args(args)
            category = parsed.get_option("category")
            ...
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rich.markup import escape


class CommandError(Exception):
    """Raised by a command for usage errors or missing preconditions."""


class CommandCategory(Enum):
    """Categories for organizing commands."""

    GENERAL = "general"
    ACCOUNT = "account"
    TASKS = "tasks"


@dataclass
class ParsedArgs:
    """Parsed command arguments.

    Provides easy access to positional arguments and options.
    """

    positional: list[str] = field(default_factory=list)
    """Positional arguments (everything not an option)."""

    options: dict[str, str] = field(default_factory=dict)
    """Named options (--key=value or --key value)."""

    @property
    def text(self) -> str:
        """Positional arguments joined by spaces."""
        return " ".join(self.positional)

    def get_option(self, name: str, default: str | None = None) -> str | None:
        """Get an option value, or default if it was not given."""
        return self.options.get(name, default)


class Command(ABC):
    """Base class for subcommands.

    Subclass this to create custom commands. Override execute() to
    implement command behavior.
    """

    def __init__(
        self,
        name: str,
        description: str,
        aliases: list[str] | None = None,
        usage: str | None = None,
        examples: list[str] | None = None,
        category: CommandCategory = CommandCategory.GENERAL,
        requires_login: bool = False,
    ) -> None:
        """Initialize the command.

        Args:
            name: Command name (used as `taskdeck name`)
            description: Short description of what the command does
            aliases: Alternative names for the command
            usage: Usage string showing syntax
            examples: List of example usages
            category: Category for organizing in help
            requires_login: Whether the command needs an active session
        """
        self.name = name
        self.description = description
        self.aliases = aliases or []
        self.usage = usage or f"taskdeck {name}"
        self.examples = examples or []
        self.category = category
        self.requires_login = requires_login

    @abstractmethod
    async def execute(self, args: list[str], app: Any) -> None:
        """Execute the command with given arguments.

        Args:
            args: Command-line tokens after the command name
            app: The TaskDeckApp instance
        """
        pass

    def parse_args(self, args: list[str]) -> ParsedArgs:
        """Parse command arguments into structured form.

        Parses options in the forms:
        - --key=value
        - --key value

        Everything else is treated as positional arguments. The list is
        taken as already split by the shell.

        Raises:
            CommandError: If an option is not followed by a value.
        """
        options: dict[str, str] = {}
        positional: list[str] = []

        i = 0
        while i < len(args):
            part = args[i]

            if part.startswith("--") and len(part) > 2:
                key = part[2:]

                if "=" in key:
                    key, value = key.split("=", 1)
                    options[key] = value
                elif i + 1 < len(args) and not args[i + 1].startswith("--"):
                    options[key] = args[i + 1]
                    i += 1
                else:
                    raise CommandError(f"Option --{key} needs a value")
            else:
                positional.append(part)

            i += 1

        return ParsedArgs(positional=positional, options=options)

    def get_help(self) -> str:
        """Get detailed help text for this command (rich markup)."""
        lines = [
            f"[bold]{self.name}[/bold]",
            f"  {escape(self.description)}",
            "",
            f"[bold]Usage:[/bold] {escape(self.usage)}",
        ]

        if self.aliases:
            lines.append(f"[bold]Aliases:[/bold] {', '.join(self.aliases)}")

        if self.examples:
            lines.append("")
            lines.append("[bold]Examples:[/bold]")
            for example in self.examples:
                lines.append(f"  {escape(example)}")

        return "\n".join(lines)


class CommandRegistry:
    """Registry for managing commands.

    Handles command registration and lookup by name or alias.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._categories: dict[CommandCategory, list[Command]] = {
            cat: [] for cat in CommandCategory
        }

    def register(self, command: Command) -> None:
        """Register a command and its aliases."""
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

        if command not in self._categories[command.category]:
            self._categories[command.category].append(command)

    def get(self, name: str) -> Command | None:
        """Get a command by name or alias."""
        return self._commands.get(name)

    def by_category(self, category: CommandCategory) -> list[Command]:
        """Get commands in a specific category."""
        return self._categories.get(category, [])
