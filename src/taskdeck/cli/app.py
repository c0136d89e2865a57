"""TaskDeck command-line application.

Each invocation runs one command against the persisted stores; the
session survives between invocations in storage, so `taskdeck login`
followed by `taskdeck list` behaves like the browser app reloading.
"""

from datetime import datetime

from rich.console import Console
from rich.markup import escape

from taskdeck.auth import AuthService, User
from taskdeck.cli.builtin_commands import BUILTIN_COMMANDS
from taskdeck.cli.commands import CommandError, CommandRegistry
from taskdeck.clock import Clock, utc_now
from taskdeck.config import Settings, get_settings
from taskdeck.errors import TaskDeckError
from taskdeck.logging import Loggers, bind_context, clear_context
from taskdeck.storage import KeyValueStorage, create_storage
from taskdeck.tasks import TaskStore

logger = Loggers.cli()


class TaskDeckApp:
    """Wires settings, storage and both stores to the command registry.

    Example:
        app = TaskDeckApp()
        exit_code = await app.run(["list", "--status", "completed"])
    """

    def __init__(
        self,
        settings: Settings | None = None,
        storage: KeyValueStorage | None = None,
        console: Console | None = None,
        error_console: Console | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the application.

        Args:
            settings: Application settings. Defaults to get_settings().
            storage: Storage backend. Defaults to the one selected by settings.
            console: Console for normal output.
            error_console: Console for error messages (stderr by default).
            clock: Source of the current time, shared with both stores.
        """
        self.settings = settings or get_settings()
        self.storage = storage or create_storage(self.settings)
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self._clock = clock or utc_now

        self.auth = AuthService(self.storage, self.settings, clock=self._clock)
        self.tasks = TaskStore(self.storage, clock=self._clock)

        self.command_registry = CommandRegistry()
        for command_cls in BUILTIN_COMMANDS:
            self.command_registry.register(command_cls())

        self._current_user: User | None = None

    def now(self) -> datetime:
        return self._clock()

    @property
    def current_user(self) -> User:
        """Logged-in user for commands that require a session."""
        if self._current_user is None:
            raise CommandError("Not logged in. Run 'taskdeck login' or 'taskdeck demo' first.")
        return self._current_user

    async def run(self, argv: list[str]) -> int:
        """Run a single command.

        Args:
            argv: Command name followed by its arguments. Empty shows help.

        Returns:
            Process exit code (0 on success, 1 on failure).
        """
        name, *args = argv or ["help"]
        command = self.command_registry.get(name)
        if command is None:
            self.error_console.print(
                f"[red]Unknown command:[/red] {escape(name)}. Run 'taskdeck help' for a list."
            )
            return 1

        try:
            if command.requires_login:
                self._current_user = self.auth.get_current_user()
                if self._current_user is not None:
                    bind_context(user_id=self._current_user.id)
            await command.execute(args, self)
        except (CommandError, TaskDeckError) as e:
            logger.debug("command_failed", command=command.name, error=str(e))
            self.error_console.print(f"[red]Error:[/red] {escape(str(e))}")
            return 1
        finally:
            clear_context()
        return 0
