"""Built-in commands for the TaskDeck CLI."""

from typing import Any

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from taskdeck.cli.commands import Command, CommandCategory, CommandError
from taskdeck.cli.render import profile_panel, stats_panel, task_table
from taskdeck.constants import DEMO_USER
from taskdeck.tasks.models import Task


def _task_fields(options: dict[str, str]) -> dict[str, Any]:
    """Map command-line options onto TaskStore keyword arguments."""
    mapping = {
        "title": "title",
        "description": "description",
        "status": "status",
        "priority": "priority",
        "category": "category",
        "due": "due_date",
    }
    return {mapping[k]: v for k, v in options.items() if k in mapping}


def _owned_task(app: Any, task_id: str) -> Task:
    task = app.tasks.get(task_id)
    if task is None or task.user_id != app.current_user.id:
        raise CommandError(f"Task '{task_id}' not found")
    return task


class HelpCommand(Command):
    """Display help information about available commands."""

    def __init__(self) -> None:
        super().__init__(
            name="help",
            description="Show available commands and usage information",
            usage="taskdeck help [command]",
            examples=["taskdeck help", "taskdeck help add"],
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if parsed.positional:
            cmd = app.command_registry.get(parsed.positional[0])
            if cmd is None:
                raise CommandError(f"Unknown command: {parsed.positional[0]}")
            app.console.print(Panel(cmd.get_help(), border_style="cyan"))
            return

        table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
        table.add_column("Command", style="bold cyan", no_wrap=True)
        table.add_column("Aliases", style="dim", no_wrap=True)
        table.add_column("Description")

        for category in CommandCategory:
            for cmd in sorted(app.command_registry.by_category(category), key=lambda c: c.name):
                table.add_row(cmd.name, ", ".join(cmd.aliases), cmd.description)

        app.console.print(
            Panel(table, title="[bold]Available Commands[/bold]", border_style="cyan")
        )


class RegisterCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="register",
            description="Create an account and log in",
            aliases=["signup"],
            usage="taskdeck register <email> <password> <name>",
            examples=['taskdeck register ada@example.com s3cret "Ada Lovelace"'],
            category=CommandCategory.ACCOUNT,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if len(parsed.positional) < 3:
            raise CommandError(f"Usage: {self.usage}")
        email, password, *name = parsed.positional
        session = await app.auth.register(email, password, " ".join(name))
        app.console.print(f"Welcome, [bold]{escape(session.user.name)}[/bold]! Account created.")


class LoginCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="login",
            description="Log in with email and password",
            usage="taskdeck login <email> <password>",
            category=CommandCategory.ACCOUNT,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if len(parsed.positional) != 2:
            raise CommandError(f"Usage: {self.usage}")
        session = await app.auth.login(*parsed.positional)
        app.console.print(f"Welcome back, [bold]{escape(session.user.name)}[/bold]!")


class DemoCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="demo",
            description="Log in with the demo account",
            category=CommandCategory.ACCOUNT,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        session = await app.auth.login(DEMO_USER["email"], DEMO_USER["password"])
        app.console.print(f"Logged in as [bold]{escape(session.user.name)}[/bold].")


class LogoutCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="logout",
            description="End the current session",
            category=CommandCategory.ACCOUNT,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        app.auth.logout()
        app.console.print("Logged out.")


class ProfileCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="profile",
            description="Show your account, progress and achievements",
            aliases=["whoami"],
            category=CommandCategory.ACCOUNT,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        user = app.current_user
        app.console.print(
            profile_panel(
                user,
                app.tasks.stats(user.id),
                app.tasks.achievements(user.id),
                app.tasks.category_count(user.id),
            )
        )


class AvatarCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="avatar",
            description="Set your avatar URL",
            usage="taskdeck avatar <url>",
            category=CommandCategory.ACCOUNT,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if len(parsed.positional) != 1:
            raise CommandError(f"Usage: {self.usage}")
        app.auth.update_avatar(parsed.positional[0])
        app.console.print("Avatar updated.")


class DashboardCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="dashboard",
            description="Overview of your task progress",
            aliases=["stats"],
            category=CommandCategory.TASKS,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        user = app.current_user
        # First visit gets the demo tasks
        app.tasks.seed_sample_data(user.id)
        app.console.print(f"Welcome back, [bold]{escape(user.name)}[/bold]!")
        app.console.print(stats_panel(app.tasks.stats(user.id)))


class ListCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="list",
            description="List your tasks, optionally filtered",
            aliases=["ls"],
            usage=(
                "taskdeck list [--search TEXT] [--status STATUS] "
                "[--priority PRIORITY] [--category NAME]"
            ),
            examples=["taskdeck list --status in_progress", "taskdeck list --search report"],
            category=CommandCategory.TASKS,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        tasks = app.tasks.list_by_user(
            app.current_user.id,
            search=parsed.get_option("search"),
            status=parsed.get_option("status"),
            priority=parsed.get_option("priority"),
            category=parsed.get_option("category"),
        )
        if not tasks:
            if parsed.options:
                app.console.print("No tasks match. Try adjusting your filters or search term.")
            else:
                app.console.print("No tasks yet. Create one with 'taskdeck add'.")
            return
        app.console.print(task_table(tasks, app.now()))


class AddCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="add",
            description="Create a task",
            usage=(
                "taskdeck add <title> [--description TEXT] [--status STATUS] "
                "[--priority PRIORITY] [--category NAME] [--due YYYY-MM-DD]"
            ),
            examples=['taskdeck add "Write report" --priority high --category Work --due 2025-01-31'],
            category=CommandCategory.TASKS,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        fields = _task_fields(parsed.options)
        fields.pop("title", None)
        task = app.tasks.create(app.current_user.id, parsed.text, **fields)
        app.console.print(f"Task created: [bold]{escape(task.title)}[/bold] ({task.id})")


class EditCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="edit",
            description="Change fields of a task",
            usage=(
                "taskdeck edit <id> [--title TEXT] [--description TEXT] [--status STATUS] "
                "[--priority PRIORITY] [--category NAME] [--due YYYY-MM-DD]"
            ),
            category=CommandCategory.TASKS,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if len(parsed.positional) != 1:
            raise CommandError(f"Usage: {self.usage}")
        task = _owned_task(app, parsed.positional[0])
        fields = _task_fields(parsed.options)
        if not fields:
            raise CommandError("Nothing to change")
        app.tasks.update(task.id, **fields)
        app.console.print("Task updated successfully.")


class ToggleCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="toggle",
            description="Move a task to its next status",
            usage="taskdeck toggle <id>",
            category=CommandCategory.TASKS,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if len(parsed.positional) != 1:
            raise CommandError(f"Usage: {self.usage}")
        task = _owned_task(app, parsed.positional[0])
        updated = app.tasks.cycle_status(task.id)
        app.console.print(f"Task marked as {updated.status.label}.")


class DeleteCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="delete",
            description="Delete a task",
            aliases=["rm"],
            usage="taskdeck delete <id>",
            category=CommandCategory.TASKS,
            requires_login=True,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        if len(parsed.positional) != 1:
            raise CommandError(f"Usage: {self.usage}")
        task = _owned_task(app, parsed.positional[0])
        app.tasks.delete(task.id)
        app.console.print("Task has been successfully deleted.")


class CategoriesCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            name="categories",
            description="List categories or add one",
            usage="taskdeck categories [--add NAME]",
            category=CommandCategory.TASKS,
        )

    async def execute(self, args: list[str], app: Any) -> None:
        parsed = self.parse_args(args)
        new_category = parsed.get_option("add")
        if new_category is not None:
            app.tasks.add_category(new_category)
        for name in app.tasks.categories():
            app.console.print(f"- {escape(name)}")


BUILTIN_COMMANDS: tuple[type[Command], ...] = (
    HelpCommand,
    RegisterCommand,
    LoginCommand,
    DemoCommand,
    LogoutCommand,
    ProfileCommand,
    AvatarCommand,
    DashboardCommand,
    ListCommand,
    AddCommand,
    EditCommand,
    ToggleCommand,
    DeleteCommand,
    CategoriesCommand,
)
