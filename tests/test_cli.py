"""Tests for the TaskDeck command-line application."""

import io

import pytest
from rich.console import Console

from taskdeck.cli.app import TaskDeckApp
from taskdeck.cli.main import main
from taskdeck.constants import TOKEN_KEY


class Harness:
    """Runs commands against one app and captures what they print."""

    def __init__(self, app: TaskDeckApp, out: io.StringIO, err: io.StringIO):
        self.app = app
        self._out = out
        self._err = err

    async def run(self, *argv: str) -> int:
        self._out.seek(0)
        self._out.truncate()
        self._err.seek(0)
        self._err.truncate()
        return await self.app.run(list(argv))

    @property
    def out(self) -> str:
        return self._out.getvalue()

    @property
    def err(self) -> str:
        return self._err.getvalue()


@pytest.fixture
def cli(mock_context, storage, clock) -> Harness:
    out, err = io.StringIO(), io.StringIO()
    app = TaskDeckApp(
        settings=mock_context.settings,
        storage=storage,
        console=Console(file=out, width=200),
        error_console=Console(file=err, width=200),
        clock=clock,
    )
    return Harness(app, out, err)


class TestAccountCommands:
    @pytest.mark.asyncio
    async def test_requires_login(self, cli):
        assert await cli.run("list") == 1
        assert "Not logged in" in cli.err

    @pytest.mark.asyncio
    async def test_demo_login_and_logout(self, cli, storage):
        assert await cli.run("demo") == 0
        assert "Demo User" in cli.out

        assert await cli.run("logout") == 0
        assert storage.get_item(TOKEN_KEY) is None

    @pytest.mark.asyncio
    async def test_register(self, cli):
        assert await cli.run("register", "ada@example.com", "pw", "Ada", "Lovelace") == 0
        assert "Ada Lovelace" in cli.out
        assert cli.app.auth.get_current_user().name == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_register_duplicate_reports_error(self, cli):
        assert await cli.run("register", "demo@example.com", "pw", "Dup") == 1
        assert "User already exists" in cli.err

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, cli):
        assert await cli.run("login", "demo@example.com", "nope") == 1
        assert "Invalid credentials" in cli.err

    @pytest.mark.asyncio
    async def test_login_usage(self, cli):
        assert await cli.run("login", "only-email") == 1
        assert "Usage" in cli.err

    @pytest.mark.asyncio
    async def test_profile_and_avatar(self, cli):
        await cli.run("demo")
        assert await cli.run("avatar", "https://example.com/me.png") == 0
        assert await cli.run("whoami") == 0
        assert "demo@example.com" in cli.out
        assert "https://example.com/me.png" in cli.out
        assert "Task Creator" in cli.out


class TestTaskCommands:
    @pytest.mark.asyncio
    async def test_dashboard_seeds_sample_data(self, cli):
        await cli.run("demo")
        assert await cli.run("dashboard") == 0
        assert "Total Tasks" in cli.out
        assert "33%" in cli.out
        assert len(cli.app.tasks.list_by_user("1")) == 3

    @pytest.mark.asyncio
    async def test_add_and_list(self, cli):
        await cli.run("demo")
        assert await cli.run(
            "add", "Write report", "--priority", "high", "--category", "Work", "--due", "2024-06-10"
        ) == 0
        assert "Write report" in cli.out

        assert await cli.run("list", "--priority", "high") == 0
        assert "Write report" in cli.out
        assert "2024-06-10" in cli.out

    @pytest.mark.asyncio
    async def test_list_empty_messages(self, cli):
        await cli.run("demo")
        await cli.run("list")
        assert "No tasks yet" in cli.out
        await cli.run("list", "--status", "completed")
        assert "No tasks match" in cli.out

    @pytest.mark.asyncio
    async def test_add_without_title(self, cli):
        await cli.run("demo")
        assert await cli.run("add", "--priority", "high") == 1
        assert "title" in cli.err

    @pytest.mark.asyncio
    async def test_edit_toggle_delete(self, cli, clock):
        await cli.run("demo")
        task = cli.app.tasks.create("1", "Draft")

        assert await cli.run("edit", task.id, "--title", "Final draft") == 0
        assert cli.app.tasks.get(task.id).title == "Final draft"

        assert await cli.run("toggle", task.id) == 0
        assert "in progress" in cli.out

        assert await cli.run("delete", task.id) == 0
        assert cli.app.tasks.get(task.id) is None

    @pytest.mark.asyncio
    async def test_cannot_touch_other_users_task(self, cli):
        foreign = cli.app.tasks.create("someone-else", "Private")
        await cli.run("demo")

        assert await cli.run("delete", foreign.id) == 1
        assert "not found" in cli.err
        assert cli.app.tasks.get(foreign.id) is not None

    @pytest.mark.asyncio
    async def test_categories(self, cli):
        assert await cli.run("categories", "--add", "Errands") == 0
        assert "- Work" in cli.out
        assert "- Errands" in cli.out

    @pytest.mark.asyncio
    async def test_option_without_value(self, cli):
        assert await cli.run("categories", "--add") == 1
        assert "--add needs a value" in cli.err
        assert "true" not in cli.app.tasks.categories()

        await cli.run("demo")
        assert await cli.run("add", "Report", "--description") == 1
        assert cli.app.tasks.list_by_user("1") == []


class TestGeneral:
    @pytest.mark.asyncio
    async def test_help_lists_commands(self, cli):
        assert await cli.run("help") == 0
        for name in ("login", "dashboard", "list", "add", "toggle"):
            assert name in cli.out

    @pytest.mark.asyncio
    async def test_help_for_command(self, cli):
        assert await cli.run("help", "add") == 0
        assert "Create a task" in cli.out

    @pytest.mark.asyncio
    async def test_no_arguments_shows_help(self, cli):
        assert await cli.run() == 0
        assert "Available Commands" in cli.out

    @pytest.mark.asyncio
    async def test_unknown_command(self, cli):
        assert await cli.run("frobnicate") == 1
        assert "Unknown command" in cli.err


class TestMain:
    @pytest.fixture(autouse=True)
    def _keep_logging_unconfigured(self, monkeypatch):
        # configure_logging binds structlog to the captured stderr, which
        # is closed once the test ends
        monkeypatch.setattr("taskdeck.cli.main.configure_logging", lambda settings: None)

    def test_session_persists_between_invocations(self, mock_context, capsys):
        assert main(["demo"]) == 0
        assert main(["add", "Persisted task"]) == 0
        assert main(["list"]) == 0
        assert "Persisted task" in capsys.readouterr().out
        assert (mock_context.data_dir / "storage" / f"{TOKEN_KEY}.json").exists()

    def test_invalid_settings(self, mock_context, capsys, monkeypatch):
        bad = mock_context.settings.model_copy(update={"session_ttl_hours": 0})
        monkeypatch.setattr("taskdeck.cli.main.get_settings", lambda: bad)
        assert main(["help"]) == 2
        assert "session_ttl_hours" in capsys.readouterr().err
