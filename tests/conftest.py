"""Shared test fixtures and utilities for TaskDeck tests.

Provides:
- MockContext for isolating tests from global settings and environment
- A controllable clock shared by both stores
- Storage, credential store and task store fixtures
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator

import pytest

from taskdeck.auth import AuthService
from taskdeck.config import Settings, reload_settings, set_context_settings, set_settings
from taskdeck.storage import MemoryStorage
from taskdeck.tasks import TaskStore

START = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class MockContext:
    """Context manager for isolating tests from global state.

    Handles:
    - Resetting the global settings singleton
    - Providing a temporary data directory
    - Clearing TASKDECK_* environment variables

    Usage:
        with MockContext() as ctx:
            settings = ctx.settings
            data_dir = ctx.data_dir
    """

    def __init__(self, **settings_kwargs):
        self._settings_kwargs = settings_kwargs
        self._temp_dir: tempfile.TemporaryDirectory | None = None
        self._settings: Settings | None = None
        self._original_env: dict[str, str] = {}

    def __enter__(self) -> "MockContext":
        self._temp_dir = tempfile.TemporaryDirectory()

        for var in [v for v in os.environ if v.startswith("TASKDECK_")]:
            self._original_env[var] = os.environ.pop(var)

        kwargs = {"simulated_latency": 0.0, **self._settings_kwargs}
        self._settings = Settings(data_dir=Path(self._temp_dir.name), **kwargs)
        set_settings(self._settings)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        set_context_settings(None)
        os.environ.update(self._original_env)
        reload_settings()
        if self._temp_dir:
            self._temp_dir.cleanup()

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            raise RuntimeError("MockContext not entered")
        return self._settings

    @property
    def data_dir(self) -> Path:
        if self._temp_dir is None:
            raise RuntimeError("MockContext not entered")
        return Path(self._temp_dir.name)


@pytest.fixture
def mock_context() -> Generator[MockContext, None, None]:
    """Fixture providing an isolated settings context (file storage, no latency)."""
    with MockContext() as ctx:
        yield ctx


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def auth(mock_context: MockContext, storage: MemoryStorage, clock: FrozenClock) -> AuthService:
    return AuthService(storage, mock_context.settings, clock=clock)


@pytest.fixture
def task_store(storage: MemoryStorage, clock: FrozenClock) -> TaskStore:
    return TaskStore(storage, clock=clock)
