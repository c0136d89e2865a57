"""TaskDeck - a personal task manager over a pluggable key-value store.

This package provides:

- Simulated authentication with a single persisted session (AuthService)
- Per-user task CRUD, filtering and statistics (TaskStore)
- In-memory and file-backed storage backends
- A `taskdeck` command-line front end

Example:
    storage = create_storage(get_settings())
    auth = AuthService(storage)
    tasks = TaskStore(storage)

    session = await auth.login("demo@example.com", "password123")
    tasks.seed_sample_data(session.user.id)
    print(tasks.stats(session.user.id).completion_rate)
"""

from taskdeck.auth import AuthService, AuthToken, User
from taskdeck.config import (
    Settings,
    SettingsContext,
    SettingsValidationError,
    get_settings,
    reload_settings,
    set_settings,
    validate_settings,
)
from taskdeck.errors import (
    DuplicateUserError,
    InvalidCredentialsError,
    TaskDeckError,
    TaskValidationError,
)
from taskdeck.storage import FileStorage, KeyValueStorage, MemoryStorage, create_storage
from taskdeck.tasks import Task, TaskPriority, TaskStats, TaskStatus, TaskStore

__all__ = [
    # Stores
    "AuthService",
    "AuthToken",
    "User",
    "TaskStore",
    "Task",
    "TaskPriority",
    "TaskStats",
    "TaskStatus",
    # Storage
    "KeyValueStorage",
    "FileStorage",
    "MemoryStorage",
    "create_storage",
    # Errors
    "TaskDeckError",
    "DuplicateUserError",
    "InvalidCredentialsError",
    "TaskValidationError",
    # Settings
    "Settings",
    "SettingsContext",
    "SettingsValidationError",
    "get_settings",
    "set_settings",
    "reload_settings",
    "validate_settings",
]

__version__ = "0.1.0"
