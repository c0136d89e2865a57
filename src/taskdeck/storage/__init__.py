"""Key-value storage backends.

Example:
    >>> storage = create_storage(settings)
    >>> write_json(storage, "task_manager_categories", ["Work"])
    >>> read_json(storage, "task_manager_categories", [])
    ['Work']
"""

from typing import TYPE_CHECKING

from taskdeck.storage.base import KeyValueStorage, read_json, read_records, write_json
from taskdeck.storage.file import FileStorage
from taskdeck.storage.memory import MemoryStorage

if TYPE_CHECKING:
    from taskdeck.config import Settings


def create_storage(settings: "Settings") -> KeyValueStorage:
    """Build the storage backend selected by settings.storage_backend."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return FileStorage(settings.storage_dir)


__all__ = [
    "KeyValueStorage",
    "FileStorage",
    "MemoryStorage",
    "create_storage",
    "read_json",
    "read_records",
    "write_json",
]
