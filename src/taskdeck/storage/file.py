"""File-backed storage backend.

Each key is kept in its own file:
    {directory}/
    ├── task_manager_users.json
    ├── task_manager_tasks.json
    └── ...
"""

from pathlib import Path
from urllib.parse import quote, unquote

from taskdeck.logging import Loggers
from taskdeck.storage.base import KeyValueStorage

logger = Loggers.storage()

_SUFFIX = ".json"


def safe_key(key: str) -> str:
    """Map a storage key to a file stem.

    Letters, digits and `-_.~` are kept; everything else is percent-encoded,
    so the mapping is reversible with `unquote`.
    """
    return quote(key, safe="")


def write_atomic(path: Path, content: str) -> None:
    """Replace the file at path in one step, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(path.name + ".tmp")
    staging.write_text(content, encoding="utf-8")
    staging.replace(path)


class FileStorage(KeyValueStorage):
    """Durable storage with one file per key and atomic writes."""

    def __init__(self, directory: Path) -> None:
        """Initialize file storage.

        Args:
            directory: Directory that holds the value files. Created on first write.
        """
        self.directory = directory

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{safe_key(key)}{_SUFFIX}"

    def get_item(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        path = self._path_for(key)
        write_atomic(path, value)
        logger.debug("value_written", key=key, path=str(path), size=len(value))

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        if path.exists():
            path.unlink()
            logger.debug("value_removed", key=key)

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return sorted(unquote(p.stem) for p in self.directory.glob(f"*{_SUFFIX}"))
