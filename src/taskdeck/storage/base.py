"""Key-value storage interface.

Stores hold whole collections under a handful of named keys and
always read and write them in one piece. Values are strings, the way
browser localStorage holds them; JSON encoding lives in the helpers
below rather than in each backend.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

from taskdeck.logging import Loggers

logger = Loggers.storage()

T = TypeVar("T")


class KeyValueStorage(ABC):
    """Abstract base class for string key-value storage backends.

    Example:
        class RedisStorage(KeyValueStorage):
            def get_item(self, key: str) -> str | None:
                value = self._client.get(key)
                return value.decode() if value is not None else None
            ...
    """

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List the keys currently stored."""
        pass

    def clear(self) -> None:
        """Remove every key."""
        for key in self.keys():
            self.remove_item(key)


def read_json(
    storage: KeyValueStorage,
    key: str,
    default: Any = None,
    expected: type | None = None,
) -> Any:
    """Load and decode a JSON value.

    Args:
        storage: Backend to read from.
        key: Storage key.
        default: Returned when the key is absent or its value is not valid JSON.
        expected: Container type the decoded value must have. Anything else
            (including `null`) is treated as corrupt and yields default.

    Returns:
        The decoded value, or default.
    """
    raw = storage.get_item(key)
    if raw is None:
        return default
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("corrupt_value", key=key, error=str(e))
        return default
    if expected is not None and not isinstance(value, expected):
        logger.warning(
            "corrupt_value",
            key=key,
            error=f"expected {expected.__name__}, got {type(value).__name__}",
        )
        return default
    return value


def read_records(
    storage: KeyValueStorage,
    key: str,
    from_dict: Callable[[dict[str, Any]], T],
) -> list[T]:
    """Load a JSON list of records, skipping entries that fail to decode.

    Args:
        storage: Backend to read from.
        key: Storage key holding a list of objects.
        from_dict: Builds one record, raising on missing or mistyped fields.

    Returns:
        The readable records in stored order.
    """
    records: list[T] = []
    for index, item in enumerate(read_json(storage, key, [], expected=list)):
        try:
            records.append(from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("corrupt_value", key=key, index=index, error=repr(e))
    return records


def write_json(storage: KeyValueStorage, key: str, value: Any) -> None:
    """Encode a value as JSON and store it."""
    storage.set_item(key, json.dumps(value))


def require_str(data: dict[str, Any], key: str) -> str:
    """Fetch a mandatory string field from a decoded record."""
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value
