"""Error types raised by the TaskDeck stores.

Lookups that miss (update/delete of an unknown task) are not errors:
they return None or False.
"""

from typing import Any


class TaskDeckError(Exception):
    """Base error for store failures.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional error details
    """

    error_code = "TASKDECK_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": False,
            "error": {
                "message": self.message,
                "code": self.error_code,
                "details": self.details,
            },
        }


class DuplicateUserError(TaskDeckError):
    """Registration with an email that is already taken."""

    error_code = "DUPLICATE_USER"


class InvalidCredentialsError(TaskDeckError):
    """Login with an unknown email or wrong password."""

    error_code = "INVALID_CREDENTIALS"


class TaskValidationError(TaskDeckError):
    """Task or category data that cannot be stored."""

    error_code = "INVALID_TASK"
