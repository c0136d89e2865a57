"""Task records and their enumerations.

Tasks are persisted with the camelCase keys of the browser build
(`dueDate`, `createdAt`, `updatedAt`, `userId`); the dataclass uses
snake_case attributes and converts in to_dict/from_dict.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from taskdeck.storage.base import optional_str, require_str


class TaskStatus(str, Enum):
    """Progress of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    def next(self) -> "TaskStatus":
        """Following status in the todo -> in progress -> completed -> todo cycle."""
        members = list(TaskStatus)
        return members[(members.index(self) + 1) % len(members)]


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class Task:
    """A single task owned by one user."""

    id: str
    title: str
    user_id: str
    created_at: str
    updated_at: str
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category: str = ""
    description: str | None = None
    due_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status.value,
            "priority": self.priority.value,
            "category": self.category,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "userId": self.user_id,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        return cls(
            id=require_str(data, "id"),
            title=require_str(data, "title"),
            user_id=require_str(data, "userId"),
            created_at=require_str(data, "createdAt"),
            updated_at=require_str(data, "updatedAt"),
            status=TaskStatus(data.get("status", TaskStatus.TODO.value)),
            priority=TaskPriority(data.get("priority", TaskPriority.MEDIUM.value)),
            category=optional_str(data, "category") or "",
            description=optional_str(data, "description"),
            due_date=optional_str(data, "dueDate"),
        )


@dataclass(frozen=True)
class TaskStats:
    """Aggregate counts over one user's tasks."""

    total: int = 0
    completed: int = 0
    in_progress: int = 0
    overdue: int = 0
    completion_rate: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "inProgress": self.in_progress,
            "overdue": self.overdue,
            "completionRate": self.completion_rate,
        }


@dataclass(frozen=True)
class Achievement:
    """A profile milestone and whether the user has reached it."""

    title: str
    description: str
    earned: bool
