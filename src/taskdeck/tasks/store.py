"""Key-value backed task store.

Tasks of every user share one collection under `task_manager_tasks`;
categories are a global list under `task_manager_categories`. Every
operation loads the whole collection, changes it in memory and writes
the whole collection back, so concurrent writers are last-write-wins.
"""

from datetime import date, datetime, timedelta
from typing import Any

from taskdeck.clock import (
    Clock,
    format_timestamp,
    parse_timestamp,
    timestamp_id,
    to_epoch_ms,
    utc_now,
)
from taskdeck.constants import CATEGORIES_KEY, DEFAULT_CATEGORIES, TASKS_KEY
from taskdeck.errors import TaskValidationError
from taskdeck.logging import Loggers
from taskdeck.storage import KeyValueStorage, read_json, read_records, write_json
from taskdeck.tasks.models import Achievement, Task, TaskPriority, TaskStats, TaskStatus
from taskdeck.tasks.stats import compute_achievements, compute_stats

logger = Loggers.tasks()

# Fields callers may change through update(); id, owner and creation time are fixed.
UPDATABLE_FIELDS = frozenset(
    {"title", "description", "status", "priority", "category", "due_date"}
)

# (title, description, status, priority, category, due in days or None)
SAMPLE_TASKS = (
    (
        "Complete project proposal",
        "Finish the Q1 project proposal and submit to management",
        TaskStatus.IN_PROGRESS,
        TaskPriority.HIGH,
        "Work",
        2,
    ),
    (
        "Review team performance",
        "Conduct quarterly review meetings with team members",
        TaskStatus.TODO,
        TaskPriority.MEDIUM,
        "Work",
        7,
    ),
    (
        "Update portfolio website",
        "Add recent projects and update design",
        TaskStatus.COMPLETED,
        TaskPriority.LOW,
        "Personal",
        None,
    ),
)


def _coerce_status(value: TaskStatus | str) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError:
        raise TaskValidationError(
            f"Unknown status '{value}'",
            details={"allowed": [s.value for s in TaskStatus]},
        ) from None


def _coerce_priority(value: TaskPriority | str) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        raise TaskValidationError(
            f"Unknown priority '{value}'",
            details={"allowed": [p.value for p in TaskPriority]},
        ) from None


def _coerce_title(value: str) -> str:
    title = (value or "").strip()
    if not title:
        raise TaskValidationError("Task title must not be empty")
    return title


def _coerce_due_date(value: date | datetime | str | None) -> str | None:
    """Normalize a due date to its stored string form.

    Empty strings clear the due date, dates become `YYYY-MM-DD` and
    datetimes become full UTC timestamps. Strings are kept as given once
    they parse.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    try:
        parse_timestamp(value)
    except (ValueError, TypeError, AttributeError):
        raise TaskValidationError(f"Invalid due date '{value}'") from None
    return value


_COERCE = {
    "title": _coerce_title,
    "status": _coerce_status,
    "priority": _coerce_priority,
    "due_date": _coerce_due_date,
}


class TaskStore:
    """CRUD over task records scoped by owner, plus derived statistics.

    Example:
        >>> store = TaskStore(storage)
        >>> task = store.create(user.id, "Write report", priority="high", category="Work")
        >>> store.update(task.id, status="completed")
        >>> store.stats(user.id).completion_rate
        100
    """

    def __init__(self, storage: KeyValueStorage, clock: Clock | None = None) -> None:
        """Initialize the task store.

        Args:
            storage: Backend holding the tasks and categories keys.
            clock: Source of the current time, injectable for tests.
        """
        self._storage = storage
        self._clock = clock or utc_now

    def _load(self) -> list[Task]:
        return read_records(self._storage, TASKS_KEY, Task.from_dict)

    def _save(self, tasks: list[Task]) -> None:
        write_json(self._storage, TASKS_KEY, [t.to_dict() for t in tasks])

    def list_by_user(
        self,
        user_id: str,
        *,
        search: str | None = None,
        status: TaskStatus | str | None = None,
        priority: TaskPriority | str | None = None,
        category: str | None = None,
    ) -> list[Task]:
        """List a user's tasks in stored order, optionally filtered.

        Args:
            user_id: Owner to list tasks for.
            search: Case-insensitive substring of the title or description.
            status: Exact status match.
            priority: Exact priority match.
            category: Exact category match.

        Returns:
            Matching tasks in insertion order.
        """
        results = [t for t in self._load() if t.user_id == user_id]
        if search:
            needle = search.lower()
            results = [
                t
                for t in results
                if needle in t.title.lower()
                or (t.description is not None and needle in t.description.lower())
            ]
        if status:
            wanted_status = _coerce_status(status)
            results = [t for t in results if t.status is wanted_status]
        if priority:
            wanted_priority = _coerce_priority(priority)
            results = [t for t in results if t.priority is wanted_priority]
        if category:
            results = [t for t in results if t.category == category]
        return results

    def get(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        for task in self._load():
            if task.id == task_id:
                return task
        return None

    def create(
        self,
        user_id: str,
        title: str,
        *,
        description: str | None = None,
        status: TaskStatus | str = TaskStatus.TODO,
        priority: TaskPriority | str = TaskPriority.MEDIUM,
        category: str = "",
        due_date: date | datetime | str | None = None,
    ) -> Task:
        """Create a task for a user.

        Returns:
            The stored task.

        Raises:
            TaskValidationError: On an empty title, unknown status or
                priority, or an unparseable due date.
        """
        tasks = self._load()
        now = self._clock()
        stamp = format_timestamp(now)
        task = Task(
            id=timestamp_id(to_epoch_ms(now), {t.id for t in tasks}),
            title=_coerce_title(title),
            user_id=user_id,
            created_at=stamp,
            updated_at=stamp,
            status=_coerce_status(status),
            priority=_coerce_priority(priority),
            category=category,
            description=description,
            due_date=_coerce_due_date(due_date),
        )
        tasks.append(task)
        self._save(tasks)
        logger.info("task_created", task_id=task.id, user_id=user_id)
        return task

    def update(self, task_id: str, **fields: Any) -> Task | None:
        """Merge fields into an existing task.

        Args:
            task_id: Task ID.
            **fields: Any of title, description, status, priority, category,
                due_date. Other keys (id, user_id, created_at) are ignored.

        Returns:
            The updated task, or None if no task has that ID.

        Raises:
            TaskValidationError: If a given field value is invalid.
        """
        tasks = self._load()
        for task in tasks:
            if task.id == task_id:
                break
        else:
            logger.debug("task_not_found", task_id=task_id)
            return None

        for key, value in fields.items():
            if key not in UPDATABLE_FIELDS:
                continue
            coerce = _COERCE.get(key)
            setattr(task, key, coerce(value) if coerce else value)
        task.updated_at = format_timestamp(self._clock())

        self._save(tasks)
        logger.info("task_updated", task_id=task_id, fields=sorted(fields))
        return task

    def cycle_status(self, task_id: str) -> Task | None:
        """Advance a task to its next status (todo -> in progress -> completed -> todo)."""
        task = self.get(task_id)
        if task is None:
            return None
        return self.update(task_id, status=task.status.next())

    def delete(self, task_id: str) -> bool:
        """Delete a task.

        Returns:
            True if deleted, False if not found (storage is left untouched).
        """
        tasks = self._load()
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            return False
        self._save(remaining)
        logger.info("task_deleted", task_id=task_id)
        return True

    def stats(self, user_id: str) -> TaskStats:
        """Totals, in-progress, overdue and completion rate for one user."""
        return compute_stats(self.list_by_user(user_id), self._clock())

    def achievements(self, user_id: str) -> list[Achievement]:
        tasks = self.list_by_user(user_id)
        return compute_achievements(tasks, compute_stats(tasks, self._clock()))

    def category_count(self, user_id: str) -> int:
        """Number of distinct categories used by a user's tasks."""
        return len({t.category for t in self.list_by_user(user_id)})

    def categories(self) -> list[str]:
        """Global category list, seeded with the defaults on first access."""
        categories = read_json(self._storage, CATEGORIES_KEY, expected=list)
        if categories is None:
            categories = list(DEFAULT_CATEGORIES)
            write_json(self._storage, CATEGORIES_KEY, categories)
        return [c for c in categories if isinstance(c, str)]

    def add_category(self, name: str) -> None:
        """Append a category unless it is already present (case-sensitive).

        Raises:
            TaskValidationError: If the name is blank.
        """
        if not name or not name.strip():
            raise TaskValidationError("Category name must not be empty")
        categories = self.categories()
        if name not in categories:
            categories.append(name)
            write_json(self._storage, CATEGORIES_KEY, categories)
            logger.info("category_added", category=name)

    def seed_sample_data(self, user_id: str) -> list[Task]:
        """Give a user with no tasks the three demo tasks.

        Returns:
            The tasks created, empty if the user already had tasks.
        """
        if self.list_by_user(user_id):
            return []

        now = self._clock()
        created = []
        for title, description, status, priority, category, due_in_days in SAMPLE_TASKS:
            due_date = None
            if due_in_days is not None:
                due_date = now + timedelta(days=due_in_days)
            created.append(
                self.create(
                    user_id,
                    title,
                    description=description,
                    status=status,
                    priority=priority,
                    category=category,
                    due_date=due_date,
                )
            )
        logger.info("sample_data_seeded", user_id=user_id, count=len(created))
        return created
