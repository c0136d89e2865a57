"""Derived, read-only figures over a user's tasks.

Nothing here touches storage; TaskStore passes in the current snapshot.
"""

import math
from collections.abc import Iterable
from datetime import datetime

from taskdeck.clock import parse_timestamp
from taskdeck.tasks.models import Achievement, Task, TaskStats, TaskStatus


def is_overdue(task: Task, now: datetime) -> bool:
    """Open task whose due date is strictly in the past."""
    if not task.due_date or task.status is TaskStatus.COMPLETED:
        return False
    try:
        return parse_timestamp(task.due_date) < now
    except (ValueError, TypeError, AttributeError):
        return False


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed tasks, halves rounded up, 0 for no tasks."""
    if total == 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


def compute_stats(tasks: Iterable[Task], now: datetime) -> TaskStats:
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status is TaskStatus.COMPLETED)
    return TaskStats(
        total=total,
        completed=completed,
        in_progress=sum(1 for t in tasks if t.status is TaskStatus.IN_PROGRESS),
        overdue=sum(1 for t in tasks if is_overdue(t, now)),
        completion_rate=completion_rate(completed, total),
    )


def compute_achievements(tasks: list[Task], stats: TaskStats) -> list[Achievement]:
    return [
        Achievement(
            title="Task Creator",
            description="Created your first task",
            earned=len(tasks) > 0,
        ),
        Achievement(
            title="Getting Started",
            description="Completed 5 tasks",
            earned=stats.completed >= 5,
        ),
        Achievement(
            title="Productivity Pro",
            description="Maintained 80% completion rate",
            earned=stats.completion_rate >= 80,
        ),
    ]
