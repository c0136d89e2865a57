"""Task management: per-user task records, categories and statistics.

Example:
    >>> store = TaskStore(storage)
    >>> task = store.create(user_id, "Implement auth module", priority="high")
    >>> store.cycle_status(task.id).status
    <TaskStatus.IN_PROGRESS: 'in_progress'>
    >>> store.stats(user_id).in_progress
    1
"""

from taskdeck.tasks.models import Achievement, Task, TaskPriority, TaskStats, TaskStatus
from taskdeck.tasks.store import TaskStore

__all__ = [
    "Achievement",
    "Task",
    "TaskPriority",
    "TaskStats",
    "TaskStatus",
    "TaskStore",
]
