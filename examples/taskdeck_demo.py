#!/usr/bin/env python
"""Standalone demo for the TaskDeck stores.

This demo walks through:
1. Demo-user login and registration
2. Creating, filtering and updating tasks
3. Dashboard statistics and achievements
4. Session persistence in file storage

Usage:
    python examples/taskdeck_demo.py
"""

import asyncio
import tempfile
from pathlib import Path

from taskdeck.auth import AuthService
from taskdeck.config import Settings
from taskdeck.errors import TaskDeckError
from taskdeck.storage import FileStorage
from taskdeck.tasks import TaskStore


async def demo_auth(auth: AuthService) -> str:
    """Demo login, failed login and registration."""
    print("\n" + "=" * 60)
    print("Auth Demo")
    print("=" * 60)

    session = await auth.login("demo@example.com", "password123")
    print(f"\n  Logged in as {session.user.name} (id={session.user.id})")
    print(f"    token: {session.token[:16]}...")
    print(f"    expiresAt: {session.expires_at}")

    try:
        await auth.login("demo@example.com", "wrong")
    except TaskDeckError as e:
        print(f"\n  Wrong password -> {e.error_code}: {e}")

    session = await auth.register("ada@example.com", "s3cret", "Ada Lovelace")
    print(f"\n  Registered {session.user.name}")
    print(f"    avatar: {session.user.avatar}")
    return session.user.id


def demo_tasks(tasks: TaskStore, user_id: str) -> None:
    """Demo task lifecycle and filters."""
    print("\n" + "=" * 60)
    print("Task Demo")
    print("=" * 60)

    report = tasks.create(user_id, "Write report", priority="high", category="Work", due_date="2020-01-31")
    tasks.create(user_id, "Go for a run", category="Health")
    tasks.create(user_id, "Read chapter 3", category="Study", status="completed")

    print("\n  All tasks:")
    for task in tasks.list_by_user(user_id):
        print(f"    - [{task.status.label}] {task.title} ({task.priority.value}, {task.category})")

    print("\n  Search 'run':")
    for task in tasks.list_by_user(user_id, search="run"):
        print(f"    - {task.title}")

    updated = tasks.cycle_status(report.id)
    print(f"\n  Toggled '{updated.title}' -> {updated.status.label}")


def demo_stats(tasks: TaskStore, user_id: str) -> None:
    """Demo dashboard statistics and achievements."""
    print("\n" + "=" * 60)
    print("Stats Demo")
    print("=" * 60)

    stats = tasks.stats(user_id)
    print(f"\n  {stats.to_dict()}")

    print("\n  Achievements:")
    for achievement in tasks.achievements(user_id):
        mark = "x" if achievement.earned else " "
        print(f"    [{mark}] {achievement.title}: {achievement.description}")
    print()


async def main():
    """Run all demos."""
    print("\n" + "#" * 60)
    print("#  TaskDeck Demo")
    print("#" * 60)

    with tempfile.TemporaryDirectory() as temp_dir:
        settings = Settings(data_dir=Path(temp_dir), simulated_latency=0.0)
        storage = FileStorage(settings.storage_dir)
        print(f"\n  Using storage directory: {settings.storage_dir}")

        auth = AuthService(storage, settings)
        tasks = TaskStore(storage)

        user_id = await demo_auth(auth)
        demo_tasks(tasks, user_id)
        demo_stats(tasks, user_id)

        # A fresh service over the same directory sees the stored session
        restored = AuthService(FileStorage(settings.storage_dir), settings)
        print(f"  Session restored for: {restored.get_current_user().name}")
        print(f"  Files: {sorted(p.name for p in settings.storage_dir.iterdir())}")

    print("\n" + "#" * 60)
    print("#  Demo Complete!")
    print("#" * 60 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
