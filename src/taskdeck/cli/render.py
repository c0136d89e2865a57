"""Rich renderables for tasks, statistics and the profile view."""

from datetime import datetime

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from taskdeck.auth.models import User
from taskdeck.clock import parse_timestamp
from taskdeck.constants import truncate
from taskdeck.tasks.models import Achievement, Task, TaskPriority, TaskStats, TaskStatus
from taskdeck.tasks.stats import is_overdue

STATUS_ICONS = {
    TaskStatus.TODO: "○",
    TaskStatus.IN_PROGRESS: "◐",
    TaskStatus.COMPLETED: "●",
}

STATUS_STYLES = {
    TaskStatus.TODO: "dim",
    TaskStatus.IN_PROGRESS: "yellow",
    TaskStatus.COMPLETED: "green",
}

PRIORITY_STYLES = {
    TaskPriority.LOW: "cyan",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "bold red",
}


def format_due_date(value: str | None) -> str:
    if not value:
        return ""
    try:
        return parse_timestamp(value).strftime("%Y-%m-%d")
    except (ValueError, TypeError, AttributeError):
        return value


def task_table(tasks: list[Task], now: datetime) -> Table:
    table = Table(show_lines=False, header_style="bold")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("", no_wrap=True)
    table.add_column("Title")
    table.add_column("Priority", no_wrap=True)
    table.add_column("Category", no_wrap=True)
    table.add_column("Due", no_wrap=True)

    for task in tasks:
        title = Text(task.title)
        if task.status is TaskStatus.COMPLETED:
            title.stylize("strike dim")
        if task.description:
            title.append(f"\n{truncate(task.description)}", style="dim")

        due = Text(format_due_date(task.due_date))
        if is_overdue(task, now):
            due.append(" overdue", style="bold red")

        table.add_row(
            task.id,
            Text(STATUS_ICONS[task.status], style=STATUS_STYLES[task.status]),
            title,
            Text(task.priority.value, style=PRIORITY_STYLES[task.priority]),
            Text(task.category),
            due,
        )
    return table


def stats_panel(stats: TaskStats, title: str = "Task Overview") -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Tasks", str(stats.total))
    table.add_row("In Progress", Text(str(stats.in_progress), style="yellow"))
    table.add_row("Completed", Text(str(stats.completed), style="green"))
    table.add_row("Overdue", Text(str(stats.overdue), style="red"))
    table.add_row("Completion Rate", f"{stats.completion_rate}%")
    return Panel(table, title=f"[bold]{title}[/bold]", border_style="cyan")


def profile_panel(
    user: User,
    stats: TaskStats,
    achievements: list[Achievement],
    category_count: int,
) -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Name", Text(user.name))
    table.add_row("Email", Text(user.email))
    table.add_row("User ID", user.id)
    if user.avatar:
        table.add_row("Avatar", Text(user.avatar))
    table.add_row("Tasks", str(stats.total))
    table.add_row("Categories", str(category_count))
    table.add_row("Completion Rate", f"{stats.completion_rate}%")
    table.add_row("", "")
    for achievement in achievements:
        mark = Text("✔", style="green") if achievement.earned else Text("✘", style="dim")
        table.add_row(mark, f"{achievement.title} - {achievement.description}")
    return Panel(table, title="[bold]Profile[/bold]", border_style="cyan")
