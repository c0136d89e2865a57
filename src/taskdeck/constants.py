"""Shared constants for TaskDeck."""

# Storage keys, kept identical to the browser build so exported data stays readable
TOKEN_KEY = "task_manager_token"
USERS_KEY = "task_manager_users"
TASKS_KEY = "task_manager_tasks"
CATEGORIES_KEY = "task_manager_categories"

DEFAULT_CATEGORIES = ("Work", "Personal", "Study", "Health", "Finance")

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"

DEMO_USER = {
    "id": "1",
    "email": "demo@example.com",
    "name": "Demo User",
    "password": "password123",
}

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR

# Display truncation
DESCRIPTION_PREVIEW_LENGTH = 60


def truncate(text: str, max_length: int = DESCRIPTION_PREVIEW_LENGTH) -> str:
    """Truncate text with ellipsis if it exceeds max_length."""
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text
