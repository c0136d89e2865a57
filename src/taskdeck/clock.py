"""Timestamp helpers.

Persisted timestamps use the JavaScript `toISOString()` shape
(`2024-01-01T09:30:00.000Z`) and session expiry uses epoch milliseconds,
so data written by the browser build and by this package is interchangeable.
"""

from datetime import date, datetime, time, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_epoch_ms(moment: datetime) -> int:
    """Convert a datetime to integer epoch milliseconds (naive means UTC)."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def timestamp_id(now_ms: int, taken: set[str]) -> str:
    """Identifier from the current epoch milliseconds.

    Bumped forward past identifiers already in `taken`, so creating several
    records within one millisecond still yields distinct ids.
    """
    candidate = now_ms
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def format_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse a stored date or timestamp into an aware UTC datetime.

    Date-only values (`2024-03-01`) mean midnight UTC of that day, which is
    how browsers interpret them. Naive timestamps are taken as UTC.

    Raises:
        ValueError: If the value is not an ISO date or timestamp.
    """
    text = value.strip()
    if len(text) == 10:
        return datetime.combine(date.fromisoformat(text), time(), tzinfo=timezone.utc)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
