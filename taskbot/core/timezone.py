"""Timezone utilities for date-relative input such as "today" or "in 3 days"."""

from datetime import date, datetime
from zoneinfo import ZoneInfo


def local_now(timezone_str: str = "UTC") -> datetime:
    """Get current datetime in the configured timezone.

    Args:
        timezone_str: IANA timezone identifier (e.g., 'Asia/Dubai', 'UTC').

    Returns:
        Timezone-aware datetime in the specified timezone.

    Raises:
        ZoneInfoNotFoundError: If the timezone identifier is invalid.
    """
    return datetime.now(ZoneInfo(timezone_str))


def local_today(timezone_str: str = "UTC") -> date:
    """Current calendar date in the configured timezone."""
    return local_now(timezone_str).date()


def format_due(value: date | None) -> str:
    """Format a due date for chat display."""
    if value is None:
        return "No due date"
    return value.strftime("%b %d, %Y").replace(" 0", " ")
