"""Timestamp formatting utilities."""

from datetime import date, datetime, timedelta, timezone
from typing import Union


def now() -> str:
    """Current local time as a compact, filename-safe stamp (e.g. "20261017_101500")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def format_date(
    value: Union[datetime, date, str, int, float, None],
    fmt: str = "%Y-%m-%d",
    tz_offset: int = 0,
) -> str:
    """
    Format a date-like value for templates.

    Args:
        value: datetime, date, ISO 8601 string, or UNIX timestamp
        fmt: strftime format
        tz_offset: Offset from UTC in minutes applied to timezone-aware values
                   and timestamps (naive datetimes are formatted as-is)

    Returns:
        Formatted string ("" for None)

    Examples:
        format_date("2026-10-17T18:45:40")
        # "2026-10-17"

        format_date(0, "%H:%M", tz_offset=120)
        # "02:00"
    """
    if value is None:
        return ""

    tz = timezone(timedelta(minutes=tz_offset))

    if isinstance(value, (int, float)):
        value = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        value = datetime.fromisoformat(value)
    elif not isinstance(value, datetime):
        # Plain date: no time component to shift
        return value.strftime(fmt)

    if value.tzinfo is not None:
        value = value.astimezone(tz)

    return value.strftime(fmt)
