"""Calendar utilities for date-only arithmetic.

All course scheduling works at calendar-day granularity. Values coming
from the UI or a catalog file may be ``date`` objects, ``datetime``
objects, or strings; everything is truncated to a plain ``date`` before
any arithmetic happens.

Weekday numbers follow the 0=Sunday..6=Saturday convention used by the
catalog data, which differs from ``date.weekday()`` (0=Monday).
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

DateInput = Union[date, datetime, str, None]

ALL_WEEK_DAYS = (0, 1, 2, 3, 4, 5, 6)

# Accepted in addition to ISO 8601.
_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%m/%d/%Y",
    "%b %d %Y",
    "%B %d %Y",
    "%a %b %d %Y",
    "%d %b %Y",
)


def parse_date_only(value: DateInput) -> Optional[date]:
    """Parse a value into a calendar date.

    Args:
        value: A date, datetime, ISO ``YYYY-MM-DD`` string, or another
            common date string.

    Returns:
        The date with any time component dropped, or None when the value
        is empty or cannot be parsed. Never raises.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    cleaned = text.replace(",", " ")
    cleaned = " ".join(cleaned.split())
    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def format_date_only(value: Optional[date]) -> str:
    """Format a date as zero-padded ``YYYY-MM-DD`` (empty string for None)."""
    if not isinstance(value, date):
        return ""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def add_days(value: date, days: int) -> date:
    """Shift a date by a number of calendar days (negative moves back)."""
    return value + timedelta(days=days)


def weekday_index(value: date) -> int:
    """Weekday of a date, 0=Sunday..6=Saturday."""
    return (value.weekday() + 1) % 7


def week_index(start: date, value: date) -> int:
    """1-based week number of ``value`` counted in 7-day blocks from ``start``."""
    return (value - start).days // 7 + 1


def normalize_course_days(days: Optional[Iterable]) -> list[int]:
    """Deduplicate weekday numbers, drop anything outside 0..6, sort ascending."""
    if days is None or isinstance(days, (str, bytes)):
        return []
    result = set()
    for raw in days:
        day = coerce_int(raw)
        if day is not None and 0 <= day <= 6:
            result.add(day)
    return sorted(result)


def iter_days(start: date, end: date):
    """Yield every date from start to end, both inclusive."""
    cursor = start
    while cursor <= end:
        yield cursor
        cursor = add_days(cursor, 1)


def coerce_int(value) -> Optional[int]:
    """Integer value of a number or numeric string; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None
