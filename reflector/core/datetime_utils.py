"""
Datetime utility functions for handling timezone-aware datetimes.
"""
from datetime import date, datetime, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    """
    Return the current datetime in UTC timezone.

    This utility provides a consistent, mockable way to get the current UTC time
    throughout the codebase. Using this function instead of datetime.now(timezone.utc)
    directly enables easier testing through mocking.

    Returns:
        A timezone-aware datetime object representing the current time in UTC.
    """
    return datetime.now(timezone.utc)


def ensure_timezone_aware(dt: Optional[datetime]) -> datetime:
    """
    Ensure a datetime object is timezone-aware (UTC).
    SQLite may return timezone-naive datetimes even when stored as timezone-aware.

    Args:
        dt: The datetime to ensure is timezone-aware

    Returns:
        A timezone-aware datetime object in UTC

    Raises:
        ValueError: If dt is None
    """
    if dt is None:
        raise ValueError("datetime cannot be None")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_calendar_date(value: Union[date, datetime]) -> date:
    """Return the UTC calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return ensure_timezone_aware(value).astimezone(timezone.utc).date()
    return value


def calendar_days_between(
    earlier: Union[date, datetime], later: Union[date, datetime]
) -> int:
    """
    Count whole calendar days from ``earlier`` to ``later``.

    Time of day is ignored: 23:59 yesterday and 00:01 today are one day apart.

    Example:
        >>> calendar_days_between(date(2026, 3, 1), date(2026, 3, 2))
        1
    """
    return (to_calendar_date(later) - to_calendar_date(earlier)).days
