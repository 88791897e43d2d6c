"""Calendar date helpers shared by the service and the client.

Every date that crosses a boundary (API payload, database document, local
state) goes through ``normalize_date`` so that comparisons are always made
between plain ``datetime.date`` values.
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Any, Iterator, Optional

from dateutil import parser as dateutil_parser

WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]


def normalize_date(value: Any) -> Optional[date]:
    """
    Normalize a date-like value to ``datetime.date``.

    Accepts ``date`` and ``datetime`` objects, ``YYYY-MM-DD`` strings and ISO
    datetime strings. For datetimes the calendar date is taken as written,
    without any timezone shifting, so ``"2024-03-04T23:30:00Z"`` stays on the
    4th.

    Args:
        value: Date-like value, or None / empty string

    Returns:
        Normalized date, or None for empty input

    Raises:
        ValueError: If the value cannot be interpreted as a date

    Examples:
        >>> normalize_date("2024-03-04T10:00:00+02:00")
        datetime.date(2024, 3, 4)
        >>> normalize_date(None) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return dateutil_parser.isoparse(text).date()
        except (ValueError, OverflowError):
            raise ValueError(f"Invalid date: {value!r}")
    raise ValueError(f"Invalid date: {value!r}")


def date_key(value: Any) -> str:
    """Render a date-like value as a ``YYYY-MM-DD`` key."""
    normalized = normalize_date(value)
    if normalized is None:
        raise ValueError("Date is required")
    return normalized.isoformat()


def to_datetime(value: Optional[date]) -> Optional[datetime]:
    """Convert a date to a naive midnight datetime for MongoDB storage."""
    if value is None:
        return None
    return datetime.combine(value, datetime.min.time())


def today() -> date:
    """Current local date."""
    return date.today()


def weekday_name(day: date) -> str:
    """Lowercase English weekday name (``monday`` .. ``sunday``)."""
    return WEEKDAY_NAMES[day.weekday()]


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
