"""Recurrence predicate shared by habits and recurring steps."""
from datetime import date, timedelta

from pokrok.scheduling.dates import WEEKDAY_NAMES, days_in_month, normalize_date, weekday_name

WEEK_ORDINALS = {
    "first": 0,
    "second": 1,
    "third": 2,
    "fourth": 3,
}


def is_weekday_occurrence_in_month(day: date, week: str, weekday: str) -> bool:
    """
    Check whether day is the given occurrence of a weekday in its month.

    Args:
        day: Date to check
        week: One of first, second, third, fourth, last
        weekday: Weekday name (monday .. sunday)

    Returns:
        True if day is that occurrence

    Examples:
        >>> is_weekday_occurrence_in_month(date(2024, 3, 4), "first", "monday")
        True
        >>> is_weekday_occurrence_in_month(date(2024, 3, 29), "last", "friday")
        True
    """
    if weekday not in WEEKDAY_NAMES:
        return False

    target = WEEKDAY_NAMES.index(weekday)
    first = day.replace(day=1)
    last = day.replace(day=days_in_month(day.year, day.month))

    occurrences = []
    current = first + timedelta(days=(target - first.weekday()) % 7)
    while current <= last:
        occurrences.append(current)
        current += timedelta(days=7)

    if not occurrences:
        return False

    if week == "last":
        return occurrences[-1] == day

    index = WEEK_ORDINALS.get(week)
    if index is None or index >= len(occurrences):
        return False
    return occurrences[index] == day


def _matches_monthly(item, day: date) -> bool:
    selected = item.selected_days or []

    if not selected:
        # Legacy monthly items without selected days repeat on their creation day
        created = normalize_date(getattr(item, "created_at", None))
        if created is None:
            return False
        return day.day == created.day

    if str(day.day) in selected:
        return True

    # "31" also covers the 30th in months that have no 31st
    if day.day == 30 and "31" in selected and days_in_month(day.year, day.month) == 30:
        return True

    name = weekday_name(day)
    for token in selected:
        if not isinstance(token, str) or "_" not in token:
            continue
        week, _, weekday = token.partition("_")
        if weekday == name and is_weekday_occurrence_in_month(day, week, weekday):
            return True

    return False


def is_scheduled_for_day(item, day: date) -> bool:
    """
    Decide whether a recurring item is due on a calendar day.

    The item only needs ``frequency`` and ``selected_days`` attributes (and
    ``created_at`` for legacy monthly items). Start dates and recurrence
    windows are applied by the callers.

    Args:
        item: Habit or step
        day: Candidate date

    Returns:
        True if the frequency rule matches the day
    """
    frequency = item.frequency

    if frequency == "daily":
        return True

    if frequency in ("weekly", "custom"):
        selected = item.selected_days or []
        return weekday_name(day) in selected

    if frequency == "monthly":
        return _matches_monthly(item, day)

    return False
