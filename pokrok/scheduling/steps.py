"""Step scheduling: recurrence windows, occurrence advancement and priority."""
from datetime import date, timedelta
from typing import Iterable, Optional

from pokrok.models.step import RecurringDisplayMode, Step
from pokrok.scheduling.dates import normalize_date
from pokrok.scheduling.recurrence import is_scheduled_for_day

DEFAULT_SEARCH_DAYS = 365

INSTANCE_TITLE_SEPARATOR = " - "


def is_recurring(step: Step) -> bool:
    return step.frequency is not None


def is_step_scheduled_for_day(step: Step, day: date) -> bool:
    """
    True if the step belongs on day.

    A step dated on the day is always scheduled. Recurring steps otherwise
    follow the shared recurrence predicate inside their optional
    ``[recurring_start_date, recurring_end_date]`` window.
    """
    if step.date is not None and step.date == day:
        return True

    if not is_recurring(step):
        return False

    if step.recurring_start_date is not None and day < step.recurring_start_date:
        return False
    if step.recurring_end_date is not None and day > step.recurring_end_date:
        return False

    return is_scheduled_for_day(step, day)


def is_completed_for_date(step: Step, day: date) -> bool:
    """
    Check whether the step counts as completed on day.

    Completion of a recurring template is scoped to its current instance;
    other steps compare the date their completion was recorded.
    """
    if not step.completed:
        return False

    if is_recurring(step) and step.current_instance_date is not None:
        return step.current_instance_date == day

    completed_on = normalize_date(step.completed_at)
    return completed_on is not None and completed_on == day


def get_next_occurrence_date(
    step: Step,
    from_date: date,
    search_days: int = DEFAULT_SEARCH_DAYS,
) -> Optional[date]:
    """
    Find the next open occurrence of a step on or after from_date.

    Args:
        step: Step or recurring template
        from_date: First day considered
        search_days: Upper bound on the number of days scanned

    Returns:
        Date of the next occurrence, or None if there is none within the bound

    An open template keeps its current instance. Once that instance is
    completed the scan starts the day after it.
    """
    if not is_recurring(step):
        if step.date is not None and step.date >= from_date:
            return step.date
        return None

    start = from_date
    instance = step.current_instance_date
    if instance is not None:
        if instance >= from_date and not step.completed:
            return instance
        if step.completed and instance == from_date:
            start = instance + timedelta(days=1)

    day = start
    for _ in range(search_days):
        if is_step_scheduled_for_day(step, day) and not is_completed_for_date(step, day):
            return day
        day += timedelta(days=1)

    return None


def upcoming_occurrences(
    step: Step,
    from_date: date,
    limit: int = 5,
    search_days: int = DEFAULT_SEARCH_DAYS,
) -> list[date]:
    """
    List upcoming open occurrences of a step.

    ``next_only`` templates expose just their next occurrence. Dates already
    in the template's completion history are skipped.
    """
    if not is_recurring(step) or step.recurring_display_mode == RecurringDisplayMode.NEXT_ONLY:
        next_date = get_next_occurrence_date(step, from_date, search_days=search_days)
        return [next_date] if next_date is not None else []

    done = set(step.completed_dates)
    occurrences = []
    day = from_date
    for _ in range(search_days):
        if len(occurrences) >= limit:
            break
        if (
            is_step_scheduled_for_day(step, day)
            and not is_completed_for_date(step, day)
            and day.isoformat() not in done
        ):
            occurrences.append(day)
        day += timedelta(days=1)
    return occurrences


def priority_rank(step: Step) -> int:
    """0 = important and urgent, 1 = urgent, 2 = important, 3 = neither."""
    if step.is_important and step.is_urgent:
        return 0
    if step.is_urgent:
        return 1
    if step.is_important:
        return 2
    return 3


def sort_by_priority(steps: Iterable[Step]) -> list[Step]:
    """Order steps by priority rank, keeping the input order within a rank."""
    return sorted(steps, key=priority_rank)


def checklist_blocks_completion(step: Step) -> bool:
    """True when the step requires a finished checklist and an item is still open."""
    if not step.require_checklist_complete:
        return False
    return any(not item.completed for item in step.checklist)


def instance_title(template_title: str, day: date) -> str:
    """Title of a generated instance, e.g. ``Run - 4. 3. 2024``."""
    return f"{template_title}{INSTANCE_TITLE_SEPARATOR}{day.day}. {day.month}. {day.year}"


def instance_title_prefix(template_title: str) -> str:
    return f"{template_title}{INSTANCE_TITLE_SEPARATOR}"


def is_instance_title_of(title: str, template_title: str) -> bool:
    # Prefix matching: templates sharing a title prefix also match each other's instances
    return title.startswith(instance_title_prefix(template_title))
