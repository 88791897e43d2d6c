"""Habit scheduling, completion ledger and streak statistics."""
from datetime import date, timedelta
from typing import Iterable, Optional

from pokrok.models.habit import Habit, HabitStats
from pokrok.scheduling.dates import iter_days, normalize_date, today as current_date
from pokrok.scheduling.recurrence import is_scheduled_for_day


def completed_dates(habit: Habit) -> list[date]:
    """
    Dates recorded as completed in the habit's ledger, ascending.

    Keys that are not valid dates are ignored.
    """
    dates = []
    for key, done in (habit.habit_completions or {}).items():
        if done is not True:
            continue
        try:
            parsed = normalize_date(key)
        except ValueError:
            continue
        if parsed is not None:
            dates.append(parsed)
    return sorted(dates)


def effective_start_date(habit: Habit, today: Optional[date] = None) -> date:
    """
    First day from which a habit is scheduled and counted in statistics.

    An explicit start date wins. Otherwise the earlier of the creation date
    and the earliest recorded completion is used, so backfilled completions
    logged before the habit was created still count.

    Args:
        habit: Habit to inspect
        today: Fallback when neither date is known

    Returns:
        Effective start date
    """
    if habit.start_date is not None:
        return habit.start_date

    candidates = []
    created = normalize_date(habit.created_at)
    if created is not None:
        candidates.append(created)
    done = completed_dates(habit)
    if done:
        candidates.append(done[0])

    if candidates:
        return min(candidates)
    return today or current_date()


def is_habit_scheduled(habit: Habit, day: date) -> bool:
    """True if the habit is due on day (on/after its start and matching its rule)."""
    if day < effective_start_date(habit, today=day):
        return False
    return is_scheduled_for_day(habit, day)


def is_habit_completed(habit: Habit, day: date) -> bool:
    """Ledger lookup; absent keys mean not completed."""
    return (habit.habit_completions or {}).get(day.isoformat()) is True


def current_streak(habit: Habit, today: Optional[date] = None) -> int:
    """
    Count consecutive completed days walking back from today.

    Every calendar day counts, scheduled or not: an unscheduled day without
    a completion ends the streak. Days before the effective start are not
    counted.
    """
    day = today or current_date()
    start = effective_start_date(habit, today=day)
    streak = 0
    while day >= start and is_habit_completed(habit, day):
        streak += 1
        day -= timedelta(days=1)
    return streak


def longest_streak(habit: Habit) -> int:
    """Longest run of consecutive completed days in the whole ledger."""
    longest = 0
    run = 0
    previous = None
    for day in completed_dates(habit):
        if previous is not None and day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def habit_statistics(habit: Habit, today: Optional[date] = None) -> HabitStats:
    """
    Compute planned/completed counts and streaks from the start date to today.

    Args:
        habit: Habit to analyse
        today: Last day included (defaults to the current date)

    Returns:
        HabitStats for the habit
    """
    today = today or current_date()
    start = effective_start_date(habit, today=today)

    total_planned = 0
    total_completed = 0
    completed_outside_plan = 0

    for day in iter_days(start, today):
        done = is_habit_completed(habit, day)
        if is_scheduled_for_day(habit, day):
            total_planned += 1
            if done:
                total_completed += 1
        elif done:
            completed_outside_plan += 1

    rate = round(total_completed / total_planned, 3) if total_planned else 0.0

    return HabitStats(
        habit_id=habit.id,
        start_date=start,
        total_planned=total_planned,
        total_completed=total_completed,
        completed_outside_plan=completed_outside_plan,
        completion_rate=rate,
        current_streak=current_streak(habit, today),
        max_streak=max(habit.max_streak or 0, longest_streak(habit)),
    )


def habits_for_day(habits: Iterable[Habit], day: date) -> list[Habit]:
    """Habits to show on a day: scheduled ones plus those marked always_show."""
    return [
        habit
        for habit in habits
        if habit.always_show or is_habit_scheduled(habit, day)
    ]
