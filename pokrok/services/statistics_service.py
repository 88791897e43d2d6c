"""Statistics service - progress aggregated over a period."""
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from pokrok.models.statistics import PeriodStatistics, StatisticsPeriod
from pokrok.scheduling.dates import normalize_date, to_datetime, today as current_date

PERIOD_LENGTHS = {
    StatisticsPeriod.WEEK: relativedelta(days=7),
    StatisticsPeriod.MONTH: relativedelta(months=1),
    StatisticsPeriod.YEAR: relativedelta(years=1),
    StatisticsPeriod.ALL: relativedelta(years=10),
}


def period_bounds(period: StatisticsPeriod, today: date) -> tuple[date, date]:
    """
    First and last day (inclusive) of a period ending today.

    A week is the seven days up to and including today.
    """
    return today - PERIOD_LENGTHS[period] + relativedelta(days=1), today


class StatisticsService:
    """Aggregates steps, habit completions and goals for a user."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.steps = db["daily_steps"]
        self.habits = db["habits"]
        self.goals = db["goals"]

    async def get_statistics(
        self,
        user_id: str,
        period: StatisticsPeriod = StatisticsPeriod.ALL,
        today: Optional[date] = None,
    ) -> PeriodStatistics:
        """
        Summarize progress for the period ending today.

        Dated steps count as planned on their date; every recorded occurrence
        of a recurring step counts as planned and completed.
        """
        today = today or current_date()
        start, end = period_bounds(period, today)

        def in_period(value) -> bool:
            # Malformed ledger keys are skipped, as in the habit statistics
            try:
                day = normalize_date(value)
            except ValueError:
                return False
            return day is not None and start <= day <= end

        step_docs = await self.steps.find({"user_id": user_id}).to_list(length=None)
        steps_planned = 0
        steps_completed = 0
        for doc in step_docs:
            if doc.get("frequency"):
                occurrences = sum(1 for key in doc.get("completed_dates") or [] if in_period(key))
                steps_planned += occurrences
                steps_completed += occurrences
            elif in_period(doc.get("date")):
                steps_planned += 1
                if doc.get("completed"):
                    steps_completed += 1

        habit_docs = await self.habits.find({"user_id": user_id}).to_list(length=None)
        habit_completions = sum(
            1
            for doc in habit_docs
            for key, done in (doc.get("habit_completions") or {}).items()
            if done is True and in_period(key)
        )

        goal_docs = await self.goals.find({
            "user_id": user_id,
            "$or": [
                {"created_at": {"$gte": to_datetime(start)}},
                {"updated_at": {"$gte": to_datetime(start)}},
            ],
        }).to_list(length=None)
        goals_completed = sum(
            1
            for doc in goal_docs
            if doc.get("status") == "completed" and in_period(doc.get("updated_at"))
        )

        return PeriodStatistics(
            period=period,
            start_date=start,
            end_date=end,
            steps_planned=steps_planned,
            steps_completed=steps_completed,
            habits_total=len(habit_docs),
            habit_completions=habit_completions,
            goals_total=len(goal_docs),
            goals_completed=goals_completed,
        )
