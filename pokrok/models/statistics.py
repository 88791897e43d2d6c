"""Statistics model definitions."""
from datetime import date
from enum import Enum

from pokrok.models.base import CamelModel


class StatisticsPeriod(str, Enum):
    """Reporting periods ending today."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class PeriodStatistics(CamelModel):
    """Aggregated progress for a reporting period."""

    period: StatisticsPeriod
    start_date: date
    end_date: date
    steps_planned: int = 0
    steps_completed: int = 0
    habits_total: int = 0
    habit_completions: int = 0
    goals_total: int = 0
    goals_completed: int = 0
