"""Habit model definitions."""
import datetime as dt
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from pydantic import Field

from pokrok.models.base import CamelModel, PartialUpdate


class Frequency(str, Enum):
    """Recurrence frequencies (custom is the legacy name for weekly)."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class HabitBase(CamelModel):
    """Base habit fields."""

    name: str = Field(min_length=1)
    description: str = ""
    frequency: Frequency = Frequency.DAILY
    selected_days: list[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    area_id: Optional[str] = None
    reminder_time: Optional[str] = None
    always_show: bool = False
    xp_reward: int = 1
    order: int = 0


class HabitCreate(HabitBase):
    """Habit creation model."""

    pass


class HabitUpdate(PartialUpdate):
    """Habit update model - all fields optional."""

    clearable_fields: ClassVar[frozenset[str]] = frozenset({"start_date", "area_id", "reminder_time"})

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    frequency: Optional[Frequency] = None
    selected_days: Optional[list[str]] = None
    start_date: Optional[date] = None
    area_id: Optional[str] = None
    reminder_time: Optional[str] = None
    always_show: Optional[bool] = None
    xp_reward: Optional[int] = None
    order: Optional[int] = None


class HabitCompletionToggle(CamelModel):
    """Calendar toggle request.

    ``completed`` forces a value; when omitted the current state is flipped.
    """

    habit_id: str
    date: dt.date
    completed: Optional[bool] = None


class Habit(HabitBase):
    """Full habit model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    habit_completions: dict[str, bool] = Field(default_factory=dict)
    streak: int = 0
    max_streak: int = 0
    completed_today: bool = False
    created_at: datetime
    updated_at: datetime


class HabitStats(CamelModel):
    """Derived habit statistics."""

    habit_id: str
    start_date: date
    total_planned: int = 0
    total_completed: int = 0
    completed_outside_plan: int = 0
    completion_rate: float = 0.0
    current_streak: int = 0
    max_streak: int = 0
