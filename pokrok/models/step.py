"""Daily step (task) model definitions."""
import datetime as dt
from enum import Enum
from typing import ClassVar, Optional

from pydantic import Field, field_validator

from pokrok.models.base import CamelModel, PartialUpdate
from pokrok.models.habit import Frequency


class RecurringDisplayMode(str, Enum):
    """How a recurring step is shown.

    ``next_only`` keeps a single template advancing through its occurrences,
    ``all`` additionally materializes concrete instances ahead of time.
    """

    NEXT_ONLY = "next_only"
    ALL = "all"


class ChecklistItem(CamelModel):
    """Single checklist entry of a step."""

    id: str
    title: str
    completed: bool = False


class StepBase(CamelModel):
    """Base step fields."""

    title: str = Field(min_length=1)
    description: str = ""
    date: Optional[dt.date] = None
    is_important: bool = False
    is_urgent: bool = False
    estimated_time: int = 30
    xp_reward: int = 1
    area_id: Optional[str] = None
    goal_id: Optional[str] = None
    frequency: Optional[Frequency] = None
    selected_days: list[str] = Field(default_factory=list)
    recurring_start_date: Optional[dt.date] = None
    recurring_end_date: Optional[dt.date] = None
    recurring_display_mode: RecurringDisplayMode = RecurringDisplayMode.NEXT_ONLY
    checklist: list[ChecklistItem] = Field(default_factory=list)
    require_checklist_complete: bool = False

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value


class StepCreate(StepBase):
    """Step creation model."""

    pass


class StepUpdate(PartialUpdate):
    """Step update model - all fields optional.

    Only fields present in the request are applied. ``date``, ``areaId`` and
    the other ``clearable_fields`` can be cleared by sending an explicit null.
    """

    clearable_fields: ClassVar[frozenset[str]] = frozenset({
        "date",
        "area_id",
        "goal_id",
        "frequency",
        "recurring_start_date",
        "recurring_end_date",
    })

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    is_important: Optional[bool] = None
    is_urgent: Optional[bool] = None
    estimated_time: Optional[int] = None
    xp_reward: Optional[int] = None
    area_id: Optional[str] = None
    goal_id: Optional[str] = None
    frequency: Optional[Frequency] = None
    selected_days: Optional[list[str]] = None
    recurring_start_date: Optional[dt.date] = None
    recurring_end_date: Optional[dt.date] = None
    recurring_display_mode: Optional[RecurringDisplayMode] = None
    checklist: Optional[list[ChecklistItem]] = None
    require_checklist_complete: Optional[bool] = None


class StepCompletionToggle(CamelModel):
    """Completion toggle request.

    ``completion_date`` scopes the completion of a recurring step to one
    occurrence; it defaults to the step's current instance date.
    """

    completed: bool
    completion_date: Optional[dt.date] = None


class ChecklistItemToggle(CamelModel):
    """Checklist item completion request."""

    completed: bool


class Step(StepBase):
    """Full step model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    completed: bool = False
    completed_at: Optional[dt.datetime] = None
    current_instance_date: Optional[dt.date] = None
    completed_dates: list[str] = Field(default_factory=list)
    recurring_template_id: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @property
    def is_recurring(self) -> bool:
        return self.frequency is not None
