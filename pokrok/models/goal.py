"""Goal model definitions."""
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from pydantic import Field

from pokrok.models.base import CamelModel, PartialUpdate


class GoalStatus(str, Enum):
    """Goal lifecycle states."""

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class GoalBase(CamelModel):
    """Base goal fields."""

    title: str = Field(min_length=1)
    description: str = ""
    target_date: Optional[date] = None
    start_date: Optional[date] = None
    status: GoalStatus = GoalStatus.ACTIVE
    area_id: Optional[str] = None


class GoalCreate(GoalBase):
    """Goal creation model."""

    pass


class GoalUpdate(PartialUpdate):
    """Goal update model - all fields optional."""

    clearable_fields: ClassVar[frozenset[str]] = frozenset({"target_date", "start_date", "area_id"})

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    target_date: Optional[date] = None
    start_date: Optional[date] = None
    status: Optional[GoalStatus] = None
    area_id: Optional[str] = None


class Goal(GoalBase):
    """Full goal model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    created_at: datetime
    updated_at: datetime
