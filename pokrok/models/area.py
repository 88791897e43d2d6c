"""Area model definitions."""
from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field

from pokrok.models.base import CamelModel, PartialUpdate


class AreaBase(CamelModel):
    """Base area fields."""

    name: str = Field(min_length=1)
    description: str = ""
    color: str = "#3B82F6"
    icon: Optional[str] = None
    order: int = 0


class AreaCreate(AreaBase):
    """Area creation model."""

    pass


class AreaUpdate(PartialUpdate):
    """Area update model - all fields optional."""

    clearable_fields: ClassVar[frozenset[str]] = frozenset({"icon"})

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    order: Optional[int] = None


class Area(AreaBase):
    """Full area model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    created_at: datetime
    updated_at: datetime
