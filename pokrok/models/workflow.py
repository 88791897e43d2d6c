"""Daily review workflow models."""
from datetime import date
from typing import Optional

from pokrok.models.base import CamelModel


class WorkflowStatus(CamelModel):
    """Pending state of the daily review."""

    needs_planning: bool
    last_planned_date: Optional[date] = None


class DailyReviewComplete(CamelModel):
    """Request marking the daily review as done for a day (today if omitted)."""

    review_date: Optional[date] = None
