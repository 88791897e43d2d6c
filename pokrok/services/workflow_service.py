"""Workflow service - daily review bookkeeping."""
from datetime import date, datetime
from typing import Optional

from pokrok.models.workflow import WorkflowStatus
from pokrok.scheduling.dates import normalize_date, to_datetime, today as current_date


class WorkflowService:
    """Tracks on which days the user completed their daily review."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.reviews = db["daily_reviews"]

    async def get_pending(self, user_id: str, today: Optional[date] = None) -> WorkflowStatus:
        """
        Report whether today's daily review is still pending.

        Returns:
            WorkflowStatus with the date of the most recent review
        """
        today = today or current_date()

        cursor = self.reviews.find({"user_id": user_id})
        review_docs = await cursor.to_list(length=None)
        reviewed = sorted(normalize_date(doc["date"]) for doc in review_docs)

        return WorkflowStatus(
            needs_planning=today not in reviewed,
            last_planned_date=reviewed[-1] if reviewed else None,
        )

    async def complete_review(
        self,
        user_id: str,
        review_date: Optional[date] = None,
    ) -> WorkflowStatus:
        """
        Record the daily review for a day. Repeating the call is harmless.
        """
        review_date = review_date or current_date()
        now = datetime.utcnow()

        await self.reviews.update_one(
            {"user_id": user_id, "date": to_datetime(review_date)},
            {
                "$set": {"updated_at": now},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )

        return await self.get_pending(user_id, today=review_date)
