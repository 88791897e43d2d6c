"""Workflow router - daily review endpoints."""
from typing import Optional

from fastapi import APIRouter, Body, Depends

from pokrok.database import get_database
from pokrok.models.workflow import DailyReviewComplete, WorkflowStatus
from pokrok.routers.auth import get_current_user_id
from pokrok.services.workflow_service import WorkflowService


router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.get("/pending", response_model=WorkflowStatus)
async def get_pending_workflows(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Check whether today's daily review is still open.

    - Polled by the client to decide whether to prompt for planning
    """
    service = WorkflowService(db)
    return await service.get_pending(user_id=user_id)


@router.post("/daily-review", response_model=WorkflowStatus)
async def complete_daily_review(
    review: Optional[DailyReviewComplete] = Body(None),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Mark the daily review as done (today unless a date is given)."""
    service = WorkflowService(db)
    return await service.complete_review(
        user_id=user_id,
        review_date=review.review_date if review else None,
    )
