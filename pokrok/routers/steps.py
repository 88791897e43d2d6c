"""Step router - API endpoints for daily steps."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pokrok.config import settings
from pokrok.database import get_database
from pokrok.models.step import (
    ChecklistItemToggle,
    Step,
    StepCompletionToggle,
    StepCreate,
    StepUpdate,
)
from pokrok.routers.auth import get_current_user_id
from pokrok.routers.errors import http_error
from pokrok.scheduling.dates import today
from pokrok.scheduling.steps import upcoming_occurrences
from pokrok.services.step_service import StepService


router = APIRouter(prefix="/daily-steps", tags=["steps"])


@router.post("", response_model=Step, status_code=status.HTTP_201_CREATED)
async def create_step(
    step: StepCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new step.

    Args:
        step: Step creation data
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        Created step; recurring steps carry their first occurrence as
        ``currentInstanceDate``

    Raises:
        HTTPException: If a referenced area or goal does not exist (400)
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        return await service.create_step(user_id=user_id, step_create=step)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )


@router.get("", response_model=list[Step])
async def list_steps(
    day: Optional[date] = Query(None, alias="date", description="Steps planned on this day"),
    goal_id: Optional[str] = Query(None, alias="goalId", description="Filter by goal"),
    area_id: Optional[str] = Query(None, alias="areaId", description="Filter by area"),
    completed: Optional[bool] = Query(None, description="Filter by completion"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List steps for the current user, most urgent first.

    Args:
        day: Optional day; recurring steps due that day are included
        goal_id: Optional goal filter
        area_id: Optional area filter
        completed: Optional completion filter
        user_id: Current user ID (from token)
        db: Database connection

    Returns:
        List of steps
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    return await service.list_steps(
        user_id=user_id,
        day=day,
        goal_id=goal_id,
        area_id=area_id,
        completed=completed,
    )


@router.get("/{step_id}", response_model=Step)
async def get_step(
    step_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a step by ID.

    Raises:
        HTTPException: If step not found (404) or the ID is malformed (400)
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        return await service.get_step(user_id=user_id, step_id=step_id)
    except ValueError as e:
        raise http_error(e)


@router.get("/{step_id}/occurrences", response_model=list[date])
async def list_occurrences(
    step_id: str,
    from_date: Optional[date] = Query(None, alias="from", description="First day considered"),
    limit: int = Query(5, ge=1, le=50),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Upcoming open occurrences of a step.

    - ``next_only`` recurring steps return at most one date
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        step = await service.get_step(user_id=user_id, step_id=step_id)
    except ValueError as e:
        raise http_error(e)

    return upcoming_occurrences(
        step,
        from_date or today(),
        limit=limit,
        search_days=settings.occurrence_search_days,
    )


@router.patch("/{step_id}", response_model=Step)
async def update_step(
    step_id: str,
    step_update: StepUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a step.

    - Only fields present in the body are changed
    - Sending just ``date`` reschedules the step
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        return await service.update_step(
            user_id=user_id,
            step_id=step_id,
            step_update=step_update,
        )
    except ValueError as e:
        raise http_error(e)


@router.put("/{step_id}/completion", response_model=Step)
async def toggle_step_completion(
    step_id: str,
    toggle: StepCompletionToggle,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Mark a step done or not done.

    - Recurring steps record completion for one occurrence
    - Rejected with 400 while a required checklist is unfinished
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        return await service.toggle_completion(
            user_id=user_id,
            step_id=step_id,
            completed=toggle.completed,
            completion_date=toggle.completion_date,
        )
    except ValueError as e:
        raise http_error(e)


@router.put("/{step_id}/checklist/{item_id}", response_model=Step)
async def toggle_checklist_item(
    step_id: str,
    item_id: str,
    toggle: ChecklistItemToggle,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Tick or untick a checklist item."""
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        return await service.update_checklist_item(
            user_id=user_id,
            step_id=step_id,
            item_id=item_id,
            completed=toggle.completed,
        )
    except ValueError as e:
        raise http_error(e)


@router.delete("/{step_id}")
async def delete_step(
    step_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a step.

    - Deleting a recurring step also deletes its open generated instances
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    try:
        return await service.delete_step(user_id=user_id, step_id=step_id)
    except ValueError as e:
        raise http_error(e)
