"""Habit router - API endpoints for habits and the habit calendar."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pokrok.database import get_database
from pokrok.models.habit import Habit, HabitCompletionToggle, HabitCreate, HabitStats, HabitUpdate
from pokrok.routers.auth import get_current_user_id
from pokrok.routers.errors import http_error
from pokrok.services.habit_service import HabitService


router = APIRouter(prefix="/habits", tags=["habits"])


@router.post("", response_model=Habit, status_code=status.HTTP_201_CREATED)
async def create_habit(
    habit: HabitCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new habit.

    - Requires authentication
    - Starts with an empty completion calendar
    """
    service = HabitService(db)
    try:
        return await service.create_habit(user_id=user_id, habit_create=habit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=list[Habit])
async def list_habits(
    area_id: Optional[str] = Query(None, alias="areaId", description="Filter by area"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List habits for the authenticated user.

    - Each habit carries ``completedToday``
    """
    service = HabitService(db)
    return await service.list_habits(user_id=user_id, area_id=area_id)


@router.put("/calendar", response_model=list[Habit])
async def toggle_habit_completion(
    toggle: HabitCompletionToggle,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Toggle a habit's completion for a day.

    - Flips the day unless ``completed`` is given
    - Returns the full refreshed habit collection
    """
    service = HabitService(db)
    try:
        return await service.toggle_completion(
            user_id=user_id,
            habit_id=toggle.habit_id,
            day=toggle.date,
            completed=toggle.completed,
        )
    except ValueError as e:
        raise http_error(e)


@router.get("/day/{day}", response_model=list[Habit])
async def list_habits_for_day(
    day: date,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Habits scheduled on a day, plus those marked to always show."""
    service = HabitService(db)
    return await service.list_for_day(user_id=user_id, day=day)


@router.get("/{habit_id}", response_model=Habit)
async def get_habit(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get a single habit."""
    service = HabitService(db)
    try:
        return await service.get_habit(user_id=user_id, habit_id=habit_id)
    except ValueError as e:
        raise http_error(e)


@router.get("/{habit_id}/statistics", response_model=HabitStats)
async def get_habit_statistics(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Planned and completed counts, streaks and completion rate.

    - Counted from the habit's effective start date up to today
    """
    service = HabitService(db)
    try:
        return await service.get_statistics(user_id=user_id, habit_id=habit_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{habit_id}", response_model=Habit)
async def update_habit(
    habit_id: str,
    habit_update: HabitUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Update a habit's settings."""
    service = HabitService(db)
    try:
        return await service.update_habit(
            user_id=user_id,
            habit_id=habit_id,
            habit_update=habit_update,
        )
    except ValueError as e:
        raise http_error(e)


@router.delete("/{habit_id}")
async def delete_habit(
    habit_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Delete a habit and its completion calendar."""
    service = HabitService(db)
    try:
        return await service.delete_habit(user_id=user_id, habit_id=habit_id)
    except ValueError as e:
        raise http_error(e)
