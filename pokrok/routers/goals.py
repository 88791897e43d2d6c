"""Goal router - API endpoints for goal management."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pokrok.database import get_database
from pokrok.models.goal import Goal, GoalCreate, GoalStatus, GoalUpdate
from pokrok.routers.auth import get_current_user_id
from pokrok.services.goal_service import GoalService


router = APIRouter(prefix="/goals", tags=["goals"])


@router.post("", response_model=Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: GoalCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new goal.

    - Requires authentication
    - Starts as active unless a status is given
    """
    service = GoalService(db)
    return await service.create_goal(user_id=user_id, goal_create=goal)


@router.get("", response_model=list[Goal])
async def list_goals(
    goal_status: Optional[GoalStatus] = Query(None, alias="status", description="Filter by status"),
    area_id: Optional[str] = Query(None, alias="areaId", description="Filter by area"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List goals for the authenticated user.

    - Requires authentication
    - Optional filters: status, areaId
    """
    service = GoalService(db)
    return await service.list_goals(
        user_id=user_id,
        status=goal_status.value if goal_status else None,
        area_id=area_id,
    )


@router.get("/{goal_id}", response_model=Goal)
async def get_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a single goal by ID.

    - Requires authentication
    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        return await service.get_goal(user_id=user_id, goal_id=goal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{goal_id}", response_model=Goal)
async def update_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a goal.

    - Requires authentication
    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        return await service.update_goal(
            user_id=user_id,
            goal_id=goal_id,
            goal_update=goal_update,
        )
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{goal_id}")
async def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a goal.

    - Requires authentication
    - Steps linked to the goal are kept and unlinked
    - Returns 404 if goal not found
    """
    service = GoalService(db)
    try:
        return await service.delete_goal(user_id=user_id, goal_id=goal_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
