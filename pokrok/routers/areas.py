"""Area router - API endpoints for life areas."""
from fastapi import APIRouter, Depends, status

from pokrok.database import get_database
from pokrok.models.area import Area, AreaCreate, AreaUpdate
from pokrok.routers.auth import get_current_user_id
from pokrok.routers.errors import http_error
from pokrok.services.area_service import AreaService


router = APIRouter(prefix="/cesta/areas", tags=["areas"])


@router.post("", response_model=Area, status_code=status.HTTP_201_CREATED)
async def create_area(
    area: AreaCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Create a new area."""
    service = AreaService(db)
    return await service.create_area(user_id=user_id, area_create=area)


@router.get("", response_model=list[Area])
async def list_areas(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List areas in display order."""
    service = AreaService(db)
    return await service.list_areas(user_id=user_id)


@router.get("/{area_id}", response_model=Area)
async def get_area(
    area_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get a single area."""
    service = AreaService(db)
    try:
        return await service.get_area(user_id=user_id, area_id=area_id)
    except ValueError as e:
        raise http_error(e)


@router.patch("/{area_id}", response_model=Area)
async def update_area(
    area_id: str,
    area_update: AreaUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Update an area."""
    service = AreaService(db)
    try:
        return await service.update_area(
            user_id=user_id,
            area_id=area_id,
            area_update=area_update,
        )
    except ValueError as e:
        raise http_error(e)


@router.delete("/{area_id}")
async def delete_area(
    area_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete an area.

    - Steps, habits and goals in the area are kept and unlinked
    """
    service = AreaService(db)
    try:
        return await service.delete_area(user_id=user_id, area_id=area_id)
    except ValueError as e:
        raise http_error(e)
