"""Statistics router."""
from fastapi import APIRouter, Depends, Query

from pokrok.database import get_database
from pokrok.models.statistics import PeriodStatistics, StatisticsPeriod
from pokrok.routers.auth import get_current_user_id
from pokrok.services.statistics_service import StatisticsService


router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("", response_model=PeriodStatistics)
async def get_statistics(
    period: StatisticsPeriod = Query(StatisticsPeriod.ALL, description="Reporting period ending today"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Steps, habit completions and goals for the period."""
    service = StatisticsService(db)
    return await service.get_statistics(user_id=user_id, period=period)
