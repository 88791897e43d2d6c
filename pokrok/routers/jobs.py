"""Jobs router - scheduled maintenance triggered by an external cron."""
import hmac
import logging

from fastapi import APIRouter, Depends, Header, HTTPException, status

from pokrok.config import settings
from pokrok.database import get_database
from pokrok.services.step_service import StepService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


async def verify_cron_secret(authorization: str | None = Header(None)) -> None:
    """
    Dependency guarding job endpoints with the shared cron secret.

    Raises:
        HTTPException: If no secret is configured (403) or the header does not match (401)
    """
    if not settings.cron_secret:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cron jobs are disabled",
        )
    expected = f"Bearer {settings.cron_secret}"
    if not hmac.compare_digest((authorization or "").encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


@router.post("/recurring", dependencies=[Depends(verify_cron_secret)])
async def run_recurring_jobs(db=Depends(get_database)):
    """
    Advance completed recurring steps and create upcoming instances.

    - Runs for all users
    - Safe to call repeatedly on the same day
    """
    service = StepService(db, search_days=settings.occurrence_search_days)

    advanced = await service.advance_recurring_templates()
    created = await service.generate_recurring_instances(
        horizon_days=settings.recurring_instance_horizon_days,
    )
    logger.info("Recurring jobs finished: %d advanced, %d created", advanced, created)

    return {"advanced": advanced, "created": created}
