"""Advance recurring steps and create upcoming instances without going through HTTP.

Usage:
    python scripts/run_recurring_jobs.py
    python scripts/run_recurring_jobs.py --user <user_id> --date 2025-03-01
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient

from pokrok.config import settings
from pokrok.scheduling.dates import normalize_date
from pokrok.services.step_service import StepService


async def run(user_id=None, today=None):
    client = AsyncIOMotorClient(settings.mongodb_url)
    db = client[settings.mongodb_db_name]
    service = StepService(db, search_days=settings.occurrence_search_days)

    advanced = await service.advance_recurring_templates(user_id=user_id, today=today)
    created = await service.generate_recurring_instances(
        user_id=user_id,
        today=today,
        horizon_days=settings.recurring_instance_horizon_days,
    )

    client.close()
    print(f"Advanced {advanced} recurring steps, created {created} instances")


def main():
    parser = argparse.ArgumentParser(description="Run the recurring step jobs")
    parser.add_argument("--user", help="Only process this user ID")
    parser.add_argument("--date", help="Reference day (YYYY-MM-DD), defaults to today")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level)
    asyncio.run(run(user_id=args.user, today=normalize_date(args.date)))


if __name__ == "__main__":
    main()
