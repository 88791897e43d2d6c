"""Drop all habits, steps, areas, goals and reviews of a user."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient

from pokrok.config import settings
from pokrok.services.auth_service import AuthService


async def drop_user_data(mongodb_url: str, user_id: str):
    """Delete all documents owned by a user; the account stays."""
    client = AsyncIOMotorClient(mongodb_url)
    db = client[settings.mongodb_db_name]

    deleted = await AuthService(db).reset_user_data(user_id)
    for collection_name, count in deleted.items():
        print(f"Deleted {count} documents from {collection_name}")

    client.close()
    print("Done!")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python drop_user_data.py <mongodb_url> <user_id>")
        sys.exit(1)

    asyncio.run(drop_user_data(sys.argv[1], sys.argv[2]))
