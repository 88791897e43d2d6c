"""MongoDB database connection using Motor (async driver)."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING

from pokrok.config import settings

logger = logging.getLogger(__name__)

# (collection, keys, options) for the lookups every request performs
INDEXES = [
    ("users", [("email", ASCENDING)], {"unique": True}),
    ("habits", [("user_id", ASCENDING), ("order", ASCENDING)], {}),
    ("daily_steps", [("user_id", ASCENDING), ("date", ASCENDING)], {}),
    ("daily_steps", [("user_id", ASCENDING), ("title", ASCENDING)], {}),
    ("daily_steps", [("frequency", ASCENDING), ("completed", ASCENDING)], {}),
    ("areas", [("user_id", ASCENDING), ("order", ASCENDING)], {}),
    ("goals", [("user_id", ASCENDING), ("status", ASCENDING)], {}),
    ("daily_reviews", [("user_id", ASCENDING), ("date", ASCENDING)], {"unique": True}),
]


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure the indexes exist."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        await self.ensure_indexes()
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def ensure_indexes(self) -> None:
        for name, keys, options in INDEXES:
            await self.db[name].create_index(keys, **options)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
