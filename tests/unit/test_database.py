"""Tests for the database connection manager."""
import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.mark.asyncio
class TestDatabase:
    """Tests for Database."""

    async def test_ensure_indexes(self):
        """Test every configured index is created on its collection."""
        from pokrok.database import INDEXES, Database

        collections = {}

        def get_collection(name):
            return collections.setdefault(name, MagicMock(create_index=AsyncMock()))

        database = Database()
        database.db = MagicMock()
        database.db.__getitem__.side_effect = get_collection

        await database.ensure_indexes()

        created = sum(c.create_index.await_count for c in collections.values())
        assert created == len(INDEXES)
        collections["daily_reviews"].create_index.assert_awaited_once_with(
            [("user_id", 1), ("date", 1)], unique=True
        )

    async def test_get_database_not_connected(self):
        """Test the dependency fails before connecting."""
        from pokrok.database import database, get_database

        original = database.db
        database.db = None
        try:
            with pytest.raises(RuntimeError):
                await get_database()
        finally:
            database.db = original
