"""Area service - business logic for life areas."""
import logging
from datetime import datetime

from pokrok.models.area import Area, AreaCreate, AreaUpdate
from pokrok.utils.ids import to_object_id

logger = logging.getLogger(__name__)

# Collections whose documents reference an area through ``area_id``
LINKED_COLLECTIONS = ("daily_steps", "habits", "goals")


class AreaService:
    """Service for handling area operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.areas = db["areas"]

    def _doc_to_area(self, doc: dict) -> Area:
        return Area(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            name=doc["name"],
            description=doc.get("description", ""),
            color=doc.get("color", "#3B82F6"),
            icon=doc.get("icon"),
            order=doc.get("order", 0),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _find_area_doc(self, user_id: str, area_id: str) -> dict:
        area_doc = await self.areas.find_one({
            "_id": to_object_id(area_id, "area"),
            "user_id": user_id,
        })
        if not area_doc:
            raise ValueError("Area not found")
        return area_doc

    async def create_area(self, user_id: str, area_create: AreaCreate) -> Area:
        """Create a new area."""
        now = datetime.utcnow()
        area_doc = {
            "user_id": user_id,
            **area_create.model_dump(),
            "created_at": now,
            "updated_at": now,
        }

        result = await self.areas.insert_one(area_doc)
        area_doc["_id"] = result.inserted_id

        return self._doc_to_area(area_doc)

    async def list_areas(self, user_id: str) -> list[Area]:
        """List a user's areas in display order."""
        cursor = self.areas.find({"user_id": user_id})
        area_docs = await cursor.to_list(length=None)

        areas = [self._doc_to_area(doc) for doc in area_docs]
        return sorted(areas, key=lambda area: (area.order, area.name.lower()))

    async def get_area(self, user_id: str, area_id: str) -> Area:
        """
        Get a single area.

        Raises:
            ValueError: If area not found or invalid ID format
        """
        return self._doc_to_area(await self._find_area_doc(user_id, area_id))

    async def update_area(self, user_id: str, area_id: str, area_update: AreaUpdate) -> Area:
        """
        Update an area.

        Raises:
            ValueError: If area not found
        """
        existing = await self._find_area_doc(user_id, area_id)

        update_doc = {
            **area_update.model_dump(exclude_unset=True),
            "updated_at": datetime.utcnow(),
        }

        updated_doc = await self.areas.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return self._doc_to_area(updated_doc)

    async def delete_area(self, user_id: str, area_id: str) -> dict:
        """
        Delete an area and unlink the steps, habits and goals tagged with it.

        Raises:
            ValueError: If area not found
        """
        existing = await self._find_area_doc(user_id, area_id)

        result = await self.areas.delete_one({"_id": existing["_id"], "user_id": user_id})

        unlinked = 0
        for name in LINKED_COLLECTIONS:
            linked = await self.db[name].update_many(
                {"user_id": user_id, "area_id": area_id},
                {"$set": {"area_id": None}},
            )
            unlinked += linked.modified_count

        logger.info("Deleted area %s, unlinked %d documents", area_id, unlinked)
        return {"deleted_count": result.deleted_count, "unlinked_count": unlinked}
