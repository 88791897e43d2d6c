"""Goal service - business logic for goal management."""
from datetime import datetime
from typing import Optional

from pokrok.models.goal import Goal, GoalCreate, GoalUpdate
from pokrok.scheduling.dates import normalize_date, to_datetime
from pokrok.utils.ids import to_object_id


class GoalService:
    """Service for handling goal operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.goals = db["goals"]
        self.steps = db["daily_steps"]

    def _doc_to_goal(self, doc: dict) -> Goal:
        """
        Convert database document to Goal model.

        Handles datetime to date conversion for date fields.
        """
        return Goal(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            title=doc["title"],
            description=doc.get("description", ""),
            target_date=normalize_date(doc.get("target_date")),
            start_date=normalize_date(doc.get("start_date")),
            status=doc.get("status", "active"),
            area_id=doc.get("area_id"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _find_goal_doc(self, user_id: str, goal_id: str) -> dict:
        goal_doc = await self.goals.find_one({
            "_id": to_object_id(goal_id, "goal"),
            "user_id": user_id,
        })
        if not goal_doc:
            raise ValueError("Goal not found")
        return goal_doc

    async def create_goal(
        self,
        user_id: str,
        goal_create: GoalCreate,
    ) -> Goal:
        """
        Create a new goal.

        Args:
            user_id: User ID who owns the goal
            goal_create: Goal creation data

        Returns:
            Created goal object
        """
        now = datetime.utcnow()

        goal_doc = {
            "user_id": user_id,
            "title": goal_create.title,
            "description": goal_create.description,
            "target_date": to_datetime(goal_create.target_date),
            "start_date": to_datetime(goal_create.start_date),
            "status": goal_create.status.value,
            "area_id": goal_create.area_id,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.goals.insert_one(goal_doc)
        goal_doc["_id"] = result.inserted_id

        return self._doc_to_goal(goal_doc)

    async def list_goals(
        self,
        user_id: str,
        status: Optional[str] = None,
        area_id: Optional[str] = None,
    ) -> list[Goal]:
        """
        List goals for a user with optional filtering.

        Args:
            user_id: User ID
            status: Optional status filter (active, paused, completed)
            area_id: Optional area filter

        Returns:
            List of goals
        """
        query = {"user_id": user_id}

        if status:
            query["status"] = status
        if area_id:
            query["area_id"] = area_id

        cursor = self.goals.find(query)
        goal_docs = await cursor.to_list(length=None)

        return [self._doc_to_goal(doc) for doc in goal_docs]

    async def get_goal(
        self,
        user_id: str,
        goal_id: str,
    ) -> Goal:
        """
        Get a single goal by ID.

        Raises:
            ValueError: If goal not found or invalid ID format
        """
        return self._doc_to_goal(await self._find_goal_doc(user_id, goal_id))

    async def update_goal(
        self,
        user_id: str,
        goal_id: str,
        goal_update: GoalUpdate,
    ) -> Goal:
        """
        Update a goal.

        Args:
            user_id: User ID
            goal_id: Goal ID
            goal_update: Update data

        Returns:
            Updated goal

        Raises:
            ValueError: If goal not found
        """
        existing = await self._find_goal_doc(user_id, goal_id)

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        for field, value in goal_update.model_dump(exclude_unset=True).items():
            if field in ("target_date", "start_date"):
                value = to_datetime(value)
            elif field == "status" and value is not None:
                value = value.value if hasattr(value, "value") else value
            update_doc[field] = value

        updated_doc = await self.goals.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return self._doc_to_goal(updated_doc)

    async def delete_goal(
        self,
        user_id: str,
        goal_id: str,
    ) -> dict:
        """
        Delete a goal; its steps stay and lose the goal reference.

        Returns:
            Dictionary with deleted_count

        Raises:
            ValueError: If goal not found
        """
        existing = await self._find_goal_doc(user_id, goal_id)

        result = await self.goals.delete_one({"_id": existing["_id"], "user_id": user_id})
        await self.steps.update_many(
            {"user_id": user_id, "goal_id": goal_id},
            {"$set": {"goal_id": None}},
        )

        return {"deleted_count": result.deleted_count}
