"""Habit service - business logic for habits and their completion calendar."""
import logging
from datetime import date, datetime
from typing import Optional

from pydantic import ValidationError

from pokrok.models.habit import Habit, HabitCreate, HabitStats, HabitUpdate
from pokrok.scheduling.dates import date_key, normalize_date, to_datetime, today as current_date
from pokrok.scheduling.habits import current_streak, habit_statistics, habits_for_day, longest_streak
from pokrok.utils.ids import to_object_id

logger = logging.getLogger(__name__)


class HabitService:
    """Service for handling habit operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.habits = db["habits"]
        self.areas = db["areas"]

    def _doc_to_habit(self, doc: dict, today: Optional[date] = None) -> Habit:
        """
        Convert database document to Habit model.

        Stored start dates are midnight datetimes; ``completed_today`` is
        derived from the completion ledger.
        """
        completions = doc.get("habit_completions") or {}
        today = today or current_date()
        return Habit(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            name=doc["name"],
            description=doc.get("description", ""),
            frequency=doc.get("frequency", "daily"),
            selected_days=doc.get("selected_days") or [],
            start_date=normalize_date(doc.get("start_date")),
            area_id=doc.get("area_id"),
            reminder_time=doc.get("reminder_time"),
            always_show=doc.get("always_show", False),
            xp_reward=doc.get("xp_reward", 1),
            order=doc.get("order", 0),
            habit_completions=completions,
            streak=doc.get("streak", 0),
            max_streak=doc.get("max_streak", 0),
            completed_today=completions.get(today.isoformat()) is True,
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _ensure_area(self, user_id: str, area_id: Optional[str]) -> None:
        if not area_id:
            return
        area = await self.areas.find_one({
            "_id": to_object_id(area_id, "area"),
            "user_id": user_id,
        })
        if not area:
            raise ValueError("Area not found")

    async def _find_habit_doc(self, user_id: str, habit_id: str) -> dict:
        habit_doc = await self.habits.find_one({
            "_id": to_object_id(habit_id, "habit"),
            "user_id": user_id,
        })
        if not habit_doc:
            raise ValueError("Habit not found")
        return habit_doc

    async def create_habit(self, user_id: str, habit_create: HabitCreate) -> Habit:
        """
        Create a new habit with an empty completion ledger.

        Raises:
            ValueError: If the referenced area does not exist
        """
        await self._ensure_area(user_id, habit_create.area_id)

        now = datetime.utcnow()
        habit_doc = {
            "user_id": user_id,
            "name": habit_create.name,
            "description": habit_create.description,
            "frequency": habit_create.frequency.value,
            "selected_days": habit_create.selected_days,
            "start_date": to_datetime(habit_create.start_date),
            "area_id": habit_create.area_id,
            "reminder_time": habit_create.reminder_time,
            "always_show": habit_create.always_show,
            "xp_reward": habit_create.xp_reward,
            "order": habit_create.order,
            "habit_completions": {},
            "streak": 0,
            "max_streak": 0,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.habits.insert_one(habit_doc)
        habit_doc["_id"] = result.inserted_id
        logger.info("Created habit %s for user %s", habit_doc["_id"], user_id)

        return self._doc_to_habit(habit_doc)

    async def list_habits(
        self,
        user_id: str,
        area_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> list[Habit]:
        """
        List a user's habits ordered by their ``order`` field.

        Args:
            user_id: User ID
            area_id: Optional area filter
            today: Day used for ``completed_today``
        """
        query = {"user_id": user_id}
        if area_id:
            query["area_id"] = area_id

        cursor = self.habits.find(query)
        habit_docs = await cursor.to_list(length=None)

        habits = [self._doc_to_habit(doc, today=today) for doc in habit_docs]
        return sorted(habits, key=lambda habit: (habit.order, habit.created_at))

    async def get_habit(self, user_id: str, habit_id: str) -> Habit:
        """
        Get a single habit.

        Raises:
            ValueError: If habit not found or invalid ID format
        """
        return self._doc_to_habit(await self._find_habit_doc(user_id, habit_id))

    async def update_habit(
        self,
        user_id: str,
        habit_id: str,
        habit_update: HabitUpdate,
    ) -> Habit:
        """
        Update habit fields; the completion ledger is left untouched.

        Raises:
            ValueError: If habit or referenced area not found, or the result is invalid
        """
        existing = await self._find_habit_doc(user_id, habit_id)

        changes = habit_update.model_dump(exclude_unset=True)
        if changes.get("area_id"):
            await self._ensure_area(user_id, changes["area_id"])

        update_doc = {"updated_at": datetime.utcnow()}
        for field, value in changes.items():
            if field == "frequency" and value is not None:
                value = value.value if hasattr(value, "value") else value
            elif field == "start_date":
                value = to_datetime(value)
            update_doc[field] = value

        try:
            self._doc_to_habit({**existing, **update_doc})
        except ValidationError as e:
            raise ValueError(f"Invalid habit update: {e.errors()[0]['msg']}")

        updated_doc = await self.habits.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return self._doc_to_habit(updated_doc)

    async def delete_habit(self, user_id: str, habit_id: str) -> dict:
        """
        Delete a habit together with its completion ledger.

        Raises:
            ValueError: If habit not found
        """
        existing = await self._find_habit_doc(user_id, habit_id)

        result = await self.habits.delete_one({"_id": existing["_id"], "user_id": user_id})
        logger.info("Deleted habit %s", habit_id)

        return {"deleted_count": result.deleted_count}

    async def toggle_completion(
        self,
        user_id: str,
        habit_id: str,
        day: date,
        completed: Optional[bool] = None,
        today: Optional[date] = None,
    ) -> list[Habit]:
        """
        Flip (or set) a habit's completion for a day.

        Streak and the max-streak high-water mark are recomputed and stored.
        The whole refreshed habit collection is returned so that clients can
        replace their cached copy instead of patching it.

        Args:
            user_id: User ID
            habit_id: Habit ID
            day: Day being toggled
            completed: Forced value; None flips the current state
            today: Reference day for the current streak

        Returns:
            All habits of the user

        Raises:
            ValueError: If habit not found
        """
        existing = await self._find_habit_doc(user_id, habit_id)
        today = today or current_date()

        key = date_key(day)
        completions = dict(existing.get("habit_completions") or {})
        new_value = (completions.get(key) is not True) if completed is None else completed
        if new_value:
            completions[key] = True
        else:
            completions.pop(key, None)

        habit = self._doc_to_habit({**existing, "habit_completions": completions}, today=today)
        streak = current_streak(habit, today)
        max_streak = max(existing.get("max_streak", 0), longest_streak(habit))

        await self.habits.update_one(
            {"_id": existing["_id"], "user_id": user_id},
            {
                "$set": {
                    "habit_completions": completions,
                    "streak": streak,
                    "max_streak": max_streak,
                    "updated_at": datetime.utcnow(),
                }
            },
        )

        return await self.list_habits(user_id, today=today)

    async def get_statistics(
        self,
        user_id: str,
        habit_id: str,
        today: Optional[date] = None,
    ) -> HabitStats:
        """
        Planned/completed counts and streaks of a habit up to today.

        Raises:
            ValueError: If habit not found
        """
        habit = await self.get_habit(user_id, habit_id)
        return habit_statistics(habit, today or current_date())

    async def list_for_day(self, user_id: str, day: date) -> list[Habit]:
        """Habits scheduled (or always shown) on a day."""
        habits = await self.list_habits(user_id, today=day)
        return habits_for_day(habits, day)
