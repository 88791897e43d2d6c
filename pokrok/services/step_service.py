"""Step service - business logic for daily steps and recurring templates."""
import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional

from pydantic import ValidationError

from pokrok.models.step import RecurringDisplayMode, Step, StepCreate, StepUpdate
from pokrok.scheduling.dates import date_key, normalize_date, to_datetime, today as current_date
from pokrok.scheduling.steps import (
    checklist_blocks_completion,
    get_next_occurrence_date,
    instance_title,
    instance_title_prefix,
    is_step_scheduled_for_day,
    sort_by_priority,
)
from pokrok.utils.ids import to_object_id

logger = logging.getLogger(__name__)

DATE_FIELDS = ("date", "recurring_start_date", "recurring_end_date", "current_instance_date")
RECURRENCE_FIELDS = ("frequency", "selected_days", "recurring_start_date", "recurring_end_date")


class StepService:
    """Service for handling step operations."""

    def __init__(self, db, search_days: int = 365):
        """Initialize service with database connection."""
        self.db = db
        self.steps = db["daily_steps"]
        self.areas = db["areas"]
        self.goals = db["goals"]
        self.search_days = search_days

    def _doc_to_step(self, doc: dict) -> Step:
        """
        Convert database document to Step model.

        Handles datetime to date conversion for date fields.
        """
        return Step(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            title=doc["title"],
            description=doc.get("description", ""),
            date=normalize_date(doc.get("date")),
            completed=doc.get("completed", False),
            completed_at=doc.get("completed_at"),
            is_important=doc.get("is_important", False),
            is_urgent=doc.get("is_urgent", False),
            estimated_time=doc.get("estimated_time", 30),
            xp_reward=doc.get("xp_reward", 1),
            area_id=doc.get("area_id"),
            goal_id=doc.get("goal_id"),
            frequency=doc.get("frequency"),
            selected_days=doc.get("selected_days") or [],
            recurring_start_date=normalize_date(doc.get("recurring_start_date")),
            recurring_end_date=normalize_date(doc.get("recurring_end_date")),
            recurring_display_mode=doc.get("recurring_display_mode") or RecurringDisplayMode.NEXT_ONLY,
            current_instance_date=normalize_date(doc.get("current_instance_date")),
            completed_dates=doc.get("completed_dates") or [],
            checklist=doc.get("checklist") or [],
            require_checklist_complete=doc.get("require_checklist_complete", False),
            recurring_template_id=doc.get("recurring_template_id"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def _first_occurrence(self, step: Step, today: date) -> Optional[date]:
        start = today
        if step.recurring_start_date and step.recurring_start_date > today:
            start = step.recurring_start_date
        return get_next_occurrence_date(
            step.model_copy(update={"current_instance_date": None, "completed": False}),
            start,
            search_days=self.search_days,
        )

    async def _ensure_links(
        self,
        user_id: str,
        area_id: Optional[str],
        goal_id: Optional[str],
    ) -> None:
        """Raise ValueError if a referenced area or goal does not exist."""
        if area_id:
            area = await self.areas.find_one({
                "_id": to_object_id(area_id, "area"),
                "user_id": user_id,
            })
            if not area:
                raise ValueError("Area not found")
        if goal_id:
            goal = await self.goals.find_one({
                "_id": to_object_id(goal_id, "goal"),
                "user_id": user_id,
            })
            if not goal:
                raise ValueError("Goal not found")

    async def _find_step_doc(self, user_id: str, step_id: str) -> dict:
        step_doc = await self.steps.find_one({
            "_id": to_object_id(step_id, "step"),
            "user_id": user_id,
        })
        if not step_doc:
            raise ValueError("Step not found")
        return step_doc

    async def create_step(
        self,
        user_id: str,
        step_create: StepCreate,
        today: Optional[date] = None,
    ) -> Step:
        """
        Create a new step.

        Recurring templates start with their first occurrence on or after
        today (or their recurrence start date) as the current instance.

        Raises:
            ValueError: If a referenced area or goal does not exist
        """
        await self._ensure_links(user_id, step_create.area_id, step_create.goal_id)

        now = datetime.utcnow()
        today = today or current_date()
        fields = step_create.model_dump()

        current_instance = None
        if step_create.frequency is not None:
            draft = Step(_id="draft", user_id=user_id, created_at=now, updated_at=now, **fields)
            current_instance = self._first_occurrence(draft, today)

        step_doc = {
            **fields,
            "user_id": user_id,
            "frequency": step_create.frequency.value if step_create.frequency else None,
            "recurring_display_mode": step_create.recurring_display_mode.value,
            "date": to_datetime(step_create.date),
            "recurring_start_date": to_datetime(step_create.recurring_start_date),
            "recurring_end_date": to_datetime(step_create.recurring_end_date),
            "current_instance_date": to_datetime(current_instance),
            "completed": False,
            "completed_at": None,
            "completed_dates": [],
            "recurring_template_id": None,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.steps.insert_one(step_doc)
        step_doc["_id"] = result.inserted_id
        logger.info("Created step %s for user %s", step_doc["_id"], user_id)

        return self._doc_to_step(step_doc)

    async def list_steps(
        self,
        user_id: str,
        day: Optional[date] = None,
        goal_id: Optional[str] = None,
        area_id: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> list[Step]:
        """
        List steps for a user, most urgent first.

        Args:
            user_id: User ID
            day: Only steps dated on, or recurring onto, this day
            goal_id: Optional goal filter
            area_id: Optional area filter
            completed: Optional completion filter

        Returns:
            Steps sorted by priority
        """
        query = {"user_id": user_id}
        if goal_id:
            query["goal_id"] = goal_id
        if area_id:
            query["area_id"] = area_id
        if completed is not None:
            query["completed"] = completed

        cursor = self.steps.find(query)
        step_docs = await cursor.to_list(length=None)

        steps = [self._doc_to_step(doc) for doc in step_docs]
        if day is not None:
            steps = [step for step in steps if is_step_scheduled_for_day(step, day)]

        return sort_by_priority(steps)

    async def get_step(self, user_id: str, step_id: str) -> Step:
        """
        Get a step by ID.

        Raises:
            ValueError: If step not found or invalid ID format
        """
        return self._doc_to_step(await self._find_step_doc(user_id, step_id))

    async def update_step(
        self,
        user_id: str,
        step_id: str,
        step_update: StepUpdate,
        today: Optional[date] = None,
    ) -> Step:
        """
        Apply the fields present in the update.

        Covers form edits, drag-and-drop rescheduling (``date`` only) and
        single-field edits. Changing the recurrence rule of an open template
        moves its current instance to the first matching day.

        Raises:
            ValueError: If step, area or goal not found, or the result is invalid
        """
        existing = await self._find_step_doc(user_id, step_id)

        changes = step_update.model_dump(exclude_unset=True)
        await self._ensure_links(user_id, changes.get("area_id"), changes.get("goal_id"))

        update_doc = {"updated_at": datetime.utcnow()}
        for field, value in changes.items():
            if field in DATE_FIELDS:
                value = to_datetime(value)
            elif field in ("frequency", "recurring_display_mode") and value is not None:
                value = value.value if hasattr(value, "value") else value
            update_doc[field] = value

        try:
            merged = self._doc_to_step({**existing, **update_doc})
        except ValidationError as e:
            raise ValueError(f"Invalid step update: {e.errors()[0]['msg']}")

        if any(field in changes for field in RECURRENCE_FIELDS):
            if merged.frequency is not None and not merged.completed:
                next_date = self._first_occurrence(merged, today or current_date())
                update_doc["current_instance_date"] = to_datetime(next_date)
            elif merged.frequency is None:
                update_doc["current_instance_date"] = None

        updated_doc = await self.steps.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return self._doc_to_step(updated_doc)

    async def toggle_completion(
        self,
        user_id: str,
        step_id: str,
        completed: bool,
        completion_date: Optional[date] = None,
    ) -> Step:
        """
        Mark a step as done or not done.

        For recurring templates the completion is scoped to one occurrence:
        ``completion_date`` (default: the current instance date) becomes the
        current instance and is recorded in the completion history.

        Raises:
            ValueError: If step not found, or the checklist gate blocks completion
        """
        existing = await self._find_step_doc(user_id, step_id)
        step = self._doc_to_step(existing)

        if completed and checklist_blocks_completion(step):
            raise ValueError("Checklist must be completed first")

        now = datetime.utcnow()
        update_doc = {
            "completed": completed,
            "completed_at": now if completed else None,
            "updated_at": now,
        }

        if step.is_recurring:
            day = completion_date or step.current_instance_date or current_date()
            key = date_key(day)
            history = [d for d in step.completed_dates if d != key]
            if completed:
                history.append(key)
            update_doc["completed_dates"] = sorted(history)
            update_doc["current_instance_date"] = to_datetime(day)

        updated_doc = await self.steps.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return self._doc_to_step(updated_doc)

    async def update_checklist_item(
        self,
        user_id: str,
        step_id: str,
        item_id: str,
        completed: bool,
    ) -> Step:
        """
        Tick or untick a checklist item.

        Raises:
            ValueError: If step or checklist item not found
        """
        existing = await self._find_step_doc(user_id, step_id)

        checklist = [dict(item) for item in existing.get("checklist") or []]
        for item in checklist:
            if item.get("id") == item_id:
                item["completed"] = completed
                break
        else:
            raise ValueError("Checklist item not found")

        updated_doc = await self.steps.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id},
            {"$set": {"checklist": checklist, "updated_at": datetime.utcnow()}},
            return_document=True,
        )

        return self._doc_to_step(updated_doc)

    async def delete_step(self, user_id: str, step_id: str) -> dict:
        """
        Delete a step.

        Deleting a recurring template also removes its generated instances
        that are not completed yet. Instances are found by title prefix, so
        templates whose titles share a prefix affect each other.

        Raises:
            ValueError: If step not found
        """
        existing = await self._find_step_doc(user_id, step_id)

        result = await self.steps.delete_one({"_id": existing["_id"], "user_id": user_id})
        deleted_count = result.deleted_count

        if existing.get("frequency"):
            prefix = instance_title_prefix(existing["title"])
            instances = await self.steps.delete_many({
                "user_id": user_id,
                "title": {"$regex": f"^{re.escape(prefix)}"},
                "completed": False,
            })
            deleted_count += instances.deleted_count
            logger.info(
                "Deleted recurring step %s and %d open instances",
                step_id,
                instances.deleted_count,
            )

        return {"deleted_count": deleted_count}

    async def advance_recurring_templates(
        self,
        user_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> int:
        """
        Move completed templates on to their next occurrence.

        A template whose current instance was completed before today gets the
        next scheduled day as its new, open current instance.

        Args:
            user_id: Restrict to one user (all users when None)
            today: Reference day

        Returns:
            Number of templates advanced
        """
        today = today or current_date()
        query = {"frequency": {"$ne": None}, "completed": True}
        if user_id:
            query["user_id"] = user_id

        cursor = self.steps.find(query)
        template_docs = await cursor.to_list(length=None)

        advanced = 0
        for doc in template_docs:
            step = self._doc_to_step(doc)
            if step.current_instance_date is not None and step.current_instance_date >= today:
                continue

            next_date = get_next_occurrence_date(step, today, search_days=self.search_days)
            if next_date is None:
                logger.warning("Recurring step %s has no upcoming occurrence", step.id)
                continue

            await self.steps.update_one(
                {"_id": doc["_id"]},
                {
                    "$set": {
                        "current_instance_date": to_datetime(next_date),
                        "completed": False,
                        "completed_at": None,
                        "updated_at": datetime.utcnow(),
                    }
                },
            )
            advanced += 1

        logger.info("Advanced %d recurring steps", advanced)
        return advanced

    async def generate_recurring_instances(
        self,
        user_id: Optional[str] = None,
        today: Optional[date] = None,
        horizon_days: int = 30,
    ) -> int:
        """
        Materialize the next instance of templates shown in ``all`` mode.

        For each open template the first scheduled day within the horizon
        that has no instance yet gets a concrete, non-recurring step. Days
        whose instance was already completed are skipped.

        Returns:
            Number of instances created
        """
        today = today or current_date()
        query = {
            "frequency": {"$ne": None},
            "recurring_display_mode": RecurringDisplayMode.ALL.value,
            "completed": False,
        }
        if user_id:
            query["user_id"] = user_id

        cursor = self.steps.find(query)
        template_docs = await cursor.to_list(length=None)

        created = 0
        for doc in template_docs:
            template = self._doc_to_step(doc)
            for offset in range(horizon_days + 1):
                day = today + timedelta(days=offset)
                if not is_step_scheduled_for_day(template, day):
                    continue

                title = instance_title(template.title, day)
                existing = await self.steps.find_one({
                    "user_id": template.user_id,
                    "title": title,
                    "date": to_datetime(day),
                })
                if existing and existing.get("completed"):
                    continue
                if not existing:
                    await self._create_instance(doc, template, title, day)
                    created += 1
                break

        logger.info("Created %d recurring step instances", created)
        return created

    async def _create_instance(self, doc: dict, template: Step, title: str, day: date) -> None:
        now = datetime.utcnow()
        await self.steps.insert_one({
            "user_id": template.user_id,
            "title": title,
            "description": template.description,
            "date": to_datetime(day),
            "is_important": template.is_important,
            "is_urgent": template.is_urgent,
            "estimated_time": template.estimated_time,
            "xp_reward": template.xp_reward,
            "area_id": template.area_id,
            "goal_id": template.goal_id,
            "frequency": None,
            "selected_days": [],
            "recurring_display_mode": RecurringDisplayMode.NEXT_ONLY.value,
            "checklist": doc.get("checklist") or [],
            "require_checklist_complete": template.require_checklist_complete,
            "completed": False,
            "completed_at": None,
            "completed_dates": [],
            "current_instance_date": None,
            "recurring_template_id": str(doc["_id"]),
            "created_at": now,
            "updated_at": now,
        })
