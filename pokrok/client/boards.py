"""Local step and habit lists kept in sync through optimistic mutations."""
import logging
from datetime import date
from typing import Any, Optional

import httpx

from pokrok.client.api import ApiError, PokrokClient
from pokrok.client.optimistic import MutationOutcome, OptimisticMutator
from pokrok.models.habit import Habit
from pokrok.models.step import Step
from pokrok.scheduling.dates import date_key, today as current_date

logger = logging.getLogger(__name__)


class StepBoard:
    """Steps shown to the user, updated before the server confirms."""

    def __init__(
        self,
        client: PokrokClient,
        mutator: OptimisticMutator,
        steps: Optional[list[Step]] = None,
    ):
        self.client = client
        self.mutator = mutator
        self.steps: list[Step] = list(steps or [])

    def get(self, step_id: str) -> Step:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise KeyError(step_id)

    def _replace(self, step: Step) -> None:
        self.steps = [step if s.id == step.id else s for s in self.steps]

    async def refresh(self, **filters) -> None:
        self.steps = await self.client.list_steps(**filters)

    def _patch(self, step_id: str, changes: dict) -> None:
        self._replace(self.get(step_id).model_copy(update=changes))

    async def _mutate(self, key, step_id: str, changes: dict, request, error_message: str) -> MutationOutcome:
        original = self.get(step_id)
        previous = {field: getattr(original, field) for field in changes}
        # Rollback only touches the fields this mutation changed
        return await self.mutator.run(
            key,
            apply=lambda: self._patch(step_id, changes),
            request=request,
            rollback=lambda: self._patch(step_id, previous),
            reconcile=self._replace,
            error_message=error_message,
        )

    async def toggle_step(self, step_id: str, day: Optional[date] = None) -> MutationOutcome:
        """Flip completion; for recurring steps the completion applies to ``day``."""
        step = self.get(step_id)
        completed = not step.completed
        day = day or step.current_instance_date or step.date or current_date()

        changes = {"completed": completed}
        if step.is_recurring:
            changes["current_instance_date"] = day

        return await self._mutate(
            (step_id, day),
            step_id,
            changes,
            lambda: self.client.toggle_step(
                step_id,
                completed,
                completion_date=day if step.is_recurring else None,
            ),
            "Could not update the step",
        )

    async def reschedule(self, step_id: str, new_date: Optional[date]) -> MutationOutcome:
        """Move a step to another day (None moves it to the backlog)."""
        return await self._mutate(
            (step_id, "date"),
            step_id,
            {"date": new_date},
            lambda: self.client.update_step(step_id, date=new_date),
            "Could not move the step",
        )

    async def set_field(self, step_id: str, field: str, value: Any) -> MutationOutcome:
        """Change a single field such as ``is_important`` or ``estimated_time``."""
        return await self._mutate(
            (step_id, field),
            step_id,
            {field: value},
            lambda: self.client.update_step(step_id, **{field: value}),
            "Could not update the step",
        )

    async def create_step(self, title: str, **fields) -> Optional[Step]:
        """
        Create a step and reload the list.

        A failing reload keeps the created step in the list.

        Raises:
            StepValidationError: If the step is invalid
        """
        created: list[Step] = []

        def adopt(step: Step) -> None:
            created.append(step)
            self.steps.append(step)

        outcome = await self.mutator.run(
            ("create", title),
            apply=lambda: None,
            request=lambda: self.client.create_step(title, **fields),
            rollback=lambda: None,
            reconcile=adopt,
            error_message="Could not create the step",
        )
        if outcome is not MutationOutcome.CONFIRMED:
            return None

        try:
            await self.refresh()
        except (ApiError, httpx.HTTPError) as e:
            logger.warning("Reload after creating step failed: %s", e)

        return created[0]


class HabitBoard:
    """Habit collection with optimistic calendar toggles."""

    def __init__(
        self,
        client: PokrokClient,
        mutator: OptimisticMutator,
        habits: Optional[list[Habit]] = None,
    ):
        self.client = client
        self.mutator = mutator
        self.habits: list[Habit] = list(habits or [])

    async def refresh(self) -> None:
        self.habits = await self.client.list_habits()

    def _set(self, habits: list[Habit]) -> None:
        self.habits = habits

    def _completion(self, habit_id: str, key: str) -> Optional[bool]:
        for habit in self.habits:
            if habit.id == habit_id:
                return habit.habit_completions.get(key)
        return None

    def _set_completion(self, habit_id: str, key: str, value: Optional[bool]) -> None:
        """Write one ledger entry of one habit; None removes the entry."""
        updated = []
        for habit in self.habits:
            if habit.id == habit_id:
                completions = dict(habit.habit_completions)
                if value is None:
                    completions.pop(key, None)
                else:
                    completions[key] = value
                habit = habit.model_copy(update={"habit_completions": completions})
            updated.append(habit)
        self.habits = updated

    async def toggle_habit(self, habit_id: str, day: date) -> MutationOutcome:
        """
        Flip a calendar day; success adopts the server's full collection.

        A failed toggle restores only this habit's entry for the day, so
        toggles confirmed meanwhile for other habits or days are kept.
        """
        key = date_key(day)
        previous = self._completion(habit_id, key)

        return await self.mutator.run(
            f"{habit_id}-{key}",
            apply=lambda: self._set_completion(habit_id, key, previous is not True),
            request=lambda: self.client.toggle_habit(habit_id, day),
            rollback=lambda: self._set_completion(habit_id, key, previous),
            reconcile=self._set,
            error_message="Could not update the habit",
        )
