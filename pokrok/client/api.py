"""Async HTTP client for the Pokrok API."""
import logging
from datetime import date
from typing import Any, Optional

import httpx
from pydantic.alias_generators import to_camel

from pokrok.config import settings
from pokrok.models.area import Area
from pokrok.models.goal import Goal
from pokrok.models.habit import Frequency, Habit
from pokrok.models.step import Step, StepCreate
from pokrok.models.workflow import WorkflowStatus

logger = logging.getLogger(__name__)

WEEKLY_FREQUENCIES = (Frequency.WEEKLY, Frequency.CUSTOM)


class ApiError(Exception):
    """Raised for any non-2xx response."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class StepValidationError(ValueError):
    """Raised before sending a step the server would reject."""


def validate_new_step(title: str, frequency: Optional[Frequency], selected_days: list[str]) -> None:
    """
    Check a step before it is created.

    Raises:
        StepValidationError: If the title is blank or a weekly step has no days
    """
    if not title or not title.strip():
        raise StepValidationError("Title is required")
    if frequency is not None and Frequency(frequency) in WEEKLY_FREQUENCIES and not selected_days:
        raise StepValidationError("Select at least one day for a weekly step")


def _items(payload: Any) -> list:
    """Accept both bare arrays and ``{"items": [...]}`` envelopes."""
    if isinstance(payload, dict):
        return payload.get("items") or []
    return payload or []


class PokrokClient:
    """Thin wrapper around ``httpx.AsyncClient`` with bearer authentication."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.token = token
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "PokrokClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self._http.request(method, path, headers=headers, **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("detail", response.text)
            except ValueError:
                detail = response.text
            logger.debug("%s %s failed with %s", method, path, response.status_code)
            raise ApiError(response.status_code, str(detail))

        if not response.content:
            return None
        return response.json()

    # Auth

    async def login(self, email: str, password: str) -> str:
        """Log in and keep the access token for later requests."""
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        return self.token

    # Steps

    async def list_steps(
        self,
        day: Optional[date] = None,
        goal_id: Optional[str] = None,
        area_id: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> list[Step]:
        params = {}
        if day is not None:
            params["date"] = day.isoformat()
        if goal_id:
            params["goalId"] = goal_id
        if area_id:
            params["areaId"] = area_id
        if completed is not None:
            params["completed"] = str(completed).lower()

        data = await self._request("GET", "/daily-steps", params=params)
        return [Step.model_validate(item) for item in _items(data)]

    async def create_step(self, title: str, **fields) -> Step:
        """
        Create a step.

        Raises:
            StepValidationError: If the step is invalid (nothing is sent)
            ApiError: If the server rejects the step
        """
        validate_new_step(title, fields.get("frequency"), fields.get("selected_days") or [])
        step_create = StepCreate(title=title, **fields)

        data = await self._request(
            "POST",
            "/daily-steps",
            json=step_create.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Step.model_validate(data)

    async def update_step(self, step_id: str, **changes) -> Step:
        """Send only the given fields; a None value clears the field."""
        payload = {}
        for field, value in changes.items():
            if isinstance(value, date):
                value = value.isoformat()
            payload[to_camel(field)] = value

        data = await self._request("PATCH", f"/daily-steps/{step_id}", json=payload)
        return Step.model_validate(data)

    async def toggle_step(
        self,
        step_id: str,
        completed: bool,
        completion_date: Optional[date] = None,
    ) -> Step:
        payload = {"completed": completed}
        if completion_date is not None:
            payload["completionDate"] = completion_date.isoformat()

        data = await self._request("PUT", f"/daily-steps/{step_id}/completion", json=payload)
        return Step.model_validate(data)

    async def delete_step(self, step_id: str) -> dict:
        return await self._request("DELETE", f"/daily-steps/{step_id}")

    # Habits

    async def list_habits(self) -> list[Habit]:
        data = await self._request("GET", "/habits")
        return [Habit.model_validate(item) for item in _items(data)]

    async def toggle_habit(
        self,
        habit_id: str,
        day: date,
        completed: Optional[bool] = None,
    ) -> list[Habit]:
        """Toggle a calendar day; returns the refreshed habit collection."""
        payload = {"habitId": habit_id, "date": day.isoformat()}
        if completed is not None:
            payload["completed"] = completed

        data = await self._request("PUT", "/habits/calendar", json=payload)
        return [Habit.model_validate(item) for item in _items(data)]

    # Areas, goals, workflows

    async def list_areas(self) -> list[Area]:
        data = await self._request("GET", "/cesta/areas")
        return [Area.model_validate(item) for item in _items(data)]

    async def list_goals(self, status: Optional[str] = None) -> list[Goal]:
        params = {"status": status} if status else {}
        data = await self._request("GET", "/goals", params=params)
        return [Goal.model_validate(item) for item in _items(data)]

    async def pending_workflows(self) -> WorkflowStatus:
        data = await self._request("GET", "/workflows/pending")
        return WorkflowStatus.model_validate(data)
