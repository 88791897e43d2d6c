"""Integration tests for daily step endpoints."""
import pytest


@pytest.mark.asyncio
class TestStepCreate:
    """Tests for creating steps."""

    async def test_create_step_success(self, app_client, auth_headers):
        """Test successful step creation."""
        response = await app_client.post(
            "/daily-steps",
            json={"title": "Write report", "date": "2024-03-04", "isUrgent": True},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Write report"
        assert data["date"] == "2024-03-04"
        assert data["isUrgent"] is True
        assert data["completed"] is False

    async def test_create_recurring_step(self, app_client, auth_headers):
        """Test a recurring step gets a current instance date."""
        response = await app_client.post(
            "/daily-steps",
            json={"title": "Run", "frequency": "daily"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["currentInstanceDate"] is not None

    async def test_create_blank_title(self, app_client, auth_headers):
        """Test blank titles are rejected."""
        response = await app_client.post(
            "/daily-steps",
            json={"title": "  "},
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_create_unauthenticated(self, app_client):
        """Test creating steps requires authentication."""
        response = await app_client.post("/daily-steps", json={"title": "Run"})

        assert response.status_code == 401


@pytest.mark.asyncio
class TestStepList:
    """Tests for listing steps."""

    async def test_list_for_day_by_priority(self, app_client, auth_headers):
        """Test a day listing is ordered by priority."""
        await app_client.post(
            "/daily-steps",
            json={"title": "Plain", "date": "2024-03-04"},
            headers=auth_headers,
        )
        await app_client.post(
            "/daily-steps",
            json={"title": "Urgent", "date": "2024-03-04", "isUrgent": True, "isImportant": True},
            headers=auth_headers,
        )
        await app_client.post(
            "/daily-steps",
            json={"title": "Tomorrow", "date": "2024-03-05"},
            headers=auth_headers,
        )

        response = await app_client.get("/daily-steps?date=2024-03-04", headers=auth_headers)

        assert response.status_code == 200
        assert [s["title"] for s in response.json()] == ["Urgent", "Plain"]


@pytest.mark.asyncio
class TestStepUpdates:
    """Tests for rescheduling, completion and checklists."""

    async def test_reschedule(self, app_client, auth_headers):
        """Test moving a step to another day."""
        created = await app_client.post(
            "/daily-steps",
            json={"title": "Write", "date": "2024-03-04"},
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        response = await app_client.patch(
            f"/daily-steps/{step_id}",
            json={"date": "2024-03-06"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["date"] == "2024-03-06"
        assert response.json()["title"] == "Write"

    async def test_toggle_completion(self, app_client, auth_headers):
        """Test completing and reopening a step."""
        created = await app_client.post(
            "/daily-steps",
            json={"title": "Write", "date": "2024-03-04"},
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        response = await app_client.put(
            f"/daily-steps/{step_id}/completion",
            json={"completed": True},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["completed"] is True
        assert response.json()["completedAt"] is not None

        response = await app_client.put(
            f"/daily-steps/{step_id}/completion",
            json={"completed": False},
            headers=auth_headers,
        )
        assert response.json()["completed"] is False
        assert response.json()["completedAt"] is None

    async def test_checklist_gate(self, app_client, auth_headers):
        """Test a required checklist must be finished before completion."""
        created = await app_client.post(
            "/daily-steps",
            json={
                "title": "Pack",
                "requireChecklistComplete": True,
                "checklist": [{"id": "a", "title": "Shoes"}],
            },
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        blocked = await app_client.put(
            f"/daily-steps/{step_id}/completion",
            json={"completed": True},
            headers=auth_headers,
        )
        assert blocked.status_code == 400

        ticked = await app_client.put(
            f"/daily-steps/{step_id}/checklist/a",
            json={"completed": True},
            headers=auth_headers,
        )
        assert ticked.status_code == 200

        done = await app_client.put(
            f"/daily-steps/{step_id}/completion",
            json={"completed": True},
            headers=auth_headers,
        )
        assert done.status_code == 200
        assert done.json()["completed"] is True

    async def test_recurring_completion_records_occurrence(self, app_client, auth_headers):
        """Test completing a recurring step records the occurrence."""
        created = await app_client.post(
            "/daily-steps",
            json={"title": "Run", "frequency": "weekly", "selectedDays": ["monday"]},
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        response = await app_client.put(
            f"/daily-steps/{step_id}/completion",
            json={"completed": True, "completionDate": "2024-03-04"},
            headers=auth_headers,
        )

        data = response.json()
        assert data["completed"] is True
        assert data["currentInstanceDate"] == "2024-03-04"
        assert data["completedDates"] == ["2024-03-04"]

    async def test_occurrences(self, app_client, auth_headers):
        """Test upcoming occurrences of an all-mode step."""
        created = await app_client.post(
            "/daily-steps",
            json={
                "title": "Run",
                "frequency": "weekly",
                "selectedDays": ["monday"],
                "recurringDisplayMode": "all",
            },
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        response = await app_client.get(
            f"/daily-steps/{step_id}/occurrences?from=2024-03-04&limit=3",
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == ["2024-03-04", "2024-03-11", "2024-03-18"]


@pytest.mark.asyncio
class TestStepDelete:
    """Tests for deleting steps."""

    async def test_delete_missing_step(self, app_client, auth_headers):
        """Test deleting a missing step returns 404."""
        response = await app_client.delete(
            "/daily-steps/65f000000000000000000000",
            headers=auth_headers,
        )

        assert response.status_code == 404

    async def test_delete_invalid_id(self, app_client, auth_headers):
        """Test a malformed ID returns 400."""
        response = await app_client.delete("/daily-steps/not-an-id", headers=auth_headers)

        assert response.status_code == 400


@pytest.mark.asyncio
class TestStepNullUpdates:
    """Tests for explicit nulls in PATCH bodies."""

    async def test_null_for_required_field_is_rejected(self, app_client, auth_headers):
        """Test nulling a required field fails and leaves the step readable."""
        created = await app_client.post(
            "/daily-steps",
            json={"title": "Write", "date": "2024-03-04"},
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        response = await app_client.patch(
            f"/daily-steps/{step_id}",
            json={"isImportant": None},
            headers=auth_headers,
        )
        assert response.status_code == 422

        listed = await app_client.get("/daily-steps", headers=auth_headers)
        assert listed.status_code == 200
        assert listed.json()[0]["isImportant"] is False

    async def test_null_date_moves_to_backlog(self, app_client, auth_headers):
        """Test clearing the date is still allowed."""
        created = await app_client.post(
            "/daily-steps",
            json={"title": "Write", "date": "2024-03-04"},
            headers=auth_headers,
        )
        step_id = created.json()["id"]

        response = await app_client.patch(
            f"/daily-steps/{step_id}",
            json={"date": None},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["date"] is None
