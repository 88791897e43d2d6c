"""Tests for step scheduling and occurrence advancement."""
from datetime import date, datetime


def make_step(**fields):
    from pokrok.models.step import Step

    defaults = {
        "_id": "step1",
        "user_id": "user123",
        "title": "Run",
        "created_at": datetime(2024, 3, 1, 8, 0),
        "updated_at": datetime(2024, 3, 1, 8, 0),
    }
    defaults.update(fields)
    return Step(**defaults)


class TestIsStepScheduled:
    """Tests for is_step_scheduled_for_day."""

    def test_dated_step(self):
        """Test a one-off step is scheduled only on its date."""
        from pokrok.scheduling.steps import is_step_scheduled_for_day

        step = make_step(date=date(2024, 3, 4))

        assert is_step_scheduled_for_day(step, date(2024, 3, 4)) is True
        assert is_step_scheduled_for_day(step, date(2024, 3, 5)) is False

    def test_backlog_step(self):
        """Test a step without date or recurrence is never scheduled."""
        from pokrok.scheduling.steps import is_step_scheduled_for_day

        assert is_step_scheduled_for_day(make_step(), date(2024, 3, 4)) is False

    def test_recurrence_window(self):
        """Test recurring steps respect their start and end dates."""
        from pokrok.scheduling.steps import is_step_scheduled_for_day

        step = make_step(
            frequency="daily",
            recurring_start_date=date(2024, 3, 5),
            recurring_end_date=date(2024, 3, 10),
        )

        assert is_step_scheduled_for_day(step, date(2024, 3, 4)) is False
        assert is_step_scheduled_for_day(step, date(2024, 3, 5)) is True
        assert is_step_scheduled_for_day(step, date(2024, 3, 10)) is True
        assert is_step_scheduled_for_day(step, date(2024, 3, 11)) is False


class TestIsCompletedForDate:
    """Tests for is_completed_for_date."""

    def test_open_step(self):
        """Test an open step is never completed."""
        from pokrok.scheduling.steps import is_completed_for_date

        step = make_step(date=date(2024, 3, 4))

        assert is_completed_for_date(step, date(2024, 3, 4)) is False

    def test_recurring_uses_current_instance(self):
        """Test recurring completion is scoped to the current instance."""
        from pokrok.scheduling.steps import is_completed_for_date

        step = make_step(
            frequency="weekly",
            selected_days=["monday"],
            completed=True,
            current_instance_date=date(2024, 3, 4),
        )

        assert is_completed_for_date(step, date(2024, 3, 4)) is True
        assert is_completed_for_date(step, date(2024, 3, 11)) is False

    def test_one_off_uses_completed_at(self):
        """Test one-off completion is compared with the completion timestamp."""
        from pokrok.scheduling.steps import is_completed_for_date

        step = make_step(
            date=date(2024, 3, 4),
            completed=True,
            completed_at=datetime(2024, 3, 5, 21, 0),
        )

        assert is_completed_for_date(step, date(2024, 3, 5)) is True
        assert is_completed_for_date(step, date(2024, 3, 4)) is False


class TestGetNextOccurrenceDate:
    """Tests for get_next_occurrence_date."""

    def test_open_instance_is_kept(self):
        """Test an open weekly template keeps its current Monday instance."""
        from pokrok.scheduling.steps import get_next_occurrence_date

        step = make_step(
            frequency="weekly",
            selected_days=["monday"],
            current_instance_date=date(2024, 3, 4),
        )

        assert get_next_occurrence_date(step, date(2024, 3, 4)) == date(2024, 3, 4)

    def test_completed_instance_moves_to_next_week(self):
        """Test a completed Monday instance advances to the following Monday."""
        from pokrok.scheduling.steps import get_next_occurrence_date

        step = make_step(
            frequency="weekly",
            selected_days=["monday"],
            current_instance_date=date(2024, 3, 4),
            completed=True,
        )

        assert get_next_occurrence_date(step, date(2024, 3, 4)) == date(2024, 3, 11)

    def test_past_instance_scans_from_date(self):
        """Test a stale instance before from_date is ignored."""
        from pokrok.scheduling.steps import get_next_occurrence_date

        step = make_step(
            frequency="weekly",
            selected_days=["friday"],
            current_instance_date=date(2024, 3, 1),
        )

        assert get_next_occurrence_date(step, date(2024, 3, 4)) == date(2024, 3, 8)

    def test_ended_recurrence(self):
        """Test no occurrence is found after the recurrence ends."""
        from pokrok.scheduling.steps import get_next_occurrence_date

        step = make_step(frequency="daily", recurring_end_date=date(2024, 3, 1))

        assert get_next_occurrence_date(step, date(2024, 3, 4)) is None

    def test_search_bound(self):
        """Test the scan stops after search_days."""
        from pokrok.scheduling.steps import get_next_occurrence_date

        step = make_step(frequency="monthly", selected_days=["20"])

        assert get_next_occurrence_date(step, date(2024, 3, 1), search_days=10) is None
        assert get_next_occurrence_date(step, date(2024, 3, 1), search_days=30) == date(2024, 3, 20)

    def test_one_off_step(self):
        """Test a dated one-off step returns its date until it is in the past."""
        from pokrok.scheduling.steps import get_next_occurrence_date

        step = make_step(date=date(2024, 3, 6))

        assert get_next_occurrence_date(step, date(2024, 3, 4)) == date(2024, 3, 6)
        assert get_next_occurrence_date(step, date(2024, 3, 7)) is None


class TestUpcomingOccurrences:
    """Tests for upcoming_occurrences."""

    def test_next_only_returns_single_date(self):
        """Test next_only templates expose one occurrence."""
        from pokrok.scheduling.steps import upcoming_occurrences

        step = make_step(frequency="weekly", selected_days=["monday"])

        assert upcoming_occurrences(step, date(2024, 3, 4), limit=3) == [date(2024, 3, 4)]

    def test_all_mode_skips_completed_dates(self):
        """Test all-mode templates list several dates, skipping recorded completions."""
        from pokrok.scheduling.steps import upcoming_occurrences

        step = make_step(
            frequency="weekly",
            selected_days=["monday"],
            recurring_display_mode="all",
            completed_dates=["2024-03-11"],
        )

        assert upcoming_occurrences(step, date(2024, 3, 4), limit=3) == [
            date(2024, 3, 4),
            date(2024, 3, 18),
            date(2024, 3, 25),
        ]


class TestPriority:
    """Tests for priority ordering."""

    def test_sort_by_priority(self):
        """Test important+urgent < urgent < important < neither, stable within rank."""
        from pokrok.scheduling.steps import sort_by_priority

        steps = [
            make_step(_id="plain"),
            make_step(_id="important", is_important=True),
            make_step(_id="urgent", is_urgent=True),
            make_step(_id="both", is_important=True, is_urgent=True),
            make_step(_id="plain2"),
        ]

        ordered = [step.id for step in sort_by_priority(steps)]

        assert ordered == ["both", "urgent", "important", "plain", "plain2"]


class TestChecklistGate:
    """Tests for checklist_blocks_completion."""

    def test_blocks_with_open_item(self):
        """Test a required checklist with an open item blocks completion."""
        from pokrok.scheduling.steps import checklist_blocks_completion

        step = make_step(
            require_checklist_complete=True,
            checklist=[
                {"id": "a", "title": "Shoes", "completed": True},
                {"id": "b", "title": "Water", "completed": False},
            ],
        )

        assert checklist_blocks_completion(step) is True

    def test_optional_checklist_never_blocks(self):
        """Test an optional checklist does not block completion."""
        from pokrok.scheduling.steps import checklist_blocks_completion

        step = make_step(checklist=[{"id": "a", "title": "Shoes", "completed": False}])

        assert checklist_blocks_completion(step) is False


class TestInstanceTitles:
    """Tests for generated instance titles."""

    def test_instance_title(self):
        """Test the instance title format."""
        from pokrok.scheduling.steps import instance_title

        assert instance_title("Run", date(2024, 3, 4)) == "Run - 4. 3. 2024"

    def test_prefix_matching_is_shared_by_similar_titles(self):
        """Test prefix matching also matches templates sharing a title prefix."""
        from pokrok.scheduling.steps import instance_title, is_instance_title_of

        title = instance_title("Run - long", date(2024, 3, 4))

        assert is_instance_title_of(title, "Run - long") is True
        assert is_instance_title_of(title, "Run") is True
        assert is_instance_title_of("Running - 4. 3. 2024", "Run") is False
