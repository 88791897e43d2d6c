"""Tests for date normalization helpers."""
from datetime import date, datetime

import pytest


class TestNormalizeDate:
    """Tests for normalize_date."""

    @pytest.mark.parametrize(
        "value",
        [
            date(2024, 3, 4),
            datetime(2024, 3, 4, 23, 59),
            "2024-03-04",
            "2024-03-04T23:30:00Z",
            "2024-03-04T10:00:00+02:00",
        ],
    )
    def test_accepted_inputs(self, value):
        """Test every supported input normalizes to the written calendar date."""
        from pokrok.scheduling.dates import normalize_date

        assert normalize_date(value) == date(2024, 3, 4)

    def test_empty_values(self):
        """Test None and blank strings normalize to None."""
        from pokrok.scheduling.dates import normalize_date

        assert normalize_date(None) is None
        assert normalize_date("  ") is None

    @pytest.mark.parametrize("value", ["not a date", "2024-13-01", 42])
    def test_invalid_values(self, value):
        """Test invalid values raise ValueError."""
        from pokrok.scheduling.dates import normalize_date

        with pytest.raises(ValueError):
            normalize_date(value)

    def test_date_key(self):
        """Test date_key renders YYYY-MM-DD."""
        from pokrok.scheduling.dates import date_key

        assert date_key(datetime(2024, 3, 4, 12)) == "2024-03-04"

    def test_to_datetime_is_midnight(self):
        """Test storage datetimes are naive midnight."""
        from pokrok.scheduling.dates import to_datetime

        assert to_datetime(date(2024, 3, 4)) == datetime(2024, 3, 4)
        assert to_datetime(None) is None


class TestCalendarHelpers:
    """Tests for weekday and month helpers."""

    def test_weekday_name(self):
        """Test weekday names are lowercase English."""
        from pokrok.scheduling.dates import weekday_name

        assert weekday_name(date(2024, 3, 4)) == "monday"
        assert weekday_name(date(2024, 3, 10)) == "sunday"

    def test_days_in_month(self):
        """Test month lengths including leap February."""
        from pokrok.scheduling.dates import days_in_month

        assert days_in_month(2024, 2) == 29
        assert days_in_month(2023, 2) == 28
        assert days_in_month(2024, 4) == 30

    def test_iter_days_inclusive(self):
        """Test iter_days includes both ends."""
        from pokrok.scheduling.dates import iter_days

        days = list(iter_days(date(2024, 2, 28), date(2024, 3, 1)))

        assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
