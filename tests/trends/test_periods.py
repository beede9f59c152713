"""Tests for calendar period alignment."""

from datetime import datetime, timedelta, timezone

import pytest

from gitlog_author.exceptions import ErrorCode, ValidationError
from gitlog_author.trends import PERIODS, add_months, format_iso, get_period, to_utc

UTC = timezone.utc


class TestFormatting:
    """UTC ISO strings with milliseconds."""

    def test_format_iso(self):
        assert format_iso(datetime(2024, 2, 6, tzinfo=UTC)) == "2024-02-06T00:00:00.000Z"

    def test_format_iso_converts_offsets(self):
        moment = datetime(2024, 2, 6, 1, 30, 0, 250000, tzinfo=timezone(timedelta(hours=2)))
        assert format_iso(moment) == "2024-02-05T23:30:00.250Z"

    def test_naive_is_utc(self):
        assert to_utc(datetime(2024, 2, 6, 12)) == datetime(2024, 2, 6, 12, tzinfo=UTC)


class TestMonthArithmetic:
    """Calendar month stepping clamps the day."""

    def test_clamps_to_shorter_month(self):
        assert add_months(datetime(2024, 3, 31, tzinfo=UTC), -1) == datetime(2024, 2, 29, tzinfo=UTC)

    def test_crosses_year_boundary(self):
        assert add_months(datetime(2024, 1, 15, tzinfo=UTC), -1) == datetime(2023, 12, 15, tzinfo=UTC)
        assert add_months(datetime(2023, 11, 30, tzinfo=UTC), 3) == datetime(2024, 2, 29, tzinfo=UTC)


class TestAlignment:
    """Start and end of each period in UTC."""

    def test_daily(self):
        period = get_period("daily")
        moment = datetime(2024, 2, 6, 15, 45, tzinfo=UTC)
        assert format_iso(period.start_of(moment)) == "2024-02-06T00:00:00.000Z"
        assert format_iso(period.end_of(moment)) == "2024-02-06T23:59:59.999Z"

    def test_weekly_starts_on_sunday(self):
        period = get_period("weekly")
        wednesday = datetime(2024, 2, 7, 12, tzinfo=UTC)
        assert format_iso(period.start_of(wednesday)) == "2024-02-04T00:00:00.000Z"
        assert format_iso(period.end_of(wednesday)) == "2024-02-10T23:59:59.999Z"

    def test_weekly_sunday_is_its_own_start(self):
        period = get_period("weekly")
        sunday = datetime(2024, 2, 4, 8, tzinfo=UTC)
        assert period.start_of(sunday).date() == sunday.date()

    def test_weekly_saturday_is_end(self):
        period = get_period("weekly")
        saturday = datetime(2024, 2, 10, 8, tzinfo=UTC)
        assert period.end_of(saturday).date() == saturday.date()
        assert period.start_of(saturday).date() == datetime(2024, 2, 4).date()

    def test_monthly_leap_year(self):
        period = get_period("monthly")
        moment = datetime(2024, 2, 15, tzinfo=UTC)
        assert format_iso(period.start_of(moment)) == "2024-02-01T00:00:00.000Z"
        assert format_iso(period.end_of(moment)) == "2024-02-29T23:59:59.999Z"

    def test_yearly(self):
        period = get_period("yearly")
        moment = datetime(2024, 7, 4, tzinfo=UTC)
        assert format_iso(period.start_of(moment)) == "2024-01-01T00:00:00.000Z"
        assert format_iso(period.end_of(moment)) == "2024-12-31T23:59:59.999Z"

    def test_offset_input_aligned_in_utc(self):
        period = get_period("daily")
        moment = datetime(2024, 2, 6, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        assert format_iso(period.start_of(moment)) == "2024-02-05T00:00:00.000Z"

    def test_step_back(self):
        end = datetime(2024, 2, 7, tzinfo=UTC)
        assert PERIODS["daily"].step_back(end, 2) == datetime(2024, 2, 5, tzinfo=UTC)
        assert PERIODS["weekly"].step_back(end, 1) == datetime(2024, 1, 31, tzinfo=UTC)
        assert PERIODS["monthly"].step_back(end, 2) == datetime(2023, 12, 7, tzinfo=UTC)
        assert PERIODS["yearly"].step_back(end, 1) == datetime(2023, 2, 7, tzinfo=UTC)

    def test_labels(self):
        assert [p.label for p in PERIODS.values()] == ["Day", "Week", "Month", "Year"]

    def test_unknown_period(self):
        with pytest.raises(ValidationError) as exc_info:
            get_period("hourly")
        assert exc_info.value.code == ErrorCode.INVALID_TREND_PERIOD
