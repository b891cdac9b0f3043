"""Tests for the working-hours resolver."""

from datetime import date

import pytest

from slotengine.engine.errors import InvalidScheduleConfiguration
from slotengine.engine.working_hours import (
    break_windows,
    candidate_slots_for_day,
    covers_span,
    default_schedule,
    infer_granularity,
    validate_schedule,
)
from slotengine.schemas.schedule_schema import DaySchedule, TimeRange, WorkingHoursSchedule
from tests.conftest import DAY, utc_schedule

SUNDAY = date(2025, 3, 23)


def single_day(day_schedule: DaySchedule) -> WorkingHoursSchedule:
    """Schedule with ``day_schedule`` on every weekday."""
    return WorkingHoursSchedule(days=tuple(day_schedule for _ in range(7)), timezone="UTC")


class TestCandidateSlots:
    def test_default_window_hourly(self):
        labels = candidate_slots_for_day(None, DAY, 60)
        assert labels[0] == "08:00"
        assert labels[-1] == "18:00"
        assert len(labels) == 11

    def test_half_hour_grid(self):
        labels = candidate_slots_for_day(utc_schedule("09:00", "17:00"), DAY, 30)
        assert len(labels) == 16
        assert labels[-1] == "16:30"

    def test_last_start_may_be_partial_slot(self):
        labels = candidate_slots_for_day(utc_schedule("09:00", "10:00"), DAY, 45)
        assert labels == ["09:00", "09:45"]

    def test_break_between_ranges_has_no_slots(self):
        schedule = single_day(DaySchedule.open_ranges(("09:00", "12:00"), ("13:00", "15:00")))
        labels = candidate_slots_for_day(schedule, DAY, 60)
        assert labels == ["09:00", "10:00", "11:00", "13:00", "14:00"]

    def test_overlapping_ranges_are_deduplicated(self):
        schedule = single_day(DaySchedule.open_ranges(("09:00", "11:00"), ("10:00", "12:00")))
        assert candidate_slots_for_day(schedule, DAY, 60) == ["09:00", "10:00", "11:00"]

    def test_malformed_range_is_skipped(self):
        schedule = single_day(DaySchedule.open_ranges(("12:00", "10:00"), ("14:00", "16:00")))
        assert candidate_slots_for_day(schedule, DAY, 60) == ["14:00", "15:00"]

    def test_closed_weekday(self):
        schedule = WorkingHoursSchedule.uniform("09:00", "17:00", weekdays=(0, 1, 2, 3, 4))
        assert candidate_slots_for_day(schedule, SUNDAY, 60) == []

    def test_enabled_without_ranges_is_closed(self):
        schedule = single_day(DaySchedule(enabled=True))
        assert candidate_slots_for_day(schedule, DAY, 60) == []

    def test_non_positive_granularity_rejected(self):
        with pytest.raises(ValueError, match="granularity"):
            candidate_slots_for_day(utc_schedule(), DAY, 0)

    def test_default_schedule_is_open_every_day(self):
        schedule = default_schedule()
        assert all(entry.is_open for entry in schedule.days)


class TestCoversSpan:
    def test_span_inside_range(self):
        assert covers_span(utc_schedule(), DAY, 17 * 60, 120)

    def test_span_past_closing(self):
        assert not covers_span(utc_schedule(), DAY, 18 * 60, 120)

    def test_span_across_break(self):
        schedule = single_day(DaySchedule.open_ranges(("09:00", "12:00"), ("13:00", "17:00")))
        assert not covers_span(schedule, DAY, 11 * 60, 120)
        assert covers_span(schedule, DAY, 13 * 60, 240)

    def test_touching_ranges_are_one_period(self):
        schedule = single_day(DaySchedule.open_ranges(("09:00", "12:00"), ("12:00", "15:00")))
        assert covers_span(schedule, DAY, 11 * 60, 120)

    def test_closed_day(self):
        weekdays = WorkingHoursSchedule.uniform(
            "08:00", "19:00", weekdays=(0, 1, 2, 3, 4), timezone="UTC"
        )
        assert not covers_span(weekdays, SUNDAY, 10 * 60, 60)

    def test_no_schedule_uses_default_window(self):
        assert covers_span(None, DAY, 8 * 60, 60)
        assert not covers_span(None, DAY, 7 * 60, 60)


class TestBreakWindows:
    def test_gap_between_ranges(self):
        schedule = single_day(DaySchedule.open_ranges(("13:00", "17:00"), ("09:00", "12:00")))
        assert break_windows(schedule, DAY) == [TimeRange(start="12:00", end="13:00")]

    def test_single_range_has_no_breaks(self):
        assert break_windows(utc_schedule(), DAY) == []

    def test_no_schedule(self):
        assert break_windows(None, DAY) == []


class TestValidateSchedule:
    def test_valid_schedule_passes(self):
        validate_schedule(utc_schedule())  # should not raise

    def test_overlap_reported(self):
        schedule = single_day(DaySchedule.open_ranges(("09:00", "12:00"), ("11:00", "14:00")))
        with pytest.raises(InvalidScheduleConfiguration) as exc_info:
            validate_schedule(schedule)
        assert "overlaps" in exc_info.value.problems[0]
        assert len(exc_info.value.problems) == 7

    def test_reversed_range_reported(self):
        schedule = single_day(DaySchedule.open_ranges(("18:00", "09:00")))
        with pytest.raises(InvalidScheduleConfiguration, match="invalid range 18:00-09:00"):
            validate_schedule(schedule)

    def test_enabled_without_ranges_reported(self):
        schedule = single_day(DaySchedule(enabled=True))
        with pytest.raises(InvalidScheduleConfiguration, match="enabled without any ranges"):
            validate_schedule(schedule)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_schedule(single_day(DaySchedule(enabled=True)))


class TestInferGranularity:
    def test_configured_value_wins(self):
        assert infer_granularity([90], configured=20) == 20

    def test_largest_fitting_allowed_value(self):
        assert infer_granularity([50, 90]) == 45

    def test_exact_match(self):
        assert infer_granularity([30, 60]) == 30

    def test_long_services_cap_at_largest_allowed(self):
        assert infer_granularity([120]) == 60

    def test_very_short_service_uses_smallest_allowed(self):
        assert infer_granularity([10]) == 15

    def test_no_services_uses_default(self):
        assert infer_granularity([]) == 60
