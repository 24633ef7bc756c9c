"""Tests for distributing expected hours over work days."""

from datetime import date

import pytest

from ontrack.domain.errors import ConfigError, ValidationErrorType
from ontrack.domain.models import (
    ClientHours,
    Period,
    Weekday,
    WorkDayHours,
    WorkDayRange,
)
from ontrack.scheduling.allocator import WorkDayAllocator, distribute

MONDAY = date(2024, 1, 15)
WEDNESDAY = date(2024, 1, 17)


def make_period(start=MONDAY, length=7, work_days=None, **client_hours):
    """Create a resolved period with the given client hours."""
    return Period(
        start=start,
        clients=[ClientHours.from_hours(name, h) for name, h in client_hours.items()],
        length=length,
        work_days=work_days or WorkDayRange(),
    )


class TestDistribute:
    """Tests for the rounding-exact distribute helper."""

    def test_even_split(self):
        assert distribute(900, [0, 1, 1, 1, 1, 1, 0]) == [0, 180, 180, 180, 180, 180, 0]

    def test_remainder_goes_to_earliest_days(self):
        assert distribute(10, [1, 1, 1]) == [4, 3, 3]
        assert distribute(11, [1, 1, 1]) == [4, 4, 3]

    def test_remainder_skips_zero_weight_days(self):
        assert distribute(7, [0, 1, 1]) == [0, 4, 3]

    def test_proportional_weights(self):
        assert distribute(300, [480, 240, 96, 96, 96, 96, 96]) == [120, 60, 24, 24, 24, 24, 24]

    def test_zero_total_over_no_days(self):
        assert distribute(0, [0, 0]) == [0, 0]

    def test_positive_total_over_no_days_raises(self):
        with pytest.raises(ValueError):
            distribute(5, [0, 0])

    @pytest.mark.parametrize("total", [0, 1, 59, 61, 899, 900, 1001])
    def test_sum_is_exact(self, total):
        assert sum(distribute(total, [1, 1, 1, 1, 1, 0, 0])) == total


class TestRangeWorkDays:
    """Tests for the from/to work-day form."""

    @pytest.fixture
    def allocator(self):
        return WorkDayAllocator()

    def test_monday_to_friday(self, allocator):
        period = make_period(Acme=15)
        assert allocator.allocate(period, 900) == [180, 180, 180, 180, 180, 0, 0]

    def test_work_day_offsets(self, allocator):
        assert allocator.work_day_offsets(make_period(Acme=15)) == [0, 1, 2, 3, 4]

    def test_weekdays_within_the_period(self, allocator):
        period = make_period(
            start=WEDNESDAY,
            work_days=WorkDayRange(Weekday.WED, Weekday.FRI),
            Acme=6,
        )
        assert allocator.allocate(period, 360) == [120, 120, 120, 0, 0, 0, 0]

    def test_default_week_from_a_midweek_start(self, allocator):
        period = make_period(start=WEDNESDAY, Acme=15)
        assert allocator.allocate(period, 900) == [180, 180, 180, 0, 0, 180, 180]

    def test_every_occurrence_in_a_long_period(self, allocator):
        period = make_period(length=14, Acme=30)
        assert allocator.allocate(period, 1800) == [180] * 5 + [0, 0] + [180] * 5 + [0, 0]

    def test_partial_second_week(self, allocator):
        period = make_period(length=13, Acme=20)
        assert allocator.work_day_offsets(period) == [0, 1, 2, 3, 4, 7, 8, 9, 10, 11]

    def test_weekday_range_wraps_past_sunday(self, allocator):
        period = make_period(work_days=WorkDayRange(Weekday.FRI, Weekday.MON), Acme=8)
        assert allocator.work_day_offsets(period) == [0, 4, 5, 6]

    def test_weekdays_missing_from_short_period(self, allocator):
        period = make_period(length=3, Acme=15)
        assert allocator.allocate(period, 900) == [300, 300, 300]

    def test_resolve_offsets(self, allocator):
        period = make_period(length=15, Acme=1)

        assert allocator.resolve_offsets(Weekday.MON, period) == [0, 7, 14]
        assert allocator.resolve_offsets(Weekday.WED, period) == [2, 9]
        assert allocator.resolve_offsets(3, period) == [3]

    def test_literal_offsets(self, allocator):
        period = make_period(length=3, work_days=WorkDayRange(1, 2), Acme=1)
        assert allocator.allocate(period, 60) == [0, 30, 30]

    def test_reversed_offset_range_raises(self, allocator):
        period = make_period(work_days=WorkDayRange(4, 1), Acme=15)

        with pytest.raises(ConfigError) as exc_info:
            allocator.day_weights(period)

        assert exc_info.value.errors[0].error_type == ValidationErrorType.WORK_DAY_RANGE_REVERSED

    def test_mixed_range_raises(self, allocator):
        period = make_period(work_days=WorkDayRange(Weekday.MON, 4), Acme=15)

        with pytest.raises(ConfigError):
            allocator.day_weights(period)

    def test_no_work_days_in_period_raises(self, allocator):
        # A Saturday-Sunday period has no Monday-Friday days
        period = make_period(start=date(2024, 1, 20), length=2, Acme=6)

        with pytest.raises(ConfigError) as exc_info:
            allocator.day_weights(period)

        assert exc_info.value.errors[0].error_type == ValidationErrorType.NO_WORK_DAYS

    def test_offset_outside_period_raises(self, allocator):
        period = make_period(work_days=WorkDayRange(0, 7), Acme=15)

        with pytest.raises(ConfigError) as exc_info:
            allocator.day_weights(period)

        assert exc_info.value.errors[0].error_type == ValidationErrorType.WORK_DAY_OUTSIDE_PERIOD

    def test_unresolved_period_raises_type_error(self, allocator):
        period = Period(start=MONDAY, length=7)

        with pytest.raises(TypeError):
            allocator.day_weights(period)

    @pytest.mark.parametrize("minutes", [0, 1, 7, 601, 899, 2400])
    def test_allocation_sums_to_minutes(self, allocator, minutes):
        assert sum(allocator.allocate(make_period(Acme=15), minutes)) == minutes


class TestExplicitWorkDays:
    """Tests for the explicit day-hours form."""

    @pytest.fixture
    def allocator(self):
        return WorkDayAllocator()

    def test_unlisted_days_share_the_rest(self, allocator):
        period = make_period(
            work_days=WorkDayHours.from_hours({Weekday.SUN: 0, Weekday.SAT: 2.5}),
            Acme=15,
        )
        assert allocator.allocate(period, 900) == [150, 150, 150, 150, 150, 150, 0]

    def test_weekdays_and_offsets_combine(self, allocator):
        period = make_period(
            work_days=WorkDayHours({Weekday.MON: 480, 1: 240}),
            Acme=20,
        )
        assert allocator.day_weights(period) == [480, 240, 96, 96, 96, 96, 96]

    def test_weekday_hours_apply_to_every_occurrence(self, allocator):
        period = make_period(
            length=14,
            work_days=WorkDayHours.from_hours({Weekday.SAT: 2.5}),
            Acme=30,
        )
        weights = allocator.day_weights(period)

        assert weights[5] == 150
        assert weights[12] == 150
        assert weights.count(125) == 12
        assert allocator.explicit_minutes(period, period.work_days) == {5: 150, 12: 150}

    def test_smaller_bucket_gets_scaled_shape(self, allocator):
        period = make_period(
            work_days=WorkDayHours({Weekday.MON: 480, Weekday.TUE: 240}),
            Acme=15,
            Beta=5,
        )
        assert allocator.allocate(period, 1200) == [480, 240, 96, 96, 96, 96, 96]
        assert allocator.allocate(period, 300) == [120, 60, 24, 24, 24, 24, 24]

    def test_literals_above_total_are_kept(self, allocator):
        period = make_period(
            work_days=WorkDayHours({Weekday.MON: 480, Weekday.TUE: 240}),
            Acme=10,
        )
        assert allocator.allocate(period, 600) == [480, 240, 0, 0, 0, 0, 0]

    def test_leftover_without_unlisted_days_raises(self, allocator):
        period = make_period(length=2, work_days=WorkDayHours({0: 60, 1: 60}), Acme=10)

        with pytest.raises(ConfigError) as exc_info:
            allocator.day_weights(period)

        assert exc_info.value.errors[0].error_type == ValidationErrorType.NO_WORK_DAYS

    def test_zero_total_allocates_nothing(self, allocator):
        period = make_period(work_days=WorkDayHours({Weekday.MON: 60}), Acme=0)
        assert allocator.allocate(period, 0) == [0] * 7
