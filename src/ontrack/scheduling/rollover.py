"""Carry-forward of surplus and deficit hours across days and periods.

The rollover engine walks each bucket's days in order, from the first
period start through the report date, threading a signed carry:
positive means hours worked ahead, negative means hours owed. A day's
displayed expectation is its baseline minus the carry, never below zero;
the carry itself is always updated against the baseline, so clamping
moves hours in time without creating or destroying any.

Carry is never reset at period boundaries. Clients and projects are
folded separately.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from loguru import logger

from ontrack.domain.models import Bucket, Period
from ontrack.scheduling.actuals import ActualAggregator
from ontrack.scheduling.expander import ExpandedSchedule


@dataclass(frozen=True)
class DayRollover:
    """One step of the carry fold.

    Attributes:
        day: The calendar date.
        baseline: Expected minutes before rollover.
        expected: Displayed expected minutes (baseline minus carry, >= 0).
        actual: Recorded minutes.
        carry_before: Carry entering the day.
        carry_after: Carry leaving the day.
    """

    day: date
    baseline: int
    expected: int
    actual: int
    carry_before: int
    carry_after: int


def roll_day(carry: int, day: date, baseline: int, actual: int) -> DayRollover:
    """Advance the carry by one day."""
    return DayRollover(
        day=day,
        baseline=baseline,
        expected=max(baseline - carry, 0),
        actual=actual,
        carry_before=carry,
        carry_after=carry + actual - baseline,
    )


@dataclass
class BucketStatus:
    """Current period and current day figures for one bucket.

    All figures are minutes.

    Attributes:
        bucket: The client or client/project.
        period_expected: Owed in the current period through the report date.
        period_actual: Recorded in the current period through the report date.
        period_target: Owed over the whole current period after carry.
        day_expected: Owed on the report date after carry.
        day_actual: Recorded on the report date.
        carry_in: Carry entering the current period.
        carry: Carry after the report date.
        remaining_work_days: Work days left for reaching period_target.
        days: The fold steps, first period start through the report date.
    """

    bucket: Bucket
    period_expected: int = 0
    period_actual: int = 0
    period_target: int = 0
    day_expected: int = 0
    day_actual: int = 0
    carry_in: int = 0
    carry: int = 0
    remaining_work_days: int = 0
    days: list[DayRollover] = field(default_factory=list)

    @property
    def period_remain(self) -> int:
        return self.period_actual - self.period_expected

    @property
    def day_remain(self) -> int:
        return self.day_actual - self.day_expected

    @property
    def avg_remaining(self) -> Optional[int]:
        """Minutes per remaining work day needed to reach period_target."""
        return average_remaining(
            self.period_target - self.period_actual, self.remaining_work_days
        )


def average_remaining(minutes: int, work_days: int) -> Optional[int]:
    """Spread minutes over work days; None when there are no days left."""
    if work_days <= 0:
        return None
    return int(round(minutes / work_days))


def remaining_work_days(
    schedule: ExpandedSchedule,
    period: Period,
    as_of: date,
    today_met: bool,
) -> int:
    """Work days of a period still available after as_of.

    The report date itself counts when it is a work day whose expected
    hours have not been met yet.
    """
    count = sum(
        1 for day in period.dates if day > as_of and day in schedule.work_days
    )
    if period.contains(as_of) and as_of in schedule.work_days and not today_met:
        count += 1
    return count


class RolloverEngine:
    """Computes carried-forward figures for every bucket.

    Example:
        >>> engine = RolloverEngine()
        >>> statuses = engine.roll(schedule, ActualAggregator(entries))
        >>> statuses[Bucket("Acme")].day_expected
        240
    """

    def roll(
        self,
        schedule: ExpandedSchedule,
        actuals: ActualAggregator,
    ) -> dict[Bucket, BucketStatus]:
        """Fold every bucket's day sequence.

        Args:
            schedule: Baselines from the PeriodExpander.
            actuals: Recorded time.

        Returns:
            Status per bucket, in the schedule's bucket order.
        """
        return {
            bucket: self.roll_bucket(schedule, actuals, bucket)
            for bucket in schedule.buckets
        }

    def roll_bucket(
        self,
        schedule: ExpandedSchedule,
        actuals: ActualAggregator,
        bucket: Bucket,
    ) -> BucketStatus:
        """Fold one bucket's days and derive its current figures."""
        as_of = schedule.as_of
        period = schedule.current_period
        status = BucketStatus(bucket=bucket)

        carry = 0
        for baseline in schedule.sequence(bucket):
            if period is not None and baseline.day == period.start:
                status.carry_in = carry
            step = roll_day(
                carry,
                baseline.day,
                baseline.minutes,
                actuals.day_minutes(bucket, baseline.day),
            )
            status.days.append(step)
            carry = step.carry_after
        status.carry = carry

        if status.days and status.days[-1].day == as_of:
            today = status.days[-1]
            status.day_expected = today.expected
            status.day_actual = today.actual

        if period is not None:
            owed = schedule.period_baseline(bucket, period, through=as_of)
            status.period_expected = max(owed - status.carry_in, 0)
            status.period_target = max(
                schedule.period_baseline(bucket, period) - status.carry_in, 0
            )
            status.period_actual = actuals.range_minutes(
                bucket, period.start, min(as_of, period.last_day)
            )
            status.remaining_work_days = remaining_work_days(
                schedule, period, as_of, today_met=status.day_remain >= 0
            )

        logger.debug(
            "{}: carry_in={} carry={} period={}/{} day={}/{}",
            bucket,
            status.carry_in,
            status.carry,
            status.period_actual,
            status.period_expected,
            status.day_actual,
            status.day_expected,
        )
        return status
