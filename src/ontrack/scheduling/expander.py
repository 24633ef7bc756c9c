"""Expansion of the period schedule into per-day baselines.

The expander applies the WorkDayAllocator to every period and bucket,
producing the baseline (pre-rollover) expected minutes for each day.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from loguru import logger

from ontrack.domain.models import Bucket, Period
from ontrack.scheduling.allocator import WorkDayAllocator


@dataclass(frozen=True)
class DayBaseline:
    """Baseline expected minutes for one bucket on one day.

    Attributes:
        day: The calendar date.
        period_index: Index of the owning period, or None between periods.
        minutes: Expected minutes before rollover.
    """

    day: date
    period_index: Optional[int]
    minutes: int


@dataclass
class ExpandedSchedule:
    """Per-day baselines for every bucket of the schedule.

    Attributes:
        as_of: The report date.
        periods: Resolved periods in start order.
        buckets: Tracked buckets, each client followed by its projects.
        days: Every date from the first period start through as_of.
        baselines: Bucket -> date -> minutes, for every day of every period.
        work_days: Dates with positive weight in their period.
    """

    as_of: date
    periods: list[Period]
    buckets: list[Bucket] = field(default_factory=list)
    days: list[date] = field(default_factory=list)
    baselines: dict[Bucket, dict[date, int]] = field(default_factory=dict)
    work_days: set[date] = field(default_factory=set)

    def baseline(self, bucket: Bucket, day: date) -> int:
        """Baseline minutes for a bucket on a day (0 if not scheduled)."""
        return self.baselines.get(bucket, {}).get(day, 0)

    def period_index_of(self, day: date) -> Optional[int]:
        """Index of the period containing day, if any."""
        for i, period in enumerate(self.periods):
            if period.contains(day):
                return i
        return None

    @property
    def current_period_index(self) -> Optional[int]:
        """The last period starting on or before as_of."""
        current = None
        for i, period in enumerate(self.periods):
            if period.start <= self.as_of:
                current = i
        return current

    @property
    def current_period(self) -> Optional[Period]:
        index = self.current_period_index
        return None if index is None else self.periods[index]

    def sequence(self, bucket: Bucket) -> list[DayBaseline]:
        """The bucket's baselines from the first period start through as_of."""
        return [
            DayBaseline(day, self.period_index_of(day), self.baseline(bucket, day))
            for day in self.days
        ]

    def period_baseline(self, bucket: Bucket, period: Period, through: Optional[date] = None) -> int:
        """Sum of a bucket's baselines over a period, optionally up to a date."""
        last = period.last_day if through is None else min(through, period.last_day)
        return sum(
            self.baseline(bucket, day) for day in period.dates if day <= last
        )


class PeriodExpander:
    """Expands resolved periods into per-day baselines.

    Example:
        >>> expander = PeriodExpander()
        >>> schedule = expander.expand(periods, date(2024, 1, 17))
        >>> schedule.baseline(Bucket("Acme"), date(2024, 1, 16))
        180
    """

    def __init__(self, allocator: Optional[WorkDayAllocator] = None):
        self.allocator = allocator or WorkDayAllocator()

    def expand(self, periods: list[Period], as_of: date) -> ExpandedSchedule:
        """Compute baselines for every period and bucket.

        Args:
            periods: Resolved, validated periods in start order.
            as_of: The report date.

        Returns:
            ExpandedSchedule covering all periods.
        """
        schedule = ExpandedSchedule(as_of=as_of, periods=list(periods))
        schedule.buckets = self._ordered_buckets(periods)
        schedule.baselines = {bucket: {} for bucket in schedule.buckets}

        for period in periods:
            offsets = self.allocator.work_day_offsets(period)
            schedule.work_days.update(
                period.start + timedelta(days=offset) for offset in offsets
            )
            for bucket in period.buckets():
                per_day = self.allocator.allocate(period, period.minutes_for(bucket))
                logger.info(
                    "Daily minutes for {} in period starting {}: {}",
                    bucket,
                    period.start,
                    per_day,
                )
                for day, minutes in zip(period.dates, per_day):
                    schedule.baselines[bucket][day] = minutes

        if periods:
            day = periods[0].start
            while day <= as_of:
                schedule.days.append(day)
                day += timedelta(days=1)

        return schedule

    def _ordered_buckets(self, periods: list[Period]) -> list[Bucket]:
        """Buckets in first-declaration order, projects grouped under clients."""
        projects_by_client: dict[str, list[Bucket]] = {}
        for period in periods:
            for bucket in period.buckets():
                projects = projects_by_client.setdefault(bucket.client, [])
                if bucket.is_project and bucket not in projects:
                    projects.append(bucket)

        ordered = []
        for client, projects in projects_by_client.items():
            ordered.append(Bucket(client))
            ordered.extend(projects)
        return ordered
