"""Main report interface.

This module provides the high-level HoursTracker class that orchestrates
validation, expansion, aggregation, rollover, and report building.
"""

from datetime import date
from typing import Iterable, Optional

from loguru import logger

from ontrack.domain.models import Defaults, Period, ScheduleConfig, TimeEntry
from ontrack.scheduling.actuals import ActualAggregator
from ontrack.scheduling.allocator import WorkDayAllocator
from ontrack.scheduling.expander import PeriodExpander
from ontrack.scheduling.report_builder import Report, ReportBuilder
from ontrack.scheduling.rollover import RolloverEngine
from ontrack.validation.validator import ScheduleValidator


class HoursTracker:
    """High-level entry point for computing hour reports.

    The tracker holds no state between calls; every report is recomputed
    from the full schedule and entry history.

    Example:
        >>> tracker = HoursTracker()
        >>> report = tracker.compute_report(config, entries, date(2024, 1, 17))
        >>> report.totals.period_remain
        -540
    """

    def __init__(self, allocator: Optional[WorkDayAllocator] = None):
        """Initialize tracker components.

        Args:
            allocator: Work-day allocator shared by validation and expansion.
        """
        self.allocator = allocator or WorkDayAllocator()
        self.validator = ScheduleValidator(self.allocator)
        self.expander = PeriodExpander(self.allocator)
        self.engine = RolloverEngine()
        self.builder = ReportBuilder()

    def compute_report(
        self,
        config: ScheduleConfig,
        entries: Iterable[TimeEntry],
        as_of: date,
    ) -> Report:
        """Compute the report for a schedule and recorded time.

        Args:
            config: Parsed schedule with defaults.
            entries: Recorded time entries on local dates.
            as_of: The report date, normally today.

        Returns:
            The complete Report.

        Raises:
            ConfigError: If the schedule is invalid.
        """
        periods = config.resolved_periods()
        self.validator.validate_or_raise(periods)

        schedule = self.expander.expand(periods, as_of)
        actuals = ActualAggregator(entries)
        statuses = self.engine.roll(schedule, actuals)
        report = self.builder.build(schedule, statuses, actuals)

        logger.debug(
            "Report for {}: {} rows over {} periods",
            as_of,
            len(report.rows),
            len(periods),
        )
        return report


def compute_report(
    periods: list[Period],
    defaults: Defaults,
    entries: Iterable[TimeEntry],
    as_of: date,
) -> Report:
    """Compute the report; deterministic for identical inputs."""
    config = ScheduleConfig(periods=list(periods), defaults=defaults)
    return HoursTracker().compute_report(config, entries, as_of)
