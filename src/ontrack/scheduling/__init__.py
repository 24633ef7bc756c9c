"""Hour allocation, rollover, and report engine."""

from ontrack.scheduling.actuals import ActualAggregator
from ontrack.scheduling.allocator import WorkDayAllocator, distribute
from ontrack.scheduling.expander import DayBaseline, ExpandedSchedule, PeriodExpander
from ontrack.scheduling.report_builder import (
    PeriodSummaryRow,
    Report,
    ReportBuilder,
    ReportRow,
)
from ontrack.scheduling.rollover import BucketStatus, DayRollover, RolloverEngine

__all__ = [
    # Components
    "ActualAggregator",
    "PeriodExpander",
    "ReportBuilder",
    "RolloverEngine",
    "WorkDayAllocator",
    "distribute",
    # Results
    "BucketStatus",
    "DayBaseline",
    "DayRollover",
    "ExpandedSchedule",
    "PeriodSummaryRow",
    "Report",
    "ReportRow",
]
