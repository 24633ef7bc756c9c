"""Assembly of report rows from rollover results."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ontrack.domain.models import Bucket
from ontrack.scheduling.actuals import ActualAggregator
from ontrack.scheduling.expander import ExpandedSchedule
from ontrack.scheduling.rollover import (
    BucketStatus,
    average_remaining,
    remaining_work_days,
)

TOTAL_LABEL = "TOTAL"


@dataclass(frozen=True)
class ReportRow:
    """One line of the report. All hour fields are minutes.

    Attributes:
        client: Client name, or TOTAL for the totals row.
        project: Project name for project rows.
        period_expect: Owed in the current period through the report date.
        period_actual: Recorded in the current period through the report date.
        period_remain: period_actual - period_expect.
        day_expect: Owed on the report date.
        day_actual: Recorded on the report date.
        day_remain: day_actual - day_expect.
        avg_remaining: Per remaining work day to reach the period target,
            or None when no work days remain.
    """

    client: str
    project: Optional[str]
    period_expect: int
    period_actual: int
    period_remain: int
    day_expect: int
    day_actual: int
    day_remain: int
    avg_remaining: Optional[int] = None

    @property
    def is_project(self) -> bool:
        return self.project is not None

    @classmethod
    def from_status(cls, status: BucketStatus) -> "ReportRow":
        return cls(
            client=status.bucket.client,
            project=status.bucket.project,
            period_expect=status.period_expected,
            period_actual=status.period_actual,
            period_remain=status.period_remain,
            day_expect=status.day_expected,
            day_actual=status.day_actual,
            day_remain=status.day_remain,
            avg_remaining=status.avg_remaining,
        )


@dataclass(frozen=True)
class PeriodSummaryRow:
    """Configured versus recorded minutes for one bucket in one period."""

    period_start: date
    client: str
    project: Optional[str]
    expected: int
    actual: int

    @property
    def difference(self) -> int:
        return self.actual - self.expected


@dataclass
class Report:
    """The computed report.

    Attributes:
        as_of: The report date.
        rows: Client rows, each followed by its project rows.
        totals: Sum of the client rows.
        periods: Per-period summary for every period and bucket.
    """

    as_of: date
    rows: list[ReportRow] = field(default_factory=list)
    totals: Optional[ReportRow] = None
    periods: list[PeriodSummaryRow] = field(default_factory=list)

    def get_row(self, client: str, project: Optional[str] = None) -> Optional[ReportRow]:
        """Find the row for a client or client/project."""
        for row in self.rows:
            if row.client == client and row.project == project:
                return row
        return None


class ReportBuilder:
    """Builds report rows, the TOTAL row, and the per-period summary."""

    def build(
        self,
        schedule: ExpandedSchedule,
        statuses: dict[Bucket, BucketStatus],
        actuals: ActualAggregator,
    ) -> Report:
        """Assemble the report.

        Args:
            schedule: Expanded schedule, for bucket order and periods.
            statuses: RolloverEngine output.
            actuals: Recorded time, for the per-period summary.
        """
        rows = [ReportRow.from_status(statuses[bucket]) for bucket in schedule.buckets]
        client_statuses = [
            statuses[bucket] for bucket in schedule.buckets if not bucket.is_project
        ]
        return Report(
            as_of=schedule.as_of,
            rows=rows,
            totals=self._build_totals(schedule, client_statuses),
            periods=self.build_period_summary(schedule, actuals),
        )

    def _build_totals(
        self,
        schedule: ExpandedSchedule,
        client_statuses: list[BucketStatus],
    ) -> ReportRow:
        """Sum client rows; projects are already included in their clients."""
        period_expect = sum(s.period_expected for s in client_statuses)
        period_actual = sum(s.period_actual for s in client_statuses)
        day_expect = sum(s.day_expected for s in client_statuses)
        day_actual = sum(s.day_actual for s in client_statuses)

        avg = None
        period = schedule.current_period
        if period is not None:
            work_days = remaining_work_days(
                schedule, period, schedule.as_of, today_met=day_actual >= day_expect
            )
            target = sum(s.period_target for s in client_statuses)
            avg = average_remaining(target - period_actual, work_days)

        return ReportRow(
            client=TOTAL_LABEL,
            project=None,
            period_expect=period_expect,
            period_actual=period_actual,
            period_remain=period_actual - period_expect,
            day_expect=day_expect,
            day_actual=day_actual,
            day_remain=day_actual - day_expect,
            avg_remaining=avg,
        )

    def build_period_summary(
        self,
        schedule: ExpandedSchedule,
        actuals: ActualAggregator,
    ) -> list[PeriodSummaryRow]:
        """Configured and recorded minutes per period and bucket."""
        rows = []
        for period in schedule.periods:
            for bucket in period.buckets():
                rows.append(
                    PeriodSummaryRow(
                        period_start=period.start,
                        client=bucket.client,
                        project=bucket.project,
                        expected=schedule.period_baseline(bucket, period),
                        actual=actuals.range_minutes(bucket, period.start, period.last_day),
                    )
                )
        return rows
