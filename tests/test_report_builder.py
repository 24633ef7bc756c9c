"""Tests for report assembly and the end-to-end report computation."""

from datetime import date

import pytest

from ontrack.domain.errors import ConfigError
from ontrack.domain.models import (
    ClientHours,
    Defaults,
    Period,
    ScheduleConfig,
    TimeEntry,
    WorkDayRange,
)
from ontrack.scheduling.report_builder import TOTAL_LABEL
from ontrack.tracker import HoursTracker, compute_report

MONDAY = date(2024, 1, 15)
WEDNESDAY = date(2024, 1, 17)


class TestReport:
    """Tests for report rows and totals."""

    @pytest.fixture
    def periods(self):
        return [
            Period(
                start=MONDAY,
                clients=[
                    ClientHours.from_hours("Acme", 15, {"Web": 5}),
                    ClientHours.from_hours("Beta", 5),
                ],
            )
        ]

    def test_rows_in_declaration_order(self, periods):
        report = compute_report(periods, Defaults(), [], WEDNESDAY)

        assert [(r.client, r.project) for r in report.rows] == [
            ("Acme", None),
            ("Acme", "Web"),
            ("Beta", None),
        ]

    def test_client_row_midweek_without_actuals(self, periods):
        report = compute_report(periods, Defaults(), [], WEDNESDAY)
        row = report.get_row("Acme")

        assert row.period_expect == 540
        assert row.period_actual == 0
        assert row.period_remain == -540
        assert row.day_expect == 540
        assert row.day_remain == -540
        assert row.avg_remaining == 300

    def test_project_row(self, periods):
        report = compute_report(periods, Defaults(), [], WEDNESDAY)
        row = report.get_row("Acme", "Web")

        assert row.is_project
        assert row.period_expect == 180
        assert row.day_expect == 180

    def test_totals_exclude_project_rows(self, periods):
        entries = [TimeEntry.from_hours("Acme", "Web", MONDAY, 2)]
        report = compute_report(periods, Defaults(), entries, WEDNESDAY)

        assert report.totals.client == TOTAL_LABEL
        assert report.totals.period_expect == 540 + 180
        assert report.totals.period_actual == 120
        assert report.totals.period_remain == 120 - 720
        assert report.totals.avg_remaining == (1200 - 120) // 3

    def test_no_work_days_left(self, periods):
        report = compute_report(periods, Defaults(), [], date(2024, 1, 21))

        assert report.get_row("Acme").avg_remaining is None
        assert report.totals.avg_remaining is None

    def test_before_first_period(self, periods):
        report = compute_report(periods, Defaults(), [], date(2024, 1, 1))

        assert report.get_row("Acme").period_expect == 0
        assert report.totals.period_expect == 0
        assert report.totals.avg_remaining is None

    def test_period_summary(self, periods):
        entries = [TimeEntry.from_hours("Beta", None, MONDAY, 3)]
        report = compute_report(periods, Defaults(), entries, WEDNESDAY)

        beta = [row for row in report.periods if row.client == "Beta"][0]
        assert beta.period_start == MONDAY
        assert beta.expected == 300
        assert beta.actual == 180
        assert beta.difference == -120
        assert len(report.periods) == 3

    def test_identical_inputs_give_identical_reports(self, periods):
        entries = [
            TimeEntry.from_hours("Acme", "Web", MONDAY, 2),
            TimeEntry.from_hours("Beta", None, WEDNESDAY, 1.5),
        ]
        first = compute_report(periods, Defaults(), entries, WEDNESDAY)
        second = compute_report(periods, Defaults(), list(reversed(entries)), WEDNESDAY)

        assert first == second


class TestHoursTracker:
    """Tests for the HoursTracker entry point."""

    def test_invalid_schedule_is_rejected(self):
        config = ScheduleConfig(
            periods=[
                Period(
                    start=MONDAY,
                    clients=[ClientHours.from_hours("Acme", 5, {"Web": 6})],
                )
            ]
        )

        with pytest.raises(ConfigError):
            HoursTracker().compute_report(config, [], WEDNESDAY)

    def test_defaults_apply_to_periods(self):
        config = ScheduleConfig(
            periods=[Period(start=MONDAY, clients=[ClientHours.from_hours("Acme", 6)])],
            defaults=Defaults(period_length=3, work_days=WorkDayRange(0, 2)),
        )
        report = HoursTracker().compute_report(config, [], WEDNESDAY)

        assert report.get_row("Acme").period_expect == 360
        # Wednesday is the last work day and still unmet
        assert report.get_row("Acme").avg_remaining == 360

    def test_default_week_from_a_midweek_start(self):
        config = ScheduleConfig(
            periods=[Period(start=WEDNESDAY, clients=[ClientHours.from_hours("Acme", 15)])]
        )
        report = HoursTracker().compute_report(config, [], WEDNESDAY)
        row = report.get_row("Acme")

        # Wed, Thu, Fri, Mon and Tue share the week
        assert row.day_expect == 180
        assert row.period_expect == 180
        assert row.avg_remaining == 180

    def test_two_week_period_uses_both_weeks(self):
        config = ScheduleConfig(
            periods=[
                Period(start=MONDAY, length=14, clients=[ClientHours.from_hours("Acme", 30)])
            ]
        )
        report = HoursTracker().compute_report(config, [], date(2024, 1, 22))

        assert report.get_row("Acme").day_expect == 180 * 6
        assert report.periods[0].expected == 1800

    def test_period_without_work_days(self):
        config = ScheduleConfig(
            periods=[
                Period(
                    start=date(2024, 1, 20),
                    length=2,
                    clients=[ClientHours.from_hours("Acme", 6)],
                )
            ]
        )

        with pytest.raises(ConfigError):
            HoursTracker().compute_report(config, [], date(2024, 1, 20))
