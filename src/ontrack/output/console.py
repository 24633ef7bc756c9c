"""Console output for hour reports.

Renders the report as a rich table: CURRENT PERIOD and TODAY column
groups, remaining hours colored red when behind and green when ahead,
and a bold TOTAL row.
"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ontrack.scheduling.report_builder import Report, ReportRow

NOT_AVAILABLE = "(n/a)"


def format_minutes(minutes: int) -> str:
    """Format minutes as H:MM, with a leading minus when negative."""
    sign = "-" if minutes < 0 else ""
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours}:{mins:02d}"


def remain_text(minutes: int, bold: bool = False) -> Text:
    """Colored remaining-hours cell: red when behind, green when ahead."""
    style = ""
    if minutes < 0:
        style = "red"
    elif minutes > 0:
        style = "green"
    if bold:
        style = f"bold {style}".strip()
    return Text(format_minutes(minutes), style=style)


class ConsoleRenderer:
    """Renders reports to the terminal.

    Example:
        >>> renderer = ConsoleRenderer()
        >>> renderer.render_report(report)
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render_report(self, report: Report) -> Table:
        """Print the totals table and return it."""
        table = self.build_report_table(report)
        self.console.print(table)
        return table

    def render_periods(self, report: Report) -> Table:
        """Print the per-period table and return it."""
        table = self.build_periods_table(report)
        self.console.print(table)
        self.console.print()
        return table

    def build_report_table(self, report: Report) -> Table:
        table = Table(
            title=f"On track as of {report.as_of}",
            box=box.SIMPLE_HEAD,
            show_edge=False,
        )
        table.add_column("CLIENT", style="bold")
        table.add_column("PROJECT")
        for group in ("CURRENT PERIOD", "TODAY"):
            table.add_column(f"{group}\nexpect", justify="right")
            table.add_column("\nactual", justify="right")
            table.add_column("\nremain", justify="right")
        table.add_column("AVG.R", justify="right")

        for row in report.rows:
            table.add_row(*self._row_cells(row))
        if report.totals is not None:
            table.add_section()
            table.add_row(*self._row_cells(report.totals, bold=True))
        return table

    def _row_cells(self, row: ReportRow, bold: bool = False) -> list:
        style = "bold" if bold else ""
        avg = (
            format_minutes(row.avg_remaining)
            if row.avg_remaining is not None
            else NOT_AVAILABLE
        )
        return [
            Text(f"{row.client}:" if bold else row.client, style=style),
            Text(row.project or ""),
            Text(format_minutes(row.period_expect), style=style),
            Text(format_minutes(row.period_actual), style=style),
            remain_text(row.period_remain, bold),
            Text(format_minutes(row.day_expect), style=style),
            Text(format_minutes(row.day_actual), style=style),
            remain_text(row.day_remain, bold),
            Text(avg, style=style),
        ]

    def build_periods_table(self, report: Report) -> Table:
        table = Table(box=box.SIMPLE_HEAD, show_edge=False)
        table.add_column("PERIOD", style="bold")
        table.add_column("CLIENT", style="bold")
        table.add_column("PROJECT")
        table.add_column("EXPECT", justify="right")
        table.add_column("ACTUAL", justify="right")
        table.add_column("DIFFERENCE", justify="right")

        for row in report.periods:
            table.add_row(
                str(row.period_start),
                row.client,
                row.project or "",
                format_minutes(row.expected),
                format_minutes(row.actual),
                remain_text(row.difference),
            )
        return table
