"""PDF generation for hour reports.

This module creates a printable report showing:
- The current period and today figures per client and project
- The TOTAL row
- Optionally, the per-period expected versus actual summary
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from ontrack.output.console import NOT_AVAILABLE, format_minutes
from ontrack.scheduling.report_builder import Report, ReportRow

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    "behind": (0.8, 0.1, 0.1),  # Red
    "ahead": (0.1, 0.55, 0.1),  # Green
    "header": (0.85, 0.85, 0.9),  # Light blue-gray
    "project_row": (0.96, 0.96, 0.96),  # Light gray
    "text": (0, 0, 0),
}

REPORT_COLUMNS = [
    ("CLIENT", 130, "left"),
    ("PROJECT", 130, "left"),
    ("expect", 55, "right"),
    ("actual", 55, "right"),
    ("remain", 55, "right"),
    ("expect", 55, "right"),
    ("actual", 55, "right"),
    ("remain", 55, "right"),
    ("AVG.R", 55, "right"),
]

PERIOD_COLUMNS = [
    ("PERIOD", 90, "left"),
    ("CLIENT", 150, "left"),
    ("PROJECT", 150, "left"),
    ("EXPECT", 70, "right"),
    ("ACTUAL", 70, "right"),
    ("DIFFERENCE", 80, "right"),
]


class PDFGenerator:
    """Generates printable PDF hour reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(report, "ontrack.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        row_height: float = 16,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.row_height = row_height

    def generate(
        self,
        report: Report,
        output_path: Union[str, Path],
        include_periods: bool = False,
    ) -> None:
        """Generate the PDF report and save to file.

        Args:
            report: The computed report.
            output_path: Path to save the PDF.
            include_periods: Whether to add the per-period summary pages.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, report, include_periods)
        c.save()

    def generate_to_buffer(self, report: Report, include_periods: bool = False) -> BytesIO:
        """Generate the PDF report and return it as a bytes buffer."""
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, report, include_periods)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(self, c, report: Report, include_periods: bool) -> None:
        self._draw_report_pages(c, report)
        if include_periods and report.periods:
            self._draw_period_pages(c, report)

    def _rows_per_page(self, header_height: float) -> int:
        usable = self.page_height - 2 * self.margin - header_height
        return max(1, int(usable / self.row_height))

    def _draw_report_pages(self, c, report: Report) -> None:
        """Draw the main table, repeating the header on every page."""
        header_height = 80
        rows = list(report.rows)
        if report.totals is not None:
            rows.append(report.totals)
        rows_per_page = self._rows_per_page(header_height)
        total_pages = max(1, (len(rows) + rows_per_page - 1) // rows_per_page)

        for page in range(total_pages):
            page_rows = rows[page * rows_per_page : (page + 1) * rows_per_page]
            self._draw_title(c, f"Hours on track - {report.as_of.strftime('%A, %B %d, %Y')}")
            y = self.page_height - self.margin - 50

            # Column group labels
            c.setFont("Helvetica-Bold", 9)
            group_x = self.margin + REPORT_COLUMNS[0][1] + REPORT_COLUMNS[1][1]
            group_width = sum(w for _, w, _ in REPORT_COLUMNS[2:5])
            c.drawCentredString(group_x + group_width / 2, y, "CURRENT PERIOD")
            c.drawCentredString(group_x + group_width * 1.5, y, "TODAY")

            y -= self.row_height
            self._draw_header_row(c, REPORT_COLUMNS, y)

            for row in page_rows:
                y -= self.row_height
                self._draw_report_row(c, row, y, is_total=row is report.totals)

            self._draw_page_number(c, page + 1, total_pages)
            c.showPage()

    def _draw_title(self, c, title: str) -> None:
        c.setFillColorRGB(*COLORS["text"])
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)

    def _draw_header_row(self, c, columns: list, y: float) -> None:
        width = sum(w for _, w, _ in columns)
        c.setFillColorRGB(*COLORS["header"])
        c.rect(self.margin, y - 4, width, self.row_height, fill=1, stroke=0)
        c.setFillColorRGB(*COLORS["text"])
        c.setFont("Helvetica-Bold", 9)
        self._draw_cells(c, columns, [label for label, _, _ in columns], y)

    def _draw_cells(self, c, columns: list, values: list, y: float, colors: Optional[dict] = None) -> None:
        x = self.margin
        for i, ((_, width, align), value) in enumerate(zip(columns, values)):
            c.setFillColorRGB(*(colors or {}).get(i, COLORS["text"]))
            if align == "right":
                c.drawRightString(x + width - 4, y, value)
            else:
                c.drawString(x + 4, y, value[:24])
            x += width
        c.setFillColorRGB(*COLORS["text"])

    def _draw_report_row(self, c, row: ReportRow, y: float, is_total: bool) -> None:
        if row.is_project:
            width = sum(w for _, w, _ in REPORT_COLUMNS)
            c.setFillColorRGB(*COLORS["project_row"])
            c.rect(self.margin, y - 4, width, self.row_height, fill=1, stroke=0)

        if is_total:
            c.setStrokeColorRGB(0.3, 0.3, 0.3)
            c.setLineWidth(0.5)
            c.line(
                self.margin,
                y + self.row_height - 4,
                self.margin + sum(w for _, w, _ in REPORT_COLUMNS),
                y + self.row_height - 4,
            )
        c.setFont("Helvetica-Bold" if is_total else "Helvetica", 9)

        values = [
            f"{row.client}:" if is_total else row.client,
            row.project or "",
            format_minutes(row.period_expect),
            format_minutes(row.period_actual),
            format_minutes(row.period_remain),
            format_minutes(row.day_expect),
            format_minutes(row.day_actual),
            format_minutes(row.day_remain),
            format_minutes(row.avg_remaining) if row.avg_remaining is not None else NOT_AVAILABLE,
        ]
        colors = {
            4: self._remain_color(row.period_remain),
            7: self._remain_color(row.day_remain),
        }
        self._draw_cells(c, REPORT_COLUMNS, values, y, colors)

    def _remain_color(self, minutes: int) -> tuple:
        if minutes < 0:
            return COLORS["behind"]
        if minutes > 0:
            return COLORS["ahead"]
        return COLORS["text"]

    def _draw_period_pages(self, c, report: Report) -> None:
        """Draw the per-period summary table."""
        header_height = 60
        rows = report.periods
        rows_per_page = self._rows_per_page(header_height)
        total_pages = (len(rows) + rows_per_page - 1) // rows_per_page

        for page in range(total_pages):
            self._draw_title(c, "Expected versus actual per period")
            y = self.page_height - self.margin - 50
            self._draw_header_row(c, PERIOD_COLUMNS, y)

            c.setFont("Helvetica", 9)
            for row in rows[page * rows_per_page : (page + 1) * rows_per_page]:
                y -= self.row_height
                values = [
                    str(row.period_start),
                    row.client,
                    row.project or "",
                    format_minutes(row.expected),
                    format_minutes(row.actual),
                    format_minutes(row.difference),
                ]
                self._draw_cells(c, PERIOD_COLUMNS, values, y, {5: self._remain_color(row.difference)})

            self._draw_page_number(c, page + 1, total_pages)
            c.showPage()

    def _draw_page_number(self, c, page_num: int, total_pages: int) -> None:
        c.setFont("Helvetica", 9)
        c.drawCentredString(
            self.page_width / 2,
            self.margin - 10,
            f"Page {page_num} of {total_pages}",
        )
