"""Output generation for hour reports (console, PDF)."""

from ontrack.output.console import ConsoleRenderer, format_minutes
from ontrack.output.pdf_generator import PDFGenerator

__all__ = [
    "ConsoleRenderer",
    "PDFGenerator",
    "format_minutes",
]
