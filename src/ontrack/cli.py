"""Command-line interface for keeping work hours on track using Toggl data."""

import argparse
import os
import sys
from datetime import date, datetime, time
from typing import Optional

from loguru import logger

from ontrack.config.loader import DEFAULT_INPUT_FILE, load_schedule
from ontrack.core.logger import VERBOSITY_LEVELS, setup_logger
from ontrack.domain.errors import ConfigError
from ontrack.domain.models import ScheduleConfig
from ontrack.integrations.toggl import TogglClient, TogglError
from ontrack.output.console import ConsoleRenderer
from ontrack.output.pdf_generator import PDFGenerator
from ontrack.scheduling.actuals import ActualAggregator
from ontrack.tracker import HoursTracker


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser, with environment fallbacks."""
    parser = argparse.ArgumentParser(
        prog="toggl-ontrack",
        description="Keep work hours on track using Toggl data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                            Report using ./toggl-ontrack.yaml
  %(prog)s -i hours.yaml -p           Also show the per-period table
  %(prog)s --strict                   Fail on unmatched time entries
  %(prog)s -o ontrack.pdf             Also write the report as PDF
  %(prog)s --as-of 2024-01-17         Report as of a past date
        """,
    )
    parser.add_argument(
        "--api-token",
        default=os.environ.get("TOGGL_API_TOKEN"),
        help="Toggl API token (default: $TOGGL_API_TOKEN)",
    )
    parser.add_argument(
        "--input-file", "-i",
        default=os.environ.get("TOGGL_ONTRACK_FILE", DEFAULT_INPUT_FILE),
        help=f"File with expected hours per period/client/project "
             f"(default: $TOGGL_ONTRACK_FILE or {DEFAULT_INPUT_FILE})",
    )
    parser.add_argument(
        "--strict", "-s",
        action="store_true",
        help="Fail with an error if any time entry has warnings",
    )
    parser.add_argument(
        "--show-periods", "-p",
        action="store_true",
        help="Show the per-period hours table in addition to totals",
    )
    parser.add_argument(
        "--verbosity", "-v",
        default="warning",
        choices=VERBOSITY_LEVELS,
        help="Log verbosity level (default: warning)",
    )
    parser.add_argument(
        "--output", "-o",
        help="Also write the report to this PDF file",
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        help="Report date in YYYY-MM-DD (default: today)",
    )
    return parser


def report_time(as_of: Optional[date], now: datetime) -> datetime:
    """The moment to report at: now, or the end of an earlier as-of date."""
    if as_of is not None and as_of > now.date():
        logger.warning("Report date {} is in the future, reporting as of today", as_of)
        return now
    if as_of is None or as_of == now.date():
        return now
    return datetime.combine(as_of, time.max, tzinfo=now.tzinfo)


def warn_unmatched(config: ScheduleConfig, actuals: ActualAggregator) -> int:
    """Log a warning per entry no configured client/period covers."""
    unmatched = actuals.unmatched_entries(config.resolved_periods())
    for entry in unmatched:
        if entry.client is None:
            logger.warning("Time entry has no client: {}", entry)
        else:
            logger.warning("No expected client/period matched: {}", entry)
    return len(unmatched)


def run_report(args: argparse.Namespace) -> int:
    """Load the schedule, fetch entries, compute and print the report."""
    if not args.api_token:
        logger.error("No Toggl API token given (use --api-token or TOGGL_API_TOKEN)")
        return 1

    config = load_schedule(args.input_file)
    tracker = HoursTracker()
    tracker.validator.validate_or_raise(config.resolved_periods())

    now = report_time(args.as_of, datetime.now().astimezone())
    as_of = now.date()

    starts = [p.start for p in config.periods]
    fetch_start = min(starts) if starts else as_of
    entries = TogglClient(args.api_token).fetch_entries(fetch_start, now)
    logger.debug("Time entries: {}", entries)

    warnings = warn_unmatched(config, ActualAggregator(entries))
    if args.strict and warnings:
        logger.error("Strict mode enabled ({} warnings above)", warnings)
        return 1

    report = tracker.compute_report(config, entries, as_of)

    renderer = ConsoleRenderer()
    if args.show_periods:
        renderer.render_periods(report)
    renderer.render_report(report)

    if args.output:
        PDFGenerator().generate(report, args.output, include_periods=args.show_periods)
        logger.info("Wrote PDF report to {}", args.output)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(args.verbosity)

    try:
        return run_report(args)
    except ConfigError as e:
        logger.error("{}", e)
    except TogglError as e:
        logger.error("Could not get time entries from Toggl: {}", e)
    except OSError as e:
        logger.error("Could not read input file: {}", e)
    return 1


if __name__ == "__main__":
    sys.exit(main())
