"""Loading of the expected-hours schedule."""

from ontrack.config.loader import DEFAULT_INPUT_FILE, load_schedule, parse_schedule

__all__ = [
    "DEFAULT_INPUT_FILE",
    "load_schedule",
    "parse_schedule",
]
