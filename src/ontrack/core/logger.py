"""Logger configuration for toggl-ontrack."""

import sys

from loguru import logger

VERBOSITY_LEVELS = ["off", "error", "warning", "info", "debug", "trace"]


def setup_logger(verbosity: str = "warning") -> None:
    """Configure the loguru logger with a single stderr sink.

    Args:
        verbosity: One of off, error, warning, info, debug, trace.
    """
    # Remove default handler
    logger.remove()

    if verbosity == "off":
        return

    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=verbosity.upper(),
        colorize=True,
    )
