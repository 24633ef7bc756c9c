"""Process-wide setup shared by the command line tools."""

from ontrack.core.logger import VERBOSITY_LEVELS, setup_logger

__all__ = [
    "VERBOSITY_LEVELS",
    "setup_logger",
]
