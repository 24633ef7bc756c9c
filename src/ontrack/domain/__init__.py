"""Domain models for expected hours and recorded time."""

from ontrack.domain.errors import ConfigError, ValidationError, ValidationErrorType
from ontrack.domain.models import (
    Bucket,
    ClientHours,
    Defaults,
    Period,
    ProjectHours,
    ScheduleConfig,
    TimeEntry,
    Weekday,
    WorkDay,
    WorkDayHours,
    WorkDayRange,
    WorkDaySpec,
    hours_to_minutes,
)

__all__ = [
    # Schedule
    "ClientHours",
    "Defaults",
    "Period",
    "ProjectHours",
    "ScheduleConfig",
    # Work days
    "Weekday",
    "WorkDay",
    "WorkDayHours",
    "WorkDayRange",
    "WorkDaySpec",
    # Tracking
    "Bucket",
    "TimeEntry",
    "hours_to_minutes",
    # Errors
    "ConfigError",
    "ValidationError",
    "ValidationErrorType",
]
