"""Validation module for verifying schedule correctness."""

from ontrack.validation.validator import ScheduleValidator, ValidationResult

__all__ = [
    "ScheduleValidator",
    "ValidationResult",
]
