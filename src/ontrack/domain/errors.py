"""Error types for schedule configuration problems."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


class ValidationErrorType(Enum):
    """Types of schedule configuration errors."""

    INVALID_LENGTH = "invalid_length"
    PERIOD_OUT_OF_ORDER = "period_out_of_order"
    PERIODS_OVERLAP = "periods_overlap"
    NEGATIVE_HOURS = "negative_hours"
    PROJECTS_EXCEED_CLIENT = "projects_exceed_client"
    DUPLICATE_CLIENT = "duplicate_client"
    DUPLICATE_PROJECT = "duplicate_project"
    WORK_DAY_OUTSIDE_PERIOD = "work_day_outside_period"
    WORK_DAY_RANGE_REVERSED = "work_day_range_reversed"
    NO_WORK_DAYS = "no_work_days"
    INVALID_INPUT = "invalid_input"


@dataclass
class ValidationError:
    """A single schedule configuration error."""

    error_type: ValidationErrorType
    message: str
    period_start: Optional[date] = None
    client: Optional[str] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.period_start:
            parts.append(f"Period {self.period_start}:")
        if self.client:
            parts.append(f"Client {self.client}:")
        parts.append(self.message)
        return " ".join(parts)


class ConfigError(Exception):
    """The schedule cannot be used to compute a report.

    Attributes:
        errors: The individual problems found.
    """

    def __init__(self, message: str, errors: Optional[list[ValidationError]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> "ConfigError":
        """Create a ConfigError summarizing a list of validation errors."""
        lines = [f"Invalid schedule ({len(errors)} errors):"]
        lines.extend(f"  - {error}" for error in errors)
        return cls("\n".join(lines), errors)

    @classmethod
    def single(
        cls,
        error_type: ValidationErrorType,
        message: str,
        period_start: Optional[date] = None,
        client: Optional[str] = None,
    ) -> "ConfigError":
        """Create a ConfigError for one problem."""
        error = ValidationError(
            error_type=error_type,
            message=message,
            period_start=period_start,
            client=client,
        )
        return cls(str(error), [error])
