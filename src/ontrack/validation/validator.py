"""Validation of the expected-hours schedule.

This module is the single place where schedule constraints are checked.
Every schedule is validated before any report is computed; a schedule
with errors is rejected as a whole with a ConfigError.
"""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from ontrack.domain.errors import ConfigError, ValidationError, ValidationErrorType
from ontrack.domain.models import Period, WorkDayHours
from ontrack.scheduling.allocator import WorkDayAllocator


@dataclass
class ValidationResult:
    """Result of validating a schedule."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def raise_for_errors(self) -> None:
        """Raise a ConfigError if any error was found."""
        if not self.is_valid:
            raise ConfigError.from_errors(self.errors)


class ScheduleValidator:
    """Validates resolved periods against all schedule constraints.

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate(periods)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def __init__(self, allocator: Optional[WorkDayAllocator] = None):
        self.allocator = allocator or WorkDayAllocator()

    def validate(self, periods: list[Period]) -> ValidationResult:
        """Validate a complete schedule.

        Args:
            periods: Periods with defaults applied, in declared order.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        previous: Optional[Period] = None
        for period in periods:
            self._validate_period(period, result)
            if previous is not None and period.length and previous.length:
                self._validate_order(previous, period, result)
            previous = period

        for warning in result.warnings:
            logger.warning(warning)
        return result

    def validate_or_raise(self, periods: list[Period]) -> ValidationResult:
        """Validate and raise ConfigError on any error."""
        result = self.validate(periods)
        result.raise_for_errors()
        return result

    def _validate_order(
        self,
        previous: Period,
        period: Period,
        result: ValidationResult,
    ) -> None:
        """Periods must be in start order and must not overlap."""
        if period.start < previous.start:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.PERIOD_OUT_OF_ORDER,
                    message=f"Starts before the previous period ({previous.start})",
                    period_start=period.start,
                )
            )
        elif period.start < previous.end:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.PERIODS_OVERLAP,
                    message=(
                        f"Overlaps the previous period "
                        f"({previous.start} to {previous.last_day})"
                    ),
                    period_start=period.start,
                )
            )

    def _validate_period(self, period: Period, result: ValidationResult) -> None:
        """Check one period's length, hours, and work days."""
        if period.length is None or period.length <= 0:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_LENGTH,
                    message=f"Length must be a positive number of days, got {period.length}",
                    period_start=period.start,
                )
            )
            return

        self._validate_clients(period, result)
        self._validate_work_days(period, result)

    def _validate_clients(self, period: Period, result: ValidationResult) -> None:
        seen_clients = set()
        for client in period.clients:
            if client.name in seen_clients:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_CLIENT,
                        message="Client is listed more than once",
                        period_start=period.start,
                        client=client.name,
                    )
                )
            seen_clients.add(client.name)

            if client.minutes < 0 or any(p.minutes < 0 for p in client.projects):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.NEGATIVE_HOURS,
                        message="Expected hours must not be negative",
                        period_start=period.start,
                        client=client.name,
                    )
                )

            if client.project_minutes > client.minutes:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.PROJECTS_EXCEED_CLIENT,
                        message=(
                            f"Projects expect {client.project_minutes} minutes, "
                            f"more than the client's {client.minutes}"
                        ),
                        period_start=period.start,
                        client=client.name,
                        details={
                            "client_minutes": client.minutes,
                            "project_minutes": client.project_minutes,
                        },
                    )
                )

            project_names = [p.name for p in client.projects]
            for name in sorted({n for n in project_names if project_names.count(n) > 1}):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_PROJECT,
                        message=f"Project {name!r} is listed more than once",
                        period_start=period.start,
                        client=client.name,
                    )
                )

    def _validate_work_days(self, period: Period, result: ValidationResult) -> None:
        spec = period.work_days
        if isinstance(spec, WorkDayHours):
            if any(minutes < 0 for minutes in spec.day_minutes.values()):
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.NEGATIVE_HOURS,
                        message="Work day hours must not be negative",
                        period_start=period.start,
                    )
                )
                return

        try:
            self.allocator.day_weights(period)
        except ConfigError as e:
            for error in e.errors:
                result.add_error(error)
            return

        if isinstance(spec, WorkDayHours):
            explicit = sum(self.allocator.explicit_minutes(period, spec).values())
            if explicit > period.total_minutes:
                result.add_warning(
                    f"Period {period.start}: work day hours ({explicit} minutes) exceed "
                    f"the expected total ({period.total_minutes} minutes)"
                )
