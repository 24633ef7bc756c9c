"""Distribution of expected hours across the days of a period.

The allocator turns a period's work-day rule into a per-day weight vector
and spreads a client's or project's expected minutes over it. All figures
are whole minutes; rounding remainders go to the earliest days first so
the per-day figures always add up exactly.
"""

from ontrack.domain.errors import ConfigError, ValidationErrorType
from ontrack.domain.models import (
    Period,
    Weekday,
    WorkDay,
    WorkDayHours,
    WorkDayRange,
)


def distribute(total: int, weights: list[int]) -> list[int]:
    """Split total minutes proportionally to weights.

    Each day gets the floor of its proportional share; the minutes left
    over go one at a time to the earliest days with positive weight.

    Args:
        total: Non-negative minutes to distribute.
        weights: Non-negative weight per day.

    Returns:
        Per-day minutes summing exactly to total.

    Raises:
        ValueError: If total is positive but no day has weight.
    """
    weight_sum = sum(weights)
    if weight_sum <= 0:
        if total == 0:
            return [0] * len(weights)
        raise ValueError(f"Cannot distribute {total} minutes over zero work days")

    shares = [total * w // weight_sum for w in weights]
    remainder = total - sum(shares)
    for i, weight in enumerate(weights):
        if remainder <= 0:
            break
        if weight > 0:
            shares[i] += 1
            remainder -= 1
    return shares


class WorkDayAllocator:
    """Allocates expected minutes to the days of a period.

    Two work-day forms are supported:
    - WorkDayRange: days from..to (inclusive) share the hours evenly.
    - WorkDayHours: listed days get literal hours, the rest share what is
      left of the period total.

    Example:
        >>> allocator = WorkDayAllocator()
        >>> allocator.allocate(period, 15 * 60)
        [180, 180, 180, 180, 180, 0, 0]
    """

    def resolve_offsets(self, work_day: WorkDay, period: Period) -> list[int]:
        """Normalize a weekday or literal offset to offsets in the period.

        A weekday resolves to every occurrence inside the period, which
        may be none for a period shorter than a week.

        Raises:
            ConfigError: If a literal offset does not fall inside the period.
        """
        if isinstance(work_day, Weekday):
            return work_day.offsets_in(period.start, period.length)
        if not 0 <= work_day < period.length:
            raise ConfigError.single(
                ValidationErrorType.WORK_DAY_OUTSIDE_PERIOD,
                f"Work day offset {work_day} is outside the {period.length}-day period",
                period_start=period.start,
            )
        return [work_day]

    def day_weights(self, period: Period) -> list[int]:
        """Per-day weights for a period.

        For a range, work days weigh 1 and other days 0. For explicit hours,
        the weights are the per-day minutes of the period's total workload.

        Raises:
            ConfigError: If the work-day rule is invalid for the period.
        """
        spec = period.work_days
        if isinstance(spec, WorkDayRange):
            weights = self._range_weights(period, spec)
        elif isinstance(spec, WorkDayHours):
            weights = self._explicit_weights(period, spec)
        else:
            raise TypeError(f"Unresolved or unknown work days: {spec!r}")

        if period.total_minutes > 0 and sum(weights) == 0:
            raise ConfigError.single(
                ValidationErrorType.NO_WORK_DAYS,
                f"No work days to take the expected {period.total_minutes} minutes",
                period_start=period.start,
            )
        return weights

    def range_offsets(self, period: Period, spec: WorkDayRange) -> set[int]:
        """Offsets covered by a range.

        Weekday ranges walk from one weekday to the other, wrapping past
        Sunday, and take every occurrence of each. Offset ranges are
        contiguous and must not run backwards.

        Raises:
            ConfigError: If the range mixes forms, runs backwards, or has an
                offset outside the period.
        """
        from_day, to_day = spec.from_day, spec.to_day
        if isinstance(from_day, Weekday) and isinstance(to_day, Weekday):
            offsets = set()
            day = from_day
            while True:
                offsets.update(self.resolve_offsets(day, period))
                if day == to_day:
                    return offsets
                day = day.next()

        if isinstance(from_day, Weekday) or isinstance(to_day, Weekday):
            raise ConfigError.single(
                ValidationErrorType.INVALID_INPUT,
                f"Work days from {from_day} to {to_day} mix a weekday and an offset",
                period_start=period.start,
            )

        first = self.resolve_offsets(from_day, period)[0]
        last = self.resolve_offsets(to_day, period)[0]
        if first > last:
            raise ConfigError.single(
                ValidationErrorType.WORK_DAY_RANGE_REVERSED,
                f"Work day offsets from {first} to {last} run backwards",
                period_start=period.start,
            )
        return set(range(first, last + 1))

    def _range_weights(self, period: Period, spec: WorkDayRange) -> list[int]:
        offsets = self.range_offsets(period, spec)
        return [1 if offset in offsets else 0 for offset in range(period.length)]

    def explicit_minutes(self, period: Period, spec: WorkDayHours) -> dict[int, int]:
        """Literal minutes per offset; every occurrence of a weekday gets its hours."""
        explicit: dict[int, int] = {}
        for work_day, minutes in spec.day_minutes.items():
            for offset in self.resolve_offsets(work_day, period):
                explicit[offset] = explicit.get(offset, 0) + minutes
        return explicit

    def _explicit_weights(self, period: Period, spec: WorkDayHours) -> list[int]:
        explicit = self.explicit_minutes(period, spec)
        unlisted = [i for i in range(period.length) if i not in explicit]
        leftover = max(period.total_minutes - sum(explicit.values()), 0)
        if leftover > 0 and not unlisted:
            raise ConfigError.single(
                ValidationErrorType.NO_WORK_DAYS,
                f"No unlisted days left to take the remaining {leftover} minutes",
                period_start=period.start,
            )

        shares = iter(distribute(leftover, [1] * len(unlisted)))
        return [
            explicit[offset] if offset in explicit else next(shares)
            for offset in range(period.length)
        ]

    def allocate(self, period: Period, minutes: int) -> list[int]:
        """Spread a client's or project's minutes over the period's days.

        Under explicit hours, a figure equal to the period total receives
        the literal day values exactly, which may exceed the figure when
        the literals do. Smaller figures get the same day shape, scaled.

        Args:
            period: A resolved period.
            minutes: Expected minutes for one client or project.

        Returns:
            Minutes per day, one entry per day of the period.
        """
        weights = self.day_weights(period)
        if isinstance(period.work_days, WorkDayRange):
            return distribute(minutes, weights)

        period_total = period.total_minutes
        if period_total == 0:
            return [0] * period.length
        weight_sum = sum(weights)
        if weight_sum == period_total:
            target = minutes
        else:
            # Round half up to the nearest minute.
            target = (2 * minutes * weight_sum + period_total) // (2 * period_total)
        return distribute(target, weights)

    def work_day_offsets(self, period: Period) -> list[int]:
        """Offsets of the days with positive weight."""
        return [i for i, w in enumerate(self.day_weights(period)) if w > 0]
