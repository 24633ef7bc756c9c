"""Domain models for the hour tracking system.

This module contains the core data structures shared by the allocation,
rollover, and reporting code: the schedule of expected hours (periods,
clients, projects, work-day rules) and the recorded time entries.

All hour figures are stored as integer minutes.
"""

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Union

MINUTES_PER_HOUR = 60
DEFAULT_PERIOD_LENGTH = 7


def hours_to_minutes(hours: float) -> int:
    """Convert an hours figure from the schedule to whole minutes."""
    return int(round(hours * MINUTES_PER_HOUR))


class Weekday(Enum):
    """Day of the week, numbered like ``date.weekday()``."""

    MON = 0
    TUE = 1
    WED = 2
    THU = 3
    FRI = 4
    SAT = 5
    SUN = 6

    @classmethod
    def from_name(cls, name: str) -> "Weekday":
        """Parse a weekday from its short or full English name.

        Args:
            name: Name such as "mon", "Mon" or "monday".

        Raises:
            ValueError: If the name is not a weekday.
        """
        key = name.strip().lower()
        for weekday in cls:
            full = _WEEKDAY_NAMES[weekday]
            if key == full or key == full[:3]:
                return weekday
        raise ValueError(f"Unknown weekday: {name!r}")

    def first_offset(self, period_start: date) -> int:
        """Days from period_start to the first occurrence of this weekday."""
        return (self.value - period_start.weekday()) % 7

    def offsets_in(self, period_start: date, length: int) -> list[int]:
        """Offsets of every occurrence of this weekday in a period."""
        return list(range(self.first_offset(period_start), length, 7))

    def next(self) -> "Weekday":
        """The following weekday, wrapping from Sunday to Monday."""
        return Weekday((self.value + 1) % 7)

    def __str__(self) -> str:
        return self.name.capitalize()


_WEEKDAY_NAMES = {
    Weekday.MON: "monday",
    Weekday.TUE: "tuesday",
    Weekday.WED: "wednesday",
    Weekday.THU: "thursday",
    Weekday.FRI: "friday",
    Weekday.SAT: "saturday",
    Weekday.SUN: "sunday",
}

# A work day is named either by weekday or by literal offset from period start.
WorkDay = Union[Weekday, int]


@dataclass(frozen=True)
class WorkDayRange:
    """Inclusive range of work days sharing the period's hours evenly.

    Attributes:
        from_day: First work day (weekday or offset).
        to_day: Last work day (weekday or offset), inclusive.
    """

    from_day: WorkDay = Weekday.MON
    to_day: WorkDay = Weekday.FRI


@dataclass(frozen=True)
class WorkDayHours:
    """Explicit hours for some days of a period.

    Days not listed share whatever is left of the period's hours.

    Attributes:
        day_minutes: Mapping of work day to its literal minutes.
    """

    day_minutes: dict[WorkDay, int] = field(default_factory=dict)

    @classmethod
    def from_hours(cls, day_hours: dict[WorkDay, float]) -> "WorkDayHours":
        """Create explicit work days from an hours mapping."""
        return cls(
            day_minutes={day: hours_to_minutes(h) for day, h in day_hours.items()}
        )


WorkDaySpec = Union[WorkDayRange, WorkDayHours]


@dataclass(frozen=True)
class ProjectHours:
    """Expected minutes for one project of a client."""

    name: str
    minutes: int


@dataclass(frozen=True)
class ClientHours:
    """Expected minutes for a client within a period.

    Project minutes are part of the client's minutes, not added to them.

    Attributes:
        name: Client name as recorded in the time tracker.
        minutes: Total expected minutes for the client.
        projects: Ordered project breakdown.
    """

    name: str
    minutes: int
    projects: list[ProjectHours] = field(default_factory=list)

    @classmethod
    def from_hours(
        cls,
        name: str,
        hours: float,
        projects: Optional[dict[str, float]] = None,
    ) -> "ClientHours":
        """Create client hours from hour figures.

        Args:
            name: Client name.
            hours: Expected hours for the client.
            projects: Optional mapping of project name to expected hours.
        """
        return cls(
            name=name,
            minutes=hours_to_minutes(hours),
            projects=[
                ProjectHours(project, hours_to_minutes(h))
                for project, h in (projects or {}).items()
            ],
        )

    @property
    def project_minutes(self) -> int:
        """Sum of all project minutes."""
        return sum(p.minutes for p in self.projects)


@dataclass(frozen=True)
class Defaults:
    """Schedule-wide fallbacks for fields a period leaves out."""

    period_length: int = DEFAULT_PERIOD_LENGTH
    work_days: WorkDaySpec = field(default_factory=WorkDayRange)


@dataclass(frozen=True)
class Period:
    """A run of consecutive calendar days with its own expected hours.

    Attributes:
        start: First day of the period.
        clients: Expected hours per client, in declaration order.
        length: Number of days; None until resolved against Defaults.
        work_days: Work-day rule; None until resolved against Defaults.
    """

    start: date
    clients: list[ClientHours] = field(default_factory=list)
    length: Optional[int] = None
    work_days: Optional[WorkDaySpec] = None

    def resolve(self, defaults: Defaults) -> "Period":
        """Return a copy with missing fields taken from defaults."""
        return replace(
            self,
            length=self.length if self.length is not None else defaults.period_length,
            work_days=self.work_days if self.work_days is not None else defaults.work_days,
        )

    @property
    def is_resolved(self) -> bool:
        return self.length is not None and self.work_days is not None

    @property
    def end(self) -> date:
        """First day after the period."""
        return self.start + timedelta(days=self.length)

    @property
    def last_day(self) -> date:
        return self.end - timedelta(days=1)

    @property
    def dates(self) -> list[date]:
        """All dates in the period."""
        return [self.start + timedelta(days=i) for i in range(self.length)]

    @property
    def total_minutes(self) -> int:
        """Expected minutes over all clients."""
        return sum(c.minutes for c in self.clients)

    def contains(self, day: date) -> bool:
        """Check if a date falls within this period."""
        return self.start <= day < self.end

    def offset_of(self, day: date) -> int:
        """Days from the period start to day."""
        return (day - self.start).days

    def get_client(self, name: str) -> Optional[ClientHours]:
        for client in self.clients:
            if client.name == name:
                return client
        return None

    def minutes_for(self, bucket: "Bucket") -> int:
        """Expected minutes for a bucket; 0 when it is not in this period."""
        client = self.get_client(bucket.client)
        if client is None:
            return 0
        if bucket.project is None:
            return client.minutes
        for project in client.projects:
            if project.name == bucket.project:
                return project.minutes
        return 0

    def buckets(self) -> list["Bucket"]:
        """Buckets declared in this period, each client before its projects."""
        result = []
        for client in self.clients:
            result.append(Bucket(client.name))
            result.extend(Bucket(client.name, p.name) for p in client.projects)
        return result


@dataclass(frozen=True)
class ScheduleConfig:
    """A parsed schedule: defaults plus periods in start order."""

    periods: list[Period] = field(default_factory=list)
    defaults: Defaults = field(default_factory=Defaults)

    def resolved_periods(self) -> list[Period]:
        """Periods with defaults applied."""
        return [p.resolve(self.defaults) for p in self.periods]


@dataclass(frozen=True)
class Bucket:
    """A tracked row: a client, or one project of a client."""

    client: str
    project: Optional[str] = None

    @property
    def is_project(self) -> bool:
        return self.project is not None

    @property
    def client_bucket(self) -> "Bucket":
        """The client-level bucket this bucket rolls up into."""
        return Bucket(self.client)

    def __str__(self) -> str:
        if self.project is None:
            return self.client
        return f"{self.client}/{self.project}"


@dataclass(frozen=True)
class TimeEntry:
    """A recorded work duration on one local calendar date.

    Attributes:
        client: Client name, if the entry has one.
        project: Project name, if the entry has one.
        entry_date: Local date the time was worked on.
        duration: Time worked.
        description: Free text from the time tracker.
    """

    client: Optional[str]
    project: Optional[str]
    entry_date: date
    duration: timedelta
    description: str = ""

    @classmethod
    def from_hours(
        cls,
        client: Optional[str],
        project: Optional[str],
        entry_date: date,
        hours: float,
    ) -> "TimeEntry":
        """Create an entry from an hours figure."""
        return cls(client, project, entry_date, timedelta(hours=hours))

    def matches(self, bucket: Bucket) -> bool:
        """Check if this entry counts toward a bucket."""
        if self.client != bucket.client:
            return False
        return bucket.project is None or self.project == bucket.project
