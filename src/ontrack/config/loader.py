"""Schedule loader.

Reads the YAML schedule of expected hours and parses it into the typed
models of ``ontrack.domain.models``. Keys are kebab-case and unknown keys
are rejected, so typos surface as errors instead of silent defaults.

Failure modes
-------------
* Missing or unreadable file  -> ``OSError`` propagates.
* Malformed YAML or unexpected structure  -> ``ConfigError``.
"""

from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from loguru import logger

from ontrack.domain.errors import ConfigError, ValidationErrorType
from ontrack.domain.models import (
    ClientHours,
    Defaults,
    Period,
    ProjectHours,
    ScheduleConfig,
    Weekday,
    WorkDay,
    WorkDayHours,
    WorkDayRange,
    WorkDaySpec,
    hours_to_minutes,
)

DEFAULT_INPUT_FILE = "toggl-ontrack.yaml"

_TOP_KEYS = {"defaults", "periods"}
_DEFAULTS_KEYS = {"period-length", "work-days"}
_PERIOD_KEYS = {"start", "length", "work-days", "clients"}
_CLIENT_KEYS = {"expected-hours", "projects"}
_PROJECT_KEYS = {"expected-hours"}
_RANGE_KEYS = {"from", "to"}


def _invalid(message: str) -> ConfigError:
    return ConfigError.single(ValidationErrorType.INVALID_INPUT, message)


def load_schedule(path: Union[str, Path]) -> ScheduleConfig:
    """Load and parse a YAML schedule file.

    Args:
        path: Path to the schedule file.

    Raises:
        OSError: If the file cannot be read.
        ConfigError: If the file is not a valid schedule.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise _invalid(f"Could not parse input file {path}: {e}") from e
    config = parse_schedule(data)
    logger.debug("Loaded schedule from {}: {}", path, config)
    return config


def parse_schedule(data: Any) -> ScheduleConfig:
    """Parse the already-decoded YAML document into a ScheduleConfig."""
    data = _mapping(data, "schedule", _TOP_KEYS)
    if "periods" not in data:
        raise _invalid("schedule: missing 'periods'")

    defaults = parse_defaults(data.get("defaults") or {})
    periods_data = data["periods"]
    if not isinstance(periods_data, list):
        raise _invalid("periods: expected a list")
    periods = [parse_period(p, f"periods[{i}]") for i, p in enumerate(periods_data)]
    return ScheduleConfig(periods=periods, defaults=defaults)


def parse_defaults(data: Any) -> Defaults:
    data = _mapping(data, "defaults", _DEFAULTS_KEYS)
    defaults = Defaults()
    if "period-length" in data:
        defaults = replace(
            defaults,
            period_length=_integer(data["period-length"], "defaults.period-length"),
        )
    if "work-days" in data:
        defaults = replace(
            defaults,
            work_days=parse_work_days(data["work-days"], "defaults.work-days"),
        )
    return defaults


def parse_period(data: Any, where: str) -> Period:
    data = _mapping(data, where, _PERIOD_KEYS)
    for key in ("start", "clients"):
        if key not in data:
            raise _invalid(f"{where}: missing '{key}'")

    clients_data = _mapping(data["clients"] or {}, f"{where}.clients")
    return Period(
        start=_date(data["start"], f"{where}.start"),
        clients=[
            parse_client(name, client, f"{where}.clients.{name}")
            for name, client in clients_data.items()
        ],
        length=_integer(data["length"], f"{where}.length") if "length" in data else None,
        work_days=(
            parse_work_days(data["work-days"], f"{where}.work-days")
            if "work-days" in data
            else None
        ),
    )


def parse_client(name: Any, data: Any, where: str) -> ClientHours:
    data = _mapping(data, where, _CLIENT_KEYS)
    if "expected-hours" not in data:
        raise _invalid(f"{where}: missing 'expected-hours'")

    projects = []
    projects_data = _mapping(data.get("projects") or {}, f"{where}.projects")
    for project_name, project in projects_data.items():
        project_where = f"{where}.projects.{project_name}"
        project = _mapping(project, project_where, _PROJECT_KEYS)
        if "expected-hours" not in project:
            raise _invalid(f"{project_where}: missing 'expected-hours'")
        projects.append(
            ProjectHours(
                name=str(project_name),
                minutes=_minutes(project["expected-hours"], f"{project_where}.expected-hours"),
            )
        )

    return ClientHours(
        name=str(name),
        minutes=_minutes(data["expected-hours"], f"{where}.expected-hours"),
        projects=projects,
    )


def parse_work_days(data: Any, where: str) -> WorkDaySpec:
    """Parse either the {from, to} range form or the explicit day-hours form."""
    data = _mapping(data, where)
    if set(data) == _RANGE_KEYS:
        return WorkDayRange(
            from_day=parse_work_day(data["from"], f"{where}.from"),
            to_day=parse_work_day(data["to"], f"{where}.to"),
        )
    if set(data) & _RANGE_KEYS:
        raise _invalid(f"{where}: a range needs both 'from' and 'to' and nothing else")

    day_minutes: dict[WorkDay, int] = {}
    for key, hours in data.items():
        day = parse_work_day(key, f"{where}.{key}")
        day_minutes[day] = day_minutes.get(day, 0) + _minutes(hours, f"{where}.{key}")
    return WorkDayHours(day_minutes=day_minutes)


def parse_work_day(value: Any, where: str) -> WorkDay:
    """A weekday name or a literal day offset."""
    if isinstance(value, bool):
        raise _invalid(f"{where}: expected a weekday or day offset, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        try:
            return Weekday.from_name(text)
        except ValueError as e:
            raise _invalid(f"{where}: {e}") from e
    raise _invalid(f"{where}: expected a weekday or day offset, got {value!r}")


def _mapping(data: Any, where: str, allowed: Optional[set[str]] = None) -> dict:
    if not isinstance(data, dict):
        raise _invalid(f"{where}: expected a mapping, got {type(data).__name__}")
    if allowed is not None:
        unknown = sorted(str(k) for k in data if k not in allowed)
        if unknown:
            raise _invalid(f"{where}: unknown keys {', '.join(unknown)}")
    return data


def _integer(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _invalid(f"{where}: expected an integer, got {value!r}")
    return value


def _minutes(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _invalid(f"{where}: expected a number of hours, got {value!r}")
    return hours_to_minutes(value)


def _date(value: Any, where: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise _invalid(f"{where}: {e}") from e
    raise _invalid(f"{where}: expected a date, got {value!r}")
