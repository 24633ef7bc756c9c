"""Toggl Track API client for fetching recorded time.

This module turns Toggl time entries into TimeEntry records on local
calendar dates. Entries that run across midnight are split per day, and
an entry that is still running is counted up to ``now``.

API: Toggl Track v9, HTTP basic auth with ``(api_token, "api_token")``.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Optional

import httpx
from loguru import logger

from ontrack.domain.models import TimeEntry

TOGGL_API_URL = "https://api.track.toggl.com/api/v9"
DEFAULT_TIMEOUT = 30.0


class TogglError(Exception):
    """Fetching or decoding Toggl data failed."""


def parse_timestamp(value: str) -> datetime:
    """Parse a Toggl ISO 8601 timestamp (UTC, possibly with a trailing Z)."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def split_by_day(start: datetime, stop: datetime) -> list[tuple[date, timedelta]]:
    """Split an interval into per-day durations at local midnight.

    Args:
        start: Interval start, in the local timezone.
        stop: Interval end, in the same timezone.

    Returns:
        (date, duration) pairs in chronological order; empty when stop
        is not after start.
    """
    segments = []
    current = start
    while current.date() < stop.date():
        midnight = datetime.combine(
            current.date() + timedelta(days=1), time.min, tzinfo=current.tzinfo
        )
        segments.append((current.date(), midnight - current))
        current = midnight
    if stop > current:
        segments.append((current.date(), stop - current))
    return segments


class TogglClient:
    """Client for the Toggl Track API.

    Example:
        >>> client = TogglClient(api_token)
        >>> entries = client.fetch_entries(date(2024, 1, 1), datetime.now().astimezone())
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = TOGGL_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_token: Toggl API token (from the Toggl profile page).
            base_url: API root, overridable for testing.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        if not api_token:
            raise TogglError("A Toggl API token is required")
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            auth=(self.api_token, "api_token"),
            timeout=self.timeout,
            transport=self.transport,
        )

    def _get(self, client: httpx.Client, path: str, params: Optional[dict] = None) -> Any:
        try:
            response = client.get(path, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise TogglError(
                f"Toggl request {path} failed with status {e.response.status_code}"
            ) from e
        except (httpx.RequestError, ValueError) as e:
            raise TogglError(f"Toggl request {path} failed: {e}") from e
        logger.trace("GET {} -> {}", path, data)
        return data if data is not None else []

    def fetch_entries(
        self,
        start: date,
        now: datetime,
        tz: Optional[tzinfo] = None,
    ) -> list[TimeEntry]:
        """Fetch time entries from start through now as local-date records.

        Args:
            start: First local date to include.
            now: Current time (timezone aware); running entries end here.
            tz: Local timezone; defaults to the timezone of now.

        Returns:
            TimeEntry records, one per entry per local day.

        Raises:
            TogglError: On HTTP or payload errors.
        """
        tz = tz or now.tzinfo
        range_start = datetime.combine(start, time.min, tzinfo=tz)
        params = {
            "start_date": range_start.isoformat(),
            "end_date": (now + timedelta(seconds=1)).isoformat(),
        }

        with self._client() as client:
            clients = {c["id"]: c["name"] for c in self._get(client, "/me/clients")}
            projects = {p["id"]: p for p in self._get(client, "/me/projects")}
            raw_entries = self._get(client, "/me/time_entries", params=params)

        logger.debug(
            "Fetched {} time entries, {} projects, {} clients",
            len(raw_entries),
            len(projects),
            len(clients),
        )

        entries = []
        for raw in raw_entries:
            entries.extend(self._convert(raw, clients, projects, now, tz))
        return [e for e in entries if e.entry_date >= start]

    def _convert(
        self,
        raw: dict,
        clients: dict[int, str],
        projects: dict[int, dict],
        now: datetime,
        tz: tzinfo,
    ) -> list[TimeEntry]:
        """Resolve names and split one raw Toggl entry by local day."""
        try:
            start = parse_timestamp(raw["start"]).astimezone(tz)
            stop = parse_timestamp(raw["stop"]).astimezone(tz) if raw.get("stop") else now.astimezone(tz)
        except (KeyError, TypeError, ValueError) as e:
            raise TogglError(f"Malformed time entry {raw!r}: {e}") from e

        project = projects.get(raw.get("project_id"))
        project_name = project["name"] if project else None
        client_name = clients.get(project.get("client_id")) if project else None

        return [
            TimeEntry(
                client=client_name,
                project=project_name,
                entry_date=day,
                duration=duration,
                description=raw.get("description") or "",
            )
            for day, duration in split_by_day(start, stop)
        ]
