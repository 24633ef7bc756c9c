"""Summation of recorded time per client and project."""

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from ontrack.domain.models import Bucket, Period, TimeEntry


def duration_minutes(duration: timedelta) -> int:
    """Round a duration to whole minutes."""
    return int(round(duration.total_seconds() / 60))


class ActualAggregator:
    """Sums recorded durations per bucket for days and date ranges.

    Durations are summed exactly per client, project and day, then rounded
    to whole minutes once. A client's minutes are the sum of its rounded
    project and no-project minutes, and a range total is always the sum of
    its day totals.

    Example:
        >>> aggregator = ActualAggregator(entries)
        >>> aggregator.range_minutes(Bucket("Acme"), date(2024, 1, 15), date(2024, 1, 17))
        540
    """

    def __init__(self, entries: Iterable[TimeEntry]):
        self.entries = list(entries)
        # Leaves are (client, project or None) per day; a client row is the
        # sum of its rounded leaves.
        leaves: dict[tuple[Bucket, date], timedelta] = defaultdict(timedelta)
        for entry in self.entries:
            if entry.client is None:
                continue
            leaves[(Bucket(entry.client, entry.project), entry.entry_date)] += entry.duration

        self._day_minutes: dict[tuple[Bucket, date], int] = defaultdict(int)
        for (bucket, day), total in leaves.items():
            minutes = duration_minutes(total)
            if bucket.is_project:
                self._day_minutes[(bucket, day)] += minutes
            self._day_minutes[(bucket.client_bucket, day)] += minutes

    def day_minutes(self, bucket: Bucket, day: date) -> int:
        """Recorded minutes for a bucket on one day."""
        return self._day_minutes.get((bucket, day), 0)

    def range_minutes(self, bucket: Bucket, start: date, end: date) -> int:
        """Recorded minutes for a bucket over the closed range [start, end]."""
        total = 0
        day = start
        while day <= end:
            total += self.day_minutes(bucket, day)
            day += timedelta(days=1)
        return total

    def clients(self) -> list[str]:
        """Client names seen in the entries, in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.entries:
            if entry.client is not None:
                seen.setdefault(entry.client, None)
        return list(seen)

    def unmatched_entries(self, periods: list[Period]) -> list[TimeEntry]:
        """Entries that no configured client covers on their date.

        An entry is unmatched when it has no client, falls outside every
        period, or its client is not configured in the period containing
        its date.
        """
        unmatched = []
        for entry in self.entries:
            period = _period_containing(periods, entry.entry_date)
            if (
                entry.client is None
                or period is None
                or period.get_client(entry.client) is None
            ):
                unmatched.append(entry)
        return unmatched


def _period_containing(periods: list[Period], day: date) -> Optional[Period]:
    for period in periods:
        if period.contains(day):
            return period
    return None
