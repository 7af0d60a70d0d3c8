# Project: aemet-climate
# Owner: GreenUnicorn
"""
aggregator.py — Incremental monthly/yearly statistics over daily records.

Records are fed one at a time, in any order, and grouped by a key function
("YYYY-MM" or "YYYY"). Each group keeps a running sum, count and
max/min-with-date per field, so no group ever needs its records kept in
memory or sorted.

Both the monthly and the yearly tables are produced by the same
GroupAggregator class; only the key function differs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date

from aemet_climate.records import NUMERIC_FIELDS, DailyRecord

TRACKED_FIELDS = tuple(NUMERIC_FIELDS)  # tmed, tmin, tmax, prec, velmedia, racha


class FieldTracker:
    """Running sum/count and extremes for one numeric field of one group."""

    def __init__(self, name: str):
        self.name = name
        self.total = 0.0
        self.count = 0
        self.max_value: float | None = None
        self.max_date: date | None = None
        self.min_value: float | None = None
        self.min_date: date | None = None

    def add(self, value: float | None, day: date) -> None:
        """Fold one observation in. None is ignored entirely."""
        if value is None:
            return
        self.total += value
        self.count += 1
        # Strict comparisons: on ties the first-seen date is kept.
        if self.max_value is None or value > self.max_value:
            self.max_value = value
            self.max_date = day
        if self.min_value is None or value < self.min_value:
            self.min_value = value
            self.min_date = day

    @property
    def average(self) -> float | None:
        if self.count == 0:
            return None
        return round(self.total / self.count, 2)

    def as_row(self) -> dict:
        return {
            f"avg_{self.name}":      self.average,
            f"max_{self.name}":      self.max_value,
            f"max_{self.name}_date": self.max_date,
            f"min_{self.name}":      self.min_value,
            f"min_{self.name}_date": self.min_date,
        }


class GroupAggregate:
    """The running state of a single group (one month or one year)."""

    def __init__(self, key: str, fields: tuple[str, ...] = TRACKED_FIELDS):
        self.key = key
        self.days = 0
        self.trackers = {name: FieldTracker(name) for name in fields}

    def add(self, record: DailyRecord) -> None:
        observed = False
        for name, tracker in self.trackers.items():
            value = record.value(name)
            if value is not None:
                tracker.add(value, record.date)
                observed = True
        if observed:
            self.days += 1

    def as_row(self) -> dict:
        row = {"group": self.key, "days": self.days}
        for tracker in self.trackers.values():
            row.update(tracker.as_row())
        return row


def monthly_key(day) -> str | None:
    """Return 'YYYY-MM' for a date, or None for anything that is not a date."""
    if not isinstance(day, date):
        return None
    return f"{day.year:04d}-{day.month:02d}"


def yearly_key(day) -> str | None:
    """Return 'YYYY' for a date, or None for anything that is not a date."""
    if not isinstance(day, date):
        return None
    return f"{day.year:04d}"


class GroupAggregator:
    """Group daily records by key_fn(record.date) and track statistics per group.

    Example:
        >>> agg = GroupAggregator(yearly_key)
        >>> for r in records:
        ...     agg.process_record(r)
        >>> agg.get_results()  # [{'group': '1972', 'avg_tmax': 24.3, ...}, ...]
    """

    def __init__(
        self,
        key_fn: Callable[[date], str | None],
        fields: tuple[str, ...] = TRACKED_FIELDS,
    ):
        self.key_fn = key_fn
        self.fields = fields
        self._groups: dict[str, GroupAggregate] = {}

    def process_record(self, record: DailyRecord) -> None:
        """Update (or lazily create) the group the record belongs to."""
        key = self.key_fn(getattr(record, "date", None))
        if key is None:
            return
        group = self._groups.get(key)
        if group is None:
            group = GroupAggregate(key, self.fields)
            self._groups[key] = group
        group.add(record)

    def get_results(self) -> list[dict]:
        """Return one finalized row per group, sorted by group key.

        Read-only: calling it again (or after feeding more records) never
        alters the running state.
        """
        return [self._groups[key].as_row() for key in sorted(self._groups)]

    def __len__(self) -> int:
        return len(self._groups)


def monthly_aggregator() -> GroupAggregator:
    return GroupAggregator(monthly_key)


def yearly_aggregator() -> GroupAggregator:
    return GroupAggregator(yearly_key)


def aggregate(
    records: Iterable[DailyRecord],
    key_fn: Callable[[date], str | None],
) -> list[dict]:
    """Batch mode: run a fresh GroupAggregator over a list of records."""
    aggregator = GroupAggregator(key_fn)
    for record in records:
        aggregator.process_record(record)
    return aggregator.get_results()
