# Project: aemet-climate
# Owner: GreenUnicorn
"""
heatwaves.py — Percentile-based heatwave detection.

A heatwave is a run of at least HEATWAVE_MIN_DAYS records whose tmax is
strictly above the 95th percentile of tmax over a reference period (the
first REFERENCE_YEARS years present in the data).

"Consecutive" means consecutive in the record sequence, not in the calendar:
a missing day in the source data does not break a run, only a record at or
below the threshold (or with no tmax) does.
"""

from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from aemet_climate.decades import robust_mean, rollup_by_decade
from aemet_climate.records import DailyRecord

HEATWAVE_MIN_DAYS = 3
REFERENCE_YEARS = 30
PERCENTILE = 0.95


@dataclass
class HeatwaveEvent:
    """A detected heatwave (start and end are both included)."""

    records: list[DailyRecord] = field(default_factory=list)

    @property
    def start(self) -> date:
        return self.records[0].date

    @property
    def end(self) -> date:
        return self.records[-1].date

    @property
    def length(self) -> int:
        return len(self.records)

    @property
    def year(self) -> int:
        return self.start.year


def round_half_up(value: float) -> int:
    """Round to the nearest whole number, .5 going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def percentile_threshold(values: list[float], percentile: float = PERCENTILE) -> float | None:
    """Nearest-rank percentile: sorted(values)[floor(percentile * N)].

    No interpolation, so the same inputs always give the same threshold.
    Returns None for an empty list.
    """
    if not values:
        return None
    ordered = sorted(values)
    index = min(math.floor(percentile * len(ordered)), len(ordered) - 1)
    return ordered[index]


def reference_threshold(records: list[DailyRecord], years: int = REFERENCE_YEARS) -> float | None:
    """Threshold from the tmax values of the first `years` years in records.

    With fewer years of data, all the available years are used.
    """
    if not records:
        return None
    first_year = min(r.date.year for r in records)
    last_reference_year = first_year + years - 1
    values = [
        r.max_temp for r in records
        if r.date.year <= last_reference_year and r.max_temp is not None
    ]
    return percentile_threshold(values)


def detect_heatwaves(
    records: list[DailyRecord],
    threshold: float,
    min_days: int = HEATWAVE_MIN_DAYS,
) -> list[HeatwaveEvent]:
    """Scan date-ordered records for runs of tmax > threshold.

    Args:
        records: Records sorted by date.
        threshold: tmax must be strictly greater than this.
        min_days: Shortest run that counts as a heatwave.

    Returns:
        Heatwave events in chronological order.
    """
    events = []
    streak: list[DailyRecord] = []
    for r in records:
        if r.max_temp is not None and r.max_temp > threshold:
            streak.append(r)
            continue
        if len(streak) >= min_days:
            events.append(HeatwaveEvent(streak))
        streak = []
    if len(streak) >= min_days:
        events.append(HeatwaveEvent(streak))
    return events


def yearly_heatwave_metrics(events: list[HeatwaveEvent], years: list[int]) -> list[dict]:
    """Frequency, mean duration and mean intensity of heatwaves per year.

    Events are attributed to the year they start in. Every year in `years`
    appears in the output; years without events report zeros.
    """
    by_year: dict[int, list[HeatwaveEvent]] = defaultdict(list)
    for event in events:
        by_year[event.year].append(event)

    rows = []
    for year in years:
        year_events = by_year.get(year, [])
        if not year_events:
            rows.append({
                "year":                year,
                "frequency":           0,
                "mean_duration_days":  0,
                "mean_intensity_tmax": 0,
                "mean_intensity_tmed": 0,
            })
            continue
        days = [r for event in year_events for r in event.records]
        rows.append({
            "year":                year,
            "frequency":           len(year_events),
            "mean_duration_days":  round_half_up(sum(e.length for e in year_events) / len(year_events)),
            "mean_intensity_tmax": round(sum(r.max_temp for r in days) / len(days), 2),
            "mean_intensity_tmed": round(robust_mean(r.mean_temp for r in days), 2),
        })
    return rows


def heatwave_metrics(summer_records: list[DailyRecord]) -> tuple[float | None, list[dict]]:
    """Full heatwave analysis over date-ordered summer records.

    Returns:
        (threshold, yearly rows). The threshold is None when the reference
        period has no tmax at all; every year then reports zero events.
    """
    if not summer_records:
        return None, []
    years = sorted({r.date.year for r in summer_records})
    threshold = reference_threshold(summer_records)
    if threshold is None:
        return None, yearly_heatwave_metrics([], years)
    events = detect_heatwaves(summer_records, threshold)
    return threshold, yearly_heatwave_metrics(events, years)


def decade_heatwaves(yearly: list[dict]) -> list[dict]:
    """Decade rollup: total and mean frequency, mean duration and intensities."""
    return rollup_by_decade(
        yearly,
        sum_fields={"frequency_total": "frequency"},
        mean_fields={
            "frequency_mean":      "frequency",
            "mean_duration_days":  "mean_duration_days",
            "mean_intensity_tmax": "mean_intensity_tmax",
            "mean_intensity_tmed": "mean_intensity_tmed",
        },
    )
