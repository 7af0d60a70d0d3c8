# Project: aemet-climate
# Owner: GreenUnicorn
"""
summer_length.py — Length of the "meteorological summer" per year.

For each year a trailing 7-day moving average of tmed is computed over the
year's records (all seasons). The meteorological summer runs from the first
to the last point whose average is above 30 °C.
"""

from __future__ import annotations

from datetime import date

from aemet_climate.decades import EMPTY_MEAN, rollup_by_decade
from aemet_climate.deviation import group_by_year
from aemet_climate.records import DailyRecord

MOVING_AVERAGE_WINDOW = 7
TEMPERATURE_THRESHOLD = 30.0


def moving_averages(
    records: list[DailyRecord],
    window: int = MOVING_AVERAGE_WINDOW,
) -> list[tuple[date, float]]:
    """Trailing moving average of tmed over date-ordered records.

    Each point is tagged with the date of the last record in its window.
    Missing tmed values are left out of each window's mean; a window with no
    tmed at all averages to EMPTY_MEAN (0.0).
    """
    points = []
    for i in range(len(records) - window + 1):
        chunk = records[i:i + window]
        values = [r.mean_temp for r in chunk if r.mean_temp is not None]
        avg = sum(values) / len(values) if values else EMPTY_MEAN
        points.append((chunk[-1].date, avg))
    return points


def summer_bounds(
    records: list[DailyRecord],
    threshold: float = TEMPERATURE_THRESHOLD,
) -> tuple[date, date] | None:
    """First and last moving-average date above threshold, or None."""
    if len(records) < MOVING_AVERAGE_WINDOW:
        return None
    hot = [day for day, avg in moving_averages(records) if avg > threshold]
    if not hot:
        return None
    return hot[0], hot[-1]


def summer_length_by_year(records: list[DailyRecord]) -> list[dict]:
    """Meteorological summer per year.

    Years with fewer than 7 records, or whose moving average never goes
    above the threshold, are left out.

    Returns:
        List of {'year', 'start', 'end', 'summer_days'} sorted by year.
    """
    rows = []
    for year, year_records in group_by_year(records).items():
        year_records = sorted(year_records, key=lambda r: r.date)
        bounds = summer_bounds(year_records)
        if bounds is None:
            continue
        first, last = bounds
        rows.append({
            "year":        year,
            "start":       first,
            "end":         last,
            "summer_days": (last - first).days + 1,
        })
    return rows


def decade_summer_length(yearly: list[dict]) -> list[dict]:
    return rollup_by_decade(yearly, mean_fields={"mean_summer_days": "summer_days"})
