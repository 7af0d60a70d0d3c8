# Project: aemet-climate
# Owner: GreenUnicorn
"""
deviation.py — How each summer compares with the whole-period baseline.

All functions expect records already restricted to one season (normally the
summer window) across every year. The baseline is the robust mean over all
of those records; a year's deviation is its own robust mean minus the
baseline, and its exceedance count is the number of days above the baseline.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from aemet_climate.decades import robust_mean, rollup_by_decade
from aemet_climate.records import DailyRecord

BASELINE_FIELDS = ("tmed", "tmax", "tmin")


def group_by_year(records: Iterable[DailyRecord]) -> dict[int, list[DailyRecord]]:
    """Group records by calendar year, years in ascending order."""
    by_year: dict[int, list[DailyRecord]] = defaultdict(list)
    for r in records:
        by_year[r.date.year].append(r)
    return {year: by_year[year] for year in sorted(by_year)}


def field_means(records: list[DailyRecord], fields=BASELINE_FIELDS) -> dict[str, float]:
    """Robust mean of each field (0.0 for a field with no valid values)."""
    return {f: robust_mean(r.value(f) for r in records) for f in fields}


def period_baseline(records: list[DailyRecord]) -> dict[str, float]:
    """Whole-period robust means of tmed, tmax and tmin."""
    return field_means(records)


def yearly_deviations(records: list[DailyRecord], baseline: dict[str, float]) -> list[dict]:
    """Signed deviation of each year's mean from the baseline.

    Returns:
        List of {'year', 'dev_tmed', 'dev_tmax', 'dev_tmin'} sorted by year,
        values rounded to 2 decimals.
    """
    rows = []
    for year, year_records in group_by_year(records).items():
        means = field_means(year_records)
        row = {"year": year}
        for f in BASELINE_FIELDS:
            row[f"dev_{f}"] = round(means[f] - baseline[f], 2)
        rows.append(row)
    return rows


def yearly_exceedances(records: list[DailyRecord], baseline: dict[str, float]) -> list[dict]:
    """Days per year whose value is strictly above the period baseline.

    Returns:
        List of {'year', 'days_above_tmed', 'days_above_tmax',
        'days_above_tmin'} sorted by year.
    """
    rows = []
    for year, year_records in group_by_year(records).items():
        row = {"year": year}
        for f in BASELINE_FIELDS:
            row[f"days_above_{f}"] = sum(
                1 for r in year_records
                if r.value(f) is not None and r.value(f) > baseline[f]
            )
        rows.append(row)
    return rows


def decade_deviations(deviations: list[dict]) -> list[dict]:
    """Mean yearly deviation per decade."""
    return rollup_by_decade(
        deviations,
        mean_fields={f"dev_{f}_mean": f"dev_{f}" for f in BASELINE_FIELDS},
    )


def decade_exceedances(exceedances: list[dict]) -> list[dict]:
    """Average days-above-baseline per year, per decade."""
    return rollup_by_decade(
        exceedances,
        mean_fields={f"days_above_{f}_mean": f"days_above_{f}" for f in BASELINE_FIELDS},
    )


def decade_exceedance_totals(exceedances: list[dict]) -> list[dict]:
    """Total days-above-baseline summed over each decade's years."""
    return rollup_by_decade(
        exceedances,
        sum_fields={f"days_above_{f}_total": f"days_above_{f}" for f in BASELINE_FIELDS},
    )
