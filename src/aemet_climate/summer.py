# Project: aemet-climate
# Owner: GreenUnicorn
"""
summer.py — Run every summer analysis over one station's records.

analyze_summer() is the single entry point used by the CLI, the chart
dataset builders and the dashboard. It returns plain dicts/lists so the
result can be printed, written to CSV or dumped to JSON as is.
"""

from __future__ import annotations

from aemet_climate.deviation import (
    decade_deviations,
    decade_exceedance_totals,
    decade_exceedances,
    group_by_year,
    period_baseline,
    yearly_deviations,
    yearly_exceedances,
)
from aemet_climate.decades import robust_mean, rollup_by_decade
from aemet_climate.heatwaves import decade_heatwaves, heatwave_metrics
from aemet_climate.records import DailyRecord
from aemet_climate.seasons import filter_summer_records
from aemet_climate.summer_length import decade_summer_length, summer_length_by_year
from aemet_climate.thresholds import count_thresholds


class NoDataError(ValueError):
    """Raised when there is nothing at all to analyse."""


class NoSummerDataError(NoDataError):
    """Raised when none of the records fall inside the summer window."""


def _max_or_none(values) -> float | None:
    valid = [v for v in values if v is not None]
    return max(valid) if valid else None


def yearly_summer_averages(summer_records: list[DailyRecord]) -> list[dict]:
    """Mean and maximum of tmed/tmax/tmin for each summer."""
    rows = []
    for year, days in group_by_year(summer_records).items():
        row = {"year": year}
        for f in ("tmed", "tmax", "tmin"):
            row[f"avg_{f}"] = round(robust_mean(r.value(f) for r in days), 2)
        for f in ("tmed", "tmax", "tmin"):
            row[f"max_{f}"] = _max_or_none(r.value(f) for r in days)
        rows.append(row)
    return rows


def yearly_thresholds(summer_records: list[DailyRecord]) -> list[dict]:
    """Tropical nights and extreme-heat days for each summer."""
    return [
        {"year": year, **count_thresholds(days)}
        for year, days in group_by_year(summer_records).items()
    ]


def analyze_summer(records: list[DailyRecord]) -> dict:
    """Compute all summer statistics for a station.

    Args:
        records: Deduplicated records for every season, sorted by date.

    Returns:
        Dict with keys:
            period:  baseline means over every summer day
            yearly:  averages, deviations, exceedances, thresholds,
                     summer_length, heatwaves (lists of per-year rows)
            decades: the same analyses rolled up per decade, with both
                     per-year averages and totals for day counts

    Raises:
        NoDataError: If records is empty.
        NoSummerDataError: If no record falls inside the summer window.
    """
    if not records:
        raise NoDataError("No climate records to analyse.")
    records = sorted(records, key=lambda r: r.date)
    summer_records = filter_summer_records(records)
    if not summer_records:
        raise NoSummerDataError("No summer records found in the requested period.")

    baseline = period_baseline(summer_records)
    period = {
        "period":    f"Summers {summer_records[0].date.year}-{summer_records[-1].date.year}",
        "mean_tmed": round(baseline["tmed"], 2),
        "mean_tmax": round(baseline["tmax"], 2),
        "mean_tmin": round(baseline["tmin"], 2),
    }

    deviations = yearly_deviations(summer_records, baseline)
    exceedances = yearly_exceedances(summer_records, baseline)
    thresholds = yearly_thresholds(summer_records)
    summer_length = summer_length_by_year(records)
    threshold, heatwaves = heatwave_metrics(summer_records)

    return {
        "period": period,
        "heatwave_threshold": threshold,
        "yearly": {
            "averages":      yearly_summer_averages(summer_records),
            "deviations":    deviations,
            "exceedances":   exceedances,
            "thresholds":    thresholds,
            "summer_length": summer_length,
            "heatwaves":     heatwaves,
        },
        "decades": {
            "deviations":        decade_deviations(deviations),
            "exceedances":       decade_exceedances(exceedances),
            "exceedance_totals": decade_exceedance_totals(exceedances),
            "thresholds": rollup_by_decade(
                thresholds,
                mean_fields={
                    "tropical_nights_mean":   "tropical_nights",
                    "extreme_heat_days_mean": "extreme_heat_days",
                },
            ),
            "threshold_totals": rollup_by_decade(
                thresholds,
                sum_fields={
                    "tropical_nights_total":   "tropical_nights",
                    "extreme_heat_days_total": "extreme_heat_days",
                },
            ),
            "summer_length": decade_summer_length(summer_length),
            "heatwaves":     decade_heatwaves(heatwaves),
        },
    }
