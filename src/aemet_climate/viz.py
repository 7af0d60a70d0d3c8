# Project: aemet-climate
# Owner: GreenUnicorn
"""
viz.py — Build the JSON datasets consumed by the chart renderers.

Each *_dataset() function is pure and returns plain lists/dicts;
write_datasets() dumps them all into one directory.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from pathlib import Path

from aemet_climate.decades import robust_mean
from aemet_climate.deviation import group_by_year
from aemet_climate.export import write_json
from aemet_climate.heatwaves import detect_heatwaves, reference_threshold
from aemet_climate.records import DailyRecord
from aemet_climate.seasons import filter_summer_records, summer_window_dates
from aemet_climate.summer import NoSummerDataError
from aemet_climate.summer_length import summer_length_by_year
from aemet_climate.thresholds import count_thresholds


def _year_span(records: list[DailyRecord]) -> range:
    years = [r.date.year for r in records]
    return range(min(years), max(years) + 1)


def _days(first: date, last: date):
    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)


def summer_length_dataset(records: list[DailyRecord]) -> list[dict]:
    """Meteorological summer length per year."""
    return summer_length_by_year(records)


def climate_stripes_dataset(records: list[DailyRecord]) -> list[dict]:
    """One entry per year with every calendar day's tmax and heatwave flag.

    Heatwaves here are detected over the whole year, not only the summer
    window, using the same reference-period threshold rule.
    """
    if not records:
        return []
    threshold = reference_threshold(records)
    events = detect_heatwaves(records, threshold) if threshold is not None else []
    heatwave_days = {r.date for event in events for r in event.records}
    events_by_year = defaultdict(list)
    for event in events:
        events_by_year[event.year].append(event)

    by_day = {r.date: r for r in records}
    by_year = group_by_year(records)
    result = []
    for year in _year_span(records):
        year_events = events_by_year.get(year, [])
        wave_days = [r for event in year_events for r in event.records]
        days = []
        for day in _days(date(year, 1, 1), date(year, 12, 31)):
            record = by_day.get(day)
            days.append({
                "date": day.isoformat(),
                "tmax": record.max_temp if record else None,
                "is_heatwave_day": day in heatwave_days,
            })
        result.append({
            "year": year,
            "days": days,
            "heatwave_count": len(year_events),
            "heatwave_total_days": len(wave_days),
            "heatwave_avg_intensity": round(sum(r.max_temp for r in wave_days) / len(wave_days), 2) if wave_days else 0,
            "extreme_heat_days": count_thresholds(by_year.get(year, []))["extreme_heat_days"],
        })
    return result


def hot_days_dataset(records: list[DailyRecord]) -> list[dict]:
    """Per year, one flag per summer-window day: was tmed above the period mean?

    Days with no record (or no tmed) are False.
    """
    summer = filter_summer_records(records)
    if not summer:
        raise NoSummerDataError("No summer records found in the requested period.")
    baseline = robust_mean(r.mean_temp for r in summer)
    by_day = {r.date: r for r in summer}
    result = []
    for year in _year_span(summer):
        flags = []
        for day in _days(*summer_window_dates(year)):
            record = by_day.get(day)
            flags.append(bool(record and record.mean_temp is not None and record.mean_temp > baseline))
        result.append({"year": year, "days": flags})
    return result


def summer_evolution_dataset(records: list[DailyRecord]) -> dict:
    """Summer tmax evolution: period mean, bounds, daily climatology and yearly series.

    Days are indexed from 0 on 21 June.
    """
    summer = filter_summer_records(records)
    tmax_values = [r.max_temp for r in summer if r.max_temp is not None]
    if not tmax_values:
        raise NoSummerDataError("No summer tmax values found in the requested period.")
    period_mean = sum(tmax_values) / len(tmax_values)

    def day_index(day: date) -> int:
        return (day - summer_window_dates(day.year)[0]).days

    by_index: dict[int, list[float]] = defaultdict(list)
    for r in summer:
        if r.max_temp is not None:
            by_index[day_index(r.date)].append(r.max_temp)
    historical = [
        {"day": i, "avg_tmax": round(sum(v) / len(v), 2)}
        for i, v in sorted(by_index.items())
    ]

    by_year = group_by_year(summer)
    yearly = []
    for year in _year_span(summer):
        days = by_year.get(year, [])
        valid = [r.max_temp for r in days if r.max_temp is not None]
        mean_tmax = round(sum(valid) / len(valid), 2) if valid else None
        yearly.append({
            "year": year,
            "mean_tmax": mean_tmax,
            "deviation": round(mean_tmax - period_mean, 2) if mean_tmax is not None else None,
            "daily_points": [{"day": day_index(r.date), "tmax": r.max_temp} for r in days],
        })

    return {
        "period_mean_tmax": round(period_mean, 2),
        "bounds": {"min": min(tmax_values), "max": max(tmax_values)},
        "historical_daily_average": historical,
        "yearly": yearly,
    }


DATASETS = {
    "summer-length.json":    summer_length_dataset,
    "climate-stripes.json":  climate_stripes_dataset,
    "hot-days.json":         hot_days_dataset,
    "summer-evolution.json": summer_evolution_dataset,
}


def write_datasets(records: list[DailyRecord], output_dir: Path) -> list[Path]:
    """Build every dataset and write it as JSON into output_dir.

    Raises:
        NoSummerDataError: If the records contain no summer days.
    """
    built = {name: build(records) for name, build in DATASETS.items()}
    return [write_json(output_dir / name, data) for name, data in built.items()]
