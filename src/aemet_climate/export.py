# Project: aemet-climate
# Owner: GreenUnicorn
"""
export.py — Read and write the CSV/JSON artifacts.

Daily CSVs keep AEMET's own column names and decimal commas, so a file
written here can be read back with load_daily_csv() and normalized exactly
like fresh API rows.
"""

from __future__ import annotations

import csv
import json
from datetime import date
from pathlib import Path

from aemet_climate.records import DailyRecord, deduplicate, normalize_records
from aemet_climate.summer import NoDataError

DAILY_COLUMNS = ["fecha", "indicativo", "nombre", "tmed", "tmin", "tmax", "prec", "velmedia", "racha"]


def _format_value(value, decimal_comma: bool):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and decimal_comma:
        return str(value).replace(".", ",")
    return value


def write_csv(
    path: Path,
    rows: list[dict],
    columns: list[str] | None = None,
    decimal_comma: bool = False,
) -> Path | None:
    """Write rows to a CSV file with a header line.

    Args:
        path: Destination file; parent directories are created.
        rows: One dict per row.
        columns: Column order. Defaults to the keys of the first row.
        decimal_comma: Write floats as '18,5' instead of '18.5'.

    Returns:
        The path written, or None when rows is empty (no file is created).
    """
    if not rows:
        return None
    columns = columns or list(rows[0].keys())
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow({c: _format_value(row.get(c), decimal_comma) for c in columns})
    return path


def write_daily_csv(path: Path, records: list[DailyRecord]) -> Path | None:
    """Write normalized records back out in AEMET's column layout."""
    return write_csv(path, [r.to_raw() for r in records], DAILY_COLUMNS, decimal_comma=True)


def _json_default(value):
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_json(path: Path, data) -> Path:
    """Dump data to a pretty-printed JSON file (dates as ISO strings)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=_json_default)
        f.write("\n")
    return path


def load_daily_csv(path: Path) -> list[DailyRecord]:
    """Read a daily CSV into deduplicated, date-sorted records.

    Raises:
        FileNotFoundError: If the file does not exist.
        NoDataError: If no row has a valid date.
    """
    if not path.exists():
        raise FileNotFoundError(f"Daily data file not found: {path}")
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        rows = [{k.strip(): (v or "").strip() for k, v in row.items() if k} for row in reader]
    records = deduplicate(normalize_records(rows))
    if not records:
        raise NoDataError(f"No valid rows found in {path}")
    return records


def station_id_from_path(path: Path) -> str:
    """'daily_5530E_19720101_20250819.csv' -> '5530E' ('unknown' otherwise)."""
    parts = path.name.split("_")
    return parts[1] if len(parts) > 1 else "unknown"


# Summer analysis artifacts: (file stem, section, table name)
SUMMER_TABLES = [
    ("yearly_averages",             "yearly",  "averages"),
    ("deviations",                  "yearly",  "deviations"),
    ("days_above_baseline",         "yearly",  "exceedances"),
    ("thresholds",                  "yearly",  "thresholds"),
    ("summer_length",               "yearly",  "summer_length"),
    ("heatwaves",                   "yearly",  "heatwaves"),
    ("decades_deviations",          "decades", "deviations"),
    ("decades_days_above_mean",     "decades", "exceedances"),
    ("decades_days_above_total",    "decades", "exceedance_totals"),
    ("decades_thresholds",          "decades", "thresholds"),
    ("decades_thresholds_total",    "decades", "threshold_totals"),
    ("decades_summer_length",       "decades", "summer_length"),
    ("decades_heatwaves",           "decades", "heatwaves"),
]


def write_summer_results(results: dict, station_id: str, output_dir: Path) -> list[Path]:
    """Write every summer analysis table as its own CSV.

    Empty tables are skipped rather than written as header-only files.

    Returns:
        Paths of the files actually written.
    """
    written = []
    period_path = write_csv(output_dir / f"period_means_{station_id}.csv", [results["period"]])
    if period_path:
        written.append(period_path)
    for stem, section, table in SUMMER_TABLES:
        path = write_csv(output_dir / f"{stem}_{station_id}.csv", results[section][table])
        if path:
            written.append(path)
    return written
