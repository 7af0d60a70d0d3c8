# Project: aemet-climate
# Owner: GreenUnicorn
"""
extract.py — Download one station's history and write its base CSVs.

For each station this writes, into data_<station>_<start>_<end>/:
    daily_<...>.csv    one row per day (AEMET columns, decimal commas)
    monthly_<...>.csv  per-month averages and extremes
    yearly_<...>.csv   per-year averages and extremes

A window that still fails after every retry is recorded and skipped; the
rest of the station's data is still written.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from aemet_climate.aemet import fetch_daily_range, request_ranges
from aemet_climate.aggregator import monthly_aggregator, yearly_aggregator
from aemet_climate.export import write_csv, write_daily_csv
from aemet_climate.records import DailyRecord, deduplicate, normalize_records
from aemet_climate.utils import fmt_day

Reporter = Callable[[str], None]


@dataclass
class ExtractionResult:
    station_id: str
    record_count: int = 0
    files: list[Path] = field(default_factory=list)
    failed_ranges: list[tuple[date, date]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_ranges


def output_folder(output_dir: Path, station_id: str, start: date, end: date) -> Path:
    return output_dir / f"data_{station_id}_{start:%Y%m%d}_{end:%Y%m%d}"


def collect_records(
    station_id: str,
    start: date,
    end: date,
    api_key: str,
    report: Reporter = print,
) -> tuple[list[DailyRecord], list[tuple[date, date]]]:
    """Fetch every window of the period and return (records, failed windows).

    Records from all windows are deduplicated together, so a day delivered by
    two overlapping or retried windows appears once (last delivery wins).
    """
    ranges = request_ranges(start, end)
    batches: list[DailyRecord] = []
    failed = []
    for i, (range_start, range_end) in enumerate(ranges, start=1):
        report(f"[aemet] [{i}/{len(ranges)}] {station_id}: {fmt_day(range_start)} to {fmt_day(range_end)}")
        try:
            raw = fetch_daily_range(station_id, range_start, range_end, api_key)
        except RuntimeError:
            failed.append((range_start, range_end))
            continue
        batches.extend(normalize_records(raw or []))
    return deduplicate(batches), failed


def process_station(
    station_id: str,
    start: date,
    end: date,
    api_key: str,
    output_dir: Path = Path("."),
    report: Reporter = print,
) -> ExtractionResult:
    """Download, aggregate and write the daily/monthly/yearly CSVs for a station.

    Args:
        station_id: IDEMA station code.
        start: First day of the period.
        end: Last day of the period.
        api_key: AEMET OpenData API key.
        output_dir: Parent directory for the station's data folder.
        report: Callable receiving progress lines (print by default).

    Returns:
        ExtractionResult with the record count, files written and any windows
        that could not be downloaded.
    """
    result = ExtractionResult(station_id=station_id)
    records, result.failed_ranges = collect_records(station_id, start, end, api_key, report)
    result.record_count = len(records)

    if not records:
        report(f"[aemet] {station_id}: no data returned for {fmt_day(start)} to {fmt_day(end)}.")
        return result

    monthly = monthly_aggregator()
    yearly = yearly_aggregator()
    for record in records:
        monthly.process_record(record)
        yearly.process_record(record)

    folder = output_folder(output_dir, station_id, start, end)
    suffix = f"{station_id}_{start:%Y%m%d}_{end:%Y%m%d}.csv"
    for path in (
        write_daily_csv(folder / f"daily_{suffix}", records),
        write_csv(folder / f"monthly_{suffix}", monthly.get_results(), decimal_comma=True),
        write_csv(folder / f"yearly_{suffix}", yearly.get_results(), decimal_comma=True),
    ):
        if path:
            result.files.append(path)

    report(f"[aemet] {station_id}: {result.record_count} daily records written to {folder}")
    for range_start, range_end in result.failed_ranges:
        report(f"[aemet] {station_id}: could not download {fmt_day(range_start)} to {fmt_day(range_end)}")
    return result
