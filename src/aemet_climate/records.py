# Project: aemet-climate
# Owner: GreenUnicorn
"""
records.py — Normalize raw AEMET daily rows and collapse duplicate dates.

AEMET returns every value as a string, using a decimal comma ("18,5") and
placeholders such as "Ip" (inappreciable precipitation) or "" for missing
data. Anything that does not parse becomes None, never 0.0, so that missing
observations stay out of every sum and average downstream.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime

DATE_FORMAT = "%Y-%m-%d"

# Plain decimals only: no exponents, underscores, inf or nan
_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)")
_WHITESPACE_RE = re.compile(r"(\s+)")

# AEMET column name -> DailyRecord attribute
NUMERIC_FIELDS = {
    "tmed":     "mean_temp",
    "tmin":     "min_temp",
    "tmax":     "max_temp",
    "prec":     "precipitation",
    "velmedia": "mean_wind_speed",
    "racha":    "wind_gust",
}


@dataclass(frozen=True)
class DailyRecord:
    """One day of observations for one station."""

    date: date
    station_id: str = ""
    station_name: str = ""
    mean_temp: float | None = None        # °C
    min_temp: float | None = None         # °C
    max_temp: float | None = None         # °C
    precipitation: float | None = None    # mm
    mean_wind_speed: float | None = None  # m/s
    wind_gust: float | None = None        # m/s

    def value(self, field: str) -> float | None:
        """Return a numeric field by its AEMET column name (e.g. 'tmax')."""
        return getattr(self, NUMERIC_FIELDS[field])

    def to_raw(self) -> dict:
        """Return the record as an AEMET-style row (date as ISO string)."""
        row = {
            "fecha":      self.date.isoformat(),
            "indicativo": self.station_id,
            "nombre":     self.station_name,
        }
        for column, attr in NUMERIC_FIELDS.items():
            row[column] = getattr(self, attr)
        return row


def parse_number(text) -> float | None:
    """Parse a locale-formatted number, returning None for missing data.

    Args:
        text: Raw value, e.g. '18,5', ' 3.0 ', '', 'Ip'.

    Returns:
        The float value, or None if the input is not a string or does not
        parse.
    """
    if not isinstance(text, str):
        return None
    cleaned = text.strip().replace(",", ".")
    if not _NUMBER_RE.fullmatch(cleaned):
        return None
    return float(cleaned)


def title_case(text: str | None) -> str:
    """Capitalize each whitespace-delimited word: 'SEVILLA AEROPUERTO' -> 'Sevilla Aeropuerto'.

    The original separators (spaces, tabs, newlines) are kept as they are.
    """
    if not text:
        return ""
    parts = _WHITESPACE_RE.split(text.lower())
    return "".join(part[:1].upper() + part[1:] for part in parts)


def parse_date(text) -> date | None:
    """Parse a 'YYYY-MM-DD' string; None when it does not match the format."""
    if not isinstance(text, str):
        return None
    try:
        return datetime.strptime(text.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def normalize_record(raw: Mapping[str, str]) -> DailyRecord | None:
    """Convert one raw AEMET row into a DailyRecord.

    Returns None when the 'fecha' field is missing or unparseable.
    """
    day = parse_date(raw.get("fecha"))
    if day is None:
        return None
    values = {attr: parse_number(raw.get(column)) for column, attr in NUMERIC_FIELDS.items()}
    return DailyRecord(
        date=day,
        station_id=(raw.get("indicativo") or "").strip(),
        station_name=title_case(raw.get("nombre")),
        **values,
    )


def normalize_records(raws: Iterable[Mapping[str, str]]) -> list[DailyRecord]:
    """Normalize a batch of raw rows, silently dropping rows with bad dates."""
    records = []
    for raw in raws:
        record = normalize_record(raw)
        if record is not None:
            records.append(record)
    return records


def deduplicate(records: Iterable[DailyRecord]) -> list[DailyRecord]:
    """Keep one record per date and return them sorted by date.

    Overlapping or retried requests can deliver the same day more than once,
    in any order. The last record received for a date replaces earlier ones.
    """
    by_date: dict[date, DailyRecord] = {}
    for record in records:
        by_date[record.date] = record
    return [by_date[day] for day in sorted(by_date)]
