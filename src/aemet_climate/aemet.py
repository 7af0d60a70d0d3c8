# Project: aemet-climate
# Owner: GreenUnicorn
"""
aemet.py — Fetch daily climatological values from AEMET OpenData.

AEMET answers every data request in two steps: the first call returns a
small JSON envelope whose 'datos' field is a temporary URL, and a second
call to that URL returns the actual rows. Daily values can only be
requested a few months at a time, so long periods are split into windows of
RANGE_MONTHS months.

API docs: https://opendata.aemet.es/dist/index.html
"""

from datetime import date, timedelta

import requests

from aemet_climate.utils import add_months, with_retry

AEMET_API_URL = "https://opendata.aemet.es/opendata/api"
DAILY_PATH = (
    "/valores/climatologicos/diarios/datos"
    "/fechaini/{start}/fechafin/{end}/estacion/{station}"
)
RANGE_MONTHS = 6
REQUEST_TIMEOUT = 60


class AemetApiError(RuntimeError):
    """AEMET answered, but with an error status in its envelope."""


class RateLimitError(AemetApiError):
    """AEMET returned HTTP 429 (too many requests)."""


def request_ranges(start: date, end: date, months: int = RANGE_MONTHS) -> list[tuple[date, date]]:
    """Split [start, end] into consecutive windows of at most `months` months.

    Each window ends at min(start + months, end); the next one starts the
    following day. Both start and end are included, so a window may be a
    single day.

    Returns:
        List of (window_start, window_end) tuples in chronological order,
        empty when start is after end.
    """
    ranges = []
    cursor = start
    while cursor <= end:
        window_end = min(add_months(cursor, months), end)
        ranges.append((cursor, window_end))
        cursor = window_end + timedelta(days=1)
    return ranges


def _api_datetime(day: date) -> str:
    """AEMET wants 'YYYY-MM-DDTHH:MM:SSUTC'."""
    return f"{day.isoformat()}T00:00:00UTC"


def _get_daily(station_id: str, start: date, end: date, api_key: str) -> list[dict]:
    """One attempt at the two-step request. Raises on any failure."""
    url = AEMET_API_URL + DAILY_PATH.format(
        start=_api_datetime(start),
        end=_api_datetime(end),
        station=station_id,
    )
    r = requests.get(
        url,
        headers={"api_key": api_key, "Accept": "application/json"},
        timeout=REQUEST_TIMEOUT,
    )
    if r.status_code == 429:
        raise RateLimitError("AEMET rate limit reached (HTTP 429)")
    r.raise_for_status()

    envelope = r.json()
    if envelope.get("estado") != 200:
        raise AemetApiError(f"AEMET API: {envelope.get('descripcion', 'unknown error')}")

    data = requests.get(envelope["datos"], timeout=REQUEST_TIMEOUT)
    data.raise_for_status()
    return data.json()


def fetch_daily_range(
    station_id: str,
    start: date,
    end: date,
    api_key: str,
) -> list[dict]:
    """Fetch raw daily rows for one station and one date window.

    Args:
        station_id: IDEMA station code, e.g. '5530E'.
        start: First day of the window.
        end: Last day of the window.
        api_key: AEMET OpenData API key.

    Returns:
        List of raw row dicts as AEMET sends them (all values are strings,
        using decimal commas). Empty if AEMET has no data for the window.

    Raises:
        RuntimeError: If all retry attempts fail.
    """
    return with_retry(
        _get_daily,
        station_id,
        start,
        end,
        api_key,
        label=f"AEMET daily values {station_id} {start.isoformat()}..{end.isoformat()}",
    )
