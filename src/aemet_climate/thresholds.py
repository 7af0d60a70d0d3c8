# Project: aemet-climate
# Owner: GreenUnicorn
"""
thresholds.py — Count days that cross fixed temperature thresholds.
"""

from __future__ import annotations

from collections.abc import Iterable

from aemet_climate.records import DailyRecord

TROPICAL_NIGHT_MIN_TEMP = 20.0   # tmin >= 20 °C
EXTREME_HEAT_MAX_TEMP = 40.0     # tmax >= 40 °C


def count_thresholds(records: Iterable[DailyRecord]) -> dict:
    """Count tropical nights and extreme-heat days.

    Records with a missing tmin (or tmax) never count toward that threshold.

    Returns:
        Dict with keys tropical_nights and extreme_heat_days.
    """
    tropical_nights = 0
    extreme_heat_days = 0
    for r in records:
        if r.min_temp is not None and r.min_temp >= TROPICAL_NIGHT_MIN_TEMP:
            tropical_nights += 1
        if r.max_temp is not None and r.max_temp >= EXTREME_HEAT_MAX_TEMP:
            extreme_heat_days += 1
    return {"tropical_nights": tropical_nights, "extreme_heat_days": extreme_heat_days}
