# Project: aemet-climate
# Owner: GreenUnicorn
"""
seasons.py — Calendar season rules (northern hemisphere).

Two separate policies live here and are deliberately kept apart:

* astronomical_season(): the four seasons with fixed solstice/equinox
  boundaries. A season starts ON its boundary date, so 22 September is
  already autumn.
* in_summer_window(): the fixed 21 June – 21 September window (both days
  included) that every summer analysis filters on.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from enum import Enum

from aemet_climate.records import DailyRecord


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


# (month, day) on which each astronomical season begins
SPRING_START = (3, 20)
SUMMER_START = (6, 21)
AUTUMN_START = (9, 22)
WINTER_START = (12, 21)

# Summer analysis window, inclusive on both ends
SUMMER_WINDOW_START = (6, 21)
SUMMER_WINDOW_END = (9, 21)


def astronomical_season(day: date) -> Season:
    """Return the astronomical season a date falls in."""
    md = (day.month, day.day)
    if SUMMER_START <= md < AUTUMN_START:
        return Season.SUMMER
    if SPRING_START <= md < SUMMER_START:
        return Season.SPRING
    if AUTUMN_START <= md < WINTER_START:
        return Season.AUTUMN
    return Season.WINTER


def in_summer_window(day: date) -> bool:
    """True if the date lies between 21 June and 21 September inclusive."""
    return SUMMER_WINDOW_START <= (day.month, day.day) <= SUMMER_WINDOW_END


def summer_window_dates(year: int) -> tuple[date, date]:
    """Return (first, last) day of the summer window for a year."""
    return date(year, *SUMMER_WINDOW_START), date(year, *SUMMER_WINDOW_END)


def filter_summer_records(records: Iterable[DailyRecord]) -> list[DailyRecord]:
    """Keep only the records inside the fixed summer window, order preserved."""
    return [r for r in records if in_summer_window(r.date)]


def filter_season(records: Iterable[DailyRecord], season: Season) -> list[DailyRecord]:
    """Keep only the records whose astronomical season matches."""
    return [r for r in records if astronomical_season(r.date) == season]
