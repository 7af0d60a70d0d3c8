# Project: aemet-climate
# Owner: GreenUnicorn
"""Tests for seasons.py and thresholds.py."""

from datetime import date

import pytest

from aemet_climate.records import DailyRecord
from aemet_climate.seasons import (
    Season,
    astronomical_season,
    filter_season,
    filter_summer_records,
    in_summer_window,
    summer_window_dates,
)
from aemet_climate.thresholds import count_thresholds


# ---------------------------------------------------------------------------
# astronomical_season
# ---------------------------------------------------------------------------

class TestAstronomicalSeason:

    @pytest.mark.parametrize("day, expected", [
        (date(2021, 3, 19), Season.WINTER),
        (date(2021, 3, 20), Season.SPRING),
        (date(2021, 6, 20), Season.SPRING),
        (date(2021, 6, 21), Season.SUMMER),
        (date(2021, 9, 21), Season.SUMMER),
        (date(2021, 9, 22), Season.AUTUMN),
        (date(2021, 12, 20), Season.AUTUMN),
        (date(2021, 12, 21), Season.WINTER),
        (date(2021, 1, 1), Season.WINTER),
    ])
    def test_boundaries(self, day, expected):
        """A season begins on its boundary date."""
        assert astronomical_season(day) == expected

    def test_leap_day_is_winter(self):
        assert astronomical_season(date(2020, 2, 29)) == Season.WINTER

    def test_season_value_is_plain_string(self):
        assert Season.SUMMER == "summer"


# ---------------------------------------------------------------------------
# Summer window
# ---------------------------------------------------------------------------

class TestSummerWindow:

    @pytest.mark.parametrize("day, expected", [
        (date(1990, 6, 20), False),
        (date(1990, 6, 21), True),
        (date(1990, 8, 15), True),
        (date(1990, 9, 21), True),
        (date(1990, 9, 22), False),
    ])
    def test_inclusive_bounds(self, day, expected):
        assert in_summer_window(day) is expected

    def test_window_dates(self):
        first, last = summer_window_dates(2003)
        assert first == date(2003, 6, 21)
        assert last == date(2003, 9, 21)
        assert (last - first).days + 1 == 93

    def test_filter_summer_records_keeps_order(self):
        records = [
            DailyRecord(date=date(2000, 9, 21)),
            DailyRecord(date=date(2000, 5, 1)),
            DailyRecord(date=date(2000, 6, 21)),
            DailyRecord(date=date(2000, 9, 22)),
        ]
        kept = filter_summer_records(records)
        assert [r.date for r in kept] == [date(2000, 9, 21), date(2000, 6, 21)]

    def test_filter_season(self):
        records = [DailyRecord(date=date(2000, m, 1)) for m in range(1, 13)]
        autumn = filter_season(records, Season.AUTUMN)
        assert [r.date.month for r in autumn] == [10, 11, 12]


# ---------------------------------------------------------------------------
# count_thresholds
# ---------------------------------------------------------------------------

class TestCountThresholds:

    def test_counts_are_inclusive(self):
        """tmin == 20 is a tropical night, tmax == 40 an extreme heat day."""
        records = [
            DailyRecord(date=date(2022, 7, 1), min_temp=20.0, max_temp=40.0),
            DailyRecord(date=date(2022, 7, 2), min_temp=19.9, max_temp=39.9),
            DailyRecord(date=date(2022, 7, 3), min_temp=23.0, max_temp=42.1),
        ]
        assert count_thresholds(records) == {"tropical_nights": 2, "extreme_heat_days": 2}

    def test_missing_values_never_count(self):
        records = [DailyRecord(date=date(2022, 7, 1))]
        assert count_thresholds(records) == {"tropical_nights": 0, "extreme_heat_days": 0}

    def test_empty(self):
        assert count_thresholds([]) == {"tropical_nights": 0, "extreme_heat_days": 0}
