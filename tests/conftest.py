# Project: aemet-climate
# Owner: GreenUnicorn
"""Shared fixtures: a small synthetic station history."""

from datetime import date, timedelta

import pytest

from aemet_climate.records import DailyRecord

HEAT_SPIKE = (date(2002, 7, 10), date(2002, 7, 14))


def make_station_records() -> list[DailyRecord]:
    """1 June – 1 October of 2000, 2001 and 2002.

    tmax is flat within a year (30, 32, 34 °C) except for a five-day 40 °C
    spike in July 2002. tmed = tmax - 8 and tmin = tmax - 16.
    """
    records = []
    for year in (2000, 2001, 2002):
        day = date(year, 6, 1)
        while day <= date(year, 10, 1):
            tmax = 30.0 + 2 * (year - 2000)
            if HEAT_SPIKE[0] <= day <= HEAT_SPIKE[1]:
                tmax = 40.0
            records.append(DailyRecord(
                date=day,
                station_id="5530E",
                station_name="Granada Aeropuerto",
                mean_temp=tmax - 8,
                min_temp=tmax - 16,
                max_temp=tmax,
                precipitation=0.0,
            ))
            day += timedelta(days=1)
    return records


@pytest.fixture
def station_records() -> list[DailyRecord]:
    return make_station_records()


@pytest.fixture
def winter_records() -> list[DailyRecord]:
    return [
        DailyRecord(date=date(2001, 1, d), mean_temp=8.0, min_temp=2.0, max_temp=14.0)
        for d in range(1, 11)
    ]
