# Project: aemet-climate
# Owner: GreenUnicorn
"""Tests for heatwaves.py and summer_length.py."""

from datetime import date, timedelta

import pytest

from aemet_climate.heatwaves import (
    decade_heatwaves,
    detect_heatwaves,
    heatwave_metrics,
    percentile_threshold,
    reference_threshold,
    round_half_up,
    yearly_heatwave_metrics,
)
from aemet_climate.records import DailyRecord
from aemet_climate.summer_length import (
    decade_summer_length,
    moving_averages,
    summer_bounds,
    summer_length_by_year,
)


def series(start: date, tmax_values, tmed=None) -> list[DailyRecord]:
    """One record per day starting at `start`."""
    return [
        DailyRecord(date=start + timedelta(days=i), max_temp=v, mean_temp=tmed)
        for i, v in enumerate(tmax_values)
    ]


def tmed_series(start: date, tmed_values) -> list[DailyRecord]:
    return [
        DailyRecord(date=start + timedelta(days=i), mean_temp=v)
        for i, v in enumerate(tmed_values)
    ]


# ---------------------------------------------------------------------------
# Percentile threshold
# ---------------------------------------------------------------------------

class TestPercentileThreshold:

    def test_nearest_rank(self):
        """sorted[floor(0.95 * 20)] is the largest of 20 values."""
        values = [float(v) for v in range(1, 21)]
        assert percentile_threshold(values) == 20.0
        assert percentile_threshold(values, 0.5) == 11.0

    def test_deterministic_regardless_of_order(self):
        values = [31.0, 38.5, 29.0, 35.2, 40.1, 33.3]
        assert percentile_threshold(values) == percentile_threshold(list(reversed(values)))

    def test_single_value(self):
        assert percentile_threshold([33.0]) == 33.0

    def test_empty_is_none(self):
        assert percentile_threshold([]) is None

    def test_reference_period_limited_to_first_years(self):
        """Only the first `years` years feed the threshold."""
        early = series(date(1980, 7, 1), [30.0] * 10)
        late = series(date(1982, 7, 1), [45.0] * 10)
        assert reference_threshold(early + late, years=2) == 30.0
        assert reference_threshold(early + late, years=3) == 45.0

    def test_reference_skips_missing_tmax(self):
        records = series(date(1980, 7, 1), [None, None])
        assert reference_threshold(records) is None


# ---------------------------------------------------------------------------
# detect_heatwaves
# ---------------------------------------------------------------------------

class TestDetectHeatwaves:

    def test_three_days_above_is_one_event(self):
        records = series(date(2003, 8, 1), [36.0, 37.0, 35.0])
        events = detect_heatwaves(records, 34.0)
        assert len(events) == 1
        assert events[0].length == 3
        assert events[0].start == date(2003, 8, 1)
        assert events[0].end == date(2003, 8, 3)

    def test_two_days_is_not_a_heatwave(self):
        assert detect_heatwaves(series(date(2003, 8, 1), [36.0, 37.0]), 34.0) == []

    def test_equal_to_threshold_breaks_the_run(self):
        records = series(date(2003, 8, 1), [36.0, 37.0, 34.0, 36.0, 35.0, 35.5])
        events = detect_heatwaves(records, 34.0)
        assert len(events) == 1
        assert events[0].start == date(2003, 8, 4)

    def test_missing_tmax_breaks_the_run(self):
        records = series(date(2003, 8, 1), [36.0, 37.0, None, 36.0])
        assert detect_heatwaves(records, 34.0) == []

    def test_calendar_gap_does_not_break_the_run(self):
        """Consecutive means consecutive records, not consecutive days."""
        records = [
            DailyRecord(date=date(2003, 8, 1), max_temp=36.0),
            DailyRecord(date=date(2003, 8, 2), max_temp=37.0),
            DailyRecord(date=date(2003, 8, 5), max_temp=38.0),
        ]
        events = detect_heatwaves(records, 34.0)
        assert len(events) == 1
        assert events[0].end == date(2003, 8, 5)

    def test_run_at_end_of_data_is_flushed(self):
        records = series(date(2003, 8, 1), [20.0, 36.0, 37.0, 38.0, 39.0])
        events = detect_heatwaves(records, 34.0)
        assert [e.length for e in events] == [4]

    def test_events_never_overlap(self):
        records = series(date(2003, 7, 1), [36, 37, 38, 20, 36, 37, 38, 39, 20, 36, 37])
        events = detect_heatwaves(records, 34.0)
        for a, b in zip(events, events[1:]):
            assert a.end < b.start
        assert all(e.length >= 3 for e in events)


# ---------------------------------------------------------------------------
# Yearly metrics
# ---------------------------------------------------------------------------

class TestHeatwaveMetrics:

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(3.4) == 3

    def test_yearly_metrics(self):
        records = series(date(2003, 8, 1), [36.0, 37.0, 38.0, 20.0, 40.0, 41.0, 42.0, 43.0], tmed=28.0)
        events = detect_heatwaves(records, 34.0)
        rows = yearly_heatwave_metrics(events, [2002, 2003])
        assert rows[0] == {
            "year": 2002, "frequency": 0, "mean_duration_days": 0,
            "mean_intensity_tmax": 0, "mean_intensity_tmed": 0,
        }
        assert rows[1]["frequency"] == 2
        assert rows[1]["mean_duration_days"] == 4  # 3.5 rounds up
        assert rows[1]["mean_intensity_tmax"] == pytest.approx(39.57, abs=0.005)
        assert rows[1]["mean_intensity_tmed"] == 28.0

    def test_heatwave_metrics_end_to_end(self):
        cool = series(date(1990, 6, 1), [30.0] * 100)
        hot = series(date(1991, 7, 1), [30.0, 33.0, 34.0, 35.0, 30.0])
        threshold, rows = heatwave_metrics(cool + hot)
        assert threshold == 30.0
        assert [r["year"] for r in rows] == [1990, 1991]
        assert rows[0]["frequency"] == 0
        assert rows[1]["frequency"] == 1
        assert rows[1]["mean_duration_days"] == 3

    def test_no_tmax_reports_zeros(self):
        records = series(date(1990, 7, 1), [None] * 5)
        threshold, rows = heatwave_metrics(records)
        assert threshold is None
        assert rows == [{
            "year": 1990, "frequency": 0, "mean_duration_days": 0,
            "mean_intensity_tmax": 0, "mean_intensity_tmed": 0,
        }]

    def test_empty_input(self):
        assert heatwave_metrics([]) == (None, [])

    def test_decade_rollup(self):
        yearly = [
            {"year": 2001, "frequency": 2, "mean_duration_days": 4,
             "mean_intensity_tmax": 40.0, "mean_intensity_tmed": 30.0},
            {"year": 2002, "frequency": 0, "mean_duration_days": 0,
             "mean_intensity_tmax": 0, "mean_intensity_tmed": 0},
        ]
        row = decade_heatwaves(yearly)[0]
        assert row["decade"] == "2000s"
        assert row["frequency_total"] == 2
        assert row["frequency_mean"] == 1.0
        assert row["mean_duration_days"] == 2.0
        assert row["mean_intensity_tmax"] == 20.0


# ---------------------------------------------------------------------------
# Meteorological summer length
# ---------------------------------------------------------------------------

class TestSummerLength:

    def test_moving_average_points(self):
        records = tmed_series(date(2020, 7, 1), [float(v) for v in range(1, 10)])
        points = moving_averages(records)
        assert len(points) == 3
        assert points[0] == (date(2020, 7, 7), 4.0)
        assert points[-1] == (date(2020, 7, 9), 6.0)

    def test_window_without_tmed_averages_to_zero(self):
        records = tmed_series(date(2020, 7, 1), [None] * 7)
        assert moving_averages(records) == [(date(2020, 7, 7), 0.0)]

    def test_missing_tmed_is_left_out_of_the_window(self):
        records = tmed_series(date(2020, 7, 1), [31.0, None, 31.0, 31.0, 31.0, 31.0, 31.0])
        assert moving_averages(records)[0][1] == 31.0

    def test_fewer_than_seven_records(self):
        records = tmed_series(date(2020, 7, 1), [35.0] * 6)
        assert summer_bounds(records) is None
        assert summer_length_by_year(records) == []

    def test_never_above_threshold(self):
        records = tmed_series(date(2020, 7, 1), [30.0] * 20)
        assert summer_length_by_year(records) == []

    def test_summer_bounds_and_length(self):
        values = [25.0] * 7 + [35.0] * 10 + [25.0] * 10
        records = tmed_series(date(2020, 6, 1), values)
        rows = summer_length_by_year(records)
        assert len(rows) == 1
        row = rows[0]
        assert row["year"] == 2020
        assert row["start"] <= row["end"]
        assert row["summer_days"] == (row["end"] - row["start"]).days + 1
        # the first window above 30 °C needs 4 of its 7 days at 35 °C
        assert row["start"] == date(2020, 6, 11)

    def test_years_are_separate(self):
        hot = [36.0] * 10
        records = tmed_series(date(2019, 7, 1), hot) + tmed_series(date(2021, 7, 1), hot)
        rows = summer_length_by_year(records)
        assert [r["year"] for r in rows] == [2019, 2021]
        assert rows[0]["summer_days"] == 4

    def test_decade_summer_length(self):
        yearly = [
            {"year": 2019, "summer_days": 40},
            {"year": 2021, "summer_days": 50},
            {"year": 2023, "summer_days": 61},
        ]
        assert decade_summer_length(yearly) == [
            {"decade": "2010s", "mean_summer_days": 40.0},
            {"decade": "2020s", "mean_summer_days": 55.5},
        ]
