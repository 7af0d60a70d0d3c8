# Project: aemet-climate
# Owner: GreenUnicorn
"""Tests for viz.py dataset builders and chart.py rendering."""

import json
from datetime import date

import pytest

from aemet_climate.chart import colorize, render_bar_chart, render_summer_report, render_table
from aemet_climate.summer import NoSummerDataError, analyze_summer
from aemet_climate.summer_length import summer_length_by_year
from aemet_climate.viz import (
    DATASETS,
    climate_stripes_dataset,
    hot_days_dataset,
    summer_evolution_dataset,
    summer_length_dataset,
    write_datasets,
)


# ---------------------------------------------------------------------------
# Dataset builders
# ---------------------------------------------------------------------------

class TestHotDays:

    def test_one_flag_per_window_day(self, station_records):
        rows = hot_days_dataset(station_records)
        assert [r["year"] for r in rows] == [2000, 2001, 2002]
        assert all(len(r["days"]) == 93 for r in rows)

    def test_flags_compare_with_period_mean(self, station_records):
        rows = hot_days_dataset(station_records)
        assert not any(rows[0]["days"])
        assert not any(rows[1]["days"])
        assert all(rows[2]["days"])

    def test_no_summer_raises(self, winter_records):
        with pytest.raises(NoSummerDataError):
            hot_days_dataset(winter_records)


class TestClimateStripes:

    def test_every_calendar_day_present(self, station_records):
        rows = climate_stripes_dataset(station_records)
        assert [r["year"] for r in rows] == [2000, 2001, 2002]
        assert len(rows[0]["days"]) == 366  # leap year
        assert len(rows[2]["days"]) == 365
        assert rows[0]["days"][0] == {"date": "2000-01-01", "tmax": None, "is_heatwave_day": False}

    def test_heatwave_summary(self, station_records):
        rows = climate_stripes_dataset(station_records)
        y2002 = rows[2]
        assert y2002["heatwave_count"] == 1
        assert y2002["heatwave_total_days"] == 5
        assert y2002["heatwave_avg_intensity"] == 40.0
        assert y2002["extreme_heat_days"] == 5
        flagged = [d["date"] for d in y2002["days"] if d["is_heatwave_day"]]
        assert flagged == ["2002-07-10", "2002-07-11", "2002-07-12", "2002-07-13", "2002-07-14"]
        assert rows[0]["heatwave_count"] == 0
        assert rows[0]["heatwave_avg_intensity"] == 0

    def test_empty(self):
        assert climate_stripes_dataset([]) == []


class TestSummerEvolution:

    def test_shape(self, station_records):
        data = summer_evolution_dataset(station_records)
        assert data["period_mean_tmax"] == pytest.approx(32.11)
        assert data["bounds"] == {"min": 30.0, "max": 40.0}
        assert [p["day"] for p in data["historical_daily_average"]] == list(range(93))
        assert [y["year"] for y in data["yearly"]] == [2000, 2001, 2002]
        assert len(data["yearly"][0]["daily_points"]) == 93

    def test_day_index_starts_on_21_june(self, station_records):
        data = summer_evolution_dataset(station_records)
        first = data["yearly"][1]["daily_points"][0]
        assert first == {"day": 0, "tmax": 32.0}

    def test_yearly_deviation(self, station_records):
        data = summer_evolution_dataset(station_records)
        assert data["yearly"][0]["deviation"] == pytest.approx(-2.11)

    def test_no_tmax_raises(self, winter_records):
        with pytest.raises(NoSummerDataError):
            summer_evolution_dataset(winter_records)


class TestWriteDatasets:

    def test_summer_length_dataset(self, station_records):
        assert summer_length_dataset(station_records) == summer_length_by_year(station_records)

    def test_writes_every_dataset(self, station_records, tmp_path):
        written = write_datasets(station_records, tmp_path)
        assert sorted(p.name for p in written) == sorted(DATASETS)
        lengths = json.loads((tmp_path / "summer-length.json").read_text())
        assert lengths[0]["start"] == "2002-07-14"

    def test_nothing_written_without_summer_data(self, winter_records, tmp_path):
        with pytest.raises(NoSummerDataError):
            write_datasets(winter_records, tmp_path)
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# Console rendering
# ---------------------------------------------------------------------------

class TestRendering:

    def test_colorize_deviation(self):
        assert colorize(0.0, -2.0, 2.0, "deviation") == (240, 240, 240)
        assert colorize(2.0, -2.0, 2.0, "deviation") == (255, 99, 71)
        assert colorize(-2.0, -2.0, 2.0, "deviation") == (30, 144, 255)

    def test_colorize_gradient(self):
        assert colorize(0, 0, 10, "gradient") == (255, 255, 224)
        assert colorize(10, 0, 10, "gradient") == (255, 99, 71)

    def test_render_table_plain(self):
        rows = [{"year": 2000, "dev_tmax": -2.1}, {"year": 2001, "dev_tmax": None}]
        out = render_table(rows, "Deviations", {"dev_tmax": ("deviation", 2)}, color=False)
        assert "\x1b[" not in out
        assert "-2.10" in out
        assert "—" in out
        assert out.splitlines()[0] == "Deviations"

    def test_render_table_colored(self):
        rows = [{"year": 2000, "dev_tmax": -2.1}, {"year": 2001, "dev_tmax": 1.0}]
        out = render_table(rows, "Deviations", {"dev_tmax": ("deviation", 2)}, color=True)
        assert "\x1b[38;2;" in out

    def test_render_table_empty(self):
        assert "No data to display." in render_table([], "Empty")

    def test_render_bar_chart(self):
        out = render_bar_chart(["2000s", "2010s"], [20.0, 40.0], "Length", unit=" d", bar_width=10)
        lines = out.splitlines()
        assert lines[0] == "Length"
        assert "█████░░░░░" in lines[1]
        assert "██████████" in lines[2]
        assert "40 d" in lines[2]

    def test_render_summer_report(self, station_records):
        results = analyze_summer(station_records)
        out = render_summer_report(results, "5530E", color=False)
        assert "5530E" in out
        assert "Summers 2000-2002" in out
        assert "34.0°C" in out
        assert "2000s" in out
