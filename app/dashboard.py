# Project: aemet-climate
# Owner: GreenUnicorn
"""
dashboard.py — Streamlit dashboard for one station's summer analyses.

Run with:
    streamlit run app/dashboard.py
    streamlit run app/dashboard.py -- --csv data_5530E_.../daily_5530E_....csv

Requires: pip install -e ".[ui]"
"""

import sys
from pathlib import Path

# Ensure the src/ package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import argparse

import plotly.graph_objects as go
import streamlit as st
from plotly.subplots import make_subplots

from aemet_climate.export import load_daily_csv, station_id_from_path
from aemet_climate.summer import NoDataError, analyze_summer
from aemet_climate.viz import hot_days_dataset


# ─────────────────────────────────────────────────────────────
# Page config — must be first Streamlit call
# ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Summers",
    page_icon="☀️",
    layout="wide",
    initial_sidebar_state="collapsed",
)

DARK_CSS = """
<style>
  #MainMenu, footer, header { visibility: hidden; }
  .block-container { padding-top: 2rem; padding-bottom: 4rem; max-width: 1100px; }
  html, body, [class*="css"] {
    font-family: -apple-system, BlinkMacSystemFont, "SF Pro Display", "Segoe UI", Roboto, sans-serif;
    background-color: #0a0a0a;
    color: #f5f5f7;
  }
  .section-label {
    color: #8e8e93; font-size: 0.8rem; font-weight: 600;
    letter-spacing: 0.08em; text-transform: uppercase; margin: 2rem 0 0.5rem;
  }
  .stat-pill { background: #1c1c1e; border-radius: 18px; padding: 1rem 1.25rem; text-align: center; }
  .stat-label { color: #8e8e93; font-size: 0.8rem; }
  .stat-value { color: #f5f5f7; font-size: 1.8rem; font-weight: 600; }
  .stat-unit  { color: #8e8e93; font-size: 0.9rem; }
</style>
"""

st.markdown(DARK_CSS, unsafe_allow_html=True)

PLOTLY_LAYOUT = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(family="-apple-system, BlinkMacSystemFont, sans-serif", color="#8e8e93", size=12),
    margin=dict(l=8, r=8, t=32, b=8),
    legend=dict(bgcolor="rgba(0,0,0,0)", font=dict(color="#8e8e93")),
    xaxis=dict(showgrid=False, zeroline=False, tickfont=dict(color="#636366")),
    yaxis=dict(gridcolor="#2c2c2e", zeroline=False, tickfont=dict(color="#636366")),
)

# Blue (cool summer) → white → red (hot summer)
STRIPES_SCALE = [[0.0, "#08306b"], [0.5, "#f7f7f7"], [1.0, "#67000d"]]


def stat_html(label: str, value: str, unit: str = "") -> str:
    """Render a stat pill as HTML."""
    return f"""
    <div class="stat-pill">
      <div class="stat-label">{label}</div>
      <div class="stat-value">{value}<span class="stat-unit"> {unit}</span></div>
    </div>
    """


def section(label: str) -> None:
    st.markdown(f'<div class="section-label">{label}</div>', unsafe_allow_html=True)


def _parse_cli_args() -> str | None:
    """Parse --csv from sys.argv after the '--' separator."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--csv", type=str, default=None)
    try:
        sep = sys.argv.index("--")
        script_args = sys.argv[sep + 1:]
    except ValueError:
        script_args = []
    args, _ = parser.parse_known_args(script_args)
    return args.csv


CLI_CSV = _parse_cli_args()


@st.cache_data
def load_data(csv_path: str) -> dict:
    """Load a daily CSV and run every analysis. On failure returns {"error": str}."""
    path = Path(csv_path)
    try:
        records = load_daily_csv(path)
        results = analyze_summer(records)
        hot_days = hot_days_dataset(records)
    except (FileNotFoundError, NoDataError) as exc:
        return {"error": str(exc)}
    return {
        "station_id": station_id_from_path(path),
        "station_name": records[-1].station_name,
        "results": results,
        "hot_days": hot_days,
    }


def main() -> None:
    """Render the full summer dashboard."""
    csv_path = st.text_input(
        label="daily csv",
        value=CLI_CSV or "",
        placeholder="Path to a daily_<station>_<start>_<end>.csv file",
        label_visibility="collapsed",
    )
    if not csv_path:
        st.info("Enter the path of a daily CSV written by `aemet-climate extract`.")
        return

    data = load_data(csv_path)
    if "error" in data:
        st.error(data["error"])
        return

    results = data["results"]
    yearly = results["yearly"]
    decades = results["decades"]
    period = results["period"]

    st.markdown(f"## ☀️ {data['station_name'] or data['station_id']} — {period['period']}")

    # ── Stat pills ───────────────────────────────────────────
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.markdown(stat_html("Summer mean", f"{period['mean_tmed']}", "°C"), unsafe_allow_html=True)
    with c2:
        st.markdown(stat_html("Mean max", f"{period['mean_tmax']}", "°C"), unsafe_allow_html=True)
    with c3:
        threshold = results["heatwave_threshold"]
        st.markdown(stat_html("Heatwave threshold", f"{threshold if threshold is not None else '—'}", "°C"),
                    unsafe_allow_html=True)
    with c4:
        total_waves = sum(y["frequency"] for y in yearly["heatwaves"])
        st.markdown(stat_html("Heatwaves", f"{total_waves}"), unsafe_allow_html=True)

    # ── Climate stripes ──────────────────────────────────────
    section("Summer stripes (deviation of mean temperature)")
    deviations = yearly["deviations"]
    fig_stripes = go.Figure(go.Heatmap(
        x=[str(d["year"]) for d in deviations],
        y=[""],
        z=[[d["dev_tmed"] for d in deviations]],
        colorscale=STRIPES_SCALE,
        zmid=0,
        showscale=False,
        hovertemplate="%{x}: %{z:+.2f}°C<extra></extra>",
    ))
    fig_stripes.update_layout(**{**PLOTLY_LAYOUT, "height": 160})
    st.plotly_chart(fig_stripes, use_container_width=True, config={"displayModeBar": False})

    # ── Summer length + heatwaves ────────────────────────────
    length_col, wave_col = st.columns(2)
    with length_col:
        section("Meteorological summer length")
        lengths = yearly["summer_length"]
        fig_len = go.Figure(go.Bar(
            x=[str(r["year"]) for r in lengths],
            y=[r["summer_days"] for r in lengths],
            marker_color="rgba(255,159,10,0.8)",
            marker_line_width=0,
        ))
        fig_len.update_layout(**{**PLOTLY_LAYOUT, "yaxis": dict(**PLOTLY_LAYOUT["yaxis"], ticksuffix=" d"),
                                 "height": 280})
        st.plotly_chart(fig_len, use_container_width=True, config={"displayModeBar": False})

    with wave_col:
        section("Heatwaves")
        waves = yearly["heatwaves"]
        wave_years = [str(w["year"]) for w in waves]
        fig_waves = make_subplots(specs=[[{"secondary_y": True}]])
        fig_waves.add_trace(
            go.Bar(x=wave_years, y=[w["frequency"] for w in waves], name="Events",
                   marker_color="rgba(255,69,58,0.75)", marker_line_width=0),
            secondary_y=False,
        )
        fig_waves.add_trace(
            go.Scatter(x=wave_years, y=[w["mean_intensity_tmax"] or None for w in waves],
                       name="Mean tmax (°C)", mode="markers", marker=dict(color="#ffd60a", size=6)),
            secondary_y=True,
        )
        fig_waves.update_layout(**{**PLOTLY_LAYOUT, "height": 280})
        st.plotly_chart(fig_waves, use_container_width=True, config={"displayModeBar": False})

    # ── Hot days grid ────────────────────────────────────────
    section("Summer days above the period mean")
    hot_days = data["hot_days"]
    fig_grid = go.Figure(go.Heatmap(
        x=list(range(len(hot_days[0]["days"]))) if hot_days else [],
        y=[str(row["year"]) for row in hot_days],
        z=[[1 if flag else 0 for flag in row["days"]] for row in hot_days],
        colorscale=[[0.0, "#1c1c1e"], [1.0, "#ff453a"]],
        showscale=False,
        hovertemplate="%{y}, day %{x}<extra></extra>",
    ))
    fig_grid.update_layout(**{**PLOTLY_LAYOUT, "height": max(300, 10 * len(hot_days))})
    st.plotly_chart(fig_grid, use_container_width=True, config={"displayModeBar": False})

    # ── Decades ──────────────────────────────────────────────
    section("By decade")
    dec_col, nights_col = st.columns(2)
    with dec_col:
        devs = decades["deviations"]
        fig_dec = go.Figure(go.Bar(
            x=[d["decade"] for d in devs],
            y=[d["dev_tmed_mean"] for d in devs],
            marker_color=["#ff453a" if d["dev_tmed_mean"] > 0 else "#0a84ff" for d in devs],
            marker_line_width=0,
        ))
        fig_dec.update_layout(**{**PLOTLY_LAYOUT, "title": dict(text="Mean deviation (°C)", font=dict(size=13)),
                                 "height": 260})
        st.plotly_chart(fig_dec, use_container_width=True, config={"displayModeBar": False})
    with nights_col:
        nights = decades["thresholds"]
        fig_nights = go.Figure(go.Bar(
            x=[d["decade"] for d in nights],
            y=[d["tropical_nights_mean"] for d in nights],
            marker_color="rgba(191,90,242,0.8)",
            marker_line_width=0,
        ))
        fig_nights.update_layout(**{**PLOTLY_LAYOUT,
                                    "title": dict(text="Tropical nights per summer", font=dict(size=13)),
                                    "height": 260})
        st.plotly_chart(fig_nights, use_container_width=True, config={"displayModeBar": False})

    # ── Extreme summers table ────────────────────────────────
    section("Extreme summers")

    import pandas as pd  # local import — pandas is optional/heavy

    averages = yearly["averages"]
    hottest = max(averages, key=lambda r: r["avg_tmax"])
    coolest = min(averages, key=lambda r: r["avg_tmax"])
    nights = max(yearly["thresholds"], key=lambda r: r["tropical_nights"])
    extreme = max(yearly["thresholds"], key=lambda r: r["extreme_heat_days"])
    wave_year = max(yearly["heatwaves"], key=lambda r: r["frequency"])
    longest = max(yearly["summer_length"], key=lambda r: r["summer_days"], default=None)

    extremes_rows = [
        {"Category": "Hottest summer", "Year": hottest["year"],
         "Value": f"{hottest['avg_tmax']} °C mean max"},
        {"Category": "Coolest summer", "Year": coolest["year"],
         "Value": f"{coolest['avg_tmax']} °C mean max"},
        {"Category": "Most tropical nights", "Year": nights["year"],
         "Value": f"{nights['tropical_nights']} nights"},
        {"Category": "Most days ≥ 40 °C", "Year": extreme["year"],
         "Value": f"{extreme['extreme_heat_days']} days"},
        {"Category": "Most heatwaves", "Year": wave_year["year"],
         "Value": f"{wave_year['frequency']} events"},
    ]
    if longest is not None:
        extremes_rows.append({
            "Category": "Longest meteorological summer", "Year": longest["year"],
            "Value": f"{longest['summer_days']} days",
        })

    df_extremes = pd.DataFrame(extremes_rows)
    st.dataframe(
        df_extremes,
        use_container_width=True,
        hide_index=True,
        column_config={
            "Category": st.column_config.TextColumn("Category", width="medium"),
            "Year": st.column_config.NumberColumn("Year", format="%d"),
            "Value": st.column_config.TextColumn("Value"),
        },
    )


main()
