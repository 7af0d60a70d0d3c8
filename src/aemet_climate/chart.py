# Project: aemet-climate
# Owner: GreenUnicorn
"""
chart.py — ASCII table and bar chart rendering for analysis output.

Uses only the Python standard library. All rendering functions return
strings ready to print. Colouring uses 24-bit ANSI escapes and can be turned
off with color=False (e.g. when output is piped to a file).
"""

import os
import re
from datetime import date

FALLBACK_TERMINAL_WIDTH: int = 80
BAR_LABEL_RESERVE: int = 30  # characters reserved for label + value outside the bar

BLUE = (30, 144, 255)
WHITE = (240, 240, 240)
RED = (255, 99, 71)
YELLOW = (255, 255, 224)

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def _lerp(factor: float, c1: tuple, c2: tuple) -> tuple:
    factor = max(0.0, min(1.0, factor))
    return tuple(round(a + factor * (b - a)) for a, b in zip(c1, c2))


def _paint(text: str, rgb: tuple) -> str:
    r, g, b = rgb
    return f"\x1b[38;2;{r};{g};{b}m{text}\x1b[0m"


def _visible_len(text: str) -> int:
    return len(_ANSI_RE.sub("", text))


def colorize(value: float, low: float, high: float, kind: str) -> tuple:
    """Pick a colour for a value given its column's range.

    'deviation' shades negatives white→blue and positives white→red around
    zero; 'gradient' shades from yellow (column min) to red (column max).
    """
    if kind == "deviation":
        if value < 0:
            return _lerp(value / low if low < 0 else 0, WHITE, BLUE)
        return _lerp(value / high if high > 0 else 0, WHITE, RED)
    span = high - low
    return _lerp((value - low) / span if span > 0 else 0, YELLOW, RED)


def _fmt_cell(value, decimals: int | None) -> str:
    if value is None:
        return "—"
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, float) and decimals is not None:
        return f"{value:.{decimals}f}"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def render_table(
    rows: list[dict],
    title: str,
    styles: dict[str, tuple[str, int]] | None = None,
    color: bool = True,
) -> str:
    """Render rows as a fixed-width table.

    Args:
        rows: List of dicts; the first row's keys become the columns.
        title: Heading printed above the table.
        styles: {column: (kind, decimals)} where kind is 'deviation' or
            'gradient'. Styled columns are formatted with `decimals` and,
            when color is True, shaded relative to the column's range.
        color: Emit ANSI colour codes.

    Returns:
        Multi-line string containing the formatted table.
    """
    if not rows:
        return f"{title}\n  No data to display."
    styles = styles or {}
    columns = list(rows[0].keys())

    ranges = {}
    for col in styles:
        values = [r[col] for r in rows if isinstance(r.get(col), (int, float))]
        if values:
            ranges[col] = (min(values), max(values))

    body = []
    for row in rows:
        cells = []
        for col in columns:
            value = row.get(col)
            kind, decimals = styles.get(col, (None, None))
            text = _fmt_cell(float(value) if kind and isinstance(value, (int, float)) else value, decimals)
            if color and kind and col in ranges and isinstance(value, (int, float)):
                text = _paint(text, colorize(value, *ranges[col], kind))
            cells.append(text)
        body.append(cells)

    widths = [
        max(len(col), *(_visible_len(cells[i]) for cells in body))
        for i, col in enumerate(columns)
    ]

    def _line(cells: list[str]) -> str:
        padded = []
        for text, width in zip(cells, widths):
            pad = width - _visible_len(text)
            padded.append(" " * (pad // 2) + text + " " * (pad - pad // 2))
        return "│ " + " │ ".join(padded) + " │"

    sep = "─" * (sum(widths) + 3 * len(widths) + 1)
    lines = [title, sep, _line(columns), sep]
    lines.extend(_line(cells) for cells in body)
    lines.append(sep)
    return "\n".join(lines)


# ─────────────────────────────────────────────────────────────
# Bar chart helpers
# ─────────────────────────────────────────────────────────────

def _bar(value: float, max_value: float, bar_width: int) -> str:
    """Render a single filled/empty bar scaled to bar_width.

    Args:
        value: The data value to represent.
        max_value: The maximum value (maps to full bar width).
        bar_width: Total character width of the bar.

    Returns:
        String of '█' and '░' characters of length bar_width.
    """
    if max_value == 0:
        filled = 0
    else:
        filled = round((value / max_value) * bar_width)
    filled = max(0, min(filled, bar_width))
    return "█" * filled + "░" * (bar_width - filled)


def render_bar_chart(
    labels: list[str],
    values: list[float],
    title: str,
    unit: str = "",
    bar_width: int | None = None,
) -> str:
    """Render a labelled horizontal bar chart.

    Args:
        labels: List of row label strings.
        values: List of numeric values corresponding to each label.
        title: Chart title printed above the bars.
        unit: Optional unit suffix appended to each value (e.g. ' d').
        bar_width: Width of the bar in characters. Auto-detected from terminal if None.

    Returns:
        Multi-line string containing the chart.
    """
    if bar_width is None:
        try:
            terminal_width = os.get_terminal_size().columns
        except OSError:
            terminal_width = FALLBACK_TERMINAL_WIDTH
        bar_width = max(10, terminal_width - BAR_LABEL_RESERVE)

    max_val = max(values) if values else 1
    if max_val == 0:
        max_val = 1  # avoid division by zero

    label_w = max(len(lbl) for lbl in labels) if labels else 3
    lines = [title]
    for label, value in zip(labels, values):
        bar = _bar(value, max_val, bar_width)
        val_str = f"{value:.0f}{unit}"
        lines.append(f"  {label:<{label_w}} │{bar}│ {val_str:>6}")

    return "\n".join(lines)


# Section title, results path, column styles
SUMMER_SECTIONS = [
    ("📈 Yearly deviation from the period mean", ("yearly", "deviations"),
     {"dev_tmed": ("deviation", 2), "dev_tmax": ("deviation", 2), "dev_tmin": ("deviation", 2)}),
    ("🔥 Days per year above the period mean", ("yearly", "exceedances"),
     {"days_above_tmed": ("gradient", 0), "days_above_tmax": ("gradient", 0), "days_above_tmin": ("gradient", 0)}),
    ("🌡  Tropical nights (tmin ≥ 20°C) and extreme heat days (tmax ≥ 40°C)", ("yearly", "thresholds"),
     {"tropical_nights": ("gradient", 0), "extreme_heat_days": ("gradient", 0)}),
    ("☀️  Meteorological summer length per year", ("yearly", "summer_length"),
     {"summer_days": ("gradient", 0)}),
    ("🥵 Heatwaves per year", ("yearly", "heatwaves"),
     {"frequency": ("gradient", 0), "mean_duration_days": ("gradient", 0),
      "mean_intensity_tmax": ("gradient", 1), "mean_intensity_tmed": ("gradient", 1)}),
    ("📈 Mean deviation per decade", ("decades", "deviations"),
     {"dev_tmed_mean": ("deviation", 2), "dev_tmax_mean": ("deviation", 2), "dev_tmin_mean": ("deviation", 2)}),
    ("🔥 Average days/year above the period mean, per decade", ("decades", "exceedances"),
     {"days_above_tmed_mean": ("gradient", 1), "days_above_tmax_mean": ("gradient", 1),
      "days_above_tmin_mean": ("gradient", 1)}),
    ("🔥 Total days above the period mean, per decade", ("decades", "exceedance_totals"),
     {"days_above_tmed_total": ("gradient", 0), "days_above_tmax_total": ("gradient", 0),
      "days_above_tmin_total": ("gradient", 0)}),
    ("🌡  Tropical nights and extreme heat days, yearly average per decade", ("decades", "thresholds"),
     {"tropical_nights_mean": ("gradient", 1), "extreme_heat_days_mean": ("gradient", 1)}),
    ("☀️  Mean meteorological summer length per decade", ("decades", "summer_length"),
     {"mean_summer_days": ("gradient", 0)}),
    ("🥵 Heatwaves per decade", ("decades", "heatwaves"),
     {"frequency_total": ("gradient", 0), "frequency_mean": ("gradient", 1),
      "mean_duration_days": ("gradient", 1), "mean_intensity_tmax": ("gradient", 1)}),
]


def render_summer_report(results: dict, station_id: str, color: bool = True) -> str:
    """Render every summer analysis table as one printable report."""
    period = results["period"]
    sep = "─" * 62
    parts = [
        f"📍 Station {station_id} — {period['period']}",
        sep,
        f"📊 Period means: tmed {period['mean_tmed']}°C · tmax {period['mean_tmax']}°C · "
        f"tmin {period['mean_tmin']}°C",
    ]
    threshold = results.get("heatwave_threshold")
    if threshold is not None:
        parts.append(f"🔥 Heatwave threshold (tmax p95 of reference period): {threshold}°C")
    for title, (section, table), styles in SUMMER_SECTIONS:
        parts.append("")
        parts.append(render_table(results[section][table], title, styles, color=color))

    decades = results["decades"]["summer_length"]
    if decades:
        parts.append("")
        parts.append(render_bar_chart(
            [d["decade"] for d in decades],
            [d["mean_summer_days"] for d in decades],
            "☀️  Meteorological summer length by decade (days)",
            unit=" d",
        ))
    return "\n".join(parts)
