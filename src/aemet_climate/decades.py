# Project: aemet-climate
# Owner: GreenUnicorn
"""
decades.py — Roll per-year rows up into decade buckets.

Decades are never stored; they are recomputed from the yearly rows each time.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

EMPTY_MEAN = 0.0


def robust_mean(values: Iterable) -> float:
    """Mean of the numeric values, skipping None and anything non-numeric.

    Numeric strings ('1.25') are accepted. With no valid value at all the
    result is EMPTY_MEAN (0.0) rather than an error, so callers that need to
    tell "no data" apart from a real 0.0 must check for that themselves.
    """
    valid = []
    for v in values:
        if isinstance(v, bool) or v is None:
            continue
        if isinstance(v, (int, float)):
            if v == v:  # skip NaN
                valid.append(float(v))
        elif isinstance(v, str):
            try:
                valid.append(float(v))
            except ValueError:
                continue
    if not valid:
        return EMPTY_MEAN
    return sum(valid) / len(valid)


def decade_of(year: int) -> int:
    """1987 -> 1980."""
    return (year // 10) * 10


def decade_label(year: int) -> str:
    """1987 -> '1980s'."""
    return f"{decade_of(year)}s"


def rollup_by_decade(
    yearly: list[dict],
    mean_fields: dict[str, str] | None = None,
    sum_fields: dict[str, str] | None = None,
    decimals: int = 2,
) -> list[dict]:
    """Group yearly rows by decade and average or sum selected columns.

    Args:
        yearly: Rows that each carry an int 'year' key.
        mean_fields: {output column: yearly column} to average (robust mean).
        sum_fields: {output column: yearly column} to sum.
        decimals: Rounding applied to averaged columns.

    Returns:
        One dict per decade, sorted ascending, with a 'decade' label like
        '1970s' followed by the requested columns.
    """
    mean_fields = mean_fields or {}
    sum_fields = sum_fields or {}

    by_decade: dict[int, list[dict]] = defaultdict(list)
    for row in yearly:
        by_decade[decade_of(int(row["year"]))].append(row)

    result = []
    for decade in sorted(by_decade):
        rows = by_decade[decade]
        out = {"decade": f"{decade}s"}
        for out_key, src_key in sum_fields.items():
            out[out_key] = sum(r[src_key] for r in rows if r.get(src_key) is not None)
        for out_key, src_key in mean_fields.items():
            out[out_key] = round(robust_mean(r.get(src_key) for r in rows), decimals)
        result.append(out)
    return result
