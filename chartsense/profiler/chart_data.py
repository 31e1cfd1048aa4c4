"""
Chart data shaping.

Prepares the series a consumer needs to draw a ChartRecommendation:
category counts, grouped aggregates, histogram bins and time series. Nothing
here renders; every function returns plain lists of dicts.
"""

import math
from typing import Any, Dict, List, Mapping, Sequence

import numpy as np
import pandas as pd

from chartsense.core import constants
from chartsense.profiler.values import (
    as_records,
    is_missing,
    numeric_values,
    round_half_up,
    to_number,
    to_text,
)

MISSING_CATEGORY = "N/A"
OTHER_CATEGORY = "Other"


def format_number(value: float) -> str:
    """
    Compact display form: 1.2B, 3.4M, 5.6K, otherwise 0 or 2 decimals.

    >>> format_number(1234567)
    '1.2M'
    """
    magnitude = abs(value)
    if magnitude >= 1_000_000_000:
        return f"{value / 1_000_000_000:.1f}B"
    if magnitude >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if magnitude >= 1_000:
        return f"{value / 1_000:.1f}K"
    if float(value).is_integer():
        return f"{value:.0f}"
    return f"{value:.2f}"


def _label(value: Any, missing: str) -> str:
    return missing if is_missing(value) else to_text(value)


def top_categories(rows: Any, column: str, limit: int = constants.TOP_CATEGORY_LIMIT) -> List[Dict[str, Any]]:
    """
    Most frequent values of a column.

    Returns:
        [{'name': label, 'value': count}, ...] sorted by count descending;
        ties keep first-seen order
    """
    records = as_records(rows)
    if not records:
        return []
    labels = pd.Series([_label(row.get(column), MISSING_CATEGORY) for row in records])
    counts = labels.value_counts(sort=False)
    counts = counts.sort_values(ascending=False, kind="stable").head(limit)
    return [{"name": name, "value": int(count)} for name, count in counts.items()]


def aggregate_by_category(
    rows: Any,
    category_column: str,
    value_column: str,
    aggregation: str = "sum"
) -> List[Dict[str, Any]]:
    """
    Group a metric by a category column.

    Rows whose value is not numeric are skipped; missing categories group as
    'Other'. Group values are rounded to integers.

    Args:
        rows: Row records or a DataFrame
        category_column: Grouping column
        value_column: Numeric column to aggregate
        aggregation: sum, avg or count

    Returns:
        Top groups by value: [{'name': label, 'value': n}, ...]
    """
    if aggregation not in ("sum", "avg", "count"):
        raise ValueError(f"Unsupported aggregation '{aggregation}'; expected sum, avg or count")

    labels = []
    values = []
    for row in as_records(rows):
        number = to_number(row.get(value_column))
        if math.isnan(number):
            continue
        labels.append(_label(row.get(category_column), OTHER_CATEGORY))
        values.append(number)
    if not values:
        return []

    frame = pd.DataFrame({"name": labels, "value": values})
    grouped = frame.groupby("name", sort=False)["value"]
    if aggregation == "sum":
        result = grouped.sum()
    elif aggregation == "avg":
        result = grouped.mean()
    else:
        result = grouped.count()

    result = result.sort_values(ascending=False, kind="stable").head(constants.AGGREGATE_GROUP_LIMIT)
    return [{"name": name, "value": int(round_half_up(float(v)))} for name, v in result.items()]


def distribution_from_values(values: Sequence[float], bins: int = constants.DISTRIBUTION_BINS) -> List[Dict[str, Any]]:
    """
    Equal-width histogram of raw numbers.

    A zero-width range uses bin width 1; the maximum lands in the last bin.

    Returns:
        [{'name': 'low-high', 'value': count}, ...] with exactly `bins` entries
    """
    numbers = np.array(numeric_values(values), dtype=float)
    if numbers.size == 0:
        return []

    low = float(numbers.min())
    high = float(numbers.max())
    bin_width = (high - low) / bins or 1.0

    indexes = np.minimum(np.floor((numbers - low) / bin_width).astype(int), bins - 1)
    counts = np.bincount(indexes, minlength=bins)

    return [
        {
            "name": f"{format_number(low + i * bin_width)}-{format_number(low + (i + 1) * bin_width)}",
            "value": int(count),
        }
        for i, count in enumerate(counts)
    ]


def distribution(rows: Any, column: str, bins: int = constants.DISTRIBUTION_BINS) -> List[Dict[str, Any]]:
    """Histogram of a column: [{'range': 'low-high', 'count': n}, ...]."""
    values = [row.get(column) for row in as_records(rows)]
    return [
        {"range": entry["name"], "count": entry["value"]}
        for entry in distribution_from_values(values, bins)
    ]


def time_series(
    rows: Any,
    date_column: str,
    value_column: str,
    max_points: int = constants.TIMESERIES_MAX_POINTS
) -> List[Dict[str, Any]]:
    """
    Date/value points sorted by date.

    Rows with a missing date or non-numeric value are dropped. Longer series
    keep every ceil(n / max_points)-th point. Unparsable dates sort last.

    Returns:
        [{'date': text, 'value': number}, ...]
    """
    points = []
    for row in as_records(rows):
        date_value = row.get(date_column)
        number = to_number(row.get(value_column))
        if is_missing(date_value) or math.isnan(number):
            continue
        points.append({"date": to_text(date_value), "value": number})
    if not points:
        return []

    frame = pd.DataFrame(points)
    frame["parsed"] = pd.to_datetime(frame["date"], errors="coerce", format="mixed")
    frame = frame.sort_values("parsed", kind="stable", na_position="last")

    if len(frame) > max_points:
        step = math.ceil(len(frame) / max_points)
        frame = frame.iloc[::step]

    return [{"date": d, "value": float(v)} for d, v in zip(frame["date"], frame["value"])]


def compute_correlation(rows: Any, column_a: str, column_b: str) -> float:
    """
    Pearson correlation over every row where both values are numeric.

    Returns 0.0 with fewer than 3 pairs or zero variance; rounded to 2 decimals.
    """
    a_values = []
    b_values = []
    for row in as_records(rows):
        a = to_number(row.get(column_a))
        b = to_number(row.get(column_b))
        if not (math.isnan(a) or math.isnan(b)):
            a_values.append(a)
            b_values.append(b)
    if len(a_values) < 3:
        return 0.0

    a_arr = np.array(a_values)
    b_arr = np.array(b_values)
    if np.ptp(a_arr) == 0 or np.ptp(b_arr) == 0:
        return 0.0
    r = float(np.corrcoef(a_arr, b_arr)[0, 1])
    if math.isnan(r):
        return 0.0
    return round_half_up(r, constants.CORRELATION_DECIMALS)


def chart_series(rows: Any, recommendation) -> List[Dict[str, Any]]:
    """
    Series for one ChartRecommendation, dispatched on chart type and aggregation.

    bar/pie use grouped aggregates (or category counts for count pies),
    area uses the time series, histogram the distribution, and correlation
    lines the raw (x, y) pairs.
    """
    records: List[Mapping[str, Any]] = as_records(rows)
    rec = recommendation

    if rec.chart_type in ("bar", "pie") or (rec.chart_type == "line" and rec.aggregation in ("sum", "avg")):
        if rec.aggregation == "count":
            return top_categories(records, rec.x_column)
        return aggregate_by_category(records, rec.x_column, rec.y_column, rec.aggregation)
    if rec.chart_type == "area":
        return time_series(records, rec.x_column, rec.y_column)
    if rec.chart_type == "histogram":
        return distribution_from_values([row.get(rec.x_column) for row in records])

    pairs = []
    for row in records:
        x = to_number(row.get(rec.x_column))
        y = to_number(row.get(rec.y_column))
        if not (math.isnan(x) or math.isnan(y)):
            pairs.append({"x": x, "y": y})
    return pairs
