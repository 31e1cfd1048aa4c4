"""
Data-pattern detectors.

Pure predicates that recognise disguised column semantics from statistics
and values alone, independent of the column name: a column called
'year_established' and one called 'x3' are both years if they behave like
years.
"""

from typing import Any, Mapping, Sequence

from chartsense.core import constants
from chartsense.profiler.models import ColumnDescriptor
from chartsense.profiler.values import numeric_values


def looks_like_year(column: ColumnDescriptor) -> bool:
    """Numeric column whose values sit in 1900-2100 with a narrow spread."""
    if column.type != constants.TYPE_NUMBER:
        return False
    if column.min is None or column.max is None:
        return False
    return (
        column.min >= constants.YEAR_MIN
        and column.max <= constants.YEAR_MAX
        and column.unique_count > constants.YEAR_MIN_DISTINCT
        and (column.max - column.min) <= constants.YEAR_MAX_SPAN
        and column.std_dev is not None
        and column.std_dev < constants.YEAR_MAX_STD
    )


def looks_like_flag(column: ColumnDescriptor, row_count: int) -> bool:
    """Numeric column with at most two values over more than ten rows."""
    if column.type != constants.TYPE_NUMBER:
        return False
    return column.unique_count <= constants.FLAG_MAX_DISTINCT and row_count > constants.FLAG_MIN_ROWS


def is_likely_sequential(
    rows: Sequence[Mapping[str, Any]],
    column_name: str,
    sample_rows: int = constants.SEQUENTIAL_SAMPLE_ROWS,
) -> bool:
    """
    Auto-increment detection.

    Looks at the numeric values in the first sample_rows rows; more than 90%
    of consecutive steps must be strictly ascending.
    """
    values = numeric_values(row.get(column_name) for row in rows[:sample_rows])
    if len(values) < constants.SEQUENTIAL_MIN_VALUES:
        return False

    ascending = sum(1 for prev, cur in zip(values, values[1:]) if cur > prev)
    return ascending / (len(values) - 1) > constants.SEQUENTIAL_ASCENDING_RATIO


def looks_like_url_or_path(column: ColumnDescriptor) -> bool:
    """String column whose sampled values look like URLs or filesystem paths."""
    if column.type != constants.TYPE_STRING:
        return False
    samples = [v for v in column.sample_values if isinstance(v, str)]
    return any(
        v.startswith(constants.URL_PREFIXES) or constants.URL_MARKER in v
        for v in samples
    )
