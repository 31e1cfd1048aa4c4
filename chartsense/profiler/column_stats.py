"""
Column Statistics Supplier - builds descriptors from raw rows.

Turns row records (or a pandas DataFrame) into the DatasetDescriptor the
classifier consumes: per-column type, distinct and null counts, a short
sample prefix, and for numeric columns min/max/mean/median/std.

Type detection looks at the first non-null values of a column and picks the
first type whose match ratio clears its threshold, in this order:
    1. boolean  (true/false/0/1)
    2. date     (ISO, US, EU and "Jan 1, 2024" prefixes)
    3. number
    4. string   (fallback, also for all-null columns)

The classifier does not require this module; any externally built
descriptor works the same way.
"""

import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from chartsense.core import constants
from chartsense.core.exceptions import ProfilerError
from chartsense.core.logging_config import get_logger
from chartsense.profiler.models import ColumnDescriptor, DatasetDescriptor
from chartsense.profiler.values import is_missing, is_number, numeric_values, round_half_up, to_text

logger = get_logger(__name__)

DATE_PATTERNS = [
    r'^\d{4}-\d{2}-\d{2}',           # ISO date (2024-01-15)
    r'^\d{1,2}/\d{1,2}/\d{2,4}',     # US date (1/15/2024)
    r'^\d{1,2}-\d{1,2}-\d{2,4}',     # EU date (15-01-2024)
    r'^\w{3,9}\s+\d{1,2},?\s+\d{4}', # Month name (Jan 15, 2024)
]
_date_regexes = [re.compile(p) for p in DATE_PATTERNS]

BOOLEAN_TOKENS = {"true", "false", "0", "1"}


def detect_column_type(values: Sequence[Any]) -> str:
    """
    Infer a column type from its raw values.

    Args:
        values: All cell values of the column, nulls included

    Returns:
        One of boolean, date, number, string
    """
    non_null = [v for v in values if not is_missing(v)]
    sample = non_null[:constants.TYPE_DETECTION_SAMPLE]
    if not sample:
        return constants.TYPE_STRING

    bool_count = 0
    date_count = 0
    num_count = 0
    for value in sample:
        text = to_text(value).strip()
        if text.lower() in BOOLEAN_TOKENS:
            bool_count += 1
        if is_number(text):
            num_count += 1
        if any(regex.match(text) for regex in _date_regexes):
            date_count += 1

    total = len(sample)
    if bool_count / total > constants.BOOLEAN_RATIO:
        return constants.TYPE_BOOLEAN
    if date_count / total > constants.DATE_RATIO:
        return constants.TYPE_DATE
    if num_count / total > constants.NUMBER_RATIO:
        return constants.TYPE_NUMBER
    return constants.TYPE_STRING


def _numeric_summary(numbers: List[float]) -> Dict[str, float]:
    """Min/max plus mean, median and population std rounded to 2 decimals."""
    series = pd.Series(numbers, dtype=float)
    return {
        "min": float(series.min()),
        "max": float(series.max()),
        "mean": round_half_up(float(series.mean()), constants.SUMMARY_DECIMALS),
        "median": round_half_up(float(series.median()), constants.SUMMARY_DECIMALS),
        "std_dev": round_half_up(float(np.std(series.to_numpy(), ddof=0)), constants.SUMMARY_DECIMALS),
    }


def describe_column(name: str, values: Sequence[Any]) -> ColumnDescriptor:
    """Build the descriptor for one column from its cell values."""
    column_type = detect_column_type(values)
    non_null = [v for v in values if not is_missing(v)]

    column = ColumnDescriptor(
        name=name,
        type=column_type,
        unique_count=len({to_text(v) for v in non_null}),
        null_count=len(values) - len(non_null),
    )

    if column_type == constants.TYPE_NUMBER:
        numbers = numeric_values(non_null)
        column.sample_values = numbers[:constants.SAMPLE_VALUE_COUNT]
        if numbers:
            summary = _numeric_summary(numbers)
            column.min = summary["min"]
            column.max = summary["max"]
            column.mean = summary["mean"]
            column.median = summary["median"]
            column.std_dev = summary["std_dev"]
    else:
        column.sample_values = [to_text(v) for v in non_null[:constants.SAMPLE_VALUE_COUNT]]

    return column


def _column_order(rows: Sequence[Mapping]) -> List[str]:
    """Column names in first-seen order across all rows."""
    seen: Dict[str, None] = {}
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise ProfilerError(
                f"Row {i} is a {type(row).__name__}, expected a mapping of column name to value",
                operation="describe_rows"
            )
        for key in row.keys():
            seen.setdefault(key, None)
    return list(seen)


def describe_rows(
    rows: Any,
    file_name: str = "",
    file_size: int = 0,
    columns: Optional[List[str]] = None
) -> DatasetDescriptor:
    """
    Build a DatasetDescriptor from row records.

    Args:
        rows: Sequence of mappings, or a pandas DataFrame
        file_name: Source file name (presentation only)
        file_size: Source file size in bytes (presentation only)
        columns: Explicit column order; defaults to first-seen key order

    Returns:
        DatasetDescriptor with one ColumnDescriptor per column

    Raises:
        ProfilerError: If rows is not tabular
    """
    if isinstance(rows, pd.DataFrame):
        return describe_dataframe(rows, file_name=file_name, file_size=file_size)
    if rows is None or isinstance(rows, (str, bytes, Mapping)):
        raise ProfilerError(
            f"Expected a sequence of row mappings, got {type(rows).__name__}",
            operation="describe_rows"
        )

    rows = list(rows)
    names = columns if columns is not None else _column_order(rows)
    descriptors = [describe_column(name, [row.get(name) for row in rows]) for name in names]

    logger.debug(f"Described {len(descriptors)} columns over {len(rows)} rows")
    return DatasetDescriptor(
        row_count=len(rows),
        columns=descriptors,
        file_name=file_name,
        file_size=file_size,
    )


def describe_dataframe(df: pd.DataFrame, file_name: str = "", file_size: int = 0) -> DatasetDescriptor:
    """
    Build a DatasetDescriptor from a DataFrame.

    Column labels are converted to strings; NaN/NaT cells count as nulls.
    """
    if not isinstance(df, pd.DataFrame):
        raise ProfilerError(
            f"Expected a pandas DataFrame, got {type(df).__name__}",
            operation="describe_dataframe"
        )
    df = df.rename(columns=str)
    rows = df.to_dict(orient="records")
    return describe_rows(rows, file_name=file_name, file_size=file_size, columns=list(df.columns))
