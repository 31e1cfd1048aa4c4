"""
Scalar coercion shared by every statistic.

Row records are untyped mappings: a cell may hold a number, a string, a
boolean, None or a pandas/numpy scalar. All numeric and categorical
statistics go through to_number() and to_text() so "is this a number"
and "what is this value's category label" are answered the same way
everywhere.
"""

import math
import numbers
import re
from typing import Any, Iterable, List, Mapping

import numpy as np
import pandas as pd

# Plain decimal literals only: no digit separators, hex or nan/inf words
_DECIMAL_LITERAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def to_number(value: Any) -> float:
    """
    Best-effort numeric coercion.

    Returns nan for None, empty or unparsable strings, NaN and infinities.
    Strings must be plain decimal literals, so "1_000" is not a number.
    Booleans count as 1.0 / 0.0.
    """
    if value is None:
        return math.nan
    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0
    if isinstance(value, numbers.Number):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return math.nan
        return number if math.isfinite(number) else math.nan
    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_LITERAL.fullmatch(text):
            return math.nan
        number = float(text)
        return number if math.isfinite(number) else math.nan
    return math.nan


def is_number(value: Any) -> bool:
    """True when to_number() yields a finite value."""
    return not math.isnan(to_number(value))


def is_missing(value: Any) -> bool:
    """None, NaN/NaT and empty strings are missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def to_text(value: Any) -> str:
    """
    Category label for a cell.

    Missing values map to the empty string so they form their own group.
    Integral floats drop the trailing '.0' so 3 and 3.0 land in one group.
    """
    if is_missing(value):
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)):
        number = float(value)
        if math.isfinite(number) and number.is_integer():
            return str(int(number))
        return str(number)
    if isinstance(value, np.integer):
        return str(int(value))
    return str(value)


def numeric_values(values: Iterable[Any]) -> List[float]:
    """Finite numeric values, in order, with everything else dropped."""
    result = []
    for value in values:
        number = to_number(value)
        if not math.isnan(number):
            result.append(number)
    return result


def round_half_up(value: float, digits: int = 0) -> float:
    """
    Round half away from zero on the positive side, matching floor(x + 0.5).

    Python's round() uses banker's rounding; scores and confidences must be
    stable for values that land exactly on .5.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def as_records(rows: Any) -> List[Mapping[str, Any]]:
    """Accept a DataFrame or a sequence of mappings and return records."""
    if rows is None:
        return []
    if isinstance(rows, pd.DataFrame):
        return rows.to_dict(orient="records")
    return list(rows)
