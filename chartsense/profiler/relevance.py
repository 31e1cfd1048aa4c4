"""
Relevance ranking for column pairs.

Provides the information measures used to decide which columns are worth
charting together:
- Shannon entropy (how informative a dimension's value distribution is)
- Mutual information between a dimension and a binned metric
- Pearson correlation between two metrics

All functions return a neutral 0 on insufficient data instead of raising.
"""

import math
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd
from scipy.stats import entropy as shannon_entropy, pearsonr

from chartsense.core import constants
from chartsense.core.logging_config import get_logger
from chartsense.profiler.values import to_number, to_text, round_half_up

logger = get_logger(__name__)


def entropy(rows: Sequence[Mapping[str, Any]], column_name: str) -> float:
    """
    Shannon entropy (base 2) of a column's value distribution.

    Values are grouped by their text label; missing values form one group.

    Args:
        rows: Row records
        column_name: Column to measure

    Returns:
        Entropy in bits, 0.0 for an empty table
    """
    if not rows:
        return 0.0
    counts = pd.Series([to_text(row.get(column_name)) for row in rows]).value_counts()
    return float(shannon_entropy(counts.to_numpy(), base=2))


def normalized_entropy(rows: Sequence[Mapping[str, Any]], column_name: str, unique_count: int) -> float:
    """Entropy divided by its maximum, log2(unique_count); 0.0 when undefined."""
    max_entropy = math.log2(unique_count or 1)
    if max_entropy <= 0:
        return 0.0
    return entropy(rows, column_name) / max_entropy


def mutual_information(
    rows: Sequence[Mapping[str, Any]],
    dimension: str,
    metric: str,
    bins: int = constants.MI_BINS,
    min_values: int = constants.MI_MIN_VALUES,
) -> float:
    """
    Mutual information between a dimension and a metric discretized into bins.

    The metric is cut into `bins` equal-width bins spanning its observed
    [min, max]; bin edges depend on the metric only. Rows whose metric is not
    numeric are left out of the joint table.

    Args:
        rows: Row records
        dimension: Grouping column (raw text labels are used)
        metric: Numeric column to discretize
        bins: Number of equal-width bins
        min_values: Minimum numeric metric values required

    Returns:
        MI in bits rounded to 3 decimals, 0.0 when there are too few values
    """
    metric_values = np.array([to_number(row.get(metric)) for row in rows], dtype=float)
    valid = ~np.isnan(metric_values)
    if int(valid.sum()) < min_values:
        return 0.0

    values = metric_values[valid]
    low = float(values.min())
    high = float(values.max())
    bin_width = (high - low) / bins or 1.0

    bin_index = np.minimum(np.floor((values - low) / bin_width).astype(int), bins - 1)
    labels = [to_text(row.get(dimension)) for row, keep in zip(rows, valid) if keep]

    joint = pd.crosstab(pd.Series(labels, name="dimension"), pd.Series(bin_index, name="bin"))
    total = float(joint.to_numpy().sum())
    if total == 0:
        return 0.0

    p_xy = joint.to_numpy() / total
    p_x = p_xy.sum(axis=1, keepdims=True)
    p_y = p_xy.sum(axis=0, keepdims=True)

    nonzero = p_xy > 0
    mi = float(np.sum(p_xy[nonzero] * np.log2(p_xy[nonzero] / (p_x @ p_y)[nonzero])))
    result = round_half_up(mi, constants.MI_DECIMALS)
    logger.debug(f"MI({dimension}, {metric}) = {result}")
    return result


def pearson_correlation(
    rows: Sequence[Mapping[str, Any]],
    column_a: str,
    column_b: str,
    sample_rows: int = constants.CORRELATION_SAMPLE_ROWS,
    min_pairs: int = constants.CORRELATION_MIN_PAIRS,
) -> float:
    """
    Pearson product-moment correlation over the leading rows.

    Only rows where both values are numeric count as pairs.

    Args:
        rows: Row records
        column_a: First numeric column
        column_b: Second numeric column
        sample_rows: Number of leading rows to inspect
        min_pairs: Minimum valid pairs required

    Returns:
        r rounded to 2 decimals; 0.0 with too few pairs or zero variance
    """
    a_values = []
    b_values = []
    for row in rows[:sample_rows]:
        a = to_number(row.get(column_a))
        b = to_number(row.get(column_b))
        if not (math.isnan(a) or math.isnan(b)):
            a_values.append(a)
            b_values.append(b)

    if len(a_values) < min_pairs:
        return 0.0

    a_arr = np.array(a_values)
    b_arr = np.array(b_values)
    if np.ptp(a_arr) == 0 or np.ptp(b_arr) == 0:
        return 0.0

    r = float(pearsonr(a_arr, b_arr)[0])
    if math.isnan(r):
        return 0.0
    result = round_half_up(r, constants.CORRELATION_DECIMALS)
    logger.debug(f"corr({column_a}, {column_b}) = {result}")
    return result
