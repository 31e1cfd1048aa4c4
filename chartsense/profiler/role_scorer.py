"""
Column role scoring.

Every column is scored twice: once as a candidate metric (a numeric value
axis) and once as a candidate dimension (a grouping axis). Each score is the
sum of small named rules; each rule encodes one heuristic and returns a
delta, so a score can be broken down rule by rule with explain_metric() /
explain_dimension().

Metric scores of -inf mark non-numeric columns as ineligible.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from chartsense.core import constants
from chartsense.core.config import ClassifierConfig
from chartsense.core.logging_config import get_logger
from chartsense.profiler.detectors import (
    is_likely_sequential,
    looks_like_flag,
    looks_like_url_or_path,
    looks_like_year,
)
from chartsense.profiler.models import ColumnDescriptor, DatasetDescriptor, RoleScore
from chartsense.profiler.patterns import PatternLibrary, get_pattern_library
from chartsense.profiler.relevance import normalized_entropy
from chartsense.profiler.values import numeric_values

logger = get_logger(__name__)


@dataclass
class ScoringContext:
    """Everything a rule may look at for one column."""
    column: ColumnDescriptor
    dataset: DatasetDescriptor
    rows: Sequence[Mapping[str, Any]]
    patterns: PatternLibrary
    config: ClassifierConfig

    @property
    def row_count(self) -> int:
        return self.dataset.row_count


Rule = Callable[[ScoringContext], float]


# ============================================================================
# Metric rules
# ============================================================================

def metric_identifier_name(ctx: ScoringContext) -> float:
    return -50 if ctx.patterns.is_identifier_name(ctx.column.name) else 0


def metric_free_text_name(ctx: ScoringContext) -> float:
    return -30 if ctx.patterns.is_free_text_name(ctx.column.name) else 0


def metric_keyword_name(ctx: ScoringContext) -> float:
    return 40 if ctx.patterns.is_metric_name(ctx.column.name) else 0


def metric_year_like(ctx: ScoringContext) -> float:
    # Years are timelines, not totals
    return -35 if looks_like_year(ctx.column) else 0


def metric_flag_like(ctx: ScoringContext) -> float:
    return -25 if looks_like_flag(ctx.column, ctx.row_count) else 0


def metric_url_or_path(ctx: ScoringContext) -> float:
    return -40 if looks_like_url_or_path(ctx.column) else 0


def metric_coefficient_of_variation(ctx: ScoringContext) -> float:
    col = ctx.column
    if not col.mean or not col.std_dev:
        return 0
    cv = abs(col.std_dev / col.mean)
    if constants.CV_SWEET_SPOT_LOW <= cv <= constants.CV_SWEET_SPOT_HIGH:
        return 15
    if cv > constants.CV_EXCESSIVE:
        return -5
    return 0


def metric_has_variance(ctx: ScoringContext) -> float:
    return 5 if ctx.column.std_dev is not None and ctx.column.std_dev > 0 else 0


def metric_range_breadth(ctx: ScoringContext) -> float:
    value_range = ctx.column.value_range
    return sum(5 for step in constants.RANGE_STEPS if value_range > step)


def metric_non_negative(ctx: ScoringContext) -> float:
    return 5 if ctx.column.min is not None and ctx.column.min >= 0 else 0


def metric_decimal_values(ctx: ScoringContext) -> float:
    # Prices and rates carry decimals; counts do not
    samples = numeric_values(ctx.column.sample_values)
    return 8 if any(not float(n).is_integer() for n in samples) else 0


def metric_constant(ctx: ScoringContext) -> float:
    col = ctx.column
    if col.min is not None and col.max is not None and col.min == col.max:
        return -40
    return 0


def metric_encoded_category(ctx: ScoringContext) -> float:
    if (ctx.column.unique_count <= constants.ENCODED_CATEGORY_MAX_DISTINCT
            and ctx.row_count > constants.ENCODED_CATEGORY_MIN_ROWS):
        return -15
    return 0


def metric_unique_per_row(ctx: ScoringContext) -> float:
    return -20 if ctx.column.unique_count == ctx.row_count else 0


def metric_sequential(ctx: ScoringContext) -> float:
    if is_likely_sequential(ctx.rows, ctx.column.name, ctx.config.sequential_sample_rows):
        return -30
    return 0


METRIC_RULES: Tuple[Rule, ...] = (
    metric_identifier_name,
    metric_free_text_name,
    metric_keyword_name,
    metric_year_like,
    metric_flag_like,
    metric_url_or_path,
    metric_coefficient_of_variation,
    metric_has_variance,
    metric_range_breadth,
    metric_non_negative,
    metric_decimal_values,
    metric_constant,
    metric_encoded_category,
    metric_unique_per_row,
    metric_sequential,
)


# ============================================================================
# Dimension rules
# ============================================================================

def dimension_identifier_name(ctx: ScoringContext) -> float:
    return -30 if ctx.patterns.is_identifier_name(ctx.column.name) else 0


def dimension_url_or_path(ctx: ScoringContext) -> float:
    return -40 if looks_like_url_or_path(ctx.column) else 0


def dimension_keyword_name(ctx: ScoringContext) -> float:
    return 40 if ctx.patterns.is_dimension_name(ctx.column.name) else 0


def dimension_string_base(ctx: ScoringContext) -> float:
    return 10


def dimension_cardinality(ctx: ScoringContext) -> float:
    unique = ctx.column.unique_count
    if constants.DIMENSION_SWEET_SPOT_MIN <= unique <= constants.DIMENSION_SWEET_SPOT_MAX:
        return 30
    if constants.DIMENSION_SWEET_SPOT_MAX < unique <= constants.DIMENSION_WIDE_MAX:
        return 10
    if unique > constants.DIMENSION_WIDE_MAX:
        return -10
    return 0


def dimension_label_length(ctx: ScoringContext) -> float:
    samples = [v for v in ctx.column.sample_values if isinstance(v, str)]
    if not samples:
        return 0
    avg_length = sum(len(v) for v in samples) / len(samples)
    if avg_length <= constants.SHORT_LABEL_LENGTH:
        return 10
    if avg_length > constants.LONG_LABEL_LENGTH:
        return -20
    return 0


def dimension_sample_repetition(ctx: ScoringContext) -> float:
    # An empty sample counts as fully repetitive
    samples = ctx.column.sample_values
    repetition = 1 - len(set(samples)) / max(len(samples), 1)
    return 15 if repetition > constants.SAMPLE_REPETITION_THRESHOLD else 0


def dimension_entropy(ctx: ScoringContext) -> float:
    # Uniform-ish category distributions make more interesting groupings
    h = normalized_entropy(ctx.rows, ctx.column.name, ctx.column.unique_count)
    return 10 if h > constants.NORMALIZED_ENTROPY_THRESHOLD else 0


def dimension_year_like(ctx: ScoringContext) -> float:
    return 35 if looks_like_year(ctx.column) else 0


def dimension_date(ctx: ScoringContext) -> float:
    return 25 if ctx.column.type == constants.TYPE_DATE else 0


def dimension_small_scale(ctx: ScoringContext) -> float:
    # Rating scales such as 1-5
    col = ctx.column
    if (col.type == constants.TYPE_NUMBER
            and col.unique_count <= constants.SMALL_SCALE_MAX_DISTINCT
            and not looks_like_flag(col, ctx.row_count)):
        return 15
    return 0


DIMENSION_NAME_RULES: Tuple[Rule, ...] = (
    dimension_identifier_name,
    dimension_url_or_path,
    dimension_keyword_name,
)

DIMENSION_STRING_RULES: Tuple[Rule, ...] = (
    dimension_string_base,
    dimension_cardinality,
    dimension_label_length,
    dimension_sample_repetition,
    dimension_entropy,
)

DIMENSION_TYPE_RULES: Tuple[Rule, ...] = (
    dimension_year_like,
    dimension_date,
    dimension_small_scale,
)

# A string column with one distinct value per row is a name or key
UNIQUE_STRING_PENALTY = -40


def _apply(rules: Sequence[Rule], ctx: ScoringContext) -> List[Tuple[str, float]]:
    return [(rule.__name__, rule(ctx)) for rule in rules]


class RoleScorer:
    """
    Scores and ranks columns as metrics and as dimensions.

    Attributes:
        patterns: Keyword vocabularies used by the name rules
        config: Tunable thresholds (sequential sample size)
    """

    def __init__(
        self,
        patterns: Optional[PatternLibrary] = None,
        config: Optional[ClassifierConfig] = None
    ):
        self.patterns = patterns or get_pattern_library()
        self.config = config or ClassifierConfig()

    def _context(self, column, dataset, rows) -> ScoringContext:
        return ScoringContext(column, dataset, rows, self.patterns, self.config)

    def explain_metric(
        self,
        column: ColumnDescriptor,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]]
    ) -> List[Tuple[str, float]]:
        """
        Per-rule breakdown of the metric score.

        Returns an empty list for non-numeric (ineligible) columns.
        """
        if column.type != constants.TYPE_NUMBER:
            return []
        return _apply(METRIC_RULES, self._context(column, dataset, rows))

    def score_as_metric(
        self,
        column: ColumnDescriptor,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]]
    ) -> float:
        """Metric desirability; -inf for non-numeric columns."""
        if column.type != constants.TYPE_NUMBER:
            return -math.inf
        return float(sum(delta for _, delta in self.explain_metric(column, dataset, rows)))

    def explain_dimension(
        self,
        column: ColumnDescriptor,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]]
    ) -> List[Tuple[str, float]]:
        """
        Per-rule breakdown of the dimension score.

        A string column with one distinct value per row stops after the name
        rules with a fixed penalty; no further bonuses apply.
        """
        ctx = self._context(column, dataset, rows)
        breakdown = _apply(DIMENSION_NAME_RULES, ctx)

        if column.type == constants.TYPE_STRING:
            if column.unique_count == dataset.row_count:
                breakdown.append(("dimension_unique_per_row", UNIQUE_STRING_PENALTY))
                return breakdown
            breakdown.extend(_apply(DIMENSION_STRING_RULES, ctx))

        breakdown.extend(_apply(DIMENSION_TYPE_RULES, ctx))
        return breakdown

    def score_as_dimension(
        self,
        column: ColumnDescriptor,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]]
    ) -> float:
        """Dimension desirability for a column of any type."""
        return float(sum(delta for _, delta in self.explain_dimension(column, dataset, rows)))

    def rank_metrics(
        self,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]]
    ) -> List[RoleScore]:
        """
        Eligible (numeric) columns sorted by metric score, best first.

        Ties keep source column order.
        """
        scored = [RoleScore(col, self.score_as_metric(col, dataset, rows)) for col in dataset.columns]
        ranked = sorted((s for s in scored if s.eligible), key=lambda s: s.score, reverse=True)
        for s in ranked:
            logger.debug(f"metric score {s.name}: {s.score}")
        return ranked

    def rank_dimensions(
        self,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]]
    ) -> List[RoleScore]:
        """All columns sorted by dimension score, best first; ties keep source order."""
        scored = [RoleScore(col, self.score_as_dimension(col, dataset, rows)) for col in dataset.columns]
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)
        for s in ranked:
            logger.debug(f"dimension score {s.name}: {s.score}")
        return ranked


def score_as_metric(column: ColumnDescriptor, dataset: DatasetDescriptor, rows) -> float:
    """Metric score with the default vocabularies and thresholds."""
    return RoleScorer().score_as_metric(column, dataset, list(rows))


def score_as_dimension(column: ColumnDescriptor, dataset: DatasetDescriptor, rows) -> float:
    """Dimension score with the default vocabularies and thresholds."""
    return RoleScorer().score_as_dimension(column, dataset, list(rows))
