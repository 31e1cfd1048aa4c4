"""
Chart recommendation generation.

Combines role scores, mutual information and correlations into a
prioritized, validated list of chart recommendations. Candidate families are
emitted in a fixed order and the priority counter decrements once per
emitted recommendation, so an earlier family always outranks a later one:

1. MI-ranked bar charts (dimension x metric)
2. Area charts of metrics over date columns
3. Line charts of metrics over year-like columns
4. Pie charts for low-cardinality string dimensions
5. Line charts for correlated metric pairs
6. Histograms of the top metrics

A validation pass then drops recommendations that reference unknown columns
or degenerate groupings.
"""

import itertools
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

from chartsense.core import constants
from chartsense.core.config import ClassifierConfig
from chartsense.core.logging_config import get_logger
from chartsense.profiler.detectors import looks_like_year
from chartsense.profiler.models import (
    ChartRecommendation,
    ColumnDescriptor,
    DatasetDescriptor,
    RoleScore,
)
from chartsense.profiler.patterns import PatternLibrary, get_pattern_library, to_title_case
from chartsense.profiler.relevance import mutual_information, pearson_correlation
from chartsense.profiler.role_scorer import RoleScorer

logger = get_logger(__name__)


def pick_aggregation(column: ColumnDescriptor, patterns: Optional[PatternLibrary] = None) -> str:
    """
    Choose sum or avg for a metric.

    Additive quantities (revenue, counts) are summed. Ratings, percentages
    and other bounded scales are averaged since their sum is meaningless.
    """
    patterns = patterns or get_pattern_library()
    if patterns.is_average_name(column.name):
        return "avg"

    value_range = column.value_range
    low = column.min if column.min is not None else 0
    if value_range > 0 and low >= 0:
        high = column.max if column.max is not None else float("inf")
        if high <= constants.PERCENT_SCALE_MAX:
            return "avg"
        if value_range <= constants.SMALL_SCALE_RANGE:
            return "avg"
    return "sum"


def aggregation_label(aggregation: str) -> str:
    return "Average" if aggregation == "avg" else "Total"


@dataclass
class MIPair:
    dimension: ColumnDescriptor
    metric: ColumnDescriptor
    mi: float
    aggregation: str


class RecommendationGenerator:
    """
    Builds the ranked recommendation list for one dataset snapshot.

    Attributes:
        config: Tunable caps and thresholds
        patterns: Keyword vocabularies (aggregation choice)
        scorer: Role scorer used when rankings are not supplied
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        patterns: Optional[PatternLibrary] = None,
        scorer: Optional[RoleScorer] = None
    ):
        self.config = config or ClassifierConfig()
        self.patterns = patterns or get_pattern_library()
        self.scorer = scorer or RoleScorer(self.patterns, self.config)

    def generate(
        self,
        dataset: DatasetDescriptor,
        rows: Sequence[Mapping[str, Any]],
        metric_ranking: Optional[List[RoleScore]] = None,
        dimension_ranking: Optional[List[RoleScore]] = None
    ) -> List[ChartRecommendation]:
        """
        Generate, validate and sort recommendations.

        Args:
            dataset: Column descriptors for the snapshot
            rows: Row records for the snapshot
            metric_ranking: Precomputed rank_metrics() output (optional)
            dimension_ranking: Precomputed rank_dimensions() output (optional)

        Returns:
            Recommendations sorted by descending priority
        """
        if metric_ranking is None:
            metric_ranking = self.scorer.rank_metrics(dataset, rows)
        if dimension_ranking is None:
            dimension_ranking = self.scorer.rank_dimensions(dataset, rows)

        top_metrics = [s.column for s in metric_ranking if s.score > 0][:self.config.max_metrics]
        top_dimensions = [s.column for s in dimension_ranking if s.score > 0][:self.config.max_dimensions]

        # No metric scored positively: fall back to the best numeric column
        if not top_metrics and metric_ranking:
            top_metrics = [metric_ranking[0].column]
            logger.debug(f"No positive metric; falling back to '{top_metrics[0].name}'")

        # Per-call counter; the generator itself holds no mutable state
        priority = itertools.count(self.config.priority_start, -1)
        recs: List[ChartRecommendation] = []
        recs.extend(self._mi_bars(rows, top_dimensions, top_metrics, priority))
        recs.extend(self._time_series(dataset, top_metrics, priority))
        recs.extend(self._year_lines(top_dimensions, top_metrics, priority))
        recs.extend(self._pies(top_dimensions, top_metrics, priority))
        recs.extend(self._correlations(rows, top_metrics, priority))
        recs.extend(self._histograms(top_metrics, priority))

        valid = self.validate(recs, dataset)
        logger.debug(f"Generated {len(recs)} candidate recommendations, {len(valid)} after validation")
        return sorted(valid, key=lambda r: r.priority, reverse=True)

    # ------------------------------------------------------------------
    # Candidate families
    # ------------------------------------------------------------------

    def _mi_bars(self, rows, dimensions, metrics, priority) -> List[ChartRecommendation]:
        pairs = []
        for dim in dimensions:
            if not (dim.type == constants.TYPE_STRING or looks_like_year(dim)):
                continue
            for metric in metrics:
                mi = mutual_information(
                    rows, dim.name, metric.name,
                    bins=self.config.mi_bins,
                    min_values=self.config.mi_min_values,
                )
                pairs.append(MIPair(dim, metric, mi, pick_aggregation(metric, self.patterns)))
        pairs.sort(key=lambda p: p.mi, reverse=True)

        recs = []
        used = set()
        for pair in pairs:
            if len(used) >= self.config.max_mi_bars:
                break
            key = (pair.dimension.name, pair.metric.name)
            if key in used:
                continue
            used.add(key)

            agg = aggregation_label(pair.aggregation)
            metric_title = to_title_case(pair.metric.name)
            dim_title = to_title_case(pair.dimension.name)
            recs.append(ChartRecommendation(
                id=f"mi-bar-{pair.dimension.name}-{pair.metric.name}",
                chart_type="bar",
                title=f"{agg} {metric_title} by {dim_title}",
                description=f"{agg} {metric_title} grouped by {dim_title} (MI: {pair.mi:.2f})",
                x_column=pair.dimension.name,
                y_column=pair.metric.name,
                aggregation=pair.aggregation,
                priority=next(priority),
            ))
        return recs

    def _time_series(self, dataset, metrics, priority) -> List[ChartRecommendation]:
        recs = []
        for date_col in dataset.columns_of_type(constants.TYPE_DATE):
            for metric in metrics[:self.config.max_timeseries_metrics]:
                metric_title = to_title_case(metric.name)
                recs.append(ChartRecommendation(
                    id=f"ts-{date_col.name}-{metric.name}",
                    chart_type="area",
                    title=f"{metric_title} Over {to_title_case(date_col.name)}",
                    description=f"Trend of {metric_title} over time",
                    x_column=date_col.name,
                    y_column=metric.name,
                    aggregation="none",
                    priority=next(priority),
                ))
        return recs

    def _year_lines(self, dimensions, metrics, priority) -> List[ChartRecommendation]:
        recs = []
        for year_dim in (d for d in dimensions if looks_like_year(d)):
            year_title = to_title_case(year_dim.name)
            for metric in metrics[:self.config.max_year_metrics]:
                recs.append(ChartRecommendation(
                    id=f"year-{year_dim.name}-{metric.name}",
                    chart_type="line",
                    title=f"{to_title_case(metric.name)} by {year_title}",
                    description=f"Trend across {year_title}",
                    x_column=year_dim.name,
                    y_column=metric.name,
                    aggregation=pick_aggregation(metric, self.patterns),
                    priority=next(priority),
                ))
        return recs

    def _pies(self, dimensions, metrics, priority) -> List[ChartRecommendation]:
        recs = []
        for dim in dimensions:
            if dim.type != constants.TYPE_STRING:
                continue
            if not (self.config.pie_min_cardinality <= dim.unique_count <= self.config.pie_max_cardinality):
                continue

            dim_title = to_title_case(dim.name)
            recs.append(ChartRecommendation(
                id=f"pie-{dim.name}",
                chart_type="pie",
                title=f"{dim_title} Distribution",
                description=f"Share of records by {dim_title}",
                x_column=dim.name,
                y_column=dim.name,
                aggregation="count",
                priority=next(priority),
            ))

            if metrics:
                metric = metrics[0]
                metric_title = to_title_case(metric.name)
                agg = pick_aggregation(metric, self.patterns)
                recs.append(ChartRecommendation(
                    id=f"pie-val-{dim.name}-{metric.name}",
                    chart_type="pie",
                    title=f"{dim_title} by {metric_title}",
                    description=f"{aggregation_label(agg)} {metric_title} per {dim_title}",
                    x_column=dim.name,
                    y_column=metric.name,
                    aggregation=agg,
                    priority=next(priority),
                ))
        return recs

    def _correlations(self, rows, metrics, priority) -> List[ChartRecommendation]:
        candidates = metrics[:self.config.max_correlation_metrics]
        if len(candidates) < 2:
            return []

        pairs = []
        for i, a in enumerate(candidates):
            for b in candidates[i + 1:]:
                corr = pearson_correlation(
                    rows, a.name, b.name,
                    sample_rows=self.config.correlation_sample_rows,
                    min_pairs=self.config.correlation_min_pairs,
                )
                if abs(corr) > self.config.correlation_threshold:
                    pairs.append((a.name, b.name, corr))
        pairs.sort(key=lambda p: abs(p[2]), reverse=True)

        recs = []
        for a, b, corr in pairs[:self.config.max_correlation_charts]:
            recs.append(ChartRecommendation(
                id=f"corr-{a}-{b}",
                chart_type="line",
                title=f"{to_title_case(a)} vs {to_title_case(b)}",
                description=f"Correlated (r={corr:+g})",
                x_column=a,
                y_column=b,
                aggregation="none",
                priority=next(priority),
            ))
        return recs

    def _histograms(self, metrics, priority) -> List[ChartRecommendation]:
        recs = []
        for metric in metrics[:self.config.max_histograms]:
            metric_title = to_title_case(metric.name)
            recs.append(ChartRecommendation(
                id=f"hist-{metric.name}",
                chart_type="histogram",
                title=f"{metric_title} Distribution",
                description=f"Frequency distribution of {metric_title}",
                x_column=metric.name,
                y_column=metric.name,
                aggregation="none",
                priority=next(priority),
            ))
        return recs

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        recommendations: List[ChartRecommendation],
        dataset: DatasetDescriptor
    ) -> List[ChartRecommendation]:
        """
        Drop degenerate recommendations.

        - x or y column missing from the dataset
        - bar/pie grouped by a column with fewer than 2 distinct values
        - pie grouped by a column with more than the pie group limit
        """
        valid = []
        for rec in recommendations:
            x_col = dataset.get_column(rec.x_column)
            if x_col is None or not dataset.has_column(rec.y_column):
                logger.debug(f"Dropping {rec.id}: unknown column")
                continue
            if rec.chart_type in ("bar", "pie"):
                if x_col.unique_count < constants.MIN_GROUPS:
                    logger.debug(f"Dropping {rec.id}: fewer than {constants.MIN_GROUPS} groups")
                    continue
                if rec.chart_type == "pie" and x_col.unique_count > self.config.pie_validation_max_groups:
                    logger.debug(f"Dropping {rec.id}: too many pie slices")
                    continue
            valid.append(rec)
        return valid


def generate_recommendations(
    dataset: DatasetDescriptor,
    rows: Sequence[Mapping[str, Any]],
    config: Optional[ClassifierConfig] = None
) -> List[ChartRecommendation]:
    """Recommendations for a dataset with default vocabularies."""
    return RecommendationGenerator(config=config).generate(dataset, list(rows))
