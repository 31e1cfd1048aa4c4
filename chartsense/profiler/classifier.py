"""
Dataset classifier - the public entry point.

Runs the whole inference pass for one dataset snapshot:

    rows + descriptors
        -> RoleScorer (metric and dimension rankings, computed once)
        -> RecommendationGenerator (MI bars, time series, pies,
           correlations, histograms; validated and sorted)
        -> DatasetTypeClassifier (archetype label, independent of roles)
        -> ClassificationResult

Every call recomputes from its inputs; nothing is cached across datasets.
"""

from typing import Any, List, Optional

import pandas as pd

from chartsense.core import constants
from chartsense.core.config import ClassifierConfig
from chartsense.core.logging_config import get_logger
from chartsense.profiler.column_stats import describe_dataframe
from chartsense.profiler.dataset_type import DatasetTypeClassifier, confidence_from_score
from chartsense.profiler.models import (
    ClassificationResult,
    ColumnRoles,
    DatasetDescriptor,
    RoleScore,
)
from chartsense.profiler.patterns import PatternLibrary, get_pattern_library
from chartsense.profiler.recommender import RecommendationGenerator
from chartsense.profiler.role_scorer import RoleScorer
from chartsense.profiler.values import as_records

logger = get_logger(__name__)


class DatasetClassifier:
    """
    Classifies datasets and recommends charts.

    Example:
        >>> classifier = DatasetClassifier()
        >>> result = classifier.classify(dataset, rows)
        >>> result.column_roles.target_column
        'revenue'
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        patterns: Optional[PatternLibrary] = None
    ):
        self.config = config or ClassifierConfig()
        self.patterns = patterns or get_pattern_library()
        self.scorer = RoleScorer(self.patterns, self.config)
        self.generator = RecommendationGenerator(self.config, self.patterns, self.scorer)
        self.type_classifier = DatasetTypeClassifier(self.patterns, self.config)

    def rank_metrics(self, dataset: DatasetDescriptor, rows: Any) -> List[RoleScore]:
        return self.scorer.rank_metrics(dataset, as_records(rows))

    def rank_dimensions(self, dataset: DatasetDescriptor, rows: Any) -> List[RoleScore]:
        return self.scorer.rank_dimensions(dataset, as_records(rows))

    def classify(self, dataset: DatasetDescriptor, rows: Any) -> ClassificationResult:
        """
        Classify one dataset snapshot.

        Args:
            dataset: Column descriptors; their types decide numeric coercion
            rows: Row records (sequence of mappings or a DataFrame)

        Returns:
            ClassificationResult with archetype, recommendations and roles
        """
        records = as_records(rows)

        metric_ranking = self.scorer.rank_metrics(dataset, records)
        dimension_ranking = self.scorer.rank_dimensions(dataset, records)

        recommendations = self.generator.generate(
            dataset, records,
            metric_ranking=metric_ranking,
            dimension_ranking=dimension_ranking,
        )
        column_roles = self._column_roles(dataset, metric_ranking, dimension_ranking)

        archetype_name, score = self.type_classifier.classify(dataset)
        archetype = self.type_classifier.archetype(archetype_name)

        result = ClassificationResult(
            type=archetype_name,
            confidence=confidence_from_score(score),
            label=archetype.label,
            description=archetype.description,
            suggested_charts=list(archetype.charts),
            recommendations=recommendations,
            column_roles=column_roles,
        )
        logger.info(
            f"Classified {dataset.file_name or 'dataset'} as {result.type} "
            f"({result.confidence}%): {len(recommendations)} recommendations, "
            f"target={column_roles.target_column}"
        )
        return result

    @staticmethod
    def _column_roles(
        dataset: DatasetDescriptor,
        metric_ranking: List[RoleScore],
        dimension_ranking: List[RoleScore]
    ) -> ColumnRoles:
        target = None
        if metric_ranking and metric_ranking[0].score > 0:
            target = metric_ranking[0].name

        return ColumnRoles(
            date_columns=[col.name for col in dataset.columns_of_type(constants.TYPE_DATE)],
            numeric_columns=[s.name for s in metric_ranking],
            categorical_columns=[s.name for s in dimension_ranking if s.score > 0],
            target_column=target,
        )


def classify(dataset: DatasetDescriptor, rows: Any, config: Optional[ClassifierConfig] = None) -> ClassificationResult:
    """Classify a dataset with the default pattern library."""
    return DatasetClassifier(config=config).classify(dataset, rows)


def classify_dataframe(
    df: pd.DataFrame,
    file_name: str = "",
    file_size: int = 0,
    config: Optional[ClassifierConfig] = None
) -> ClassificationResult:
    """Describe a DataFrame and classify it in one call."""
    dataset = describe_dataframe(df, file_name=file_name, file_size=file_size)
    return DatasetClassifier(config=config).classify(dataset, df.rename(columns=str))
