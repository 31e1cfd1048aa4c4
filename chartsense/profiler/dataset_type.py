"""
Dataset archetype classification.

Labels a table as sales, survey, financial, demographics, timeseries or
generic from its column names and column types. The label is presentation
metadata only; column roles and recommendations never depend on it.
"""

from typing import Dict, Optional, Tuple

from chartsense.core import constants
from chartsense.core.config import ClassifierConfig
from chartsense.core.logging_config import get_logger
from chartsense.profiler.models import DatasetDescriptor
from chartsense.profiler.patterns import Archetype, PatternLibrary, get_pattern_library
from chartsense.profiler.values import round_half_up

logger = get_logger(__name__)

# Vocabulary-scored archetypes, in tie-break order
VOCABULARY_ARCHETYPES = ("sales", "survey", "financial", "demographics")


class DatasetTypeClassifier:
    """
    Scores each archetype and picks the best one above a floor.

    Name archetypes score the share of column names matching their
    vocabulary. The timeseries archetype is structural: it needs at least one
    date column and one numeric column and scores 0.5 plus half the numeric
    column share.
    """

    def __init__(
        self,
        patterns: Optional[PatternLibrary] = None,
        config: Optional[ClassifierConfig] = None
    ):
        self.patterns = patterns or get_pattern_library()
        self.config = config or ClassifierConfig()

    def scores(self, dataset: DatasetDescriptor) -> Dict[str, float]:
        """Score of every candidate archetype, in tie-break order."""
        names = dataset.column_names
        result = {}
        for name in VOCABULARY_ARCHETYPES:
            result[name] = PatternLibrary.match_rate(names, self.patterns.archetype(name).keywords)
        result["timeseries"] = self._timeseries_score(dataset)
        return result

    @staticmethod
    def _timeseries_score(dataset: DatasetDescriptor) -> float:
        date_count = len(dataset.columns_of_type(constants.TYPE_DATE))
        numeric_count = len(dataset.columns_of_type(constants.TYPE_NUMBER))
        if date_count == 0 or numeric_count == 0:
            return 0.0
        return 0.5 + 0.5 * (numeric_count / max(len(dataset.columns), 1))

    def classify(self, dataset: DatasetDescriptor) -> Tuple[str, float]:
        """
        Pick the archetype.

        Returns:
            (archetype name, score); ('generic', floor) when nothing beats
            the floor
        """
        best_type = "generic"
        best_score = self.config.archetype_floor
        for name, score in self.scores(dataset).items():
            if score > best_score:
                best_type = name
                best_score = score
        logger.debug(f"Archetype {best_type} (score {best_score:.3f})")
        return best_type, best_score

    def archetype(self, name: str) -> Archetype:
        return self.patterns.archetype(name)


def confidence_from_score(score: float) -> int:
    """Score in [0, 1+] as a 0-99 percentage."""
    return int(min(round_half_up(score * 100), constants.MAX_CONFIDENCE))
