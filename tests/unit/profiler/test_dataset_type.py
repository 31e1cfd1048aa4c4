"""
Unit tests for dataset archetype classification.
"""

import pytest

from chartsense.core.config import ClassifierConfig
from chartsense.profiler.dataset_type import DatasetTypeClassifier, confidence_from_score
from chartsense.profiler.models import ColumnDescriptor, DatasetDescriptor


def dataset_of(*columns):
    cols = [c if isinstance(c, ColumnDescriptor) else ColumnDescriptor(name=c) for c in columns]
    return DatasetDescriptor(row_count=10, columns=cols)


@pytest.fixture
def classifier():
    return DatasetTypeClassifier()


class TestClassify:

    def test_unrecognised_names_are_generic(self, classifier):
        archetype, score = classifier.classify(dataset_of("foo", "bar"))

        assert archetype == "generic"
        assert confidence_from_score(score) == 15

    def test_sales_vocabulary(self, classifier):
        archetype, score = classifier.classify(dataset_of("revenue", "product", "region"))

        assert archetype == "sales"
        assert confidence_from_score(score) == 67

    def test_timeseries_needs_date_and_number(self, classifier):
        dataset = dataset_of(
            ColumnDescriptor(name="when", type="date"),
            ColumnDescriptor(name="alpha", type="number"),
            ColumnDescriptor(name="beta", type="number"),
        )

        archetype, score = classifier.classify(dataset)

        # 0.5 + 0.5 * 2/3
        assert archetype == "timeseries"
        assert confidence_from_score(score) == 83

    def test_no_timeseries_without_numbers(self, classifier):
        dataset = dataset_of(ColumnDescriptor(name="when", type="date"))
        assert classifier.scores(dataset)["timeseries"] == 0.0

    def test_tie_keeps_earlier_archetype(self, classifier):
        # product -> sales, rating -> survey: both 0.5
        scores = classifier.scores(dataset_of("rating", "product"))
        assert scores["sales"] == scores["survey"] == 0.5

        archetype, _ = classifier.classify(dataset_of("rating", "product"))
        assert archetype == "sales"

    def test_confidence_capped(self, classifier):
        _, score = classifier.classify(dataset_of("revenue", "sales"))
        assert confidence_from_score(score) == 99

    def test_empty_dataset(self, classifier):
        archetype, _ = classifier.classify(DatasetDescriptor(row_count=0))
        assert archetype == "generic"

    def test_floor_is_strict(self):
        classifier = DatasetTypeClassifier(config=ClassifierConfig(archetype_floor=0.5))
        archetype, score = classifier.classify(dataset_of("rating", "product"))

        assert archetype == "generic"
        assert score == 0.5

    def test_archetype_metadata(self, classifier):
        assert classifier.archetype("survey").label == "Survey & Feedback"
        assert "line" in classifier.archetype("timeseries").charts


class TestConfidenceFromScore:

    @pytest.mark.parametrize("score,expected", [
        (0.0, 0),
        (0.156, 16),
        (0.5, 50),
        (0.994, 99),
        (1.4, 99),
    ])
    def test_values(self, score, expected):
        assert confidence_from_score(score) == expected
