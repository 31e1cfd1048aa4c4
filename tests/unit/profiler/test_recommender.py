"""
Unit tests for chart recommendation generation.
"""

import pytest

from chartsense.core.config import ClassifierConfig
from chartsense.profiler.column_stats import describe_rows
from chartsense.profiler.models import ChartRecommendation, ColumnDescriptor, DatasetDescriptor, RoleScore
from chartsense.profiler.recommender import (
    RecommendationGenerator,
    generate_recommendations,
    pick_aggregation,
)
from chartsense.profiler.relevance import mutual_information


def make_rec(rec_id, chart_type, x, y, priority=50, aggregation="none"):
    return ChartRecommendation(
        id=rec_id, chart_type=chart_type, title=rec_id, description="",
        x_column=x, y_column=y, aggregation=aggregation, priority=priority,
    )


@pytest.fixture
def generator():
    return RecommendationGenerator()


class TestPickAggregation:

    @pytest.mark.parametrize("column,expected", [
        (ColumnDescriptor(name="satisfaction_score", type="number", min=200, max=9000), "avg"),
        (ColumnDescriptor(name="revenue", type="number", min=10, max=5000), "sum"),
        (ColumnDescriptor(name="units", type="number", min=0, max=80), "avg"),
        (ColumnDescriptor(name="units", type="number", min=200, max=205), "avg"),
        (ColumnDescriptor(name="delta", type="number", min=-50, max=50), "sum"),
        (ColumnDescriptor(name="units", type="number", min=40, max=40), "sum"),
        (ColumnDescriptor(name="units", type="number", min=0, max=150), "sum"),
    ])
    def test_cases(self, column, expected):
        assert pick_aggregation(column) == expected

    def test_rating_scale(self):
        column = ColumnDescriptor(name="rating", type="number", min=1, max=5)
        assert pick_aggregation(column) == "avg"


class TestSalesScenario:
    """id / revenue / region over 1000 rows."""

    def test_recommendation_list(self, generator, sales_dataset, sales_rows):
        recs = generator.generate(sales_dataset, sales_rows)

        assert [r.id for r in recs] == [
            "mi-bar-region-revenue",
            "pie-region",
            "pie-val-region-revenue",
            "hist-revenue",
        ]
        assert [r.priority for r in recs] == [100, 99, 98, 97]

    def test_bar_chart(self, generator, sales_dataset, sales_rows):
        bar = generator.generate(sales_dataset, sales_rows)[0]

        assert bar.chart_type == "bar"
        assert bar.title == "Total Revenue by Region"
        assert bar.aggregation == "sum"
        assert bar.x_column == "region"
        assert bar.y_column == "revenue"
        assert "(MI: " in bar.description

    def test_pies(self, generator, sales_dataset, sales_rows):
        recs = {r.id: r for r in generator.generate(sales_dataset, sales_rows)}

        assert recs["pie-region"].aggregation == "count"
        assert recs["pie-region"].title == "Region Distribution"
        assert recs["pie-val-region-revenue"].aggregation == "sum"
        assert recs["pie-val-region-revenue"].title == "Region by Revenue"

    def test_id_never_used(self, generator, sales_dataset, sales_rows):
        for rec in generator.generate(sales_dataset, sales_rows):
            assert "id" not in (rec.x_column, rec.y_column)


class TestRatingScenario:
    """rating 1-5 against a product column of varying cardinality."""

    def test_fifteen_products_get_bar_not_pie(self, generator, rating_rows):
        dataset = describe_rows(rating_rows)
        recs = generator.generate(dataset, rating_rows)

        assert not [r for r in recs if r.chart_type == "pie"]
        bar = next(r for r in recs if r.chart_type == "bar")
        assert bar.id == "mi-bar-product-rating"
        assert bar.aggregation == "avg"
        assert bar.title == "Average Rating by Product"

    def test_twelve_products_get_pies(self, generator, rating_rows_factory):
        rows = rating_rows_factory(12)
        dataset = describe_rows(rows)
        recs = {r.id: r for r in generator.generate(dataset, rows)}

        assert recs["pie-product"].aggregation == "count"
        assert recs["pie-val-product-rating"].aggregation == "avg"

    def test_thirteen_products_get_no_pie(self, generator, rating_rows_factory):
        rows = rating_rows_factory(13)
        dataset = describe_rows(rows)

        assert not [r for r in generator.generate(dataset, rows) if r.chart_type == "pie"]

    def test_configured_pie_limit(self, rating_rows):
        dataset = describe_rows(rating_rows)
        generator = RecommendationGenerator(config=ClassifierConfig(pie_max_cardinality=15))

        assert "pie-product" in [r.id for r in generator.generate(dataset, rating_rows)]


class TestNumericOnly:

    def test_constant_column_not_grouped(self, generator, numeric_rows):
        dataset = describe_rows(numeric_rows)
        for rec in generator.generate(dataset, numeric_rows):
            if rec.chart_type in ("bar", "pie"):
                assert rec.x_column != "flat"


class TestFamilies:

    def test_fallback_metric(self, generator):
        rows = [{"id": i} for i in range(1, 51)]
        dataset = describe_rows(rows)

        recs = generator.generate(dataset, rows)

        assert [r.id for r in recs] == ["hist-id"]

    def test_time_series(self, generator):
        rows = [
            {"order_date": f"2024-01-{i % 28 + 1:02d}", "revenue": 100.5 + (i * 37) % 60 * 10}
            for i in range(60)
        ]
        dataset = describe_rows(rows)

        recs = {r.id: r for r in generator.generate(dataset, rows)}

        area = recs["ts-order_date-revenue"]
        assert area.chart_type == "area"
        assert area.aggregation == "none"
        assert area.title == "Revenue Over Order Date"

    def test_year_line(self, generator):
        rows = [{"year": 2000 + i % 20, "revenue": 100.5 + (i * 37) % 40 * 10} for i in range(40)]
        dataset = describe_rows(rows)

        recs = {r.id: r for r in generator.generate(dataset, rows)}

        line = recs["year-year-revenue"]
        assert line.chart_type == "line"
        assert line.title == "Revenue by Year"
        assert line.aggregation == "sum"
        assert "mi-bar-year-revenue" in recs

    def test_correlated_metrics(self, generator):
        rows = []
        for i in range(60):
            sales = 100.5 + (i * 37) % 60 * 10
            rows.append({"sales": sales, "profit": sales * 0.2 + (i % 3)})
        dataset = describe_rows(rows)

        corr = [r for r in generator.generate(dataset, rows) if r.id.startswith("corr-")]

        assert len(corr) == 1
        assert corr[0].chart_type == "line"
        assert corr[0].aggregation == "none"
        assert {corr[0].x_column, corr[0].y_column} == {"sales", "profit"}
        assert "r=+" in corr[0].description

    def test_empty_dataset(self, generator):
        assert generator.generate(DatasetDescriptor(row_count=0), []) == []

    def test_zero_cap_disables_family(self, sales_dataset, sales_rows):
        generator = RecommendationGenerator(config=ClassifierConfig(max_histograms=0))
        assert not [r for r in generator.generate(sales_dataset, sales_rows) if r.chart_type == "histogram"]


class TestMIBars:

    DIMENSIONS = ("region", "category", "channel")
    METRICS = ("revenue", "profit", "quantity")

    @pytest.fixture
    def rows(self):
        return [
            {
                "region": ["North", "South", "East"][i % 3],
                "category": ["A", "B", "C", "D"][i % 4],
                "channel": ["Web", "Store"][i % 2],
                "revenue": 100.5 + (i * 37) % 60 * 10,
                "profit": 20.25 + (i * 7) % 60 * 3,
                "quantity": 5 + (i * 11) % 60,
            }
            for i in range(60)
        ]

    def _generate(self, rows, config=None):
        dataset = describe_rows(rows)
        # Every pairing is eligible, so nine (dimension, metric) candidates compete
        metrics = [RoleScore(dataset.get_column(n), 50) for n in self.METRICS]
        dimensions = [RoleScore(dataset.get_column(n), 50) for n in self.DIMENSIONS]
        generator = RecommendationGenerator(config=config)
        recs = generator.generate(dataset, rows, metric_ranking=metrics, dimension_ranking=dimensions)
        return [r for r in recs if r.id.startswith("mi-bar-")]

    def test_capped_at_six_pairs(self, rows):
        assert len(self._generate(rows)) == 6

    def test_highest_mi_pairs_kept_in_descending_order(self, rows):
        bars = self._generate(rows)
        emitted = [mutual_information(rows, r.x_column, r.y_column) for r in bars]
        kept = {(r.x_column, r.y_column) for r in bars}
        excluded = [
            mutual_information(rows, d, m)
            for d in self.DIMENSIONS for m in self.METRICS
            if (d, m) not in kept
        ]

        assert emitted == sorted(emitted, reverse=True)
        assert len(excluded) == 3
        assert min(emitted) >= max(excluded)

    def test_bars_lead_with_top_priorities(self, rows):
        bars = self._generate(rows)
        assert [r.priority for r in bars] == [100, 99, 98, 97, 96, 95]

    @pytest.mark.parametrize("cap", [0, 2])
    def test_configured_cap(self, rows, cap):
        assert len(self._generate(rows, ClassifierConfig(max_mi_bars=cap))) == cap


class TestValidation:

    @pytest.fixture
    def dataset(self):
        return DatasetDescriptor(row_count=100, columns=[
            ColumnDescriptor(name="single", type="string", unique_count=1),
            ColumnDescriptor(name="many", type="string", unique_count=51),
            ColumnDescriptor(name="fifty", type="string", unique_count=50),
            ColumnDescriptor(name="value", type="number", unique_count=100),
        ])

    def test_unknown_columns_dropped(self, generator, dataset):
        recs = [make_rec("a", "bar", "ghost", "value"), make_rec("b", "bar", "fifty", "ghost")]
        assert generator.validate(recs, dataset) == []

    def test_single_group_dropped_for_bar_and_pie(self, generator, dataset):
        recs = [
            make_rec("bar", "bar", "single", "value"),
            make_rec("pie", "pie", "single", "value"),
            make_rec("line", "line", "single", "value"),
        ]
        assert [r.id for r in generator.validate(recs, dataset)] == ["line"]

    def test_pie_group_limit(self, generator, dataset):
        recs = [
            make_rec("pie-many", "pie", "many", "value"),
            make_rec("pie-fifty", "pie", "fifty", "value"),
            make_rec("bar-many", "bar", "many", "value"),
        ]
        assert [r.id for r in generator.validate(recs, dataset)] == ["pie-fifty", "bar-many"]


class TestOrdering:

    def test_sorted_by_priority(self, generator, sales_dataset, sales_rows):
        priorities = [r.priority for r in generator.generate(sales_dataset, sales_rows)]
        assert priorities == sorted(priorities, reverse=True)
        assert len(set(priorities)) == len(priorities)

    def test_priorities_restart_on_every_call(self, generator, sales_dataset, sales_rows):
        first = [r.priority for r in generator.generate(sales_dataset, sales_rows)]
        second = [r.priority for r in generator.generate(sales_dataset, sales_rows)]

        assert first[0] == 100
        assert second == first

    def test_module_function(self, sales_dataset, sales_rows):
        recs = generate_recommendations(sales_dataset, sales_rows)
        assert recs[0].id == "mi-bar-region-revenue"
