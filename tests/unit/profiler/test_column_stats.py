"""
Unit tests for descriptor building from rows and DataFrames.
"""

import numpy as np
import pandas as pd
import pytest

from chartsense.core.exceptions import ProfilerError
from chartsense.profiler.column_stats import (
    describe_column,
    describe_dataframe,
    describe_rows,
    detect_column_type,
)


class TestDetectColumnType:

    @pytest.mark.parametrize("values,expected", [
        ([True, False, True], "boolean"),
        (["true", "FALSE", "True"], "boolean"),
        (["1", "0", "1", "0"], "boolean"),
        (["2024-01-15", "2024-02-01", "2024-03-09"], "date"),
        (["1/15/2024", "2/1/2024"], "date"),
        (["Jan 15, 2024", "March 3 2024"], "date"),
        ([1, 2.5, "3", 40], "number"),
        (["a", "b", 1], "string"),
        ([], "string"),
        ([None, None, ""], "string"),
    ])
    def test_types(self, values, expected):
        assert detect_column_type(values) == expected

    def test_number_threshold(self):
        # 9 of 10 numeric clears the 80% bar
        assert detect_column_type([str(i) for i in range(2, 11)] + ["x"]) == "number"
        # 8 of 10 does not
        assert detect_column_type([str(i) for i in range(2, 10)] + ["x", "y"]) == "string"

    def test_digit_separated_numbers_are_text(self):
        assert detect_column_type(["1_000", "2_000", "3_000"]) == "string"

    def test_nulls_ignored(self):
        assert detect_column_type([None, 3, None, 4, ""]) == "number"

    def test_only_leading_values_examined(self):
        values = [str(i + 2) for i in range(100)] + ["text"] * 500
        assert detect_column_type(values) == "number"


class TestDescribeColumn:

    def test_numeric_summary(self):
        column = describe_column("v", [1, 2, 3, 4])

        assert column.type == "number"
        assert column.min == 1
        assert column.max == 4
        assert column.mean == 2.5
        assert column.median == 2.5
        # population std of 1..4 is sqrt(1.25)
        assert column.std_dev == 1.12

    def test_null_counting(self):
        column = describe_column("v", [1, None, "", float("nan"), 3])

        assert column.null_count == 3
        assert column.unique_count == 2

    def test_integral_floats_group_with_ints(self):
        assert describe_column("v", [3, 3.0, 4]).unique_count == 2

    def test_numeric_sample_skips_non_numbers(self):
        column = describe_column("v", [1, "n/a", 2, 3, 4, 5, 6, 7, 8, 9, 10])

        assert column.type == "number"
        assert column.sample_values == [1.0, 2.0, 3.0, 4.0, 5.0]
        assert column.max == 10

    def test_string_sample(self):
        column = describe_column("s", ["a", None, "b", "a", "c", "d", "e"])

        assert column.type == "string"
        assert column.sample_values == ["a", "b", "a", "c", "d"]
        assert column.unique_count == 5
        assert column.min is None
        assert column.mean is None

    def test_all_null_column(self):
        column = describe_column("s", [None, None])

        assert column.type == "string"
        assert column.null_count == 2
        assert column.unique_count == 0
        assert column.sample_values == []


class TestDescribeRows:

    def test_counts_and_metadata(self, sales_rows):
        dataset = describe_rows(sales_rows, file_name="sales.csv", file_size=2048)

        assert dataset.row_count == 1000
        assert dataset.column_count == 3
        assert dataset.column_names == ["id", "revenue", "region"]
        assert dataset.file_name == "sales.csv"
        assert dataset.file_size == 2048

    def test_sales_columns(self, sales_dataset):
        region = sales_dataset.get_column("region")
        revenue = sales_dataset.get_column("revenue")

        assert region.type == "string"
        assert region.unique_count == 4
        assert revenue.type == "number"
        assert revenue.unique_count == 1000
        assert revenue.min == 10.5
        assert revenue.max == 1509.0

    def test_first_seen_column_order(self):
        rows = [{"b": 1}, {"a": 2, "b": 3}]
        dataset = describe_rows(rows)

        assert dataset.column_names == ["b", "a"]
        assert dataset.get_column("a").null_count == 1

    def test_explicit_columns(self):
        rows = [{"a": 1, "b": 2}]
        assert describe_rows(rows, columns=["b", "a"]).column_names == ["b", "a"]

    def test_empty_rows(self):
        dataset = describe_rows([])

        assert dataset.row_count == 0
        assert dataset.columns == []

    @pytest.mark.parametrize("bad", [None, "a,b\n1,2", b"bytes", {"a": 1}])
    def test_non_tabular_input(self, bad):
        with pytest.raises(ProfilerError):
            describe_rows(bad)

    def test_non_mapping_row(self):
        with pytest.raises(ProfilerError, match="Row 1"):
            describe_rows([{"a": 1}, [1, 2]])

    def test_dataframe_input(self, sales_rows):
        from_frame = describe_rows(pd.DataFrame(sales_rows))
        from_rows = describe_rows(sales_rows)
        assert from_frame.to_dict() == from_rows.to_dict()


class TestDescribeDataFrame:

    def test_nan_cells_are_null(self):
        df = pd.DataFrame({"x": [1.0, np.nan, 3.0], "y": ["a", None, "c"]})

        dataset = describe_dataframe(df, file_name="f.csv")

        assert dataset.get_column("x").null_count == 1
        assert dataset.get_column("x").type == "number"
        assert dataset.get_column("y").null_count == 1
        assert dataset.file_name == "f.csv"

    def test_non_string_labels(self):
        df = pd.DataFrame({0: [1, 2], "name": ["a", "b"]})
        assert describe_dataframe(df).column_names == ["0", "name"]

    def test_rejects_non_dataframe(self):
        with pytest.raises(ProfilerError):
            describe_dataframe([{"a": 1}])

    def test_round_trips_through_dict(self, sales_dataset):
        from chartsense.profiler.models import DatasetDescriptor

        restored = DatasetDescriptor.from_dict(sales_dataset.to_dict())
        assert restored.to_dict() == sales_dataset.to_dict()
