"""
chartsense - automatic chart recommendations for tabular data.

Usage:
    from chartsense import classify_dataframe

    result = classify_dataframe(df, file_name="sales.csv")
    for rec in result.recommendations:
        print(rec.title, rec.chart_type, rec.aggregation)
"""

__version__ = "0.1.0"

from chartsense.profiler.classifier import DatasetClassifier, classify, classify_dataframe
from chartsense.profiler.column_stats import describe_dataframe, describe_rows
from chartsense.profiler.models import (
    ChartRecommendation,
    ClassificationResult,
    ColumnDescriptor,
    ColumnRoles,
    DatasetDescriptor,
    RoleScore,
)

__all__ = [
    "__version__",
    "DatasetClassifier",
    "classify",
    "classify_dataframe",
    "describe_dataframe",
    "describe_rows",
    "ChartRecommendation",
    "ClassificationResult",
    "ColumnDescriptor",
    "ColumnRoles",
    "DatasetDescriptor",
    "RoleScore",
]
