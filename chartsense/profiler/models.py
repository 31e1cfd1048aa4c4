"""
Data structures for classification input and output.

Contains the column/dataset descriptors the classifier consumes and the
chart recommendations and classification result it produces.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

import numpy as np


def convert_numpy_types(obj):
    """
    Recursively convert numpy types to Python native types for JSON serialization.

    Args:
        obj: Any object that might contain numpy types

    Returns:
        Object with numpy types converted to Python types
    """
    if isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(convert_numpy_types(item) for item in obj)
    else:
        return obj


@dataclass
class ColumnDescriptor:
    """
    Summary of one column as seen by the classifier.

    Attributes:
        name: Column name, unique within the dataset
        type: One of number, string, date, boolean, mixed
        unique_count: Number of distinct non-null values
        null_count: Number of null values
        sample_values: Ordered prefix (at most 5) of non-null values
        min: Minimum (numeric columns only)
        max: Maximum (numeric columns only)
        mean: Mean (numeric columns only)
        median: Median (numeric columns only)
        std_dev: Population standard deviation (numeric columns only)
    """
    name: str
    type: str = "string"
    unique_count: int = 0
    null_count: int = 0
    sample_values: List[Any] = field(default_factory=list)
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None

    @property
    def value_range(self) -> float:
        """max - min, treating a missing bound as 0."""
        return (self.max if self.max is not None else 0) - (self.min if self.min is not None else 0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "name": self.name,
            "type": self.type,
            "unique_count": int(self.unique_count),
            "null_count": int(self.null_count),
            "sample_values": convert_numpy_types(list(self.sample_values)),
        }
        for key in ("min", "max", "mean", "median", "std_dev"):
            value = getattr(self, key)
            if value is not None:
                result[key] = float(value)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnDescriptor":
        """Build a descriptor from to_dict() output or an equivalent mapping."""
        return cls(
            name=data["name"],
            type=data.get("type", "string"),
            unique_count=int(data.get("unique_count", 0)),
            null_count=int(data.get("null_count", 0)),
            sample_values=list(data.get("sample_values", [])),
            min=data.get("min"),
            max=data.get("max"),
            mean=data.get("mean"),
            median=data.get("median"),
            std_dev=data.get("std_dev"),
        )


@dataclass
class DatasetDescriptor:
    """
    Whole-table summary: row/column counts and ordered column descriptors.

    file_name and file_size are carried for presentation only.
    """
    row_count: int
    columns: List[ColumnDescriptor] = field(default_factory=list)
    column_count: Optional[int] = None
    file_name: str = ""
    file_size: int = 0

    def __post_init__(self):
        if self.column_count is None:
            self.column_count = len(self.columns)
        self._by_name = {col.name: col for col in self.columns}

    @property
    def column_names(self) -> List[str]:
        return [col.name for col in self.columns]

    def get_column(self, name: str) -> Optional[ColumnDescriptor]:
        return self._by_name.get(name)

    def has_column(self, name: str) -> bool:
        return name in self._by_name

    def columns_of_type(self, column_type: str) -> List[ColumnDescriptor]:
        return [col for col in self.columns if col.type == column_type]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "row_count": int(self.row_count),
            "column_count": int(self.column_count),
            "file_name": self.file_name,
            "file_size": int(self.file_size),
            "columns": [col.to_dict() for col in self.columns],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DatasetDescriptor":
        columns = [ColumnDescriptor.from_dict(c) for c in data.get("columns", [])]
        return cls(
            row_count=int(data.get("row_count", 0)),
            columns=columns,
            column_count=data.get("column_count"),
            file_name=data.get("file_name", ""),
            file_size=int(data.get("file_size", 0)),
        )


@dataclass
class RoleScore:
    """A column's desirability under one role; -inf marks ineligible."""
    column: ColumnDescriptor
    score: float

    @property
    def name(self) -> str:
        return self.column.name

    @property
    def eligible(self) -> bool:
        return not (math.isinf(self.score) and self.score < 0)


@dataclass
class ChartRecommendation:
    """
    A fully specified chart proposal.

    Attributes:
        id: Deterministic identifier derived from the producing rule and columns
        chart_type: bar, line, area, pie or histogram
        title: Display title
        description: One-line explanation
        x_column: Grouping / x-axis column
        y_column: Value / y-axis column
        aggregation: sum, avg, count or none
        priority: Higher sorts first; strictly decreasing in generation order
    """
    id: str
    chart_type: str
    title: str
    description: str
    x_column: str
    y_column: str
    aggregation: str
    priority: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "chart_type": self.chart_type,
            "title": self.title,
            "description": self.description,
            "x_column": self.x_column,
            "y_column": self.y_column,
            "aggregation": self.aggregation,
            "priority": int(self.priority),
        }


@dataclass
class ColumnRoles:
    """Column role labels derived from the role scorer."""
    date_columns: List[str] = field(default_factory=list)
    numeric_columns: List[str] = field(default_factory=list)
    categorical_columns: List[str] = field(default_factory=list)
    target_column: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date_columns": list(self.date_columns),
            "numeric_columns": list(self.numeric_columns),
            "categorical_columns": list(self.categorical_columns),
            "target_column": self.target_column,
        }


@dataclass
class ClassificationResult:
    """
    Complete classification of one dataset snapshot.

    Attributes:
        type: Dataset archetype (sales, timeseries, survey, financial, demographics, generic)
        confidence: 0-99
        label: Display label for the archetype
        description: Display description for the archetype
        suggested_charts: Presentation hint list for the archetype
        recommendations: Chart recommendations sorted by descending priority
        column_roles: Date/metric/dimension/target assignments
    """
    type: str
    confidence: int
    label: str
    description: str
    suggested_charts: List[str] = field(default_factory=list)
    recommendations: List[ChartRecommendation] = field(default_factory=list)
    column_roles: ColumnRoles = field(default_factory=ColumnRoles)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": self.type,
            "confidence": int(self.confidence),
            "label": self.label,
            "description": self.description,
            "suggested_charts": list(self.suggested_charts),
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "column_roles": self.column_roles.to_dict(),
        }
