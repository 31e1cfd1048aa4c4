"""
chartsense Constants.

Thresholds and defaults used by the column role scorer, the relevance ranker
and the recommendation generator. Most of these are tunable through
ClassifierConfig; the values here are the defaults.
"""

# ============================================================================
# Column Types
# ============================================================================

TYPE_NUMBER: str = "number"
TYPE_STRING: str = "string"
TYPE_DATE: str = "date"
TYPE_BOOLEAN: str = "boolean"
TYPE_MIXED: str = "mixed"

COLUMN_TYPES = (TYPE_NUMBER, TYPE_STRING, TYPE_DATE, TYPE_BOOLEAN, TYPE_MIXED)

CHART_TYPES = ("bar", "line", "area", "pie", "histogram")
AGGREGATIONS = ("sum", "avg", "count", "none")


# ============================================================================
# Data-Pattern Detection
# ============================================================================

# Year-like numeric columns: values in [YEAR_MIN, YEAR_MAX], more than
# YEAR_MIN_DISTINCT distinct values, span <= YEAR_MAX_SPAN, std < YEAR_MAX_STD
YEAR_MIN: int = 1900
YEAR_MAX: int = 2100
YEAR_MIN_DISTINCT: int = 3
YEAR_MAX_SPAN: int = 200
YEAR_MAX_STD: float = 50.0

# Flag columns: at most FLAG_MAX_DISTINCT values among more than FLAG_MIN_ROWS rows
FLAG_MAX_DISTINCT: int = 2
FLAG_MIN_ROWS: int = 10

# Sequential detection looks at the first N rows and needs a minimum of
# numeric values before it decides
SEQUENTIAL_SAMPLE_ROWS: int = 100
SEQUENTIAL_MIN_VALUES: int = 10
SEQUENTIAL_ASCENDING_RATIO: float = 0.9

URL_PREFIXES = ("http", "/")
URL_MARKER: str = "://"


# ============================================================================
# Role Scoring
# ============================================================================

# Coefficient of variation sweet spot for metrics
CV_SWEET_SPOT_LOW: float = 0.1
CV_SWEET_SPOT_HIGH: float = 2.0
CV_EXCESSIVE: float = 5.0

RANGE_STEPS = (10, 100, 1000)

# Encoded-category detection for metrics
ENCODED_CATEGORY_MAX_DISTINCT: int = 5
ENCODED_CATEGORY_MIN_ROWS: int = 20

# Dimension cardinality bands
DIMENSION_SWEET_SPOT_MIN: int = 2
DIMENSION_SWEET_SPOT_MAX: int = 30
DIMENSION_WIDE_MAX: int = 100

SHORT_LABEL_LENGTH: int = 20
LONG_LABEL_LENGTH: int = 50
SAMPLE_REPETITION_THRESHOLD: float = 0.3
NORMALIZED_ENTROPY_THRESHOLD: float = 0.7
SMALL_SCALE_MAX_DISTINCT: int = 10


# ============================================================================
# Relevance Ranking
# ============================================================================

# Mutual information: equal-width bins over the metric; skipped below the
# minimum number of numeric values
MI_BINS: int = 5
MI_MIN_VALUES: int = 20
MI_DECIMALS: int = 3

# Pearson correlation sampled over the first N rows
CORRELATION_SAMPLE_ROWS: int = 500
CORRELATION_MIN_PAIRS: int = 10
CORRELATION_DECIMALS: int = 2


# ============================================================================
# Recommendation Generation
# ============================================================================

PRIORITY_START: int = 100
MAX_METRICS: int = 5
MAX_DIMENSIONS: int = 5
MAX_MI_BARS: int = 6
MAX_TIMESERIES_METRICS: int = 3
MAX_YEAR_METRICS: int = 2
PIE_MIN_CARDINALITY: int = 2
PIE_MAX_CARDINALITY: int = 12
MAX_CORRELATION_METRICS: int = 4
CORRELATION_THRESHOLD: float = 0.3
MAX_CORRELATION_CHARTS: int = 2
MAX_HISTOGRAMS: int = 2

# Validation filter
MIN_GROUPS: int = 2
PIE_VALIDATION_MAX_GROUPS: int = 50

# Aggregation choice: bounded scales get averaged
PERCENT_SCALE_MAX: float = 100.0
SMALL_SCALE_RANGE: float = 10.0


# ============================================================================
# Dataset Type Classification
# ============================================================================

ARCHETYPE_FLOOR: float = 0.15
MAX_CONFIDENCE: int = 99
ARCHETYPES = ("sales", "survey", "financial", "demographics", "timeseries", "generic")


# ============================================================================
# Descriptor Building
# ============================================================================

SAMPLE_VALUE_COUNT: int = 5
TYPE_DETECTION_SAMPLE: int = 100
BOOLEAN_RATIO: float = 0.9
DATE_RATIO: float = 0.7
NUMBER_RATIO: float = 0.8
SUMMARY_DECIMALS: int = 2


# ============================================================================
# Configuration Security Limits
# ============================================================================

MAX_YAML_FILE_SIZE: int = 1024 * 1024  # 1MB
MAX_YAML_NESTING_DEPTH: int = 10
MAX_YAML_KEY_COUNT: int = 5_000


# ============================================================================
# Chart Data Shaping
# ============================================================================

TOP_CATEGORY_LIMIT: int = 10
AGGREGATE_GROUP_LIMIT: int = 15
DISTRIBUTION_BINS: int = 10
TIMESERIES_MAX_POINTS: int = 200

SUPPORTED_FILE_FORMATS = ["csv", "excel", "json"]
FILE_EXTENSION_MAP = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
    ".json": "json",
}
