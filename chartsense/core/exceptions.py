"""
chartsense Exception Hierarchy.

The classification engine itself never raises on malformed or sparse data:
insufficient data degrades to neutral values and empty rankings. The
exceptions below are raised by the outer surfaces only (configuration
loading, file loading for the CLI, descriptor building from unsupported
inputs).

Exception Severity Levels:
    - FATAL: Stop all processing immediately
    - CRITICAL: Stop processing the current dataset
    - RECOVERABLE: Log error, continue with a degraded result
    - WARNING: Log warning, processing continues
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, stop all processing
        CRITICAL: Dataset-level error, stop processing this dataset
        RECOVERABLE: Operation-level error, continue with a degraded result
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class ChartSenseException(Exception):
    """
    Base exception for all chartsense errors.

    Attributes:
        message (str): Human-readable error message
        severity (ErrorSeverity): Error severity level
        details (Dict[str, Any]): Additional context (file path, field, etc.)
        original_exception (Optional[Exception]): Original exception if wrapping

    Example:
        >>> try:
        ...     df = pd.read_csv(path)
        ... except ValueError as e:
        ...     raise ChartSenseException(
        ...         "Could not read dataset",
        ...         severity=ErrorSeverity.CRITICAL,
        ...         details={'file': path},
        ...         original_exception=e
        ...     )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize chartsense exception.

        Args:
            message: Human-readable error description
            severity: Error severity level (default: RECOVERABLE)
            details: Additional context dictionary
            original_exception: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for logging/reporting.

        Returns:
            Dictionary containing exception details suitable for JSON serialization
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(ChartSenseException):
    """
    Configuration file errors (fatal - stop all processing).

    Raised when:
    - Configuration file not found
    - Invalid YAML syntax
    - Invalid configuration structure

    Attributes:
        field (Optional[str]): Specific config field that caused error
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """
    YAML file too large or too deeply nested.

    Example:
        >>> raise YAMLSizeError(
        ...     "Config file exceeds 1MB limit",
        ...     file_size=1500000,
        ...     max_size=1048576
        ... )
    """

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Configuration is valid YAML but holds unusable values.

    Example:
        >>> raise ConfigValidationError(
        ...     "mi_bins must be a positive integer",
        ...     field="mi_bins",
        ...     expected="int >= 1",
        ...     actual="0"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Data Loading Errors (Critical)
# ============================================================================

class DataLoadError(ChartSenseException):
    """
    Dataset file could not be loaded into a table.

    Raised by the CLI loader when the file is missing, unreadable or cannot
    be parsed by pandas.

    Attributes:
        file_path (str): Path to file that failed to load
    """

    def __init__(
        self,
        message: str,
        file_path: str,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'file_path': file_path},
            original_exception=original_exception
        )
        self.file_path = file_path


class UnsupportedFormatError(DataLoadError):
    """
    File format not supported by the loader.

    Example:
        >>> raise UnsupportedFormatError(
        ...     "customers.xml",
        ...     format="xml",
        ...     supported_formats=["csv", "excel", "json"]
        ... )
    """

    def __init__(self, file_path: str, format: str, supported_formats: list):
        super().__init__(
            f"Unsupported file format '{format}'. Supported: {', '.join(supported_formats)}",
            file_path
        )
        self.details.update({
            'format': format,
            'supported_formats': supported_formats
        })


# ============================================================================
# Profiler Errors
# ============================================================================

class ProfilerError(ChartSenseException):
    """
    Descriptor building errors.

    Raised when the column statistics supplier is handed an input it cannot
    treat as a table.

    Example:
        >>> raise ProfilerError(
        ...     "Rows must be mappings of column name to value",
        ...     operation="describe_rows"
        ... )
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        column: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.RECOVERABLE,
            details={
                'operation': operation,
                'column': column
            },
            original_exception=original_exception
        )
