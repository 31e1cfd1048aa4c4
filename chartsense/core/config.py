"""Classifier configuration parsing and validation."""

import os
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from chartsense.core import constants
from chartsense.core.exceptions import (
    ConfigError,
    YAMLSizeError,
    ConfigValidationError
)
from chartsense.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ClassifierConfig:
    """
    Tunable constants for the classifier.

    Every field defaults to the value in chartsense.core.constants, so an
    empty configuration reproduces the stock behaviour exactly.
    """
    mi_bins: int = constants.MI_BINS
    mi_min_values: int = constants.MI_MIN_VALUES
    max_metrics: int = constants.MAX_METRICS
    max_dimensions: int = constants.MAX_DIMENSIONS
    max_mi_bars: int = constants.MAX_MI_BARS
    max_timeseries_metrics: int = constants.MAX_TIMESERIES_METRICS
    max_year_metrics: int = constants.MAX_YEAR_METRICS
    pie_min_cardinality: int = constants.PIE_MIN_CARDINALITY
    pie_max_cardinality: int = constants.PIE_MAX_CARDINALITY
    max_correlation_metrics: int = constants.MAX_CORRELATION_METRICS
    correlation_threshold: float = constants.CORRELATION_THRESHOLD
    max_correlation_charts: int = constants.MAX_CORRELATION_CHARTS
    correlation_sample_rows: int = constants.CORRELATION_SAMPLE_ROWS
    correlation_min_pairs: int = constants.CORRELATION_MIN_PAIRS
    sequential_sample_rows: int = constants.SEQUENTIAL_SAMPLE_ROWS
    max_histograms: int = constants.MAX_HISTOGRAMS
    pie_validation_max_groups: int = constants.PIE_VALIDATION_MAX_GROUPS
    archetype_floor: float = constants.ARCHETYPE_FLOOR
    priority_start: int = constants.PRIORITY_START

    # Fields that may be zero (a zero cap disables that recommendation family)
    _ALLOW_ZERO = (
        "max_mi_bars",
        "max_timeseries_metrics",
        "max_year_metrics",
        "max_correlation_charts",
        "max_histograms",
    )

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        """Reject values the generator cannot work with."""
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type is int or f.type == "int":
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigValidationError(
                        f"'{f.name}' must be an integer",
                        field=f.name,
                        expected="int",
                        actual=repr(value)
                    )
                minimum = 0 if f.name in self._ALLOW_ZERO else 1
                if value < minimum:
                    raise ConfigValidationError(
                        f"'{f.name}' must be >= {minimum}",
                        field=f.name,
                        expected=f"int >= {minimum}",
                        actual=str(value)
                    )
            else:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ConfigValidationError(
                        f"'{f.name}' must be a number",
                        field=f.name,
                        expected="float",
                        actual=repr(value)
                    )
                if not 0.0 <= float(value) <= 1.0:
                    raise ConfigValidationError(
                        f"'{f.name}' must be between 0 and 1",
                        field=f.name,
                        expected="0.0 - 1.0",
                        actual=str(value)
                    )

        if self.pie_min_cardinality > self.pie_max_cardinality:
            raise ConfigValidationError(
                "'pie_min_cardinality' cannot exceed 'pie_max_cardinality'",
                field="pie_min_cardinality",
                expected=f"<= {self.pie_max_cardinality}",
                actual=str(self.pie_min_cardinality)
            )

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "ClassifierConfig":
        """
        Build a configuration from a plain dictionary.

        Accepts either the bare settings or a mapping with a top-level
        'classifier' key. Unknown keys are rejected.
        """
        if not config_dict:
            return cls()
        if not isinstance(config_dict, dict):
            raise ConfigError("Configuration must be a mapping")

        settings = config_dict.get("classifier", config_dict)
        if settings is None:
            return cls()
        if not isinstance(settings, dict):
            raise ConfigError("'classifier' section must be a mapping", field="classifier")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(settings) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown classifier setting(s): {', '.join(map(str, unknown))}",
                field=str(unknown[0]),
                expected=", ".join(sorted(known)),
                actual=", ".join(map(str, unknown))
            )
        return cls(**settings)

    @classmethod
    def from_yaml(cls, config_path: str) -> "ClassifierConfig":
        """
        Load configuration from a YAML file with size and structure limits.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            ClassifierConfig instance

        Raises:
            ConfigError: If file not found or invalid
            YAMLSizeError: If file exceeds size or structure limits
            ConfigValidationError: If a setting is unknown or out of range
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > constants.MAX_YAML_FILE_SIZE:
            raise YAMLSizeError(
                f"Configuration file too large: {file_size:,} bytes. "
                f"Maximum allowed: {constants.MAX_YAML_FILE_SIZE:,} bytes",
                file_size=file_size,
                max_size=constants.MAX_YAML_FILE_SIZE
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file: {str(e)}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}")

        if config_dict is not None:
            cls._validate_yaml_structure(config_dict)

        config = cls.from_dict(config_dict)
        logger.info(f"Loaded classifier config from {config_path}")
        return config

    @classmethod
    def _validate_yaml_structure(cls, obj: Any, current_depth: int = 0, total_keys: List[int] = None) -> None:
        """
        Validate YAML structure against nesting depth and key count limits.

        Raises:
            YAMLSizeError: If structure is too complex
        """
        if total_keys is None:
            total_keys = [0]

        if current_depth > constants.MAX_YAML_NESTING_DEPTH:
            raise YAMLSizeError(
                f"YAML nesting depth exceeds maximum of {constants.MAX_YAML_NESTING_DEPTH} levels"
            )

        if isinstance(obj, dict):
            total_keys[0] += len(obj)
            if total_keys[0] > constants.MAX_YAML_KEY_COUNT:
                raise YAMLSizeError(
                    f"YAML structure contains more than {constants.MAX_YAML_KEY_COUNT:,} keys/items"
                )
            for value in obj.values():
                cls._validate_yaml_structure(value, current_depth + 1, total_keys)

        elif isinstance(obj, list):
            total_keys[0] += len(obj)
            if total_keys[0] > constants.MAX_YAML_KEY_COUNT:
                raise YAMLSizeError(
                    f"YAML structure contains more than {constants.MAX_YAML_KEY_COUNT:,} keys/items"
                )
            for item in obj:
                cls._validate_yaml_structure(item, current_depth + 1, total_keys)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return asdict(self)
