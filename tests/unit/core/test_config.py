"""
Unit tests for ClassifierConfig loading and validation.
"""

import pytest
import yaml

from chartsense.core import constants
from chartsense.core.config import ClassifierConfig
from chartsense.core.exceptions import ConfigError, ConfigValidationError, YAMLSizeError


class TestDefaults:
    """Defaults mirror the constants module."""

    def test_defaults_match_constants(self):
        config = ClassifierConfig()

        assert config.mi_bins == constants.MI_BINS
        assert config.pie_max_cardinality == constants.PIE_MAX_CARDINALITY
        assert config.correlation_threshold == constants.CORRELATION_THRESHOLD
        assert config.archetype_floor == constants.ARCHETYPE_FLOOR
        assert config.priority_start == constants.PRIORITY_START

    def test_to_dict_round_trips(self):
        config = ClassifierConfig(mi_bins=8)
        assert ClassifierConfig.from_dict(config.to_dict()) == config


class TestValidation:
    """Invalid values are rejected at construction."""

    def test_zero_bins_rejected(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ClassifierConfig(mi_bins=0)
        assert exc_info.value.field == "mi_bins"

    def test_zero_allowed_for_family_caps(self):
        config = ClassifierConfig(max_histograms=0, max_mi_bars=0)
        assert config.max_histograms == 0

    def test_bool_rejected_for_int(self):
        with pytest.raises(ConfigValidationError):
            ClassifierConfig(max_metrics=True)

    def test_float_rejected_for_int(self):
        with pytest.raises(ConfigValidationError):
            ClassifierConfig(max_metrics=2.5)

    def test_threshold_out_of_range(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ClassifierConfig(correlation_threshold=1.5)
        assert exc_info.value.details['actual'] == "1.5"

    def test_threshold_accepts_int_zero(self):
        assert ClassifierConfig(correlation_threshold=0).correlation_threshold == 0

    def test_pie_band_inverted(self):
        with pytest.raises(ConfigValidationError):
            ClassifierConfig(pie_min_cardinality=10, pie_max_cardinality=5)


class TestFromDict:
    """Dictionary loading."""

    def test_empty_gives_defaults(self):
        assert ClassifierConfig.from_dict(None) == ClassifierConfig()
        assert ClassifierConfig.from_dict({}) == ClassifierConfig()

    def test_classifier_section(self):
        config = ClassifierConfig.from_dict({'classifier': {'mi_bins': 7, 'max_histograms': 1}})

        assert config.mi_bins == 7
        assert config.max_histograms == 1

    def test_bare_settings(self):
        assert ClassifierConfig.from_dict({'pie_max_cardinality': 8}).pie_max_cardinality == 8

    def test_unknown_key(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ClassifierConfig.from_dict({'classifier': {'mi_binz': 7}})
        assert "mi_binz" in exc_info.value.message

    def test_non_mapping(self):
        with pytest.raises(ConfigError):
            ClassifierConfig.from_dict(["mi_bins"])

    def test_non_mapping_section(self):
        with pytest.raises(ConfigError):
            ClassifierConfig.from_dict({'classifier': [1, 2]})


class TestFromYaml:
    """YAML file loading with safety limits."""

    def test_load(self, tmp_path):
        path = tmp_path / "chartsense.yaml"
        path.write_text(yaml.safe_dump({'classifier': {'mi_bins': 6, 'correlation_threshold': 0.5}}))

        config = ClassifierConfig.from_yaml(str(path))

        assert config.mi_bins == 6
        assert config.correlation_threshold == 0.5

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert ClassifierConfig.from_yaml(str(path)) == ClassifierConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ClassifierConfig.from_yaml(str(tmp_path / "missing.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("classifier: [unclosed\n")

        with pytest.raises(ConfigError, match="Failed to parse"):
            ClassifierConfig.from_yaml(str(path))

    def test_oversize_file(self, tmp_path):
        path = tmp_path / "huge.yaml"
        path.write_text("#" * (constants.MAX_YAML_FILE_SIZE + 1))

        with pytest.raises(YAMLSizeError):
            ClassifierConfig.from_yaml(str(path))

    def test_nesting_too_deep(self, tmp_path):
        nested = {'leaf': 1}
        for _ in range(constants.MAX_YAML_NESTING_DEPTH + 2):
            nested = {'level': nested}
        path = tmp_path / "deep.yaml"
        path.write_text(yaml.safe_dump(nested))

        with pytest.raises(YAMLSizeError, match="nesting depth"):
            ClassifierConfig.from_yaml(str(path))
