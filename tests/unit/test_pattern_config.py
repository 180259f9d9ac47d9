"""
Unit tests for pattern detection configuration.
"""

import json
from decimal import Decimal

import pytest

from sakata.exceptions import PatternConfigError, SakataError
from sakata.patterns.pattern_config import (
    EngulfingConfig,
    MeasurementConfig,
    PatternDetectionConfig,
    TweezerConfig,
)


class TestSectionValidation:
    """Test coercion and validation of the per-pattern sections."""

    def test_defaults(self):
        config = PatternDetectionConfig()

        assert config.measurement.body_avg_period == Decimal("14")
        assert config.measurement.doji_body_percent == Decimal("5")
        assert config.doji.size == Decimal("5")
        assert config.doji.wick_ratio == Decimal("2")
        assert config.hammer.ratio == Decimal("33")
        assert config.spinning_top.wick_size == Decimal("34")
        assert config.long_shadow.ratio == Decimal("75")
        assert config.engulfing.max_reject_wick == Decimal("0")
        assert config.engulfing.must_engulf_wick is False
        assert config.tweezer.tolerance == Decimal("0.05")

    def test_floats_converted_exactly(self):
        assert TweezerConfig(tolerance=0.1).tolerance == Decimal("0.1")

    @pytest.mark.parametrize("period", [0, -3, 2.5, "x"])
    def test_invalid_body_avg_period(self, period):
        with pytest.raises(PatternConfigError):
            MeasurementConfig(body_avg_period=period)

    def test_non_finite_rejected(self):
        with pytest.raises(PatternConfigError):
            TweezerConfig(tolerance="NaN")

    def test_bool_field_requires_bool(self):
        with pytest.raises(PatternConfigError):
            EngulfingConfig(must_engulf_wick="yes")

    def test_bool_rejected_for_numeric_field(self):
        with pytest.raises(PatternConfigError):
            TweezerConfig(tolerance=True)

    def test_error_hierarchy(self):
        with pytest.raises(SakataError):
            MeasurementConfig(body_avg_period=0)
        with pytest.raises(ValueError):
            MeasurementConfig(body_avg_period=0)


class TestSerialization:
    """Test dict and file round trips."""

    def test_to_dict_is_json_ready(self):
        data = PatternDetectionConfig().to_dict()

        assert data["doji"] == {"size": "5", "wick_ratio": "2"}
        assert data["engulfing"]["must_engulf_wick"] is False
        json.dumps(data)

    def test_from_dict_partial(self):
        config = PatternDetectionConfig.from_dict({"hammer": {"ratio": "40"}})

        assert config.hammer.ratio == Decimal("40")
        assert config.hammer.shadow_percent == Decimal("5")
        assert config.doji == PatternDetectionConfig().doji

    def test_unknown_section(self):
        with pytest.raises(PatternConfigError, match="Unknown configuration section"):
            PatternDetectionConfig.from_dict({"candles": {}})

    def test_unknown_field(self):
        with pytest.raises(PatternConfigError, match="Invalid fields"):
            PatternDetectionConfig.from_dict({"doji": {"colour": "red"}})

    def test_section_must_be_object(self):
        with pytest.raises(PatternConfigError):
            PatternDetectionConfig.from_dict({"doji": 5})

    def test_invalid_value_in_section(self):
        with pytest.raises(PatternConfigError):
            PatternDetectionConfig.from_dict({"measurement": {"body_avg_period": 0}})

    def test_file_round_trip(self, temp_dir):
        path = temp_dir / "patterns.json"
        config = PatternDetectionConfig.from_dict({
            "engulfing": {"must_engulf_wick": True, "max_reject_wick": "30"},
            "measurement": {"body_avg_period": 10},
        })
        config.save_to_file(path)

        assert PatternDetectionConfig.load_from_file(path) == config

    def test_invalid_json_file(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json")

        with pytest.raises(PatternConfigError, match="Invalid JSON"):
            PatternDetectionConfig.load_from_file(path)

    def test_json_must_be_object(self, temp_dir):
        path = temp_dir / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(PatternConfigError):
            PatternDetectionConfig.load_from_file(path)
