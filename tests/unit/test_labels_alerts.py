"""
Unit tests for chart labels and alert messages.
"""

from decimal import Decimal

import pytest

from sakata.models.signals import PatternBias, PatternType
from sakata.patterns.alerts import alert_title, collect_alerts, dispatch_alerts, format_alert
from sakata.patterns.engine import PatternEngine
from sakata.patterns.labels import (
    BEARISH_COLOR,
    BULLISH_COLOR,
    NEUTRAL_COLOR,
    PATTERN_LABELS,
    LabelPlacement,
    build_marker,
    get_label,
    markers_for,
)

from conftest import make_bars

ENGULFING_ROWS = [(10, 10, 8, 8), (8, 10.5, 8, 10.5)]


@pytest.fixture
def engulfing_evaluation():
    return PatternEngine().evaluate_last(make_bars(ENGULFING_ROWS))


class TestPatternLabels:
    """Test static label metadata."""

    def test_every_pattern_has_a_label(self):
        assert set(PATTERN_LABELS) == set(PatternType)

    def test_tooltip_starts_with_title(self):
        for label in PATTERN_LABELS.values():
            assert label.tooltip.startswith(label.title + "\n")

    def test_spans(self):
        assert get_label(PatternType.DOJI).span == 1
        assert get_label(PatternType.DRAGONFLY_DOJI).span == 2
        assert get_label(PatternType.BULLISH_ENGULFING).span == 2
        assert get_label(PatternType.MORNING_STAR).span == 3
        assert get_label(PatternType.RISING_THREE_METHODS).span == 5

    def test_placement_follows_bias(self):
        for label in PATTERN_LABELS.values():
            if label.bias == PatternBias.BEARISH:
                assert label.placement == LabelPlacement.ABOVE_BAR
            else:
                assert label.placement == LabelPlacement.BELOW_BAR

    def test_default_colors(self):
        assert get_label(PatternType.HAMMER).default_color == BULLISH_COLOR
        assert get_label(PatternType.SHOOTING_STAR).default_color == BEARISH_COLOR
        assert get_label(PatternType.DOJI).default_color == NEUTRAL_COLOR

    def test_lookup_by_value(self):
        assert get_label("doji").code == "D"


class TestBuildMarker:
    """Test marker construction."""

    def test_not_detected(self):
        assert build_marker(PatternType.HAMMER, False) is None

    def test_labels_disabled(self):
        assert build_marker(PatternType.HAMMER, True, show_label=False) is None

    def test_marker_fields(self):
        marker = build_marker(PatternType.SHOOTING_STAR, True, bar_index=7)

        assert marker.code == "SS"
        assert marker.placement == LabelPlacement.ABOVE_BAR
        assert marker.label_color == BEARISH_COLOR
        assert marker.text_color == "white"
        assert marker.bar_index == 7
        assert marker.tooltip.startswith("Shooting Star")

    def test_color_overrides(self):
        marker = build_marker(PatternType.HAMMER, True, label_color="#00ff00", text_color="black")

        assert marker.label_color == "#00ff00"
        assert marker.text_color == "black"

    def test_markers_for_evaluation(self, engulfing_evaluation):
        markers = markers_for(engulfing_evaluation)

        assert [m.pattern for m in markers] == engulfing_evaluation.detected
        assert all(m.bar_index == 1 for m in markers)
        assert markers_for(engulfing_evaluation, show_label=False) == []


class TestAlerts:
    """Test alert formatting and dispatch."""

    def test_format_alert(self):
        assert format_alert(PatternType.DOJI, "1h", Decimal("101.5")) == "Doji on 1h chart. Price is 101.5"

    def test_alert_titles(self):
        assert alert_title(PatternType.HAMMER) == "Hammer candle"
        assert alert_title(PatternType.SHOOTING_STAR) == "Shooting star"
        assert alert_title(PatternType.TRI_STAR_BULL) == "Bullish Tri-Star"
        assert alert_title(PatternType.FALLING_WINDOW) == "Falling Window"

    def test_collect_alerts(self, engulfing_evaluation):
        assert collect_alerts(engulfing_evaluation, "1h") == [
            "Bullish Marubozu on 1h chart. Price is 10.5",
            "Bullish Engulfing on 1h chart. Price is 10.5",
        ]

    def test_collect_alerts_filtered(self, engulfing_evaluation):
        alerts = collect_alerts(engulfing_evaluation, "4h", patterns=["marubozu_bull"])
        assert alerts == ["Bullish Marubozu on 4h chart. Price is 10.5"]

    def test_dispatch_alerts(self, engulfing_evaluation):
        received = []
        sent = dispatch_alerts(engulfing_evaluation, "1h", received.append)

        assert sent == 2
        assert received[0].startswith("Bullish Marubozu")

    def test_nothing_detected(self):
        evaluation = PatternEngine().evaluate_last(make_bars([(5, 5, 5, 5)]))
        received = []

        assert dispatch_alerts(evaluation, "1h", received.append) == 0
        assert received == []
