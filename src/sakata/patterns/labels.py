"""
Pattern Labels

Chart annotation metadata for every pattern: short code, title, tooltip,
directional bias, placement relative to the bar and the number of bars the
pattern spans. ``build_marker`` turns a detection into a renderable marker;
drawing it is left to the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..models.signals import PatternBias, PatternType

BULLISH_COLOR = "#64b5f6"
BEARISH_COLOR = "#ef5350"
NEUTRAL_COLOR = "gray"
DEFAULT_TEXT_COLOR = "white"


class LabelPlacement(str, Enum):
    """Where a marker sits relative to its bar."""
    ABOVE_BAR = "above_bar"
    BELOW_BAR = "below_bar"


@dataclass(frozen=True)
class PatternLabel:
    """Static annotation metadata for one pattern."""
    pattern: PatternType
    code: str
    title: str
    tooltip: str
    bias: PatternBias
    span: int

    @property
    def placement(self) -> LabelPlacement:
        # Bearish markers point down from above the bar
        if self.bias == PatternBias.BEARISH:
            return LabelPlacement.ABOVE_BAR
        return LabelPlacement.BELOW_BAR

    @property
    def default_color(self) -> str:
        if self.bias == PatternBias.BULLISH:
            return BULLISH_COLOR
        if self.bias == PatternBias.BEARISH:
            return BEARISH_COLOR
        return NEUTRAL_COLOR


class LabelMarker(BaseModel):
    """A label ready to be drawn on a chart."""

    pattern: PatternType
    code: str
    tooltip: str
    placement: LabelPlacement
    label_color: str
    text_color: str
    bar_index: Optional[int] = None
    span: int = 1

    model_config = ConfigDict(frozen=True)


_BULL = PatternBias.BULLISH
_BEAR = PatternBias.BEARISH
_NEUT = PatternBias.NEUTRAL


def _label(pattern, code, title, description, bias, span=1) -> PatternLabel:
    return PatternLabel(pattern, code, title, f"{title}\n{description}", bias, span)


PATTERN_LABELS: Dict[PatternType, PatternLabel] = {label.pattern: label for label in [
    _label(PatternType.DOJI, "D", "Doji",
           "Indecision candle whose session closes at or near its open, leaving little or no real body.",
           _NEUT),
    _label(PatternType.HAMMER, "H", "Hammer",
           "Bullish bottoming candle with a long lower wick and a small body closing near the highs.",
           _BULL),
    _label(PatternType.SHOOTING_STAR, "SS", "Shooting Star",
           "Bearish topping candle with a long upper wick and a small body closing near the lows.",
           _BEAR),
    _label(PatternType.DRAGONFLY_DOJI, "DD", "Dragonfly Doji",
           "Bullish doji that opens and closes at or near the high of the bar.",
           _BULL, 2),
    _label(PatternType.GRAVESTONE_DOJI, "GD", "Gravestone Doji",
           "Bearish doji that opens and closes at or near the low of the bar.",
           _BEAR, 2),
    _label(PatternType.SPINNING_TOP_BULL, "STW", "White Spinning Top",
           "Up candle with a short body between long wicks of similar length. Indecision.",
           _NEUT),
    _label(PatternType.SPINNING_TOP_BEAR, "STB", "Black Spinning Top",
           "Down candle with a short body between long wicks of similar length. Indecision.",
           _NEUT),
    _label(PatternType.SPINNING_TOP, "ST", "Spinning Top",
           "Short body between long wicks of similar length. Indecision.",
           _NEUT),
    _label(PatternType.MARUBOZU_BULL, "MW", "Bullish Marubozu",
           "Up candle with next to no shadow at either the open or the close.",
           _BULL),
    _label(PatternType.MARUBOZU_BEAR, "MB", "Bearish Marubozu",
           "Down candle with next to no shadow at either the open or the close.",
           _BEAR),
    _label(PatternType.LONG_LOWER_SHADOW, "LLS", "Long Lower Shadow",
           "Sellers dominated the first part of the session and were underwater by the close.",
           _BULL),
    _label(PatternType.LONG_UPPER_SHADOW, "LUS", "Long Upper Shadow",
           "Buyers dominated the first part of the session and were underwater by the close.",
           _BEAR),
    _label(PatternType.BULLISH_ENGULFING, "BE", "Bullish Engulfing",
           "Up candle that opens below the previous close and closes above the previous open.",
           _BULL, 2),
    _label(PatternType.BEARISH_ENGULFING, "BE", "Bearish Engulfing",
           "Down candle that opens above the previous close and closes below the previous open.",
           _BEAR, 2),
    _label(PatternType.TWEEZER_BOTTOM, "TB", "Tweezer Bottom",
           "Up candle after a down candle with nearly identical lows. A defended double bottom.",
           _BULL, 2),
    _label(PatternType.TWEEZER_TOP, "TT", "Tweezer Top",
           "Down candle after an up candle with nearly identical highs. A defended double top.",
           _BEAR, 2),
    _label(PatternType.HARAMI_BULL, "HW", "Bullish Harami",
           "Small up candle entirely inside the body of the previous down candle.",
           _BULL, 2),
    _label(PatternType.HARAMI_BEAR, "HB", "Bearish Harami",
           "Small down candle entirely inside the body of the previous up candle.",
           _BEAR, 2),
    _label(PatternType.HARAMI_BULL_CROSS, "HC", "Bullish Harami Cross",
           "Doji entirely inside the body of the previous down candle.",
           _BULL, 2),
    _label(PatternType.HARAMI_BEAR_CROSS, "HC", "Bearish Harami Cross",
           "Doji entirely inside the body of the previous up candle.",
           _BEAR, 2),
    _label(PatternType.PIERCING, "P", "Piercing",
           "Up candle opening below the prior tall down candle and closing above its midpoint.",
           _BULL, 2),
    _label(PatternType.DARK_CLOUD_COVER, "DCC", "Dark Cloud Cover",
           "Down candle opening above the prior tall up candle and closing below its midpoint.",
           _BEAR, 2),
    _label(PatternType.RISING_WINDOW, "RW", "Rising Window",
           "Price gap between the previous high and the current low. Bullish continuation.",
           _BULL, 2),
    _label(PatternType.FALLING_WINDOW, "FW", "Falling Window",
           "Price gap between the previous low and the current high. Bearish continuation.",
           _BEAR, 2),
    _label(PatternType.KICKING_BULL, "K", "Kicking Bull",
           "Bearish marubozu followed by a bullish marubozu that gaps above it.",
           _BULL, 2),
    _label(PatternType.KICKING_BEAR, "K", "Kicking Bear",
           "Bullish marubozu followed by a bearish marubozu that gaps below it.",
           _BEAR, 2),
    _label(PatternType.ON_NECK_BULL, "N", "Bullish On Neck",
           "Tall up candle followed by a short down candle closing near the previous high.",
           _BULL, 2),
    _label(PatternType.ON_NECK_BEAR, "N", "Bearish On Neck",
           "Tall down candle followed by a short up candle closing near the previous low.",
           _BEAR, 2),
    _label(PatternType.INSIDE_BAR, "IB", "Inside Bar",
           "High below the previous high and low above the previous low.",
           _NEUT, 2),
    _label(PatternType.MORNING_STAR, "MS", "Morning Star",
           "Decisive down candle, a small gapped star, then a strong up candle. Bullish reversal.",
           _BULL, 3),
    _label(PatternType.EVENING_STAR, "ES", "Evening Star",
           "Decisive up candle, a small gapped star, then a strong down candle. Bearish reversal.",
           _BEAR, 3),
    _label(PatternType.ABANDONED_BABY_BULL, "AB", "Bullish Abandoned Baby",
           "Down candle, a doji gapping below it, then an up candle gapping above the doji.",
           _BULL, 3),
    _label(PatternType.ABANDONED_BABY_BEAR, "AB", "Bearish Abandoned Baby",
           "Up candle, a doji gapping above it, then a down candle gapping below the doji.",
           _BEAR, 3),
    _label(PatternType.TASUKI_GAP_UP, "UTG", "Upside Tasuki Gap",
           "Two up candles separated by a gap, then a down candle that fails to close the gap.",
           _BULL, 3),
    _label(PatternType.TASUKI_GAP_DOWN, "DTG", "Downside Tasuki Gap",
           "Two down candles separated by a gap, then an up candle that fails to close the gap.",
           _BEAR, 3),
    _label(PatternType.THREE_WHITE_SOLDIERS, "3WS", "Three White Soldiers",
           "Three tall up candles, each opening inside the previous body and closing near its high.",
           _BULL, 3),
    _label(PatternType.THREE_BLACK_CROWS, "3BC", "Three Black Crows",
           "Three tall down candles, each opening inside the previous body and closing near its low.",
           _BEAR, 3),
    _label(PatternType.DOUBLE_INSIDE_BAR, "DI", "Double Inside Bar",
           "Two inside bars in a row. Often seen in consolidation; favors continuation.",
           _NEUT, 3),
    _label(PatternType.TRI_STAR_BULL, "3S", "Bullish Tri-Star",
           "Three dojis in succession with the middle one gapping below. Bullish reversal.",
           _BULL, 3),
    _label(PatternType.TRI_STAR_BEAR, "3S", "Bearish Tri-Star",
           "Three dojis in succession with the middle one gapping above. Bearish reversal.",
           _BEAR, 3),
    _label(PatternType.RISING_THREE_METHODS, "RTM", "Rising Three Methods",
           "Tall up candle, three short down candles inside its range, then a tall up candle to new highs.",
           _BULL, 5),
    _label(PatternType.FALLING_THREE_METHODS, "FTM", "Falling Three Methods",
           "Tall down candle, three short up candles inside its range, then a tall down candle to new lows.",
           _BEAR, 5),
]}


def get_label(pattern: PatternType) -> PatternLabel:
    return PATTERN_LABELS[PatternType(pattern)]


def build_marker(
    pattern: PatternType,
    detected: bool,
    show_label: bool = True,
    label_color: Optional[str] = None,
    text_color: str = DEFAULT_TEXT_COLOR,
    bar_index: Optional[int] = None
) -> Optional[LabelMarker]:
    """
    Build the chart marker for a pattern.

    Args:
        pattern: Pattern to label
        detected: Whether the pattern resolved on the bar
        show_label: Labels are only produced when enabled
        label_color: Border/arrow color, defaults to the pattern's bias color
        text_color: Text color
        bar_index: Index of the bar the marker belongs to

    Returns:
        The marker, or None when not detected or labels are disabled
    """
    if not (detected and show_label):
        return None
    label = get_label(pattern)
    return LabelMarker(
        pattern=label.pattern,
        code=label.code,
        tooltip=label.tooltip,
        placement=label.placement,
        label_color=label_color or label.default_color,
        text_color=text_color,
        bar_index=bar_index,
        span=label.span,
    )


def markers_for(evaluation, show_label: bool = True, text_color: str = DEFAULT_TEXT_COLOR) -> List[LabelMarker]:
    """Markers for every pattern detected in a PatternEvaluation."""
    markers = []
    for pattern in evaluation.detected:
        marker = build_marker(pattern, True, show_label, text_color=text_color, bar_index=evaluation.index)
        if marker is not None:
            markers.append(marker)
    return markers
