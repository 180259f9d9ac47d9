"""
Trend Gating

Pattern detectors never look at trend. Reversal and continuation patterns are
usually only acted upon in the right market context, so TrendGate combines
detector flags with externally computed up/down trend flags.

Each gated pattern requires a trend direction at a given lag: a Tweezer
Bottom, for example, resolves on the up candle but needs the downtrend to
have held on the bar before it. Ungated patterns pass through unchanged.
"""

from collections import deque
from enum import Enum
from typing import Dict, Optional, Tuple

from ..models.signals import PatternType


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"


TREND_REQUIREMENTS: Dict[PatternType, Tuple[TrendDirection, int]] = {
    PatternType.BULLISH_ENGULFING: (TrendDirection.UP, 0),
    PatternType.BEARISH_ENGULFING: (TrendDirection.DOWN, 0),
    PatternType.HAMMER: (TrendDirection.DOWN, 0),
    PatternType.SHOOTING_STAR: (TrendDirection.UP, 0),
    PatternType.TWEEZER_BOTTOM: (TrendDirection.DOWN, 1),
    PatternType.TWEEZER_TOP: (TrendDirection.UP, 1),
    PatternType.MORNING_STAR: (TrendDirection.DOWN, 0),
    PatternType.EVENING_STAR: (TrendDirection.UP, 0),
    PatternType.HARAMI_BULL: (TrendDirection.DOWN, 1),
    PatternType.HARAMI_BEAR: (TrendDirection.UP, 1),
    PatternType.HARAMI_BULL_CROSS: (TrendDirection.DOWN, 1),
    PatternType.HARAMI_BEAR_CROSS: (TrendDirection.UP, 1),
    PatternType.ABANDONED_BABY_BULL: (TrendDirection.DOWN, 1),
    PatternType.ABANDONED_BABY_BEAR: (TrendDirection.UP, 1),
    PatternType.PIERCING: (TrendDirection.DOWN, 1),
    PatternType.DARK_CLOUD_COVER: (TrendDirection.UP, 1),
    PatternType.TASUKI_GAP_UP: (TrendDirection.UP, 0),
    PatternType.TASUKI_GAP_DOWN: (TrendDirection.DOWN, 0),
    PatternType.RISING_THREE_METHODS: (TrendDirection.UP, 4),
    PatternType.FALLING_THREE_METHODS: (TrendDirection.DOWN, 4),
    PatternType.RISING_WINDOW: (TrendDirection.UP, 1),
    PatternType.FALLING_WINDOW: (TrendDirection.DOWN, 1),
    PatternType.ON_NECK_BULL: (TrendDirection.UP, 0),
    PatternType.ON_NECK_BEAR: (TrendDirection.DOWN, 0),
    PatternType.TRI_STAR_BULL: (TrendDirection.DOWN, 2),
    PatternType.TRI_STAR_BEAR: (TrendDirection.UP, 2),
}

MAX_TREND_LAG = max(lag for _, lag in TREND_REQUIREMENTS.values())


class TrendGate:
    """
    Applies the trend requirements to pattern flags.

    Feed one pair of trend flags per bar with ``update`` before calling
    ``apply`` for that bar. Only the last ``MAX_TREND_LAG + 1`` pairs are kept.
    A requirement reaching past the recorded history fails.
    """

    def __init__(self):
        # Newest first: (up_trend, down_trend)
        self._history: deque = deque(maxlen=MAX_TREND_LAG + 1)

    def update(self, up_trend: bool, down_trend: bool):
        self._history.appendleft((bool(up_trend), bool(down_trend)))

    def reset(self):
        self._history.clear()

    def __len__(self) -> int:
        return len(self._history)

    def trend_at(self, direction: TrendDirection, lag: int = 0) -> bool:
        """Recorded trend flag ``lag`` bars back; False beyond the history."""
        if not 0 <= lag < len(self._history):
            return False
        up_trend, down_trend = self._history[lag]
        return up_trend if direction == TrendDirection.UP else down_trend

    def requirement(self, pattern: PatternType) -> Optional[Tuple[TrendDirection, int]]:
        return TREND_REQUIREMENTS.get(PatternType(pattern))

    def allows(self, pattern: PatternType) -> bool:
        requirement = self.requirement(pattern)
        if requirement is None:
            return True
        direction, lag = requirement
        return self.trend_at(direction, lag)

    def apply(self, flags: Dict[PatternType, bool]) -> Dict[PatternType, bool]:
        """Return a copy of ``flags`` with trend requirements enforced."""
        return {pattern: hit and self.allows(pattern) for pattern, hit in flags.items()}
