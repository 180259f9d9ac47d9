"""
Single Candlestick Pattern Recognition

This module implements recognition algorithms for single-candlestick patterns
including Doji, Hammer, Shooting Star, Dragonfly/Gravestone Doji, Spinning Top,
Marubozu and Long Lower/Upper Shadow.

Each detector:
- holds its own configuration object, so call sites can tune independently
- reads only the measurement snapshot of the current bar (lag 0)
- resolves to False instead of raising on degenerate bars

Also defines the PatternDetector base class shared with the multi-candle
detectors.
"""

from decimal import Decimal
from typing import Optional
from abc import ABC, abstractmethod

from ..models.signals import PatternType
from .measurements import BarWindow, MeasurementSnapshot
from .pattern_config import (
    DojiConfig,
    HammerConfig,
    ShootingStarConfig,
    SpinningTopConfig,
    MarubozuConfig,
    LongShadowConfig,
)

_HUNDRED = Decimal('100')


class PatternDetector(ABC):
    """
    Abstract base class for all candlestick pattern detectors.

    Subclasses implement ``_matches`` against a window that is guaranteed
    to hold ``get_required_candles()`` bars.
    """

    @abstractmethod
    def get_pattern_type(self) -> PatternType:
        """Get the pattern type this detector recognizes."""
        pass

    @abstractmethod
    def get_required_candles(self) -> int:
        """Return the number of bars (current plus history) the pattern spans."""
        pass

    @abstractmethod
    def _matches(self, window: BarWindow) -> bool:
        pass

    @property
    def pattern_type(self) -> PatternType:
        return self.get_pattern_type()

    @property
    def required_bars(self) -> int:
        return self.get_required_candles()

    def detect(self, window: BarWindow) -> bool:
        """
        Check whether the pattern resolves on the newest bar of the window.

        Args:
            window: Lookback window, ``window[0]`` being the bar under evaluation

        Returns:
            True when pattern detected, False otherwise (including short history)
        """
        if not window.has(self.get_required_candles() - 1):
            return False
        return bool(self._matches(window))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.get_pattern_type().value})"


class SinglePatternDetector(PatternDetector):
    """Base class for detectors that look at the current bar only."""

    def get_required_candles(self) -> int:
        return 1

    def _matches(self, window: BarWindow) -> bool:
        return self.matches_candle(window[0])

    @abstractmethod
    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        """Evaluate the pattern on one measured bar."""
        pass


class DojiDetector(SinglePatternDetector):
    """
    Doji pattern detector.

    Body no larger than ``size`` percent of the candle range, with wicks of
    comparable length: neither wick may exceed ``wick_ratio`` times the other.
    Zero-range bars have no defined body percent and never qualify.
    """

    def __init__(self, config: Optional[DojiConfig] = None):
        self.config = config or DojiConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.DOJI

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        if candle.body_percent is None:
            return False
        symmetric = (
            candle.top_wick <= candle.bottom_wick * self.config.wick_ratio and
            candle.bottom_wick <= candle.top_wick * self.config.wick_ratio
        )
        return candle.body_percent <= self.config.size and symmetric


class HammerDetector(SinglePatternDetector):
    """
    Hammer pattern detector.

    A Hammer is a bullish bottoming candle:
    - Real body sits in the top ``ratio`` percent of the range
    - Top wick no larger than ``shadow_percent`` of the body
    - Non-zero body
    """

    def __init__(self, config: Optional[HammerConfig] = None):
        self.config = config or HammerConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.HAMMER

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        if candle.body <= 0:
            return False
        bull_ratio = (candle.low - candle.high) * (self.config.ratio / _HUNDRED) + candle.high
        has_shadow = candle.top_wick > self.config.shadow_percent / _HUNDRED * candle.body
        return candle.body_low >= bull_ratio and not has_shadow


class ShootingStarDetector(SinglePatternDetector):
    """
    Shooting Star pattern detector.

    Mirror of the Hammer: real body in the bottom ``ratio`` percent of the
    range and a bottom wick no larger than ``shadow_percent`` of the body.
    """

    def __init__(self, config: Optional[ShootingStarConfig] = None):
        self.config = config or ShootingStarConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.SHOOTING_STAR

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        if candle.body <= 0:
            return False
        bear_ratio = (candle.high - candle.low) * (self.config.ratio / _HUNDRED) + candle.low
        has_shadow = candle.bottom_wick > self.config.shadow_percent / _HUNDRED * candle.body
        return candle.body_high <= bear_ratio and not has_shadow


class DragonflyDojiDetector(SinglePatternDetector):
    """Doji body whose top wick is no larger than the body."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.DRAGONFLY_DOJI

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        return candle.is_doji and candle.top_wick <= candle.body


class GravestoneDojiDetector(SinglePatternDetector):
    """
    Gravestone Doji detector.

    Shares the Dragonfly rule (doji body, top wick no larger than the body)
    exactly; the two differ only in how they are labelled.
    """

    def get_pattern_type(self) -> PatternType:
        return PatternType.GRAVESTONE_DOJI

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        return candle.is_doji and candle.top_wick <= candle.body


class SpinningTopDetector(SinglePatternDetector):
    """
    Spinning Top pattern detector.

    Both wicks at least ``wick_size`` percent of the range and a body that
    is not a doji. Direction-agnostic; see the Bull/Bear subclasses.
    """

    def __init__(self, config: Optional[SpinningTopConfig] = None):
        self.config = config or SpinningTopConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.SPINNING_TOP

    def _direction_ok(self, candle: MeasurementSnapshot) -> bool:
        return True

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        if candle.candle_range <= 0:
            return False
        min_wick = candle.candle_range / _HUNDRED * self.config.wick_size
        return (
            candle.bottom_wick >= min_wick and
            candle.top_wick >= min_wick and
            self._direction_ok(candle) and
            not candle.is_doji
        )


class SpinningTopBullDetector(SpinningTopDetector):
    """Spinning Top on an up candle."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.SPINNING_TOP_BULL

    def _direction_ok(self, candle: MeasurementSnapshot) -> bool:
        return candle.is_up_candle


class SpinningTopBearDetector(SpinningTopDetector):
    """Spinning Top on a down candle."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.SPINNING_TOP_BEAR

    def _direction_ok(self, candle: MeasurementSnapshot) -> bool:
        return candle.is_down_candle


class MarubozuBullDetector(SinglePatternDetector):
    """
    Bullish Marubozu detector.

    Tall up candle whose top and bottom wicks are each under
    ``max_wick_percent`` of the body.
    """

    def __init__(self, config: Optional[MarubozuConfig] = None):
        self.config = config or MarubozuConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.MARUBOZU_BULL

    def _direction_ok(self, candle: MeasurementSnapshot) -> bool:
        return candle.is_up_candle

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        if candle.body <= 0:
            return False
        limit = self.config.max_wick_percent
        return (
            self._direction_ok(candle) and
            candle.is_tall_body and
            limit > candle.top_wick / candle.body * _HUNDRED and
            limit > candle.bottom_wick / candle.body * _HUNDRED
        )


class MarubozuBearDetector(MarubozuBullDetector):
    """Bearish Marubozu detector: tall down candle with negligible wicks."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.MARUBOZU_BEAR

    def _direction_ok(self, candle: MeasurementSnapshot) -> bool:
        return candle.is_down_candle


class LongLowerShadowDetector(SinglePatternDetector):
    """Bottom wick longer than ``ratio`` percent of the candle range."""

    def __init__(self, config: Optional[LongShadowConfig] = None):
        self.config = config or LongShadowConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.LONG_LOWER_SHADOW

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        return candle.bottom_wick > candle.candle_range / _HUNDRED * self.config.ratio


class LongUpperShadowDetector(LongLowerShadowDetector):
    """Top wick longer than ``ratio`` percent of the candle range."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.LONG_UPPER_SHADOW

    def matches_candle(self, candle: MeasurementSnapshot) -> bool:
        return candle.top_wick > candle.candle_range / _HUNDRED * self.config.ratio
