"""
Multi-Candlestick Pattern Recognition

This module implements recognition algorithms for patterns spanning two to
five bars: Engulfing, Tweezer, Morning/Evening Star, Harami (and Cross),
Abandoned Baby, Piercing, Dark Cloud Cover, Tasuki Gap, Rising/Falling Three
Methods, Rising/Falling Window, Kicking, On Neck, Three White Soldiers,
Three Black Crows, Tri-Star and Inside/Double Inside Bar.

Detectors read lagged snapshots through the BarWindow: ``window[0]`` is the
bar the pattern resolves on, ``window[k]`` the bar k bars earlier. A window
shorter than the pattern span never matches.

Kicking, Tri-Star and Double Inside Bar are composed from other detectors
rather than restating their rules.
"""

from decimal import Decimal
from typing import Optional

from ..models.signals import PatternType
from .measurements import BarWindow, MeasurementSnapshot
from .pattern_config import (
    DojiConfig,
    EngulfingConfig,
    MarubozuConfig,
    OnNeckConfig,
    SoldiersCrowsConfig,
    TweezerConfig,
)
from .single_candlestick import (
    PatternDetector,
    DojiDetector,
    MarubozuBullDetector,
    MarubozuBearDetector,
)

_HUNDRED = Decimal('100')


class MultiPatternDetector(PatternDetector):
    """
    Abstract base class for multi-candlestick pattern detectors.

    Subclasses declare their span through ``required_candles``.
    """

    required_candles = 2

    def get_required_candles(self) -> int:
        return self.required_candles


class BullishEngulfingDetector(MultiPatternDetector):
    """
    Bullish Engulfing detector.

    A down (or flat) candle followed by an up candle that opens at or below
    the prior close and closes at or above the prior open. Optional filters:
    - ``max_reject_wick``: top wick must stay under this percent of the body
    - ``must_engulf_wick``: close must also clear the prior high
    """

    def __init__(self, config: Optional[EngulfingConfig] = None):
        self.config = config or EngulfingConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.BULLISH_ENGULFING

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        if current.body <= 0:
            return False
        rejection_ok = (
            self.config.max_reject_wick == 0 or
            current.top_wick / current.body < self.config.max_reject_wick / _HUNDRED
        )
        return (
            prior.close <= prior.open and
            current.close >= prior.open and
            current.open <= prior.close and
            rejection_ok and
            (not self.config.must_engulf_wick or current.close >= prior.high)
        )


class BearishEngulfingDetector(BullishEngulfingDetector):
    """Mirror of the Bullish Engulfing, filtering on the bottom wick and prior low."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.BEARISH_ENGULFING

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        if current.body <= 0:
            return False
        rejection_ok = (
            self.config.max_reject_wick == 0 or
            current.bottom_wick / current.body < self.config.max_reject_wick / _HUNDRED
        )
        return (
            prior.close >= prior.open and
            current.close <= prior.open and
            current.open >= prior.close and
            rejection_ok and
            (not self.config.must_engulf_wick or current.close <= prior.low)
        )


def _not_plain_doji(candle: MeasurementSnapshot) -> bool:
    return not candle.is_doji or (candle.has_top_shadow and candle.has_bottom_shadow)


class TweezerBottomDetector(MultiPatternDetector):
    """
    Tweezer Bottom detector.

    Tall down candle followed by an up candle whose low matches the prior low
    within ``tolerance`` times the average body size.
    """

    def __init__(self, config: Optional[TweezerConfig] = None):
        self.config = config or TweezerConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.TWEEZER_BOTTOM

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        upper_half = current.close > prior.hl2
        return (
            _not_plain_doji(current) and
            abs(current.low - prior.low) <= current.body_avg * self.config.tolerance and
            prior.is_down_candle and
            current.is_up_candle and
            prior.is_tall_body and
            (not self.config.close_over_half or upper_half)
        )


class TweezerTopDetector(TweezerBottomDetector):
    """Tall up candle followed by a down candle sharing (nearly) the same high."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.TWEEZER_TOP

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        lower_half = current.close < prior.hl2
        return (
            _not_plain_doji(current) and
            abs(current.high - prior.high) <= current.body_avg * self.config.tolerance and
            prior.is_up_candle and
            current.is_down_candle and
            prior.is_tall_body and
            (not self.config.close_over_half or lower_half)
        )


class MorningStarDetector(MultiPatternDetector):
    """
    Morning Star detector.

    Tall down candle, a short candle whose body gaps down, then a tall up
    candle gapping up and closing at or above the first body's midpoint
    without clearing its top.
    """

    required_candles = 3

    def get_pattern_type(self) -> PatternType:
        return PatternType.MORNING_STAR

    def _matches(self, window: BarWindow) -> bool:
        third, star, first = window[0], window[1], window[2]
        return (
            first.is_tall_body and
            star.is_short_body and
            third.is_tall_body and
            first.is_down_candle and
            star.gap_down_body and
            third.is_up_candle and
            third.body_high >= first.body_midpoint and
            third.body_high < first.body_high and
            third.gap_up_body
        )


class EveningStarDetector(MultiPatternDetector):
    """Mirror of the Morning Star at a top."""

    required_candles = 3

    def get_pattern_type(self) -> PatternType:
        return PatternType.EVENING_STAR

    def _matches(self, window: BarWindow) -> bool:
        third, star, first = window[0], window[1], window[2]
        return (
            first.is_tall_body and
            star.is_short_body and
            third.is_tall_body and
            first.is_up_candle and
            star.gap_up_body and
            third.is_down_candle and
            third.body_low <= first.body_midpoint and
            third.body_low > first.body_low and
            third.gap_down_body
        )


def _inside_prior_body(current: MeasurementSnapshot, prior: MeasurementSnapshot) -> bool:
    return current.high <= prior.body_high and current.low >= prior.body_low


class HaramiBullDetector(MultiPatternDetector):
    """Short up candle whose whole range sits inside the previous tall down body."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.HARAMI_BULL

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_tall_body and
            prior.is_down_candle and
            current.is_up_candle and
            current.is_short_body and
            _inside_prior_body(current, prior)
        )


class HaramiBearDetector(MultiPatternDetector):
    """Short down candle whose whole range sits inside the previous tall up body."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.HARAMI_BEAR

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_tall_body and
            prior.is_up_candle and
            current.is_down_candle and
            current.is_short_body and
            _inside_prior_body(current, prior)
        )


class HaramiBullCrossDetector(MultiPatternDetector):
    """Doji contained in the previous tall down body."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.HARAMI_BULL_CROSS

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_tall_body and
            prior.is_down_candle and
            current.is_doji and
            _inside_prior_body(current, prior)
        )


class HaramiBearCrossDetector(MultiPatternDetector):
    """Doji contained in the previous tall up body."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.HARAMI_BEAR_CROSS

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_tall_body and
            prior.is_up_candle and
            current.is_doji and
            _inside_prior_body(current, prior)
        )


class AbandonedBabyBullDetector(MultiPatternDetector):
    """
    Bullish Abandoned Baby detector.

    Down candle, a doji whose whole range gaps below it, then an up candle
    whose whole range gaps above the doji.
    """

    required_candles = 3

    def get_pattern_type(self) -> PatternType:
        return PatternType.ABANDONED_BABY_BULL

    def _matches(self, window: BarWindow) -> bool:
        current, baby, first = window[0], window[1], window[2]
        return (
            first.is_down_candle and
            baby.is_doji and
            baby.gap_down and
            current.is_up_candle and
            current.gap_up
        )


class AbandonedBabyBearDetector(MultiPatternDetector):
    """Up candle, doji gapping above it, down candle gapping below the doji."""

    required_candles = 3

    def get_pattern_type(self) -> PatternType:
        return PatternType.ABANDONED_BABY_BEAR

    def _matches(self, window: BarWindow) -> bool:
        current, baby, first = window[0], window[1], window[2]
        return (
            first.is_up_candle and
            baby.is_doji and
            baby.gap_up and
            current.is_down_candle and
            current.gap_down
        )


class PiercingDetector(MultiPatternDetector):
    """
    Piercing pattern detector.

    Tall down candle followed by an up candle opening at or below the prior
    low and closing above the prior body midpoint but below the prior open.
    """

    def get_pattern_type(self) -> PatternType:
        return PatternType.PIERCING

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_down_candle and
            prior.is_tall_body and
            current.is_up_candle and
            current.open <= prior.low and
            current.close > prior.body_midpoint and
            current.close < prior.open
        )


class DarkCloudCoverDetector(MultiPatternDetector):
    """Mirror of Piercing: opens at or above the prior high, closes below its midpoint."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.DARK_CLOUD_COVER

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_up_candle and
            prior.is_tall_body and
            current.is_down_candle and
            current.open >= prior.high and
            current.close < prior.body_midpoint and
            current.close > prior.open
        )


class TasukiGapUpDetector(MultiPatternDetector):
    """
    Upside Tasuki Gap detector.

    Tall up candle, a short up candle whose body gaps above it, then a down
    candle whose body low falls into the gap without closing it.
    """

    required_candles = 3

    def get_pattern_type(self) -> PatternType:
        return PatternType.TASUKI_GAP_UP

    def _matches(self, window: BarWindow) -> bool:
        current, second, first = window[0], window[1], window[2]
        return (
            first.is_tall_body and
            second.is_short_body and
            first.is_up_candle and
            second.gap_up_body and
            second.is_up_candle and
            current.is_down_candle and
            current.body_low >= first.body_high and
            current.body_low <= second.body_low
        )


class TasukiGapDownDetector(MultiPatternDetector):
    """Downside Tasuki Gap: mirror of the upside pattern."""

    required_candles = 3

    def get_pattern_type(self) -> PatternType:
        return PatternType.TASUKI_GAP_DOWN

    def _matches(self, window: BarWindow) -> bool:
        current, second, first = window[0], window[1], window[2]
        return (
            first.is_tall_body and
            second.is_short_body and
            first.is_down_candle and
            second.gap_down_body and
            second.is_down_candle and
            current.is_up_candle and
            current.body_high <= first.body_low and
            current.body_high >= second.body_high
        )


class RisingThreeMethodsDetector(MultiPatternDetector):
    """
    Rising Three Methods detector.

    Tall up candle, three short down candles opening below its high and
    closing above its low, then a tall up candle closing above the first close.
    """

    required_candles = 5

    def get_pattern_type(self) -> PatternType:
        return PatternType.RISING_THREE_METHODS

    def _matches(self, window: BarWindow) -> bool:
        first, current = window[4], window[0]
        if not (first.is_tall_body and first.is_up_candle):
            return False
        for lag in (3, 2, 1):
            candle = window[lag]
            if not (
                candle.is_short_body and
                candle.is_down_candle and
                candle.open < first.high and
                candle.close > first.low
            ):
                return False
        return current.is_tall_body and current.is_up_candle and current.close > first.close


class FallingThreeMethodsDetector(MultiPatternDetector):
    """Mirror of Rising Three Methods in a decline."""

    required_candles = 5

    def get_pattern_type(self) -> PatternType:
        return PatternType.FALLING_THREE_METHODS

    def _matches(self, window: BarWindow) -> bool:
        first, current = window[4], window[0]
        if not (first.is_tall_body and first.is_down_candle):
            return False
        for lag in (3, 2, 1):
            candle = window[lag]
            if not (
                candle.is_short_body and
                candle.is_up_candle and
                candle.open > first.low and
                candle.close < first.high
            ):
                return False
        return current.is_tall_body and current.is_down_candle and current.close < first.close


class RisingWindowDetector(MultiPatternDetector):
    """Low above the previous high, both bars with a non-zero range."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.RISING_WINDOW

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            current.candle_range != 0 and
            prior.candle_range != 0 and
            current.low > prior.high
        )


class FallingWindowDetector(MultiPatternDetector):
    """High below the previous low, both bars with a non-zero range."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.FALLING_WINDOW

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            current.candle_range != 0 and
            prior.candle_range != 0 and
            current.high < prior.low
        )


class KickingBullDetector(MultiPatternDetector):
    """
    Bullish Kicking detector.

    A bearish Marubozu followed by a bullish Marubozu whose range gaps above it.
    Built from the Marubozu detectors so both share one configuration.
    """

    def __init__(self, config: Optional[MarubozuConfig] = None):
        self.config = config or MarubozuConfig()
        self.marubozu_bull = MarubozuBullDetector(self.config)
        self.marubozu_bear = MarubozuBearDetector(self.config)

    def get_pattern_type(self) -> PatternType:
        return PatternType.KICKING_BULL

    def _matches(self, window: BarWindow) -> bool:
        return (
            self.marubozu_bear.detect(window.shift(1)) and
            self.marubozu_bull.detect(window) and
            window[0].gap_up
        )


class KickingBearDetector(KickingBullDetector):
    """A bullish Marubozu followed by a bearish Marubozu gapping below it."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.KICKING_BEAR

    def _matches(self, window: BarWindow) -> bool:
        return (
            self.marubozu_bull.detect(window.shift(1)) and
            self.marubozu_bear.detect(window) and
            window[0].gap_down
        )


class OnNeckBullDetector(MultiPatternDetector):
    """
    Bullish On Neck detector.

    Tall up candle followed by a short down candle that opens above the prior
    close and closes within ``tolerance`` times the average body of the prior high.
    """

    def __init__(self, config: Optional[OnNeckConfig] = None):
        self.config = config or OnNeckConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.ON_NECK_BULL

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_up_candle and
            prior.is_tall_body and
            current.is_down_candle and
            current.open > prior.close and
            current.is_short_body and
            current.candle_range != 0 and
            abs(current.close - prior.high) <= current.body_avg * self.config.tolerance
        )


class OnNeckBearDetector(OnNeckBullDetector):
    """Tall down candle followed by a short up candle closing near the prior low."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.ON_NECK_BEAR

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return (
            prior.is_down_candle and
            prior.is_tall_body and
            current.is_up_candle and
            current.open < prior.close and
            current.is_short_body and
            current.candle_range != 0 and
            abs(current.close - prior.low) <= current.body_avg * self.config.tolerance
        )


class ThreeWhiteSoldiersDetector(MultiPatternDetector):
    """
    Three White Soldiers detector.

    Three tall up candles with rising closes, each opening inside the body
    before it, each with a top wick under ``wick_size`` percent of its range.
    """

    required_candles = 3

    def __init__(self, config: Optional[SoldiersCrowsConfig] = None):
        self.config = config or SoldiersCrowsConfig()

    def get_pattern_type(self) -> PatternType:
        return PatternType.THREE_WHITE_SOLDIERS

    def _small_wick(self, candle: MeasurementSnapshot) -> bool:
        return candle.candle_range * self.config.wick_size / _HUNDRED > candle.top_wick

    def _matches(self, window: BarWindow) -> bool:
        c0, c1, c2 = window[0], window[1], window[2]
        candles = (c0, c1, c2)
        return (
            all(c.is_tall_body and c.is_up_candle and self._small_wick(c) for c in candles) and
            c0.close > c1.close and
            c1.close > c2.close and
            c0.open < c1.close and
            c0.open > c1.open and
            c1.open < c2.close and
            c1.open > c2.open
        )


class ThreeBlackCrowsDetector(ThreeWhiteSoldiersDetector):
    """Three tall down candles with falling closes and small bottom wicks."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.THREE_BLACK_CROWS

    def _small_wick(self, candle: MeasurementSnapshot) -> bool:
        return candle.candle_range * self.config.wick_size / _HUNDRED > candle.bottom_wick

    def _matches(self, window: BarWindow) -> bool:
        c0, c1, c2 = window[0], window[1], window[2]
        candles = (c0, c1, c2)
        return (
            all(c.is_tall_body and c.is_down_candle and self._small_wick(c) for c in candles) and
            c0.close < c1.close and
            c1.close < c2.close and
            c0.open > c1.close and
            c0.open < c1.open and
            c1.open > c2.close and
            c1.open < c2.open
        )


class TriStarBullDetector(MultiPatternDetector):
    """
    Bullish Tri-Star detector.

    Dojis at lags 0, 2 and 3; the bar at lag 1 gaps its body down and the
    current bar gaps its body up.
    """

    required_candles = 4

    def __init__(self, config: Optional[DojiConfig] = None):
        self.config = config or DojiConfig()
        self.doji = DojiDetector(self.config)

    def get_pattern_type(self) -> PatternType:
        return PatternType.TRI_STAR_BULL

    def _dojis(self, window: BarWindow) -> bool:
        return (
            self.doji.detect(window) and
            self.doji.detect(window.shift(2)) and
            self.doji.detect(window.shift(3))
        )

    def _matches(self, window: BarWindow) -> bool:
        return self._dojis(window) and window[1].gap_down_body and window[0].gap_up_body


class TriStarBearDetector(TriStarBullDetector):
    """Mirror of the bullish Tri-Star."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.TRI_STAR_BEAR

    def _matches(self, window: BarWindow) -> bool:
        return self._dojis(window) and window[0].gap_down_body and window[1].gap_up_body


class InsideBarDetector(MultiPatternDetector):
    """Range strictly inside the previous bar's range."""

    def get_pattern_type(self) -> PatternType:
        return PatternType.INSIDE_BAR

    def _matches(self, window: BarWindow) -> bool:
        current, prior = window[0], window[1]
        return current.high < prior.high and current.low > prior.low


class DoubleInsideBarDetector(MultiPatternDetector):
    """Two inside bars in a row."""

    required_candles = 3

    def __init__(self):
        self.inside_bar = InsideBarDetector()

    def get_pattern_type(self) -> PatternType:
        return PatternType.DOUBLE_INSIDE_BAR

    def _matches(self, window: BarWindow) -> bool:
        return self.inside_bar.detect(window) and self.inside_bar.detect(window.shift(1))
