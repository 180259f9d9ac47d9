"""
Unit tests for multi-candlestick pattern recognition.

Each scenario lists its bars oldest first as (open, high, low, close).
Scenarios that depend on tall/short bodies run after warm-up bars with a
body of exactly 2.
"""

from typing import Sequence, Tuple

import pytest

from sakata.models.signals import PatternType
from sakata.patterns.measurements import BarWindow, measure_series
from sakata.patterns.pattern_config import EngulfingConfig, TweezerConfig
from sakata.patterns.single_candlestick import PatternDetector
from sakata.patterns.multi_candlestick import (
    AbandonedBabyBearDetector,
    AbandonedBabyBullDetector,
    BearishEngulfingDetector,
    BullishEngulfingDetector,
    DarkCloudCoverDetector,
    DoubleInsideBarDetector,
    EveningStarDetector,
    FallingThreeMethodsDetector,
    FallingWindowDetector,
    HaramiBearCrossDetector,
    HaramiBearDetector,
    HaramiBullCrossDetector,
    HaramiBullDetector,
    InsideBarDetector,
    KickingBearDetector,
    KickingBullDetector,
    MorningStarDetector,
    OnNeckBearDetector,
    OnNeckBullDetector,
    PiercingDetector,
    RisingThreeMethodsDetector,
    RisingWindowDetector,
    TasukiGapDownDetector,
    TasukiGapUpDetector,
    ThreeBlackCrowsDetector,
    ThreeWhiteSoldiersDetector,
    TriStarBearDetector,
    TriStarBullDetector,
    TweezerBottomDetector,
    TweezerTopDetector,
)

from conftest import make_bars, warmup_bars

TALL_DOWN = (110, 111, 99, 100)
TALL_UP = (100, 111, 99, 110)


def window_for(rows: Sequence[Tuple], warmup: bool = True) -> BarWindow:
    bars = (warmup_bars() if warmup else []) + make_bars(rows)
    return BarWindow.from_snapshots(measure_series(bars))


def detects(detector: PatternDetector, rows: Sequence[Tuple], warmup: bool = True) -> bool:
    return detector.detect(window_for(rows, warmup))


class TestEngulfing:
    """Test Bullish/Bearish Engulfing detection."""

    def test_bullish_engulfing_boundaries_inclusive(self):
        """close == prior open and open == prior close both qualify."""
        rows = [(10, 10, 8, 8), (8, 10.5, 8, 10.5)]

        assert detects(BullishEngulfingDetector(), rows, warmup=False)
        assert not detects(BearishEngulfingDetector(), rows, warmup=False)

    def test_bullish_engulfing_needs_prior_down_bar(self):
        rows = [(8, 10, 8, 10), (8, 10.5, 8, 10.5)]
        assert not detects(BullishEngulfingDetector(), rows, warmup=False)

    def test_bullish_engulfing_close_short_of_prior_open(self):
        rows = [(10, 10, 8, 8), (8, 9.9, 8, 9.9)]
        assert not detects(BullishEngulfingDetector(), rows, warmup=False)

    def test_bearish_engulfing(self):
        rows = [(8, 10, 8, 10), (10, 10, 7.5, 7.5)]

        assert detects(BearishEngulfingDetector(), rows, warmup=False)
        assert not detects(BullishEngulfingDetector(), rows, warmup=False)

    def test_must_engulf_wick(self):
        rows = [(10, 11, 8, 8), (8, 10.5, 8, 10.5)]
        strict = BullishEngulfingDetector(EngulfingConfig(must_engulf_wick=True))

        assert detects(BullishEngulfingDetector(), rows, warmup=False)
        assert not detects(strict, rows, warmup=False)

    def test_max_reject_wick(self):
        # Top wick 1 on a body of 2.5 is 40% of the body
        rows = [(10, 10, 8, 8), (8, 11.5, 8, 10.5)]

        assert detects(BullishEngulfingDetector(), rows, warmup=False)
        assert not detects(BullishEngulfingDetector(EngulfingConfig(max_reject_wick=30)), rows, warmup=False)
        assert detects(BullishEngulfingDetector(EngulfingConfig(max_reject_wick=50)), rows, warmup=False)

    def test_single_bar_is_insufficient_history(self):
        assert not detects(BullishEngulfingDetector(), [(8, 10.5, 8, 10.5)], warmup=False)


class TestTweezer:
    """Test Tweezer Bottom/Top detection."""

    def test_tweezer_bottom(self):
        assert detects(TweezerBottomDetector(), [TALL_DOWN, (100, 105, 99, 104)])

    def test_tweezer_bottom_lows_too_far_apart(self):
        assert not detects(TweezerBottomDetector(), [TALL_DOWN, (100, 105, 98, 104)])

    def test_tweezer_bottom_close_over_half(self):
        rows = [TALL_DOWN, (100, 105, 99, 104)]
        assert not detects(TweezerBottomDetector(TweezerConfig(close_over_half=True)), rows)

    def test_tweezer_top(self):
        assert detects(TweezerTopDetector(), [TALL_UP, (110, 111, 105, 106)])


class TestStars:
    """Test Morning/Evening Star detection."""

    def test_morning_star(self):
        rows = [TALL_DOWN, (98, 99, 97.5, 98.5), (99, 107.5, 98.8, 107)]

        assert detects(MorningStarDetector(), rows)
        assert not detects(EveningStarDetector(), rows)

    def test_morning_star_without_body_gap(self):
        rows = [TALL_DOWN, (100.5, 101, 99.5, 100.2), (101, 107.5, 100.8, 107)]
        assert not detects(MorningStarDetector(), rows)

    def test_evening_star(self):
        rows = [TALL_UP, (112, 112.5, 111, 111.5), (111, 111.2, 102.5, 103)]

        assert detects(EveningStarDetector(), rows)
        assert not detects(MorningStarDetector(), rows)


class TestHarami:
    """Test Harami and Harami Cross detection."""

    def test_harami_bull(self):
        assert detects(HaramiBullDetector(), [TALL_DOWN, (102, 104, 101, 103)])

    def test_harami_bull_range_outside_prior_body(self):
        assert not detects(HaramiBullDetector(), [TALL_DOWN, (102, 111, 101, 103)])

    def test_harami_bear(self):
        assert detects(HaramiBearDetector(), [TALL_UP, (108, 109, 106, 107)])

    def test_harami_bull_cross(self):
        rows = [TALL_DOWN, (105, 106, 104, 105.05)]

        assert detects(HaramiBullCrossDetector(), rows)
        assert not detects(HaramiBearCrossDetector(), rows)

    def test_harami_bear_cross(self):
        assert detects(HaramiBearCrossDetector(), [TALL_UP, (105, 106, 104, 105.05)])


class TestAbandonedBaby:
    """Test Abandoned Baby detection."""

    def test_abandoned_baby_bull(self):
        rows = [TALL_DOWN, (97, 98, 96, 97.02), (99, 102, 98.5, 101.5)]
        assert detects(AbandonedBabyBullDetector(), rows)

    def test_abandoned_baby_bull_needs_doji(self):
        rows = [TALL_DOWN, (97.5, 98, 96, 96.5), (99, 102, 98.5, 101.5)]
        assert not detects(AbandonedBabyBullDetector(), rows)

    def test_abandoned_baby_bear(self):
        rows = [TALL_UP, (113, 114, 112, 113.02), (111, 111.5, 108, 109)]
        assert detects(AbandonedBabyBearDetector(), rows)


class TestPiercingAndDarkCloud:
    """Test Piercing and Dark Cloud Cover detection."""

    def test_piercing(self):
        assert detects(PiercingDetector(), [TALL_DOWN, (98, 106.5, 97.5, 106)])

    def test_piercing_close_below_midpoint(self):
        assert not detects(PiercingDetector(), [TALL_DOWN, (98, 104.5, 97.5, 104)])

    def test_dark_cloud_cover(self):
        assert detects(DarkCloudCoverDetector(), [TALL_UP, (112, 112.5, 103.5, 104)])

    def test_dark_cloud_cover_open_below_prior_high(self):
        assert not detects(DarkCloudCoverDetector(), [TALL_UP, (110.5, 110.8, 103.5, 104)])


class TestTasukiGap:
    """Test Upside/Downside Tasuki Gap detection."""

    def test_upside_tasuki_gap(self):
        rows = [TALL_UP, (111, 112, 110.5, 111.5), (111.4, 111.6, 110.2, 110.5)]
        assert detects(TasukiGapUpDetector(), rows)

    def test_upside_tasuki_gap_closed(self):
        rows = [TALL_UP, (111, 112, 110.5, 111.5), (111.4, 111.6, 109, 109.5)]
        assert not detects(TasukiGapUpDetector(), rows)

    def test_downside_tasuki_gap(self):
        rows = [TALL_DOWN, (99, 99.5, 98, 98.5), (98.6, 99.8, 98.4, 99.5)]
        assert detects(TasukiGapDownDetector(), rows)


class TestThreeMethods:
    """Test Rising/Falling Three Methods detection."""

    RISING = [
        TALL_UP,
        (108, 108.5, 106.5, 107),
        (107, 107.5, 105.5, 106),
        (106, 106.5, 104.5, 105),
        (105, 116, 104.8, 115.5),
    ]

    FALLING = [
        TALL_DOWN,
        (102, 103.5, 101.5, 103),
        (103, 104.5, 102.5, 104),
        (104, 105.5, 103.5, 105),
        (105, 105.2, 89, 89.5),
    ]

    def test_rising_three_methods(self):
        assert detects(RisingThreeMethodsDetector(), self.RISING)
        assert not detects(FallingThreeMethodsDetector(), self.RISING)

    def test_rising_three_methods_weak_breakout(self):
        rows = self.RISING[:-1] + [(105, 109.5, 104.8, 109)]
        assert not detects(RisingThreeMethodsDetector(), rows)

    def test_falling_three_methods(self):
        assert detects(FallingThreeMethodsDetector(), self.FALLING)
        assert not detects(RisingThreeMethodsDetector(), self.FALLING)

    def test_four_bars_is_insufficient_history(self):
        assert not detects(RisingThreeMethodsDetector(), self.RISING[1:], warmup=False)


class TestWindows:
    """Test Rising/Falling Window detection."""

    def test_rising_window(self):
        rows = [(100, 103, 99, 102), (104, 106, 103.5, 105.5)]

        assert detects(RisingWindowDetector(), rows, warmup=False)
        assert not detects(FallingWindowDetector(), rows, warmup=False)

    def test_falling_window(self):
        rows = [(100, 103, 99, 102), (97, 98.5, 96, 96.5)]
        assert detects(FallingWindowDetector(), rows, warmup=False)

    def test_flat_bar_never_forms_window(self):
        rows = [(100, 103, 99, 102), (104, 104, 104, 104)]
        assert not detects(RisingWindowDetector(), rows, warmup=False)


class TestKicking:
    """Test Kicking detection, composed from the Marubozu detectors."""

    BULL = [(30, 30.01, 19.99, 20), (31, 41.01, 30.99, 41)]
    BEAR = [(20, 30.01, 19.99, 30), (19, 19.01, 8.99, 9)]

    def test_kicking_bull(self):
        assert detects(KickingBullDetector(), self.BULL)
        assert not detects(KickingBearDetector(), self.BULL)

    def test_kicking_bear(self):
        assert detects(KickingBearDetector(), self.BEAR)
        assert not detects(KickingBullDetector(), self.BEAR)

    def test_kicking_needs_gap(self):
        rows = [(30, 30.01, 19.99, 20), (29, 39.01, 28.99, 39)]
        assert not detects(KickingBullDetector(), rows)

    @pytest.mark.parametrize("rows", [BULL, BEAR, [TALL_DOWN, TALL_UP], [TALL_UP, TALL_DOWN]])
    def test_never_both(self, rows):
        window = window_for(rows)
        assert not (KickingBullDetector().detect(window) and KickingBearDetector().detect(window))


class TestOnNeck:
    """Test On Neck detection."""

    def test_on_neck_bull(self):
        assert detects(OnNeckBullDetector(), [TALL_UP, (111.5, 111.8, 110.9, 111)])

    def test_on_neck_bull_close_too_far(self):
        assert not detects(OnNeckBullDetector(), [TALL_UP, (111.5, 111.8, 110.4, 110.5)])

    def test_on_neck_bear(self):
        assert detects(OnNeckBearDetector(), [TALL_DOWN, (98.5, 99.2, 98.2, 99)])


class TestSoldiersAndCrows:
    """Test Three White Soldiers / Three Black Crows detection."""

    SOLDIERS = [(100, 110.2, 99.9, 110), (105, 115.2, 104.9, 115), (110, 120.2, 109.9, 120)]
    CROWS = [(120, 120.1, 109.8, 110), (115, 115.1, 104.8, 105), (110, 110.1, 99.8, 100)]

    def test_three_white_soldiers(self):
        assert detects(ThreeWhiteSoldiersDetector(), self.SOLDIERS)
        assert not detects(ThreeBlackCrowsDetector(), self.SOLDIERS)

    def test_soldiers_with_long_top_wick(self):
        rows = self.SOLDIERS[:-1] + [(110, 122, 109.9, 120)]
        assert not detects(ThreeWhiteSoldiersDetector(), rows)

    def test_three_black_crows(self):
        assert detects(ThreeBlackCrowsDetector(), self.CROWS)
        assert not detects(ThreeWhiteSoldiersDetector(), self.CROWS)


class TestTriStar:
    """Test Tri-Star detection, composed from the Doji detector."""

    def test_tri_star_bull(self):
        rows = [(100, 101, 99, 100), (100, 101, 99, 100.02), (98, 98.5, 97.5, 98), (99, 100, 98, 99)]

        assert detects(TriStarBullDetector(), rows, warmup=False)
        assert not detects(TriStarBearDetector(), rows, warmup=False)

    def test_tri_star_bear(self):
        rows = [(100, 101, 99, 100), (100, 101, 99, 100.02), (102, 102.5, 101.5, 102), (101, 102, 100, 101)]
        assert detects(TriStarBearDetector(), rows, warmup=False)

    def test_tri_star_needs_doji_at_lag_three(self):
        rows = [(100, 103, 99, 102), (100, 101, 99, 100.02), (98, 98.5, 97.5, 98), (99, 100, 98, 99)]
        assert not detects(TriStarBullDetector(), rows, warmup=False)


class TestInsideBars:
    """Test Inside Bar / Double Inside Bar detection."""

    CHAIN = [(50, 60, 40, 55), (50, 58, 42, 52), (50, 56, 44, 51)]

    def test_inside_bar_chain(self):
        snapshots = measure_series(make_bars(self.CHAIN))
        inside, double = InsideBarDetector(), DoubleInsideBarDetector()

        inside_flags = [inside.detect(BarWindow.from_snapshots(snapshots, i)) for i in range(3)]
        double_flags = [double.detect(BarWindow.from_snapshots(snapshots, i)) for i in range(3)]

        assert inside_flags == [False, True, True]
        assert double_flags == [False, False, True]

    def test_equal_high_is_not_inside(self):
        rows = [(50, 60, 40, 55), (50, 60, 42, 52)]
        assert not detects(InsideBarDetector(), rows, warmup=False)


class TestPatternMetadata:
    """Test required bar counts."""

    @pytest.mark.parametrize("detector,bars", [
        (BullishEngulfingDetector(), 2),
        (KickingBullDetector(), 2),
        (MorningStarDetector(), 3),
        (DoubleInsideBarDetector(), 3),
        (TriStarBullDetector(), 4),
        (RisingThreeMethodsDetector(), 5),
    ])
    def test_required_bars(self, detector, bars):
        assert detector.required_bars == bars

    def test_pattern_types(self):
        assert TriStarBearDetector().pattern_type == PatternType.TRI_STAR_BEAR
        assert KickingBearDetector().pattern_type == PatternType.KICKING_BEAR
