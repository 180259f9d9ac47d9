"""
Pattern Identity Models

Enumerations naming every candlestick pattern the engine recognizes and the
directional bias attached to each.
"""

from enum import Enum


class PatternBias(str, Enum):
    """Directional tendency of a pattern."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PatternType(str, Enum):
    """Candlestick pattern type enumeration."""
    # Single candle patterns
    DOJI = "doji"
    HAMMER = "hammer"
    SHOOTING_STAR = "shooting_star"
    DRAGONFLY_DOJI = "dragonfly_doji"
    GRAVESTONE_DOJI = "gravestone_doji"
    SPINNING_TOP_BULL = "spinning_top_bull"
    SPINNING_TOP_BEAR = "spinning_top_bear"
    SPINNING_TOP = "spinning_top"
    MARUBOZU_BULL = "marubozu_bull"
    MARUBOZU_BEAR = "marubozu_bear"
    LONG_LOWER_SHADOW = "long_lower_shadow"
    LONG_UPPER_SHADOW = "long_upper_shadow"

    # Two candle patterns
    BULLISH_ENGULFING = "bullish_engulfing"
    BEARISH_ENGULFING = "bearish_engulfing"
    TWEEZER_BOTTOM = "tweezer_bottom"
    TWEEZER_TOP = "tweezer_top"
    HARAMI_BULL = "harami_bull"
    HARAMI_BEAR = "harami_bear"
    HARAMI_BULL_CROSS = "harami_bull_cross"
    HARAMI_BEAR_CROSS = "harami_bear_cross"
    PIERCING = "piercing"
    DARK_CLOUD_COVER = "dark_cloud_cover"
    RISING_WINDOW = "rising_window"
    FALLING_WINDOW = "falling_window"
    KICKING_BULL = "kicking_bull"
    KICKING_BEAR = "kicking_bear"
    ON_NECK_BULL = "on_neck_bull"
    ON_NECK_BEAR = "on_neck_bear"
    INSIDE_BAR = "inside_bar"

    # Three candle patterns
    MORNING_STAR = "morning_star"
    EVENING_STAR = "evening_star"
    ABANDONED_BABY_BULL = "abandoned_baby_bull"
    ABANDONED_BABY_BEAR = "abandoned_baby_bear"
    TASUKI_GAP_UP = "tasuki_gap_up"
    TASUKI_GAP_DOWN = "tasuki_gap_down"
    THREE_WHITE_SOLDIERS = "three_white_soldiers"
    THREE_BLACK_CROWS = "three_black_crows"
    DOUBLE_INSIDE_BAR = "double_inside_bar"

    # Four and five candle patterns
    TRI_STAR_BULL = "tri_star_bull"
    TRI_STAR_BEAR = "tri_star_bear"
    RISING_THREE_METHODS = "rising_three_methods"
    FALLING_THREE_METHODS = "falling_three_methods"
