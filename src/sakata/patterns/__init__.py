"""
Candlestick Pattern Recognition Module

This module contains the measurement layer and the pattern detectors built
on it, plus the engines that run them over a bar series.

Pattern Types:
- Single candlestick patterns (Doji, Hammer, Shooting Star, Marubozu, etc.)
- Multi-candlestick patterns (Engulfing, Harami, Morning/Evening Star,
  Three Methods, Tri-Star, etc.)
"""

from .pattern_config import PatternDetectionConfig
from .measurements import BarWindow, EmaState, MeasurementSnapshot, measure_bar, measure_series
from .engine import PatternEngine, PatternEvaluation, PatternRecognizer, StreamingPatternEngine

__all__ = [
    "PatternDetectionConfig",
    "BarWindow",
    "EmaState",
    "MeasurementSnapshot",
    "measure_bar",
    "measure_series",
    "PatternEngine",
    "PatternEvaluation",
    "PatternRecognizer",
    "StreamingPatternEngine",
]
