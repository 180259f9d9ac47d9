"""
Sakata: Candlestick Pattern Recognition

Detects Japanese candlestick patterns on OHLC bar series, one bar at a time
or over a whole series, with per-pattern configurable thresholds.
"""

__version__ = "0.1.0"
__author__ = "Sakata Team"
__description__ = "Candlestick Pattern Recognition Library"

# Package-level imports for convenience
from .config import Config
from .logger import get_logger

__all__ = ["Config", "get_logger", "__version__"]
