"""
Sakata Data Models Package

Pydantic models and enumerations shared by the pattern engine:
- Bar: OHLC input bar
- PatternType / PatternBias: pattern identities and their directional bias
"""

from .market_data import Bar
from .signals import PatternBias, PatternType

__all__ = ["Bar", "PatternBias", "PatternType"]
