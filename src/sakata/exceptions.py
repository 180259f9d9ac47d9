"""
Exception hierarchy for the Sakata pattern library.
"""


class SakataError(Exception):
    """Base class for all library errors."""


class PatternConfigError(SakataError, ValueError):
    """Raised when a pattern or measurement configuration holds invalid values."""


class BarDataError(SakataError):
    """Raised when bar data cannot be read or parsed."""
