"""
Pattern Detection Configuration

This module defines all configurable parameters for candlestick pattern detection.
Every threshold used by a detector is a named field with a documented default,
so two call sites may run the same pattern with different settings.

Percent-valued fields are expressed on a 0-100 scale; tolerances are
fractions of the smoothed average body size.
"""

from decimal import Decimal, InvalidOperation
from dataclasses import dataclass, field, fields
from typing import Dict, Any
import json
from pathlib import Path

from ..exceptions import PatternConfigError


def _to_decimal(name: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise PatternConfigError(f"{name} must be numeric, got bool")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise PatternConfigError(f"{name} must be numeric, got {value!r}") from e
    if not result.is_finite():
        raise PatternConfigError(f"{name} must be finite, got {value!r}")
    if result < 0:
        raise PatternConfigError(f"{name} must be >= 0, got {value}")
    return result


@dataclass
class _PatternSettings:
    """Shared coercion and validation for the per-pattern dataclasses."""

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.type in (bool, 'bool'):
                if not isinstance(value, bool):
                    raise PatternConfigError(f"{f.name} must be a bool, got {value!r}")
            else:
                setattr(self, f.name, _to_decimal(f.name, value))


@dataclass
class MeasurementConfig(_PatternSettings):
    """Configuration for the per-bar measurement layer."""
    body_avg_period: Decimal = Decimal('14')     # EMA length of body size
    doji_body_percent: Decimal = Decimal('5')    # body <= 5% of range is a doji body
    shadow_body_percent: Decimal = Decimal('5')  # wick > 5% of body counts as a shadow

    def __post_init__(self):
        super().__post_init__()
        if self.body_avg_period < 1 or self.body_avg_period != self.body_avg_period.to_integral_value():
            raise PatternConfigError(
                f"body_avg_period must be a positive integer, got {self.body_avg_period}"
            )


@dataclass
class DojiConfig(_PatternSettings):
    """Configuration for Doji pattern detection."""
    size: Decimal = Decimal('5')        # body as % of candle range
    wick_ratio: Decimal = Decimal('2')  # max wick size relative to the opposite wick


@dataclass
class EngulfingConfig(_PatternSettings):
    """Configuration for Bullish/Bearish Engulfing detection."""
    max_reject_wick: Decimal = Decimal('0')  # rejection wick as % of body, 0 disables
    must_engulf_wick: bool = False           # close must clear the prior high/low


@dataclass
class HammerConfig(_PatternSettings):
    """Configuration for Hammer pattern detection."""
    ratio: Decimal = Decimal('33')          # body confined to top 33% of range
    shadow_percent: Decimal = Decimal('5')  # max top wick as % of body


@dataclass
class ShootingStarConfig(_PatternSettings):
    """Configuration for Shooting Star pattern detection."""
    ratio: Decimal = Decimal('33')          # body confined to bottom 33% of range
    shadow_percent: Decimal = Decimal('5')  # max bottom wick as % of body


@dataclass
class TweezerConfig(_PatternSettings):
    """Configuration for Tweezer Top/Bottom detection."""
    close_over_half: bool = False         # close beyond the prior bar's hl2
    tolerance: Decimal = Decimal('0.05')  # max high/low mismatch as fraction of body_avg


@dataclass
class SpinningTopConfig(_PatternSettings):
    """Configuration for Spinning Top detection."""
    wick_size: Decimal = Decimal('34')  # each wick as % of candle range


@dataclass
class MarubozuConfig(_PatternSettings):
    """Configuration for Marubozu (and Kicking) detection."""
    max_wick_percent: Decimal = Decimal('5')  # each wick must be under 5% of body


@dataclass
class LongShadowConfig(_PatternSettings):
    """Configuration for Long Lower/Upper Shadow detection."""
    ratio: Decimal = Decimal('75')  # wick as % of candle range


@dataclass
class OnNeckConfig(_PatternSettings):
    """Configuration for On Neck detection."""
    tolerance: Decimal = Decimal('0.05')  # close-to-extreme distance as fraction of body_avg


@dataclass
class SoldiersCrowsConfig(_PatternSettings):
    """Configuration for Three White Soldiers / Three Black Crows."""
    wick_size: Decimal = Decimal('5')  # max trailing wick as % of candle range


@dataclass
class PatternDetectionConfig:
    """Master configuration for all pattern detection parameters."""

    measurement: MeasurementConfig = field(default_factory=MeasurementConfig)

    doji: DojiConfig = field(default_factory=DojiConfig)
    engulfing: EngulfingConfig = field(default_factory=EngulfingConfig)
    hammer: HammerConfig = field(default_factory=HammerConfig)
    shooting_star: ShootingStarConfig = field(default_factory=ShootingStarConfig)
    tweezer: TweezerConfig = field(default_factory=TweezerConfig)
    spinning_top: SpinningTopConfig = field(default_factory=SpinningTopConfig)
    marubozu: MarubozuConfig = field(default_factory=MarubozuConfig)
    long_shadow: LongShadowConfig = field(default_factory=LongShadowConfig)
    on_neck: OnNeckConfig = field(default_factory=OnNeckConfig)
    soldiers_crows: SoldiersCrowsConfig = field(default_factory=SoldiersCrowsConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for JSON serialization."""
        def convert_decimal(obj):
            if isinstance(obj, Decimal):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: convert_decimal(v) for k, v in obj.items()}
            elif hasattr(obj, '__dict__'):
                return convert_decimal(obj.__dict__)
            return obj

        return convert_decimal(self.__dict__)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PatternDetectionConfig':
        """
        Create configuration from dictionary (JSON deserialization).

        Sections that are missing keep their defaults; unknown sections or
        fields raise PatternConfigError.
        """
        section_classes = {f.name: f.default_factory for f in fields(cls)}

        sections = {}
        for key, value in data.items():
            if key not in section_classes:
                raise PatternConfigError(f"Unknown configuration section: {key}")
            if not isinstance(value, dict):
                raise PatternConfigError(f"Section {key} must be an object, got {type(value).__name__}")
            try:
                sections[key] = section_classes[key](**value)
            except TypeError as e:
                raise PatternConfigError(f"Invalid fields in section {key}: {e}") from e

        return cls(**sections)

    def save_to_file(self, filepath: Path):
        """Save configuration to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: Path) -> 'PatternDetectionConfig':
        """Load configuration from JSON file."""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise PatternConfigError(f"Invalid JSON in pattern config {filepath}: {e}") from e
        except (UnicodeDecodeError, OSError) as e:
            raise PatternConfigError(f"Cannot read pattern config {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise PatternConfigError(f"Pattern config {filepath} must contain a JSON object")
        return cls.from_dict(data)
