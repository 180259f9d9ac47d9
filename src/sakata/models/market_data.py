"""
Core Market Data Models

This module contains the Pydantic model for the single input type of the
library:
- Bar: one immutable OHLC observation with optional timestamp and volume

Prices are held as Decimal so that every derived measurement (wicks, body,
averages, gaps) is exact and replayable from the same input.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict


class Bar(BaseModel):
    """
    OHLC price bar.

    Accepts str/int/float/Decimal prices and converts them to Decimal.
    Prices must be finite and non-negative.

    The usual OHLC relationships (high >= max(open, close),
    low <= min(open, close)) are NOT enforced here; feeds occasionally
    deliver malformed bars and the measurement layer is defined for them.
    Use ``is_well_formed`` to check.
    """

    open: Decimal = Field(..., description="Opening price", ge=0)
    high: Decimal = Field(..., description="Highest price", ge=0)
    low: Decimal = Field(..., description="Lowest price", ge=0)
    close: Decimal = Field(..., description="Closing price", ge=0)
    volume: Optional[Decimal] = Field(None, description="Traded volume", ge=0)
    timestamp: Optional[datetime] = Field(None, description="Bar open time in UTC")

    model_config = ConfigDict(frozen=True)

    @field_validator('open', 'high', 'low', 'close', 'volume', mode='before')
    @classmethod
    def validate_price_fields(cls, v) -> Optional[Decimal]:
        """Convert price/volume fields to finite Decimals."""
        if v is None:
            return v

        if isinstance(v, str):
            v = v.strip()

        try:
            decimal_val = v if isinstance(v, Decimal) else Decimal(str(v))
        except (InvalidOperation, ValueError) as e:
            raise ValueError(f"Invalid price value: {v!r}") from e

        if not decimal_val.is_finite():
            raise ValueError(f"Price must be finite: {v!r}")

        return decimal_val

    @field_validator('timestamp', mode='before')
    @classmethod
    def validate_timestamp(cls, v) -> Optional[datetime]:
        """Ensure timestamp is timezone-aware UTC."""
        if v is None:
            return v

        if isinstance(v, str) and v.strip().isdigit():
            v = int(v.strip())

        if isinstance(v, str):
            v = v.strip()
            if v.endswith('Z'):
                v = v[:-1] + '+00:00'
            dt = datetime.fromisoformat(v)
        elif isinstance(v, (int, float)):
            # Milliseconds since epoch
            dt = datetime.fromtimestamp(v / 1000, tz=timezone.utc)
        elif isinstance(v, datetime):
            dt = v
        else:
            raise ValueError(f"Invalid timestamp format: {type(v)}")

        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        elif dt.tzinfo != timezone.utc:
            dt = dt.astimezone(timezone.utc)

        return dt

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Bar':
        """
        Create a Bar from a loosely keyed mapping.

        Accepts both long ('open', 'high', ...) and short ('o', 'h', 'l', 'c',
        'v', 't') keys, case-insensitively.
        """
        normalized = {str(k).strip().lower(): v for k, v in record.items()}
        aliases = {
            'open': ('open', 'o'),
            'high': ('high', 'h'),
            'low': ('low', 'l'),
            'close': ('close', 'c'),
            'volume': ('volume', 'v'),
            'timestamp': ('timestamp', 'time', 'date', 't'),
        }

        data = {}
        for field_name, keys in aliases.items():
            for key in keys:
                value = normalized.get(key)
                if value not in (None, ''):
                    data[field_name] = value
                    break

        return cls(**data)

    @property
    def is_well_formed(self) -> bool:
        """Check the OHLC relationships."""
        return (
            self.high >= max(self.open, self.close) and
            self.low <= min(self.open, self.close)
        )

    @property
    def is_bullish(self) -> bool:
        """Check if bar closed above its open."""
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        """Check if bar closed below its open."""
        return self.close < self.open
