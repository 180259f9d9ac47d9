"""
Candle Measurements

This module derives, for every bar, the fixed set of quantities all pattern
detectors are built from: wick sizes, body size and extremes, candle range,
smoothed average body size, tall/short body classification, body percent,
shadow flags, body midpoint, body and range gaps against the previous bar,
doji body flag and candle direction.

Two ways in:
- measure_bar(): one bar at a time, threading an explicit EmaState and the
  previous snapshot (streaming use)
- measure_series(): a whole series at once (batch use)

Both produce identical snapshots for the same input.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from ..exceptions import PatternConfigError
from ..models.market_data import Bar
from .pattern_config import MeasurementConfig

# Current bar plus four bars of history
MAX_LOOKBACK = 4
WINDOW_SIZE = MAX_LOOKBACK + 1

_HUNDRED = Decimal('100')
_TWO = Decimal('2')


@dataclass(frozen=True)
class EmaState:
    """
    Exponential moving average accumulator.

    While fewer than ``period`` samples have been seen the smoothing length
    is the sample count, so the first sample seeds the average and later
    samples converge onto the regular 2 / (period + 1) smoothing.
    """
    period: int = 14
    value: Optional[Decimal] = None
    count: int = 0

    def __post_init__(self):
        if isinstance(self.period, bool) or not isinstance(self.period, int) or self.period < 1:
            raise PatternConfigError(f"EMA period must be a positive integer, got {self.period!r}")

    @property
    def initialized(self) -> bool:
        return self.count > 0

    @property
    def warmed_up(self) -> bool:
        """True once a full period of samples has been folded in."""
        return self.count >= self.period

    def update(self, sample: Decimal) -> 'EmaState':
        count = self.count + 1
        length = min(count, self.period)
        alpha = _TWO / Decimal(length + 1)
        if self.value is None:
            value = sample
        else:
            value = self.value + alpha * (sample - self.value)
        return EmaState(period=self.period, value=value, count=count)


class MeasurementSnapshot(BaseModel):
    """Derived measurements of a single bar."""

    bar: Bar
    top_wick: Decimal
    bottom_wick: Decimal
    body: Decimal
    body_high: Decimal
    body_low: Decimal
    candle_range: Decimal
    body_avg: Decimal
    is_tall_body: bool
    is_short_body: bool
    body_percent: Optional[Decimal]  # None when candle_range is zero
    has_top_shadow: bool
    has_bottom_shadow: bool
    body_midpoint: Decimal
    gap_up_body: bool
    gap_down_body: bool
    gap_up: bool
    gap_down: bool
    is_doji: bool
    is_up_candle: bool
    is_down_candle: bool

    model_config = ConfigDict(frozen=True)

    @property
    def open(self) -> Decimal:
        return self.bar.open

    @property
    def high(self) -> Decimal:
        return self.bar.high

    @property
    def low(self) -> Decimal:
        return self.bar.low

    @property
    def close(self) -> Decimal:
        return self.bar.close

    @property
    def hl2(self) -> Decimal:
        """Midpoint of the full candle range."""
        return (self.bar.high + self.bar.low) / _TWO


def measure_bar(
    bar: Bar,
    previous: Optional[MeasurementSnapshot],
    ema_state: EmaState,
    config: Optional[MeasurementConfig] = None
) -> Tuple[MeasurementSnapshot, EmaState]:
    """
    Measure one bar.

    Args:
        bar: Bar to measure
        previous: Snapshot of the preceding bar, None at series start
        ema_state: Body-size EMA accumulator before this bar
        config: Measurement thresholds

    Returns:
        The snapshot and the EMA accumulator after this bar
    """
    config = config or MeasurementConfig()

    body_high = max(bar.close, bar.open)
    body_low = min(bar.close, bar.open)
    body = abs(bar.close - bar.open)
    # abs() keeps wicks non-negative on malformed bars (high below the body)
    top_wick = abs(body_high - bar.high)
    bottom_wick = abs(body_low - bar.low)
    candle_range = abs(bar.high - bar.low)

    ema_state = ema_state.update(body)
    body_avg = ema_state.value

    body_percent = body / candle_range * _HUNDRED if candle_range != 0 else None
    shadow_threshold = config.shadow_body_percent / _HUNDRED * body

    if previous is not None:
        gap_up_body = previous.body_high < body_low
        gap_down_body = body_high < previous.body_low
        gap_up = bar.low > previous.high
        gap_down = previous.low > bar.high
    else:
        gap_up_body = gap_down_body = gap_up = gap_down = False

    snapshot = MeasurementSnapshot(
        bar=bar,
        top_wick=top_wick,
        bottom_wick=bottom_wick,
        body=body,
        body_high=body_high,
        body_low=body_low,
        candle_range=candle_range,
        body_avg=body_avg,
        is_tall_body=body > body_avg,
        is_short_body=body < body_avg,
        body_percent=body_percent,
        has_top_shadow=top_wick > shadow_threshold,
        has_bottom_shadow=bottom_wick > shadow_threshold,
        body_midpoint=body / _TWO + body_low,
        gap_up_body=gap_up_body,
        gap_down_body=gap_down_body,
        gap_up=gap_up,
        gap_down=gap_down,
        is_doji=body_percent is not None and body_percent <= config.doji_body_percent,
        is_up_candle=bar.close > bar.open,
        is_down_candle=bar.close < bar.open,
    )
    return snapshot, ema_state


def measure_series(
    bars: Iterable[Bar],
    config: Optional[MeasurementConfig] = None
) -> List[MeasurementSnapshot]:
    """Measure every bar of a series, oldest first."""
    config = config or MeasurementConfig()
    ema_state = EmaState(period=int(config.body_avg_period))
    previous = None
    snapshots = []
    for bar in bars:
        previous, ema_state = measure_bar(bar, previous, ema_state, config)
        snapshots.append(previous)
    return snapshots


class BarWindow:
    """
    Bounded lookback view over measured bars.

    ``window[0]`` is the bar being evaluated, ``window[k]`` the bar k bars
    earlier. Indexing past the available history raises IndexError; use
    ``has()`` first.
    """

    __slots__ = ('_snapshots',)

    def __init__(self, snapshots: Sequence[MeasurementSnapshot]):
        # Newest first
        self._snapshots = tuple(snapshots)[:WINDOW_SIZE]

    @classmethod
    def from_snapshots(cls, snapshots: Sequence[MeasurementSnapshot], index: int = -1) -> 'BarWindow':
        """Build the window ending at ``index`` of a chronological snapshot list."""
        if not snapshots:
            return cls(())
        if index < 0:
            index += len(snapshots)
        if not 0 <= index < len(snapshots):
            raise IndexError(f"Index {index} outside series of {len(snapshots)} bars")
        start = max(0, index - MAX_LOOKBACK)
        return cls(tuple(reversed(snapshots[start:index + 1])))

    def __getitem__(self, lag: int) -> MeasurementSnapshot:
        if lag < 0:
            raise IndexError("Negative lag would reference a future bar")
        return self._snapshots[lag]

    def __len__(self) -> int:
        return len(self._snapshots)

    def has(self, lag: int) -> bool:
        """True when the bar ``lag`` bars back is available."""
        return 0 <= lag < len(self._snapshots)

    def shift(self, lags: int = 1) -> 'BarWindow':
        """Window as it was ``lags`` bars ago."""
        return BarWindow(self._snapshots[lags:])


# Public accessors mirroring the measurement exports of the pattern library

def top_wick(snapshot: MeasurementSnapshot) -> Decimal:
    """Distance from the top of the body to the high."""
    return snapshot.top_wick


def bottom_wick(snapshot: MeasurementSnapshot) -> Decimal:
    """Distance from the bottom of the body to the low."""
    return snapshot.bottom_wick


def body(snapshot: MeasurementSnapshot) -> Decimal:
    return snapshot.body


def highest_body(snapshot: MeasurementSnapshot) -> Decimal:
    return snapshot.body_high


def lowest_body(snapshot: MeasurementSnapshot) -> Decimal:
    return snapshot.body_low


def bar_range(snapshot: MeasurementSnapshot) -> Decimal:
    return snapshot.candle_range


def body_pct(snapshot: MeasurementSnapshot) -> Optional[Decimal]:
    """Body as a percent of range; None for zero-range bars."""
    return snapshot.body_percent


def mid_body(snapshot: MeasurementSnapshot) -> Decimal:
    return snapshot.body_midpoint


def body_up_gap(snapshot: MeasurementSnapshot) -> bool:
    """Real body gapped above the previous real body."""
    return snapshot.gap_up_body


def body_down_gap(snapshot: MeasurementSnapshot) -> bool:
    """Real body gapped below the previous real body."""
    return snapshot.gap_down_body


def gap_up(snapshot: MeasurementSnapshot) -> bool:
    """Low is above the previous high."""
    return snapshot.gap_up


def gap_down(snapshot: MeasurementSnapshot) -> bool:
    """High is below the previous low."""
    return snapshot.gap_down


def doji_body(snapshot: MeasurementSnapshot) -> bool:
    return snapshot.is_doji
