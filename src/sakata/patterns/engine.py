"""
Pattern Engine

Runs every pattern detector against an ordered bar series, producing one
PatternEvaluation per bar.

- PatternRecognizer: evaluates all detectors on a single lookback window
- StreamingPatternEngine: feeds bars one at a time; keeps only the EMA
  accumulator and the last five measured bars
- PatternEngine: evaluates a whole series in one call

Streaming and batch modes produce identical results for the same input.
Neither ever reads a bar later than the one being evaluated.
"""

import logging
from collections import deque
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict

from ..logger import get_series_adapter
from ..models.market_data import Bar
from ..models.signals import PatternType
from .measurements import (
    BarWindow,
    EmaState,
    MeasurementSnapshot,
    WINDOW_SIZE,
    measure_bar,
    measure_series,
)
from .pattern_config import PatternDetectionConfig
from .single_candlestick import (
    PatternDetector,
    DojiDetector,
    HammerDetector,
    ShootingStarDetector,
    DragonflyDojiDetector,
    GravestoneDojiDetector,
    SpinningTopBullDetector,
    SpinningTopBearDetector,
    SpinningTopDetector,
    MarubozuBullDetector,
    MarubozuBearDetector,
    LongLowerShadowDetector,
    LongUpperShadowDetector,
)
from .multi_candlestick import (
    BullishEngulfingDetector,
    BearishEngulfingDetector,
    TweezerBottomDetector,
    TweezerTopDetector,
    HaramiBullDetector,
    HaramiBearDetector,
    HaramiBullCrossDetector,
    HaramiBearCrossDetector,
    PiercingDetector,
    DarkCloudCoverDetector,
    RisingWindowDetector,
    FallingWindowDetector,
    KickingBullDetector,
    KickingBearDetector,
    OnNeckBullDetector,
    OnNeckBearDetector,
    InsideBarDetector,
    MorningStarDetector,
    EveningStarDetector,
    AbandonedBabyBullDetector,
    AbandonedBabyBearDetector,
    TasukiGapUpDetector,
    TasukiGapDownDetector,
    ThreeWhiteSoldiersDetector,
    ThreeBlackCrowsDetector,
    DoubleInsideBarDetector,
    TriStarBullDetector,
    TriStarBearDetector,
    RisingThreeMethodsDetector,
    FallingThreeMethodsDetector,
)

logger = logging.getLogger(__name__)

BarInput = Union[Bar, Mapping[str, Any]]


def build_detectors(config: PatternDetectionConfig) -> List[PatternDetector]:
    """Instantiate one detector per pattern type, in PatternType order."""
    return [
        DojiDetector(config.doji),
        HammerDetector(config.hammer),
        ShootingStarDetector(config.shooting_star),
        DragonflyDojiDetector(),
        GravestoneDojiDetector(),
        SpinningTopBullDetector(config.spinning_top),
        SpinningTopBearDetector(config.spinning_top),
        SpinningTopDetector(config.spinning_top),
        MarubozuBullDetector(config.marubozu),
        MarubozuBearDetector(config.marubozu),
        LongLowerShadowDetector(config.long_shadow),
        LongUpperShadowDetector(config.long_shadow),
        BullishEngulfingDetector(config.engulfing),
        BearishEngulfingDetector(config.engulfing),
        TweezerBottomDetector(config.tweezer),
        TweezerTopDetector(config.tweezer),
        HaramiBullDetector(),
        HaramiBearDetector(),
        HaramiBullCrossDetector(),
        HaramiBearCrossDetector(),
        PiercingDetector(),
        DarkCloudCoverDetector(),
        RisingWindowDetector(),
        FallingWindowDetector(),
        KickingBullDetector(config.marubozu),
        KickingBearDetector(config.marubozu),
        OnNeckBullDetector(config.on_neck),
        OnNeckBearDetector(config.on_neck),
        InsideBarDetector(),
        MorningStarDetector(),
        EveningStarDetector(),
        AbandonedBabyBullDetector(),
        AbandonedBabyBearDetector(),
        TasukiGapUpDetector(),
        TasukiGapDownDetector(),
        ThreeWhiteSoldiersDetector(config.soldiers_crows),
        ThreeBlackCrowsDetector(config.soldiers_crows),
        DoubleInsideBarDetector(),
        TriStarBullDetector(config.doji),
        TriStarBearDetector(config.doji),
        RisingThreeMethodsDetector(),
        FallingThreeMethodsDetector(),
    ]


def _as_bar(bar: BarInput) -> Bar:
    if isinstance(bar, Bar):
        return bar
    return Bar.from_record(dict(bar))


class PatternEvaluation(BaseModel):
    """Pattern flags for one bar of a series."""

    index: int
    bar: Bar
    snapshot: MeasurementSnapshot
    flags: Dict[PatternType, bool]

    model_config = ConfigDict(frozen=True)

    @property
    def detected(self) -> List[PatternType]:
        """Patterns that resolved on this bar, in PatternType order."""
        return [pattern for pattern, hit in self.flags.items() if hit]

    def is_detected(self, pattern: PatternType) -> bool:
        return self.flags.get(pattern, False)


class PatternRecognizer:
    """
    Evaluates every pattern detector on a lookback window.

    A detector that raises is logged and reported as not detected; the
    remaining detectors still run.
    """

    def __init__(self, config: Optional[PatternDetectionConfig] = None):
        self.config = config or PatternDetectionConfig()
        self.detectors = build_detectors(self.config)

    def evaluate(self, window: BarWindow) -> Dict[PatternType, bool]:
        """
        Evaluate all patterns on the newest bar of the window.

        Args:
            window: Lookback window, ``window[0]`` being the current bar

        Returns:
            Mapping of every PatternType to its flag
        """
        flags = {}
        for detector in self.detectors:
            try:
                flags[detector.pattern_type] = detector.detect(window)
            except Exception as e:
                logger.error(f"Error in {detector.__class__.__name__}: {e}")
                flags[detector.pattern_type] = False
        return flags

    def get_detector(self, pattern: PatternType) -> PatternDetector:
        for detector in self.detectors:
            if detector.pattern_type == pattern:
                return detector
        raise KeyError(pattern)


class StreamingPatternEngine:
    """
    Incremental pattern engine for one bar series.

    State is bounded: the body-size EMA accumulator plus the last five
    measured bars. Call ``update`` once per closed bar, oldest first.
    """

    def __init__(
        self,
        config: Optional[PatternDetectionConfig] = None,
        symbol: Optional[str] = None,
        timeframe: Optional[str] = None
    ):
        self.config = config or PatternDetectionConfig()
        self.symbol = symbol
        self.timeframe = timeframe
        self.recognizer = PatternRecognizer(self.config)
        self.log = get_series_adapter(symbol=symbol, timeframe=timeframe, logger_name=__name__)
        self.reset()

    def reset(self):
        """Forget all history, as if no bar had been seen."""
        # Newest first
        self._history: deque = deque(maxlen=WINDOW_SIZE)
        self._ema_state = EmaState(period=int(self.config.measurement.body_avg_period))
        self._bars_seen = 0

    @property
    def bars_seen(self) -> int:
        return self._bars_seen

    @property
    def window(self) -> BarWindow:
        """Lookback window ending at the most recent bar."""
        return BarWindow(self._history)

    def update(self, bar: BarInput) -> PatternEvaluation:
        """
        Measure a new bar and evaluate every pattern on it.

        Args:
            bar: Next bar of the series (Bar or a mapping accepted by Bar.from_record)

        Returns:
            Evaluation for this bar
        """
        bar = _as_bar(bar)
        if not bar.is_well_formed:
            self.log.debug(f"Malformed OHLC at bar {self._bars_seen}: {bar.open}/{bar.high}/{bar.low}/{bar.close}")

        previous = self._history[0] if self._history else None
        snapshot, self._ema_state = measure_bar(bar, previous, self._ema_state, self.config.measurement)
        self._history.appendleft(snapshot)

        evaluation = PatternEvaluation(
            index=self._bars_seen,
            bar=bar,
            snapshot=snapshot,
            flags=self.recognizer.evaluate(self.window),
        )
        self._bars_seen += 1

        if evaluation.detected:
            self.log.debug(
                f"Bar {evaluation.index}: {', '.join(p.value for p in evaluation.detected)}"
            )
        return evaluation


class PatternEngine:
    """
    Batch pattern engine.

    Measures the whole series first, then evaluates each bar against a
    bounds-checked window of at most five bars ending at that bar. Every call
    starts from a fresh EMA accumulator, so repeated calls on the same input
    return identical results.
    """

    def __init__(
        self,
        config: Optional[PatternDetectionConfig] = None,
        symbol: Optional[str] = None,
        timeframe: Optional[str] = None
    ):
        self.config = config or PatternDetectionConfig()
        self.recognizer = PatternRecognizer(self.config)
        self.log = get_series_adapter(symbol=symbol, timeframe=timeframe, logger_name=__name__)

    def measure(self, bars: Iterable[BarInput]) -> List[MeasurementSnapshot]:
        return measure_series([_as_bar(bar) for bar in bars], self.config.measurement)

    def evaluate(self, bars: Iterable[BarInput]) -> List[PatternEvaluation]:
        """
        Evaluate every bar of a series.

        Args:
            bars: Bars in chronological order

        Returns:
            One evaluation per input bar, same order
        """
        snapshots = self.measure(bars)
        malformed = sum(1 for s in snapshots if not s.bar.is_well_formed)
        if malformed:
            self.log.debug(f"{malformed} malformed bars in series of {len(snapshots)}")

        evaluations = []
        for index, snapshot in enumerate(snapshots):
            window = BarWindow.from_snapshots(snapshots, index)
            evaluations.append(PatternEvaluation(
                index=index,
                bar=snapshot.bar,
                snapshot=snapshot,
                flags=self.recognizer.evaluate(window),
            ))

        self.log.debug(
            f"Evaluated {len(evaluations)} bars, "
            f"{sum(len(e.detected) for e in evaluations)} pattern hits"
        )
        return evaluations

    def evaluate_last(self, bars: Iterable[BarInput]) -> Optional[PatternEvaluation]:
        """Evaluation of the final bar only (None for an empty series)."""
        evaluations = self.evaluate(bars)
        return evaluations[-1] if evaluations else None
