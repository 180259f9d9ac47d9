"""
Pattern Alerts

Formats alert messages for detected patterns. Delivery is up to the caller:
pass any ``AlertSink`` (a callable taking the message) to ``dispatch_alerts``.
"""

import logging
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Union

from ..models.signals import PatternType
from .labels import get_label

logger = logging.getLogger(__name__)

AlertSink = Callable[[str], None]

# Titles that read differently in alerts than on chart labels
_ALERT_TITLES = {
    PatternType.HAMMER: "Hammer candle",
    PatternType.SHOOTING_STAR: "Shooting star",
}


def alert_title(pattern: PatternType) -> str:
    pattern = PatternType(pattern)
    return _ALERT_TITLES.get(pattern, get_label(pattern).title)


def format_alert(pattern: PatternType, timeframe: str, price: Union[Decimal, float, str]) -> str:
    """
    Render the alert message for a pattern.

    >>> format_alert(PatternType.DOJI, "1h", Decimal("101.5"))
    'Doji on 1h chart. Price is 101.5'
    """
    return f"{alert_title(pattern)} on {timeframe} chart. Price is {price}"


def collect_alerts(
    evaluation,
    timeframe: str,
    patterns: Optional[Iterable[PatternType]] = None
) -> List[str]:
    """
    Alert messages for the patterns detected in an evaluation.

    Args:
        evaluation: PatternEvaluation for one bar
        timeframe: Chart timeframe shown in the message
        patterns: Restrict alerts to these patterns (all when None)

    Returns:
        Messages in PatternType order, priced at the bar close
    """
    enabled = set(PatternType(p) for p in patterns) if patterns is not None else None
    return [
        format_alert(pattern, timeframe, evaluation.bar.close)
        for pattern in evaluation.detected
        if enabled is None or pattern in enabled
    ]


def dispatch_alerts(
    evaluation,
    timeframe: str,
    sink: AlertSink,
    patterns: Optional[Iterable[PatternType]] = None
) -> int:
    """Send every alert for an evaluation to ``sink``; returns the number sent."""
    messages = collect_alerts(evaluation, timeframe, patterns)
    for message in messages:
        logger.debug(f"Alert: {message}")
        sink(message)
    return len(messages)
