"""Plain-language insights for classified distributions."""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from mirrorline.distributions.classify import shape_signals
from mirrorline.distributions.inspect import inspect_distribution
from mirrorline.distributions.types import (
    ConfidenceLevel,
    DistributionInsight,
    DistributionSeries,
    DistributionShape,
    DistributionStats,
)

HIGH_CONFIDENCE_MIN_EVENTS = 50
MEDIUM_CONFIDENCE_RANGE = (20, 50)
CLEAR_SIGNAL_MAX_SKEW = 0.7
CLEAR_SIGNAL_MIN_TAIL = 40.0

SHAPE_LANGUAGE: Dict[DistributionShape, Tuple[str, str]] = {
    DistributionShape.NORMAL: (
        "Your activity is evenly distributed over time",
        "Your reflections are spread consistently, with no single period dominating "
        "your attention. This suggests steady engagement rather than bursts or gaps.",
    ),
    DistributionShape.LOG_NORMAL: (
        "Your activity clusters into focused periods",
        "Most of your reflections occur during a few concentrated windows, while the "
        "rest are spread lightly. This indicates cycles of focus followed by quieter "
        "periods.",
    ),
    DistributionShape.POWER_LAW: (
        "Your activity concentrates in intense bursts",
        "A small number of time periods account for most of your reflections. This "
        "pattern suggests episodic intensity, where meaning accumulates during rare "
        "but powerful moments.",
    ),
}


def calculate_confidence(
    series: DistributionSeries,
    stats: Optional[DistributionStats] = None,
) -> ConfidenceLevel:
    """Confidence from event volume and how clear the shape signal is.

    High needs more than 50 events and either skew below 0.7 or a tail above
    40%. Medium covers 20 to 50 events. Everything else is low.
    """
    stats = stats or inspect_distribution(series)

    if stats.total_events > HIGH_CONFIDENCE_MIN_EVENTS:
        signals = shape_signals(series, stats)
        if signals is None:
            return ConfidenceLevel.LOW
        if signals.skew_ratio < CLEAR_SIGNAL_MAX_SKEW or signals.tail_weight > CLEAR_SIGNAL_MIN_TAIL:
            return ConfidenceLevel.HIGH

    low, high = MEDIUM_CONFIDENCE_RANGE
    if low <= stats.total_events <= high:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def generate_distribution_insight(
    series: DistributionSeries,
    shape: DistributionShape,
) -> Optional[DistributionInsight]:
    """Insight for a classified series, None for insufficient data."""
    language = SHAPE_LANGUAGE.get(DistributionShape(shape))
    if language is None:
        return None

    headline, description = language
    return DistributionInsight(
        headline=headline,
        description=description,
        shape=shape,
        confidence=calculate_confidence(series),
    )
