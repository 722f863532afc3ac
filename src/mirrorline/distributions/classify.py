"""Heuristic distribution shape classification.

Two signals drive the decision:
- skew ratio: median bucket weight over mean bucket weight; below 1 means a
  right tail
- tail weight: percentage of total weight held by the heaviest 10% of
  buckets (at least one bucket)

Rules, first match wins:
- fewer than 10 events: insufficient_data
- tail > 60 and skew < 0.5: power_law
- 30 <= tail <= 60 and skew < 0.8: log_normal
- otherwise: normal
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from mirrorline.distributions.inspect import inspect_distribution
from mirrorline.distributions.types import DistributionSeries, DistributionShape, DistributionStats

logger = logging.getLogger(__name__)

MIN_EVENTS = 10
TAIL_FRACTION = 0.1
POWER_LAW_MIN_TAIL = 60.0
POWER_LAW_MAX_SKEW = 0.5
LOG_NORMAL_TAIL_RANGE = (30.0, 60.0)
LOG_NORMAL_MAX_SKEW = 0.8


@dataclass
class ShapeSignals:
    skew_ratio: float
    tail_weight: float


def shape_signals(
    series: DistributionSeries,
    stats: Optional[DistributionStats] = None,
) -> Optional[ShapeSignals]:
    """Skew ratio and tail weight, or None when no bucket has weight."""
    stats = stats or inspect_distribution(series)
    weights = np.array([point.weight for point in series.points if point.weight > 0], dtype=float)
    if weights.size == 0 or stats.total_weight <= 0:
        return None

    mean_weight = stats.total_weight / weights.size
    skew_ratio = float(np.median(weights)) / mean_weight

    ordered = np.sort(np.array([point.weight for point in series.points], dtype=float))[::-1]
    top_count = max(1, math.ceil(ordered.size * TAIL_FRACTION))
    tail_weight = float(ordered[:top_count].sum()) / stats.total_weight * 100
    return ShapeSignals(skew_ratio=skew_ratio, tail_weight=tail_weight)


def classify_distribution(series: DistributionSeries) -> DistributionShape:
    """Classify a series; deterministic for a given set of points."""
    stats = inspect_distribution(series)
    if stats.total_events < MIN_EVENTS:
        return DistributionShape.INSUFFICIENT_DATA

    signals = shape_signals(series, stats)
    if signals is None:
        return DistributionShape.INSUFFICIENT_DATA

    logger.debug(
        f"Distribution signals: skew={signals.skew_ratio:.3f}, "
        f"tail={signals.tail_weight:.1f}% over {stats.bucket_count} buckets"
    )

    if signals.tail_weight > POWER_LAW_MIN_TAIL and signals.skew_ratio < POWER_LAW_MAX_SKEW:
        return DistributionShape.POWER_LAW

    low, high = LOG_NORMAL_TAIL_RANGE
    if low <= signals.tail_weight <= high and signals.skew_ratio < LOG_NORMAL_MAX_SKEW:
        return DistributionShape.LOG_NORMAL

    return DistributionShape.NORMAL
