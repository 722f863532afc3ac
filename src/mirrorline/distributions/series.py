"""Distribution series construction.

Reflections become unit-weight events; events are truncated to their
bucket start and weights are summed per bucket.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from mirrorline.distributions.types import (
    DistributionPoint,
    DistributionSeries,
    DistributionShape,
    TimeBucket,
    WeightedEvent,
)
from mirrorline.errors import DistributionError
from mirrorline.insights.time_windows import EPOCH, start_of_day
from mirrorline.insights.types import ReflectionEntry

logger = logging.getLogger(__name__)


def resolve_bucket(bucket: Union[TimeBucket, str]) -> TimeBucket:
    try:
        return TimeBucket(bucket)
    except ValueError:
        raise DistributionError(
            f"Unknown time bucket: {bucket}", details={"bucket": str(bucket)}
        ) from None


def bucket_timestamp(moment: datetime, bucket: Union[TimeBucket, str]) -> datetime:
    """Start of the bucket containing ``moment``.

    Weeks start on Monday; months on the first day.
    """
    bucket = resolve_bucket(bucket)

    if bucket == TimeBucket.HOUR:
        return moment.replace(minute=0, second=0, microsecond=0)
    if bucket == TimeBucket.DAY:
        return start_of_day(moment)
    if bucket == TimeBucket.WEEK:
        return start_of_day(moment) - timedelta(days=moment.weekday())
    return start_of_day(moment).replace(day=1)


def reflections_to_weighted_events(
    reflections: Iterable[ReflectionEntry],
) -> List[WeightedEvent]:
    """Unit-weight events for live reflections dated after the epoch."""
    return [
        WeightedEvent(timestamp=reflection.created_at, weight=1.0)
        for reflection in reflections
        if not reflection.is_deleted and reflection.created_at > EPOCH
    ]


def build_distribution_series(
    events: Iterable[WeightedEvent],
    bucket: Union[TimeBucket, str],
    shape: Optional[DistributionShape] = None,
    min_weight: float = 0.0,
) -> DistributionSeries:
    """Aggregate weighted events into a sorted bucket series.

    Events without a timestamp, or whose weight is not finite or does not
    exceed ``min_weight``, are ignored.
    """
    bucket = resolve_bucket(bucket)
    weights: Dict[datetime, float] = {}
    dropped = 0
    for event in events:
        if event.timestamp is None or not math.isfinite(event.weight) or event.weight <= min_weight:
            dropped += 1
            continue
        key = bucket_timestamp(event.timestamp, bucket)
        weights[key] = weights.get(key, 0.0) + event.weight

    if dropped:
        logger.debug(f"Ignored {dropped} events without a timestamp or usable weight")

    points = [
        DistributionPoint(timestamp=timestamp, weight=weight)
        for timestamp, weight in sorted(weights.items())
    ]
    return DistributionSeries(bucket=bucket, shape=shape, points=points)


def build_distribution_from_reflections(
    reflections: Iterable[ReflectionEntry],
    bucket: Union[TimeBucket, str],
    shape: Optional[DistributionShape] = None,
    min_weight: float = 0.0,
) -> DistributionSeries:
    return build_distribution_series(
        reflections_to_weighted_events(reflections), bucket, shape, min_weight
    )
