"""Distribution series statistics."""

from __future__ import annotations

from mirrorline.distributions.types import DistributionSeries, DistributionStats


def inspect_distribution(series: DistributionSeries) -> DistributionStats:
    """Totals, bucket counts and timestamp bounds of a series."""
    points = series.points
    if not points:
        return DistributionStats()

    total_weight = sum(point.weight for point in points)
    timestamps = [point.timestamp for point in points]
    return DistributionStats(
        total_events=total_weight,
        total_weight=total_weight,
        min_timestamp=min(timestamps),
        max_timestamp=max(timestamps),
        bucket_count=len(points),
        non_empty_buckets=sum(1 for point in points if point.weight > 0),
    )
