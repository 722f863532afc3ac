"""Distribution data models.

A distribution series is a sorted list of time buckets with aggregated
weights. Points carry bucket start times and weights only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class TimeBucket(str, Enum):
    """Granularity events are aggregated into."""

    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class DistributionShape(str, Enum):
    NORMAL = "normal"
    LOG_NORMAL = "log_normal"
    POWER_LAW = "power_law"
    INSUFFICIENT_DATA = "insufficient_data"


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TimeScope(str, Enum):
    """Scope a distribution narrative is framed for."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class WeightedEvent(BaseModel):
    """A timestamp with a weight (1 per reflection by default)."""

    timestamp: Optional[datetime] = None
    weight: float = 1.0


class DistributionPoint(BaseModel):
    timestamp: datetime
    weight: float


class DistributionSeries(BaseModel):
    """Bucketed weights in ascending timestamp order."""

    bucket: TimeBucket
    shape: Optional[DistributionShape] = None
    points: List[DistributionPoint] = Field(default_factory=list)


@dataclass
class DistributionStats:
    """Summary statistics of a series.

    Attributes:
        total_events: Sum of weights (each unit weight is one event)
        total_weight: Sum of weights
        min_timestamp: Earliest bucket, None for an empty series
        max_timestamp: Latest bucket, None for an empty series
        bucket_count: Number of points
        non_empty_buckets: Points with positive weight
    """

    total_events: float = 0.0
    total_weight: float = 0.0
    min_timestamp: Optional[datetime] = None
    max_timestamp: Optional[datetime] = None
    bucket_count: int = 0
    non_empty_buckets: int = 0


class DistributionInsight(BaseModel):
    """Plain-language reading of a classified series."""

    headline: str
    description: str
    shape: DistributionShape
    confidence: ConfidenceLevel


class DistributionNarrative(BaseModel):
    """Scope-framed narrative with capped confidence."""

    scope: TimeScope
    headline: str
    summary: str
    confidence: ConfidenceLevel
