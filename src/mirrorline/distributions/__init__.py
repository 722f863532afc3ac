"""Distribution classification and scope-framed narratives.

Pipeline: reflections -> weighted events -> bucketed series -> shape ->
insight -> narrative. Every step is a pure function. Narratives for two
periods of the same scope can be compared with ``compare_narratives``.
"""

from .classify import classify_distribution, shape_signals
from .deltas import NarrativeDelta, NarrativeDirection, compare_narratives
from .insights import calculate_confidence, generate_distribution_insight
from .inspect import inspect_distribution
from .narratives import NARRATIVE_TEMPLATES, cap_confidence, generate_narrative, narrate_reflections
from .series import (
    bucket_timestamp,
    build_distribution_from_reflections,
    build_distribution_series,
    reflections_to_weighted_events,
)
from .types import (
    ConfidenceLevel,
    DistributionInsight,
    DistributionNarrative,
    DistributionPoint,
    DistributionSeries,
    DistributionShape,
    DistributionStats,
    TimeBucket,
    TimeScope,
    WeightedEvent,
)

__all__ = [
    "ConfidenceLevel",
    "DistributionInsight",
    "DistributionNarrative",
    "DistributionPoint",
    "DistributionSeries",
    "DistributionShape",
    "DistributionStats",
    "NARRATIVE_TEMPLATES",
    "NarrativeDelta",
    "NarrativeDirection",
    "TimeBucket",
    "TimeScope",
    "WeightedEvent",
    "bucket_timestamp",
    "build_distribution_from_reflections",
    "build_distribution_series",
    "calculate_confidence",
    "cap_confidence",
    "classify_distribution",
    "compare_narratives",
    "generate_distribution_insight",
    "generate_narrative",
    "inspect_distribution",
    "narrate_reflections",
    "reflections_to_weighted_events",
    "shape_signals",
]
