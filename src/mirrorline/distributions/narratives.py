"""Scope-framed distribution narratives.

Adds week/month/year framing to a distribution insight without
introducing new statistics. Confidence is capped per scope:

- week: high is lowered to medium
- month: unchanged
- year: high is lowered to medium unless more than
  ``high_confidence_min_events`` events back it
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple, Union

from mirrorline.distributions.classify import classify_distribution
from mirrorline.distributions.insights import generate_distribution_insight
from mirrorline.distributions.inspect import inspect_distribution
from mirrorline.distributions.series import build_distribution_from_reflections
from mirrorline.distributions.types import (
    ConfidenceLevel,
    DistributionInsight,
    DistributionNarrative,
    DistributionShape,
    TimeBucket,
    TimeScope,
)
from mirrorline.errors import DistributionError
from mirrorline.insights.types import ReflectionEntry

logger = logging.getLogger(__name__)

YEAR_HIGH_CONFIDENCE_MIN_EVENTS = 100

DEFAULT_NARRATIVE = (
    "Distribution insight",
    "Not enough data yet to generate a narrative for this view.",
)

_YEAR_SPREAD_SUMMARY = (
    "Over the year, your reflections reveal how attention and significance were "
    "distributed, highlighting the rhythms that shaped your thinking."
)

NARRATIVE_TEMPLATES: Dict[TimeScope, Dict[DistributionShape, Tuple[str, str]]] = {
    TimeScope.WEEK: {
        DistributionShape.NORMAL: (
            "This week showed steady, consistent activity",
            "Your recent reflections were spread evenly across the week, suggesting a "
            "balanced pace of engagement without major peaks or valleys.",
        ),
        DistributionShape.LOG_NORMAL: (
            "This week showed focused bursts of activity",
            "Your recent reflections clustered into short, intense windows. This "
            "suggests a period of concentrated attention rather than steady pacing.",
        ),
        DistributionShape.POWER_LAW: (
            "This week concentrated into intense moments",
            "Most of your week's reflections occurred during a few powerful periods, "
            "highlighting how meaning can accumulate in brief, significant windows.",
        ),
    },
    TimeScope.MONTH: {
        DistributionShape.NORMAL: (
            "This month maintained consistent patterns",
            "Across the month, your activity was distributed evenly, indicating steady "
            "engagement without major concentration or gaps.",
        ),
        DistributionShape.LOG_NORMAL: (
            "This month formed recognizable patterns of focus",
            "Across the month, your activity alternated between concentrated periods "
            "and quieter gaps, indicating cycles of engagement and rest.",
        ),
        DistributionShape.POWER_LAW: (
            "This month highlighted key moments of intensity",
            "The month's reflections were dominated by a few significant periods, "
            "showing how certain times carried disproportionate meaning and attention.",
        ),
    },
    TimeScope.YEAR: {
        DistributionShape.NORMAL: (
            "This year showed steady rhythms of reflection",
            "Over the year, your reflections were distributed consistently, revealing a "
            "pattern of regular engagement that shaped your thinking.",
        ),
        DistributionShape.LOG_NORMAL: (
            "This year revealed cycles of focus and reflection",
            _YEAR_SPREAD_SUMMARY,
        ),
        DistributionShape.POWER_LAW: (
            "This year reflects how meaning accumulated over time",
            _YEAR_SPREAD_SUMMARY,
        ),
    },
}


def resolve_scope(scope: Union[TimeScope, str]) -> TimeScope:
    try:
        return TimeScope(scope)
    except ValueError:
        raise DistributionError(
            f"Unknown narrative scope: {scope}", details={"scope": str(scope)}
        ) from None


def cap_confidence(
    scope: TimeScope,
    confidence: ConfidenceLevel,
    total_events: Optional[float] = None,
    high_confidence_min_events: int = YEAR_HIGH_CONFIDENCE_MIN_EVENTS,
) -> ConfidenceLevel:
    """Apply the scope's confidence ceiling."""
    if confidence != ConfidenceLevel.HIGH:
        return confidence
    if scope == TimeScope.WEEK:
        return ConfidenceLevel.MEDIUM
    if scope == TimeScope.YEAR:
        if total_events is not None and total_events > high_confidence_min_events:
            return ConfidenceLevel.HIGH
        return ConfidenceLevel.MEDIUM
    return confidence


def _narrative_text(scope: TimeScope, insight: Optional[DistributionInsight]) -> Tuple[str, str]:
    if insight is None or insight.shape is None:
        return DEFAULT_NARRATIVE
    templates = NARRATIVE_TEMPLATES[scope]
    return templates.get(insight.shape, templates[DistributionShape.NORMAL])


def generate_narrative(
    scope: Union[TimeScope, str],
    insight: Optional[DistributionInsight],
    total_events: Optional[float] = None,
    *,
    high_confidence_min_events: int = YEAR_HIGH_CONFIDENCE_MIN_EVENTS,
) -> DistributionNarrative:
    """Frame a distribution insight for a time scope.

    Args:
        scope: ``week``, ``month`` or ``year``
        insight: Insight to frame; None yields the neutral default text
        total_events: Event count backing the insight, used by the year cap
        high_confidence_min_events: Year-scope event count above which high
            confidence is kept

    Returns:
        Narrative with scope-capped confidence
    """
    scope = resolve_scope(scope)
    headline, summary = _narrative_text(scope, insight)
    confidence = insight.confidence if insight is not None else ConfidenceLevel.LOW
    return DistributionNarrative(
        scope=scope,
        headline=headline,
        summary=summary,
        confidence=cap_confidence(scope, confidence, total_events, high_confidence_min_events),
    )


def narrate_reflections(
    reflections: Iterable[ReflectionEntry],
    scope: Union[TimeScope, str],
    bucket: Union[TimeBucket, str] = TimeBucket.DAY,
    *,
    high_confidence_min_events: int = YEAR_HIGH_CONFIDENCE_MIN_EVENTS,
) -> Optional[DistributionNarrative]:
    """Build, classify and narrate a series in one call.

    Returns:
        Narrative, or None when the series has too little data
    """
    series = build_distribution_from_reflections(reflections, bucket)
    shape = classify_distribution(series)
    insight = generate_distribution_insight(series, shape)
    if insight is None:
        logger.debug(f"No {scope} distribution narrative: {shape.value}")
        return None

    stats = inspect_distribution(series)
    return generate_narrative(
        scope,
        insight,
        stats.total_events,
        high_confidence_min_events=high_confidence_min_events,
    )
