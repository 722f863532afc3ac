"""Change between two distribution narratives of the same scope.

Works on narrative language rather than raw statistics. Rules, first match
wins:

- identical headlines or equivalent summaries: no_change
- same confidence and similar headline wording: stabilizing
- confidence rose, or the headline moved toward concentration: intensifying
- the previous headline described concentration: fragmenting
- otherwise: no_change
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Tuple

from pydantic import BaseModel

from mirrorline.distributions.types import ConfidenceLevel, DistributionNarrative, TimeScope
from mirrorline.errors import DistributionError

logger = logging.getLogger(__name__)

SUMMARY_KEY_PHRASES = (
    "evenly distributed",
    "spread consistently",
    "clustered",
    "concentrated",
    "focused periods",
    "steady engagement",
    "intense bursts",
    "patterns",
    "cycles",
)
SUMMARY_OVERLAP = 0.7

CONCENTRATED_WORDS = ("concentrated", "intense", "focused", "clustered", "bursts")
SCATTERED_WORDS = ("evenly", "spread", "consistent", "steady", "distributed")

SIMILAR_WORD_MIN_LENGTH = 5
SIMILAR_MIN_SHARED_WORDS = 2

_CONFIDENCE_RANK = {
    ConfidenceLevel.LOW: 0,
    ConfidenceLevel.MEDIUM: 1,
    ConfidenceLevel.HIGH: 2,
}


class NarrativeDirection(str, Enum):
    INTENSIFYING = "intensifying"
    STABILIZING = "stabilizing"
    FRAGMENTING = "fragmenting"
    NO_CHANGE = "no_change"


class NarrativeDelta(BaseModel):
    """How a scope's narrative moved between two periods."""

    scope: TimeScope
    direction: NarrativeDirection
    headline: str
    summary: str


DELTA_TEXT: Dict[NarrativeDirection, Tuple[str, str]] = {
    NarrativeDirection.NO_CHANGE: (
        "No meaningful change detected across this period",
        "Your engagement pattern remained consistent, showing the same distribution "
        "characteristics as before.",
    ),
    NarrativeDirection.STABILIZING: (
        "Your engagement pattern is holding steady",
        "Your activity distribution has remained consistent, maintaining similar "
        "patterns of focus and engagement.",
    ),
    NarrativeDirection.INTENSIFYING: (
        "Your focus is becoming more concentrated over time",
        "Your activity is clustering into more focused periods, suggesting deeper "
        "engagement in concentrated windows.",
    ),
    NarrativeDirection.FRAGMENTING: (
        "Your attention is spreading across more directions",
        "Your activity is becoming more distributed, spreading across a wider range "
        "of time periods rather than concentrating.",
    ),
}


def _key_phrases(text: str) -> List[str]:
    lowered = text.lower()
    return [phrase for phrase in SUMMARY_KEY_PHRASES if phrase in lowered]


def summaries_equivalent(first: str, second: str) -> bool:
    """Whether two summaries share most of their key phrases.

    A summary without any key phrase carries no signal and is never
    equivalent to another.
    """
    first_phrases = _key_phrases(first)
    second_phrases = _key_phrases(second)
    if not first_phrases or not second_phrases:
        return False
    shared = [phrase for phrase in first_phrases if phrase in second_phrases]
    return len(shared) >= min(len(first_phrases), len(second_phrases)) * SUMMARY_OVERLAP


def headlines_similar(first: str, second: str) -> bool:
    second_words = second.lower().split()
    shared = [
        word
        for word in first.lower().split()
        if len(word) >= SIMILAR_WORD_MIN_LENGTH and word in second_words
    ]
    return len(shared) >= SIMILAR_MIN_SHARED_WORDS


def _mentions(text: str, words: Tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in words)


def _direction(previous: DistributionNarrative, current: DistributionNarrative) -> NarrativeDirection:
    if previous.headline == current.headline or summaries_equivalent(previous.summary, current.summary):
        return NarrativeDirection.NO_CHANGE

    if previous.confidence == current.confidence and headlines_similar(previous.headline, current.headline):
        return NarrativeDirection.STABILIZING

    confidence_rose = _CONFIDENCE_RANK[current.confidence] > _CONFIDENCE_RANK[previous.confidence]
    now_concentrated = _mentions(current.headline, CONCENTRATED_WORDS)
    was_concentrated = _mentions(previous.headline, CONCENTRATED_WORDS)
    was_scattered = _mentions(previous.headline, SCATTERED_WORDS)
    if confidence_rose or (now_concentrated and (was_scattered or not was_concentrated)):
        return NarrativeDirection.INTENSIFYING

    if was_concentrated:
        return NarrativeDirection.FRAGMENTING

    return NarrativeDirection.NO_CHANGE


def compare_narratives(
    previous: DistributionNarrative,
    current: DistributionNarrative,
) -> NarrativeDelta:
    """Describe how the narrative for one scope changed.

    Args:
        previous: Narrative for the earlier period
        current: Narrative for the later period

    Returns:
        NarrativeDelta with fixed text for the detected direction

    Raises:
        DistributionError: If the two narratives have different scopes
    """
    if previous.scope != current.scope:
        raise DistributionError(
            f"Cannot compare narratives with different scopes: "
            f"{previous.scope.value} vs {current.scope.value}",
            details={"previous_scope": previous.scope.value, "current_scope": current.scope.value},
        )

    direction = _direction(previous, current)
    logger.debug(f"{previous.scope.value} narrative direction: {direction.value}")
    headline, summary = DELTA_TEXT[direction]
    return NarrativeDelta(scope=previous.scope, direction=direction, headline=headline, summary=summary)
