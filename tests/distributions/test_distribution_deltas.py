"""Tests for comparing distribution narratives across periods."""

import pytest

from mirrorline.distributions import (
    NARRATIVE_TEMPLATES,
    ConfidenceLevel,
    DistributionNarrative,
    DistributionShape,
    NarrativeDirection,
    TimeScope,
    compare_narratives,
)
from mirrorline.errors import DistributionError


def templated(scope, shape, confidence):
    headline, summary = NARRATIVE_TEMPLATES[scope][shape]
    return DistributionNarrative(scope=scope, headline=headline, summary=summary, confidence=confidence)


class TestCompareNarratives:
    """Tests for compare_narratives."""

    def test_intensifying(self):
        """Moving from even activity to focused clusters with more confidence intensifies."""
        previous = templated(TimeScope.MONTH, DistributionShape.NORMAL, ConfidenceLevel.MEDIUM)
        current = templated(TimeScope.MONTH, DistributionShape.LOG_NORMAL, ConfidenceLevel.HIGH)

        delta = compare_narratives(previous, current)

        assert delta.direction == NarrativeDirection.INTENSIFYING
        assert delta.scope == TimeScope.MONTH
        assert delta.headline == "Your focus is becoming more concentrated over time"
        assert "more focused periods" in delta.summary

    def test_fragmenting(self):
        """Moving from focused bursts to steady activity fragments."""
        previous = templated(TimeScope.WEEK, DistributionShape.LOG_NORMAL, ConfidenceLevel.MEDIUM)
        current = templated(TimeScope.WEEK, DistributionShape.NORMAL, ConfidenceLevel.LOW)

        delta = compare_narratives(previous, current)

        assert delta.direction == NarrativeDirection.FRAGMENTING
        assert delta.headline == "Your attention is spreading across more directions"
        assert "more distributed" in delta.summary

    def test_stabilizing(self):
        """Similar wording at the same confidence holds steady."""
        previous = templated(TimeScope.MONTH, DistributionShape.NORMAL, ConfidenceLevel.MEDIUM)
        current = DistributionNarrative(
            scope=TimeScope.MONTH,
            headline="This month showed steady engagement patterns",
            summary="Across the month, your activity remained consistent.",
            confidence=ConfidenceLevel.MEDIUM,
        )

        delta = compare_narratives(previous, current)

        assert delta.direction == NarrativeDirection.STABILIZING
        assert delta.headline == "Your engagement pattern is holding steady"
        assert "remained consistent" in delta.summary

    def test_identical_narratives(self):
        """Identical narratives show no change."""
        narrative = templated(TimeScope.MONTH, DistributionShape.NORMAL, ConfidenceLevel.MEDIUM)

        delta = compare_narratives(narrative, narrative)

        assert delta.direction == NarrativeDirection.NO_CHANGE
        assert delta.headline == "No meaningful change detected across this period"
        assert "remained consistent" in delta.summary

    def test_same_headline_different_summary(self):
        """An unchanged headline means no change regardless of the summary."""
        previous = DistributionNarrative(
            scope=TimeScope.YEAR,
            headline="This year showed steady rhythms",
            summary="Your reflections were distributed consistently.",
            confidence=ConfidenceLevel.MEDIUM,
        )
        current = previous.model_copy(update={"summary": "Your reflections reveal different patterns."})

        assert compare_narratives(previous, current).direction == NarrativeDirection.NO_CHANGE

    def test_equivalent_summaries(self):
        """Summaries sharing their key phrases mean no change."""
        previous = templated(TimeScope.MONTH, DistributionShape.LOG_NORMAL, ConfidenceLevel.LOW)
        current = previous.model_copy(update={"headline": "A different headline", "confidence": ConfidenceLevel.HIGH})

        assert compare_narratives(previous, current).direction == NarrativeDirection.NO_CHANGE

    def test_confidence_increase_intensifies(self):
        """Rising confidence alone signals intensification."""
        previous = templated(TimeScope.YEAR, DistributionShape.NORMAL, ConfidenceLevel.LOW)
        current = templated(TimeScope.YEAR, DistributionShape.POWER_LAW, ConfidenceLevel.HIGH)

        assert compare_narratives(previous, current).direction == NarrativeDirection.INTENSIFYING

    def test_deterministic(self):
        """Repeated comparisons are identical."""
        previous = templated(TimeScope.WEEK, DistributionShape.NORMAL, ConfidenceLevel.LOW)
        current = templated(TimeScope.WEEK, DistributionShape.LOG_NORMAL, ConfidenceLevel.MEDIUM)

        outputs = {compare_narratives(previous, current).model_dump_json() for _ in range(3)}
        assert len(outputs) == 1

    def test_different_scopes_raise(self):
        """Narratives of different scopes cannot be compared."""
        week = DistributionNarrative(scope=TimeScope.WEEK, headline="Test", summary="Test", confidence=ConfidenceLevel.MEDIUM)
        month = week.model_copy(update={"scope": TimeScope.MONTH})

        with pytest.raises(DistributionError, match="Cannot compare narratives with different scopes"):
            compare_narratives(week, month)
