"""Tests for distribution classification, insights and narratives."""

from datetime import datetime, timedelta

import pytest

from mirrorline.distributions import (
    ConfidenceLevel,
    DistributionInsight,
    DistributionShape,
    TimeScope,
    WeightedEvent,
    build_distribution_series,
    calculate_confidence,
    classify_distribution,
    generate_distribution_insight,
    generate_narrative,
    narrate_reflections,
)
from mirrorline.errors import DistributionError


def series_from_counts(counts):
    events = []
    for offset, count in enumerate(counts):
        events.extend(
            WeightedEvent(timestamp=datetime(2025, 1, 1) + timedelta(days=offset)) for _ in range(count)
        )
    return build_distribution_series(events, "day")


def insight(shape=DistributionShape.LOG_NORMAL, confidence=ConfidenceLevel.HIGH):
    return DistributionInsight(headline="h", description="d", shape=shape, confidence=confidence)


class TestClassifyDistribution:
    """Tests for classify_distribution."""

    def test_insufficient_data(self):
        """Fewer than ten events cannot be classified."""
        assert classify_distribution(series_from_counts([3, 3, 3])) == DistributionShape.INSUFFICIENT_DATA

    def test_normal(self):
        """Even daily counts are normal."""
        assert classify_distribution(series_from_counts([2] * 10)) == DistributionShape.NORMAL

    def test_power_law(self):
        """One bucket holding most of the weight is a power law."""
        assert classify_distribution(series_from_counts([40] + [1] * 9)) == DistributionShape.POWER_LAW

    def test_log_normal(self):
        """A moderate tail with right skew is log-normal."""
        assert classify_distribution(series_from_counts([10, 1, 1, 1, 1, 1, 1, 1, 2, 2])) == DistributionShape.LOG_NORMAL


class TestDistributionInsight:
    """Tests for insight language and confidence."""

    def test_insufficient_returns_none(self):
        """No insight is produced without enough data."""
        series = series_from_counts([1])
        assert generate_distribution_insight(series, DistributionShape.INSUFFICIENT_DATA) is None

    def test_shape_language(self):
        """Headlines follow the classified shape."""
        series = series_from_counts([40] + [1] * 9)
        result = generate_distribution_insight(series, DistributionShape.POWER_LAW)
        assert result.headline == "Your activity concentrates in intense bursts"
        assert result.confidence == ConfidenceLevel.MEDIUM

    @pytest.mark.parametrize(
        "counts, expected",
        [
            ([3] * 10, ConfidenceLevel.MEDIUM),
            ([5] * 11, ConfidenceLevel.LOW),
            ([50] + [1] * 10, ConfidenceLevel.HIGH),
            ([1] * 12, ConfidenceLevel.LOW),
        ],
    )
    def test_confidence(self, counts, expected):
        """Volume and signal clarity set the confidence."""
        assert calculate_confidence(series_from_counts(counts)) == expected


class TestDistributionNarrative:
    """Tests for scope framing and confidence capping."""

    def test_week_caps_high(self):
        """Week scope never keeps high confidence."""
        narrative = generate_narrative("week", insight())
        assert narrative.confidence == ConfidenceLevel.MEDIUM
        assert narrative.headline == "This week showed focused bursts of activity"

    @pytest.mark.parametrize("level", [ConfidenceLevel.MEDIUM, ConfidenceLevel.LOW])
    def test_week_passes_lower_levels(self, level):
        """Medium and low pass through at week scope."""
        assert generate_narrative(TimeScope.WEEK, insight(confidence=level)).confidence == level

    def test_month_unchanged(self):
        """Month scope keeps the insight's confidence."""
        assert generate_narrative("month", insight()).confidence == ConfidenceLevel.HIGH

    @pytest.mark.parametrize(
        "total_events, expected",
        [(150, ConfidenceLevel.HIGH), (50, ConfidenceLevel.MEDIUM), (100, ConfidenceLevel.MEDIUM), (None, ConfidenceLevel.MEDIUM)],
    )
    def test_year_cap(self, total_events, expected):
        """Year scope keeps high confidence only above 100 events."""
        assert generate_narrative("year", insight(), total_events).confidence == expected

    def test_missing_insight_default_text(self):
        """A missing insight yields the neutral default text."""
        narrative = generate_narrative("month", None)
        assert narrative.headline == "Distribution insight"
        assert narrative.summary == "Not enough data yet to generate a narrative for this view."

    def test_unknown_scope(self):
        """Unknown scopes raise DistributionError."""
        with pytest.raises(DistributionError):
            generate_narrative("decade", insight())

    def test_deterministic(self):
        """Repeated calls are identical."""
        outputs = {generate_narrative("year", insight(), 150).model_dump_json() for _ in range(3)}
        assert len(outputs) == 1

    def test_narrate_reflections(self, entry_factory):
        """The pipeline narrates reflections end to end."""
        reflections = [
            entry_factory(f"r{index}", datetime(2025, 1, 1 + index % 10, 9))
            for index in range(20)
        ]
        narrative = narrate_reflections(reflections, "month")
        assert narrative.headline == "This month maintained consistent patterns"
        assert narrative.confidence == ConfidenceLevel.MEDIUM

    def test_narrate_reflections_insufficient(self, entry_factory):
        """Too few reflections produce no narrative."""
        assert narrate_reflections([entry_factory("r", datetime(2025, 1, 1))], "week") is None
