"""Tests for horizon artifact builders."""

from datetime import datetime, timedelta

from mirrorline.insights.artifacts import (
    build_summary_artifact,
    build_timeline_artifact,
    build_weekly_artifact,
)
from mirrorline.insights.contract import validate_insight
from mirrorline.insights.types import InsightHorizon, InsightKind

NOW = datetime(2025, 1, 13, 8, 0)


class TestWeeklyArtifact:
    """Tests for build_weekly_artifact."""

    def test_summary_cards_then_spikes(self, spike_week_entries, week_start, week_end):
        """Summary cards come first, timeline spikes after."""
        artifact = build_weekly_artifact(spike_week_entries, week_start, week_end, now=NOW)

        assert artifact.horizon == InsightHorizon.WEEKLY
        assert [card.kind for card in artifact.cards] == [
            InsightKind.ALWAYS_ON_SUMMARY,
            InsightKind.ALWAYS_ON_SUMMARY,
            InsightKind.TIMELINE_SPIKE,
        ]
        assert artifact.debug.entries_in_window == 8
        assert artifact.created_at == NOW
        assert all(card.computed_at == NOW for card in artifact.cards)

    def test_all_cards_compliant(self, spike_week_entries, week_start, week_end):
        """Only cards that passed the gate are exposed."""
        artifact = build_weekly_artifact(spike_week_entries, week_start, week_end, now=NOW)
        assert all(validate_insight(card) for card in artifact.cards)

    def test_baseline_card_when_nothing_survives(self, entry_factory, week_start, week_end):
        """A steady week without any pattern still gets one compliant card."""
        entries = [
            entry_factory(f"e{offset}", week_start + timedelta(days=offset, hours=10))
            for offset in (0, 2, 4, 6)
        ]
        artifact = build_weekly_artifact(entries, week_start, week_end, now=NOW)

        (card,) = artifact.cards
        assert card.id == "weekly-baseline-2025-01-06"
        assert card.data["summary_type"] == "baseline"
        assert card.data["current_week_entries"] == 4
        assert validate_insight(card)

    def test_empty_week(self, week_start, week_end):
        """No entries means no cards and no fallback."""
        artifact = build_weekly_artifact([], week_start, week_end, now=NOW)
        assert artifact.cards == []
        assert artifact.debug.entries_in_window == 0

    def test_history_before_window_feeds_summary(self, entry_factory, week_start, week_end):
        """Entries from the previous week inform the week-over-week comparison."""
        entries = [entry_factory(f"c{index}", datetime(2025, 1, 10, 8 + index)) for index in range(6)]
        entries += [entry_factory(f"p{offset}", datetime(2025, 1, 1 + offset, 9)) for offset in range(4)]
        artifact = build_weekly_artifact(entries, week_start, week_end, now=NOW)

        summary_types = [card.data.get("summary_type") for card in artifact.cards]
        assert "writing_change" in summary_types
        assert artifact.debug.entries_in_window == 6


class TestOtherArtifacts:
    """Tests for summary and timeline builders."""

    def test_summary_uses_window_entries(self, spike_week_entries, week_start, week_end):
        """Summary artifacts gate the always-on summary for the window."""
        artifact = build_summary_artifact(spike_week_entries, week_start, week_end, now=NOW)
        assert artifact.horizon == InsightHorizon.SUMMARY
        assert {card.data["summary_type"] for card in artifact.cards} == {"consistency", "activity_spike"}

    def test_timeline_placeholder(self, spike_week_entries, week_start, week_end):
        """Timeline artifacts carry the window and no cards."""
        artifact = build_timeline_artifact(spike_week_entries, week_start, week_end, now=NOW)
        assert artifact.horizon == InsightHorizon.TIMELINE
        assert artifact.cards == []
        assert artifact.window.start == week_start
        assert artifact.debug.entries_in_window == 8
