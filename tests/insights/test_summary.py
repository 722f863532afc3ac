"""Tests for the always-on summary producer."""

from datetime import datetime, timedelta

from mirrorline.insights.config import InsightEngineConfig
from mirrorline.insights.contract import validate_insight
from mirrorline.insights.summary import compute_always_on_summary

SUNDAY = datetime(2025, 1, 12, 23, 59, 59)


def _by_type(cards):
    return {card.data["summary_type"]: card for card in cards}


class TestAlwaysOnSummary:
    """Tests for compute_always_on_summary."""

    def test_no_entries(self):
        """Nothing to summarize yields no cards."""
        assert compute_always_on_summary([], now=SUNDAY) == []

    def test_sporadic_week_and_spike(self, spike_week_entries):
        """Three active days produce consistency and activity spike cards."""
        cards = _by_type(compute_always_on_summary(spike_week_entries, now=SUNDAY))

        assert set(cards) == {"consistency", "activity_spike"}
        consistency = cards["consistency"]
        assert consistency.title == "Your writing is concentrated on specific days, not spread evenly."
        assert consistency.data["active_day_names"] == ["Tuesday", "Wednesday", "Friday"]
        assert len(consistency.contract.evidence) == 3

        spike = cards["activity_spike"]
        assert spike.data["spike_day_name"] == "Friday"
        assert spike.data["spike_date"] == "2025-01-10"
        assert spike.data["spike_count"] == 5
        assert spike.data["baseline_count"] == 0.6

    def test_cards_pass_contract(self, spike_week_entries):
        """Every proposed card satisfies the insight contract."""
        cards = compute_always_on_summary(spike_week_entries, now=SUNDAY)
        assert cards
        assert all(validate_insight(card) for card in cards)

    def test_ids_are_deterministic(self, spike_week_entries):
        """Ids depend on subtype and reference day, not the clock."""
        first = compute_always_on_summary(spike_week_entries, now=SUNDAY, computed_at=datetime(2025, 2, 1))
        second = compute_always_on_summary(spike_week_entries, now=SUNDAY, computed_at=datetime(2025, 3, 1))
        assert [card.id for card in first] == [card.id for card in second]
        assert "always_on_summary-consistency-2025-01-12" in [card.id for card in first]
        assert first[0].computed_at == datetime(2025, 2, 1)

    def test_daily_cadence(self, entry_factory):
        """Seven active days produce the daily cadence claim."""
        entries = [entry_factory(f"d{offset}", SUNDAY - timedelta(days=offset, hours=3)) for offset in range(7)]
        cards = _by_type(compute_always_on_summary(entries, now=SUNDAY))
        assert cards["consistency"].title.startswith("You maintain a daily writing cadence.")

    def test_clustered_writing_change(self, entry_factory):
        """Many entries on few days against a prior week yield a writing change card."""
        entries = [entry_factory(f"c{index}", datetime(2025, 1, 10, 8 + index)) for index in range(6)]
        entries += [entry_factory(f"p{offset}", datetime(2025, 1, 1 + offset, 9)) for offset in range(4)]
        cards = _by_type(compute_always_on_summary(entries, now=SUNDAY))

        change = cards["writing_change"]
        assert change.title == "You don't process things gradually. You wait, then commit fully."
        assert change.data["percent_change"] == 50
        assert validate_insight(change)

    def test_weekday_pattern(self, entry_factory):
        """Writing on the same weekdays for six weeks yields a weekly pattern card."""
        entries = []
        for week in range(6):
            monday = datetime(2025, 1, 6) - timedelta(weeks=week)
            for index in range(2):
                entries.append(entry_factory(f"mon-{week}-{index}", monday + timedelta(hours=9 + index)))
                entries.append(entry_factory(f"thu-{week}-{index}", monday + timedelta(days=3, hours=9 + index)))
        cards = _by_type(compute_always_on_summary(entries, now=SUNDAY))

        pattern = cards["weekly_pattern"]
        assert pattern.title == "You tend to write most on Monday and Thursday."
        assert pattern.data["pattern_days"] == ["Monday", "Thursday"]
        assert pattern.data["pattern_share"] == 1.0
        assert validate_insight(pattern)

    def test_deleted_entries_ignored(self, entry_factory):
        """Soft-deleted entries never count."""
        entries = [entry_factory("gone", SUNDAY, deleted_at=SUNDAY)]
        assert compute_always_on_summary(entries, now=SUNDAY) == []

    def test_spike_multiplier_from_config(self, spike_week_entries):
        """A higher multiplier suppresses the activity spike."""
        config = InsightEngineConfig(spike_min_multiplier=10.0)
        cards = _by_type(compute_always_on_summary(spike_week_entries, now=SUNDAY, config=config))
        assert "activity_spike" not in cards
