"""Horizon-specific artifact builders.

Each builder turns reflection entries into an ``InsightArtifact`` whose
cards all passed the contract gate. Rejections are recorded in the
artifact's debug payload and never surface as errors.

- weekly:   always-on summary over history up to the window end, plus
            timeline spikes inside the window; a contract-compliant
            baseline card when the window has entries but no card survives
- summary:  always-on summary over the window's entries
- timeline: empty-card placeholder
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from mirrorline.insights.config import InsightEngineConfig
from mirrorline.insights.contract import gate_cards
from mirrorline.insights.spikes import compute_timeline_spikes
from mirrorline.insights.summary import compute_always_on_summary
from mirrorline.insights.time_windows import (
    TimeWindow,
    WindowKind,
    date_key,
    filter_events_by_window,
)
from mirrorline.insights.types import (
    InsightArtifact,
    InsightArtifactDebug,
    InsightCard,
    InsightContract,
    InsightEvidence,
    InsightHorizon,
    InsightKind,
    ReflectionEntry,
)

logger = logging.getLogger(__name__)


def _window(
    kind: WindowKind,
    start: datetime,
    end: datetime,
    timezone: Optional[str],
) -> TimeWindow:
    return TimeWindow(
        kind=kind,
        start=start,
        end=end,
        label=f"{date_key(start)} to {date_key(end)}",
        timezone=timezone,
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def build_baseline_card(
    window_entries: Sequence[ReflectionEntry],
    window: TimeWindow,
    now: datetime,
) -> InsightCard:
    """Card shown when a week has entries but no pattern cleared the gate."""
    active_days = len({date_key(entry.created_at) for entry in window_entries})
    window_days = window.day_count
    quiet_days = max(window_days - active_days, 0)
    contract = InsightContract(
        claim="This week's writing did not form a distinct pattern.",
        evidence=[
            f"{len(window_entries)} {'entry' if len(window_entries) == 1 else 'entries'} "
            f"across {_plural(active_days, 'active day')}",
            f"{_plural(quiet_days, 'day')} with no entries",
        ],
        contrast="No spike, weekday rhythm or cadence shift reached the detection thresholds.",
        confidence=f"Based on {_plural(active_days, 'active day')} within a {window_days}-day window.",
    )
    latest = sorted(window_entries, key=lambda e: e.created_at, reverse=True)[:3]
    return InsightCard(
        id=f"weekly-baseline-{date_key(window.start)}",
        kind=InsightKind.ALWAYS_ON_SUMMARY,
        title=contract.claim,
        explanation=contract.render(),
        evidence=[InsightEvidence(entry_id=e.id, timestamp=e.created_at) for e in latest],
        computed_at=now,
        contract=contract,
        data={
            "summary_type": "baseline",
            "current_week_entries": len(window_entries),
            "current_week_active_days": active_days,
        },
    )


def build_weekly_artifact(
    entries: Sequence[ReflectionEntry],
    window_start: datetime,
    window_end: datetime,
    *,
    now: datetime,
    timezone: Optional[str] = None,
    config: Optional[InsightEngineConfig] = None,
) -> InsightArtifact:
    """Weekly artifact: summary cards first, then timeline spikes."""
    config = config or InsightEngineConfig()
    window = _window(WindowKind.WEEK, window_start, window_end, timezone)
    window_entries = filter_events_by_window(entries, window_start, window_end)
    history = [entry for entry in entries if entry.created_at <= window_end]

    candidates = compute_always_on_summary(
        history, now=window_end, config=config, computed_at=now
    )
    candidates += compute_timeline_spikes(window_entries, now=now, config=config)
    cards, rejected = gate_cards(candidates)

    if not cards and window_entries:
        baseline, baseline_rejected = gate_cards(
            [build_baseline_card(window_entries, window, now)]
        )
        cards.extend(baseline)
        rejected.extend(baseline_rejected)

    logger.debug(
        f"Weekly artifact: {len(cards)} cards kept, {len(rejected)} rejected "
        f"from {len(window_entries)} entries"
    )
    return InsightArtifact(
        horizon=InsightHorizon.WEEKLY,
        window=window,
        created_at=now,
        cards=cards,
        debug=InsightArtifactDebug(
            entries_in_window=len(window_entries),
            rejected_cards=rejected,
        ),
    )


def build_summary_artifact(
    entries: Sequence[ReflectionEntry],
    window_start: datetime,
    window_end: datetime,
    *,
    now: datetime,
    timezone: Optional[str] = None,
    config: Optional[InsightEngineConfig] = None,
) -> InsightArtifact:
    """Summary artifact: gated always-on summary cards for the window."""
    window = _window(WindowKind.CUSTOM, window_start, window_end, timezone)
    window_entries = filter_events_by_window(entries, window_start, window_end)
    candidates = compute_always_on_summary(
        window_entries, now=window_end, config=config, computed_at=now
    )
    cards, rejected = gate_cards(candidates)

    return InsightArtifact(
        horizon=InsightHorizon.SUMMARY,
        window=window,
        created_at=now,
        cards=cards,
        debug=InsightArtifactDebug(
            entries_in_window=len(window_entries),
            rejected_cards=rejected,
        ),
    )


def build_timeline_artifact(
    entries: Sequence[ReflectionEntry],
    window_start: datetime,
    window_end: datetime,
    *,
    now: datetime,
    timezone: Optional[str] = None,
    config: Optional[InsightEngineConfig] = None,
) -> InsightArtifact:
    """Timeline placeholder: window and telemetry, no cards."""
    window = _window(WindowKind.CUSTOM, window_start, window_end, timezone)
    window_entries: List[ReflectionEntry] = filter_events_by_window(
        entries, window_start, window_end
    )
    return InsightArtifact(
        horizon=InsightHorizon.TIMELINE,
        window=window,
        created_at=now,
        cards=[],
        debug=InsightArtifactDebug(entries_in_window=len(window_entries)),
    )
