"""Pattern extraction from computed artifacts.

Read-only: derives a flat, de-duplicated pattern set from an artifact's
cards without modifying the artifact. Pattern ids are built from
categorical attributes (signal, weekday, date) so the same regularity found
again in a later window maps to the same id.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from mirrorline.insights.patterns.identity import make_pattern_id
from mirrorline.insights.patterns.model import Pattern, PatternEvidence, PatternKind, PatternSet
from mirrorline.insights.time_windows import date_key, utc_now
from mirrorline.insights.types import InsightArtifact, InsightCard, InsightKind

logger = logging.getLogger(__name__)

SIGNAL_WEEKDAY_CLUSTER = "weekday-cluster"
SIGNAL_ACTIVITY_SPIKE = "activity-spike"
SIGNAL_TIMELINE_SPIKE = "timeline-spike"


def _weekday_pattern(card: InsightCard, window_start: str, window_end: str) -> Optional[Pattern]:
    days = card.data.get("pattern_days") or []
    if not days:
        return None
    label = f"Writing pattern: {', '.join(days)}"
    share = card.data.get("pattern_share")
    return Pattern(
        id=make_pattern_id(
            PatternKind.UNCATEGORIZED,
            {"signal": SIGNAL_WEEKDAY_CLUSTER, "days": " ".join(days)},
        ),
        kind=PatternKind.UNCATEGORIZED,
        label=label,
        strength=min(1.0, share) if share is not None else None,
        evidence=[
            PatternEvidence(
                id=f"evidence-{card.id}-pattern-days",
                label=label,
                window_start=window_start,
                window_end=window_end,
                count=card.data.get("current_week_entries"),
                source="reflections",
            )
        ],
    )


def _activity_spike_pattern(card: InsightCard) -> Optional[Pattern]:
    if card.data.get("summary_type") != "activity_spike" or not card.data.get("spike_date"):
        return None
    spike_date = card.data["spike_date"]
    day = card.data.get("spike_day_name") or spike_date
    spike_count = card.data.get("spike_count")
    baseline = card.data.get("baseline_count")

    strength = None
    if spike_count and baseline:
        strength = max(0.0, min(1.0, (spike_count - baseline) / baseline))

    label = f"Activity spike on {day}"
    return Pattern(
        id=make_pattern_id(
            PatternKind.UNCATEGORIZED,
            {"signal": SIGNAL_ACTIVITY_SPIKE, "day": day},
        ),
        kind=PatternKind.UNCATEGORIZED,
        label=label,
        strength=strength,
        evidence=[
            PatternEvidence(
                id=f"evidence-{card.id}-spike",
                label=label,
                window_start=spike_date,
                window_end=spike_date,
                count=spike_count,
                source="reflections",
            )
        ],
    )


def _timeline_spike_pattern(card: InsightCard) -> Optional[Pattern]:
    spike_date = card.data.get("date")
    if not spike_date:
        return None
    multiplier = card.data.get("multiplier")
    label = f"Timeline spike on {spike_date}"
    return Pattern(
        id=make_pattern_id(
            PatternKind.UNCATEGORIZED,
            {"signal": SIGNAL_TIMELINE_SPIKE, "date": spike_date},
        ),
        kind=PatternKind.UNCATEGORIZED,
        label=label,
        strength=min(1.0, multiplier / 10) if multiplier else None,
        evidence=[
            PatternEvidence(
                id=f"evidence-{card.id}-timeline-spike",
                label=label,
                window_start=spike_date,
                window_end=spike_date,
                count=card.data.get("count"),
                source="reflections",
            )
        ],
    )


def extract_patterns_from_artifact(
    artifact: InsightArtifact,
    now: Optional[datetime] = None,
) -> PatternSet:
    """Collect the patterns an artifact's cards describe.

    Args:
        artifact: Computed artifact
        now: Timestamp for ``updated_at`` (defaults to now)

    Returns:
        PatternSet de-duplicated by id, first occurrence kept
    """
    window_start = date_key(artifact.window.start)
    window_end = date_key(artifact.window.end)
    found: List[Pattern] = []

    for card in artifact.cards:
        if card.pattern_set is not None:
            found.extend(card.pattern_set.patterns)

        if card.kind == InsightKind.ALWAYS_ON_SUMMARY:
            for pattern in (
                _weekday_pattern(card, window_start, window_end),
                _activity_spike_pattern(card),
            ):
                if pattern is not None:
                    found.append(pattern)
        elif card.kind == InsightKind.TIMELINE_SPIKE:
            pattern = _timeline_spike_pattern(card)
            if pattern is not None:
                found.append(pattern)

    unique: Dict[str, Pattern] = {}
    for pattern in found:
        unique.setdefault(pattern.id, pattern)

    logger.debug(f"Extracted {len(unique)} patterns from {len(artifact.cards)} cards")
    return PatternSet(patterns=list(unique.values()), updated_at=now or utc_now())
