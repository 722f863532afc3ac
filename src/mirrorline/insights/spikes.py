"""Timeline spike detection.

Groups entries by calendar day, takes the median daily count as the
baseline and flags days at or above ``spike_min_multiplier`` times the
median with at least ``spike_min_count`` entries. Analysis needs at least
``spike_min_days`` active days.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

import numpy as np

from mirrorline.insights.config import InsightEngineConfig
from mirrorline.insights.time_windows import format_display_date, group_by_day, utc_now
from mirrorline.insights.types import (
    InsightCard,
    InsightContract,
    InsightEvidence,
    InsightKind,
    ReflectionEntry,
)

logger = logging.getLogger(__name__)


def compute_timeline_spikes(
    entries: Iterable[ReflectionEntry],
    now: Optional[datetime] = None,
    config: Optional[InsightEngineConfig] = None,
) -> List[InsightCard]:
    """Propose one timeline spike card per spike day, newest first.

    Args:
        entries: Reflection entries (deleted ones are ignored)
        now: Computation timestamp stamped on the cards
        config: Engine thresholds

    Returns:
        Candidate cards built from an ``InsightContract``
    """
    config = config or InsightEngineConfig()
    now = now or utc_now()

    by_day = group_by_day(entry for entry in entries if not entry.is_deleted)
    if len(by_day) < config.spike_min_days:
        return []

    counts = [len(day_entries) for day_entries in by_day.values()]
    median = float(np.median(counts))
    effective_median = median if median > 0 else 1.0
    active_days = len(by_day)

    cards: List[InsightCard] = []
    for key, day_entries in by_day.items():
        count = len(day_entries)
        multiplier = count / effective_median
        if multiplier < config.spike_min_multiplier or count < config.spike_min_count:
            continue

        day = date.fromisoformat(key)
        shown = format_display_date(day)
        rounded = round(multiplier, 1)
        contract = InsightContract(
            claim=f"Writing clustered on {shown} compared with your other active days.",
            evidence=[
                f"{count} entries on {shown}",
                f"Median of {effective_median:g} entries per active day across "
                f"{active_days} active days",
                f"{rounded:g}× the median daily count",
            ],
            contrast="Writing did not stay at its usual daily level on this day.",
            confidence=f"Compared against the median of {active_days} active days in this window.",
        )
        ordered = sorted(day_entries, key=lambda e: e.created_at)
        cards.append(
            InsightCard(
                id=f"timeline_spike-{key}",
                kind=InsightKind.TIMELINE_SPIKE,
                title=f"Writing spike on {shown}",
                explanation=contract.render(),
                evidence=[
                    InsightEvidence(entry_id=entry.id, timestamp=entry.created_at)
                    for entry in ordered
                ],
                computed_at=now,
                contract=contract,
                data={
                    "date": key,
                    "count": count,
                    "median_count": round(effective_median, 1),
                    "multiplier": rounded,
                },
            )
        )

    cards.sort(key=lambda card: card.data["date"], reverse=True)
    logger.debug(f"Found {len(cards)} timeline spikes across {active_days} active days")
    return cards
