"""Always-on summary card producer.

Pure function over reflection entries that proposes up to four candidate
cards, each built from an ``InsightContract``:

- writing_change:  clustering of entries compared with the prior week
- consistency:     daily, sporadic or shifted writing cadence
- weekly_pattern:  weekdays that carry most of the writing over six weeks
- activity_spike:  a recent day at least twice the 14-day baseline

"This week" is the seven calendar days ending on ``now``'s day and
"previous week" the seven days before it. Candidates are not gated here;
artifact builders run them through the contract gate.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from mirrorline.insights.config import InsightEngineConfig
from mirrorline.insights.time_windows import (
    WEEKDAY_NAMES,
    date_key,
    day_name,
    start_of_day,
    utc_now,
)
from mirrorline.insights.types import (
    InsightCard,
    InsightContract,
    InsightEvidence,
    InsightKind,
    ReflectionEntry,
)

logger = logging.getLogger(__name__)

SUMMARY_WRITING_CHANGE = "writing_change"
SUMMARY_CONSISTENCY = "consistency"
SUMMARY_WEEKLY_PATTERN = "weekly_pattern"
SUMMARY_ACTIVITY_SPIKE = "activity_spike"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _entries_in_range(
    entries: Iterable[ReflectionEntry],
    start: datetime,
    end: datetime,
) -> List[ReflectionEntry]:
    """Entries with ``start <= created_at < end``."""
    return [
        entry
        for entry in entries
        if not entry.is_deleted and start <= entry.created_at < end
    ]


def _active_day_keys(entries: Iterable[ReflectionEntry]) -> List[str]:
    return sorted({date_key(entry.created_at) for entry in entries})


def _active_day_names(entries: Iterable[ReflectionEntry]) -> List[str]:
    first_by_day: Dict[str, datetime] = {}
    for entry in entries:
        first_by_day.setdefault(date_key(entry.created_at), entry.created_at)
    return [day_name(first_by_day[key]) for key in sorted(first_by_day)]


def _evidence_per_day(entries: Iterable[ReflectionEntry], max_days: int) -> List[InsightEvidence]:
    """One entry per active day, most recent day first."""
    first_by_day: Dict[str, ReflectionEntry] = {}
    for entry in sorted(entries, key=lambda e: e.created_at):
        first_by_day.setdefault(date_key(entry.created_at), entry)
    latest_first = sorted(first_by_day.values(), key=lambda e: e.created_at, reverse=True)
    return [
        InsightEvidence(entry_id=entry.id, timestamp=entry.created_at)
        for entry in latest_first[:max_days]
    ]


def _latest_evidence(entries: Iterable[ReflectionEntry], limit: int) -> List[InsightEvidence]:
    latest_first = sorted(entries, key=lambda e: e.created_at, reverse=True)
    return [
        InsightEvidence(entry_id=entry.id, timestamp=entry.created_at)
        for entry in latest_first[:limit]
    ]


def _join_days(days: List[str]) -> str:
    if len(days) == 1:
        return days[0]
    if len(days) == 2:
        return f"{days[0]} and {days[1]}"
    return ", ".join(days[:-1]) + f", and {days[-1]}"


def _card(
    subtype: str,
    reference_day: str,
    contract: InsightContract,
    evidence: List[InsightEvidence],
    data: Dict[str, Any],
    computed_at: datetime,
) -> InsightCard:
    return InsightCard(
        id=f"always_on_summary-{subtype}-{reference_day}",
        kind=InsightKind.ALWAYS_ON_SUMMARY,
        title=contract.claim,
        explanation=contract.render(),
        evidence=evidence,
        computed_at=computed_at,
        contract=contract,
        data={"summary_type": subtype, **data},
    )


def compute_always_on_summary(
    entries: Iterable[ReflectionEntry],
    now: Optional[datetime] = None,
    config: Optional[InsightEngineConfig] = None,
    computed_at: Optional[datetime] = None,
) -> List[InsightCard]:
    """Propose always-on summary cards for the week ending on ``now``.

    Args:
        entries: Reflection entries (deleted ones are ignored)
        now: Reference moment; its calendar day is "today"
        config: Engine thresholds
        computed_at: Timestamp stamped on the cards (defaults to ``now``)

    Returns:
        Candidate cards in the order writing_change, consistency,
        weekly_pattern, activity_spike
    """
    config = config or InsightEngineConfig()
    now = now or utc_now()
    computed_at = computed_at or now
    active = [entry for entry in entries if not entry.is_deleted]
    if not active:
        return []

    today = start_of_day(now)
    reference_day = date_key(today)
    tomorrow = today + timedelta(days=1)
    week_start = today - timedelta(days=6)
    previous_start = today - timedelta(days=13)

    current_week = _entries_in_range(active, week_start, tomorrow)
    previous_week = _entries_in_range(active, previous_start, week_start)
    current_count = len(current_week)
    previous_count = len(previous_week)

    if current_count == 0 and previous_count == 0:
        return []

    current_days = len(_active_day_keys(current_week))
    previous_days = len(_active_day_keys(previous_week))
    base = {
        "current_week_entries": current_count,
        "previous_week_entries": previous_count,
        "current_week_active_days": current_days,
    }

    cards: List[InsightCard] = []

    # Card 1: writing change
    if previous_count > 0 and current_count > 0:
        current_ratio = current_count / current_days if current_days else 0.0
        previous_ratio = previous_count / previous_days if previous_days else 0.0
        clustered = current_ratio >= config.cluster_ratio
        shifted = abs(current_ratio - previous_ratio) >= config.cluster_ratio_change

        if clustered or shifted:
            claim = (
                "You don't process things gradually. You wait, then commit fully."
                if clustered
                else "Your writing pattern shifted this week."
            )
            evidence_items = [
                f"{current_count} entries across {_plural(current_days, 'active day')} "
                f"({current_ratio:.1f} entries/day)",
                f"Previous week: {previous_count} entries across "
                f"{_plural(previous_days, 'active day')} ({previous_ratio:.1f} entries/day)",
            ]
            if current_days < 7:
                evidence_items.append(f"{_plural(7 - current_days, 'day')} with no entries")
            contrast = (
                "A steady daily cadence was not observed."
                if current_days < 4
                else "No sustained low-level activity pattern detected."
            )
            contract = InsightContract(
                claim=claim,
                evidence=evidence_items,
                contrast=contrast,
                confidence=(
                    "Pattern observed across two consecutive weeks with "
                    "measurable clustering ratio."
                ),
            )
            percent_change = round((current_count - previous_count) / previous_count * 100)
            cards.append(
                _card(
                    SUMMARY_WRITING_CHANGE,
                    reference_day,
                    contract,
                    _evidence_per_day(current_week, 3) + _evidence_per_day(previous_week, 2),
                    {**base, "percent_change": percent_change},
                    computed_at,
                )
            )

    # Card 2: consistency
    if current_count > 0:
        prior_days: Optional[int] = previous_days if previous_count > 0 else None
        daily = current_days == 7
        sporadic = current_days <= 3
        cadence_changed = prior_days is not None and abs(current_days - prior_days) >= 3

        if daily or sporadic or cadence_changed:
            if daily:
                claim = (
                    "You maintain a daily writing cadence. "
                    "Every day this week had at least one entry."
                )
                contrast = "No days were skipped. A sporadic pattern was not observed."
            elif sporadic:
                claim = "Your writing is concentrated on specific days, not spread evenly."
                contrast = "A steady daily cadence was not observed. Most days had zero entries."
            else:
                claim = (
                    f"Your writing cadence shifted from {prior_days} active days "
                    f"to {current_days} active days."
                )
                contrast = (
                    "A consistent cadence pattern was not maintained across "
                    "consecutive weeks."
                )

            evidence_items = [
                f"{current_days} active days out of 7 this week",
                f"{current_count} total entries this week",
            ]
            if prior_days is not None:
                evidence_items.append(
                    f"Previous week: {prior_days} active days with {previous_count} entries"
                )
            if sporadic:
                evidence_items.append(f"{_plural(7 - current_days, 'day')} with no entries")

            if prior_days is not None:
                confidence = (
                    "Pattern observed across two consecutive weeks with measurable "
                    f"active day counts ({prior_days} → {current_days})."
                )
            else:
                confidence = (
                    f"Pattern observed across 7 consecutive days with "
                    f"{current_days} active days."
                )

            contract = InsightContract(
                claim=claim,
                evidence=evidence_items,
                contrast=contrast,
                confidence=confidence,
            )
            cards.append(
                _card(
                    SUMMARY_CONSISTENCY,
                    reference_day,
                    contract,
                    _evidence_per_day(current_week, 7),
                    {**base, "active_day_names": _active_day_names(current_week)},
                    computed_at,
                )
            )

    # Card 3: weekday pattern over the last few weeks
    weeks = config.pattern_weeks
    if len(active) >= config.pattern_min_entries:
        history_start = today - timedelta(days=weeks * 7 - 1)
        history = _entries_in_range(active, history_start, tomorrow)

        if len(history) >= config.pattern_min_entries:
            by_weekday: Dict[int, List[ReflectionEntry]] = defaultdict(list)
            for entry in history:
                by_weekday[entry.created_at.weekday()].append(entry)

            min_count = -(-weeks // 2)
            pattern_indices = [
                index
                for index in range(7)
                if len(by_weekday[index]) / weeks >= config.pattern_min_weekly_average
                and len(by_weekday[index]) >= min_count
            ]

            if 0 < len(pattern_indices) < 7:
                pattern_days = [WEEKDAY_NAMES[index] for index in pattern_indices]
                pattern_total = sum(len(by_weekday[index]) for index in pattern_indices)
                per_pattern_day = pattern_total / (weeks * len(pattern_indices))
                average = config.pattern_min_weekly_average

                contract = InsightContract(
                    claim=f"You tend to write most on {_join_days(pattern_days)}.",
                    evidence=[
                        f"Pattern observed across {weeks} weeks",
                        f"{_plural(len(pattern_days), 'day')} of the week show consistent activity",
                        f"Average {per_pattern_day:.1f} entries per day on pattern days",
                    ],
                    contrast=(
                        "A uniform distribution across all 7 days was not observed. "
                        "Activity is concentrated on specific days."
                    ),
                    confidence=(
                        f"Pattern detected across {weeks} consecutive weeks with activity on "
                        f"{_plural(len(pattern_days), 'day')}, meeting threshold of "
                        f"{average:g} entries per week average."
                    ),
                )
                evidence: List[InsightEvidence] = []
                for index in pattern_indices:
                    evidence.extend(_latest_evidence(by_weekday[index], 2))
                cards.append(
                    _card(
                        SUMMARY_WEEKLY_PATTERN,
                        reference_day,
                        contract,
                        evidence[:6],
                        {
                            **base,
                            "pattern_days": pattern_days,
                            "pattern_share": round(pattern_total / len(history), 3),
                        },
                        computed_at,
                    )
                )

    # Card 4: activity spike against the recent baseline
    if current_count > 0 and len(active) >= config.activity_spike_min_entries:
        baseline_days = config.activity_spike_baseline_days
        baseline_entries = _entries_in_range(
            active, today - timedelta(days=baseline_days - 1), tomorrow
        )
        baseline_average = len(baseline_entries) / baseline_days

        for offset in range(7):
            day = today - timedelta(days=offset)
            day_entries = _entries_in_range(active, day, day + timedelta(days=1))
            spike_count = len(day_entries)
            if not (
                spike_count >= 2
                and baseline_average > 0
                and spike_count >= baseline_average * config.spike_min_multiplier
            ):
                continue

            spike_day = day_name(day)
            contract = InsightContract(
                claim=f"You had a spike in writing activity on {spike_day}.",
                evidence=[
                    f"{spike_count} entries on {spike_day}",
                    f"Baseline average: {baseline_average:.1f} entries per day "
                    f"over last {baseline_days} days",
                    f"Spike is {spike_count / baseline_average:.1f}× above baseline",
                ],
                contrast=(
                    "A steady, uniform writing pattern was not observed. "
                    "This day exceeded the baseline by at least "
                    f"{config.spike_min_multiplier:g}×."
                ),
                confidence=(
                    f"Spike detected using {baseline_days}-day baseline "
                    f"({len(baseline_entries)} entries) with threshold of "
                    f"{config.spike_min_multiplier:g}× baseline "
                    f"average ({baseline_average:.1f} entries/day). "
                    f"Spike day had {spike_count} entries."
                ),
            )
            cards.append(
                _card(
                    SUMMARY_ACTIVITY_SPIKE,
                    reference_day,
                    contract,
                    _latest_evidence(day_entries, 5),
                    {
                        **base,
                        "spike_date": date_key(day),
                        "spike_day_name": spike_day,
                        "spike_count": spike_count,
                        "baseline_count": round(baseline_average, 1),
                    },
                    computed_at,
                )
            )
            break

    logger.debug(
        f"Always-on summary proposed {len(cards)} cards "
        f"({current_count} entries this week, {previous_count} previous)"
    )
    return cards
