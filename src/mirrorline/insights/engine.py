"""Insight engine orchestrator.

``compute_insights_for_window`` is the single entry point hosts call:

1. Events are converted to reflection entries on the requested timezone.
2. A horizon-specific builder produces the base artifact. Unknown or
   unimplemented horizons raise ``UnsupportedHorizonError``.
3. The narrative stage extracts patterns from the artifact's cards, folds
   them into the caller's snapshots, diffs the two snapshot sets and
   attaches the top narratives.

The narrative stage is best-effort. Its failures are logged, recorded in
the debug payload and discarded; the base artifact is returned unchanged.

Privacy Compliance:
- Debug telemetry carries entry ids and dates, never content
- Snapshots returned to the caller hold pattern ids, counts and strengths
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from mirrorline.errors import InvalidWindowError, MirrorlineError, UnsupportedHorizonError
from mirrorline.insights.adapters import EventLike, coerce_events, events_to_reflection_entries
from mirrorline.insights.artifacts import (
    build_summary_artifact,
    build_timeline_artifact,
    build_weekly_artifact,
)
from mirrorline.insights.config import InsightEngineConfig
from mirrorline.insights.patterns.extraction import extract_patterns_from_artifact
from mirrorline.insights.time_windows import WindowKind, date_key, normalize_datetime, utc_now
from mirrorline.insights.types import (
    InsightArtifact,
    InsightArtifactDebug,
    InsightHorizon,
    JournalEvent,
)
from mirrorline.memory.delta import PatternDelta, analyze_pattern_deltas
from mirrorline.memory.narratives import PatternNarrative, generate_pattern_narratives
from mirrorline.memory.selection import select_narratives
from mirrorline.memory.snapshot import PatternSnapshot, snapshot_patterns

logger = logging.getLogger(__name__)

ArtifactBuilder = Callable[..., InsightArtifact]
SnapshotLike = Union[PatternSnapshot, Mapping[str, Any]]

_BUILDERS: Dict[InsightHorizon, ArtifactBuilder] = {
    InsightHorizon.WEEKLY: build_weekly_artifact,
    InsightHorizon.SUMMARY: build_summary_artifact,
    InsightHorizon.TIMELINE: build_timeline_artifact,
}

_NARRATIVE_WINDOW_KIND: Dict[InsightHorizon, WindowKind] = {
    InsightHorizon.WEEKLY: WindowKind.WEEK,
    InsightHorizon.SUMMARY: WindowKind.WEEK,
    InsightHorizon.TIMELINE: WindowKind.MONTH,
}

# Data-shaped failures the narrative stage may discard. Anything else is a
# programming error and propagates.
NARRATIVE_STAGE_ERRORS = (MirrorlineError, ValueError, LookupError, ArithmeticError)

_SAMPLE_SIZE = 3


@dataclass
class NarrativeStageResult:
    """Outcome of the narrative stage.

    Attributes:
        narratives: Selected narratives, empty when none qualified
        snapshots: Updated snapshot set for the caller to persist
        deltas: Every delta computed for this window
        error: Failure description when the stage was discarded
    """

    narratives: List[PatternNarrative] = field(default_factory=list)
    snapshots: List[PatternSnapshot] = field(default_factory=list)
    deltas: List[PatternDelta] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_horizon(horizon: Union[InsightHorizon, str]) -> InsightHorizon:
    """Map a requested horizon to one the engine builds.

    Raises:
        UnsupportedHorizonError: For unknown names and horizons without a builder
    """
    try:
        resolved = InsightHorizon(horizon)
    except ValueError:
        raise UnsupportedHorizonError(str(horizon)) from None
    if resolved not in _BUILDERS:
        raise UnsupportedHorizonError(resolved.value)
    return resolved


def _coerce_snapshots(snapshots: Optional[Iterable[SnapshotLike]]) -> List[PatternSnapshot]:
    if not snapshots:
        return []
    return [
        snapshot if isinstance(snapshot, PatternSnapshot) else PatternSnapshot.model_validate(snapshot)
        for snapshot in snapshots
    ]


def _run_narrative_stage(
    artifact: InsightArtifact,
    previous_snapshots: Sequence[SnapshotLike],
    *,
    now: datetime,
    config: InsightEngineConfig,
) -> NarrativeStageResult:
    try:
        previous = _coerce_snapshots(previous_snapshots)
        pattern_set = extract_patterns_from_artifact(artifact, now=now)
        snapshots = snapshot_patterns(
            previous,
            pattern_set.patterns,
            _NARRATIVE_WINDOW_KIND[artifact.horizon],
            timestamp=now,
        )
        deltas = analyze_pattern_deltas(
            previous,
            snapshots,
            persistence_threshold=config.persistence_threshold,
            strengthening_threshold=config.strengthening_threshold,
        )
        narratives = select_narratives(
            generate_pattern_narratives(deltas),
            max_narratives=config.max_narratives_for(artifact.horizon.value),
            include_stable=config.include_stable,
        )
    except NARRATIVE_STAGE_ERRORS as exc:
        return NarrativeStageResult(error=f"{type(exc).__name__}: {exc}")

    logger.debug(
        f"Narrative stage: {len(pattern_set.patterns)} patterns, "
        f"{len(deltas)} deltas, {len(narratives)} narratives selected"
    )
    return NarrativeStageResult(narratives=narratives, snapshots=snapshots, deltas=deltas)


def _collect_debug(
    events: Sequence[JournalEvent],
    window_start: datetime,
    window_end: datetime,
    base: Optional[InsightArtifactDebug],
    timezone: Optional[str],
) -> InsightArtifactDebug:
    stamps = [
        normalize_datetime(event.timestamp, timezone)
        for event in events
        if event.timestamp is not None
    ]
    samples = events[:_SAMPLE_SIZE]
    return InsightArtifactDebug(
        event_count=len(events),
        window_start=window_start,
        window_end=window_end,
        min_event=min(stamps) if stamps else None,
        max_event=max(stamps) if stamps else None,
        sample_event_ids=[event.id for event in samples],
        sample_event_dates=[
            date_key(normalize_datetime(event.timestamp, timezone))
            if event.timestamp is not None
            else "invalid"
            for event in samples
        ],
        entries_in_window=base.entries_in_window if base else 0,
        rejected_cards=list(base.rejected_cards) if base else [],
    )


def compute_insights_for_window(
    horizon: Union[InsightHorizon, str],
    events: Iterable[EventLike],
    window_start: Union[datetime, str],
    window_end: Union[datetime, str],
    timezone: Optional[str] = None,
    wallet: Optional[str] = None,
    previous_snapshots: Optional[Sequence[SnapshotLike]] = None,
    *,
    now: Optional[datetime] = None,
    config: Optional[InsightEngineConfig] = None,
) -> InsightArtifact:
    """Compute the insight artifact for one horizon and window.

    Args:
        horizon: ``weekly``, ``summary`` or ``timeline``
        events: Host events (JournalEvent instances or plain mappings)
        window_start: Inclusive window start
        window_end: Inclusive window end
        timezone: IANA zone used for calendar days (UTC when omitted)
        wallet: Caller identity, used only for log context
        previous_snapshots: Snapshots returned by the previous invocation
        now: Computation timestamp (defaults to now)
        config: Engine thresholds

    Returns:
        Artifact with gated cards, optional narratives, the updated snapshot
        set and debug telemetry

    Raises:
        UnsupportedHorizonError: If the horizon is unknown or not implemented
        InvalidWindowError: If ``window_start`` is after ``window_end``
        InvalidEventError: If an event record is malformed
    """
    resolved = resolve_horizon(horizon)
    config = config or InsightEngineConfig()
    now = now or utc_now()

    start = normalize_datetime(window_start, timezone)
    end = normalize_datetime(window_end, timezone)
    if start > end:
        raise InvalidWindowError(
            f"Window start {start.isoformat()} is after window end {end.isoformat()}",
            details={"window_start": start.isoformat(), "window_end": end.isoformat()},
        )

    journal_events = coerce_events(events)
    entries = events_to_reflection_entries(journal_events, timezone=timezone)

    builder = _BUILDERS[resolved]
    artifact = builder(entries, start, end, now=now, timezone=timezone, config=config)

    stage = _run_narrative_stage(artifact, previous_snapshots or [], now=now, config=config)
    debug = _collect_debug(journal_events, start, end, artifact.debug, timezone)

    if stage.ok:
        artifact = artifact.with_narratives(stage.narratives, stage.snapshots)
    else:
        logger.warning(f"Narrative stage discarded for {resolved.value} artifact: {stage.error}")
        debug.narrative_error = stage.error

    logger.info(
        f"Computed {resolved.value} artifact"
        f"{f' for {wallet}' if wallet else ''}: "
        f"{len(artifact.cards)} cards, "
        f"{len(artifact.narratives or [])} narratives from {len(journal_events)} events"
    )
    return artifact.with_debug(debug)
