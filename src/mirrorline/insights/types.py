"""Insight engine data models.

Exchanged entities are pydantic models so hosts can persist and reload them
with ``model_dump(mode="json")`` / ``model_validate``:
- ReflectionEntry / JournalEvent: caller-owned inputs, read-only here
- InsightContract: structured Claim/Evidence/Contrast/Confidence sections
- InsightCard: the atomic unit exposed to the UI
- InsightArtifact: one horizon's output, immutable once produced

Privacy Compliance:
- Cards, narratives and debug payloads reference entry ids, counts and
  dates; entry plaintext never leaves ReflectionEntry
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mirrorline.insights.patterns.model import PatternSet
from mirrorline.insights.time_windows import TimeWindow
from mirrorline.memory.narratives import PatternNarrative
from mirrorline.memory.snapshot import PatternSnapshot


class InsightHorizon(str, Enum):
    """Horizons a host may request.

    Only weekly, summary and timeline are implemented by the engine; the
    rest exist so the request can be named in the error that rejects it.
    """

    WEEKLY = "weekly"
    SUMMARY = "summary"
    TIMELINE = "timeline"
    YEARLY = "yearly"
    LIFETIME = "lifetime"
    YOY = "yoy"
    DISTRIBUTIONS = "distributions"


class InsightKind(str, Enum):
    """Card kinds."""

    TIMELINE_SPIKE = "timeline_spike"
    QUIET_PERIOD = "quiet_period"
    TOPIC_CLUSTER = "topic_cluster"
    ALWAYS_ON_SUMMARY = "always_on_summary"
    LINK_CLUSTER = "link_cluster"
    STREAK_COACH = "streak_coach"
    DISTRIBUTION = "distribution"


# =============================================================================
# Inputs
# =============================================================================


class ReflectionEntry(BaseModel):
    """A decrypted journal entry, soft-deleted by timestamp."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    plaintext: str
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    source_id: Optional[str] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class JournalEvent(BaseModel):
    """Unified event record supplied by the host.

    Only ``journal``/``written`` events with content become reflection
    entries. Timestamp priority is ``occurred_at``, ``created_at``,
    ``event_at``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    event_at: Optional[datetime] = None
    occurred_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    source_kind: str = "journal"
    event_kind: str = "written"
    details: Optional[str] = None

    @property
    def timestamp(self) -> Optional[datetime]:
        return self.occurred_at or self.created_at or self.event_at

    @property
    def is_journal_write(self) -> bool:
        return self.source_kind == "journal" and self.event_kind == "written"


# =============================================================================
# Cards
# =============================================================================


class InsightEvidence(BaseModel):
    """Reference to an entry supporting a card."""

    entry_id: str
    timestamp: datetime


class InsightContract(BaseModel):
    """The four sections every shown insight must carry."""

    claim: str
    evidence: List[str] = Field(default_factory=list)
    contrast: str = ""
    confidence: str = ""

    def render(self) -> str:
        """Labeled explanation text for display and legacy consumers."""
        bullets = "\n".join(f"• {item}" for item in self.evidence)
        return (
            f"{self.claim}\n\n"
            f"Evidence:\n{bullets}\n\n"
            f"Contrast: {self.contrast}\n\n"
            f"Confidence: {self.confidence}"
        )


class InsightCard(BaseModel):
    """A candidate or accepted insight card.

    ``contract`` is set for cards built by the engine; cards coming from
    older hosts carry only the ``explanation`` text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: InsightKind
    title: str
    explanation: str
    evidence: List[InsightEvidence] = Field(default_factory=list)
    computed_at: datetime
    contract: Optional[InsightContract] = None
    data: Dict[str, Any] = Field(default_factory=dict)
    pattern_set: Optional[PatternSet] = None


# =============================================================================
# Artifacts
# =============================================================================


class RejectedCard(BaseModel):
    """Debug record of a card dropped by the contract gate."""

    card_id: str
    kind: str
    reasons: List[str] = Field(default_factory=list)


class InsightArtifactDebug(BaseModel):
    """Diagnostic-only telemetry; not part of the stable contract."""

    event_count: int = 0
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    min_event: Optional[datetime] = None
    max_event: Optional[datetime] = None
    sample_event_ids: List[str] = Field(default_factory=list)
    sample_event_dates: List[str] = Field(default_factory=list)
    entries_in_window: int = 0
    rejected_cards: List[RejectedCard] = Field(default_factory=list)
    narrative_error: Optional[str] = None


class InsightArtifact(BaseModel):
    """Full computed output for one horizon."""

    model_config = ConfigDict(frozen=True)

    horizon: InsightHorizon
    window: TimeWindow
    created_at: datetime
    cards: List[InsightCard] = Field(default_factory=list)
    narratives: Optional[List[PatternNarrative]] = None
    snapshots: Optional[List[PatternSnapshot]] = None
    debug: Optional[InsightArtifactDebug] = None

    def with_narratives(
        self,
        narratives: List[PatternNarrative],
        snapshots: List[PatternSnapshot],
    ) -> "InsightArtifact":
        """Copy with narratives and updated snapshots attached.

        An empty narrative list leaves ``narratives`` unset.
        """
        update: Dict[str, Any] = {"snapshots": list(snapshots)}
        if narratives:
            update["narratives"] = list(narratives)
        return self.model_copy(update=update)

    def with_debug(self, debug: InsightArtifactDebug) -> "InsightArtifact":
        return self.model_copy(update={"debug": debug})
