"""Pattern narrative generation.

Maps each delta to a fixed title/body pair and assembles evidence from
counts and strengths. Titles and bodies never depend on the data, which
keeps the tone calm and non-evaluative.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from mirrorline.insights.patterns.model import PatternKind
from mirrorline.memory.delta import DeltaType, PatternDelta


NARRATIVE_TEMPLATES: Dict[DeltaType, Tuple[str, str]] = {
    DeltaType.EMERGENT: (
        "A new pattern is forming",
        "This pattern appeared in the latest window and was not present before.",
    ),
    DeltaType.PERSISTENT: (
        "A pattern is repeating",
        "This pattern has shown up across multiple windows, suggesting consistency.",
    ),
    DeltaType.STRENGTHENING: (
        "This pattern is getting stronger",
        "The intensity of this pattern increased compared with the prior window.",
    ),
    DeltaType.FADING: (
        "This pattern is fading",
        "This pattern weakened or stopped appearing compared with the prior window.",
    ),
    DeltaType.STABLE: (
        "Pattern is stable",
        "This pattern remains steady with no meaningful change.",
    ),
}


class NarrativeEvidence(BaseModel):
    """One evidence line of a narrative."""

    label: str
    window_type: Optional[str] = None
    occurrence_count: Optional[int] = None
    previous_strength: Optional[float] = None
    current_strength: Optional[float] = None


class PatternNarrative(BaseModel):
    """Deterministic prose describing one delta."""

    id: str
    kind: PatternKind
    delta_type: DeltaType
    title: str
    body: str
    evidence: List[NarrativeEvidence] = Field(default_factory=list)


def format_strength(strength: float) -> str:
    """Whole percentage, halves rounded up."""
    return f"{math.floor(strength * 100 + 0.5)}%"


def _strength_evidence(delta: PatternDelta) -> Optional[NarrativeEvidence]:
    previous = delta.previous_strength
    current = delta.current_strength

    if previous is None and current is None:
        return None

    if delta.delta_type == DeltaType.FADING and current is None:
        return NarrativeEvidence(label="Stopped appearing", previous_strength=previous)

    if previous is not None and current is not None:
        if current > previous:
            verb = "increased"
        elif current < previous:
            verb = "decreased"
        else:
            return NarrativeEvidence(
                label=f"Strength held at {format_strength(current)}",
                previous_strength=previous,
                current_strength=current,
            )
        return NarrativeEvidence(
            label=(
                f"Strength {verb} from {format_strength(previous)} "
                f"to {format_strength(current)}"
            ),
            previous_strength=previous,
            current_strength=current,
        )

    if current is not None:
        return NarrativeEvidence(
            label=f"Current strength: {format_strength(current)}",
            current_strength=current,
        )

    return NarrativeEvidence(
        label=f"Previous strength: {format_strength(previous)}",
        previous_strength=previous,
    )


def generate_narrative(delta: PatternDelta) -> PatternNarrative:
    """Build the narrative for one delta.

    Evidence order is fixed: occurrence count first, strength second.
    """
    title, body = NARRATIVE_TEMPLATES[delta.delta_type]
    count = delta.occurrence_count
    evidence = [
        NarrativeEvidence(
            label=f"Appeared {count} time{'' if count == 1 else 's'}",
            occurrence_count=count,
        )
    ]
    strength = _strength_evidence(delta)
    if strength is not None:
        evidence.append(strength)

    return PatternNarrative(
        id=delta.id,
        kind=delta.kind,
        delta_type=delta.delta_type,
        title=title,
        body=body,
        evidence=evidence,
    )


def generate_pattern_narratives(deltas: Iterable[PatternDelta]) -> List[PatternNarrative]:
    """Narrative for every delta, in input order.

    Filtering and ranking are left to ``select_narratives``.
    """
    return [generate_narrative(delta) for delta in deltas]
