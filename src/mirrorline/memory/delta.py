"""Pattern delta analyzer.

Classifies how each pattern changed between two snapshot states. The
classification is total: every id in ``previous ∪ current`` yields exactly
one delta.

Precedence, first match wins:
1. no previous snapshot            -> emergent
2. occurrences >= persistence      -> persistent
3. strength rose by the threshold  -> strengthening
4. strength fell or disappeared    -> fading
5. otherwise                       -> stable

Persistence deliberately outranks a same-window strength jump.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from mirrorline.insights.patterns.model import PatternKind
from mirrorline.memory.snapshot import PatternSnapshot

# Strength differences are rounded before comparison so that 0.7 - 0.5
# counts as a 0.2 increase.
_STRENGTH_PRECISION = 6


class DeltaType(str, Enum):
    """Categories of pattern change."""

    EMERGENT = "emergent"
    PERSISTENT = "persistent"
    STRENGTHENING = "strengthening"
    FADING = "fading"
    STABLE = "stable"


class PatternDelta(BaseModel):
    """Classified change of one pattern. A view, never stored."""

    id: str
    kind: PatternKind
    delta_type: DeltaType
    previous_strength: Optional[float] = None
    current_strength: Optional[float] = None
    occurrence_count: int


def classify_delta(
    previous: Optional[PatternSnapshot],
    current: PatternSnapshot,
    *,
    persistence_threshold: int = 3,
    strengthening_threshold: float = 0.2,
) -> DeltaType:
    """Classify one pattern against its previous snapshot."""
    if previous is None:
        return DeltaType.EMERGENT

    if current.occurrences >= persistence_threshold:
        return DeltaType.PERSISTENT

    prev_strength = previous.last_strength
    cur_strength = current.last_strength

    if prev_strength is not None and cur_strength is not None:
        change = round(cur_strength - prev_strength, _STRENGTH_PRECISION)
        if change >= strengthening_threshold:
            return DeltaType.STRENGTHENING

    if prev_strength is not None and (cur_strength is None or cur_strength < prev_strength):
        return DeltaType.FADING

    return DeltaType.STABLE


def analyze_pattern_deltas(
    previous: Iterable[PatternSnapshot],
    current: Iterable[PatternSnapshot],
    *,
    persistence_threshold: int = 3,
    strengthening_threshold: float = 0.2,
) -> List[PatternDelta]:
    """Diff two snapshot sets.

    Args:
        previous: Snapshot set before this window
        current: Snapshot set after this window
        persistence_threshold: Occurrences that make a pattern persistent
        strengthening_threshold: Strength increase that counts as strengthening

    Returns:
        Deltas for ``current`` in order, then synthetic ``fading`` deltas for
        ids only found in ``previous``
    """
    previous_by_id: Dict[str, PatternSnapshot] = {}
    for snapshot in previous:
        previous_by_id.setdefault(snapshot.id, snapshot)

    deltas: List[PatternDelta] = []
    seen: set[str] = set()

    for snapshot in current:
        if snapshot.id in seen:
            continue
        seen.add(snapshot.id)

        prior = previous_by_id.get(snapshot.id)
        delta_type = classify_delta(
            prior,
            snapshot,
            persistence_threshold=persistence_threshold,
            strengthening_threshold=strengthening_threshold,
        )
        deltas.append(
            PatternDelta(
                id=snapshot.id,
                kind=snapshot.kind,
                delta_type=delta_type,
                previous_strength=prior.last_strength if prior else None,
                current_strength=snapshot.last_strength,
                occurrence_count=snapshot.occurrences,
            )
        )

    for snapshot_id, prior in previous_by_id.items():
        if snapshot_id in seen:
            continue
        seen.add(snapshot_id)
        deltas.append(
            PatternDelta(
                id=prior.id,
                kind=prior.kind,
                delta_type=DeltaType.FADING,
                previous_strength=prior.last_strength,
                current_strength=None,
                occurrence_count=prior.occurrences,
            )
        )

    return deltas
