"""Narrative selection.

Ranks narratives by how much information they carry and keeps the top few,
so the number surfaced per window stays small as patterns accumulate.
"""

from __future__ import annotations

from typing import Iterable, List

from mirrorline.memory.delta import DeltaType
from mirrorline.memory.narratives import PatternNarrative

DELTA_PRIORITY = {
    DeltaType.EMERGENT: 1,
    DeltaType.STRENGTHENING: 2,
    DeltaType.PERSISTENT: 3,
    DeltaType.STABLE: 4,
    DeltaType.FADING: 5,
}


def strength_delta(narrative: PatternNarrative) -> float:
    """Strength change recorded in a narrative's evidence.

    ``current - previous`` from the first item carrying both, else the
    current strength of the first item carrying one, else 0.
    """
    evidence = narrative.evidence
    paired = next(
        (
            item
            for item in evidence
            if item.current_strength is not None and item.previous_strength is not None
        ),
        None,
    )
    if paired is not None:
        return paired.current_strength - paired.previous_strength

    current_only = next((item for item in evidence if item.current_strength is not None), None)
    return current_only.current_strength if current_only is not None else 0.0


def occurrence_count(narrative: PatternNarrative) -> int:
    for item in narrative.evidence:
        if item.occurrence_count is not None:
            return item.occurrence_count
    return 0


def select_narratives(
    narratives: Iterable[PatternNarrative],
    max_narratives: int = 3,
    include_stable: bool = False,
) -> List[PatternNarrative]:
    """Top narratives by category, strength change and occurrence count.

    Args:
        narratives: Candidate narratives
        max_narratives: How many to keep
        include_stable: Keep ``stable`` narratives in the candidate pool

    Returns:
        At most ``max_narratives`` narratives, most informative first
    """
    pool = [
        narrative
        for narrative in narratives
        if include_stable or narrative.delta_type != DeltaType.STABLE
    ]
    ranked = sorted(
        pool,
        key=lambda n: (
            DELTA_PRIORITY[n.delta_type],
            -strength_delta(n),
            -occurrence_count(n),
        ),
    )
    return ranked[: max(max_narratives, 0)]
