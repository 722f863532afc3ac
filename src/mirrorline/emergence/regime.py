"""Emergence regime classification.

Classifies how much meaning is currently active from the count of active
meaning nodes. Pure and stateless: the same count always yields the same
regime, and crossing a boundary changes the regime immediately.

This signal is read-only. It must not feed back into pattern detection,
decay or card validation.
"""

from __future__ import annotations

from enum import Enum

MAX_ACTIVE_NODES = 8
SILENCE_MAX_NODES = 1
SPARSE_MAX_NODES = 4


class EmergenceRegime(str, Enum):
    SILENCE_DOMINANT = "silence-dominant"
    SPARSE_MEANING = "sparse-meaning"
    DENSE_MEANING = "dense-meaning"


def detect_emergence_regime(active_meaning_node_count: int) -> EmergenceRegime:
    """Regime for an active node count.

    The count is clamped to ``[0, 8]``: 0-1 is silence-dominant, 2-4
    sparse-meaning, 5-8 dense-meaning.
    """
    count = max(0, min(MAX_ACTIVE_NODES, active_meaning_node_count))
    if count <= SILENCE_MAX_NODES:
        return EmergenceRegime.SILENCE_DOMINANT
    if count <= SPARSE_MAX_NODES:
        return EmergenceRegime.SPARSE_MEANING
    return EmergenceRegime.DENSE_MEANING
