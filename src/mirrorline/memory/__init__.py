"""Pattern memory: snapshots, deltas, narratives and selection.

State flows through the caller: previous snapshots in, updated snapshots
out. Nothing in this package keeps module-level state.
"""

from .delta import DeltaType, PatternDelta, analyze_pattern_deltas, classify_delta
from .narratives import (
    NARRATIVE_TEMPLATES,
    NarrativeEvidence,
    PatternNarrative,
    generate_narrative,
    generate_pattern_narratives,
)
from .selection import DELTA_PRIORITY, select_narratives
from .snapshot import PatternSnapshot, snapshot_patterns

__all__ = [
    "DELTA_PRIORITY",
    "DeltaType",
    "NARRATIVE_TEMPLATES",
    "NarrativeEvidence",
    "PatternDelta",
    "PatternNarrative",
    "PatternSnapshot",
    "analyze_pattern_deltas",
    "classify_delta",
    "generate_narrative",
    "generate_pattern_narratives",
    "select_narratives",
    "snapshot_patterns",
]
