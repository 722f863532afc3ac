"""Pattern model and identity.

Extraction lives in ``mirrorline.insights.patterns.extraction`` and is not
re-exported here because it depends on the card types.
"""

from .identity import make_pattern_id, normalize_attribute_value
from .model import Pattern, PatternEvidence, PatternKind, PatternSet

__all__ = [
    "Pattern",
    "PatternEvidence",
    "PatternKind",
    "PatternSet",
    "make_pattern_id",
    "normalize_attribute_value",
]
