"""Deterministic pattern identity.

Maps ``(kind, attributes)`` to ``"<kind>:<k1>=<v1>,<k2>=<v2>"`` with sorted
keys and normalized values, so the same pattern found in different windows
or with attributes supplied in a different order gets a byte-identical id.
"""

from __future__ import annotations

import re
from typing import Mapping, Union

from mirrorline.insights.patterns.model import PatternKind

AttributeValue = Union[str, int, float]

_NON_WORD = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def normalize_attribute_value(value: AttributeValue) -> str:
    """Lower-case, trim, strip punctuation and hyphenate whitespace.

    Example:
        >>> normalize_attribute_value("  Team Meetings! ")
        'team-meetings'
    """
    text = str(value).lower().strip()
    text = _NON_WORD.sub("", text)
    text = _WHITESPACE.sub("-", text)
    text = _HYPHEN_RUN.sub("-", text)
    return text.strip("-")


def make_pattern_id(
    kind: Union[PatternKind, str],
    attributes: Mapping[str, AttributeValue] | None = None,
) -> str:
    """Build the stable id for a pattern.

    Args:
        kind: Pattern kind
        attributes: Values uniquely identifying the pattern instance

    Returns:
        ``"<kind>:<k1>=<v1>,..."``; an empty mapping gives ``"<kind>:"``
    """
    kind_value = kind.value if isinstance(kind, PatternKind) else str(kind)
    attributes = attributes or {}
    parts = [
        f"{key}={normalize_attribute_value(attributes[key])}"
        for key in sorted(attributes)
    ]
    return f"{kind_value}:{','.join(parts)}"
