"""Pattern snapshot memory.

A snapshot is the accumulated record of one pattern's appearances across
windows. Snapshots are the only state that survives between invocations;
the caller persists them and hands them back on the next call.

Memory only grows: patterns absent from the current window are carried
over unchanged and nothing is evicted here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from mirrorline.insights.patterns.model import Pattern, PatternKind
from mirrorline.insights.time_windows import utc_now

logger = logging.getLogger(__name__)


class PatternSnapshot(BaseModel):
    """Historical record of a pattern."""

    id: str
    kind: PatternKind
    first_seen: datetime
    last_seen: datetime
    occurrences: int = Field(1, ge=1)
    last_strength: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    windows: List[str] = Field(default_factory=list)


def snapshot_patterns(
    previous: Iterable[PatternSnapshot],
    current: Iterable[Pattern],
    window_kind: Union[Enum, str],
    timestamp: Optional[datetime] = None,
) -> List[PatternSnapshot]:
    """Fold the current window's patterns into the previous snapshots.

    Args:
        previous: Snapshots from earlier invocations
        current: Patterns detected in the current window
        window_kind: Kind of the current window, e.g. ``week``
        timestamp: Observation time (defaults to now)

    Returns:
        Previous snapshots in their original order (updated where the
        pattern reappeared), followed by snapshots for new patterns
    """
    timestamp = timestamp or utc_now()
    kind_value = window_kind.value if isinstance(window_kind, Enum) else str(window_kind)

    by_id: Dict[str, PatternSnapshot] = {}
    for snapshot in previous:
        by_id[snapshot.id] = snapshot

    created = 0
    for pattern in current:
        existing = by_id.get(pattern.id)
        if existing is None:
            by_id[pattern.id] = PatternSnapshot(
                id=pattern.id,
                kind=pattern.kind,
                first_seen=timestamp,
                last_seen=timestamp,
                occurrences=1,
                last_strength=pattern.strength,
                windows=[kind_value],
            )
            created += 1
            continue

        windows = list(existing.windows)
        if kind_value not in windows:
            windows.append(kind_value)
        by_id[pattern.id] = existing.model_copy(
            update={
                "last_seen": timestamp,
                "occurrences": existing.occurrences + 1,
                "last_strength": (
                    pattern.strength
                    if pattern.strength is not None
                    else existing.last_strength
                ),
                "windows": windows,
            }
        )

    logger.debug(f"Snapshot memory holds {len(by_id)} patterns ({created} new)")
    return list(by_id.values())
