"""Pattern data models.

A pattern is a detected regularity within one window: a recurring weekday
cluster, an activity spike, a timeline spike. Patterns carry counts, dates
and categorical labels only, never entry text.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class PatternKind(str, Enum):
    """Closed set of semantic pattern kinds."""

    FOCUS = "focus"
    RELATIONSHIPS = "relationships"
    MONEY = "money"
    HEALTH = "health"
    WORK = "work"
    LEARNING = "learning"
    UNCATEGORIZED = "uncategorized"


class PatternEvidence(BaseModel):
    """Evidence chip attached to a pattern."""

    id: str = Field(..., description="Stable evidence identifier")
    label: str = Field(..., description="Categorical label, no entry text")
    window_start: Optional[str] = Field(default=None, description="ISO date the evidence starts")
    window_end: Optional[str] = Field(default=None, description="ISO date the evidence ends")
    count: Optional[int] = Field(default=None, ge=0)
    source: Optional[str] = Field(default=None, description="Where the evidence was counted")


class Pattern(BaseModel):
    """A detected regularity within one window.

    ``id`` comes from ``make_pattern_id`` so that the same real-world
    pattern recomputed later yields an identical id.
    """

    id: str
    kind: PatternKind
    label: str
    strength: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    evidence: List[PatternEvidence] = Field(default_factory=list)


class PatternSet(BaseModel):
    """Flat set of patterns read from one artifact."""

    patterns: List[Pattern] = Field(default_factory=list)
    updated_at: Optional[datetime] = None

    @property
    def ids(self) -> List[str]:
        return [pattern.id for pattern in self.patterns]
