"""Insight Engine Configuration Module.

Defines the thresholds used by card producers, the pattern delta analyzer
and the narrative selector:
- InsightEngineConfig: every numeric knob of one engine invocation

Privacy Compliance:
- Thresholds only; no field can carry entry text
- Defaults reproduce the calibrated production behaviour exactly
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class InsightEngineConfig:
    """Configuration for one insight engine invocation.

    All settings have sensible defaults; a default-constructed config yields
    the canonical engine behaviour.

    Example:
        >>> config = InsightEngineConfig(
        ...     weekly_max_narratives=5,  # Surface more narratives per week
        ...     include_stable=True,
        ... )
    """

    # Pattern delta classification
    persistence_threshold: int = 3
    """Occurrences at which a pattern counts as persistent. Default: 3."""

    strengthening_threshold: float = 0.2
    """Minimum strength increase for a strengthening delta. Default: 0.2."""

    # Narrative selection
    weekly_max_narratives: int = 3
    """Narratives attached to weekly artifacts. Default: 3."""

    default_max_narratives: int = 2
    """Narratives attached to summary and timeline artifacts. Default: 2."""

    include_stable: bool = False
    """Whether stable deltas may surface as narratives. Default: False."""

    # Timeline spike detection
    spike_min_multiplier: float = 2.0
    """Day count over median daily count needed for a spike. Default: 2.0."""

    spike_min_count: int = 3
    """Minimum entries on a spike day. Default: 3."""

    spike_min_days: int = 3
    """Active days needed before spikes are analysed. Default: 3."""

    # Always-on summary
    cluster_ratio: float = 2.0
    """Entries per active day that indicate clustered writing. Default: 2.0."""

    cluster_ratio_change: float = 0.5
    """Week-over-week ratio change that counts as a shift. Default: 0.5."""

    pattern_weeks: int = 6
    """Weeks of history used for weekday pattern detection. Default: 6."""

    pattern_min_entries: int = 10
    """Entries needed in the pattern history. Default: 10."""

    pattern_min_weekly_average: float = 2.0
    """Average entries per week for a weekday to qualify. Default: 2.0."""

    activity_spike_baseline_days: int = 14
    """Calendar days in the activity spike baseline. Default: 14."""

    activity_spike_min_entries: int = 7
    """Entries needed before activity spikes are analysed. Default: 7."""

    # Distribution narratives
    year_high_confidence_min_events: int = 100
    """Events a year view needs to keep high confidence. Default: 100."""

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.persistence_threshold < 1:
            raise ValueError("persistence_threshold must be at least 1")

        if not 0.0 < self.strengthening_threshold <= 1.0:
            raise ValueError("strengthening_threshold must be in (0, 1]")

        if self.weekly_max_narratives < 0 or self.default_max_narratives < 0:
            raise ValueError("max narratives cannot be negative")

        if self.spike_min_multiplier <= 1.0:
            raise ValueError("spike_min_multiplier must exceed 1.0")

        if self.pattern_weeks < 1:
            raise ValueError("pattern_weeks must be positive")

    def max_narratives_for(self, horizon: str) -> int:
        """Narrative limit for a horizon."""
        if horizon == "weekly":
            return self.weekly_max_narratives
        return self.default_max_narratives
