"""Emergence regime overlay.

Read-only classification of how much meaning is active, plus dwell time
tracking. Nothing in this package imports the insight engine or pattern
memory, and neither of them imports this package.
"""

from .dwell import RegimeDwellState, dwell_minutes, dwell_seconds, track_regime_dwell_time
from .regime import EmergenceRegime, detect_emergence_regime
from .store import RegimeDwellStore

__all__ = [
    "EmergenceRegime",
    "RegimeDwellState",
    "RegimeDwellStore",
    "detect_emergence_regime",
    "dwell_minutes",
    "dwell_seconds",
    "track_regime_dwell_time",
]
