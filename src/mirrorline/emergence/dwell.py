"""Regime dwell time tracking.

Measures how long the current regime has held within one session. State
is passed by value: the previous ``RegimeDwellState`` in, the new one out.
A new session start or a regime change resets the dwell to zero.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from mirrorline.emergence.regime import EmergenceRegime

logger = logging.getLogger(__name__)


class RegimeDwellState(BaseModel):
    """Dwell state for one session.

    ``entry_timestamp`` stays pinned to the moment the regime was entered.
    """

    current_regime: EmergenceRegime
    entry_timestamp: datetime
    session_start: datetime
    dwell_duration_ms: int = 0


def track_regime_dwell_time(
    current_regime: Union[EmergenceRegime, str],
    session_start: datetime,
    current_time: datetime,
    previous_dwell_state: Optional[RegimeDwellState] = None,
) -> RegimeDwellState:
    """Advance the dwell state to ``current_time``.

    Args:
        current_regime: Regime observed now
        session_start: Start of the session being tracked
        current_time: Observation time
        previous_dwell_state: State returned by the previous call

    Returns:
        New dwell state; the previous state is not modified
    """
    regime = EmergenceRegime(current_regime)
    previous = previous_dwell_state

    if previous is None or previous.session_start != session_start or previous.current_regime != regime:
        return RegimeDwellState(
            current_regime=regime,
            entry_timestamp=current_time,
            session_start=session_start,
            dwell_duration_ms=0,
        )

    elapsed = current_time - previous.entry_timestamp
    return RegimeDwellState(
        current_regime=regime,
        entry_timestamp=previous.entry_timestamp,
        session_start=session_start,
        dwell_duration_ms=int(elapsed.total_seconds() * 1000),
    )


def dwell_seconds(state: RegimeDwellState) -> float:
    return state.dwell_duration_ms / 1000


def dwell_minutes(state: RegimeDwellState) -> float:
    return state.dwell_duration_ms / (1000 * 60)
