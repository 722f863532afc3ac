"""Host-owned dwell state store.

Keeps one ``RegimeDwellState`` per key (wallet or session id). The host
creates and owns the store; nothing here is module-level, so two stores
never share state.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterator, Optional

from mirrorline.emergence.dwell import RegimeDwellState, track_regime_dwell_time
from mirrorline.emergence.regime import detect_emergence_regime

logger = logging.getLogger(__name__)


class RegimeDwellStore:
    """Per-key regime dwell states.

    Example:
        >>> store = RegimeDwellStore()
        >>> state = store.observe("wallet-1", 3, session_start, now)
    """

    def __init__(self) -> None:
        self._states: Dict[str, RegimeDwellState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, key: object) -> bool:
        return key in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def get(self, key: str) -> Optional[RegimeDwellState]:
        return self._states.get(key)

    def observe(
        self,
        key: str,
        active_meaning_node_count: int,
        session_start: datetime,
        current_time: datetime,
    ) -> RegimeDwellState:
        """Classify the count and advance the key's dwell state."""
        regime = detect_emergence_regime(active_meaning_node_count)
        previous = self._states.get(key)
        state = track_regime_dwell_time(regime, session_start, current_time, previous)
        if previous is not None and previous.current_regime != state.current_regime:
            logger.debug(
                f"Regime for {key} changed: {previous.current_regime.value} -> "
                f"{state.current_regime.value}"
            )
        self._states[key] = state
        return state

    def reset(self, key: str) -> None:
        self._states.pop(key, None)

    def clear(self) -> None:
        self._states.clear()
