"""Shared fixtures for Mirrorline tests."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

import pytest

from mirrorline.insights.types import JournalEvent, ReflectionEntry

# Monday
WEEK_START = datetime(2025, 1, 6)
WEEK_END = datetime(2025, 1, 12, 23, 59, 59, 999999)


def make_entry(
    entry_id: str,
    created_at: datetime,
    plaintext: str = "private text",
    deleted_at: Optional[datetime] = None,
) -> ReflectionEntry:
    return ReflectionEntry(
        id=entry_id,
        created_at=created_at,
        plaintext=plaintext,
        deleted_at=deleted_at,
    )


def make_event(event_id: str, occurred_at: datetime, details: str = "private text") -> Dict:
    return {
        "id": event_id,
        "event_at": occurred_at.isoformat(),
        "occurred_at": occurred_at.isoformat(),
        "source_kind": "journal",
        "event_kind": "written",
        "details": details,
    }


@pytest.fixture
def week_start() -> datetime:
    return WEEK_START


@pytest.fixture
def week_end() -> datetime:
    return WEEK_END


@pytest.fixture
def entry_factory() -> Callable[..., ReflectionEntry]:
    return make_entry


@pytest.fixture
def spike_week_events() -> List[Dict]:
    """Eight journal events: Tuesday 1, Wednesday 2, Friday 5."""
    layout = {1: 1, 2: 2, 4: 5}
    events: List[Dict] = []
    for offset, count in layout.items():
        day = WEEK_START + timedelta(days=offset)
        for index in range(count):
            moment = day + timedelta(hours=9 + index)
            events.append(make_event(f"evt-{offset}-{index}", moment))
    return events


@pytest.fixture
def spike_week_entries(spike_week_events: List[Dict]) -> List[ReflectionEntry]:
    return [
        make_entry(event["id"], datetime.fromisoformat(event["occurred_at"]))
        for event in spike_week_events
    ]


@pytest.fixture
def journal_event() -> JournalEvent:
    return JournalEvent(
        id="evt-1",
        event_at=datetime(2025, 1, 7, 9, 0),
        details="private text",
    )
