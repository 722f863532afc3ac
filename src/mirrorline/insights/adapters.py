"""Adapters from host event records to reflection entries.

Every artifact builder reads entries through ``events_to_reflection_entries``
so timestamp selection is identical across horizons.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from mirrorline.errors import InvalidEventError
from mirrorline.insights.time_windows import normalize_datetime
from mirrorline.insights.types import JournalEvent, ReflectionEntry

logger = logging.getLogger(__name__)

EventLike = Union[JournalEvent, Mapping[str, Any]]


def coerce_event(raw: EventLike) -> JournalEvent:
    """Validate one host record into a JournalEvent.

    Raises:
        InvalidEventError: If the record is malformed
    """
    if isinstance(raw, JournalEvent):
        return raw
    try:
        return JournalEvent.model_validate(raw)
    except ValidationError as exc:
        event_id = raw.get("id", "unknown") if isinstance(raw, Mapping) else "unknown"
        raise InvalidEventError(
            f"Event {event_id} is invalid: {exc.error_count()} validation error(s)",
            details={"event_id": event_id},
        ) from exc


def coerce_events(raw_events: Iterable[EventLike]) -> List[JournalEvent]:
    return [coerce_event(raw) for raw in raw_events]


def events_to_reflection_entries(
    events: Iterable[JournalEvent],
    timezone: Optional[str] = None,
) -> List[ReflectionEntry]:
    """Convert journal-write events into reflection entries.

    Args:
        events: Host events
        timezone: IANA zone used to place entries on calendar days

    Returns:
        One entry per ``journal``/``written`` event that has content and a
        timestamp, in input order
    """
    entries: List[ReflectionEntry] = []
    skipped = 0
    for event in events:
        if not event.is_journal_write or not event.details:
            skipped += 1
            continue
        stamp = event.timestamp
        if stamp is None:
            logger.debug(f"Skipping event {event.id}: no timestamp")
            skipped += 1
            continue
        entries.append(
            ReflectionEntry(
                id=event.id,
                created_at=normalize_datetime(stamp, timezone),
                plaintext=event.details,
            )
        )

    if skipped:
        logger.debug(f"Converted {len(entries)} events to entries, skipped {skipped}")
    return entries
