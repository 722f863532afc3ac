"""Calendar-aligned time windows and timestamp grouping.

Windows are computed freshly per call and never stored. Weeks start on
Monday at 00:00 and end on Sunday at 23:59:59.999999; months and years are
calendar aligned. All engine comparisons use naive datetimes expressed in
one zone: ``normalize_datetime`` converts aware values into the requested
IANA zone (UTC when none is given) and drops the tzinfo.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, TypeVar, Union
from zoneinfo import ZoneInfo

from pydantic import BaseModel


T = TypeVar("T")

WEEKDAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

EPOCH = datetime(1970, 1, 1)


class WindowKind(str, Enum):
    """Kinds of time windows."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    LIFETIME = "lifetime"
    CUSTOM = "custom"


class TimeWindow(BaseModel):
    """A calendar range with inclusive bounds."""

    kind: WindowKind
    start: datetime
    end: datetime
    label: str = ""
    timezone: Optional[str] = None

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def day_count(self) -> int:
        return (self.end.date() - self.start.date()).days + 1


# =============================================================================
# Timestamp helpers
# =============================================================================


def utc_now() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_datetime(
    value: Union[datetime, date, str],
    tz: Optional[str] = None,
) -> datetime:
    """Parse and normalize a timestamp to a naive datetime.

    Args:
        value: datetime, date or ISO-8601 string (``Z`` suffix accepted)
        tz: IANA zone name aware values are converted into

    Returns:
        Naive datetime in ``tz`` (or UTC)
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    elif not isinstance(value, datetime):
        value = datetime.combine(value, time.min)

    if value.tzinfo is not None:
        target = ZoneInfo(tz) if tz else timezone.utc
        value = value.astimezone(target).replace(tzinfo=None)
    return value


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max)


def date_key(moment: Union[datetime, date]) -> str:
    """``YYYY-MM-DD`` key for a moment."""
    return moment.strftime("%Y-%m-%d")


def day_name(moment: Union[datetime, date]) -> str:
    """English weekday name, independent of locale."""
    return WEEKDAY_NAMES[moment.weekday()]


def format_display_date(moment: Union[datetime, date]) -> str:
    """Month and day for display, e.g. ``November 30``."""
    return f"{calendar.month_name[moment.month]} {moment.day}"


def item_timestamp(item: Any) -> Optional[datetime]:
    """Best timestamp for an event or reflection entry."""
    stamp = getattr(item, "timestamp", None)
    if stamp is None:
        stamp = getattr(item, "created_at", None)
    return stamp


def _is_deleted(item: Any) -> bool:
    return getattr(item, "deleted_at", None) is not None


# =============================================================================
# Windows
# =============================================================================


def get_window_start_end(
    kind: Union[WindowKind, str],
    reference: Optional[datetime] = None,
) -> TimeWindow:
    """Compute the calendar window of ``kind`` containing ``reference``.

    Args:
        kind: week, month, year or lifetime
        reference: Moment inside the window (defaults to now)

    Returns:
        TimeWindow with inclusive bounds
    """
    kind = WindowKind(kind)
    reference = reference or utc_now()
    day = reference.date()

    if kind == WindowKind.WEEK:
        first = day - timedelta(days=day.weekday())
        last = first + timedelta(days=6)
        label = f"Week of {date_key(first)}"
    elif kind == WindowKind.MONTH:
        first = day.replace(day=1)
        last = day.replace(day=calendar.monthrange(day.year, day.month)[1])
        label = f"{calendar.month_name[day.month]} {day.year}"
    elif kind == WindowKind.YEAR:
        first = date(day.year, 1, 1)
        last = date(day.year, 12, 31)
        label = str(day.year)
    elif kind == WindowKind.LIFETIME:
        first = EPOCH.date()
        last = day
        label = "Lifetime"
    else:
        raise ValueError(f"Cannot derive a calendar window for kind {kind.value}")

    return TimeWindow(
        kind=kind,
        start=datetime.combine(first, time.min),
        end=datetime.combine(last, time.max),
        label=label,
    )


def current_week(now: Optional[datetime] = None) -> TimeWindow:
    return get_window_start_end(WindowKind.WEEK, now)


def current_year(now: Optional[datetime] = None) -> TimeWindow:
    return get_window_start_end(WindowKind.YEAR, now)


def year_window(year: int) -> TimeWindow:
    return get_window_start_end(WindowKind.YEAR, datetime(year, 6, 1))


def previous_year(now: Optional[datetime] = None) -> TimeWindow:
    now = now or utc_now()
    return year_window(now.year - 1)


def lifetime_window(items: Iterable[Any], now: Optional[datetime] = None) -> TimeWindow:
    """Window spanning the earliest to the latest item.

    With no timestamped items the window collapses to the current day.
    """
    stamps = [
        stamp
        for stamp in (item_timestamp(item) for item in items if not _is_deleted(item))
        if stamp is not None
    ]
    now = now or utc_now()
    first = min(stamps) if stamps else now
    last = max(stamps) if stamps else now
    return TimeWindow(
        kind=WindowKind.LIFETIME,
        start=start_of_day(first),
        end=end_of_day(last),
        label="Lifetime",
    )


# =============================================================================
# Filtering and grouping
# =============================================================================


def filter_events_by_window(
    items: Iterable[T],
    start: datetime,
    end: datetime,
) -> List[T]:
    """Items whose timestamp lies in ``[start, end]``.

    Soft-deleted entries and items without a timestamp are dropped.
    """
    selected = []
    for item in items:
        if _is_deleted(item):
            continue
        stamp = item_timestamp(item)
        if stamp is None:
            continue
        if start <= stamp <= end:
            selected.append(item)
    return selected


def group_by_day(items: Iterable[T]) -> Dict[str, List[T]]:
    """Group items by ``YYYY-MM-DD``, keys in chronological order."""
    grouped: Dict[str, List[T]] = defaultdict(list)
    for item in items:
        if _is_deleted(item):
            continue
        stamp = item_timestamp(item)
        if stamp is None:
            continue
        grouped[date_key(stamp)].append(item)
    return {key: grouped[key] for key in sorted(grouped)}


def group_by_source(items: Iterable[T]) -> Dict[str, List[T]]:
    """Group items by ``source_id`` (entries) or ``source_kind`` (events)."""
    grouped: Dict[str, List[T]] = defaultdict(list)
    for item in items:
        if _is_deleted(item):
            continue
        source = getattr(item, "source_id", None) or getattr(item, "source_kind", None)
        grouped[source or "unknown"].append(item)
    return dict(grouped)
