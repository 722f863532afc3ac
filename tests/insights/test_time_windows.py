"""Tests for calendar windows and grouping helpers."""

from datetime import date, datetime, timedelta, timezone

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from mirrorline.insights.time_windows import (
    WindowKind,
    current_week,
    date_key,
    day_name,
    filter_events_by_window,
    format_display_date,
    get_window_start_end,
    group_by_day,
    group_by_source,
    lifetime_window,
    normalize_datetime,
    previous_year,
    year_window,
)


class TestNormalizeDatetime:
    """Tests for timestamp normalization."""

    def test_parses_zulu_string_to_naive_utc(self):
        """A ``Z`` suffixed string becomes a naive UTC datetime."""
        assert normalize_datetime("2025-01-06T10:00:00Z") == datetime(2025, 1, 6, 10, 0)

    def test_converts_aware_into_zone(self):
        """Aware values are converted into the requested zone."""
        try:
            ZoneInfo("Europe/Warsaw")
        except ZoneInfoNotFoundError:
            pytest.skip("IANA timezone database not available")
        aware = datetime(2025, 1, 6, 23, 30, tzinfo=timezone.utc)
        assert normalize_datetime(aware, "Europe/Warsaw") == datetime(2025, 1, 7, 0, 30)

    def test_naive_values_untouched(self):
        """Naive values are assumed to be in the target zone already."""
        naive = datetime(2025, 1, 6, 12, 0)
        assert normalize_datetime(naive, "America/New_York") == naive

    def test_date_becomes_midnight(self):
        """Plain dates map to the start of that day."""
        assert normalize_datetime(date(2025, 1, 6)) == datetime(2025, 1, 6)


class TestWindows:
    """Tests for calendar window computation."""

    def test_week_is_monday_to_sunday(self):
        """A Wednesday falls in the week starting the previous Monday."""
        window = get_window_start_end(WindowKind.WEEK, datetime(2025, 1, 8, 15, 0))
        assert window.start == datetime(2025, 1, 6)
        assert window.end == datetime(2025, 1, 12, 23, 59, 59, 999999)
        assert window.day_count == 7

    def test_sunday_stays_in_its_week(self):
        """Sunday is the last day of its week, not the first of the next."""
        window = current_week(datetime(2025, 1, 12, 8, 0))
        assert window.start == datetime(2025, 1, 6)

    def test_month_window(self):
        """Month windows cover the full calendar month."""
        window = get_window_start_end("month", datetime(2024, 2, 10))
        assert window.start == datetime(2024, 2, 1)
        assert window.end.date() == date(2024, 2, 29)
        assert window.label == "February 2024"

    def test_year_windows(self):
        """Year and previous-year windows are calendar aligned."""
        assert year_window(2024).start == datetime(2024, 1, 1)
        assert previous_year(datetime(2025, 3, 1)).end.date() == date(2024, 12, 31)

    def test_lifetime_window_spans_items(self, entry_factory):
        """Lifetime window runs from the first to the last live entry."""
        entries = [
            entry_factory("a", datetime(2024, 3, 1, 10)),
            entry_factory("b", datetime(2025, 1, 2, 18)),
            entry_factory("c", datetime(2020, 1, 1), deleted_at=datetime(2025, 1, 1)),
        ]
        window = lifetime_window(entries)
        assert window.start == datetime(2024, 3, 1)
        assert window.end.date() == date(2025, 1, 2)

    def test_custom_kind_has_no_calendar_window(self):
        """Custom windows must be given explicitly."""
        with pytest.raises(ValueError):
            get_window_start_end(WindowKind.CUSTOM)


class TestGrouping:
    """Tests for filtering and grouping."""

    def test_filter_is_inclusive_and_skips_deleted(self, entry_factory, week_start, week_end):
        """Both bounds are inclusive; deleted entries are dropped."""
        entries = [
            entry_factory("start", week_start),
            entry_factory("end", week_end),
            entry_factory("after", week_end + timedelta(microseconds=1)),
            entry_factory("gone", week_start, deleted_at=week_end),
        ]
        selected = filter_events_by_window(entries, week_start, week_end)
        assert [entry.id for entry in selected] == ["start", "end"]

    def test_group_by_day_sorted_keys(self, entry_factory):
        """Day keys are chronological regardless of input order."""
        entries = [
            entry_factory("late", datetime(2025, 1, 9, 8)),
            entry_factory("early", datetime(2025, 1, 7, 8)),
            entry_factory("early-2", datetime(2025, 1, 7, 20)),
        ]
        grouped = group_by_day(entries)
        assert list(grouped) == ["2025-01-07", "2025-01-09"]
        assert [entry.id for entry in grouped["2025-01-07"]] == ["early", "early-2"]

    def test_group_by_source_defaults_to_unknown(self, entry_factory):
        """Entries without a source id share the ``unknown`` group."""
        grouped = group_by_source([entry_factory("a", datetime(2025, 1, 7))])
        assert list(grouped) == ["unknown"]

    def test_display_helpers(self):
        """Keys, weekday names and display dates are locale independent."""
        moment = datetime(2025, 1, 10, 12)
        assert date_key(moment) == "2025-01-10"
        assert day_name(moment) == "Friday"
        assert format_display_date(moment) == "January 10"
