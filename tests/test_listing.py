"""
Tests for entry listings and calendar month views.
"""

import pendulum
import pytest

from seatime.domain.exceptions import InvalidDate
from seatime.domain.listing import EntryFilter, entries_in_month, list_entries, month_window
from seatime.domain.models import SeatimeEntry


def _entry(
    entry_id: str,
    start: str,
    end: str,
    vessel_id: str = "mv-aurora",
    company_id: str = "acme",
    rank: str = "Second Officer",
    is_verified: bool = False,
) -> SeatimeEntry:
    start_at = pendulum.parse(start)
    end_at = pendulum.parse(end)
    hours = (end_at - start_at).total_seconds() / 3600
    return SeatimeEntry(
        id=entry_id,
        vessel_id=vessel_id,
        company_id=company_id,
        rank=rank,
        start_at=start_at,
        end_at=end_at,
        computed_duration_hours=hours,
        computed_duration_days=hours / 24,
        is_verified=is_verified,
    )


@pytest.fixture
def entries():
    return [
        _entry("1", "2023-01-01", "2023-02-01", rank="Third Officer", is_verified=True),
        _entry("2", "2023-06-01", "2023-07-01", vessel_id="mv-borealis"),
        _entry("3", "2024-01-10", "2024-03-10", company_id="blue-sea", rank="Second Officer"),
        _entry("4", "2024-05-01", "2024-05-11", rank="Chief Officer", is_verified=True),
    ]


class TestListEntries:
    """Tests for list_entries."""

    def test_most_recent_first(self, entries):
        page = list_entries(entries)

        assert [entry.id for entry in page.entries] == ["4", "3", "2", "1"]
        assert page.total == 4
        assert page.totals.total_days == 31 + 30 + 60 + 10

    def test_date_window(self, entries):
        page = list_entries(
            entries,
            EntryFilter(start=pendulum.datetime(2023, 6, 1), end=pendulum.datetime(2024, 3, 10)),
        )

        assert [entry.id for entry in page.entries] == ["3", "2"]

    def test_entry_crossing_window_end_is_excluded(self, entries):
        page = list_entries(entries, EntryFilter(end=pendulum.datetime(2024, 3, 1)))

        assert [entry.id for entry in page.entries] == ["2", "1"]

    def test_vessel_and_company(self, entries):
        assert [e.id for e in list_entries(entries, EntryFilter(vessel_id="mv-borealis")).entries] == ["2"]
        assert [e.id for e in list_entries(entries, EntryFilter(company_id="blue-sea")).entries] == ["3"]

    def test_rank_matches_substring(self, entries):
        page = list_entries(entries, EntryFilter(rank="Officer"))
        assert page.total == 4

        page = list_entries(entries, EntryFilter(rank="Chief"))
        assert [entry.id for entry in page.entries] == ["4"]

    @pytest.mark.parametrize("verified,expected", [(True, ["4", "1"]), (False, ["3", "2"])])
    def test_verified(self, entries, verified, expected):
        page = list_entries(entries, EntryFilter(verified=verified))

        assert [entry.id for entry in page.entries] == expected

    def test_pagination_keeps_totals_over_all_matches(self, entries):
        page = list_entries(entries, limit=2, offset=1)

        assert [entry.id for entry in page.entries] == ["3", "2"]
        assert page.total == 4
        assert page.limit == 2
        assert page.offset == 1
        assert page.totals.total_days == 131

    def test_no_match(self, entries):
        page = list_entries(entries, EntryFilter(vessel_id="nowhere"))

        assert page.entries == []
        assert page.total == 0
        assert page.totals.total_days == 0


class TestEntriesInMonth:
    """Tests for the calendar month view."""

    def test_month_window(self):
        start, end = month_window(2024, 2)

        assert start == pendulum.datetime(2024, 2, 1)
        assert end.day == 29
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    def test_invalid_month(self):
        with pytest.raises(InvalidDate):
            month_window(2024, 13)

    def test_starts_ends_or_spans_month(self):
        entries = [
            _entry("spans", "2024-01-10", "2024-04-01"),
            _entry("ends", "2024-01-20", "2024-02-05"),
            _entry("inside", "2024-02-10", "2024-02-12"),
            _entry("starts", "2024-02-25", "2024-03-20"),
            _entry("before", "2024-01-01", "2024-01-31"),
            _entry("after", "2024-03-01", "2024-03-05"),
        ]

        result = entries_in_month(entries, 2024, 2)

        assert [entry.id for entry in result] == ["spans", "ends", "inside", "starts"]

    def test_earliest_first(self):
        entries = [
            _entry("late", "2024-02-20", "2024-02-22"),
            _entry("early", "2024-02-02", "2024-02-04"),
        ]

        assert [entry.id for entry in entries_in_month(entries, 2024, 2)] == ["early", "late"]

    def test_window_follows_timezone(self):
        """23:30 UTC on Jan 31 is already February in Berlin."""
        entries = [_entry("night", "2024-01-31T23:30:00Z", "2024-01-31T23:45:00Z")]

        assert entries_in_month(entries, 2024, 2) == []
        assert [entry.id for entry in entries_in_month(entries, 2024, 2, timezone="Europe/Berlin")] == ["night"]
