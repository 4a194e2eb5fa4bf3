"""
Queries over stored entries: filtered listings and calendar month views.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import pendulum
from pendulum import DateTime

from .aggregator import calculate_total_seatime
from .exceptions import InvalidDate
from .models import SeatimeEntry, SeatimeTotals


@dataclass(frozen=True)
class EntryFilter:
    """
    Criteria for listing entries. Criteria left as None do not filter.

    ``start`` keeps entries signing on at or after it, ``end`` keeps
    entries signing off at or before it. ``rank`` matches as a substring.
    """
    start: Optional[DateTime] = None
    end: Optional[DateTime] = None
    vessel_id: Optional[str] = None
    company_id: Optional[str] = None
    rank: Optional[str] = None
    verified: Optional[bool] = None

    def matches(self, entry: SeatimeEntry) -> bool:
        if self.start is not None and entry.start_at < self.start:
            return False
        if self.end is not None and entry.end_at > self.end:
            return False
        if self.vessel_id and entry.vessel_id != self.vessel_id:
            return False
        if self.company_id and entry.company_id != self.company_id:
            return False
        if self.rank and self.rank not in entry.rank:
            return False
        if self.verified is not None and entry.is_verified != self.verified:
            return False
        return True


@dataclass
class EntryPage:
    """One page of a filtered listing, with totals over every match."""
    entries: List[SeatimeEntry]
    total: int
    limit: int
    offset: int
    totals: SeatimeTotals


def list_entries(
    entries: Iterable[SeatimeEntry],
    entry_filter: Optional[EntryFilter] = None,
    limit: int = 100,
    offset: int = 0,
) -> EntryPage:
    """
    List entries matching a filter, most recent sign-on first.

    ``total`` and ``totals`` cover every matching entry, not just the page.
    """
    entry_filter = entry_filter or EntryFilter()
    matching = [entry for entry in entries if entry_filter.matches(entry)]
    matching.sort(key=lambda entry: entry.start_at, reverse=True)

    return EntryPage(
        entries=matching[offset:offset + limit],
        total=len(matching),
        limit=limit,
        offset=offset,
        totals=calculate_total_seatime(matching),
    )


def month_window(year: int, month: int, timezone: str = "UTC") -> Tuple[DateTime, DateTime]:
    """
    First and last instant of a calendar month in the given timezone.

    Raises:
        InvalidDate: If year or month is out of range
    """
    try:
        first = pendulum.datetime(year, month, 1, tz=timezone)
    except ValueError as exc:
        raise InvalidDate(f"Invalid calendar month: {year}-{month}") from exc
    return first, first.end_of("month")


def entries_in_month(
    entries: Iterable[SeatimeEntry],
    year: int,
    month: int,
    timezone: str = "UTC",
) -> List[SeatimeEntry]:
    """
    Entries that touch a calendar month, earliest sign-on first.

    An entry is shown if it signs on or off within the month, or spans the
    whole month.
    """
    window_start, window_end = month_window(year, month, timezone)

    def touches(entry: SeatimeEntry) -> bool:
        return (
            window_start <= entry.start_at <= window_end
            or window_start <= entry.end_at <= window_end
            or (entry.start_at <= window_start and entry.end_at >= window_end)
        )

    return sorted(
        (entry for entry in entries if touches(entry)),
        key=lambda entry: entry.start_at,
    )
