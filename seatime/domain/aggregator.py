"""
Aggregation of stored seatime entries into totals and groupings.

Sums are plain float accumulation; only the overall totals are rounded.
"""

from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from .duration import round_half_up
from .models import CycleSummary, GroupTotals, SeatimeEntry, SeatimeTotals


def calculate_total_seatime(entries: Iterable[Any]) -> SeatimeTotals:
    """Sum computed durations over all entries."""
    total_hours = 0.0
    total_days = 0.0

    for entry in entries:
        total_hours += entry.computed_duration_hours
        total_days += entry.computed_duration_days

    return SeatimeTotals(
        total_hours=round_half_up(total_hours),
        total_days=round_half_up(total_days),
    )


def _group_by(
    entries: Iterable[Any],
    key: Callable[[Any], Hashable],
    name: Optional[Callable[[Any], Optional[str]]] = None,
) -> Dict[Hashable, GroupTotals]:
    """Group entries by key, preserving first-seen key order."""
    grouped: Dict[Hashable, GroupTotals] = {}

    for entry in entries:
        totals = grouped.setdefault(key(entry), GroupTotals())
        totals.add(entry.computed_duration_hours, entry.computed_duration_days)
        if name is not None and totals.name is None:
            totals.name = name(entry)

    return grouped


def group_by_year(
    entries: Iterable[Any],
    timezone: Optional[str] = None,
) -> Dict[int, GroupTotals]:
    """
    Group entries by calendar year of their sign-on.

    Args:
        entries: Entries exposing start_at and computed durations
        timezone: Timezone in which the year is read; defaults to the
            timezone each start_at carries
    """
    def year_of(entry: Any) -> int:
        start = entry.start_at
        if timezone:
            start = pendulum.instance(start).in_timezone(timezone)
        return start.year

    return _group_by(entries, year_of)


def group_by_vessel(entries: Iterable[Any]) -> Dict[str, GroupTotals]:
    return _group_by(
        entries,
        lambda entry: entry.vessel_id,
        name=lambda entry: getattr(entry, "vessel_name", None),
    )


def group_by_rank(entries: Iterable[Any]) -> Dict[str, GroupTotals]:
    return _group_by(entries, lambda entry: entry.rank)


def group_by_company(entries: Iterable[Any]) -> Dict[str, GroupTotals]:
    return _group_by(
        entries,
        lambda entry: entry.company_id,
        name=lambda entry: getattr(entry, "company_name", None),
    )


GROUPINGS = {
    "year": group_by_year,
    "vessel": group_by_vessel,
    "rank": group_by_rank,
    "company": group_by_company,
}


def _progress(total: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return round_half_up(min(total / target * 100, 100))


def summarize_cycle(
    entries: Iterable[SeatimeEntry],
    target_sea_days: float,
    target_sea_hours: float,
    renewal_cycle_years: int = 5,
    cycle_start: Optional[DateTime] = None,
    now: Optional[DateTime] = None,
    timezone: Optional[str] = None,
) -> CycleSummary:
    """
    Summarise sea service within the current renewal cycle.

    Only entries that start on or after the cycle start and have ended by
    ``now`` count toward the cycle.

    Args:
        entries: Stored entries of one seafarer
        target_sea_days: Days of sea service required for the cycle
        target_sea_hours: Hours of sea service required for the cycle
        renewal_cycle_years: Cycle length in 365-day years, used when
            cycle_start is not given
        cycle_start: Explicit start of the renewal cycle
        now: Reference instant, defaults to the wall clock
        timezone: Timezone for the by-year grouping
    """
    now = now or pendulum.now()
    cycle_start = cycle_start or now.subtract(days=365 * renewal_cycle_years)

    in_cycle: List[SeatimeEntry] = [
        entry for entry in entries
        if entry.start_at >= cycle_start and entry.end_at <= now
    ]
    verified = [entry for entry in in_cycle if entry.is_verified]

    totals = calculate_total_seatime(in_cycle)
    verified_totals = calculate_total_seatime(verified)

    return CycleSummary(
        cycle_start=cycle_start,
        cycle_end=now,
        target_sea_days=target_sea_days,
        target_sea_hours=target_sea_hours,
        total_entries=len(in_cycle),
        total_days=totals.total_days,
        total_hours=totals.total_hours,
        verified_days=verified_totals.total_days,
        verified_hours=verified_totals.total_hours,
        unverified_entries=len(in_cycle) - len(verified),
        progress_days=_progress(totals.total_days, target_sea_days),
        progress_hours=_progress(totals.total_hours, target_sea_hours),
        by_year=group_by_year(in_cycle, timezone=timezone),
        by_vessel=group_by_vessel(in_cycle),
        by_rank=group_by_rank(in_cycle),
        by_company=group_by_company(in_cycle),
    )
