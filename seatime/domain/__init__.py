"""
Domain layer - Pure seatime calculations without I/O.
"""

from .aggregator import (
    calculate_total_seatime,
    group_by_company,
    group_by_rank,
    group_by_vessel,
    group_by_year,
    summarize_cycle,
)
from .duration import calculate_duration, parse_instant
from .exceptions import InvalidDate, InvalidRange, InvalidRecord, SeatimeError
from .listing import EntryFilter, entries_in_month, list_entries
from .models import (
    ExistingEntry,
    OverlapResult,
    SeatimeDuration,
    SeatimeEntry,
    TimeRange,
    ValidationResult,
)
from .overlap import calculate_overlap_hours, check_overlaps, ranges_overlap
from .validator import EntryValidator, ValidationRules, validate_entry

__all__ = [
    "TimeRange",
    "SeatimeDuration",
    "SeatimeEntry",
    "ExistingEntry",
    "OverlapResult",
    "ValidationResult",
    "SeatimeError",
    "InvalidDate",
    "InvalidRange",
    "InvalidRecord",
    "calculate_duration",
    "parse_instant",
    "ranges_overlap",
    "calculate_overlap_hours",
    "check_overlaps",
    "EntryValidator",
    "ValidationRules",
    "validate_entry",
    "calculate_total_seatime",
    "group_by_year",
    "group_by_vessel",
    "group_by_rank",
    "group_by_company",
    "summarize_cycle",
    "EntryFilter",
    "list_entries",
    "entries_in_month",
]
