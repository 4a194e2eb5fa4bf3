"""
Domain models for seatime ranges, durations and engine results.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pendulum import DateTime


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable sign-on/sign-off range.

    Construction does not check the order: an inverted range is rejected
    by validation, the duration calculator or the overlap detector.
    """
    start_at: DateTime
    end_at: DateTime


@dataclass(frozen=True)
class SeatimeDuration:
    """Elapsed time of a range, every field rounded to 2 decimals."""
    total_hours: float
    total_days: float
    whole_days: int
    remaining_hours: float


@dataclass(frozen=True)
class ExistingEntry:
    """A stored interval as fetched for overlap checking."""
    id: str
    start_at: DateTime
    end_at: DateTime


@dataclass(frozen=True)
class OverlappingEntry:
    """A stored interval that intersects the candidate."""
    id: str
    start_at: DateTime
    end_at: DateTime
    overlap_hours: float


@dataclass
class OverlapResult:
    overlapping_entries: List[OverlappingEntry] = field(default_factory=list)

    @property
    def has_overlap(self) -> bool:
        return bool(self.overlapping_entries)


@dataclass
class ValidationResult:
    """
    Outcome of validating a candidate entry.

    Errors are hard failures; warnings are advisory and never affect
    ``is_valid``.
    """
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class SeatimeEntry:
    """
    A recorded period of sea service as supplied by the storage layer.
    """
    id: str
    vessel_id: str
    company_id: str
    rank: str
    start_at: DateTime
    end_at: DateTime
    computed_duration_hours: float
    computed_duration_days: float
    is_verified: bool = False
    has_overlap_approval: bool = False
    overlap_reason: Optional[str] = None
    vessel_name: Optional[str] = None
    company_name: Optional[str] = None

    def as_existing(self) -> ExistingEntry:
        return ExistingEntry(id=self.id, start_at=self.start_at, end_at=self.end_at)


@dataclass
class GroupTotals:
    """Accumulated hours, days and entry count for one group."""
    hours: float = 0.0
    days: float = 0.0
    count: int = 0
    # display name of the vessel or company, when known
    name: Optional[str] = None

    def add(self, hours: float, days: float) -> None:
        self.hours += hours
        self.days += days
        self.count += 1


@dataclass(frozen=True)
class SeatimeTotals:
    total_hours: float
    total_days: float


@dataclass
class CycleSummary:
    """
    Sea service accumulated within a renewal cycle, measured against the
    seafarer's targets.
    """
    cycle_start: DateTime
    cycle_end: DateTime
    target_sea_days: float
    target_sea_hours: float
    total_entries: int
    total_days: float
    total_hours: float
    verified_days: float
    verified_hours: float
    unverified_entries: int
    progress_days: float
    progress_hours: float
    by_year: Dict[int, GroupTotals] = field(default_factory=dict)
    by_vessel: Dict[str, GroupTotals] = field(default_factory=dict)
    by_rank: Dict[str, GroupTotals] = field(default_factory=dict)
    by_company: Dict[str, GroupTotals] = field(default_factory=dict)
