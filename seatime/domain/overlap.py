"""
Overlap detection between a candidate seatime range and stored ranges.

Ranges are half-open by default: a sign-off at 12:00 followed by a sign-on
at 12:00 aboard another vessel does not overlap. Passing ``inclusive=True``
treats both endpoints as part of the range.
"""

from typing import Any, Iterable, Mapping, Optional, Tuple

from pendulum import DateTime

from .duration import elapsed_minutes, parse_instant, round_half_up
from .exceptions import InvalidRange, InvalidRecord
from .models import OverlapResult, OverlappingEntry, TimeRange


def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    raise InvalidRecord(f"Record is missing the '{names[0]}' field")


def _bounds(record: Any) -> Tuple[DateTime, DateTime]:
    start = parse_instant(_field(record, "start_at", "startAt"))
    end = parse_instant(_field(record, "end_at", "endAt"))
    if end < start:
        raise InvalidRange(f"Range ends before it starts: {start.to_iso8601_string()} - {end.to_iso8601_string()}")
    return start, end


def ranges_overlap(range1: Any, range2: Any, inclusive: bool = False) -> bool:
    """Check if two ranges intersect."""
    start1, end1 = _bounds(range1)
    start2, end2 = _bounds(range2)

    if inclusive:
        return start1 <= end2 and start2 <= end1
    return start1 < end2 and start2 < end1


def calculate_overlap_hours(range1: Any, range2: Any, inclusive: bool = False) -> float:
    """
    Calculate the hours two ranges share.

    Returns 0.0 when the ranges do not overlap.
    """
    if not ranges_overlap(range1, range2, inclusive=inclusive):
        return 0.0

    start1, end1 = _bounds(range1)
    start2, end2 = _bounds(range2)

    overlap_start = max(start1, start2)
    overlap_end = min(end1, end2)

    return round_half_up(elapsed_minutes(overlap_start, overlap_end) / 60)


def check_overlaps(
    candidate: Any,
    existing_entries: Iterable[Any],
    exclude_id: Optional[str] = None,
    inclusive: bool = False,
) -> OverlapResult:
    """
    Check a candidate range against stored entries.

    Args:
        candidate: TimeRange (or anything exposing start_at/end_at)
        existing_entries: Records exposing id, start_at and end_at, either as
            attributes or as mapping keys
        exclude_id: Id of a record to skip, used when re-checking an entry
            that is being updated
        inclusive: Whether touching endpoints count as overlap

    Returns:
        OverlapResult listing overlapping records in input order

    Raises:
        InvalidDate: If a start or end cannot be parsed
        InvalidRecord: If a record lacks its id, start or end
        InvalidRange: If the candidate or a record ends before it starts
    """
    start, end = _bounds(candidate)
    candidate_range = TimeRange(start_at=start, end_at=end)

    overlapping = []

    for entry in existing_entries:
        entry_id = _field(entry, "id")
        if exclude_id is not None and str(entry_id) == str(exclude_id):
            continue

        entry_start, entry_end = _bounds(entry)
        entry_range = TimeRange(start_at=entry_start, end_at=entry_end)

        if ranges_overlap(candidate_range, entry_range, inclusive=inclusive):
            overlapping.append(
                OverlappingEntry(
                    id=entry_id,
                    start_at=entry_start,
                    end_at=entry_end,
                    overlap_hours=calculate_overlap_hours(
                        candidate_range, entry_range, inclusive=inclusive
                    ),
                )
            )

    return OverlapResult(overlapping_entries=overlapping)
