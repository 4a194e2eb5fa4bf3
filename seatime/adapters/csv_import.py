"""
Bulk import of seatime entries from a CSV file.

Expected headers (case-insensitive): vessel, company, rank, start, end.
Vessels and companies are identified by name. A row that fails is counted
and reported; it never aborts the rest of the import.
"""

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from ..domain.duration import calculate_duration, parse_instant
from ..domain.exceptions import InvalidImport, SeatimeError
from ..domain.models import SeatimeEntry

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("vessel", "company", "rank", "start", "end")


@dataclass
class ImportResult:
    """Outcome of an import: counts plus one message per failed row."""
    success: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)
    entries: List[SeatimeEntry] = field(default_factory=list)


def _normalise(row: Dict[str, str]) -> Dict[str, str]:
    return {
        (key or "").strip().lower(): (value or "").strip()
        for key, value in row.items()
        if isinstance(value, str) or value is None
    }


def _row_to_entry(row: Dict[str, str], entry_id: str) -> SeatimeEntry:
    start = parse_instant(row["start"])
    end = parse_instant(row["end"])
    duration = calculate_duration(start, end)

    return SeatimeEntry(
        id=entry_id,
        vessel_id=row["vessel"],
        company_id=row["company"],
        rank=row["rank"],
        start_at=start,
        end_at=end,
        computed_duration_hours=duration.total_hours,
        computed_duration_days=duration.total_days,
        vessel_name=row["vessel"],
        company_name=row["company"],
    )


def import_csv(path: Path, first_id: int = 1) -> ImportResult:
    """
    Read entries from a CSV file.

    Args:
        path: CSV file with a header row
        first_id: Id given to the first imported entry; later entries count up

    Returns:
        ImportResult with the imported entries and per-row errors

    Raises:
        InvalidImport: If the file is missing, has no header or no data rows
    """
    if not path.exists():
        raise InvalidImport(f"Import file not found: {path}")

    with open(path, "r", encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))

    if not rows:
        raise InvalidImport("CSV file must have headers and at least one data row")

    result = ImportResult()
    next_id = first_id

    for number, raw in enumerate(rows, start=1):
        row = _normalise(raw)
        try:
            if any(not row.get(column) for column in REQUIRED_COLUMNS):
                raise InvalidImport("Missing required fields")
            entry = _row_to_entry(row, str(next_id))
        except SeatimeError as exc:
            result.failed += 1
            result.errors.append(f"Row {number}: {exc}")
            continue

        result.entries.append(entry)
        result.success += 1
        next_id += 1

    logger.debug("Imported %d of %d rows from %s", result.success, len(rows), path)
    return result
