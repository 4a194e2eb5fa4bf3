"""
File-backed entry store reading seatime entries from a JSON export.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.duration import calculate_duration, parse_instant
from ..domain.exceptions import EntryStoreError, SeatimeError
from ..domain.models import ExistingEntry, SeatimeEntry

logger = logging.getLogger(__name__)


# camelCase keys as emitted by the web API, mapped to model fields
FIELD_ALIASES = {
    "userId": "owner_id",
    "vesselId": "vessel_id",
    "companyId": "company_id",
    "startAt": "start_at",
    "endAt": "end_at",
    "computedDurationHours": "computed_duration_hours",
    "computedDurationDays": "computed_duration_days",
    "isVerified": "is_verified",
    "hasOverlapApproval": "has_overlap_approval",
    "overlapReason": "overlap_reason",
}


class JsonEntryStore:
    """
    Entry store backed by a JSON file holding a list of entry objects.

    Accepts both the API's camelCase keys and snake_case keys. Durations
    missing from the file are computed from the entry's range. Nested
    ``vessel``/``company`` objects contribute display names. New entries
    are appended with ``add``, which rewrites the file.
    """

    def __init__(self, path: Path, create_missing: bool = False):
        self.path = path
        self._entries: List[SeatimeEntry] = []
        self._owners: Dict[str, Optional[str]] = {}
        self._raw: List[Dict[str, Any]] = []
        self._document: Optional[Dict[str, Any]] = None
        if create_missing and not self.path.exists():
            logger.debug("Starting empty entry file at %s", self.path)
            return
        self._load_entries()

    def _load_entries(self) -> None:
        """Load and decode entries from the JSON file."""
        if not self.path.exists():
            raise EntryStoreError(f"Entry file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise EntryStoreError(f"Invalid JSON in {self.path}: {exc}") from exc

        if isinstance(raw, dict) and "entries" in raw:
            self._document = raw
            raw = raw["entries"]

        if not isinstance(raw, list):
            raise EntryStoreError("Entry file must contain a list of entries.")

        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                raise EntryStoreError(f"Entry #{index} is not an object.")
            try:
                entry, owner_id = self._decode_entry(item, index)
            except (KeyError, ValueError, TypeError, SeatimeError) as exc:
                raise EntryStoreError(f"Entry #{index} is invalid: {exc}") from exc
            self._entries.append(entry)
            self._owners[entry.id] = owner_id
            self._raw.append(item)

        logger.debug("Loaded %d entries from %s", len(self._entries), self.path)

    @staticmethod
    def _decode_entry(item: Dict[str, Any], index: int):
        data = {FIELD_ALIASES.get(key, key): value for key, value in item.items()}

        start = parse_instant(data["start_at"])
        end = parse_instant(data["end_at"])

        hours = data.get("computed_duration_hours")
        days = data.get("computed_duration_days")
        if hours is None or days is None:
            duration = calculate_duration(start, end)
            hours, days = duration.total_hours, duration.total_days

        vessel = data.get("vessel")
        company = data.get("company")
        if not isinstance(vessel, dict):
            vessel = {}
        if not isinstance(company, dict):
            company = {}

        entry = SeatimeEntry(
            id=str(data.get("id", index + 1)),
            vessel_id=str(data.get("vessel_id") or vessel.get("id") or ""),
            company_id=str(data.get("company_id") or company.get("id") or ""),
            rank=data.get("rank") or "",
            start_at=start,
            end_at=end,
            computed_duration_hours=float(hours),
            computed_duration_days=float(days),
            is_verified=bool(data.get("is_verified", False)),
            has_overlap_approval=bool(data.get("has_overlap_approval", False)),
            overlap_reason=data.get("overlap_reason"),
            vessel_name=vessel.get("name"),
            company_name=company.get("name"),
        )
        return entry, data.get("owner_id")

    def _owned_by(self, entry: SeatimeEntry, owner_id: Optional[str]) -> bool:
        stored_owner = self._owners.get(entry.id)
        return owner_id is None or stored_owner is None or stored_owner == owner_id

    def entries(self, owner_id: Optional[str] = None) -> List[SeatimeEntry]:
        """Return stored entries, optionally restricted to one owner."""
        return [entry for entry in self._entries if self._owned_by(entry, owner_id)]

    def list_intervals(self, owner_id: Optional[str] = None) -> List[ExistingEntry]:
        """Return the stored intervals of the owner."""
        return [entry.as_existing() for entry in self.entries(owner_id)]

    def get_entry(self, owner_id: Optional[str], entry_id: str) -> Optional[SeatimeEntry]:
        """Return a single entry of the owner, or None."""
        for entry in self.entries(owner_id):
            if entry.id == str(entry_id):
                return entry
        return None

    def next_id(self) -> int:
        """Return the next free numeric id."""
        numeric = [int(entry.id) for entry in self._entries if entry.id.isdigit()]
        return max(numeric, default=0) + 1

    def add(self, entries: List[SeatimeEntry], owner_id: Optional[str] = None) -> None:
        """
        Append entries and write the file.

        Stored records are written back unchanged; new ones use the API's
        camelCase keys.
        """
        for entry in entries:
            if any(stored.id == entry.id for stored in self._entries):
                raise EntryStoreError(f"Entry id {entry.id} already exists")
            self._entries.append(entry)
            self._owners[entry.id] = owner_id
            self._raw.append(self._encode_entry(entry, owner_id))

        payload: Any = self._raw
        if self._document is not None:
            payload = {**self._document, "entries": self._raw}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

        logger.debug("Wrote %d entries to %s", len(self._entries), self.path)

    @staticmethod
    def _encode_entry(entry: SeatimeEntry, owner_id: Optional[str]) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "id": entry.id,
            "vesselId": entry.vessel_id,
            "companyId": entry.company_id,
            "rank": entry.rank,
            "startAt": entry.start_at.to_iso8601_string(),
            "endAt": entry.end_at.to_iso8601_string(),
            "computedDurationHours": entry.computed_duration_hours,
            "computedDurationDays": entry.computed_duration_days,
            "isVerified": entry.is_verified,
            "hasOverlapApproval": entry.has_overlap_approval,
            "overlapReason": entry.overlap_reason,
        }
        if owner_id is not None:
            item["userId"] = owner_id
        if entry.vessel_name:
            item["vessel"] = {"id": entry.vessel_id, "name": entry.vessel_name}
        if entry.company_name:
            item["company"] = {"id": entry.company_id, "name": entry.company_name}
        return item
