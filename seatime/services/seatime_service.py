"""
Application services for accepting new and changed seatime entries.

The service fetches the seafarer's stored intervals through an injected
entry store and delegates every calculation to the domain layer. It decides
whether a candidate may be persisted but performs no writes: callers store
the returned decision, or translate the raised error into a 400/404/409
response.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol

from pendulum import DateTime

from ..domain.duration import calculate_duration, parse_instant
from ..domain.exceptions import EntryNotFound, EntryRejected, OverlapConflict
from ..domain.models import (
    ExistingEntry,
    OverlapResult,
    SeatimeDuration,
    SeatimeEntry,
    TimeRange,
)
from ..domain.overlap import check_overlaps
from ..domain.validator import EntryValidator

logger = logging.getLogger(__name__)


class EntryStoreProtocol(Protocol):
    """Protocol describing the storage behaviour needed by the service."""

    def list_intervals(self, owner_id: str) -> List[ExistingEntry]:
        """Return every stored interval of the owner."""

    def get_entry(self, owner_id: str, entry_id: str) -> Optional[SeatimeEntry]:
        """Return a single stored entry, or None if it does not exist."""


@dataclass(frozen=True)
class EntryDraft:
    """Fields of a new entry as submitted by the seafarer."""
    vessel_id: Optional[str]
    company_id: Optional[str]
    rank: Optional[str]
    start_at: Any
    end_at: Any
    force_overlap: bool = False
    overlap_reason: Optional[str] = None


@dataclass(frozen=True)
class EntryChanges:
    """
    Partial update of a stored entry.

    Every field left as None keeps the stored value.
    """
    vessel_id: Optional[str] = None
    company_id: Optional[str] = None
    rank: Optional[str] = None
    start_at: Any = None
    end_at: Any = None
    force_overlap: bool = False
    overlap_reason: Optional[str] = None

    def apply_to(self, entry: SeatimeEntry) -> EntryDraft:
        """Resolve the final field values against the stored entry."""
        return EntryDraft(
            vessel_id=self.vessel_id or entry.vessel_id,
            company_id=self.company_id or entry.company_id,
            rank=self.rank or entry.rank,
            start_at=self.start_at if self.start_at else entry.start_at,
            end_at=self.end_at if self.end_at else entry.end_at,
            force_overlap=self.force_overlap,
            overlap_reason=self.overlap_reason or entry.overlap_reason,
        )


@dataclass
class EntryDecision:
    """An accepted entry, ready to be persisted by the caller."""
    vessel_id: str
    company_id: str
    rank: str
    start_at: DateTime
    end_at: DateTime
    duration: SeatimeDuration
    overlap: OverlapResult
    has_overlap_approval: bool = False
    overlap_reason: Optional[str] = None
    warnings: List[str] = field(default_factory=list)


class SeatimeService:
    """
    Orchestrates validation, duration and overlap checks for an entry.

    The entry store is passed in explicitly so that each handler works
    against the storage handle it was constructed with.
    """

    def __init__(
        self,
        entry_store: EntryStoreProtocol,
        validator: Optional[EntryValidator] = None,
        inclusive_boundaries: bool = False,
    ) -> None:
        self._entry_store = entry_store
        self._validator = validator or EntryValidator()
        self._inclusive_boundaries = inclusive_boundaries

    def prepare_create(self, owner_id: str, draft: EntryDraft) -> EntryDecision:
        """
        Check a new entry against the rules and the owner's stored entries.

        Raises:
            EntryRejected: If hard validation fails
            OverlapConflict: If the entry overlaps and overlap was not forced
        """
        decision = self._decide(owner_id, draft, exclude_id=None, approved=False)
        if not decision.overlap.has_overlap:
            decision.overlap_reason = None
        return decision

    def prepare_update(
        self,
        owner_id: str,
        entry_id: str,
        changes: EntryChanges,
    ) -> EntryDecision:
        """
        Check a partial update of a stored entry.

        The entry is excluded from its own overlap check. An entry that was
        already approved to overlap stays approved.

        Raises:
            EntryNotFound: If the owner has no entry with this id
            EntryRejected: If hard validation fails
            OverlapConflict: If the entry overlaps and overlap was not forced
        """
        existing = self._entry_store.get_entry(owner_id, entry_id)
        if existing is None:
            raise EntryNotFound("Entry not found")

        draft = changes.apply_to(existing)
        return self._decide(
            owner_id,
            draft,
            exclude_id=entry_id,
            approved=existing.has_overlap_approval,
        )

    def _decide(
        self,
        owner_id: str,
        draft: EntryDraft,
        exclude_id: Optional[str],
        approved: bool,
    ) -> EntryDecision:
        validation = self._validator.validate(
            draft.start_at,
            draft.end_at,
            draft.rank,
            draft.vessel_id,
            draft.company_id,
        )
        if not validation.is_valid:
            logger.debug("Rejected entry for %s: %s", owner_id, validation.errors)
            raise EntryRejected(validation)

        start = parse_instant(draft.start_at)
        end = parse_instant(draft.end_at)
        duration = calculate_duration(start, end)

        overlap = check_overlaps(
            TimeRange(start_at=start, end_at=end),
            self._entry_store.list_intervals(owner_id),
            exclude_id=exclude_id,
            inclusive=self._inclusive_boundaries,
        )

        if overlap.has_overlap and not draft.force_overlap and not approved:
            logger.debug(
                "Entry for %s overlaps %d stored entries",
                owner_id,
                len(overlap.overlapping_entries),
            )
            raise OverlapConflict(overlap)

        return EntryDecision(
            vessel_id=draft.vessel_id,
            company_id=draft.company_id,
            rank=draft.rank,
            start_at=start,
            end_at=end,
            duration=duration,
            overlap=overlap,
            has_overlap_approval=overlap.has_overlap or approved,
            overlap_reason=draft.overlap_reason,
            warnings=list(validation.warnings),
        )
