"""
Service layer helpers that orchestrate the entry store and domain logic.
"""

from .seatime_service import (
    EntryChanges,
    EntryDecision,
    EntryDraft,
    EntryStoreProtocol,
    SeatimeService,
)

__all__ = ["EntryChanges", "EntryDecision", "EntryDraft", "EntryStoreProtocol", "SeatimeService"]
