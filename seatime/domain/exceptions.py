"""
Domain-specific exception hierarchy for the seatime engine.
"""


class SeatimeError(Exception):
    """Base class for all application-level errors."""

    status_code = 400


class InvalidDate(SeatimeError):
    """Raised when a timestamp cannot be parsed into an instant."""


class InvalidRange(SeatimeError):
    """Raised when an end instant lies before its start instant."""


class InvalidRecord(SeatimeError):
    """Raised when a record lacks a field the engine needs."""


class ConfigError(SeatimeError):
    """Raised when the configuration file cannot be loaded."""

    status_code = 500


class EntryStoreError(SeatimeError):
    """Raised when stored entries cannot be read or decoded."""

    status_code = 500


class InvalidImport(SeatimeError):
    """Raised when an import file has no header or no data rows."""


class EntryNotFound(SeatimeError):
    """Raised when an entry referenced by id does not exist for the owner."""

    status_code = 404


class EntryRejected(SeatimeError):
    """Raised when a candidate entry fails hard validation."""

    def __init__(self, validation):
        self.validation = validation
        super().__init__(", ".join(validation.errors))


class OverlapConflict(SeatimeError):
    """Raised when a candidate entry overlaps stored entries without approval."""

    status_code = 409

    def __init__(self, overlap):
        self.overlap = overlap
        super().__init__("This entry overlaps with existing entries")
