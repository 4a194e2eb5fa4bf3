"""
Business-rule validation for candidate seatime entries.

Hard errors make an entry invalid; warnings are surfaced to the seafarer
alongside a successful save.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

import pendulum
from pendulum import DateTime

from .duration import calculate_duration, parse_instant
from .exceptions import InvalidDate
from .models import ValidationResult

RANK_REQUIRED = "Rank/Position is required"
VESSEL_REQUIRED = "Vessel is required"
COMPANY_REQUIRED = "Company is required"
INVALID_START = "Invalid start date"
INVALID_END = "Invalid end date"
END_BEFORE_START = "End date must be after start date"

FUTURE_END = "End date is in the future"
EXCEEDS_ONE_YEAR = "Duration exceeds 1 year - please verify"
UNDER_ONE_HOUR = "Duration is less than 1 hour"
OUTSIDE_RENEWAL_CYCLE = "Entry is older than 5 years - may be outside renewal cycle"


@dataclass(frozen=True)
class ValidationRules:
    """Thresholds for the plausibility warnings."""
    max_duration_days: float = 365
    min_duration_hours: float = 1
    renewal_cycle_years: int = 5

    def long_duration_warning(self) -> str:
        if self.max_duration_days == 365:
            return EXCEEDS_ONE_YEAR
        return f"Duration exceeds {self.max_duration_days:g} days - please verify"

    def short_duration_warning(self) -> str:
        if self.min_duration_hours == 1:
            return UNDER_ONE_HOUR
        return f"Duration is less than {self.min_duration_hours:g} hours"

    def renewal_cycle_warning(self) -> str:
        unit = "year" if self.renewal_cycle_years == 1 else "years"
        return f"Entry is older than {self.renewal_cycle_years} {unit} - may be outside renewal cycle"


def _try_parse(value: Any) -> Optional[DateTime]:
    try:
        return parse_instant(value)
    except InvalidDate:
        return None


class EntryValidator:
    """
    Applies required-field, ordering and plausibility rules to an entry.

    The clock is injectable so that "future" and "too old" checks are
    deterministic under test.
    """

    def __init__(
        self,
        rules: Optional[ValidationRules] = None,
        clock: Callable[[], DateTime] = pendulum.now,
    ):
        self.rules = rules or ValidationRules()
        self._clock = clock

    def validate(
        self,
        start_at: Any,
        end_at: Any,
        rank: Optional[str],
        vessel_id: Any,
        company_id: Any,
    ) -> ValidationResult:
        """
        Validate a candidate entry.

        Returns:
            ValidationResult; never raises for bad input
        """
        result = ValidationResult()

        if not rank or not str(rank).strip():
            result.errors.append(RANK_REQUIRED)

        if not vessel_id:
            result.errors.append(VESSEL_REQUIRED)

        if not company_id:
            result.errors.append(COMPANY_REQUIRED)

        start = _try_parse(start_at)
        end = _try_parse(end_at)

        if start is None:
            result.errors.append(INVALID_START)

        if end is None:
            result.errors.append(INVALID_END)

        if start is None or end is None:
            return result

        if end < start:
            result.errors.append(END_BEFORE_START)

        now = self._clock()

        if end > now:
            result.warnings.append(FUTURE_END)

        if end >= start:
            duration = calculate_duration(start, end)

            if duration.total_days > self.rules.max_duration_days:
                result.warnings.append(self.rules.long_duration_warning())

            if duration.total_hours < self.rules.min_duration_hours:
                result.warnings.append(self.rules.short_duration_warning())

        if start < now.subtract(years=self.rules.renewal_cycle_years):
            result.warnings.append(self.rules.renewal_cycle_warning())

        return result


def validate_entry(
    start_at: Any,
    end_at: Any,
    rank: Optional[str],
    vessel_id: Any,
    company_id: Any,
) -> ValidationResult:
    """Validate an entry with the default rules and the wall clock."""
    return EntryValidator().validate(start_at, end_at, rank, vessel_id, company_id)
