"""
Tests for entry validation.
"""

import pendulum
import pytest

from seatime.domain.validator import (
    COMPANY_REQUIRED,
    END_BEFORE_START,
    EXCEEDS_ONE_YEAR,
    FUTURE_END,
    INVALID_END,
    INVALID_START,
    OUTSIDE_RENEWAL_CYCLE,
    RANK_REQUIRED,
    UNDER_ONE_HOUR,
    VESSEL_REQUIRED,
    EntryValidator,
    ValidationRules,
    validate_entry,
)

NOW = pendulum.datetime(2025, 6, 1, 12)


@pytest.fixture
def validator():
    return EntryValidator(clock=lambda: NOW)


class TestRequiredFields:
    """Hard errors for missing fields and bad dates."""

    def test_valid_entry(self, validator):
        result = validator.validate("2024-01-01", "2024-01-31", "Second Officer", "vessel-1", "company-1")

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.parametrize("rank", ["", "   ", None])
    def test_rank_required(self, validator, rank):
        result = validator.validate("2024-01-01", "2024-01-31", rank, "vessel-1", "company-1")

        assert not result.is_valid
        assert RANK_REQUIRED in result.errors
        assert "Rank/Position is required" in result.errors

    def test_vessel_required(self, validator):
        result = validator.validate("2024-01-01", "2024-01-31", "Second Officer", "", "company-1")

        assert not result.is_valid
        assert result.errors == [VESSEL_REQUIRED]

    def test_company_required(self, validator):
        result = validator.validate("2024-01-01", "2024-01-31", "Second Officer", "vessel-1", None)

        assert not result.is_valid
        assert result.errors == [COMPANY_REQUIRED]

    def test_invalid_dates(self, validator):
        result = validator.validate("garbage", "also garbage", "Master", "vessel-1", "company-1")

        assert result.errors == [INVALID_START, INVALID_END]
        assert result.warnings == []

    def test_all_errors_in_order(self, validator):
        result = validator.validate("", "", "", "", "")

        assert result.errors == [
            RANK_REQUIRED,
            VESSEL_REQUIRED,
            COMPANY_REQUIRED,
            INVALID_START,
            INVALID_END,
        ]

    def test_end_before_start(self, validator):
        result = validator.validate("2024-02-01", "2024-01-01", "Master", "vessel-1", "company-1")

        assert not result.is_valid
        assert result.errors == [END_BEFORE_START]
        assert UNDER_ONE_HOUR not in result.warnings
        assert EXCEEDS_ONE_YEAR not in result.warnings

    def test_end_before_start_still_reports_old_entry(self, validator):
        result = validator.validate("2019-02-01", "2019-01-01", "Master", "vessel-1", "company-1")

        assert result.errors == [END_BEFORE_START]
        assert result.warnings == [OUTSIDE_RENEWAL_CYCLE]


class TestWarnings:
    """Soft warnings never make an entry invalid."""

    def test_duration_exceeds_one_year(self, validator):
        result = validator.validate("2021-01-01", "2023-01-01", "Chief Engineer", "vessel-1", "company-1")

        assert result.is_valid
        assert result.warnings == ["Duration exceeds 1 year - please verify"]

    def test_two_year_span_from_2020(self, validator):
        result = validator.validate("2020-01-01", "2022-01-01", "Second Officer", "vessel-1", "company-1")

        assert result.is_valid
        assert EXCEEDS_ONE_YEAR in result.warnings
        assert OUTSIDE_RENEWAL_CYCLE in result.warnings

    def test_exactly_one_year_does_not_warn(self, validator):
        result = validator.validate("2023-01-01", "2024-01-01", "Master", "vessel-1", "company-1")

        assert EXCEEDS_ONE_YEAR not in result.warnings

    def test_future_end(self, validator):
        result = validator.validate("2025-05-01", "2025-07-01", "Master", "vessel-1", "company-1")

        assert result.is_valid
        assert result.warnings == [FUTURE_END]

    def test_short_duration(self, validator):
        result = validator.validate(
            "2024-01-01T08:00:00Z", "2024-01-01T08:30:00Z", "Master", "vessel-1", "company-1"
        )

        assert result.is_valid
        assert result.warnings == [UNDER_ONE_HOUR]

    def test_zero_duration(self, validator):
        result = validator.validate(
            "2024-01-01T08:00:00Z", "2024-01-01T08:00:00Z", "Master", "vessel-1", "company-1"
        )

        assert result.is_valid
        assert result.warnings == [UNDER_ONE_HOUR]

    def test_one_hour_does_not_warn(self, validator):
        result = validator.validate(
            "2024-01-01T08:00:00Z", "2024-01-01T09:00:00Z", "Master", "vessel-1", "company-1"
        )

        assert result.warnings == []

    def test_older_than_renewal_cycle(self, validator):
        result = validator.validate("2020-01-01", "2020-02-01", "Bosun", "vessel-1", "company-1")

        assert result.is_valid
        assert result.warnings == ["Entry is older than 5 years - may be outside renewal cycle"]

    def test_custom_rules(self):
        validator = EntryValidator(
            rules=ValidationRules(max_duration_days=30, min_duration_hours=2, renewal_cycle_years=1),
            clock=lambda: NOW,
        )

        result = validator.validate("2024-01-01", "2024-03-01", "Master", "vessel-1", "company-1")

        assert result.warnings == [
            "Duration exceeds 30 days - please verify",
            "Entry is older than 1 year - may be outside renewal cycle",
        ]

    def test_custom_minimum_and_cycle(self):
        validator = EntryValidator(
            rules=ValidationRules(min_duration_hours=2.5, renewal_cycle_years=3),
            clock=lambda: NOW,
        )

        result = validator.validate(
            "2021-03-01T08:00:00Z", "2021-03-01T10:00:00Z", "Master", "vessel-1", "company-1",
        )

        assert result.warnings == [
            "Duration is less than 2.5 hours",
            "Entry is older than 3 years - may be outside renewal cycle",
        ]

    def test_default_rules_keep_standard_messages(self):
        rules = ValidationRules()

        assert rules.long_duration_warning() == EXCEEDS_ONE_YEAR
        assert rules.short_duration_warning() == UNDER_ONE_HOUR
        assert rules.renewal_cycle_warning() == OUTSIDE_RENEWAL_CYCLE


def test_validate_entry_uses_wall_clock():
    result = validate_entry("2024-01-01", "2024-01-31", "", "vessel-1", "company-1")

    assert not result.is_valid
    assert result.errors == [RANK_REQUIRED]
