"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date, datetime
from pathlib import Path

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.duration import parse_instant
from .domain.exceptions import ConfigError, InvalidDate
from .domain.validator import ValidationRules


class ValidationConfig(BaseModel):
    """Thresholds for entry plausibility warnings."""
    max_duration_days: float = 365
    min_duration_hours: float = 1
    renewal_cycle_years: int = 5

    @field_validator("max_duration_days", "min_duration_hours", "renewal_cycle_years")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        """Ensure thresholds are positive."""
        if value <= 0:
            raise ValueError(f"Threshold must be greater than zero, got {value}")
        return value

    @model_validator(mode="after")
    def validate_duration_window(self) -> "ValidationConfig":
        """Ensure the shortest plausible entry fits inside the longest one."""
        if self.min_duration_hours > self.max_duration_days * 24:
            raise ValueError("min_duration_hours must not exceed max_duration_days")
        return self

    def to_rules(self) -> ValidationRules:
        """Get the domain-level validation rules."""
        return ValidationRules(
            max_duration_days=self.max_duration_days,
            min_duration_hours=self.min_duration_hours,
            renewal_cycle_years=self.renewal_cycle_years,
        )


class OverlapConfig(BaseModel):
    """Boundary convention for overlap detection."""
    # False: sign-off at 12:00 and sign-on at 12:00 do not overlap
    inclusive_boundaries: bool = False


class TargetsConfig(BaseModel):
    """
    Sea-service targets for the renewal cycle.

    The cycle length itself is ``validation.renewal_cycle_years``.
    """
    target_sea_days: float = 365
    target_sea_hours: float = 8760
    renewal_cycle_start: datetime | date | str | None = None

    @field_validator("target_sea_days", "target_sea_hours")
    @classmethod
    def validate_positive(cls, value: float) -> float:
        """Ensure targets are positive."""
        if value <= 0:
            raise ValueError(f"Target must be greater than zero, got {value}")
        return value

    @field_validator("renewal_cycle_start")
    @classmethod
    def validate_cycle_start(cls, value: datetime | date | str | None) -> datetime | date | str | None:
        """Ensure the cycle start describes a calendar date or instant."""
        if value is not None:
            try:
                parse_instant(value)
            except InvalidDate as exc:
                raise ValueError(f"Invalid renewal_cycle_start: {value}") from exc
        return value

    def get_cycle_start(self) -> pendulum.DateTime | None:
        """Get the configured cycle start as a DateTime."""
        if self.renewal_cycle_start is None:
            return None
        return parse_instant(self.renewal_cycle_start)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    overlap: OverlapConfig = Field(default_factory=OverlapConfig)
    targets: TargetsConfig = Field(default_factory=TargetsConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            ConfigError: If the file is missing, not YAML, or not a mapping
            pydantic.ValidationError: If values are invalid
        """
        if not config_path.exists():
            raise ConfigError(
                f"Config file not found: {config_path}\n"
                f"See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.cwd() / "config.yaml"


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Load the configuration, falling back to defaults.

    An explicitly given path must exist; the default path is optional.
    """
    if config_path is not None:
        return AppConfig.load_from_yaml(config_path)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()
