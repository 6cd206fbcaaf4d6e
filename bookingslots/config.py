"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import ClockTime, Weekday


class DefaultsConfig(BaseModel):
    """Default settings for slot search."""
    service_duration_minutes: int = 30
    slot_step_minutes: int = 20
    fallback_start_time: str = "09:00"
    fallback_end_time: str = "20:00"
    fallback_closed_days: List[Weekday] = Field(default_factory=lambda: [Weekday.SATURDAY])
    bookable_statuses: List[str] = Field(default_factory=lambda: ["booked", "confirmed"])

    @field_validator("service_duration_minutes", "slot_step_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure durations are positive."""
        if value <= 0:
            raise ValueError("duration settings must be greater than zero")
        return value

    @field_validator("fallback_start_time", "fallback_end_time")
    @classmethod
    def validate_clock_time(cls, value: str) -> str:
        """Validate HH:MM format."""
        ClockTime.parse(value)
        return value

    @field_validator("bookable_statuses")
    @classmethod
    def normalize_statuses(cls, value: List[str]) -> List[str]:
        """Lower-case statuses, preserving order while removing duplicates."""
        deduped: List[str] = []
        for status in value:
            key = status.strip().lower()
            if key and key not in deduped:
                deduped.append(key)
        if not deduped:
            raise ValueError("bookable_statuses must not be empty")
        return deduped

    @model_validator(mode="after")
    def validate_fallback_order(self) -> "DefaultsConfig":
        """Ensure the fallback window opens before it closes."""
        if self.get_fallback_end() <= self.get_fallback_start():
            raise ValueError("fallback_end_time must be later than fallback_start_time")
        return self

    def get_fallback_start(self) -> ClockTime:
        return ClockTime.parse(self.fallback_start_time)

    def get_fallback_end(self) -> ClockTime:
        return ClockTime.parse(self.fallback_end_time)


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Asia/Jerusalem"
    data_file: Path = Path("schedule.yaml")
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA identifier."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
