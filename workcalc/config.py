"""
Configuration management using Pydantic models loaded from YAML.
"""

import datetime
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ConfigurationError
from .domain.models import Holiday, ScheduleConfig, parse_time


class ScheduleSettings(BaseModel):
    """Weekly work pattern as written in the config file."""
    start_time: str = "09:00"
    end_time: str = "18:00"
    lunch_start: str = "12:00"
    lunch_end: str = "13:00"
    work_days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5])  # Monday..Friday

    @field_validator("start_time", "end_time", "lunch_start", "lunch_end")
    @classmethod
    def validate_time(cls, value: str) -> str:
        """Validate the HH:mm format."""
        try:
            parsed = parse_time(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return parsed.strftime("%H:%M")

    @field_validator("work_days")
    @classmethod
    def validate_work_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"work_days must be between 0 and 6, got {invalid_days}")
        if not value:
            raise ValueError("work_days must contain at least one day")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @model_validator(mode="after")
    def validate_schedule(self) -> "ScheduleSettings":
        """Ensure the times form a usable schedule."""
        try:
            self.to_schedule()
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return self

    def to_schedule(self) -> ScheduleConfig:
        """Build the domain schedule."""
        return ScheduleConfig(
            start_time=self.start_time,
            end_time=self.end_time,
            lunch_start=self.lunch_start,
            lunch_end=self.lunch_end,
            work_days=frozenset(self.work_days)
        )


class DefaultsConfig(BaseModel):
    """Default settings for calculations."""
    estimated_hours: float = 8
    exclude_holidays: bool = True
    exclude_meetings: bool = True

    @field_validator("estimated_hours")
    @classmethod
    def validate_hours(cls, value: float) -> float:
        """Ensure the default estimate is not negative."""
        if value < 0:
            raise ValueError("estimated_hours must not be negative")
        return value


class HolidayEntry(BaseModel):
    """Holiday configured by hand, in addition to the built-in table."""
    date: datetime.date
    name: str
    type: str = "company"
    is_global: bool = False

    def to_holiday(self, country: str) -> Holiday:
        return Holiday(
            date=self.date,
            name=self.name,
            type=self.type,
            country=country,
            is_global=self.is_global
        )


class AppConfig(BaseModel):
    """Application configuration."""
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    timezone: str = "America/Guayaquil"
    country: str = "EC"
    holidays: List[HolidayEntry] = Field(default_factory=list)
    meetings_file: Optional[Path] = None

    @field_validator("country")
    @classmethod
    def validate_country(cls, value: str) -> str:
        """Normalise the country code."""
        return value.strip().upper()

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

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

        # Relative meeting files are resolved against the config location
        if config.meetings_file is not None and not config.meetings_file.is_absolute():
            config.meetings_file = config_path.parent / config.meetings_file

        return config

    def configured_holidays(self) -> List[Holiday]:
        """Holidays listed in the config file."""
        return [entry.to_holiday(self.country) for entry in self.holidays]


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
