"""Configuration models describing deskclean settings."""

from __future__ import annotations

import re
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

OverrideCategory = Literal["Pictures", "Documents", "Music", "Movies", "Developer", "Archive"]


class DeskCleanBaseModel(BaseModel):
    """Shared configuration for deskclean Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class Preferences(DeskCleanBaseModel):
    """User preferences consumed by the organizer and the scheduler.

    Attributes:
        sort_mode: Organization strategy; only native-location sorting exists.
        auto_clean_enabled: Whether the interval trigger is active.
        auto_clean_interval: Minutes between interval-triggered passes.
        clean_at_end_of_day: Whether the daily trigger is active.
        end_of_day_time: Local time of day (``HH:MM``) for the daily trigger.
        show_undo_after_clean: Whether callers should offer undo after a pass.
        pinned_files: Identifiers pinned by the user interface.
        has_completed_setup: Whether first-run setup has been completed.
        auto_start_at_login: Whether the host should launch at login.
        create_screenshots_folder: Route screenshots to a monthly folder.
        delete_old_screenshots: Expire old files in the screenshots folder.
    """

    sort_mode: Literal["smart"] = "smart"
    auto_clean_enabled: bool = True
    auto_clean_interval: int = Field(default=60, ge=1)
    clean_at_end_of_day: bool = True
    end_of_day_time: str = "00:00"
    show_undo_after_clean: bool = False
    pinned_files: List[str] = Field(default_factory=list)
    has_completed_setup: bool = False
    auto_start_at_login: bool = True
    create_screenshots_folder: bool = False
    delete_old_screenshots: bool = False

    @field_validator("end_of_day_time", mode="before")
    @classmethod
    def _coerce_sexagesimal(cls, value: object) -> object:
        # YAML 1.1 reads an unquoted 18:30 as the base-60 integer 1110.
        if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
            hour, minute = divmod(value, 60)
            return f"{hour:02d}:{minute:02d}"
        return value

    @field_validator("end_of_day_time")
    @classmethod
    def _validate_time_of_day(cls, value: str) -> str:
        if not _TIME_OF_DAY.match(value):
            raise ValueError("end_of_day_time must use the HH:MM 24-hour format")
        return value

    def end_of_day_components(self) -> tuple[int, int]:
        """Return the daily trigger time as ``(hour, minute)``."""
        hour, minute = self.end_of_day_time.split(":")
        return int(hour), int(minute)


class OrganizationOptions(DeskCleanBaseModel):
    """Settings that govern how the Desktop is organized.

    Attributes:
        source_dir: Directory to organize; defaults to the user's Desktop.
        legacy_organized_folder: Leave an ``Organized`` folder in the source untouched.
        tag_files: Whether moved files receive a category tag.
        screenshot_retention_days: Age after which screenshots are expired.
        extension_overrides: Extra extension to category mappings.
    """

    source_dir: Optional[str] = None
    legacy_organized_folder: bool = False
    tag_files: bool = True
    screenshot_retention_days: int = Field(default=30, ge=1)
    extension_overrides: Dict[str, OverrideCategory] = Field(default_factory=dict)

    @field_validator("extension_overrides")
    @classmethod
    def _normalize_extensions(cls, value: Dict[str, str]) -> Dict[str, str]:
        normalized: Dict[str, str] = {}
        for extension, category in value.items():
            key = extension.strip().lstrip(".").lower()
            if not key:
                raise ValueError("extension_overrides keys must not be empty")
            normalized[key] = category
        return normalized


class LoggingSettings(DeskCleanBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    max_size_mb: int = 10
    backup_count: int = 3


class CLIOptions(DeskCleanBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class DeskCleanConfig(DeskCleanBaseModel):
    """Top-level configuration struct for deskclean.

    Attributes:
        preferences: User preferences shared with the scheduler.
        organization: Organization behavior.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    preferences: Preferences = Field(default_factory=Preferences)
    organization: OrganizationOptions = Field(default_factory=OrganizationOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DeskCleanBaseModel",
    "Preferences",
    "OrganizationOptions",
    "LoggingSettings",
    "CLIOptions",
    "DeskCleanConfig",
]
