"""
Configuration Management for Expense Manager

Uses pydantic-settings for type-safe configuration from environment variables.

All configuration is centralized here, one settings class per concern,
each with its own environment prefix. Values are validated when a section
is first accessed.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Durable local storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path(".expense_manager"),
        description="Directory holding one file per storage key"
    )
    # Browsers give localStorage roughly 5 MiB per origin
    quota_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1024,
        description="Maximum total size of all stored values in bytes"
    )


class ReminderSettings(BaseSettings):
    """Daily reminder configuration."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_REMINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    hour: int = Field(
        default=19,
        ge=0,
        le=23,
        description="Local hour at which the daily reminder fires"
    )
    title: str = Field(
        default="Expense Manager",
        min_length=1,
        description="Notification title"
    )
    body: str = Field(
        default="Don't forget to log your expenses for today! 📝",
        min_length=1,
        description="Notification body"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG regardless of log_level"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for structured logs"
    )

    # Export
    export_dir: Path = Field(
        default=Path("exports"),
        description="Directory where CSV exports are written"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return level

    @property
    def effective_log_level(self) -> str:
        """debug_mode forces DEBUG regardless of log_level."""
        return "DEBUG" if self.debug_mode else self.log_level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are built on access so a broken section
    # does not prevent the others from loading.

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def reminder(self) -> ReminderSettings:
        return ReminderSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings sections.

    Returns a dict of {section_name: is_valid}, plus a
    "<section>_error" entry for each section that failed.
    Useful for startup checks and the settings page.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "reminder", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
