"""
Configuration Management for Expense Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see where data is written and how it is displayed,
and ensures bad values are rejected at startup.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Where the expense list is persisted."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Key-value backend holding the expense list"
    )
    directory: str = Field(
        default=".expense_tracker",
        description="Directory for the file backend (one file per key)"
    )
    key: str = Field(
        default="expenses",
        min_length=1,
        description="Name of the slot that holds the JSON array"
    )

    @field_validator('key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Keys become file names, so keep them to a safe alphabet."""
        allowed = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_.-")
        if not set(v) <= allowed or v in (".", ".."):
            raise ValueError(
                f"Storage key {v!r} may only contain letters, digits, '_', '.' and '-'"
            )
        return v


class DisplaySettings(BaseSettings):
    """How expenses are presented to the user."""

    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_DISPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency_symbol: str = Field(
        default="¥",
        description="Symbol prefixed to each amount in the list"
    )
    empty_message: str = Field(
        default="No expenses yet.",
        description="Placeholder shown when the list is empty"
    )
    validation_message: str = Field(
        default="Please enter a category, amount, and date correctly.",
        description="Single message shown for any rejected submission"
    )
    save_failed_message: str = Field(
        default="The expense could not be saved. Please try again.",
        description="Message shown when the storage backend refuses a write"
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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for diagnostic logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def display(self) -> DisplaySettings:
        return DisplaySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "display", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
