"""Application settings with validation.

Settings are loaded from environment variables (and an optional ``.env``
file) using Pydantic v2. Every field has a default so the analytics
engine can run without any configuration.
"""

import sys
from typing import Literal

import pytz
from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.exceptions import InvalidSettingsError


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Analytics Configuration
    TOP_SYMBOLS_LIMIT: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of symbols kept in the top symbols ranking",
    )
    WEEKLY_WINDOW: int = Field(
        default=12,
        ge=1,
        le=104,
        description="Number of most recent week buckets kept in the weekly breakdown",
    )
    CURRENCY_SYMBOL: str = Field(
        default="₹",
        max_length=4,
        description="Currency symbol used when rendering reports",
    )

    # Application Configuration
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    LOG_FILE: str | None = Field(
        default=None,
        description="Optional log file path; console logging goes to stderr only when unset",
    )
    TIMEZONE: str = Field(
        default="Asia/Kolkata",
        description="Local timezone for hour/day/week bucketing (must be valid pytz timezone)",
    )
    ENVIRONMENT: Literal["development", "production", "test"] = Field(
        default="development",
        description="Application environment",
    )

    @field_validator("TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone string.

        Args:
            v: Timezone string

        Returns:
            Validated timezone

        Raises:
            InvalidSettingsError: If timezone is invalid
        """
        if not v:
            raise InvalidSettingsError("TIMEZONE cannot be empty")

        if v not in pytz.all_timezones:
            suggestions = [tz for tz in pytz.all_timezones if "Kolkata" in tz or "Asia" in tz][:5]
            raise InvalidSettingsError(
                f"Invalid timezone: '{v}'. Must be a valid pytz timezone. "
                f"Suggestions: {', '.join(suggestions)}"
            )

        return v

    @field_validator("CURRENCY_SYMBOL")
    @classmethod
    def validate_currency_symbol(cls, v: str) -> str:
        """Reject blank currency symbols."""
        if not v.strip():
            raise InvalidSettingsError("CURRENCY_SYMBOL cannot be blank")
        return v

    def get_timezone(self) -> pytz.BaseTzInfo:
        """Get pytz timezone object.

        Returns:
            pytz timezone object
        """
        return pytz.timezone(self.TIMEZONE)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get global settings instance (singleton pattern).

    Returns:
        Settings instance

    Raises:
        SystemExit: If configuration is invalid
    """
    global _settings

    if _settings is None:
        try:
            _settings = Settings()
            logger.info(
                f"Settings loaded successfully (environment: {_settings.ENVIRONMENT}, "
                f"timezone: {_settings.TIMEZONE})"
            )
        except Exception as e:
            logger.critical(f"Failed to load settings: {e}")
            logger.critical("Application cannot start without valid configuration")
            sys.exit(1)

    return _settings


def reset_settings() -> None:
    """Drop the cached settings instance so the next access reloads it."""
    global _settings
    _settings = None


class SettingsProxy:
    """Lazy proxy for settings to prevent initialization on import."""

    def __getattr__(self, name):
        return getattr(get_settings(), name)


# Global settings instance (lazy)
settings: Settings = SettingsProxy()  # type: ignore
