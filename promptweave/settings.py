"""
Application settings.

Provides a single typed interface for environment-driven settings. Values
are read from ``PROMPTWEAVE_*`` environment variables.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from promptweave.constants import DEFAULT_MIME_COMMAND, DEFAULT_MIME_TIMEOUT
from promptweave.errors import SettingsError


class AppSettings(BaseSettings):
    """
    Infrastructure settings loaded from environment variables.

    Attributes:
        logfire_enabled: Send traces to Logfire when a token is present
        log_to_console: Mirror log records to the console
        mime_command: External command used for live MIME detection
            (empty disables live detection)
        mime_timeout: Seconds to wait for the MIME detection command
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMPTWEAVE_", env_file=None, extra="ignore"
    )

    logfire_enabled: bool = False
    log_to_console: bool = False
    mime_command: Optional[str] = DEFAULT_MIME_COMMAND
    mime_timeout: float = Field(default=DEFAULT_MIME_TIMEOUT, gt=0)

    @field_validator("mime_command", mode="before")
    @classmethod
    def _empty_command_disables(cls, value):
        """Treat an empty command as "no live detection"."""
        if value is None:
            return None
        value = str(value).strip()
        return value or None


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """
    Load application settings from environment variables.

    Raises:
        SettingsError: If the environment holds invalid values
    """
    try:
        return AppSettings()
    except ValidationError as exc:
        raise SettingsError(f"Invalid promptweave settings: {exc}") from exc


def refresh_app_settings_cache() -> None:
    """Clear cached settings so future calls reload from environment."""
    get_app_settings.cache_clear()  # type: ignore[attr-defined]
