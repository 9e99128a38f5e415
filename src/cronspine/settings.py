"""Environment-driven settings for cronspine.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.
    The engine itself takes everything it needs as constructor arguments;
    settings only provide the defaults the CLI and ``CronEngine`` fall back
    to when an argument is omitted.

Features:
    - **CronSettings:** timezone, strict_bounds, log_level, json_logs
    - **env_prefix:** ``CRONSPINE_`` (e.g. ``CRONSPINE_TIMEZONE=Europe/London``)
    - **.env file support:** automatic loading via pydantic-settings
    - **Extra ignore:** unknown env vars don't cause startup failures

Examples:
    >>> from cronspine.settings import get_settings
    >>> get_settings().strict_bounds
    False

Tags:
    settings, configuration, pydantic, environment, cronspine
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CronSettings(BaseSettings):
    """Settings shared by the engine and the CLI.

    Fields
    ──────
    timezone      : Default IANA zone for ``cronspine run`` when --timezone is not given
                    (None = system local; CronEngine itself never reads it)
    strict_bounds : Reject bare integers outside a field's bounds instead of folding them
    log_level     : Structlog log level
    json_logs     : Force JSON (True) or console (False) output; None auto-detects
    """

    model_config = SettingsConfigDict(
        env_prefix="CRONSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Scheduling ───────────────────────────────────────────────
    timezone: str | None = None
    strict_bounds: bool = Field(
        default=False,
        description="Raise CronRangeError for out-of-bounds bare integers",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> CronSettings:
    """Return the process-wide settings instance."""
    return CronSettings()


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()


__all__ = ["CronSettings", "get_settings", "reset_settings"]
