"""Library configuration using Pydantic Settings.

Every setting can be overridden with a ``CONDEVAL_``-prefixed environment
variable (``CONDEVAL_TIMEZONE=Europe/Berlin``) or a ``.env`` file.
"""

from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache

from dateutil import tz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CondEvalSettings(BaseSettings):
    """Runtime configuration for condition evaluation."""

    model_config = SettingsConfigDict(
        env_prefix="CONDEVAL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="info")
    log_json: bool = Field(default=True, description="JSON lines if true, console renderer otherwise")

    # Evaluation
    timezone: str | None = Field(
        default=None,
        description="IANA timezone used to truncate dates to midnight; local time when unset",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().lower()
        allowed = {"debug", "info", "warning", "error", "critical"}
        if v not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        if tz.gettz(v.strip()) is None:
            raise ValueError(f"unknown timezone '{v}'")
        return v.strip()

    def tzinfo(self) -> tzinfo:
        """Return the configured timezone, or the local zone when unset."""
        if self.timezone:
            return tz.gettz(self.timezone)
        return tz.tzlocal()


@lru_cache
def get_settings() -> CondEvalSettings:
    """Get cached settings instance."""
    return CondEvalSettings()


def default_timezone() -> tzinfo:
    """Timezone new comparators use when none is passed explicitly."""
    return get_settings().tzinfo()
