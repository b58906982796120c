"""Adapter configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking them
  into the CLI or the services.
- The settings object is built once and handed to the adapter explicitly;
  it is frozen, so nothing can change the base address mid-flight.
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class AdapterSettings(BaseSettings):
    """Central configuration for a REST adapter."""

    model_config = SettingsConfigDict(
        env_prefix="RESTSYNC_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
    )

    url: str | None = Field(
        default=None,
        description="Base address of the REST service (e.g. 'https://api.example.com').",
    )
    namespace: str | None = Field(
        default=None,
        description="Endpoint path; a leading '/' replaces the base address path.",
    )
    use_content_type_extension: bool = Field(
        default=False,
        description="Append '.<data_type>' to resource URLs (/posts.json).",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per request (seconds), enforced by the transport.",
    )
    user_agent: str = Field(
        default="restsync/0.1",
        min_length=1,
        description="User-Agent sent by the default transport.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the CLI.",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
