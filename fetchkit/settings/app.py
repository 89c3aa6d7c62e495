"""Application settings powered by Pydantic BaseSettings."""

import logging
import sys
from typing import TextIO

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fetchkit.fetch.config import FetcherConfig
from fetchkit.fetch.constants import DEFAULT_MIN_ERROR, HEADER_AUTHORIZATION
from fetchkit.observability.logging import configure_logging


class FetcherSettings(BaseSettings):
    """Environment configuration, read from ``FETCHER_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="FETCHER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    endpoint: str = ""
    min_error: int = Field(default=DEFAULT_MIN_ERROR, ge=100, le=600)
    timeout_seconds: float | None = Field(default=None, gt=0.0, le=300.0)
    follow_redirects: bool = False
    auth_token: str | None = None
    log_level: str = "INFO"
    log_json: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log_level names a standard logging level."""
        name = v.upper()
        if name not in logging.getLevelNamesMapping():
            msg = f"Unknown log level '{v}'"
            raise ValueError(msg)
        return name

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelNamesMapping()[self.log_level]

    def configure_logging(self, output: TextIO = sys.stderr) -> None:
        """Configure structlog from ``log_level`` and ``log_json``."""
        configure_logging(self.log_level_value, output, json_format=self.log_json)

    def to_fetcher_config(self) -> FetcherConfig:
        """Build the Fetcher configuration from these settings."""
        headers: dict[str, str] = {}
        if self.auth_token:
            headers[HEADER_AUTHORIZATION] = f"Bearer {self.auth_token}"
        return FetcherConfig(
            endpoint=self.endpoint,
            headers=headers,
            min_error=self.min_error,
            timeout_seconds=self.timeout_seconds,
            follow_redirects=self.follow_redirects,
        )


def get_settings() -> FetcherSettings:
    """Get a settings instance."""
    return FetcherSettings()
