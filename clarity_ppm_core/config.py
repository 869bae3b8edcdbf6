"""
Centralized configuration management for the Clarity PPM core.

This module provides a unified configuration system with support for:
- Environment variables
- Runtime configuration
- Validation using Pydantic
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import EnvironmentVariable, Limits, LogLevel


def _optional_int_env(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class HttpConfig(BaseModel):
    """Transport configuration for calls to the backend."""

    timeout_seconds: int = Field(
        default_factory=lambda: int(
            os.getenv(
                EnvironmentVariable.CLARITY_TIMEOUT.value, str(Limits.DEFAULT_TIMEOUT_SECONDS)
            )
        ),
        gt=0,
        description="Per-request timeout in seconds",
    )
    verify_ssl: bool = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.CLARITY_VERIFY_SSL.value, "true"
        ).lower()
        != "false",
        description="Verify TLS certificates",
    )


class PaginationConfig(BaseModel):
    """Configuration for list operations."""

    page_size: int = Field(
        default_factory=lambda: int(
            os.getenv(EnvironmentVariable.CLARITY_PAGE_SIZE.value, str(Limits.DEFAULT_PAGE_SIZE))
        ),
        gt=0,
        description="Page size used when walking all pages",
    )
    default_limit: int = Field(
        default=Limits.DEFAULT_RETURN_LIMIT,
        gt=0,
        description="Record limit for bounded list calls when none is given",
    )
    max_pages: Optional[int] = Field(
        default_factory=lambda: _optional_int_env(EnvironmentVariable.CLARITY_MAX_PAGES.value),
        description="Optional ceiling on pages fetched by one walk (None means unbounded)",
    )

    @field_validator("max_pages")
    def validate_max_pages(cls, v: Optional[int]) -> Optional[int]:
        """A ceiling, when set, must allow at least one page."""
        if v is not None and v < 1:
            raise ValueError("max_pages must be a positive integer or None")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DEBUG.value, "false").lower()
        == "true",
        description="Debug mode",
    )

    # Sub-configurations
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    http: HttpConfig = Field(default_factory=HttpConfig, description="HTTP configuration")
    pagination: PaginationConfig = Field(
        default_factory=PaginationConfig, description="Pagination configuration"
    )

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
