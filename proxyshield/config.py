"""
Configuration Management for ProxyShield

Uses Pydantic Settings for environment-based configuration with
sensible defaults for embedding the interception layer in a host.
"""

import logging
from typing import Literal

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library configuration loaded from environment variables.

    Environment variables should be prefixed with PROXYSHIELD_.
    Example: PROXYSHIELD_STRICT_WRITES=false
    """

    model_config = SettingsConfigDict(
        env_prefix="PROXYSHIELD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # =========================================================================
    # General Settings
    # =========================================================================

    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level for the library"
    )

    # =========================================================================
    # Interception Settings
    # =========================================================================

    strict_writes: bool = Field(
        default=True,
        description=(
            "Raise NonConfigurableWriteError when a write or delete made "
            "through proxy syntax is rejected (otherwise ignore it silently)"
        )
    )

    private_prefix: str = Field(
        default="_",
        description="Names starting with this prefix are non-enumerable"
    )

    # =========================================================================
    # Tracing Settings
    # =========================================================================

    trace_event_limit: int = Field(
        default=10_000,
        ge=1,
        description="Maximum number of events a tracing policy keeps in memory"
    )


# Global settings instance - lazy loaded
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the library settings instance.

    Uses lazy loading to defer configuration parsing until first use.
    This allows environment variables and .env files to be set up
    before the settings are accessed.

    Returns:
        Settings: The library configuration.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """
    Reset the settings instance.

    Useful for testing or when environment variables change.
    """
    global _settings
    _settings = None


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog with the level taken from settings."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )
