"""Centralized configuration management for the Nexus core.

This module provides a centralized configuration system that supports:
- Environment variable overrides
- Default values with validation
- Type safety using Pydantic
- Hierarchical configuration structure
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nexus_core.infrastructure.logging import LoggingConfig


class EventBusConfig(BaseModel):
    """Event bus configuration."""

    log_handler_tracebacks: bool = Field(
        default=True, description="Include tracebacks when logging handler failures"
    )


class RegistryConfig(BaseModel):
    """Plugin registry and bootstrap configuration."""

    builtin_plugins: list[str] = Field(
        default_factory=lambda: ["synchrony-credit-card", "synchrony-bnpl"],
        description="Ids of built-in plugins registered at bootstrap, in order",
    )

    activate_on_bootstrap: bool = Field(
        default=True, description="Run the activation sweep at the end of bootstrap"
    )

    @field_validator("builtin_plugins")
    @classmethod
    def validate_unique(cls, v: list[str]) -> list[str]:
        """Reject a built-in listed twice; it would fail registration anyway."""
        if len(set(v)) != len(v):
            raise ValueError("builtin_plugins must not contain duplicates")
        return v


class NexusConfig(BaseSettings):
    """Main configuration.

    All configuration values can be overridden using environment variables
    with the prefix NEXUS_CORE_ (e.g., NEXUS_CORE_REGISTRY__ACTIVATE_ON_BOOTSTRAP).
    """

    model_config = SettingsConfigDict(
        env_prefix="NEXUS_CORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    event_bus: EventBusConfig = Field(default_factory=EventBusConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache(maxsize=1)
def get_config() -> NexusConfig:
    """Get the singleton configuration instance.

    This function returns a cached configuration instance that reads from
    environment variables and configuration files.

    Returns:
        NexusConfig: The configuration instance
    """
    return NexusConfig()


def reload_config() -> NexusConfig:
    """Reload configuration from environment.

    This clears the cache and creates a new configuration instance.

    Returns:
        NexusConfig: The new configuration instance
    """
    get_config.cache_clear()
    return get_config()
