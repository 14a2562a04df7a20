"""Configuration package for the Nexus core."""

from .config import EventBusConfig, NexusConfig, RegistryConfig, get_config, reload_config

__all__ = ["EventBusConfig", "NexusConfig", "RegistryConfig", "get_config", "reload_config"]
