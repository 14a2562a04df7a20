"""Application services for the Nexus core."""

from __future__ import annotations

from .plugin_registry import PluginRegistry

__all__ = ["PluginRegistry"]
