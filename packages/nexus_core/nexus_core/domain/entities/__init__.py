"""Domain entities for the Nexus extensibility core."""

from __future__ import annotations

from .plugin import (
    LifecycleHook,
    PluginAIHints,
    PluginComponents,
    PluginDisplayInfo,
    PluginRoute,
    ProductPlugin,
)

__all__ = [
    "LifecycleHook",
    "PluginAIHints",
    "PluginComponents",
    "PluginDisplayInfo",
    "PluginRoute",
    "ProductPlugin",
]
