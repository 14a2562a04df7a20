"""Nexus core: typed event bus and product plugin registry."""

from __future__ import annotations

from .application.events import EventBus, Subscription
from .application.models import LifecycleReport
from .application.services import PluginRegistry
from .bootstrap import ServiceContainer
from .domain.entities import (
    PluginAIHints,
    PluginComponents,
    PluginDisplayInfo,
    PluginRoute,
    ProductPlugin,
)
from .domain.enums import EventSystem, EventType, ProductCapability, ProductCategory
from .domain.events import Event, EventSource, create_event
from .domain.exceptions import DuplicateRegistrationError
from .version import __version__

__all__ = [
    "DuplicateRegistrationError",
    "Event",
    "EventBus",
    "EventSource",
    "EventSystem",
    "EventType",
    "LifecycleReport",
    "PluginAIHints",
    "PluginComponents",
    "PluginDisplayInfo",
    "PluginRegistry",
    "PluginRoute",
    "ProductCapability",
    "ProductCategory",
    "ProductPlugin",
    "ServiceContainer",
    "Subscription",
    "__version__",
    "create_event",
]
