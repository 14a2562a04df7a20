"""Shared fixtures and factories for nexus_core tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from nexus_core.application.events import EventBus
from nexus_core.application.services import PluginRegistry
from nexus_core.domain.entities import (
    PluginComponents,
    PluginDisplayInfo,
    PluginRoute,
    ProductPlugin,
)
from nexus_core.domain.enums import ProductCapability, ProductCategory


def create_mock_plugin(**overrides: Any) -> ProductPlugin:
    """Create a credit card plugin descriptor, overriding any field."""
    fields: dict[str, Any] = {
        "id": "test-plugin",
        "categories": (ProductCategory.CREDIT_CARD,),
        "display": PluginDisplayInfo(
            name="Test Plugin",
            description="A test plugin",
            icon="🧪",
            color="#000",
        ),
        "capabilities": (ProductCapability.MAKE_PAYMENT, ProductCapability.VIEW_STATEMENTS),
        "components": PluginComponents(summary_card="SummaryCard", detail_view="DetailView"),
        "routes": (),
    }
    fields.update(overrides)
    return ProductPlugin(**fields)


def make_route(path: str, label: str) -> PluginRoute:
    """Create a route descriptor with an opaque component."""
    return PluginRoute(path=path, component=f"{label}View", label=label)


@pytest.fixture
def plugin_registry() -> PluginRegistry:
    """Create an isolated PluginRegistry."""
    return PluginRegistry()


@pytest.fixture
def event_bus() -> EventBus:
    """Create an isolated EventBus."""
    return EventBus()


@pytest.fixture
def make_plugin() -> Callable[..., ProductPlugin]:
    """Factory fixture building plugin descriptors."""
    return create_mock_plugin
