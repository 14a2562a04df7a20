"""Application bootstrap: wires the event bus and plugin registry together.

Boot sequence:
1. Load config
2. Create the event bus and the plugin registry
3. Register configured built-in plugins, then any extra plugins
4. Run the activation sweep
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from nexus_core.application.events import EventBus
from nexus_core.application.models import LifecycleReport
from nexus_core.application.services import PluginRegistry
from nexus_core.config import NexusConfig, get_config
from nexus_core.domain.entities import ProductPlugin
from nexus_core.domain.exceptions import ConfigurationError
from nexus_core.infrastructure.logging import get_logger
from nexus_core.plugins import BUILTIN_PLUGIN_FACTORIES

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Services created at startup and handed to the host."""

    config: NexusConfig
    event_bus: EventBus
    plugin_registry: PluginRegistry
    activation_report: LifecycleReport | None = None


def resolve_builtin_plugins(names: Iterable[str]) -> list[ProductPlugin]:
    """Instantiate built-in plugins by id, in the given order.

    Raises:
        ConfigurationError: If a name is not a known built-in plugin
    """
    plugins = []
    for name in names:
        factory = BUILTIN_PLUGIN_FACTORIES.get(name)
        if factory is None:
            raise ConfigurationError(
                "registry.builtin_plugins",
                f"unknown built-in plugin '{name}'",
                details={"available": sorted(BUILTIN_PLUGIN_FACTORIES)},
            )
        plugins.append(factory())
    return plugins


async def bootstrap(
    config: NexusConfig | None = None,
    *,
    extra_plugins: Iterable[ProductPlugin] = (),
) -> ServiceContainer:
    """Create and wire the core services.

    Args:
        config: Configuration; ``get_config()`` when omitted
        extra_plugins: Host-supplied plugins registered after the built-ins

    Returns:
        ServiceContainer holding the bus, the registry and the activation report

    Raises:
        ConfigurationError: If a configured built-in plugin is unknown
        DuplicateRegistrationError: If two plugins share an id
    """
    config = config or get_config()

    event_bus = EventBus(config.event_bus)
    registry = PluginRegistry()

    for plugin in [*resolve_builtin_plugins(config.registry.builtin_plugins), *extra_plugins]:
        registry.register(plugin)

    container = ServiceContainer(config=config, event_bus=event_bus, plugin_registry=registry)

    if config.registry.activate_on_bootstrap:
        container.activation_report = await registry.activate_all()
        if not container.activation_report.all_succeeded:
            logger.warning(
                "Some plugins failed to activate",
                extra={"failed": container.activation_report.failed},
            )

    logger.info(
        "Bootstrap completed",
        extra={
            "plugin_count": len(registry),
            "activated": container.activation_report is not None,
        },
    )
    return container
