"""Plugin registry application service."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

from nexus_core.application.models import (
    LifecycleOutcome,
    LifecyclePhase,
    LifecycleReport,
    LifecycleStatus,
)
from nexus_core.domain.entities import LifecycleHook, PluginRoute, ProductPlugin
from nexus_core.domain.enums import ProductCapability, ProductCategory
from nexus_core.domain.exceptions import DuplicateRegistrationError
from nexus_core.infrastructure.logging import get_logger
from nexus_core.infrastructure.monitoring import (
    record_plugin_lifecycle,
    record_plugin_registration,
)

logger = get_logger(__name__)


class PluginRegistry:
    """Authoritative catalog of product plugins.

    Plugins are indexed by id and by product category. When several plugins
    claim the same category, the earliest registered one that is still
    registered resolves for it.

    All read and write operations are synchronous. The only suspension points
    are the plugins' own lifecycle hooks inside ``activate_all`` and
    ``deactivate_all``.
    """

    def __init__(self) -> None:
        """Initialize the plugin registry."""
        self._plugins: dict[str, ProductPlugin] = {}
        self._category_index: dict[ProductCategory, list[str]] = {}
        logger.info("PluginRegistry initialized")

    def register(self, plugin: ProductPlugin) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin descriptor

        Raises:
            DuplicateRegistrationError: If a plugin with the same id is registered
        """
        if plugin.id in self._plugins:
            record_plugin_registration("duplicate")
            logger.warning(
                "Duplicate plugin registration attempt",
                extra={"plugin_id": plugin.id},
            )
            raise DuplicateRegistrationError(plugin.id)

        log_extra = {
            "plugin_id": plugin.id,
            "categories": [str(c.value) for c in plugin.categories],
            "capability_count": len(plugin.capabilities),
            "route_count": len(plugin.routes),
        }

        self._plugins[plugin.id] = plugin
        for category in plugin.categories:
            claimants = self._category_index.setdefault(category, [])
            if plugin.id not in claimants:
                claimants.append(plugin.id)

        record_plugin_registration("registered")
        logger.info("Plugin registered", extra=log_extra)

    def unregister(self, plugin_id: str) -> None:
        """Unregister a plugin. Unknown ids are ignored.

        Args:
            plugin_id: Id of the plugin to remove
        """
        plugin = self._plugins.pop(plugin_id, None)
        if plugin is None:
            logger.debug("Unregister of unknown plugin ignored", extra={"plugin_id": plugin_id})
            return

        for category in plugin.categories:
            claimants = self._category_index.get(category)
            if claimants is None:
                continue
            remaining = [pid for pid in claimants if pid != plugin_id]
            if remaining:
                self._category_index[category] = remaining
            else:
                del self._category_index[category]

        logger.info(
            "Plugin unregistered",
            extra={"plugin_id": plugin_id, "remaining_plugins": len(self._plugins)},
        )

    def get_plugin(self, plugin_id: str) -> ProductPlugin | None:
        """Get a plugin by id, or None if not registered."""
        return self._plugins.get(plugin_id)

    def get_plugin_for_category(self, category: ProductCategory | str) -> ProductPlugin | None:
        """Get the plugin resolved for a category.

        Args:
            category: Product category (member or its string value)

        Returns:
            The first registered plugin claiming the category, or None
        """
        claimants = self._category_index.get(category)  # type: ignore[call-overload]
        if not claimants:
            return None
        return self._plugins.get(claimants[0])

    def get_capabilities_for_category(
        self, category: ProductCategory | str
    ) -> list[ProductCapability]:
        """Capabilities of the plugin resolved for a category, empty if none."""
        plugin = self.get_plugin_for_category(category)
        if plugin is None:
            return []
        return list(plugin.capabilities)

    def get_capability_component(
        self, category: ProductCategory | str, capability: ProductCapability | str
    ) -> Any | None:
        """Component the resolved plugin offers for a capability.

        Returns None when no plugin resolves for the category, the plugin does
        not declare the capability, or it offers no component for it.
        """
        plugin = self.get_plugin_for_category(category)
        if plugin is None or not plugin.has_capability(capability):
            return None
        return plugin.components.capability_components.get(capability)  # type: ignore[call-overload]

    def get_all_plugins(self) -> list[ProductPlugin]:
        """All registered plugins in registration order."""
        return list(self._plugins.values())

    def get_all_routes(self) -> list[PluginRoute]:
        """Routes of every registered plugin, concatenated in registration order."""
        return [route for plugin in self._plugins.values() for route in plugin.routes]

    async def activate_all(self) -> LifecycleReport:
        """Run every plugin's ``on_activate`` hook concurrently.

        Waits until every hook has settled. Individual failures are logged
        and reported, never raised.

        Returns:
            LifecycleReport with one outcome per registered plugin
        """
        return await self._run_lifecycle(LifecyclePhase.ACTIVATE)

    async def deactivate_all(self) -> LifecycleReport:
        """Run every plugin's ``on_deactivate`` hook concurrently.

        Same settle-all semantics as ``activate_all``.
        """
        return await self._run_lifecycle(LifecyclePhase.DEACTIVATE)

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _run_lifecycle(self, phase: LifecyclePhase) -> LifecycleReport:
        plugins = list(self._plugins.values())
        # A hook raising CancelledError settles as a failure; cancelling the
        # sweep itself still propagates out of gather.
        results = await asyncio.gather(
            *(self._run_hook(plugin, phase) for plugin in plugins), return_exceptions=True
        )
        outcomes = [
            result
            if isinstance(result, LifecycleOutcome)
            else self._failed_outcome(plugin, phase, result)
            for plugin, result in zip(plugins, results, strict=True)
        ]
        report = LifecycleReport(phase=phase, outcomes=outcomes)

        logger.info(
            f"Plugin {phase.value} sweep completed",
            extra={
                "phase": phase.value,
                "plugin_count": len(outcomes),
                "succeeded": report.succeeded,
                "failed": report.failed,
            },
        )
        return report

    async def _run_hook(self, plugin: ProductPlugin, phase: LifecyclePhase) -> LifecycleOutcome:
        hook: LifecycleHook | None = (
            plugin.on_activate if phase == LifecyclePhase.ACTIVATE else plugin.on_deactivate
        )
        if hook is None:
            record_plugin_lifecycle(phase.value, LifecycleStatus.SUCCEEDED.value)
            return LifecycleOutcome(
                plugin_id=plugin.id,
                status=LifecycleStatus.SUCCEEDED,
                hook_invoked=False,
            )

        try:
            result = hook()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            return self._failed_outcome(plugin, phase, e)

        record_plugin_lifecycle(phase.value, LifecycleStatus.SUCCEEDED.value)
        logger.debug(f"Plugin {phase.value} succeeded", extra={"plugin_id": plugin.id})
        return LifecycleOutcome(plugin_id=plugin.id, status=LifecycleStatus.SUCCEEDED)

    def _failed_outcome(
        self, plugin: ProductPlugin, phase: LifecyclePhase, error: BaseException
    ) -> LifecycleOutcome:
        record_plugin_lifecycle(phase.value, LifecycleStatus.FAILED.value)
        logger.warning(
            f"Plugin {phase.value} failed",
            exc_info=error,
            extra={"plugin_id": plugin.id, "phase": phase.value, "error": str(error)},
        )
        return LifecycleOutcome(
            plugin_id=plugin.id,
            status=LifecycleStatus.FAILED,
            error=str(error),
            error_type=type(error).__name__,
        )
