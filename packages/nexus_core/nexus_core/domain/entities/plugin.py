"""ProductPlugin domain entity and its descriptor parts."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..enums import ProductCapability, ProductCategory
from ..exceptions import ValidationError

LifecycleHook = Callable[[], Awaitable[None] | None]


@dataclass(frozen=True)
class PluginDisplayInfo:
    """Display metadata. Opaque to the registry."""

    name: str
    description: str
    icon: str
    color: str


@dataclass(frozen=True)
class PluginComponents:
    """References to UI surfaces a plugin offers.

    Attributes:
        summary_card: Summary card shown on the dashboard
        detail_view: Full detail view
        action_sheet: Optional quick action sheet
        settings_panel: Optional settings panel
        capability_components: Components keyed by the capability they serve
    """

    summary_card: Any
    detail_view: Any
    action_sheet: Any | None = None
    settings_panel: Any | None = None
    capability_components: Mapping[ProductCapability, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PluginRoute:
    """Navigable path descriptor."""

    path: str
    component: Any
    label: str
    icon: str | None = None


@dataclass(frozen=True)
class PluginAIHints:
    """Tells the insights engine what is relevant for a product."""

    relevant_insight_categories: tuple[str, ...]
    conversation_prompts: tuple[str, ...] = ()
    risk_factors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProductPlugin:
    """Self-describing extension module for one or more product categories.

    Attributes:
        id: Unique plugin identifier, the registry's primary key
        categories: Product categories this plugin handles (non-empty)
        display: Display metadata
        capabilities: Capabilities this plugin enables
        components: UI component references
        routes: Route definitions
        ai_hints: Optional hints for the insights engine
        on_activate: Optional hook awaited by ``PluginRegistry.activate_all``
        on_deactivate: Optional hook awaited by ``PluginRegistry.deactivate_all``
    """

    id: str
    categories: tuple[ProductCategory, ...]
    display: PluginDisplayInfo
    capabilities: tuple[ProductCapability, ...]
    components: PluginComponents
    routes: tuple[PluginRoute, ...] = ()
    ai_hints: PluginAIHints | None = None
    on_activate: LifecycleHook | None = field(default=None, compare=False)
    on_deactivate: LifecycleHook | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate the descriptor."""
        if not self.id or not self.id.strip():
            raise ValidationError("Plugin id must not be empty", field="id")
        object.__setattr__(
            self,
            "categories",
            _coerce_members(self.id, "categories", self.categories, ProductCategory),
        )
        if not self.categories:
            raise ValidationError(
                f"Plugin '{self.id}' must declare at least one category",
                field="categories",
            )
        object.__setattr__(
            self,
            "capabilities",
            _coerce_members(self.id, "capabilities", self.capabilities, ProductCapability),
        )

    def has_capability(self, capability: ProductCapability | str) -> bool:
        """Check whether the plugin declares a capability."""
        return capability in self.capabilities


def _coerce_members(
    plugin_id: str, field_name: str, values: Any, enum_cls: type[Any]
) -> tuple[Any, ...]:
    """Convert a collection of members or their string values to an enum tuple.

    Raises:
        ValidationError: If values is a bare string or holds an unknown value
    """
    if isinstance(values, str):
        raise ValidationError(
            f"Plugin '{plugin_id}' {field_name} must be a collection, not a string",
            field=field_name,
        )
    try:
        return tuple(enum_cls(v) for v in values)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Plugin '{plugin_id}' has invalid {field_name}: {e}",
            field=field_name,
        ) from e
