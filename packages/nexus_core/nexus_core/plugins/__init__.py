"""Built-in product plugins."""

from __future__ import annotations

from collections.abc import Callable

from nexus_core.domain.entities import ProductPlugin

from .bnpl import BNPL_PLUGIN_ID, create_bnpl_plugin
from .credit_card import CREDIT_CARD_PLUGIN_ID, create_credit_card_plugin

BUILTIN_PLUGIN_FACTORIES: dict[str, Callable[[], ProductPlugin]] = {
    CREDIT_CARD_PLUGIN_ID: create_credit_card_plugin,
    BNPL_PLUGIN_ID: create_bnpl_plugin,
}

__all__ = [
    "BNPL_PLUGIN_ID",
    "BUILTIN_PLUGIN_FACTORIES",
    "CREDIT_CARD_PLUGIN_ID",
    "create_bnpl_plugin",
    "create_credit_card_plugin",
]
