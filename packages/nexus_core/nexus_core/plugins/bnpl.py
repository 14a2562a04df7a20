"""Buy-now-pay-later / installment plugin.

Plugs into the host with a different category set and capability list but
the same registration pattern as the credit card plugin.
"""

from __future__ import annotations

from nexus_core.domain.entities import (
    PluginAIHints,
    PluginComponents,
    PluginDisplayInfo,
    PluginRoute,
    ProductPlugin,
)
from nexus_core.domain.enums import ProductCapability, ProductCategory

BNPL_PLUGIN_ID = "synchrony-bnpl"


def create_bnpl_plugin() -> ProductPlugin:
    """Build the BNPL plugin descriptor. It defines no lifecycle hooks."""
    return ProductPlugin(
        id=BNPL_PLUGIN_ID,
        categories=(ProductCategory.BNPL, ProductCategory.INSTALLMENT_LOAN),
        display=PluginDisplayInfo(
            name="Pay Later",
            description="Synchrony Pay Later & SetPay installment plans",
            icon="📦",
            color="#8b5cf6",
        ),
        capabilities=(
            ProductCapability.MAKE_PAYMENT,
            ProductCapability.VIEW_STATEMENTS,
            ProductCapability.MANAGE_ALERTS,
            ProductCapability.EXPORT_DATA,
            ProductCapability.CHAT_SUPPORT,
            ProductCapability.SCHEDULE_PAYMENT,
        ),
        components=PluginComponents(
            summary_card="BNPLSummaryCard",
            detail_view="BNPLDetailView",
        ),
        routes=(
            PluginRoute(
                path="/accounts/bnpl/:id",
                component="BNPLDetailView",
                label="Pay Later",
                icon="📦",
            ),
        ),
        ai_hints=PluginAIHints(
            relevant_insight_categories=("payment_optimization", "spending_pattern"),
            conversation_prompts=(
                "When is my next installment due?",
                "Can I pay off my plan early?",
                "How many payments do I have left?",
            ),
        ),
    )
