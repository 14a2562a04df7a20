"""Credit card product plugin."""

from __future__ import annotations

from nexus_core.domain.entities import (
    PluginAIHints,
    PluginComponents,
    PluginDisplayInfo,
    PluginRoute,
    ProductPlugin,
)
from nexus_core.domain.enums import ProductCapability, ProductCategory
from nexus_core.infrastructure.logging import get_logger

logger = get_logger(__name__)

CREDIT_CARD_PLUGIN_ID = "synchrony-credit-card"


async def _on_activate() -> None:
    logger.info("Credit card plugin activated", extra={"plugin_id": CREDIT_CARD_PLUGIN_ID})


async def _on_deactivate() -> None:
    logger.info("Credit card plugin deactivated", extra={"plugin_id": CREDIT_CARD_PLUGIN_ID})


def create_credit_card_plugin() -> ProductPlugin:
    """Build the credit card plugin descriptor."""
    return ProductPlugin(
        id=CREDIT_CARD_PLUGIN_ID,
        categories=(ProductCategory.CREDIT_CARD,),
        display=PluginDisplayInfo(
            name="Credit Cards",
            description="Synchrony credit card management",
            icon="💳",
            color="#2563eb",
        ),
        capabilities=(
            ProductCapability.MAKE_PAYMENT,
            ProductCapability.VIEW_STATEMENTS,
            ProductCapability.DISPUTE_TRANSACTION,
            ProductCapability.REQUEST_CREDIT_INCREASE,
            ProductCapability.SET_AUTOPAY,
            ProductCapability.MANAGE_ALERTS,
            ProductCapability.VIEW_REWARDS,
            ProductCapability.TRANSFER_BALANCE,
            ProductCapability.LOCK_CARD,
            ProductCapability.REPLACE_CARD,
            ProductCapability.MANAGE_AUTHORIZED_USERS,
            ProductCapability.VIEW_OFFERS,
            ProductCapability.EXPORT_DATA,
            ProductCapability.CHAT_SUPPORT,
            ProductCapability.SCHEDULE_PAYMENT,
            ProductCapability.VIEW_INTEREST_BREAKDOWN,
        ),
        components=PluginComponents(
            summary_card="CreditCardSummaryCard",
            detail_view="CreditCardDetail",
            action_sheet="CreditCardActionSheet",
            capability_components={
                ProductCapability.MAKE_PAYMENT: "MakePaymentCapability",
                ProductCapability.VIEW_STATEMENTS: "ViewStatementsCapability",
                ProductCapability.DISPUTE_TRANSACTION: "DisputeTransactionCapability",
            },
        ),
        routes=(
            PluginRoute(
                path="/accounts/credit-card/:id",
                component="CreditCardDetail",
                label="Credit Card",
                icon="💳",
            ),
        ),
        ai_hints=PluginAIHints(
            relevant_insight_categories=(
                "payment_optimization",
                "credit_improvement",
                "promotional_expiry",
                "spending_pattern",
                "debt_reduction",
            ),
            conversation_prompts=(
                "How can I reduce my interest charges?",
                "When does my promo rate expire?",
                "What is the best way to pay off my balance?",
                "Should I request a credit line increase?",
            ),
            risk_factors=(
                "high_utilization",
                "minimum_payment_only",
                "promotional_expiry_approaching",
                "payment_due_soon",
            ),
        ),
        on_activate=_on_activate,
        on_deactivate=_on_deactivate,
    )
