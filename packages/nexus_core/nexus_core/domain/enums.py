"""Domain enums for the Nexus extensibility core."""

from __future__ import annotations

from enum import Enum


class ProductCategory(str, Enum):
    """Product category a plugin can claim."""

    CREDIT_CARD = "credit_card"
    BNPL = "bnpl"
    SAVINGS = "savings"
    CD = "cd"
    IRA = "ira"
    MONEY_MARKET = "money_market"
    INSTALLMENT_LOAN = "installment_loan"
    CARE_CREDIT = "care_credit"
    PROMOTIONAL_FINANCING = "promotional_financing"


class ProductCapability(str, Enum):
    """Named operation a plugin declares support for."""

    MAKE_PAYMENT = "make_payment"
    VIEW_STATEMENTS = "view_statements"
    DISPUTE_TRANSACTION = "dispute_transaction"
    REQUEST_CREDIT_INCREASE = "request_credit_increase"
    SET_AUTOPAY = "set_autopay"
    MANAGE_ALERTS = "manage_alerts"
    VIEW_REWARDS = "view_rewards"
    TRANSFER_BALANCE = "transfer_balance"
    LOCK_CARD = "lock_card"
    REPLACE_CARD = "replace_card"
    MANAGE_AUTHORIZED_USERS = "manage_authorized_users"
    VIEW_OFFERS = "view_offers"
    EXPORT_DATA = "export_data"
    CHAT_SUPPORT = "chat_support"
    SCHEDULE_PAYMENT = "schedule_payment"
    VIEW_INTEREST_BREAKDOWN = "view_interest_breakdown"
    RESTRUCTURE_PLAN = "restructure_plan"


class EventSystem(str, Enum):
    """System an event originated from."""

    CLIENT = "client"
    SERVER = "server"
    REALTIME = "realtime"
    AI_ENGINE = "ai_engine"


class EventType(str, Enum):
    """Closed vocabulary of event types (domain.entity.action).

    Each member maps to exactly one payload model in
    ``nexus_core.domain.events.EVENT_PAYLOAD_MODELS``. New members may be
    added; the payload shape of an existing member must not change.
    """

    # Account
    ACCOUNT_PAYMENT_SUBMITTED = "account.payment.submitted"
    ACCOUNT_PAYMENT_CONFIRMED = "account.payment.confirmed"
    ACCOUNT_PAYMENT_FAILED = "account.payment.failed"
    ACCOUNT_BALANCE_UPDATED = "account.balance.updated"
    ACCOUNT_CREDIT_LIMIT_CHANGED = "account.credit_limit.changed"
    ACCOUNT_STATUS_CHANGED = "account.status.changed"
    ACCOUNT_AUTOPAY_CONFIGURED = "account.autopay.configured"
    ACCOUNT_CARD_LOCKED = "account.card.locked"
    ACCOUNT_CARD_UNLOCKED = "account.card.unlocked"

    # AI / insights
    AI_INSIGHT_GENERATED = "ai.insight.generated"
    AI_INSIGHT_ACTED_ON = "ai.insight.acted_on"
    AI_INSIGHT_DISMISSED = "ai.insight.dismissed"
    AI_NUDGE_DISPLAYED = "ai.nudge.displayed"
    AI_NUDGE_INTERACTED = "ai.nudge.interacted"
    AI_RISK_DETECTED = "ai.risk.detected"
    AI_CONVERSATION_STARTED = "ai.conversation.started"
    AI_CONVERSATION_MESSAGE = "ai.conversation.message"

    # Disputes
    DISPUTE_CREATED = "dispute.created"
    DISPUTE_STATUS_UPDATED = "dispute.status.updated"
    DISPUTE_RESOLVED = "dispute.resolved"
    DISPUTE_DOCUMENT_UPLOADED = "dispute.document.uploaded"

    # Navigation / UX
    UX_SCREEN_VIEWED = "ux.screen.viewed"
    UX_ACTION_INITIATED = "ux.action.initiated"
    UX_ERROR_DISPLAYED = "ux.error.displayed"
    UX_FEATURE_FLAG_EVALUATED = "ux.feature_flag.evaluated"

    @property
    def domain(self) -> str:
        """Top-level namespace of the event type (e.g. ``"account"``)."""
        return self.value.split(".", 1)[0]
