"""Domain events exchanged over the event bus.

Every event carries a type tag from the closed ``EventType`` vocabulary and a
payload whose model is fixed by that tag. The bus itself routes on the tag
only; payload shape is enforced where events are constructed.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from .enums import EventSystem, EventType
from .exceptions import ValidationError


class EventPayload(BaseModel):
    """Base class for event payloads."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# ---------------------------------------------------------------------------
# Account payloads
# ---------------------------------------------------------------------------


class PaymentSubmittedPayload(EventPayload):
    product_id: str
    amount: float


class PaymentConfirmedPayload(EventPayload):
    product_id: str
    amount: float
    confirmation_id: str


class PaymentFailedPayload(EventPayload):
    product_id: str
    reason: str


class BalanceUpdatedPayload(EventPayload):
    product_id: str
    new_balance: float
    previous_balance: float


class CreditLimitChangedPayload(EventPayload):
    product_id: str
    new_limit: float


class AccountStatusChangedPayload(EventPayload):
    product_id: str
    new_status: str
    previous_status: str


class AutopayConfiguredPayload(EventPayload):
    product_id: str
    amount: float
    day_of_month: int = Field(..., ge=1, le=31)


class CardLockPayload(EventPayload):
    """Shared by card locked and unlocked events."""

    product_id: str


# ---------------------------------------------------------------------------
# AI payloads
# ---------------------------------------------------------------------------


class InsightGeneratedPayload(EventPayload):
    insight_id: str
    category: str
    priority: str


class InsightActedOnPayload(EventPayload):
    insight_id: str
    action_id: str


class InsightDismissedPayload(EventPayload):
    insight_id: str
    reason: str | None = None


class NudgeDisplayedPayload(EventPayload):
    nudge_id: str


class NudgeInteractedPayload(EventPayload):
    nudge_id: str
    action: str


class RiskDetectedPayload(EventPayload):
    product_id: str
    risk_score: float


class ConversationStartedPayload(EventPayload):
    session_id: str


class ConversationMessagePayload(EventPayload):
    session_id: str
    role: str


# ---------------------------------------------------------------------------
# Dispute payloads
# ---------------------------------------------------------------------------


class DisputeCreatedPayload(EventPayload):
    dispute_id: str
    transaction_id: str
    amount: float


class DisputeStatusUpdatedPayload(EventPayload):
    dispute_id: str
    new_status: str


class DisputeResolvedPayload(EventPayload):
    dispute_id: str
    outcome: str
    credit_amount: float | None = None


class DisputeDocumentUploadedPayload(EventPayload):
    dispute_id: str
    document_id: str


# ---------------------------------------------------------------------------
# UX payloads
# ---------------------------------------------------------------------------


class ScreenViewedPayload(EventPayload):
    screen: str
    referrer: str | None = None


class ActionInitiatedPayload(EventPayload):
    action: str
    context: dict[str, Any] = Field(default_factory=dict)


class ErrorDisplayedPayload(EventPayload):
    code: str
    message: str


class FeatureFlagEvaluatedPayload(EventPayload):
    flag: str
    value: bool


EVENT_PAYLOAD_MODELS: dict[EventType, type[EventPayload]] = {
    EventType.ACCOUNT_PAYMENT_SUBMITTED: PaymentSubmittedPayload,
    EventType.ACCOUNT_PAYMENT_CONFIRMED: PaymentConfirmedPayload,
    EventType.ACCOUNT_PAYMENT_FAILED: PaymentFailedPayload,
    EventType.ACCOUNT_BALANCE_UPDATED: BalanceUpdatedPayload,
    EventType.ACCOUNT_CREDIT_LIMIT_CHANGED: CreditLimitChangedPayload,
    EventType.ACCOUNT_STATUS_CHANGED: AccountStatusChangedPayload,
    EventType.ACCOUNT_AUTOPAY_CONFIGURED: AutopayConfiguredPayload,
    EventType.ACCOUNT_CARD_LOCKED: CardLockPayload,
    EventType.ACCOUNT_CARD_UNLOCKED: CardLockPayload,
    EventType.AI_INSIGHT_GENERATED: InsightGeneratedPayload,
    EventType.AI_INSIGHT_ACTED_ON: InsightActedOnPayload,
    EventType.AI_INSIGHT_DISMISSED: InsightDismissedPayload,
    EventType.AI_NUDGE_DISPLAYED: NudgeDisplayedPayload,
    EventType.AI_NUDGE_INTERACTED: NudgeInteractedPayload,
    EventType.AI_RISK_DETECTED: RiskDetectedPayload,
    EventType.AI_CONVERSATION_STARTED: ConversationStartedPayload,
    EventType.AI_CONVERSATION_MESSAGE: ConversationMessagePayload,
    EventType.DISPUTE_CREATED: DisputeCreatedPayload,
    EventType.DISPUTE_STATUS_UPDATED: DisputeStatusUpdatedPayload,
    EventType.DISPUTE_RESOLVED: DisputeResolvedPayload,
    EventType.DISPUTE_DOCUMENT_UPLOADED: DisputeDocumentUploadedPayload,
    EventType.UX_SCREEN_VIEWED: ScreenViewedPayload,
    EventType.UX_ACTION_INITIATED: ActionInitiatedPayload,
    EventType.UX_ERROR_DISPLAYED: ErrorDisplayedPayload,
    EventType.UX_FEATURE_FLAG_EVALUATED: FeatureFlagEvaluatedPayload,
}


class EventSource(BaseModel):
    """Provenance of an event: originating system and module name."""

    model_config = ConfigDict(frozen=True)

    system: EventSystem = Field(..., description="Originating system")
    module: str = Field(..., min_length=1, description="Originating module name")


class Event(BaseModel):
    """Immutable domain event.

    Attributes:
        id: Globally unique event identifier, supplied by the publisher
        type: Event type from the closed vocabulary
        payload: Payload model matching ``type``
        timestamp: Creation time
        source: Originating system and module
        correlation_id: Optional id linking related events
        user_id: Optional id of the user the event concerns
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique event identifier")
    type: EventType = Field(..., description="Type of event")
    payload: Any = Field(..., description="Payload matching the event type")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source: EventSource
    correlation_id: str | None = Field(None, description="Correlation ID for related events")
    user_id: str | None = Field(None, description="User the event concerns")

    @field_validator("payload")
    @classmethod
    def validate_payload_shape(cls, v: Any, info: ValidationInfo) -> Any:
        """Coerce the payload into the model registered for the event type."""
        event_type = info.data.get("type")
        if event_type is None:
            return v
        return EVENT_PAYLOAD_MODELS[event_type].model_validate(v)


def create_event(
    event_type: EventType | str,
    payload: Mapping[str, Any] | EventPayload,
    *,
    source: EventSource,
    event_id: str | None = None,
    timestamp: datetime | None = None,
    correlation_id: str | None = None,
    user_id: str | None = None,
) -> Event:
    """Build an event, checking the payload against its type's contract.

    Args:
        event_type: Event type (member or its string value)
        payload: Payload fields or a ready payload model
        source: Event provenance
        event_id: Unique id; a uuid4 string is generated when omitted
        timestamp: Creation time; defaults to now (UTC)
        correlation_id: Optional correlation id
        user_id: Optional user id

    Returns:
        The constructed Event

    Raises:
        ValidationError: If the event type is unknown or the payload does not
            match the type's payload model
    """
    try:
        resolved_type = EventType(event_type)
    except ValueError as e:
        raise ValidationError(
            f"Unknown event type '{event_type}'",
            field="type",
        ) from e

    fields: dict[str, Any] = {
        "id": event_id or str(uuid.uuid4()),
        "type": resolved_type,
        "payload": payload,
        "source": source,
        "correlation_id": correlation_id,
        "user_id": user_id,
    }
    if timestamp is not None:
        fields["timestamp"] = timestamp

    try:
        return Event(**fields)
    except PydanticValidationError as e:
        errors = e.errors(include_url=False)
        field = str(errors[0]["loc"][0]) if errors and errors[0]["loc"] else None
        raise ValidationError(
            f"Invalid {field or 'event'} for event type '{resolved_type.value}'",
            field=field,
            details={"errors": errors},
        ) from e
