"""Unit tests for the application event bus."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pytest
from nexus_core.application.events import EventBus, Subscription
from nexus_core.config import EventBusConfig
from nexus_core.domain.enums import EventSystem, EventType
from nexus_core.domain.events import Event, EventSource, create_event
from nexus_core.domain.exceptions import ValidationError
from prometheus_client import REGISTRY


def make_payment_event(event_id: str = "test-1", amount: float = 100) -> Event:
    """Create an account.payment.submitted event."""
    return create_event(
        EventType.ACCOUNT_PAYMENT_SUBMITTED,
        {"product_id": "prod-1", "amount": amount},
        source=EventSource(system=EventSystem.CLIENT, module="test"),
        event_id=event_id,
    )


def make_insight_event(event_id: str = "test-2") -> Event:
    """Create an ai.insight.generated event."""
    return create_event(
        EventType.AI_INSIGHT_GENERATED,
        {"insight_id": "ins-1", "category": "risk_alert", "priority": "high"},
        source=EventSource(system=EventSystem.SERVER, module="ai"),
        event_id=event_id,
    )


class TestSubscribe:
    """Test typed subscriptions."""

    def test_publish_to_typed_subscriber(self, event_bus: EventBus) -> None:
        """Test that a typed subscriber receives the published event unchanged."""
        handler = MagicMock()
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        event = make_payment_event()
        event_bus.publish(event)

        handler.assert_called_once_with(event)
        assert handler.call_args.args[0] is event

    def test_subscribe_accepts_string_event_type(self, event_bus: EventBus) -> None:
        """Test subscribing with the dotted string value."""
        handler = MagicMock()
        event_bus.subscribe("account.payment.submitted", handler)

        event_bus.publish(make_payment_event())

        assert handler.call_count == 1

    def test_different_event_type_not_delivered(self, event_bus: EventBus) -> None:
        """Test that handlers are not called for other event types."""
        handler = MagicMock()
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        event_bus.publish(
            create_event(
                EventType.ACCOUNT_CARD_LOCKED,
                {"product_id": "prod-1"},
                source=EventSource(system=EventSystem.CLIENT, module="test"),
            )
        )

        handler.assert_not_called()

    def test_multiple_subscribers_same_type(self, event_bus: EventBus) -> None:
        """Test that every subscriber of a type is called exactly once."""
        handler1 = MagicMock()
        handler2 = MagicMock()
        event_bus.subscribe(EventType.AI_INSIGHT_GENERATED, handler1)
        event_bus.subscribe(EventType.AI_INSIGHT_GENERATED, handler2)

        event_bus.publish(make_insight_event())

        assert handler1.call_count == 1
        assert handler2.call_count == 1

    def test_handler_called_once_per_publish(self, event_bus: EventBus) -> None:
        """Test one invocation per publish call."""
        handler = MagicMock()
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        for i in range(3):
            event_bus.publish(make_payment_event(event_id=f"evt-{i}"))

        assert handler.call_count == 3

    def test_same_handler_subscribed_twice(self, event_bus: EventBus) -> None:
        """Test that subscribing the same handler twice yields independent subscriptions."""
        handler = MagicMock()
        first = event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        event_bus.publish(make_payment_event())
        assert handler.call_count == 2

        first()
        event_bus.publish(make_payment_event())
        assert handler.call_count == 3

    def test_unknown_event_type_rejected(self, event_bus: EventBus) -> None:
        """Test that subscribing to an unknown type raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            event_bus.subscribe("account.unknown.thing", MagicMock())

        assert exc_info.value.details["field"] == "event_type"

    def test_non_callable_handler_rejected(self, event_bus: EventBus) -> None:
        """Test that a non-callable handler raises ValidationError."""
        with pytest.raises(ValidationError):
            event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, "not-callable")  # type: ignore[arg-type]

    def test_publish_without_subscribers(self, event_bus: EventBus) -> None:
        """Test publishing with no subscribers does not raise."""
        event_bus.publish(make_payment_event())


class TestSubscribeAll:
    """Test wildcard subscriptions."""

    def test_wildcard_receives_every_type(self, event_bus: EventBus) -> None:
        """Test wildcard handler is called once per publish, for every type."""
        handler = MagicMock()
        event_bus.subscribe_all(handler)

        event_bus.publish(make_payment_event())
        event_bus.publish(make_insight_event())

        assert handler.call_count == 2

    def test_wildcard_and_typed_both_notified(self, event_bus: EventBus) -> None:
        """Test both typed and wildcard subscribers see the same event."""
        typed = MagicMock()
        wildcard = MagicMock()
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, typed)
        event_bus.subscribe_all(wildcard)

        event = make_payment_event()
        event_bus.publish(event)

        typed.assert_called_once_with(event)
        wildcard.assert_called_once_with(event)

    def test_delivery_order(self, event_bus: EventBus) -> None:
        """Test typed subscribers run before wildcard ones, each in registration order."""
        calls: list[str] = []
        event_bus.subscribe_all(lambda e: calls.append("wildcard-1"))
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, lambda e: calls.append("typed-1"))
        event_bus.subscribe_all(lambda e: calls.append("wildcard-2"))
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, lambda e: calls.append("typed-2"))

        event_bus.publish(make_payment_event())

        assert calls == ["typed-1", "typed-2", "wildcard-1", "wildcard-2"]

    def test_non_callable_wildcard_rejected(self, event_bus: EventBus) -> None:
        """Test that a non-callable wildcard handler raises ValidationError."""
        with pytest.raises(ValidationError):
            event_bus.subscribe_all(None)  # type: ignore[arg-type]


class TestCancellation:
    """Test subscription cancellation handles."""

    def test_cancel_stops_delivery(self, event_bus: EventBus) -> None:
        """Test that no events are delivered after cancel."""
        handler = MagicMock()
        unsubscribe = event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        event_bus.publish(make_payment_event(event_id="evt-5"))
        assert handler.call_count == 1

        unsubscribe()
        event_bus.publish(make_payment_event(event_id="evt-6", amount=200))

        assert handler.call_count == 1

    def test_cancel_is_idempotent(self, event_bus: EventBus) -> None:
        """Test that cancelling twice is a no-op."""
        handler = MagicMock()
        subscription = event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        subscription.cancel()
        subscription.cancel()
        subscription()

        assert subscription.active is False
        assert event_bus.subscriber_count(EventType.ACCOUNT_PAYMENT_SUBMITTED) == 0

    def test_cancel_removes_only_its_subscription(self, event_bus: EventBus) -> None:
        """Test that cancelling one subscription leaves others intact."""
        handler1 = MagicMock()
        handler2 = MagicMock()
        sub1 = event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler1)
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler2)

        sub1()
        sub1()
        event_bus.publish(make_payment_event())

        handler1.assert_not_called()
        handler2.assert_called_once()

    def test_cancel_wildcard(self, event_bus: EventBus) -> None:
        """Test cancelling a wildcard subscription."""
        handler = MagicMock()
        subscription = event_bus.subscribe_all(handler)
        assert event_bus.subscriber_count() == 1

        subscription()
        event_bus.publish(make_insight_event())

        handler.assert_not_called()
        assert event_bus.subscriber_count() == 0

    def test_subscription_handle_type(self, event_bus: EventBus) -> None:
        """Test the returned handle exposes its binding."""
        handler = MagicMock()
        subscription = event_bus.subscribe(EventType.AI_NUDGE_DISPLAYED, handler)

        assert isinstance(subscription, Subscription)
        assert subscription.event_type is EventType.AI_NUDGE_DISPLAYED
        assert subscription.handler is handler
        assert subscription.selector == "type"
        assert subscription.active is True
        assert event_bus.subscribe_all(handler).selector == "wildcard"

    def test_cancel_during_publish_skips_pending_handler(self, event_bus: EventBus) -> None:
        """Test a subscription cancelled by an earlier handler is not invoked."""
        late = MagicMock()
        late_subscription: list[Subscription] = []

        event_bus.subscribe(
            EventType.ACCOUNT_PAYMENT_SUBMITTED, lambda e: late_subscription[0].cancel()
        )
        late_subscription.append(event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, late))

        event_bus.publish(make_payment_event())

        late.assert_not_called()

    def test_subscribe_during_publish_not_notified(self, event_bus: EventBus) -> None:
        """Test a handler added during publish only sees later events."""
        added = MagicMock()

        def subscriber(event: Event) -> None:
            event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, added)

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, subscriber)

        event_bus.publish(make_payment_event())
        added.assert_not_called()

        event_bus.publish(make_payment_event())
        added.assert_called_once()

    def test_no_replay_for_late_subscriber(self, event_bus: EventBus) -> None:
        """Test handlers never receive events published before they subscribed."""
        event_bus.publish(make_payment_event())

        handler = MagicMock()
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        handler.assert_not_called()


class TestFaultIsolation:
    """Test that failing handlers do not affect others."""

    def test_error_does_not_break_other_handlers(self, event_bus: EventBus) -> None:
        """Test a raising handler is logged and others still run."""
        error_handler = MagicMock(side_effect=RuntimeError("boom"))
        good_handler = MagicMock()
        wildcard = MagicMock()

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, error_handler)
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, good_handler)
        event_bus.subscribe_all(wildcard)

        with patch("nexus_core.application.events.logger") as mock_logger:
            event_bus.publish(make_payment_event(event_id="test-7"))

        assert error_handler.call_count == 1
        assert good_handler.call_count == 1
        assert wildcard.call_count == 1

        mock_logger.error.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert "account.payment.submitted" in args[0]
        assert kwargs["extra"]["event_id"] == "test-7"
        assert kwargs["extra"]["selector"] == "type"
        assert kwargs["extra"]["error"] == "boom"
        assert isinstance(kwargs["exc_info"], RuntimeError)

    def test_failing_wildcard_does_not_break_others(self, event_bus: EventBus) -> None:
        """Test a raising wildcard handler is isolated."""
        wildcard_bad = MagicMock(side_effect=ValueError("bad"))
        wildcard_good = MagicMock()
        event_bus.subscribe_all(wildcard_bad)
        event_bus.subscribe_all(wildcard_good)

        with patch("nexus_core.application.events.logger") as mock_logger:
            event_bus.publish(make_insight_event())

        wildcard_good.assert_called_once()
        args, kwargs = mock_logger.error.call_args
        assert args[0] == "Wildcard handler error"
        assert kwargs["extra"]["selector"] == "wildcard"

    def test_subsequent_publishes_still_work(self, event_bus: EventBus) -> None:
        """Test that a failure does not affect later publish calls."""
        calls: list[str] = []

        def flaky(event: Event) -> None:
            calls.append(event.id)
            raise RuntimeError("always fails")

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, flaky)

        event_bus.publish(make_payment_event(event_id="a"))
        event_bus.publish(make_payment_event(event_id="b"))

        assert calls == ["a", "b"]

    def test_tracebacks_can_be_disabled(self) -> None:
        """Test that log_handler_tracebacks=False omits exc_info."""
        bus = EventBus(EventBusConfig(log_handler_tracebacks=False))
        bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, MagicMock(side_effect=KeyError("x")))

        with patch("nexus_core.application.events.logger") as mock_logger:
            bus.publish(make_payment_event())

        assert mock_logger.error.call_args.kwargs["exc_info"] is None

    def test_failure_counted_in_metrics(self, event_bus: EventBus) -> None:
        """Test handler failures increment the failure counter."""
        labels = {"event_type": "account.payment.submitted", "selector": "type"}
        before = REGISTRY.get_sample_value("nexus_event_handler_failures_total", labels) or 0.0

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, MagicMock(side_effect=Exception))
        event_bus.publish(make_payment_event())

        after = REGISTRY.get_sample_value("nexus_event_handler_failures_total", labels)
        assert after == before + 1

    def test_publish_counted_in_metrics(self, event_bus: EventBus) -> None:
        """Test every publish increments the published counter."""
        labels = {"event_type": "ai.insight.generated"}
        before = REGISTRY.get_sample_value("nexus_events_published_total", labels) or 0.0

        event_bus.publish(make_insight_event())
        event_bus.publish(make_insight_event())

        assert REGISTRY.get_sample_value("nexus_events_published_total", labels) == before + 2


class TestCoroutineHandlers:
    """Test handlers that return awaitables."""

    @pytest.mark.asyncio
    async def test_coroutine_handler_scheduled(self, event_bus: EventBus) -> None:
        """Test an async handler runs as a task on the running loop."""
        received: list[Event] = []

        async def handler(event: Event) -> None:
            await asyncio.sleep(0)
            received.append(event)

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)
        event = make_payment_event()
        event_bus.publish(event)
        await event_bus.drain_pending()

        assert received == [event]

    @pytest.mark.asyncio
    async def test_coroutine_handler_failure_logged(self, event_bus: EventBus) -> None:
        """Test a failing async handler is logged and does not affect others."""
        good = MagicMock()

        async def failing(event: Event) -> None:
            raise RuntimeError("async boom")

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, failing)
        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, good)

        with patch("nexus_core.application.events.logger") as mock_logger:
            event_bus.publish(make_payment_event())
            await event_bus.drain_pending()

        good.assert_called_once()
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["extra"]["error"] == "async boom"

    def test_coroutine_handler_without_loop_discarded(self, event_bus: EventBus) -> None:
        """Test an async handler outside an event loop is closed with a warning."""
        ran = MagicMock()

        async def handler(event: Event) -> None:
            ran()

        event_bus.subscribe(EventType.ACCOUNT_PAYMENT_SUBMITTED, handler)

        with patch("nexus_core.application.events.logger") as mock_logger:
            event_bus.publish(make_payment_event())

        ran.assert_not_called()
        mock_logger.warning.assert_called_once()
