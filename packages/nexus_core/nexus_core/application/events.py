"""In-process event bus with typed and wildcard subscriptions.

Publishing is synchronous: every currently subscribed handler has been
invoked by the time ``publish`` returns. A handler that raises is logged and
skipped; it never affects other handlers or the publisher.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Callable
from typing import Any

from nexus_core.config import EventBusConfig
from nexus_core.domain.enums import EventType
from nexus_core.domain.events import Event
from nexus_core.domain.exceptions import ValidationError
from nexus_core.infrastructure.logging import get_logger
from nexus_core.infrastructure.monitoring import record_event_published, record_handler_failure

logger = get_logger(__name__)

EventHandler = Callable[[Event], Any]

WILDCARD = "wildcard"


class Subscription:
    """Handle for one subscription.

    Calling the handle (or ``cancel()``) removes exactly this subscription.
    Cancelling more than once is a no-op.
    """

    def __init__(
        self, bus: EventBus, event_type: EventType | None, handler: EventHandler
    ) -> None:
        self._bus = bus
        self.event_type = event_type
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        """Whether the subscription still receives events."""
        return self._active

    @property
    def selector(self) -> str:
        """``"type"`` for a type-specific subscription, ``"wildcard"`` otherwise."""
        return WILDCARD if self.event_type is None else "type"

    def cancel(self) -> None:
        """Remove this subscription from the bus."""
        if not self._active:
            return
        self._active = False
        self._bus._remove(self)

    def __call__(self) -> None:
        self.cancel()

    def __repr__(self) -> str:
        target = self.event_type.value if self.event_type is not None else "*"
        return f"<Subscription {target} -> {_handler_name(self.handler)} active={self._active}>"


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """Simple in-memory event bus for application events.

    Delivery order within one publish: type-specific subscriptions first,
    then wildcard subscriptions, each group in registration order.
    """

    def __init__(self, config: EventBusConfig | None = None) -> None:
        """Initialize event bus."""
        self._config = config or EventBusConfig()
        self._handlers: dict[EventType, list[Subscription]] = {}
        self._wildcard_handlers: list[Subscription] = []
        self._pending: set[asyncio.Future[Any]] = set()

    def subscribe(self, event_type: EventType | str, handler: EventHandler) -> Subscription:
        """Subscribe a handler to one event type.

        Args:
            event_type: Event type (member or its string value)
            handler: Callable taking the Event

        Returns:
            Subscription handle; call it to unsubscribe

        Raises:
            ValidationError: If the event type is unknown or handler is not callable
        """
        try:
            resolved = EventType(event_type)
        except ValueError as e:
            raise ValidationError(
                f"Unknown event type '{event_type}'", field="event_type"
            ) from e
        self._check_handler(handler)

        subscription = Subscription(self, resolved, handler)
        self._handlers.setdefault(resolved, []).append(subscription)
        logger.debug(
            "Handler subscribed",
            extra={"event_type": resolved.value, "handler": _handler_name(handler)},
        )
        return subscription

    def subscribe_all(self, handler: EventHandler) -> Subscription:
        """Subscribe a handler to every event type."""
        self._check_handler(handler)
        subscription = Subscription(self, None, handler)
        self._wildcard_handlers.append(subscription)
        logger.debug(
            "Wildcard handler subscribed", extra={"handler": _handler_name(handler)}
        )
        return subscription

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed handlers.

        Subscriber lists are snapshotted on entry: handlers subscribed during
        this call are not notified, handlers cancelled during this call are
        skipped if not yet reached.
        """
        record_event_published(event.type.value)

        typed = list(self._handlers.get(event.type, ()))
        wildcard = list(self._wildcard_handlers)

        for subscription in typed:
            self._invoke(subscription, event)
        for subscription in wildcard:
            self._invoke(subscription, event)

    def subscriber_count(self, event_type: EventType | str | None = None) -> int:
        """Number of active subscriptions for a type, or wildcard ones when None."""
        if event_type is None:
            return len(self._wildcard_handlers)
        try:
            resolved = EventType(event_type)
        except ValueError:
            return 0
        return len(self._handlers.get(resolved, ()))

    async def drain_pending(self) -> None:
        """Wait for tasks started by coroutine handlers to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _check_handler(handler: EventHandler) -> None:
        if not callable(handler):
            raise ValidationError("Event handler must be callable", field="handler")

    def _remove(self, subscription: Subscription) -> None:
        if subscription.event_type is None:
            self._wildcard_handlers = [
                s for s in self._wildcard_handlers if s is not subscription
            ]
            return

        remaining = [
            s for s in self._handlers.get(subscription.event_type, ()) if s is not subscription
        ]
        if remaining:
            self._handlers[subscription.event_type] = remaining
        else:
            self._handlers.pop(subscription.event_type, None)

    def _invoke(self, subscription: Subscription, event: Event) -> None:
        if not subscription.active:
            return
        try:
            result = subscription.handler(event)
        except Exception as e:
            self._report_failure(subscription, event, e)
            return

        if inspect.isawaitable(result):
            self._schedule(subscription, event, result)

    def _schedule(self, subscription: Subscription, event: Event, awaitable: Any) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Coroutine handler invoked outside a running event loop; result discarded",
                extra={
                    "event_id": event.id,
                    "event_type": event.type.value,
                    "handler": _handler_name(subscription.handler),
                },
            )
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)
        task.add_done_callback(functools.partial(self._on_task_done, subscription, event))

    def _on_task_done(
        self, subscription: Subscription, event: Event, task: asyncio.Future[Any]
    ) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._report_failure(subscription, event, exc)

    def _report_failure(
        self, subscription: Subscription, event: Event, error: BaseException
    ) -> None:
        record_handler_failure(event.type.value, subscription.selector)
        if subscription.event_type is None:
            message = "Wildcard handler error"
        else:
            message = f"Handler error for {event.type.value}"
        logger.error(
            message,
            exc_info=error if self._config.log_handler_tracebacks else None,
            extra={
                "event_id": event.id,
                "event_type": event.type.value,
                "handler": _handler_name(subscription.handler),
                "selector": subscription.selector,
                "error": str(error),
            },
        )
