"""Prometheus metrics for event dispatch and plugin bookkeeping."""

from __future__ import annotations

from prometheus_client import Counter

# Event bus metrics
events_published_total = Counter(
    "nexus_events_published_total",
    "Total number of events published on the event bus",
    ["event_type"],
)

event_handler_failures_total = Counter(
    "nexus_event_handler_failures_total",
    "Total number of event handler invocations that raised",
    ["event_type", "selector"],
)

# Plugin registry metrics
plugin_registrations_total = Counter(
    "nexus_plugin_registrations_total",
    "Total number of plugin registration attempts",
    ["outcome"],
)

plugin_lifecycle_total = Counter(
    "nexus_plugin_lifecycle_total",
    "Total number of plugin lifecycle hook outcomes",
    ["phase", "outcome"],
)


def record_event_published(event_type: str) -> None:
    """Count a published event."""
    events_published_total.labels(event_type=event_type).inc()


def record_handler_failure(event_type: str, selector: str) -> None:
    """Count a handler failure.

    Args:
        event_type: Type of the event being dispatched
        selector: ``"type"`` for type-specific handlers, ``"wildcard"`` otherwise
    """
    event_handler_failures_total.labels(event_type=event_type, selector=selector).inc()


def record_plugin_registration(outcome: str) -> None:
    """Count a registration attempt (``"registered"`` or ``"duplicate"``)."""
    plugin_registrations_total.labels(outcome=outcome).inc()


def record_plugin_lifecycle(phase: str, outcome: str) -> None:
    """Count a lifecycle hook outcome (``"succeeded"`` or ``"failed"``)."""
    plugin_lifecycle_total.labels(phase=phase, outcome=outcome).inc()
