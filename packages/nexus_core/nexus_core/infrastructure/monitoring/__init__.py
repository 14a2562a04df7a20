"""Monitoring infrastructure for the Nexus core."""

from __future__ import annotations

from .metrics import (
    record_event_published,
    record_handler_failure,
    record_plugin_lifecycle,
    record_plugin_registration,
)

__all__ = [
    "record_event_published",
    "record_handler_failure",
    "record_plugin_lifecycle",
    "record_plugin_registration",
]
