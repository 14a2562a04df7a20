"""Application layer models for the Nexus core."""

from __future__ import annotations

from .lifecycle_models import LifecycleOutcome, LifecyclePhase, LifecycleReport, LifecycleStatus

__all__ = [
    "LifecycleOutcome",
    "LifecyclePhase",
    "LifecycleReport",
    "LifecycleStatus",
]
