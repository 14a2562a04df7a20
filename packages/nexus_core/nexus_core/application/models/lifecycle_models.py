"""Plugin lifecycle outcome models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from nexus_core.domain.exceptions import PluginLifecycleError


class LifecyclePhase(str, Enum):
    """Lifecycle sweep kind."""

    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"


class LifecycleStatus(str, Enum):
    """Settled state of one plugin's hook."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


class LifecycleOutcome(BaseModel):
    """Outcome of one plugin's lifecycle hook.

    Attributes:
        plugin_id: Plugin the outcome belongs to
        status: Whether the hook succeeded
        hook_invoked: False when the plugin defines no hook for the phase
        error: Error message when the hook failed
        error_type: Exception class name when the hook failed
    """

    plugin_id: str = Field(..., description="Plugin identifier")
    status: LifecycleStatus = Field(..., description="Settled status")
    hook_invoked: bool = Field(default=True, description="Whether a hook was defined and run")
    error: str | None = Field(None, description="Failure message")
    error_type: str | None = Field(None, description="Failure exception type")


class LifecycleReport(BaseModel):
    """Aggregated outcomes of one activation or deactivation sweep."""

    phase: LifecyclePhase = Field(..., description="Lifecycle phase")
    outcomes: list[LifecycleOutcome] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def succeeded(self) -> list[str]:
        """Ids of plugins whose hook succeeded (or that had none)."""
        return [o.plugin_id for o in self.outcomes if o.status == LifecycleStatus.SUCCEEDED]

    @property
    def failed(self) -> list[str]:
        """Ids of plugins whose hook failed."""
        return [o.plugin_id for o in self.outcomes if o.status == LifecycleStatus.FAILED]

    @property
    def all_succeeded(self) -> bool:
        """True when no hook failed."""
        return not self.failed

    def get_outcome(self, plugin_id: str) -> LifecycleOutcome | None:
        """Outcome for one plugin, if it took part in the sweep."""
        for outcome in self.outcomes:
            if outcome.plugin_id == plugin_id:
                return outcome
        return None

    def raise_for_failures(self) -> None:
        """Raise PluginLifecycleError if any hook failed.

        Raises:
            PluginLifecycleError: Listing the failed plugin ids
        """
        failed = self.failed
        if failed:
            raise PluginLifecycleError(self.phase.value, failed)
