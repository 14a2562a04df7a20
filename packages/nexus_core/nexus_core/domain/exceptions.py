"""Domain-specific exceptions for the Nexus extensibility core.

This module defines the exception hierarchy shared by the event bus and the
plugin registry. Only configuration-time problems (duplicate plugin ids,
malformed descriptors, bad settings) are raised to callers; listener and
lifecycle faults are logged and never surface as exceptions.
"""

from typing import Any


class NexusError(Exception):
    """Base exception for all Nexus core errors."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for programmatic handling
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class DomainError(NexusError):
    """Base class for domain-layer errors."""

    pass


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None, **kwargs: Any) -> None:
        """
        Initialize validation error.

        Args:
            message: Validation error message
            field: Field that failed validation
            **kwargs: Additional error details
        """
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(message, error_code="VALIDATION_ERROR", details=details)


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state."""

    def __init__(
        self, message: str, conflicting_resource: str | None = None, **kwargs: Any
    ) -> None:
        """
        Initialize conflict error.

        Args:
            message: Conflict description
            conflicting_resource: Identifier of conflicting resource
            **kwargs: Additional error details
        """
        details = kwargs.pop("details", {})
        if conflicting_resource:
            details["conflicting_resource"] = conflicting_resource
        super().__init__(message, error_code="CONFLICT", details=details)


class DuplicateRegistrationError(ConflictError):
    """Raised when a plugin id is registered a second time."""

    def __init__(self, plugin_id: str, **kwargs: Any) -> None:
        """
        Initialize duplicate registration error.

        Args:
            plugin_id: The plugin id that is already registered
            **kwargs: Additional error details
        """
        message = f'Plugin "{plugin_id}" is already registered'
        super().__init__(
            message,
            conflicting_resource=plugin_id,
            details={"plugin_id": plugin_id, **kwargs.pop("details", {})},
        )
        self.plugin_id = plugin_id


class ApplicationError(NexusError):
    """Base class for application-layer errors."""

    pass


class PluginLifecycleError(ApplicationError):
    """Raised on request when one or more plugin lifecycle hooks failed."""

    def __init__(self, phase: str, failed_plugins: list[str], **kwargs: Any) -> None:
        """
        Initialize plugin lifecycle error.

        Args:
            phase: Lifecycle phase that failed ("activate" or "deactivate")
            failed_plugins: Ids of the plugins whose hook failed
            **kwargs: Additional error details
        """
        message = f"Plugin {phase} failed for: {', '.join(failed_plugins)}"
        details = {
            "phase": phase,
            "failed_plugins": list(failed_plugins),
            **kwargs.pop("details", {}),
        }
        super().__init__(message, error_code="PLUGIN_LIFECYCLE_ERROR", details=details)


class InfrastructureError(NexusError):
    """Base class for infrastructure-layer errors."""

    pass


class ConfigurationError(InfrastructureError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, reason: str, **kwargs: Any) -> None:
        """
        Initialize configuration error.

        Args:
            config_key: Configuration key that has issues
            reason: Reason for configuration error
            **kwargs: Additional error details
        """
        message = f"Configuration error for '{config_key}': {reason}"
        details = {
            "config_key": config_key,
            "reason": reason,
            **kwargs.pop("details", {}),
        }
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details)
