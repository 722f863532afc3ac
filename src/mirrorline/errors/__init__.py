"""Centralized error definitions for Mirrorline.

Most of the engine never raises: non-compliant insight cards are dropped
silently and narrative failures are discarded. The errors below cover the
places where loud failure is correct, such as asking for a horizon the
engine does not implement, or loading an invalid configuration.

Usage:
    from mirrorline.errors import MirrorlineError, handle_error

    try:
        artifact = compute_insights_for_window("yearly", events, start, end)
    except MirrorlineError as e:
        print(handle_error(e))
"""

from __future__ import annotations

from mirrorline.errors.user_messages import (
    format_error_for_user,
    get_recovery_suggestion,
    get_user_message,
)


# =============================================================================
# Base Error
# =============================================================================


class MirrorlineError(Exception):
    """Base exception for all Mirrorline errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "MIRRORLINE_ERROR"
    default_message: str = "An unexpected error occurred"
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message or self.default_message
        self._user_message = user_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Get user-friendly message."""
        if self._user_message:
            return self._user_message
        return get_user_message(self)

    @property
    def recovery_suggestion(self) -> str:
        """Get recovery suggestion."""
        return get_recovery_suggestion(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "recoverable": self.recoverable,
            "details": self.details,
        }


# =============================================================================
# Insight Errors
# =============================================================================


class InsightError(MirrorlineError):
    """Base error for insight computation."""

    code = "INSIGHT_ERROR"
    default_message = "Insight computation failed"


class UnsupportedHorizonError(InsightError):
    """Requested horizon is not implemented by the engine."""

    code = "UNSUPPORTED_HORIZON"
    default_message = "Horizon not implemented in engine"
    recoverable = False

    def __init__(self, horizon: str, **kwargs) -> None:
        self.horizon = horizon
        kwargs.setdefault("details", {"horizon": horizon})
        super().__init__(
            f"Horizon {horizon} not yet implemented in engine",
            **kwargs,
        )


class InvalidEventError(InsightError):
    """An event record could not be converted."""

    code = "INVALID_EVENT"
    default_message = "Event record is invalid"


class InvalidWindowError(InsightError):
    """Window bounds are inverted or unparsable."""

    code = "INVALID_WINDOW"
    default_message = "Time window is invalid"


# =============================================================================
# Distribution Errors
# =============================================================================


class DistributionError(MirrorlineError):
    """Distribution series could not be built."""

    code = "DISTRIBUTION_ERROR"
    default_message = "Distribution analysis failed"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(MirrorlineError):
    """Base error for configuration issues."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"


class InvalidConfigError(ConfigurationError):
    """Configuration values failed validation."""

    code = "INVALID_CONFIG"
    default_message = "Invalid configuration"
    recoverable = False


class MissingConfigError(ConfigurationError):
    """Configuration file does not exist."""

    code = "MISSING_CONFIG"
    default_message = "Configuration not found"


# =============================================================================
# Error Handler
# =============================================================================


def handle_error(error: Exception) -> str:
    """Handle an error and return a user-friendly message.

    Args:
        error: The exception to handle

    Returns:
        User-friendly error message with recovery suggestion
    """
    return format_error_for_user(error)


def is_recoverable(error: Exception) -> bool:
    """Check if an error is potentially recoverable."""
    if isinstance(error, MirrorlineError):
        return error.recoverable
    return False


__all__ = [
    # Base
    "MirrorlineError",
    # Insight
    "InsightError",
    "UnsupportedHorizonError",
    "InvalidEventError",
    "InvalidWindowError",
    # Distribution
    "DistributionError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    "MissingConfigError",
    # Handlers
    "handle_error",
    "is_recoverable",
]
