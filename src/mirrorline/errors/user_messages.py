"""User-friendly error messages for Mirrorline.

This module provides human-readable error messages and recovery suggestions
for all error types, ensuring users never see raw technical errors.

Privacy Note:
- Error messages NEVER include journal content
- Only counts, dates and horizon names appear in details
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    # Insight errors
    "INSIGHT_ERROR": "We couldn't compute insights for this window.",
    "UNSUPPORTED_HORIZON": "This insight horizon isn't available in the engine.",
    "INVALID_EVENT": "One of the journal events couldn't be read.",
    "INVALID_WINDOW": "The requested time window is invalid.",
    # Distribution errors
    "DISTRIBUTION_ERROR": "We couldn't analyse the activity distribution.",
    # Configuration errors
    "CONFIGURATION_ERROR": "There's a configuration issue.",
    "INVALID_CONFIG": "The configuration is invalid. Check settings.",
    "MISSING_CONFIG": "Required configuration is missing.",
    # Generic
    "MIRRORLINE_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_ERROR": "Something went wrong. Please try again.",
}


# =============================================================================
# Recovery Suggestions
# =============================================================================

RECOVERY_SUGGESTIONS: dict[str, str] = {
    # Insight errors
    "INSIGHT_ERROR": "Check that the events file is valid JSON and retry.",
    "UNSUPPORTED_HORIZON": "Use one of: weekly, summary, timeline.",
    "INVALID_EVENT": "Each event needs an id and an ISO-8601 timestamp.",
    "INVALID_WINDOW": "Make sure the window start is before the window end.",
    # Distribution errors
    "DISTRIBUTION_ERROR": "Use a bucket of hour, day, week or month.",
    # Configuration errors
    "CONFIGURATION_ERROR": "Check config: mirrorline config show",
    "INVALID_CONFIG": "Reset to defaults by deleting ~/.mirrorline/config.json",
    "MISSING_CONFIG": "Create the config with: mirrorline config init",
    # Generic
    "MIRRORLINE_ERROR": "If this persists, please report the issue.",
    "UNKNOWN_ERROR": "Retry the command. Report if the issue continues.",
}


# =============================================================================
# Helper Functions
# =============================================================================


def _error_code(error: Any) -> str:
    if hasattr(error, "code"):
        return error.code
    if isinstance(error, str):
        return error
    return type(error).__name__.upper()


def get_user_message(error: Any) -> str:
    """Get user-friendly message for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        User-friendly error message
    """
    return ERROR_MESSAGES.get(_error_code(error), ERROR_MESSAGES["UNKNOWN_ERROR"])


def get_recovery_suggestion(error: Any) -> str:
    """Get recovery suggestion for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        Recovery suggestion
    """
    return RECOVERY_SUGGESTIONS.get(
        _error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"]
    )


def format_error_for_user(error: Any) -> str:
    """Format a complete user-friendly error message."""
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)

    return f"{message}\n\nSuggestion: {suggestion}"


def format_error_for_cli(error: Any) -> str:
    """Format error for CLI output.

    Args:
        error: The error to format

    Returns:
        CLI-formatted error message
    """
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)
    code = getattr(error, "code", "ERROR")

    lines = [
        f"Error [{code}]: {message}",
        "",
        f"Suggestion: {suggestion}",
    ]

    if getattr(error, "details", None):
        lines.append("")
        lines.append("Details:")
        for key, value in error.details.items():
            # Entry text never leaves the engine
            if key not in ("plaintext", "details", "content"):
                lines.append(f"  {key}: {value}")

    return "\n".join(lines)


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_user",
    "format_error_for_cli",
]
