"""User-friendly error messages for the portfolio assistant.

Visitors see these strings inline in the chat window, so they never include
the raw exception text, request payloads or credentials.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    # Chat errors
    "CHAT_ERROR": "The assistant ran into a problem. Please try again.",
    "COMPLETION_ERROR": "Error fetching AI response. Please try again in a moment.",
    "EMPTY_INPUT": "Type a message before sending.",
    # Storage errors
    "STORAGE_UNAVAILABLE": "Your conversation can't be saved right now. It will last until you close the chat.",
    # Configuration errors
    "CONFIGURATION_ERROR": "The assistant is not configured correctly.",
    "INVALID_CONFIG": "The assistant configuration is invalid.",
    "MISSING_CONFIG": "The assistant is missing required configuration.",
    # Speech errors
    "SPEECH_NOT_SUPPORTED": "Voice features are not supported here.",
    # Generic
    "ASSISTANT_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_ERROR": "Something went wrong. Please try again.",
}


# =============================================================================
# Recovery Suggestions
# =============================================================================

RECOVERY_SUGGESTIONS: dict[str, str] = {
    "CHAT_ERROR": "Send your message again.",
    "COMPLETION_ERROR": "Re-send your question, or pick one of the suggested questions.",
    "EMPTY_INPUT": "Ask something about Emmanuella's work or programming.",
    "STORAGE_UNAVAILABLE": "Check that the data directory is writable.",
    "CONFIGURATION_ERROR": "Check config: portfolio-assistant config show",
    "INVALID_CONFIG": "Fix the settings file or remove it to restore defaults.",
    "MISSING_CONFIG": "Set OPENAI_API_KEY in the environment.",
    "SPEECH_NOT_SUPPORTED": "Type your question instead.",
    "ASSISTANT_ERROR": "If this persists, please report the issue.",
    "UNKNOWN_ERROR": "Close and reopen the chat. Report if the issue continues.",
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
    """Get recovery suggestion for an error."""
    return RECOVERY_SUGGESTIONS.get(
        _error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"]
    )


def format_error_for_cli(error: Any) -> str:
    """Format error for CLI output."""
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
            # Don't expose sensitive details
            if key not in ("content", "prompt", "api_key", "token"):
                lines.append(f"  {key}: {value}")

    return "\n".join(lines)


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_cli",
]
