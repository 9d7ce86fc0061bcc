"""Centralized error definitions for the portfolio assistant.

This module provides a unified error hierarchy and user-friendly error handling
for the chat widget.

Usage:
    from portfolio_assistant.errors import AssistantError, is_recoverable

    try:
        settings = resolve_settings()
    except AssistantError as e:
        print(e.user_message)
        if not is_recoverable(e):
            raise

Note that a canned-answer miss and an off-topic completion are normal
outcomes of a resolution and are never raised.
"""

from __future__ import annotations

from portfolio_assistant.errors.user_messages import get_user_message


# =============================================================================
# Base Error
# =============================================================================


class AssistantError(Exception):
    """Base exception for all portfolio assistant errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "ASSISTANT_ERROR"
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
# Chat Errors
# =============================================================================


class ChatError(AssistantError):
    """Base error for chat operations."""

    code = "CHAT_ERROR"
    default_message = "Chat operation failed"


class CompletionError(ChatError):
    """The remote completion call failed.

    Raised on transport failure, a non-success HTTP status or an unreadable
    response body. The underlying exception is kept as ``__cause__``.
    """

    code = "COMPLETION_ERROR"
    default_message = "Error fetching AI response"

    @property
    def status_code(self) -> int | None:
        return self.details.get("status_code")


class EmptyInputError(ChatError, ValueError):
    """Resolution was requested for blank input."""

    code = "EMPTY_INPUT"
    default_message = "Message text must not be blank"


# =============================================================================
# Storage Errors
# =============================================================================


class StorageUnavailableError(AssistantError):
    """Persisted storage could not be read or written."""

    code = "STORAGE_UNAVAILABLE"
    default_message = "Persisted storage is unavailable"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(AssistantError):
    """Base error for configuration issues."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"


class InvalidConfigError(ConfigurationError):
    """Configuration is invalid."""

    code = "INVALID_CONFIG"
    default_message = "Invalid configuration"


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""

    code = "MISSING_CONFIG"
    default_message = "Missing required configuration"


# =============================================================================
# Speech Errors
# =============================================================================


class SpeechNotSupportedError(AssistantError):
    """Speech input or output is not available in this environment."""

    code = "SPEECH_NOT_SUPPORTED"
    default_message = "Speech is not supported"
    recoverable = False


# =============================================================================
# Error Handler
# =============================================================================


def is_recoverable(error: Exception) -> bool:
    """Check if an error is potentially recoverable."""
    if isinstance(error, AssistantError):
        return error.recoverable
    return False


__all__ = [
    # Base
    "AssistantError",
    # Chat
    "ChatError",
    "CompletionError",
    "EmptyInputError",
    # Storage
    "StorageUnavailableError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    "MissingConfigError",
    # Speech
    "SpeechNotSupportedError",
    # Handlers
    "is_recoverable",
]
