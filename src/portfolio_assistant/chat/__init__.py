"""Chat Module - message resolution for the portfolio widget.

This module provides:
- CannedAnswerIndex: fuzzy lookup of pre-authored answers
- CompletionClient: remote chat-completion call
- FallbackSelector: redirect messages for off-topic questions
- ResponseResolver: canned -> completion -> fallback pipeline
- ConversationStore: persisted message log with write-once feedback
- ChatService: composition root used by the UI layer

Example:
    >>> from portfolio_assistant.chat import build_service
    >>> from portfolio_assistant.configuration import resolve_settings
    >>> service = build_service(resolve_settings())
    >>> result = await service.send("What's your tech stack?")
    >>> print(result.message.text)
"""

from portfolio_assistant.chat.canned import CannedAnswerIndex, CannedMatch
from portfolio_assistant.chat.completion import CompletionClient
from portfolio_assistant.chat.fallback import FallbackSelector
from portfolio_assistant.chat.models import (
    CannedEntry,
    CompletionRequest,
    CompletionResult,
    Message,
    ResolvedResponse,
    ResponseSource,
    Sender,
)
from portfolio_assistant.chat.resolver import ResponseResolver
from portfolio_assistant.chat.service import ChatService, SendResult, build_service
from portfolio_assistant.chat.store import ConversationStore

__all__ = [
    # Pipeline
    "CannedAnswerIndex",
    "CannedMatch",
    "CompletionClient",
    "FallbackSelector",
    "ResponseResolver",
    # State
    "ConversationStore",
    # Service
    "ChatService",
    "SendResult",
    "build_service",
    # Models
    "CannedEntry",
    "CompletionRequest",
    "CompletionResult",
    "Message",
    "ResolvedResponse",
    "ResponseSource",
    "Sender",
]
