"""Chat Service - the widget's conversational front door.

ChatService is the composition root for one widget instance: it owns the
resolver, the conversation log and the analytics aggregator, and it is what
the UI layer talks to. All shared state is mutated from the single UI event
loop; the UI must not start a second ``send`` while one is in flight.

Example:
    >>> service = build_service(resolve_settings())
    >>> result = await service.send("tell me about emmanuella")
    >>> print(result.message.text)
    >>> await service.close()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import httpx

from portfolio_assistant.analytics.aggregator import AnalyticsAggregator
from portfolio_assistant.analytics.models import AnalyticsSnapshot, FeedbackRecord
from portfolio_assistant.chat.canned import CannedAnswerIndex
from portfolio_assistant.chat.completion import CompletionClient
from portfolio_assistant.chat.content import SUGGESTED_QUESTIONS
from portfolio_assistant.chat.fallback import FallbackSelector
from portfolio_assistant.chat.languages import LanguagePreference, translate
from portfolio_assistant.chat.models import Message, ResolvedResponse
from portfolio_assistant.chat.resolver import ResponseResolver
from portfolio_assistant.chat.store import ConversationStore
from portfolio_assistant.configuration.settings import AssistantSettings
from portfolio_assistant.errors import CompletionError, EmptyInputError, is_recoverable
from portfolio_assistant.speech.capabilities import (
    SpeechInput,
    SpeechOutput,
    UnsupportedSpeechInput,
    UnsupportedSpeechOutput,
)
from portfolio_assistant.speech.voices import ReadAloudToggle
from portfolio_assistant.storage.kv import JsonFileStore, KeyValueStore

logger = logging.getLogger(__name__)


def format_user_input(text: str) -> str:
    """Display form of visitor input: first letter upper, the rest lower."""
    text = text.strip()
    return text[:1].upper() + text[1:].lower()


@dataclass(frozen=True)
class SendResult:
    """Outcome of ``ChatService.send``.

    Exactly one of ``message`` and ``error`` is set. On error nothing was
    appended for the assistant and no analytics were recorded.
    """

    message: Optional[Message] = None
    response: Optional[ResolvedResponse] = None
    error: Optional[str] = None
    recoverable: bool = True

    @property
    def ok(self) -> bool:
        return self.error is None


class ChatService:
    """One chat widget: resolution, conversation log, feedback, analytics."""

    def __init__(
        self,
        resolver: ResponseResolver,
        store: ConversationStore,
        analytics: AnalyticsAggregator,
        language: Optional[LanguagePreference] = None,
        speech_input: Optional[SpeechInput] = None,
        speech_output: Optional[SpeechOutput] = None,
        completion_client: Optional[CompletionClient] = None,
    ) -> None:
        """Initialize chat service.

        Args:
            resolver: Canned/completion/fallback pipeline
            store: Conversation log
            analytics: Aggregator shared with feedback handlers
            language: Saved language preference (default: English, not persisted)
            speech_input: Speech-to-text capability, if the platform has one
            speech_output: Text-to-speech capability, if the platform has one
            completion_client: Client to close on shutdown, if owned here
        """
        self.resolver = resolver
        self.store = store
        self.analytics = analytics
        self._language = language
        self.speech_input = speech_input or UnsupportedSpeechInput()
        self.speech_output = speech_output or UnsupportedSpeechOutput()
        self._read_aloud = ReadAloudToggle(self.speech_output)
        self._completion_client = completion_client

    @property
    def language(self) -> str:
        return self._language.get() if self._language else "en"

    def set_language(self, code: str) -> str:
        if self._language is None:
            raise RuntimeError("No language preference configured")
        selected = self._language.set(code)
        logger.info("Language set to %s", selected)
        return selected

    def history(self) -> List[Message]:
        return self.store.messages

    @property
    def suggested_questions(self) -> Tuple[str, ...]:
        """Starter questions, offered only while the log holds just the welcome."""
        if len(self.store) == 1:
            return SUGGESTED_QUESTIONS
        return ()

    async def send(self, text: str) -> SendResult:
        """Handle one visitor message.

        Args:
            text: Raw visitor input

        Returns:
            SendResult with the appended assistant message, or a user-facing
            error string if the completion call failed

        Raises:
            EmptyInputError: If ``text`` is blank
        """
        if not text.strip():
            raise EmptyInputError()

        prior = self.store.messages
        self.store.append(Message.from_user(format_user_input(text)))

        try:
            response = await self.resolver.resolve(text, prior)
        except CompletionError as e:
            logger.warning("Resolution failed: %s", e)
            return SendResult(
                error=f"{translate('error', self.language)}: {e.user_message}",
                recoverable=is_recoverable(e),
            )

        message = Message.from_assistant(response.text)
        self.store.append(message)
        self.analytics.record_message(self.language, response.latency_ms)
        return SendResult(message=message, response=response)

    def give_feedback(self, index: int, is_helpful: bool) -> bool:
        """Record a helpful/unhelpful vote on an assistant message.

        The conversation log keeps only the first vote per message; the
        aggregator counts every vote it receives.

        Returns:
            True if the vote was stored on the message

        Raises:
            IndexError: If no message exists at ``index``
            ValueError: If the message was not written by the assistant
        """
        messages = self.store.messages
        if not 0 <= index < len(messages):
            raise IndexError(f"No message at index {index}")
        if not messages[index].is_assistant:
            raise ValueError("Feedback can only be given on assistant messages")

        stored = self.store.set_feedback(index, is_helpful)
        self.analytics.record_feedback(
            FeedbackRecord(message_index=index, is_helpful=is_helpful, language=self.language)
        )
        return stored

    async def listen(self) -> str:
        """Transcribe one utterance into text for the input box."""
        return await self.speech_input.listen(self._speech_locale())

    def read_aloud(self, index: int) -> Optional[int]:
        """Toggle reading the assistant message at ``index``.

        Raises:
            IndexError: If no message exists at ``index``
            ValueError: If the message was not written by the assistant
        """
        messages = self.store.messages
        if not 0 <= index < len(messages):
            raise IndexError(f"No message at index {index}")
        message = messages[index]
        if not message.is_assistant:
            raise ValueError("Only assistant messages can be read aloud")
        return self._read_aloud.toggle(message.text, index, lang=self._speech_locale())

    def _speech_locale(self) -> str:
        return "es-ES" if self.language == "es" else "en-US"

    def analytics_snapshot(self) -> AnalyticsSnapshot:
        return self.analytics.snapshot()

    def reset(self) -> None:
        """Clear the conversation and all analytics."""
        self.store.clear()
        self.analytics.clear()

    async def close(self) -> None:
        """Clean up resources."""
        if self._completion_client is not None:
            await self._completion_client.close()
        logger.info("ChatService closed")


def build_service(
    settings: AssistantSettings,
    kv_store: Optional[KeyValueStore] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    speech_input: Optional[SpeechInput] = None,
    speech_output: Optional[SpeechOutput] = None,
) -> ChatService:
    """Wire a ChatService from settings.

    Args:
        settings: Resolved assistant settings
        kv_store: Persistence backend (default: JSON files under data_dir/state)
        http_client: Optional HTTP client for the completion endpoint
        speech_input: Optional speech-to-text capability
        speech_output: Optional text-to-speech capability
    """
    kv_store = kv_store or JsonFileStore(settings.data_dir / "state")
    language = LanguagePreference(kv_store, default=settings.default_language)
    client = CompletionClient(settings.completion, http_client=http_client)
    resolver = ResponseResolver(
        CannedAnswerIndex(threshold=settings.matching.threshold),
        client,
        FallbackSelector(),
    )
    store = ConversationStore(kv_store, welcome=lambda: translate("welcome", language.get()))
    analytics = AnalyticsAggregator(kv_store)
    logger.info("ChatService wired (data_dir=%s)", settings.data_dir)
    return ChatService(
        resolver,
        store,
        analytics,
        language=language,
        speech_input=speech_input,
        speech_output=speech_output,
        completion_client=client,
    )
