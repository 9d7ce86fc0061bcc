"""Response resolution: canned answer, then model completion, then redirect.

The remote model is only consulted when no canned phrasing matches closely
enough.
"""

from __future__ import annotations

import logging
import time
from typing import Optional, Protocol, Sequence

from portfolio_assistant.chat.canned import CannedAnswerIndex
from portfolio_assistant.chat.fallback import FallbackSelector
from portfolio_assistant.chat.models import (
    CompletionResult,
    Message,
    ResolvedResponse,
    ResponseSource,
)
from portfolio_assistant.errors import EmptyInputError

logger = logging.getLogger(__name__)


class Completer(Protocol):
    async def complete(self, history: list[Message], latest_input: str) -> CompletionResult:
        ...


class ResponseResolver:
    """Turn one visitor message into assistant text.

    Example:
        >>> resolver = ResponseResolver(CannedAnswerIndex(), client)
        >>> response = await resolver.resolve("tell me about emmanuella", [])
        >>> response.source
        <ResponseSource.CANNED: 'canned'>
    """

    def __init__(
        self,
        index: CannedAnswerIndex,
        completer: Completer,
        fallback: Optional[FallbackSelector] = None,
    ) -> None:
        self.index = index
        self.completer = completer
        self.fallback = fallback or FallbackSelector()

    async def resolve(
        self,
        raw_input: str,
        prior_messages: Sequence[Message] = (),
    ) -> ResolvedResponse:
        """Resolve ``raw_input`` against the canned index or the model.

        Args:
            raw_input: Visitor text; surrounding whitespace is ignored
            prior_messages: Conversation so far, oldest first, excluding
                the turn being resolved

        Returns:
            ResolvedResponse with final text, latency and source

        Raises:
            EmptyInputError: If ``raw_input`` is blank
            CompletionError: If the model call fails. Failures are never
                turned into a fallback message.
        """
        text = raw_input.strip()
        if not text:
            raise EmptyInputError()

        start = time.perf_counter()

        answer = self.index.lookup(text)
        if answer is not None:
            return self._finish(answer, start, ResponseSource.CANNED)

        result = await self.completer.complete(list(prior_messages), text)

        if result.is_off_topic:
            return self._finish(self.fallback.pick(), start, ResponseSource.FALLBACK)
        return self._finish(result.text, start, ResponseSource.COMPLETION)

    def _finish(self, text: str, start: float, source: ResponseSource) -> ResolvedResponse:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.info("Resolved via %s in %.0fms", source.value, latency_ms)
        return ResolvedResponse(text=text, latency_ms=latency_ms, source=source)
