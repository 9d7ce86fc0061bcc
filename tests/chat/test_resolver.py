"""Tests for the canned -> completion -> fallback resolution pipeline."""

from __future__ import annotations

import random
from unittest.mock import AsyncMock

import pytest

from portfolio_assistant.chat.canned import CannedAnswerIndex
from portfolio_assistant.chat.content import ANSWERS, FALLBACK_RESPONSES
from portfolio_assistant.chat.fallback import FallbackSelector
from portfolio_assistant.chat.models import CompletionResult, Message, ResponseSource
from portfolio_assistant.chat.resolver import ResponseResolver
from portfolio_assistant.chat.store import ConversationStore
from portfolio_assistant.errors import CompletionError, EmptyInputError
from portfolio_assistant.storage.kv import InMemoryStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def completer() -> AsyncMock:
    mock = AsyncMock()
    mock.complete = AsyncMock(
        return_value=CompletionResult(text="GraphQL is a query language.", is_off_topic=False)
    )
    return mock


@pytest.fixture
def resolver(completer: AsyncMock) -> ResponseResolver:
    return ResponseResolver(
        CannedAnswerIndex(),
        completer,
        FallbackSelector(rng=random.Random(7)),
    )


# ---------------------------------------------------------------------------
# Canned answers
# ---------------------------------------------------------------------------


class TestCanned:
    @pytest.mark.asyncio
    async def test_canned_hit_skips_completion(
        self, resolver: ResponseResolver, completer: AsyncMock
    ) -> None:
        response = await resolver.resolve("tell me about emmanuella", [])

        assert response.text == ANSWERS["aboutMe"]
        assert response.source is ResponseSource.CANNED
        assert response.latency_ms >= 0
        completer.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_input_is_stripped(
        self, resolver: ResponseResolver, completer: AsyncMock
    ) -> None:
        response = await resolver.resolve("   tech stack   ", [])

        assert response.text == ANSWERS["techStack"]
        completer.complete.assert_not_called()


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


class TestCompletion:
    @pytest.mark.asyncio
    async def test_miss_calls_completion_once(
        self, resolver: ResponseResolver, completer: AsyncMock
    ) -> None:
        prior = [Message.from_assistant("Hello!")]
        response = await resolver.resolve("  zzzz qqqq  ", prior)

        assert response.text == "GraphQL is a query language."
        assert response.source is ResponseSource.COMPLETION
        completer.complete.assert_awaited_once_with(prior, "zzzz qqqq")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "question",
        ["what is graphql", "what are react hooks", "how do i center a div", "hire her"],
    )
    async def test_general_questions_reach_the_model(
        self, resolver: ResponseResolver, completer: AsyncMock, question: str
    ) -> None:
        response = await resolver.resolve(question, [])

        assert response.source is ResponseSource.COMPLETION
        assert response.text == "GraphQL is a query language."
        completer.complete.assert_awaited_once_with([], question)

    @pytest.mark.asyncio
    async def test_gibberish_declined_by_model_gets_redirect(
        self, resolver: ResponseResolver, completer: AsyncMock
    ) -> None:
        completer.complete.return_value = CompletionResult(
            text="I'm sorry, I don't understand that.", is_off_topic=True
        )

        response = await resolver.resolve("asdkjasdkj random gibberish", [])

        assert response.source is ResponseSource.FALLBACK
        assert response.text in FALLBACK_RESPONSES
        assert completer.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_off_topic_uses_fallback_pool(
        self, resolver: ResponseResolver, completer: AsyncMock
    ) -> None:
        completer.complete.return_value = CompletionResult(
            text="I'm sorry, I can't help with that.", is_off_topic=True
        )

        response = await resolver.resolve("zzzz qqqq", [])

        assert response.source is ResponseSource.FALLBACK
        assert response.text in FALLBACK_RESPONSES
        completer.complete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_completion_error_propagates(
        self, resolver: ResponseResolver, completer: AsyncMock
    ) -> None:
        completer.complete.side_effect = CompletionError(
            "HTTP error! status: 500", details={"status_code": 500}
        )
        store = ConversationStore(InMemoryStore())
        before = len(store)

        with pytest.raises(CompletionError):
            await resolver.resolve("zzzz qqqq", store.messages)

        assert len(store) == before


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


class TestEmptyInput:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_rejected(
        self, resolver: ResponseResolver, completer: AsyncMock, text: str
    ) -> None:
        with pytest.raises(EmptyInputError):
            await resolver.resolve(text, [])
        completer.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_input_is_value_error(self, resolver: ResponseResolver) -> None:
        with pytest.raises(ValueError):
            await resolver.resolve("", [])


# ---------------------------------------------------------------------------
# Fallback selector
# ---------------------------------------------------------------------------


class TestFallbackSelector:
    def test_empty_pool_rejected(self) -> None:
        with pytest.raises(ValueError):
            FallbackSelector(pool=[])

    def test_pick_is_from_pool(self) -> None:
        selector = FallbackSelector(rng=random.Random(0))
        picks = {selector.pick() for _ in range(50)}
        assert picks <= set(FALLBACK_RESPONSES)

    def test_seeded_rng_is_deterministic(self) -> None:
        first = FallbackSelector(rng=random.Random(3))
        second = FallbackSelector(rng=random.Random(3))
        assert [first.pick() for _ in range(5)] == [second.pick() for _ in range(5)]
