"""Tests for the chat-completion client."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from portfolio_assistant.chat.completion import CompletionClient, is_off_topic
from portfolio_assistant.chat.models import Message
from portfolio_assistant.configuration.settings import CompletionSettings
from portfolio_assistant.errors import CompletionError, MissingConfigError


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def completion_settings() -> CompletionSettings:
    return CompletionSettings(
        api_key="sk-test",
        base_url="https://llm.test/v1/",
        system_prompt="You are a test persona.",
    )


def _client(
    settings: CompletionSettings,
    handler: Callable[[httpx.Request], httpx.Response],
) -> CompletionClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CompletionClient(settings, http_client=http_client)


def _reply(content: Any) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


# ---------------------------------------------------------------------------
# Off-topic detection
# ---------------------------------------------------------------------------


class TestOffTopic:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("", True),
            ("I'm sorry, I can't help with that.", True),
            ("Well, I'M SORRY but no.", True),
            ("GraphQL is a query language.", False),
        ],
    )
    def test_detection(self, text: str, expected: bool) -> None:
        assert is_off_topic(text) is expected


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TestRequest:
    @pytest.mark.asyncio
    async def test_posts_expected_payload(self, completion_settings: CompletionSettings) -> None:
        captured: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(200, json=_reply("GraphQL is a query language."))

        client = _client(completion_settings, handler)
        history = [
            Message.from_assistant("Hello!"),
            Message.from_user("Hi"),
        ]
        await client.complete(history, "What is GraphQL?")

        assert len(captured) == 1
        request = captured[0]
        assert str(request.url) == "https://llm.test/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.headers["Content-Type"] == "application/json"

        body = json.loads(request.content)
        assert body["model"] == "gpt-3.5-turbo"
        assert body["max_tokens"] == 150
        assert body["messages"] == [
            {"role": "system", "content": "You are a test persona."},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "Hi"},
            {"role": "user", "content": "What is GraphQL?"},
        ]

    @pytest.mark.asyncio
    async def test_latest_input_sent_once(self, completion_settings: CompletionSettings) -> None:
        bodies: List[Dict[str, Any]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=_reply("ok"))

        client = _client(completion_settings, handler)
        await client.complete([Message.from_assistant("Hello!")], "Question")

        contents = [m["content"] for m in bodies[0]["messages"]]
        assert contents.count("Question") == 1

    @pytest.mark.asyncio
    async def test_missing_api_key(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
            raise AssertionError("no request expected")

        client = _client(CompletionSettings(), handler)
        with pytest.raises(CompletionError) as exc_info:
            await client.complete([], "Question")
        assert isinstance(exc_info.value.__cause__, MissingConfigError)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TestResponse:
    @pytest.mark.asyncio
    async def test_text_is_stripped(self, completion_settings: CompletionSettings) -> None:
        client = _client(
            completion_settings,
            lambda request: httpx.Response(200, json=_reply("  Answer text \n")),
        )
        result = await client.complete([], "Question")
        assert result.text == "Answer text"
        assert result.is_off_topic is False

    @pytest.mark.asyncio
    async def test_apology_is_off_topic(self, completion_settings: CompletionSettings) -> None:
        client = _client(
            completion_settings,
            lambda request: httpx.Response(200, json=_reply("I'm sorry, I can't help.")),
        )
        result = await client.complete([], "Question")
        assert result.is_off_topic is True

    @pytest.mark.asyncio
    async def test_null_content_is_off_topic(self, completion_settings: CompletionSettings) -> None:
        client = _client(
            completion_settings,
            lambda request: httpx.Response(200, json=_reply(None)),
        )
        result = await client.complete([], "Question")
        assert result.text == ""
        assert result.is_off_topic is True

    @pytest.mark.asyncio
    async def test_http_error_status(self, completion_settings: CompletionSettings) -> None:
        client = _client(
            completion_settings,
            lambda request: httpx.Response(429, json={"error": "rate limited"}),
        )
        with pytest.raises(CompletionError) as exc_info:
            await client.complete([], "Question")

        error = exc_info.value
        assert error.status_code == 429
        assert "429" in str(error)
        assert isinstance(error.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_transport_error(self, completion_settings: CompletionSettings) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(completion_settings, handler)
        with pytest.raises(CompletionError) as exc_info:
            await client.complete([], "Question")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": 42}}]},
        ],
    )
    async def test_malformed_body(
        self, completion_settings: CompletionSettings, body: Dict[str, Any]
    ) -> None:
        client = _client(completion_settings, lambda request: httpx.Response(200, json=body))
        with pytest.raises(CompletionError):
            await client.complete([], "Question")

    @pytest.mark.asyncio
    async def test_non_json_body(self, completion_settings: CompletionSettings) -> None:
        client = _client(
            completion_settings,
            lambda request: httpx.Response(200, content=b"<html>oops</html>"),
        )
        with pytest.raises(CompletionError):
            await client.complete([], "Question")


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, completion_settings: CompletionSettings) -> None:
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=_reply("ok")))
        )
        client = CompletionClient(completion_settings, http_client=http_client)
        await client.close()

        assert http_client.is_closed is False
        await http_client.aclose()
