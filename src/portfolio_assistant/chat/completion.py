"""Chat-completion client for questions the canned answers don't cover.

One POST per call, no retry: a failed call surfaces immediately so the chat
window can show an inline error and the visitor can re-send.

Usage:
    client = CompletionClient(settings.completion)
    result = await client.complete(history, "What is GraphQL?")
    await client.close()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from portfolio_assistant.chat.models import CompletionRequest, CompletionResult, Message
from portfolio_assistant.configuration.settings import CompletionSettings
from portfolio_assistant.errors import CompletionError, MissingConfigError

logger = logging.getLogger(__name__)

OFF_TOPIC_MARKER = "i'm sorry"


def is_off_topic(text: str) -> bool:
    """Heuristic refusal detector: empty text or an apology."""
    return not text or OFF_TOPIC_MARKER in text.lower()


class CompletionClient:
    """Client for an OpenAI-compatible ``/chat/completions`` endpoint.

    Example:
        client = CompletionClient(CompletionSettings(api_key="sk-..."))
        result = await client.complete([], "Tell me about GraphQL")
        if not result.is_off_topic:
            print(result.text)
    """

    def __init__(
        self,
        settings: Optional[CompletionSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize completion client.

        Args:
            settings: Endpoint, model, token budget and persona prompt
            http_client: Optional pre-built client (tests, connection reuse)
        """
        self.settings = settings or CompletionSettings()
        self._client = http_client
        self._owns_client = http_client is None

        logger.info(
            "CompletionClient initialized: model=%s, base_url=%s",
            self.settings.model,
            self.settings.base_url,
        )

    @property
    def url(self) -> str:
        return f"{self.settings.base_url}/chat/completions"

    def _headers(self) -> Dict[str, str]:
        api_key = self.settings.api_key.get_secret_value() if self.settings.api_key else ""
        if not api_key:
            raise CompletionError(
                "No API key configured for the completion endpoint"
            ) from MissingConfigError("OPENAI_API_KEY is not set")
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        return self._client

    def build_request(self, history: List[Message], latest_input: str) -> CompletionRequest:
        return CompletionRequest.from_messages(
            system_prompt=self.settings.system_prompt,
            prior_messages=history,
            latest_input=latest_input,
            max_tokens=self.settings.max_tokens,
        )

    def build_payload(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": self.settings.model,
            "messages": request.to_messages(),
            "max_tokens": request.max_tokens,
        }

    async def complete(self, history: List[Message], latest_input: str) -> CompletionResult:
        """Ask the model to answer ``latest_input`` given ``history``.

        Args:
            history: Prior conversation messages (system prompt excluded)
            latest_input: The visitor's newest message

        Returns:
            CompletionResult with stripped text and off-topic verdict

        Raises:
            CompletionError: On transport failure, non-2xx status, or a
                response body without ``choices[0].message.content``
        """
        request = self.build_request(history, latest_input)
        return await self.send(request)

    async def send(self, request: CompletionRequest) -> CompletionResult:
        """POST a prepared request."""
        headers = self._headers()
        payload = self.build_payload(request)

        try:
            response = await self._get_client().post(self.url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Completion request failed with HTTP {status}")
            raise CompletionError(
                f"HTTP error! status: {status}",
                details={"status_code": status},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Completion request failed: {e}")
            raise CompletionError(f"Error fetching AI response: {e}") from e

        try:
            text = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Malformed completion response: {e}")
            raise CompletionError("Malformed completion response") from e
        if text is not None and not isinstance(text, str):
            raise CompletionError("Malformed completion response")

        text = (text or "").strip()
        off_topic = is_off_topic(text)
        logger.debug("Completion returned %d chars (off_topic=%s)", len(text), off_topic)
        return CompletionResult(text=text, is_off_topic=off_topic)

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
