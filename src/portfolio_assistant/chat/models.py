"""Chat Models - Data structures for the conversation pipeline.

Messages are persisted with the field names the browser widget has always
used (``sender``, ``text``, ``timestamp``, ``feedback``), so blobs written by
earlier versions of the widget load unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class Sender(str, Enum):
    """Who wrote a message."""

    USER = "user"
    ASSISTANT = "ai"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Sender"]:
        if value == "assistant":
            return cls.ASSISTANT
        return None

    @property
    def role(self) -> str:
        """Chat-completion role for this sender."""
        return "user" if self is Sender.USER else "assistant"


class Message(BaseModel):
    """A message in the conversation log.

    Everything except ``feedback`` is frozen once the message exists.
    ``feedback`` is written at most once, through ConversationStore.

    Attributes:
        sender: Message author
        text: Message body (Markdown allowed)
        created_at: When the message was created (serialized as ``timestamp``)
        feedback: Visitor's helpful/unhelpful verdict, if given
    """

    model_config = ConfigDict(populate_by_name=True)

    sender: Sender = Field(frozen=True)
    text: str = Field(frozen=True)
    created_at: datetime = Field(default_factory=utc_now, alias="timestamp", frozen=True)
    feedback: Optional[bool] = None

    @classmethod
    def from_user(cls, text: str) -> "Message":
        return cls(sender=Sender.USER, text=text)

    @classmethod
    def from_assistant(cls, text: str) -> "Message":
        return cls(sender=Sender.ASSISTANT, text=text)

    @property
    def is_assistant(self) -> bool:
        return self.sender is Sender.ASSISTANT

    def to_history_entry(self) -> Dict[str, str]:
        """Convert to a chat-completion ``{role, content}`` entry."""
        return {"role": self.sender.role, "content": self.text}


class ResponseSource(str, Enum):
    """Which stage of the pipeline produced a response."""

    CANNED = "canned"
    COMPLETION = "completion"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class CannedEntry:
    """One phrasing that maps to a pre-authored answer."""

    phrasing: str
    answer: str


@dataclass
class CompletionRequest:
    """Everything sent to the completion endpoint for one turn.

    ``history`` never contains the system prompt; ``to_messages`` adds it.
    """

    system_prompt: str
    latest_input: str
    history: List[Dict[str, str]] = field(default_factory=list)
    max_tokens: int = 150

    @classmethod
    def from_messages(
        cls,
        system_prompt: str,
        prior_messages: List[Message],
        latest_input: str,
        max_tokens: int = 150,
    ) -> "CompletionRequest":
        return cls(
            system_prompt=system_prompt,
            latest_input=latest_input,
            history=[m.to_history_entry() for m in prior_messages],
            max_tokens=max_tokens,
        )

    def to_messages(self) -> List[Dict[str, str]]:
        """Build the wire ``messages`` array."""
        return [
            {"role": "system", "content": self.system_prompt},
            *self.history,
            {"role": "user", "content": self.latest_input},
        ]


@dataclass(frozen=True)
class CompletionResult:
    """Text returned by the completion endpoint and its off-topic verdict."""

    text: str
    is_off_topic: bool


@dataclass(frozen=True)
class ResolvedResponse:
    """Outcome of one resolution.

    Attributes:
        text: Final assistant text to display
        latency_ms: Real time spent resolving (lookup or network)
        source: Pipeline stage that produced the text
    """

    text: str
    latency_ms: float
    source: ResponseSource
