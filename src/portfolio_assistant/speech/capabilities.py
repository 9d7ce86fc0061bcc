"""Injected speech capabilities.

The chat pipeline never checks the environment for speech support. The UI
adapter passes in a ``SpeechInput`` / ``SpeechOutput`` implementation, or the
unsupported variants below when the platform has none. Speech shares no state
with resolution, the conversation log or analytics.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Protocol, runtime_checkable

from portfolio_assistant.errors import SpeechNotSupportedError

if TYPE_CHECKING:
    from portfolio_assistant.speech.voices import VoiceChoice


@runtime_checkable
class SpeechInput(Protocol):
    """Speech-to-text capability."""

    supported: bool

    async def listen(self, language: str = "en-US") -> str:
        """Capture one utterance and return its transcript."""
        ...

    def stop(self) -> None:
        ...


@runtime_checkable
class SpeechOutput(Protocol):
    """Text-to-speech capability."""

    supported: bool

    def voice_names(self) -> List[str]:
        """Names of the voices the platform offers, in platform order."""
        ...

    def speak(self, text: str, message_index: int, voice: VoiceChoice) -> None:
        ...

    def cancel(self) -> None:
        ...


class UnsupportedSpeechInput:
    supported = False

    async def listen(self, language: str = "en-US") -> str:
        raise SpeechNotSupportedError("Speech recognition is not supported")

    def stop(self) -> None:
        return None


class UnsupportedSpeechOutput:
    supported = False

    def voice_names(self) -> List[str]:
        return []

    def speak(self, text: str, message_index: int, voice: VoiceChoice) -> None:
        raise SpeechNotSupportedError("Text-to-speech is not supported")

    def cancel(self) -> None:
        return None
