"""Voice selection and read-aloud toggling for assistant messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from portfolio_assistant.speech.capabilities import SpeechOutput

logger = logging.getLogger(__name__)

# Substrings that identify a female voice across common platforms
FEMALE_VOICE_MARKERS: tuple[str, ...] = (
    "Samantha",
    "Victoria",
    "Karen",
    "Tessa",
    "Google UK English Female",
    "Google US English Female",
    "Microsoft Zira",
    "Microsoft Eva",
    "Microsoft Aria",
    "Female",
    "Siri",
    "Cortana",
)
FEMALE_VOICE_MARKERS_LOWER: tuple[str, ...] = ("woman", "girl")

DEFAULT_PITCH = 1.2
FALLBACK_PITCH = 1.4


@dataclass(frozen=True)
class VoiceChoice:
    """Utterance parameters for reading a message aloud."""

    voice: Optional[str]
    pitch: float = DEFAULT_PITCH
    rate: float = 0.9
    volume: float = 1.0
    lang: str = "en-US"


def _is_preferred(name: str) -> bool:
    lowered = name.lower()
    return any(marker in name for marker in FEMALE_VOICE_MARKERS) or any(
        marker in lowered for marker in FEMALE_VOICE_MARKERS_LOWER
    )


def choose_voice(voice_names: Iterable[str], lang: str = "en-US") -> VoiceChoice:
    """Pick the first preferred voice, or raise the pitch when none exists."""
    for name in voice_names:
        if _is_preferred(name):
            logger.debug("Using voice %s", name)
            return VoiceChoice(voice=name, lang=lang)
    logger.debug("No preferred voice found, using higher pitch")
    return VoiceChoice(voice=None, pitch=FALLBACK_PITCH, lang=lang)


class ReadAloudToggle:
    """Tracks which message is being read aloud.

    Activating the message that is already playing stops it; activating a
    different one cancels the current playback first.
    """

    def __init__(self, output: SpeechOutput) -> None:
        self._output = output
        self.speaking_index: Optional[int] = None

    def toggle(self, text: str, message_index: int, lang: str = "en-US") -> Optional[int]:
        """Start or stop reading ``text``. Returns the index now playing."""
        if self.speaking_index is not None:
            previous = self.speaking_index
            self._output.cancel()
            self.speaking_index = None
            if previous == message_index:
                return None

        voice = choose_voice(self._output.voice_names(), lang=lang)
        self._output.speak(text, message_index, voice)
        self.speaking_index = message_index
        return self.speaking_index

    def finished(self) -> None:
        """Playback ended or errored."""
        self.speaking_index = None
