"""Speech capability interfaces and voice selection."""

from portfolio_assistant.speech.capabilities import (
    SpeechInput,
    SpeechOutput,
    UnsupportedSpeechInput,
    UnsupportedSpeechOutput,
)
from portfolio_assistant.speech.voices import ReadAloudToggle, VoiceChoice, choose_voice

__all__ = [
    "SpeechInput",
    "SpeechOutput",
    "UnsupportedSpeechInput",
    "UnsupportedSpeechOutput",
    "ReadAloudToggle",
    "VoiceChoice",
    "choose_voice",
]
