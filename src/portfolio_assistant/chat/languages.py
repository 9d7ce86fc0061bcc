"""Supported languages, translated UI strings and the saved language choice."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from portfolio_assistant.errors import StorageUnavailableError
from portfolio_assistant.storage.kv import KeyValueStore
from portfolio_assistant.storage.schemas import SELECTED_LANGUAGE_KEY

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    flag: str


LANGUAGES: tuple[Language, ...] = (
    Language("en", "English", "🇺🇸"),
    Language("es", "Spanish", "🇪🇸"),
    Language("fr", "French", "🇫🇷"),
    Language("de", "German", "🇩🇪"),
    Language("pt", "Portuguese", "🇵🇹"),
    Language("it", "Italian", "🇮🇹"),
    Language("nl", "Dutch", "🇳🇱"),
    Language("ru", "Russian", "🇷🇺"),
    Language("zh", "Chinese", "🇨🇳"),
    Language("ja", "Japanese", "🇯🇵"),
)

LANGUAGE_CODES = frozenset(language.code for language in LANGUAGES)

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    "en": {
        "welcome": (
            "Hello! I'm your personal assistant. Feel free to ask me about "
            "Emmanuella's work or programming tips. What can I help you with today?"
        ),
        "type_message": "Type your message...",
        "suggested_questions": "Suggested Questions:",
        "send": "Send",
        "listening": "Listening...",
        "stop_listening": "Stop Listening",
        "feedback": "Was this response helpful?",
        "yes": "Yes",
        "no": "No",
        "thanks": "Thank you for your feedback!",
        "error": "Error",
        "loading": "Loading...",
    },
    "es": {
        "welcome": (
            "¡Hola! Soy tu asistente personal. Pregúntame sobre el trabajo de "
            "Emmanuella o consejos de programación. ¿En qué puedo ayudarte hoy?"
        ),
        "type_message": "Escribe tu mensaje...",
        "suggested_questions": "Preguntas Sugeridas:",
        "send": "Enviar",
        "listening": "Escuchando...",
        "stop_listening": "Detener Escucha",
        "feedback": "¿Fue útil esta respuesta?",
        "yes": "Sí",
        "no": "No",
        "thanks": "¡Gracias por tu comentario!",
        "error": "Error",
        "loading": "Cargando...",
    },
}


def normalize_language(code: Optional[str]) -> str:
    """Return ``code`` if supported, else the default language."""
    if code and code.strip().lower() in LANGUAGE_CODES:
        return code.strip().lower()
    return DEFAULT_LANGUAGE


def translate(key: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Look up a UI string, falling back to English.

    Raises:
        KeyError: If ``key`` is not a known UI string
    """
    table = TRANSLATIONS.get(language, {})
    if key in table:
        return table[key]
    return TRANSLATIONS[DEFAULT_LANGUAGE][key]


class LanguagePreference:
    """The visitor's language choice, kept as a plain string code."""

    def __init__(self, store: KeyValueStore, default: str = DEFAULT_LANGUAGE) -> None:
        self._store = store
        self._default = normalize_language(default)
        self._current: Optional[str] = None

    def get(self) -> str:
        if self._current is None:
            try:
                raw = self._store.get(SELECTED_LANGUAGE_KEY)
            except StorageUnavailableError as exc:
                logger.warning("Could not read language preference: %s", exc)
                raw = None
            self._current = normalize_language(raw) if raw else self._default
        return self._current

    def set(self, code: str) -> str:
        """Select a language. Unsupported codes select the default."""
        self._current = normalize_language(code)
        try:
            self._store.set(SELECTED_LANGUAGE_KEY, self._current)
        except StorageUnavailableError as exc:
            logger.warning("Could not save language preference: %s", exc)
        return self._current
