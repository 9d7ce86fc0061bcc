"""Conversation log for the active chat session.

The log is persisted as a whole under ``chatMessages`` after every change.
A fresh (or unreadable) log starts with a single welcome message from the
assistant at index 0.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from pydantic import TypeAdapter

from portfolio_assistant.chat.languages import translate
from portfolio_assistant.chat.models import Message
from portfolio_assistant.storage.kv import KeyValueStore
from portfolio_assistant.storage.schemas import CHAT_MESSAGES_KEY, PersistedValue

logger = logging.getLogger(__name__)

MESSAGES_ADAPTER: TypeAdapter[List[Message]] = TypeAdapter(List[Message])


class ConversationStore:
    """Ordered, persisted message log with write-once feedback.

    Example:
        >>> store = ConversationStore(InMemoryStore())
        >>> store.load()[0].text
        "Hello! I'm your personal assistant. ..."
        >>> store.append(Message.from_user("Hi"))
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        welcome: Optional[Callable[[], str]] = None,
    ) -> None:
        """Initialize conversation store.

        Args:
            kv_store: Backend holding the ``chatMessages`` blob
            welcome: Returns the welcome text used when seeding a new log
        """
        self._persisted: PersistedValue[Optional[List[Message]]] = PersistedValue(
            kv_store, CHAT_MESSAGES_KEY, MESSAGES_ADAPTER, lambda: None
        )
        self._welcome = welcome or (lambda: translate("welcome"))
        self._messages: List[Message] = []
        self._loaded = False

    @property
    def messages(self) -> List[Message]:
        """Copy of the log, oldest first."""
        self._ensure_loaded()
        return list(self._messages)

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._messages)

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def _seed(self) -> List[Message]:
        return [Message.from_assistant(self._welcome())]

    def load(self) -> List[Message]:
        """Restore the log from storage, seeding a welcome message if absent."""
        restored = self._persisted.load()
        if restored:
            self._messages = list(restored)
            logger.debug("Restored %d chat messages", len(self._messages))
        else:
            self._messages = self._seed()
            self._save()
        self._loaded = True
        return list(self._messages)

    def append(self, message: Message) -> None:
        """Add ``message`` to the end of the log and persist."""
        self._ensure_loaded()
        self._messages.append(message)
        self._save()

    def set_feedback(self, index: int, is_helpful: bool) -> bool:
        """Record feedback on the message at ``index`` if none exists yet.

        Returns:
            True if feedback was written, False if the message already had it

        Raises:
            IndexError: If no message exists at ``index``
        """
        self._ensure_loaded()
        if not 0 <= index < len(self._messages):
            raise IndexError(f"No message at index {index}")

        message = self._messages[index]
        if message.feedback is not None:
            logger.debug("Feedback for message %d already recorded", index)
            return False

        message.feedback = is_helpful
        self._save()
        return True

    def clear(self) -> None:
        """Drop the log and start over with a welcome message."""
        self._messages = self._seed()
        self._loaded = True
        self._save()

    def _save(self) -> None:
        self._persisted.save(self._messages)
