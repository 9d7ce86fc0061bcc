"""Versioned schemas for persisted widget state.

Each persisted key holds ``{"version": N, "data": <payload>}``. Loading
validates the payload against the key's schema and falls back to a default
when the blob is missing, corrupted, of an unknown version or fails
validation. Unversioned blobs written by the browser widget are read
as version 1 payloads.

Storage failures never propagate out of ``PersistedValue``: after the first
read or write failure the value stops touching the backend and the caller
keeps working from memory for the rest of the session.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from portfolio_assistant.errors import StorageUnavailableError
from portfolio_assistant.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_VERSION = 1

CHAT_MESSAGES_KEY = "chatMessages"
ANALYTICS_KEY = "analyticsData"
FEEDBACK_KEY = "feedbackData"
SELECTED_LANGUAGE_KEY = "selectedLanguage"


class SchemaMismatch(ValueError):
    """Persisted blob does not match the expected schema."""


def encode(adapter: TypeAdapter[T], value: T) -> str:
    """Serialize ``value`` inside a version envelope."""
    data = adapter.dump_python(value, mode="json", by_alias=True)
    return json.dumps({"version": SCHEMA_VERSION, "data": data})


def decode(adapter: TypeAdapter[T], raw: str) -> T:
    """Parse and validate an enveloped (or legacy bare) blob.

    Raises:
        SchemaMismatch: If the blob is not JSON, has an unknown version or
            fails validation
    """
    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaMismatch(f"not valid JSON: {exc}") from exc

    if isinstance(payload, dict) and "version" in payload and "data" in payload:
        version = payload["version"]
        if version != SCHEMA_VERSION:
            raise SchemaMismatch(f"unsupported schema version {version!r}")
        payload = payload["data"]

    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise SchemaMismatch(str(exc)) from exc


class PersistedValue(Generic[T]):
    """A single schema-checked value stored under one key.

    Example:
        >>> value = PersistedValue(store, ANALYTICS_KEY, TypeAdapter(AnalyticsSnapshot), AnalyticsSnapshot)
        >>> snapshot = value.load()
        >>> value.save(snapshot)
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        adapter: TypeAdapter[T],
        default_factory: Callable[[], T],
    ) -> None:
        self._store = store
        self.key = key
        self._adapter = adapter
        self._default_factory = default_factory
        self.degraded = False

    def _degrade(self, action: str, exc: StorageUnavailableError) -> None:
        self.degraded = True
        logger.warning(
            "Storage unavailable while trying to %s %s; continuing in memory: %s",
            action,
            self.key,
            exc,
        )

    def load(self) -> T:
        """Load the stored value, or the default if absent or invalid."""
        if self.degraded:
            return self._default_factory()
        try:
            raw = self._store.get(self.key)
        except StorageUnavailableError as exc:
            self._degrade("read", exc)
            return self._default_factory()

        if raw is None:
            return self._default_factory()
        try:
            return decode(self._adapter, raw)
        except SchemaMismatch as exc:
            logger.warning("Discarding persisted %s: %s", self.key, exc)
            return self._default_factory()

    def save(self, value: T) -> bool:
        """Overwrite the stored value. Returns False if storage is unavailable."""
        if self.degraded:
            return False
        try:
            self._store.set(self.key, encode(self._adapter, value))
        except StorageUnavailableError as exc:
            self._degrade("write", exc)
            return False
        return True
