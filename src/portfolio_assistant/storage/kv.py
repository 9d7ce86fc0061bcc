"""Key-value persistence backends.

The chat widget persists whole JSON blobs under a handful of string keys
(``chatMessages``, ``analyticsData``, ``feedbackData``, ``selectedLanguage``).
Every write overwrites the previous value; there is no merging, so two
processes sharing a data directory are last-writer-wins.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from filelock import FileLock, Timeout

from portfolio_assistant.errors import StorageUnavailableError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStore(Protocol):
    """Opaque string key-value store with get/set semantics."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryStore:
    """Dict-backed store; contents last for the lifetime of the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """Persist each key as ``<key>.json`` under a directory.

    Uses atomic writes and file locking so a reader never observes a
    half-written value. The directory is created on the first write; a
    directory that cannot be created surfaces as StorageUnavailableError
    from ``set``.
    """

    def __init__(self, base_path: Optional[Path] = None, lock_timeout: float = 10) -> None:
        """Initialize file store.

        Args:
            base_path: Directory for value files (default: ~/.portfolio_assistant/state/)
            lock_timeout: Seconds to wait for a key's lock before giving up
        """
        if base_path is None:
            base_path = Path.home() / ".portfolio_assistant" / "state"
        self.base_path = base_path.expanduser()
        self._lock_timeout = lock_timeout

    def _value_path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_path / f"{key}.json"

    def _lock(self, key: str) -> FileLock:
        return FileLock(str(self.base_path / f"{key}.lock"), timeout=self._lock_timeout)

    def get(self, key: str) -> Optional[str]:
        path = self._value_path(key)
        if not path.exists():
            return None
        try:
            with self._lock(key):
                return path.read_text(encoding="utf-8")
        except (OSError, Timeout) as exc:
            raise StorageUnavailableError(
                f"Cannot read {key}", details={"key": key}
            ) from exc

    def set(self, key: str, value: str) -> None:
        path = self._value_path(key)
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            with self._lock(key):
                # Write to temporary file first
                tmp_path = path.with_suffix(".tmp")
                tmp_path.write_text(value, encoding="utf-8")

                # Atomic replace
                os.replace(tmp_path, path)
        except (OSError, Timeout) as exc:
            raise StorageUnavailableError(
                f"Cannot write {key}", details={"key": key}
            ) from exc

    def delete(self, key: str) -> None:
        path = self._value_path(key)
        if not path.exists():
            return
        try:
            with self._lock(key):
                path.unlink(missing_ok=True)
        except (OSError, Timeout) as exc:
            raise StorageUnavailableError(
                f"Cannot delete {key}", details={"key": key}
            ) from exc

    def keys(self) -> list[str]:
        return sorted(p.stem for p in self.base_path.glob("*.json"))
