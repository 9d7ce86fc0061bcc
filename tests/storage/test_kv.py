"""Tests for key-value persistence backends."""

from __future__ import annotations

from pathlib import Path

import pytest

from portfolio_assistant.errors import StorageUnavailableError
from portfolio_assistant.storage.kv import InMemoryStore, JsonFileStore, KeyValueStore


class TestInMemoryStore:
    def test_get_set_delete(self) -> None:
        store = InMemoryStore()
        assert store.get("chatMessages") is None

        store.set("chatMessages", "[]")
        assert store.get("chatMessages") == "[]"

        store.delete("chatMessages")
        assert store.get("chatMessages") is None
        assert store.keys() == []

    def test_satisfies_protocol(self) -> None:
        assert isinstance(InMemoryStore(), KeyValueStore)


class TestJsonFileStore:
    def test_round_trip(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "state")
        store.set("analyticsData", '{"version": 1}')

        assert JsonFileStore(tmp_path / "state").get("analyticsData") == '{"version": 1}'
        assert (tmp_path / "state" / "analyticsData.json").exists()
        assert not (tmp_path / "state" / "analyticsData.tmp").exists()

    def test_overwrite(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path)
        store.set("selectedLanguage", "en")
        store.set("selectedLanguage", "es")
        assert store.get("selectedLanguage") == "es"

    def test_missing_key(self, tmp_path: Path) -> None:
        assert JsonFileStore(tmp_path).get("feedbackData") is None

    def test_delete_and_keys(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path)
        store.set("a", "1")
        store.set("b", "2")
        store.delete("a")
        store.delete("never-written")

        assert store.keys() == ["b"]

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "has space"])
    def test_invalid_keys_rejected(self, tmp_path: Path, key: str) -> None:
        with pytest.raises(ValueError):
            JsonFileStore(tmp_path).set(key, "x")

    def test_directory_created_on_first_write(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path / "nested" / "state")
        assert not (tmp_path / "nested").exists()
        assert store.get("chatMessages") is None

        store.set("chatMessages", "[]")
        assert (tmp_path / "nested" / "state" / "chatMessages.json").exists()

    def test_unwritable_directory(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = JsonFileStore(blocker / "state")

        assert store.get("chatMessages") is None
        with pytest.raises(StorageUnavailableError):
            store.set("chatMessages", "[]")

    def test_write_failure_raises_storage_error(self, tmp_path: Path) -> None:
        store = JsonFileStore(tmp_path)
        (tmp_path / "chatMessages.tmp").mkdir()

        with pytest.raises(StorageUnavailableError):
            store.set("chatMessages", "[]")
