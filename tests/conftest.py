"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import pytest

from portfolio_assistant.configuration.settings import (
    AssistantSettings,
    CompletionSettings,
    SecretStore,
)
from portfolio_assistant.storage.kv import InMemoryStore


class InMemorySecretStore(SecretStore):
    def __init__(self) -> None:
        super().__init__(service_name="test", keyring_module=None)
        self.storage: Dict[str, str] = {}

    def set_secret(self, key: str, value: str) -> None:  # type: ignore[override]
        self.storage[key] = value

    def get_secret(self, key: str) -> Optional[str]:  # type: ignore[override]
        return self.storage.get(key)

    def delete_secret(self, key: str) -> None:  # type: ignore[override]
        self.storage.pop(key, None)


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def secret_store() -> InMemorySecretStore:
    return InMemorySecretStore()


@pytest.fixture
def settings(tmp_path: Path) -> AssistantSettings:
    return AssistantSettings(
        completion=CompletionSettings(api_key="sk-test", base_url="https://llm.test/v1"),
        data_dir=tmp_path / "data",
    )


@pytest.fixture(autouse=True)
def _clear_assistant_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OPENAI_API_KEY",
        "PORTFOLIO_ASSISTANT_MODEL",
        "PORTFOLIO_ASSISTANT_BASE_URL",
        "PORTFOLIO_ASSISTANT_DATA_DIR",
        "PORTFOLIO_ASSISTANT_THRESHOLD",
        "PORTFOLIO_ASSISTANT_LANGUAGE",
    ):
        monkeypatch.delenv(name, raising=False)
