"""Persistence for widget state: key-value backends and versioned schemas."""

from portfolio_assistant.storage.kv import InMemoryStore, JsonFileStore, KeyValueStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
]
