"""Configuration loading utilities for the portfolio assistant."""

from .settings import (
    DEFAULT_CONFIG_PATH,
    AssistantSettings,
    CompletionSettings,
    MatchingSettings,
    SecretStore,
    load_settings,
    resolve_settings,
    save_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "AssistantSettings",
    "CompletionSettings",
    "MatchingSettings",
    "SecretStore",
    "load_settings",
    "resolve_settings",
    "save_settings",
]
