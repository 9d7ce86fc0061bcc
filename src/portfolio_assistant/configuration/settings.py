"""Typed settings management for the portfolio assistant.

This module wraps configuration in Pydantic models so the chat service and
CLI commands can rely on validated settings. The completion API key is read
from the environment first and otherwise from a keyring-backed secret store;
it is never written to the settings file in clear text.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from portfolio_assistant.errors import InvalidConfigError

logger = logging.getLogger(__name__)


DEFAULT_DATA_DIR = Path.home() / ".portfolio_assistant"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.json"
DEFAULT_SECRETS_SERVICE = "portfolio-assistant"
API_KEY_SECRET = "openai:api_key"

DEFAULT_SYSTEM_PROMPT = (
    "You are an AI assistant that provides detailed answers about Emmanuella and "
    "programming. Emmanuella is a skilled frontend developer specializing in React, "
    "Angular, TypeScript, and modern web technologies. She has built projects like "
    "an admin panel in Angular and a React-based portfolio. She loves to play chess "
    "and CODM in her spare time. She has worked with startups around the globe. "
    "When answering, provide clear, structured, and informative responses. If a "
    "question is unrelated, politely redirect to relevant topics."
)


class CompletionSettings(BaseModel):
    """Configuration for the remote chat-completion endpoint."""

    base_url: str = Field("https://api.openai.com/v1", description="API base URL")
    model: str = Field("gpt-3.5-turbo", description="Completion model name")
    max_tokens: int = Field(150, ge=1, le=4096)
    timeout_seconds: float = Field(30.0, gt=0)
    api_key: Optional[SecretStr] = Field(default=None, description="Bearer token")
    system_prompt: str = Field(DEFAULT_SYSTEM_PROMPT, description="Persona prompt")

    @field_validator("base_url")
    def _validate_base_url(cls, value: str) -> str:
        if not value.startswith("http://") and not value.startswith("https://"):
            raise ValueError("base_url must start with http:// or https://")
        return value.rstrip("/")


class MatchingSettings(BaseModel):
    """Canned-answer matching configuration."""

    # Dissimilarity cut-off: 0 = identical, 1 = unrelated
    threshold: float = Field(0.3, gt=0.0, le=1.0)


class AssistantSettings(BaseModel):
    """Root configuration state."""

    completion: CompletionSettings = Field(default_factory=CompletionSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    data_dir: Path = Field(default=DEFAULT_DATA_DIR)
    default_language: str = "en"


@dataclass
class SecretStore:
    """Keyring abstraction for storing credentials."""

    service_name: str = DEFAULT_SECRETS_SERVICE
    keyring_module: Any = field(default=keyring)

    def set_secret(self, key: str, value: str) -> None:
        if self.keyring_module is None:
            raise RuntimeError("Keyring module not configured")
        self.keyring_module.set_password(self.service_name, key, value)

    def get_secret(self, key: str) -> Optional[str]:
        if self.keyring_module is None:
            return None
        return self.keyring_module.get_password(self.service_name, key)

    def delete_secret(self, key: str) -> None:
        if self.keyring_module is None:
            return
        try:
            self.keyring_module.delete_password(self.service_name, key)
        except PasswordDeleteError:
            return


def load_settings(path: Path = DEFAULT_CONFIG_PATH) -> AssistantSettings:
    """Load settings from disk, or defaults when no file exists."""

    if not path.exists():
        return AssistantSettings()
    try:
        payload = json.loads(path.read_text())
        return AssistantSettings.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}", details={"path": str(path)}) from exc


def save_settings(settings: AssistantSettings, path: Path = DEFAULT_CONFIG_PATH) -> None:
    """Persist settings to disk with masked secrets."""

    payload = settings.model_dump(mode="json")
    payload = _mask_secret_fields(payload)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2))


def resolve_settings(
    *,
    path: Path = DEFAULT_CONFIG_PATH,
    secret_store: SecretStore | None = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AssistantSettings:
    """Load settings and apply overrides, environment and stored secrets."""

    secret_store = secret_store or SecretStore()
    settings = load_settings(path)

    merged = settings.model_dump(mode="python")
    merged = _apply_overrides(merged, overrides or {})
    merged = _apply_env_overrides(merged)

    try:
        resolved = AssistantSettings.model_validate(merged)
    except ValidationError as exc:
        raise InvalidConfigError(f"Invalid configuration: {exc}") from exc
    _hydrate_secrets(resolved, secret_store)
    return resolved


def store_api_key(value: str, secret_store: SecretStore | None = None) -> None:
    """Save the completion API key in the keyring."""

    (secret_store or SecretStore()).set_secret(API_KEY_SECRET, value)


def _apply_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = base.copy()
    for key, value in overrides.items():
        merged[key] = value
    return merged


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    completion = data.setdefault("completion", {})
    _set_env_override(completion, "api_key", "OPENAI_API_KEY")
    _set_env_override(completion, "model", "PORTFOLIO_ASSISTANT_MODEL")
    _set_env_override(completion, "base_url", "PORTFOLIO_ASSISTANT_BASE_URL")

    matching = data.setdefault("matching", {})
    _set_env_override(matching, "threshold", "PORTFOLIO_ASSISTANT_THRESHOLD", cast_float=True)

    _set_env_override(data, "data_dir", "PORTFOLIO_ASSISTANT_DATA_DIR")
    _set_env_override(data, "default_language", "PORTFOLIO_ASSISTANT_LANGUAGE")
    return data


def _set_env_override(
    mapping: Dict[str, Any],
    key: str,
    env_name: str,
    *,
    cast_float: bool = False,
) -> None:
    raw = os.getenv(env_name)
    if raw is None:
        return
    if cast_float:
        try:
            mapping[key] = float(raw)
        except ValueError as exc:
            raise InvalidConfigError(f"{env_name} must be a number, got {raw!r}") from exc
    else:
        mapping[key] = raw


def _hydrate_secrets(settings: AssistantSettings, secret_store: SecretStore) -> None:
    completion = settings.completion
    if completion.api_key and completion.api_key.get_secret_value():
        return
    try:
        stored = secret_store.get_secret(API_KEY_SECRET)
    except KeyringError as exc:
        logger.warning("Keyring unavailable, API key not loaded: %s", exc)
        return
    if stored:
        completion.api_key = SecretStr(stored)


def _mask_secret_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    completion = payload.get("completion", {})
    if completion.get("api_key"):
        completion["api_key"] = None
    return payload
