"""CLI commands for managing portfolio assistant settings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import typer
from pydantic import ValidationError

from portfolio_assistant.configuration.settings import (
    DEFAULT_CONFIG_PATH,
    AssistantSettings,
    SecretStore,
    load_settings,
    resolve_settings,
    save_settings,
    store_api_key,
)
from portfolio_assistant.errors import ConfigurationError


config_app = typer.Typer(help="Manage portfolio assistant configuration")


@config_app.command("show")
def show_config(
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
    service: str = typer.Option("portfolio-assistant", help="Keychain service name"),
) -> None:
    """Display effective configuration with secrets masked."""

    try:
        settings = resolve_settings(path=config_path, secret_store=SecretStore(service_name=service))
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(_summarize_settings(settings))


@config_app.command("set")
def set_config(
    key: str = typer.Argument(..., help="Configuration key, e.g. matching.threshold"),
    value: str = typer.Argument(..., help="New value"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, help="Path to config"),
) -> None:
    """Update a configuration value."""

    if key.split(".")[-1] == "api_key":
        typer.echo("Use 'config set-key' to store the API key", err=True)
        raise typer.Exit(code=1)
    try:
        settings = load_settings(config_path)
        payload = settings.model_dump(mode="python")
        _assign(payload, key.split("."), value)
        updated = AssistantSettings.model_validate(payload)
    except (ConfigurationError, KeyError, ValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    save_settings(updated, config_path)
    typer.echo(f"Updated {key}")


@config_app.command("set-key")
def set_api_key(
    value: str = typer.Option(..., prompt=True, hide_input=True, help="Completion API key"),
    service: str = typer.Option("portfolio-assistant", help="Keychain service name"),
) -> None:
    """Store the completion API key in the system keychain."""

    store_api_key(value, SecretStore(service_name=service))
    typer.echo("API key stored")


def _assign(payload: Dict[str, Any], path: List[str], value: str) -> None:
    node = payload
    for part in path[:-1]:
        if not isinstance(node.get(part), dict):
            raise KeyError(f"Unknown configuration section: {part}")
        node = node[part]
    if path[-1] not in node:
        raise KeyError(f"Unknown configuration key: {'.'.join(path)}")
    node[path[-1]] = value


def _summarize_settings(settings: AssistantSettings) -> str:
    completion = settings.completion
    summary = {
        "completion": {
            "base_url": completion.base_url,
            "model": completion.model,
            "max_tokens": completion.max_tokens,
            "timeout_seconds": completion.timeout_seconds,
            "api_key": "****" if completion.api_key else None,
        },
        "matching": {"threshold": settings.matching.threshold},
        "data_dir": str(settings.data_dir),
        "default_language": settings.default_language,
    }
    return json.dumps(summary, indent=2)
