"""Chat CLI commands.

Drives the portfolio assistant from a terminal. State lives in the
configured data directory, so consecutive commands share one conversation.

Commands:
    portfolio-assistant chat send "message" --json
    portfolio-assistant chat history --json
    portfolio-assistant chat feedback 1 --helpful
    portfolio-assistant chat analytics --json
    portfolio-assistant chat reset
    portfolio-assistant chat languages
    portfolio-assistant chat language es
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from portfolio_assistant.chat.languages import LANGUAGES
from portfolio_assistant.chat.service import ChatService, build_service
from portfolio_assistant.configuration.settings import DEFAULT_CONFIG_PATH, resolve_settings
from portfolio_assistant.errors import AssistantError
from portfolio_assistant.errors.user_messages import format_error_for_cli

logger = logging.getLogger(__name__)

console = Console()
chat_app = typer.Typer(help="Chat with the portfolio assistant")

ConfigOption = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file")
DataDirOption = typer.Option(None, "--data-dir", help="Override the data directory")


def _output_json(data: dict) -> None:
    """Output JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


def _output_error(message: str, as_json: bool = False) -> None:
    """Output error message."""
    if as_json:
        _output_json({"error": message, "success": False})
    else:
        typer.echo(message, err=True)
    sys.exit(1)


def _output_assistant_error(error: AssistantError, as_json: bool = False) -> None:
    """Output an assistant error with its recovery suggestion."""
    if as_json:
        _output_json({"success": False, "error": error.to_dict()})
        sys.exit(1)
    _output_error(format_error_for_cli(error))


def _load_service(config_path: Path, data_dir: Optional[Path]) -> ChatService:
    overrides = {"data_dir": data_dir} if data_dir else None
    settings = resolve_settings(path=config_path, overrides=overrides)
    return build_service(settings)


@chat_app.command("send")
def send_message(
    message: str = typer.Argument(..., help="Message to send"),
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Send a message and print the assistant's reply.

    Example:
        portfolio-assistant chat send "What's your tech stack?" --json
    """
    if not message.strip():
        _output_error("Message cannot be empty", output_json)

    try:
        service = _load_service(config_path, data_dir)

        async def run():
            try:
                return await service.send(message)
            finally:
                await service.close()

        result = asyncio.run(run())
    except AssistantError as e:
        logger.exception("Chat send failed")
        _output_assistant_error(e, output_json)
        return

    if not result.ok:
        if output_json:
            _output_json({"success": False, "error": result.error, "recoverable": result.recoverable})
            sys.exit(1)
        _output_error(result.error)
        return

    if output_json:
        _output_json(
            {
                "success": True,
                "message": result.message.model_dump(mode="json", by_alias=True),
                "source": result.response.source.value,
                "latency_ms": result.response.latency_ms,
                "index": len(service.history()) - 1,
            }
        )
    else:
        typer.echo(result.message.text)


@chat_app.command("history")
def get_history(
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show the conversation so far."""
    try:
        service = _load_service(config_path, data_dir)
        messages = service.history()
    except AssistantError as e:
        logger.exception("Chat history failed")
        _output_assistant_error(e, output_json)
        return

    if output_json:
        _output_json(
            {
                "success": True,
                "messages": [m.model_dump(mode="json", by_alias=True) for m in messages],
                "suggested_questions": list(service.suggested_questions),
            }
        )
        return

    for index, m in enumerate(messages):
        label = "You" if m.sender.role == "user" else "Assistant"
        typer.echo(f"[{index}] {label}: {m.text}")
    for question in service.suggested_questions:
        typer.echo(f"  ? {question}")


@chat_app.command("feedback")
def give_feedback(
    index: int = typer.Argument(..., help="Index of the assistant message (see history)"),
    helpful: bool = typer.Option(..., "--helpful/--unhelpful", help="Was the reply helpful?"),
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """Rate an assistant reply."""
    try:
        service = _load_service(config_path, data_dir)
        stored = service.give_feedback(index, helpful)
    except (IndexError, ValueError) as e:
        _output_error(f"Error: {e}")
        return
    except AssistantError as e:
        logger.exception("Chat feedback failed")
        _output_assistant_error(e)
        return

    if stored:
        typer.echo("Thank you for your feedback!")
    else:
        typer.echo("Feedback already recorded for this message")


@chat_app.command("analytics")
def show_analytics(
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show usage analytics."""
    try:
        service = _load_service(config_path, data_dir)
        snapshot = service.analytics_snapshot()
    except AssistantError as e:
        logger.exception("Chat analytics failed")
        _output_assistant_error(e, output_json)
        return

    if output_json:
        analytics = snapshot.model_dump(mode="json", by_alias=True)
        analytics["helpfulRatio"] = snapshot.helpful_ratio
        _output_json({"success": True, "analytics": analytics})
        return

    table = Table(title="Chat Analytics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total messages", str(snapshot.total_messages))
    table.add_row("Helpful responses", str(snapshot.helpful_responses))
    table.add_row("Unhelpful responses", str(snapshot.unhelpful_responses))
    if snapshot.feedback_total:
        table.add_row("Helpful ratio", f"{snapshot.helpful_ratio:.0%}")
    table.add_row("Most used language", snapshot.most_used_language)
    table.add_row("Average response time", f"{snapshot.average_response_time_ms:.0f} ms")
    console.print(table)


@chat_app.command("reset")
def reset_chat(
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Clear the conversation and analytics."""
    if not confirm and not typer.confirm("Clear conversation and analytics?"):
        typer.echo("Reset cancelled")
        return
    try:
        service = _load_service(config_path, data_dir)
        service.reset()
    except AssistantError as e:
        logger.exception("Chat reset failed")
        _output_assistant_error(e)
        return
    typer.echo("Conversation and analytics cleared")


@chat_app.command("languages")
def list_languages(
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """List supported languages, marking the selected one."""
    try:
        current = _load_service(config_path, data_dir).language
    except AssistantError as e:
        _output_assistant_error(e)
        return

    table = Table(title="Languages")
    table.add_column("Code", style="cyan")
    table.add_column("Language")
    table.add_column("Selected", justify="center")
    for language in LANGUAGES:
        table.add_row(
            language.code,
            f"{language.flag} {language.name}",
            "*" if language.code == current else "",
        )
    console.print(table)


@chat_app.command("language")
def select_language(
    code: str = typer.Argument(..., help="Language code, e.g. es"),
    config_path: Path = ConfigOption,
    data_dir: Optional[Path] = DataDirOption,
) -> None:
    """Select the conversation language."""
    try:
        selected = _load_service(config_path, data_dir).set_language(code)
    except AssistantError as e:
        _output_assistant_error(e)
        return
    if selected != code.strip().lower():
        typer.echo(f"Unsupported language '{code}', using {selected}")
    else:
        typer.echo(f"Language set to {selected}")
