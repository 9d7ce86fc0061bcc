"""Command line entry points for the portfolio assistant."""

from typer import Typer

from ..configuration.cli import config_app
from .chat import chat_app


cli = Typer(help="Portfolio assistant command line tools")
cli.add_typer(chat_app, name="chat")
cli.add_typer(config_app, name="config")

__all__ = ["cli", "chat_app", "config_app"]
