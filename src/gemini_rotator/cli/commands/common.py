"""Helpers shared by the CLI commands."""

from pathlib import Path

import typer
from rich.console import Console

from gemini_rotator.client import GeminiClient
from gemini_rotator.config.settings import Settings, get_settings
from gemini_rotator.core.logging import setup_logging
from gemini_rotator.exceptions import ConfigurationError


console = Console()
err_console = Console(stderr=True)


def load_settings(ctx: typer.Context) -> Settings:
    """Load settings from the config path given to the root command."""
    config_path: Path | None = (ctx.obj or {}).get("config_path")
    try:
        settings = get_settings(config_path)
    except ConfigurationError as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    log_level = (ctx.obj or {}).get("log_level") or settings.logging.level
    setup_logging(log_level, settings.logging.json_logs)
    return settings


def create_client(settings: Settings) -> GeminiClient:
    return GeminiClient.from_settings(settings)
