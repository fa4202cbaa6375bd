"""Inspect the credential pool."""

import asyncio
from typing import Any

import typer
from rich.table import Table

from gemini_rotator.cli.commands.common import (
    console,
    create_client,
    err_console,
    load_settings,
)
from gemini_rotator.exceptions import GeminiRotatorError


async def _status(ctx: typer.Context) -> dict[str, Any]:
    settings = load_settings(ctx)
    async with create_client(settings) as client:
        return await client.get_status()


def keys(ctx: typer.Context) -> None:
    """Show the API keys currently visible to the pool (masked)."""
    try:
        status = asyncio.run(_status(ctx))
    except GeminiRotatorError as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    if not status["size"]:
        console.print("[yellow]No API keys found.[/yellow]")
        return

    table = Table(title="API Keys")
    table.add_column("#", style="cyan")
    table.add_column("Key", style="green")
    table.add_column("Next")

    for entry in status["credentials"]:
        table.add_row(
            str(entry["index"]),
            entry["key"],
            "[bold]*[/bold]" if entry["current"] else "",
        )

    console.print(table)
    console.print(f"{status['size']} key(s) loaded")
