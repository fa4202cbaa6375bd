"""Single generation request from the command line."""

import asyncio
from typing import Annotated

import typer

from gemini_rotator.cli.commands.common import (
    create_client,
    err_console,
    load_settings,
)
from gemini_rotator.exceptions import (
    AllCredentialsExhaustedError,
    GeminiRotatorError,
    NoCredentialsError,
)
from gemini_rotator.rotation.types import RequestMode


async def _run(ctx: typer.Context, prompt: str, mode: RequestMode) -> str:
    settings = load_settings(ctx)
    async with create_client(settings) as client:
        return await client.generate(prompt, mode)


def generate(
    ctx: typer.Context,
    prompt: Annotated[str, typer.Argument(help="Prompt sent to the model")],
    json_mode: Annotated[
        bool,
        typer.Option(
            "--json/--text",
            help="Request a JSON document instead of plain text",
        ),
    ] = False,
) -> None:
    """Generate text, failing over across the configured API keys."""
    mode = RequestMode.STRUCTURED_JSON if json_mode else RequestMode.PLAIN_TEXT

    try:
        text = asyncio.run(_run(ctx, prompt, mode))
    except NoCredentialsError as e:
        err_console.print(f"[red]{e.message}[/red]")
        err_console.print("Set GEMINI_API_KEYS or configure credentials.keys_file.")
        raise typer.Exit(1) from e
    except AllCredentialsExhaustedError as e:
        err_console.print(f"[red]{e.message}[/red]")
        for index, failure in enumerate(e.failures, start=1):
            err_console.print(f"  {index}. {failure}")
        raise typer.Exit(1) from e
    except GeminiRotatorError as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1) from e

    typer.echo(text)
