"""Entry point for the gemini-rotator command line."""

from pathlib import Path
from typing import Annotated

import typer

from gemini_rotator import __version__
from gemini_rotator.cli.commands import generate, keys
from gemini_rotator.cli.commands.common import console


app = typer.Typer(
    name="gemini-rotator",
    help="Gemini client with automatic API key failover",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"gemini-rotator {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override the configured log level"),
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    ctx.obj = {"config_path": config, "log_level": log_level}


app.command()(generate)
app.command()(keys)


def main() -> None:
    app()
