from __future__ import annotations

import os
from pathlib import Path

import typer

from feedgen import __version__
from feedgen.cli.commands.feeds import feeds
from feedgen.cli.commands.path import path
from feedgen.cli.commands.write import write
from feedgen.cli.context import CONFIG_ENV_VAR


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


app.command()(write)
app.command()(path)
app.command()(feeds)


def _version_callback(value: bool) -> None:
    # Eager, so it runs before typer checks that a command was given.
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help=f"Config file (default: ${CONFIG_ENV_VAR} or ./feedgen.toml)",
    ),
) -> None:
    if config is not None:
        os.environ[CONFIG_ENV_VAR] = str(config.expanduser().resolve())


def main() -> None:
    app()
