"""Path command - print where a feed is published."""

from __future__ import annotations

import typer

from feedgen.cli.commands._helpers import writer_or_exit
from feedgen.cli.context import build_context
from feedgen.core.result import Err, Ok
from feedgen.output.errors import feed_error_exit_code, print_feed_hint


def path(
    feed: str = typer.Argument(..., help="Feed name from the config"),
    staging: bool = typer.Option(False, "--staging", help="Print the staging file path instead"),
) -> None:
    """Print the published (or staging) file path of FEED."""
    ctx = build_context()
    writer = writer_or_exit(ctx, feed)

    match writer.resolve_paths():
        case Ok(paths):
            typer.echo(str(paths.staging if staging else paths.feed))
        case Err(error):
            ctx.console.error(error.message)
            print_feed_hint(error, ctx.console)
            raise typer.Exit(code=feed_error_exit_code(error))
