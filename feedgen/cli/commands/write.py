"""Write command - regenerate a feed file from a records file."""

from __future__ import annotations

from pathlib import Path

import typer

from feedgen.cli.commands._helpers import writer_or_exit
from feedgen.cli.context import build_context
from feedgen.core.errors import ErrorCode
from feedgen.core.result import Err, Ok
from feedgen.feed.records import load_records
from feedgen.output.errors import feed_error_exit_code, print_feed_hint


def write(
    feed: str = typer.Argument(..., help="Feed name from the config"),
    input_: Path = typer.Option(
        ...,
        "--input",
        "-i",
        help="Records as a JSON array, or JSON Lines if the name ends in .jsonl",
    ),
) -> None:
    """Regenerate FEED from records and publish it atomically."""
    ctx = build_context()
    writer = writer_or_exit(ctx, feed)

    records_result = load_records(input_)
    if isinstance(records_result, Err):
        ctx.console.error(records_result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    records = records_result.value

    match writer.write_feed_file(records):
        case Ok(path):
            ctx.console.success(f"{feed}: wrote {len(records)} records to {path}")
        case Err(error):
            print_feed_hint(error, ctx.console)
            raise typer.Exit(code=feed_error_exit_code(error))
