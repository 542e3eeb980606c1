"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from feedgen.core.errors import ErrorCode
from feedgen.output.console import Style

if TYPE_CHECKING:
    from feedgen.cli.context import CLIContext
    from feedgen.feed.writer import CsvFeedFileWriter


def writer_or_exit(ctx: CLIContext, feed_name: str) -> CsvFeedFileWriter:
    """Return the writer for a configured feed, or exit with USER_ERROR."""
    writer = ctx.writer_for(feed_name)
    if writer is None:
        ctx.console.error(f"unknown feed: {feed_name}")
        available = sorted(ctx.config.feeds)
        if available:
            ctx.console.print(f"available: {', '.join(available)}", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    return writer
