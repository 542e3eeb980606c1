"""Feeds command - list configured feeds."""

from __future__ import annotations

from feedgen.cli.context import build_context
from feedgen.output.console import Style


def feeds() -> None:
    """List configured feeds and their columns."""
    ctx = build_context()
    if not ctx.config.feeds:
        ctx.console.print(f"No feeds configured in {ctx.config_path}", Style.DIM)
        return

    for name, spec in sorted(ctx.config.feeds.items()):
        ctx.console.print(name, Style.INFO)
        ctx.console.print(f"  columns: {', '.join(spec.header_fields)}", Style.DIM)
        ctx.console.print(f"  delimiter: {spec.delimiter!r}", Style.DIM)
