"""Error presentation utilities.

Maps feed write errors to follow-up hints and CLI exit codes. The error
message itself is already logged by the writer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from feedgen.core.errors import ErrorCode
from feedgen.feed.errors import (
    DirectoryCreateFailed,
    FeedWriteError,
    PublishRenameFailed,
    RowWriteFailed,
    SecretLookupFailed,
    StagingOpenFailed,
)
from feedgen.output.console import Style

if TYPE_CHECKING:
    from feedgen.output.console import ConsoleProtocol

__all__ = ["print_feed_hint", "feed_error_exit_code"]


def print_feed_hint(error: FeedWriteError, console: ConsoleProtocol) -> None:
    match error:
        case SecretLookupFailed():
            console.print("hint: check storage.secrets_file in the config", Style.DIM)
        case DirectoryCreateFailed():
            console.print("hint: check that storage.base_dir is writable", Style.DIM)
        case StagingOpenFailed() | RowWriteFailed():
            console.print("hint: check free disk space in the feed directory", Style.DIM)
        case PublishRenameFailed():
            console.print("hint: the previously published feed was left in place", Style.DIM)


def feed_error_exit_code(error: FeedWriteError) -> int:
    """Get exit code for a feed write error."""
    match error:
        case SecretLookupFailed() | DirectoryCreateFailed():
            return int(ErrorCode.ENV_ERROR)
        case StagingOpenFailed() | RowWriteFailed() | PublishRenameFailed():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.IO_ERROR)
