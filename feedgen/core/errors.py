"""Exit codes for the feedgen CLI.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (unknown feed, unreadable input)
- 2: Environment error (bad config, unusable secrets file, feed directory
  cannot be created)
- 5: I/O error (staging, row write or publish failure)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    IO_ERROR = 5
