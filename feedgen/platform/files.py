"""Filesystem helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

__all__ = ["atomic_write_text", "write_if_absent"]


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using a temp file and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)


def write_if_absent(path: Path, content: str, *, encoding: str = "utf-8") -> bool:
    """Create path with content unless something already exists there.

    Uses exclusive-create mode so an existing file is never truncated.
    Returns True if the file was created.
    """
    try:
        with path.open("x", encoding=encoding, newline="") as handle:
            handle.write(content)
    except FileExistsError:
        return False
    return True
