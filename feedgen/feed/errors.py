from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class DirectoryCreateFailed:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"could not create feed directory at {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class StagingOpenFailed:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"could not open staging file {self.path} for writing: {self.reason}"


@dataclass(frozen=True, slots=True)
class RowWriteFailed:
    path: Path
    reason: str
    row_index: int | None = None

    @property
    def message(self) -> str:
        if self.row_index is None:
            return f"failed to write header row to {self.path}: {self.reason}"
        return f"failed to write data row {self.row_index} to {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class PublishRenameFailed:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"could not publish feed file {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class SecretLookupFailed:
    feed_name: str
    reason: str

    @property
    def message(self) -> str:
        return f"could not get the secret for feed {self.feed_name!r}: {self.reason}"


FeedWriteError = (
    SecretLookupFailed
    | DirectoryCreateFailed
    | StagingOpenFailed
    | RowWriteFailed
    | PublishRenameFailed
)
