"""Atomic CSV feed file writer.

A feed is regenerated by staging the complete CSV into a temporary file
next to the published one and then renaming it into place. Readers of the
feed path therefore see either the previous file or the new one, never a
partially written file.

Publish protocol:
1. Create the feed directory (fatal on failure)
2. Drop directory protection files (best-effort)
3. Truncate the staging file and write the header row
4. Append one row per record
5. Check both paths are writable
6. os.replace() staging onto the feed path

Any failure deletes the staging file and leaves the published feed alone.
Only one generation per feed may run at a time; callers serialize runs.
"""

from __future__ import annotations

import contextlib
import csv
import json
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from feedgen.core.result import Err, Ok, Result
from feedgen.feed.errors import (
    DirectoryCreateFailed,
    FeedWriteError,
    PublishRenameFailed,
    RowWriteFailed,
    SecretLookupFailed,
    StagingOpenFailed,
)
from feedgen.feed.secrets import SecretProvider, hash_secret
from feedgen.feed.spec import DEFAULT_DIRECTORY_TEMPLATE, FeedSpec
from feedgen.output.console import ConsoleProtocol
from feedgen.platform.files import write_if_absent

__all__ = [
    "CsvFeedFileWriter",
    "FeedPaths",
    "PROTECTION_FILES",
    "format_field",
    "project_record",
]

FILE_NAME = "{feed_name}_feed_{token}.csv"
STAGING_TOKEN_PREFIX = "temp_"

# Blocks directory listing and direct access when the feed directory is web-reachable.
PROTECTION_FILES: tuple[tuple[str, str], ...] = (
    ("index.html", ""),
    (".htaccess", "deny from all"),
)

Record = Mapping[str, object]


def _reason(exc: BaseException) -> str:
    return getattr(exc, "strerror", None) or str(exc) or type(exc).__name__


def format_field(value: object) -> object:
    """Convert a record value into something csv.writer can emit.

    Structured values become compact JSON text. None becomes an empty
    string and booleans become "1" / "" as in PHP's fputcsv. Other scalars
    are returned unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, (set, frozenset)):
        value = sorted(value, key=str)
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return value


def project_record(record: Record, header_fields: Iterable[str]) -> list[object]:
    """Project a record onto the header columns; missing keys render empty."""
    return [format_field(record.get(field)) for field in header_fields]


@dataclass(frozen=True, slots=True)
class FeedPaths:
    """Published and staging paths of one feed, derived from its secret."""

    feed: Path
    staging: Path


class CsvFeedFileWriter:
    """Writes one feed's CSV file using the stage-then-rename protocol."""

    def __init__(
        self,
        spec: FeedSpec,
        *,
        base_dir: Path,
        secrets: SecretProvider,
        console: ConsoleProtocol,
        directory_template: str = DEFAULT_DIRECTORY_TEMPLATE,
        hash_salt: str = "",
    ) -> None:
        self.spec = spec
        self.base_dir = base_dir
        self._secrets = secrets
        self._console = console
        self._directory_template = directory_template
        self._hash_salt = hash_salt

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def get_feed_directory(self) -> Path:
        return self.base_dir / self._directory_template.format(feed_name=self.spec.name)

    def _feed_name(self, secret: str) -> str:
        return FILE_NAME.format(feed_name=self.spec.name, token=secret)

    def _staging_name(self, secret: str) -> str:
        token = STAGING_TOKEN_PREFIX + hash_secret(secret, self._hash_salt)
        return FILE_NAME.format(feed_name=self.spec.name, token=token)

    def get_feed_path(self) -> Path:
        """Published path. Secret provider errors propagate."""
        secret = self._secrets.get_feed_secret(self.spec.name)
        return self.get_feed_directory() / self._feed_name(secret)

    def get_staging_path(self) -> Path:
        """Staging path. Secret provider errors propagate."""
        secret = self._secrets.get_feed_secret(self.spec.name)
        return self.get_feed_directory() / self._staging_name(secret)

    def resolve_paths(self) -> Result[FeedPaths, FeedWriteError]:
        """Look the secret up once and derive both paths from it."""
        try:
            secret = self._secrets.get_feed_secret(self.spec.name)
        except (OSError, ValueError, KeyError) as e:
            return Err(SecretLookupFailed(self.spec.name, _reason(e)))

        directory = self.get_feed_directory()
        return Ok(
            FeedPaths(
                feed=directory / self._feed_name(secret),
                staging=directory / self._staging_name(secret),
            )
        )

    # -------------------------------------------------------------------------
    # Publish protocol
    # -------------------------------------------------------------------------

    def write_feed_file(self, records: Iterable[Record]) -> Result[Path, FeedWriteError]:
        """Regenerate the feed from records and publish it atomically.

        Args:
            records: Mappings keyed by header field; may be empty

        Returns:
            Ok(feed_path) once published, Err(FeedWriteError) otherwise.
            On Err the staging file is gone and any previous feed file is
            untouched.
        """
        resolved = self.resolve_paths()
        if isinstance(resolved, Err):
            self._console.error(f"feed '{self.spec.name}': {resolved.error.message}")
            return resolved

        paths = resolved.value
        result = self._publish(paths, records)
        if isinstance(result, Err):
            self._console.error(f"feed '{self.spec.name}': {result.error.message}")
            self._discard_staging_file(paths.staging)
        return result

    def _publish(self, paths: FeedPaths, records: Iterable[Record]) -> Result[Path, FeedWriteError]:
        created = self.create_feed_directory()
        if isinstance(created, Err):
            return created

        self.protect_feed_directory()

        prepared = self.prepare_staging_file(paths.staging)
        if isinstance(prepared, Err):
            return prepared

        appended = self.append_records(paths.staging, records)
        if isinstance(appended, Err):
            return appended

        writable = self.verify_writable(paths)
        if isinstance(writable, Err):
            return writable

        return self.promote_staging_file(paths)

    def create_feed_directory(self) -> Result[Path, FeedWriteError]:
        directory = self.get_feed_directory()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(DirectoryCreateFailed(directory, _reason(e)))
        return Ok(directory)

    def protect_feed_directory(self) -> None:
        """Create the protection files that are missing.

        Existing files are never rewritten. Failures are ignored: the files
        only matter when the directory is served over HTTP.
        """
        directory = self.get_feed_directory()
        for name, content in PROTECTION_FILES:
            with contextlib.suppress(OSError):
                write_if_absent(directory / name, content)

    def prepare_staging_file(self, staging: Path) -> Result[Path, FeedWriteError]:
        """Truncate the staging file and write the header row."""
        try:
            handle = staging.open("w", encoding="utf-8", newline="")
        except OSError as e:
            return Err(StagingOpenFailed(staging, _reason(e)))

        try:
            with handle:
                csv.writer(handle, **self.spec.dialect_kwargs()).writerow(self.spec.header_fields)
        except (OSError, csv.Error) as e:
            return Err(RowWriteFailed(staging, _reason(e)))
        return Ok(staging)

    def append_records(self, staging: Path, records: Iterable[Record]) -> Result[int, FeedWriteError]:
        """Append one CSV row per record to the staging file.

        Returns:
            Ok(number of rows written). The first failing row aborts the
            whole append; rows already written are not rolled back here.
        """
        try:
            handle = staging.open("a", encoding="utf-8", newline="")
        except OSError as e:
            return Err(StagingOpenFailed(staging, _reason(e)))

        written = 0
        try:
            with handle:
                writer = csv.writer(handle, **self.spec.dialect_kwargs())
                for record in records:
                    writer.writerow(project_record(record, self.spec.header_fields))
                    written += 1
        except (OSError, csv.Error, ValueError) as e:
            return Err(RowWriteFailed(staging, _reason(e), row_index=written))
        return Ok(written)

    def verify_writable(self, paths: FeedPaths) -> Result[None, FeedWriteError]:
        if not os.access(paths.staging, os.W_OK):
            return Err(StagingOpenFailed(paths.staging, "staging file is not writable"))

        if paths.feed.exists() and not os.access(paths.feed, os.W_OK):
            return Err(PublishRenameFailed(paths.feed, "feed file is not writable"))
        return Ok(None)

    def promote_staging_file(self, paths: FeedPaths) -> Result[Path, FeedWriteError]:
        """Atomically replace the published feed with the staging file."""
        try:
            os.replace(paths.staging, paths.feed)
        except OSError as e:
            reason = f"rename from {paths.staging.name} failed: {_reason(e)}"
            return Err(PublishRenameFailed(paths.feed, reason))
        return Ok(paths.feed)

    def _discard_staging_file(self, staging: Path) -> None:
        if not staging.is_file():
            return
        try:
            staging.unlink()
        except OSError as e:
            self._console.warning(
                f"feed '{self.spec.name}': could not remove staging file {staging}: {_reason(e)}"
            )
