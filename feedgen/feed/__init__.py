"""Feed definitions, secrets and the atomic CSV writer."""

from .errors import (
    DirectoryCreateFailed,
    FeedWriteError,
    PublishRenameFailed,
    RowWriteFailed,
    SecretLookupFailed,
    StagingOpenFailed,
)
from .secrets import FileSecretProvider, SecretProvider, StaticSecretProvider, hash_secret
from .spec import FeedSpec
from .writer import CsvFeedFileWriter, FeedPaths

__all__ = [
    "CsvFeedFileWriter",
    "DirectoryCreateFailed",
    "FeedPaths",
    "FeedSpec",
    "FeedWriteError",
    "FileSecretProvider",
    "PublishRenameFailed",
    "RowWriteFailed",
    "SecretLookupFailed",
    "SecretProvider",
    "StagingOpenFailed",
    "StaticSecretProvider",
    "hash_secret",
]
