"""Feed secret providers.

Feed file names embed a per-feed secret so the published URL cannot be
guessed. The writer only asks a provider for the secret; providers decide
where secrets live and whether they may be generated.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from feedgen.core.structured import as_str_dict
from feedgen.platform.files import atomic_write_text

__all__ = [
    "SecretProvider",
    "StaticSecretProvider",
    "FileSecretProvider",
    "hash_secret",
]


@runtime_checkable
class SecretProvider(Protocol):
    """Supplies a stable secret string for a feed name."""

    def get_feed_secret(self, feed_name: str) -> str: ...


class StaticSecretProvider:
    """Secrets from a fixed mapping. Unknown feeds raise KeyError."""

    def __init__(self, secrets_by_feed: Mapping[str, str]) -> None:
        self._secrets = dict(secrets_by_feed)

    def get_feed_secret(self, feed_name: str) -> str:
        return self._secrets[feed_name]


class FileSecretProvider:
    """Secrets persisted in a JSON object, generated on first use.

    The file maps feed name to secret. A feed without an entry gets a new
    random secret which is written back immediately, so later calls (and
    later processes) derive the same file names.
    """

    def __init__(self, path: Path, *, token_bytes: int = 16) -> None:
        self.path = path
        self._token_bytes = token_bytes

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = as_str_dict(json.loads(self.path.read_text(encoding="utf-8")))
        except json.JSONDecodeError as e:
            raise ValueError(f"corrupted secrets file {self.path}: {e}") from e
        if data is None:
            raise ValueError(f"secrets file {self.path} must contain a JSON object")
        return {k: v for k, v in data.items() if isinstance(v, str) and v}

    def get_feed_secret(self, feed_name: str) -> str:
        stored = self._load()
        secret = stored.get(feed_name)
        if secret:
            return secret

        secret = secrets.token_hex(self._token_bytes)
        stored[feed_name] = secret
        atomic_write_text(self.path, json.dumps(stored, indent=2, sort_keys=True) + "\n")
        return secret


def hash_secret(secret: str, salt: str = "") -> str:
    """Keyed hash of a secret, used to name staging files."""
    return hmac.new(salt.encode("utf-8"), secret.encode("utf-8"), hashlib.sha256).hexdigest()
