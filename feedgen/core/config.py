"""Typed configuration loading and access.

Configuration lives in a TOML file (``feedgen.toml`` by default):

    [storage]
    base_dir = "uploads"
    directory_template = "feeds/{feed_name}"
    secrets_file = ".feedgen/secrets.json"
    hash_salt = ""

    [feeds.products]
    header = ["id", "title", "price"]
    delimiter = ","

Relative paths are resolved against the directory holding the config file.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from feedgen.feed.spec import (
    DEFAULT_DELIMITER,
    DEFAULT_DIRECTORY_TEMPLATE,
    DEFAULT_ESCAPE_CHAR,
    DEFAULT_QUOTE_CHAR,
    FeedSpec,
)

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_char, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "StorageConfig",
    "DEFAULT_CONFIG_NAME",
    "load_config",
    "load_config_or_default",
]

DEFAULT_CONFIG_NAME = "feedgen.toml"
DEFAULT_BASE_DIR = "uploads"
DEFAULT_SECRETS_FILE = ".feedgen/secrets.json"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Where feeds and their secrets are stored."""

    base_dir: Path = Path(DEFAULT_BASE_DIR)
    directory_template: str = DEFAULT_DIRECTORY_TEMPLATE
    secrets_file: Path = Path(DEFAULT_SECRETS_FILE)
    hash_salt: str = ""


def _empty_feeds() -> dict[str, FeedSpec]:
    return {}


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    feeds: dict[str, FeedSpec] = field(default_factory=_empty_feeds)

    def feed(self, name: str) -> FeedSpec | None:
        return self.feeds.get(name)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, root: Path) -> Config:
        """Create Config from parsed TOML.

        Raises:
            ValueError: A feed definition or the directory template is invalid.
        """
        storage: StrDict = get_table(data, "storage") or {}
        feeds: StrDict = get_table(data, "feeds") or {}

        template = get_str(storage, "directory_template") or DEFAULT_DIRECTORY_TEMPLATE
        if "{feed_name}" not in template:
            raise ValueError("storage.directory_template must contain '{feed_name}'")
        try:
            template.format(feed_name="x")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"storage.directory_template may only use {{feed_name}}: {template!r} ({e})"
            ) from e

        return cls(
            storage=StorageConfig(
                base_dir=root / (get_str(storage, "base_dir") or DEFAULT_BASE_DIR),
                directory_template=template,
                secrets_file=root / (get_str(storage, "secrets_file") or DEFAULT_SECRETS_FILE),
                hash_salt=get_char(storage, "hash_salt") or "",
            ),
            feeds={name: _parse_feed(name, feeds.get(name)) for name in feeds},
        )


def _parse_feed(name: str, raw: object) -> FeedSpec:
    table = as_str_dict(raw)
    if table is None:
        raise ValueError(f"feeds.{name} must be a table")

    delimiter = get_char(table, "delimiter") or DEFAULT_DELIMITER
    quote_char = get_char(table, "quote_char") or DEFAULT_QUOTE_CHAR
    escape_char = get_char(table, "escape_char") or DEFAULT_ESCAPE_CHAR

    header = get_str_list(table, "header")
    if header is not None:
        return FeedSpec(
            name=name,
            header_fields=tuple(header),
            delimiter=delimiter,
            quote_char=quote_char,
            escape_char=escape_char,
        )

    header_row = get_str(table, "header_row")
    if header_row is not None:
        return FeedSpec.from_header_row(
            name,
            header_row,
            delimiter=delimiter,
            quote_char=quote_char,
            escape_char=escape_char,
        )

    raise ValueError(f"feeds.{name} needs 'header' (list of strings) or 'header_row'")


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data = as_str_dict(tomllib.loads(path.read_bytes().decode("utf-8")))
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value, root=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config: {e}", path=path))


def load_config_or_default(path: Path) -> Config:
    """Load config from file, or return defaults rooted next to it."""
    result = load_config(path)
    if isinstance(result, Ok):
        return result.value
    return Config.from_dict({}, root=path.parent)
