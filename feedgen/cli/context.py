from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from feedgen.core.config import DEFAULT_CONFIG_NAME, Config, load_config
from feedgen.core.errors import ErrorCode
from feedgen.core.result import Err
from feedgen.feed.secrets import FileSecretProvider, SecretProvider
from feedgen.feed.writer import CsvFeedFileWriter
from feedgen.output.console import ConsoleProtocol, RichConsole

CONFIG_ENV_VAR = "FEEDGEN_CONFIG"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config_path: Path
    config: Config
    secrets: SecretProvider
    console: ConsoleProtocol

    def writer_for(self, feed_name: str) -> CsvFeedFileWriter | None:
        spec = self.config.feed(feed_name)
        if spec is None:
            return None
        storage = self.config.storage
        return CsvFeedFileWriter(
            spec,
            base_dir=storage.base_dir,
            secrets=self.secrets,
            console=self.console,
            directory_template=storage.directory_template,
            hash_salt=storage.hash_salt,
        )


def config_path_from_env() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.cwd() / DEFAULT_CONFIG_NAME


def build_context() -> CLIContext:
    config_path = config_path_from_env()
    config_result = load_config(config_path)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    config = config_result.value
    return CLIContext(
        config_path=config_path,
        config=config,
        secrets=FileSecretProvider(config.storage.secrets_file),
        console=RichConsole(),
    )
