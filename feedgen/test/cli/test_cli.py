from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from feedgen import __version__
from feedgen.cli.app import app
from feedgen.cli.context import CONFIG_ENV_VAR, CLIContext
from feedgen.core.config import Config
from feedgen.core.errors import ErrorCode
from feedgen.feed.secrets import FileSecretProvider, SecretProvider, StaticSecretProvider
from feedgen.feed.spec import FeedSpec
from feedgen.output.console import MockConsole

CONFIG = """
[storage]
base_dir = "uploads"

[feeds.products]
header = ["id", "title"]
"""


def _ctx(
    tmp_path: Path,
    *,
    base_dir: Path | None = None,
    secrets: SecretProvider | None = None,
) -> CLIContext:
    config = Config.from_dict({}, root=tmp_path)
    storage = config.storage
    if base_dir is not None:
        storage = replace(storage, base_dir=base_dir)
    return CLIContext(
        config_path=tmp_path / "feedgen.toml",
        config=Config(
            storage=storage,
            feeds={"products": FeedSpec(name="products", header_fields=("id", "title"))},
        ),
        secrets=secrets or StaticSecretProvider({"products": "s3cret"}),
        console=MockConsole(),
    )


def _records(tmp_path: Path, records: list[dict[str, object]]) -> Path:
    path = tmp_path / "records.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


class TestWriteCommand:
    def test_writes_feed(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import feedgen.cli.commands.write as write_cmd

        ctx = _ctx(tmp_path)
        monkeypatch.setattr(write_cmd, "build_context", lambda: ctx)

        write_cmd.write(feed="products", input_=_records(tmp_path, [{"id": 1, "title": "Mug"}]))

        feed = tmp_path / "uploads" / "feeds" / "products" / "products_feed_s3cret.csv"
        assert feed.read_text(encoding="utf-8") == "id,title\n1,Mug\n"
        assert isinstance(ctx.console, MockConsole)
        assert ctx.console.find("wrote 1 records")

    def test_unknown_feed_exits_user_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import feedgen.cli.commands.write as write_cmd

        monkeypatch.setattr(write_cmd, "build_context", lambda: _ctx(tmp_path))

        with pytest.raises(typer.Exit) as exc:
            write_cmd.write(feed="missing", input_=_records(tmp_path, []))

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_bad_input_exits_user_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import feedgen.cli.commands.write as write_cmd

        monkeypatch.setattr(write_cmd, "build_context", lambda: _ctx(tmp_path))

        with pytest.raises(typer.Exit) as exc:
            write_cmd.write(feed="products", input_=tmp_path / "nope.json")

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)

    def test_directory_failure_exits_env_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import feedgen.cli.commands.write as write_cmd

        blocker = tmp_path / "blocked"
        blocker.write_text("file", encoding="utf-8")
        ctx = _ctx(tmp_path, base_dir=blocker)
        monkeypatch.setattr(write_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            write_cmd.write(feed="products", input_=_records(tmp_path, [{"id": 1}]))

        assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
        assert isinstance(ctx.console, MockConsole)
        assert ctx.console.has_error()

    def test_unusable_secrets_file_exits_env_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import feedgen.cli.commands.write as write_cmd

        blocker = tmp_path / "blocker"
        blocker.write_text("file", encoding="utf-8")
        ctx = _ctx(tmp_path, secrets=FileSecretProvider(blocker / "secrets.json"))
        monkeypatch.setattr(write_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            write_cmd.write(feed="products", input_=_records(tmp_path, [{"id": 1}]))

        assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
        assert isinstance(ctx.console, MockConsole)
        assert ctx.console.find("storage.secrets_file")


class TestPathCommand:
    def test_prints_staging_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        import feedgen.cli.commands.path as path_cmd

        monkeypatch.setattr(path_cmd, "build_context", lambda: _ctx(tmp_path))

        path_cmd.path(feed="products", staging=True)

        printed = Path(capsys.readouterr().out.strip())
        assert printed.name.startswith("products_feed_temp_")

    def test_unusable_secrets_file_exits_env_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import feedgen.cli.commands.path as path_cmd

        blocker = tmp_path / "blocker"
        blocker.write_text("file", encoding="utf-8")
        ctx = _ctx(tmp_path, secrets=FileSecretProvider(blocker / "secrets.json"))
        monkeypatch.setattr(path_cmd, "build_context", lambda: ctx)

        with pytest.raises(typer.Exit) as exc:
            path_cmd.path(feed="products", staging=False)

        assert exc.value.exit_code == int(ErrorCode.ENV_ERROR)
        assert isinstance(ctx.console, MockConsole)
        assert ctx.console.has_error()


class TestRunner:
    def test_version(self) -> None:
        result = CliRunner().invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_path_then_write(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "feedgen.toml"
        config.write_text(CONFIG, encoding="utf-8")
        # The --config callback exports the env var; monkeypatch restores it.
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        runner = CliRunner()

        path_result = runner.invoke(app, ["--config", str(config), "path", "products"])
        assert path_result.exit_code == 0
        feed_path = Path(path_result.stdout.strip())
        assert feed_path.parent == tmp_path.resolve() / "uploads" / "feeds" / "products"
        assert feed_path.name.startswith("products_feed_")

        records = _records(tmp_path, [{"id": 7, "title": "Lamp"}])
        write_result = runner.invoke(app, ["write", "products", "--input", str(records)])
        assert write_result.exit_code == 0
        assert feed_path.read_text(encoding="utf-8") == "id,title\n7,Lamp\n"

    def test_missing_config_exits_env_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.toml"))

        result = CliRunner().invoke(app, ["feeds"])

        assert result.exit_code == int(ErrorCode.ENV_ERROR)
