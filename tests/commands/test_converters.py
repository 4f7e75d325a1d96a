"""Tests for ``objmap converters``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from objmap.cli import cli


@pytest.mark.usefixtures("_isolated_cwd")
class TestConvertersCommand:
    def test_lists_builtins(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["converters"])
        assert result.exit_code == 0
        assert "converters: count, join" in result.stdout
        assert "resolvers: -" in result.stdout

    def test_verbose_lists_plugins(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-v", "converters"])
        assert "plugins: builtin-converters" in result.stdout

    def test_json(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "converters"])
        data = json.loads(result.stdout)
        assert data["data"]["converters"] == ["count", "join"]

    def test_disabled_builtins(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "objmap.toml").write_text(
            '[plugins]\ndisabled = ["builtin-converters"]\n', encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["--json", "converters"])
        assert json.loads(result.stdout)["data"]["converters"] == []

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["converters", "--examples"])
        assert result.exit_code == 0
        assert "objmap --json converters" in result.output
