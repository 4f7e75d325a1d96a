"""Tests for ``objmap map``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from objmap.cli import cli


def _map_args(profile: Path, document: Path, *extra: str) -> list[str]:
    return ["map", str(profile), str(document), "--from", "Customer", "--into", "CustomerView", *extra]


@pytest.mark.usefixtures("_isolated_cwd")
class TestMapCommand:
    def test_prints_mapped_document(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, _map_args(profile_path, document_path))
        assert result.exit_code == 0
        mapped = json.loads(result.stdout)
        assert mapped["display_name"] == "Ada"
        assert mapped["tags"] == "math, engines"
        assert mapped["order_count"] == 2

    def test_gaps_are_warnings_on_stderr(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, _map_args(profile_path, document_path))
        assert "WARNING: CustomerView.nickname [missing_source_property]" in result.stderr
        assert "WARNING" not in result.stdout

    def test_quiet_suppresses_warnings(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["-q", *_map_args(profile_path, document_path)])
        assert result.exit_code == 0
        assert result.stderr == ""

    def test_json_envelope(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["--json", *_map_args(profile_path, document_path)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "map"
        assert data["data"]["result"]["display_name"] == "Ada"
        assert data["meta"] == {"gap_count": 1}

    def test_strict_fails(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, _map_args(profile_path, document_path, "--strict"))
        assert result.exit_code == 1
        assert "ERROR: map [INCOMPLETE]" in result.stderr
        assert result.stdout == ""

    def test_strict_from_config(
        self, cli_runner: CliRunner, tmp_path: Path, profile_path: Path, document_path: Path
    ) -> None:
        (tmp_path / "objmap.toml").write_text("[mapper]\nstrict = true\n", encoding="utf-8")
        strict = cli_runner.invoke(cli, _map_args(profile_path, document_path))
        assert strict.exit_code == 1
        lenient = cli_runner.invoke(cli, _map_args(profile_path, document_path, "--lenient"))
        assert lenient.exit_code == 0

    def test_unknown_type(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(
            cli, ["map", str(profile_path), str(document_path), "-f", "Customer", "-i", "Ghost"]
        )
        assert result.exit_code == 1
        assert "UNKNOWN_TYPE" in result.stderr

    def test_missing_document(
        self, cli_runner: CliRunner, tmp_path: Path, profile_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, _map_args(profile_path, tmp_path / "none.json"))
        assert result.exit_code == 1
        assert "Document not found" in result.stderr

    def test_requires_types(
        self, cli_runner: CliRunner, profile_path: Path, document_path: Path
    ) -> None:
        result = cli_runner.invoke(cli, ["map", str(profile_path), str(document_path)])
        assert result.exit_code == 2

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["map", "--examples"])
        assert result.exit_code == 0
        assert "objmap map views.toml customer.json" in result.output
