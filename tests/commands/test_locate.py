"""Tests for the locate command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from gormlint.cli import cli


class TestLocateCommand:
    def test_key(self, cli_runner: CliRunner, go_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "locate", str(go_file), "User", "Name", "--key", "size"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["text"] == "size"
        assert data["range"]["start"]["line"] == 8

    def test_field_human(self, cli_runner: CliRunner, go_file: Path) -> None:
        result = cli_runner.invoke(cli, ["locate", str(go_file), "User", "Email"])
        assert result.exit_code == 0
        text_line = next(line for line in result.output.splitlines() if "text:" in line)
        assert text_line.split() == ["text:", "Email"]

    def test_unreadable_file(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["locate", "missing.go", "User", "ID"])
        assert result.exit_code == 1
        assert "Failed to read missing.go" in result.output
