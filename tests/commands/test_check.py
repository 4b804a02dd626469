"""Tests for the check command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from gormlint.cli import cli
from tests.conftest import USER_MODEL


class TestCheckCommand:
    def test_file_with_errors_exits_zero(self, cli_runner: CliRunner, go_file: Path) -> None:
        result = cli_runner.invoke(cli, ["check", str(go_file)])
        assert result.exit_code == 0
        assert "Invalid size value 'abc'" in result.output
        assert "1 errors, 0 warnings" in result.output

    def test_clean_file(self, cli_runner: CliRunner, clean_go_file: Path) -> None:
        result = cli_runner.invoke(cli, ["check", str(clean_go_file)])
        assert result.exit_code == 0
        assert "No GORM tag problems found" in result.output

    def test_json_output(self, cli_runner: CliRunner, go_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", str(go_file)])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["op"] == "lint"
        assert data["data"]["healthy"] is False
        assert data["data"]["diagnostics"][0]["field_name"] == "Name"

    def test_directory(self, cli_runner: CliRunner, go_file: Path, clean_go_file: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "."])
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert sorted(Path(f).name for f in data["files"]) == ["product.go", "user.go"]

    def test_stdin(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "check", "-"], input=USER_MODEL)
        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["files"] == ["<stdin>"]
        assert data["error_count"] == 1

    def test_errors_only(self, cli_runner: CliRunner, project_root: Path) -> None:
        text = 'type T struct {\n\tID uint `gorm:"primary_key"`\n}\n'
        result = cli_runner.invoke(cli, ["--json", "check", "--errors-only", "-"], input=text)
        assert json.loads(result.output)["data"]["count"] == 0

    def test_max_problems(self, cli_runner: CliRunner, project_root: Path) -> None:
        text = 'type T struct {\n\tA int `gorm:"size:x;precision:y"`\n}\n'
        result = cli_runner.invoke(
            cli, ["--json", "check", "--max-problems", "1", "-"], input=text
        )
        data = json.loads(result.output)["data"]
        assert data["count"] == 1
        assert data["truncated"] is True

    def test_quiet(self, cli_runner: CliRunner, go_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "check", str(go_file)])
        assert result.exit_code == 0
        assert result.output.strip().endswith(
            "User.Name: error: Invalid size value 'abc'. Size must be a positive integer."
        )

    def test_missing_path_fails(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["check", "nope.go"])
        assert result.exit_code == 1
        assert "No Go files found to lint" in result.output

    def test_config_file_applies(self, cli_runner: CliRunner, go_file: Path) -> None:
        (go_file.parent / "gormlint.toml").write_text('[lint]\nmin_severity = "error"\n')
        text = 'type T struct {\n\tID uint `gorm:"primary_key"`\n}\n'
        result = cli_runner.invoke(cli, ["--json", "check", "-"], input=text)
        assert json.loads(result.output)["data"]["count"] == 0

    def test_requires_paths(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 2


class TestGlobalLintOptions:
    def test_global_min_severity(self, cli_runner: CliRunner, project_root: Path) -> None:
        text = 'type T struct {\n\tID uint `gorm:"primary_key"`\n}\n'
        result = cli_runner.invoke(
            cli, ["--json", "--min-severity", "error", "check", "-"], input=text
        )
        assert json.loads(result.output)["data"]["count"] == 0

    def test_global_max_problems(self, cli_runner: CliRunner, project_root: Path) -> None:
        text = 'type T struct {\n\tA int `gorm:"size:x;precision:y"`\n}\n'
        result = cli_runner.invoke(
            cli, ["--json", "--max-problems", "1", "check", "-"], input=text
        )
        data = json.loads(result.output)["data"]
        assert data["count"] == 1
        assert data["truncated"] is True

    def test_command_option_beats_global(self, cli_runner: CliRunner, project_root: Path) -> None:
        text = 'type T struct {\n\tA int `gorm:"size:x;precision:y"`\n}\n'
        result = cli_runner.invoke(
            cli,
            ["--json", "--max-problems", "1", "check", "--max-problems", "5", "-"],
            input=text,
        )
        assert json.loads(result.output)["data"]["count"] == 2

    def test_global_option_beats_config(self, cli_runner: CliRunner, go_file: Path) -> None:
        (go_file.parent / "gormlint.toml").write_text('[lint]\nmin_severity = "error"\n')
        text = 'type T struct {\n\tID uint `gorm:"primary_key"`\n}\n'
        result = cli_runner.invoke(
            cli, ["--json", "--min-severity", "warning", "check", "-"], input=text
        )
        assert json.loads(result.output)["data"]["count"] == 1

    def test_invalid_global_max_problems(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--max-problems", "0", "check", "-"], input="")
        assert result.exit_code == 2
