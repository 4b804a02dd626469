"""Shared pytest fixtures and Go source samples for gormlint tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

USER_MODEL = """\
package models

import "time"

// User is a GORM model.
type User struct {
	ID        uint      `gorm:"primaryKey" json:"id"`
	Email     string    `gorm:"uniqueIndex:idx_email;size:255"`
	Name      string    `gorm:"size:abc"`
	CreatedAt time.Time `gorm:"autoCreateTime"`
}
"""

CLEAN_MODEL = """\
package models

type Product struct {
	ID    uint   `gorm:"primaryKey"`
	Code  string `gorm:"size:32;uniqueIndex"`
	Price uint
}
"""

PLAIN_STRUCT = """\
package dto

type Request struct {
	Name string `json:"name"`
	Age  int
}
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory as CWD, with no config or plugins discovered."""
    monkeypatch.delenv("GORMLINT_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def go_file(project_root: Path) -> Path:
    """A Go file with one error-bearing model."""
    path = project_root / "user.go"
    path.write_text(USER_MODEL, encoding="utf-8")
    return path


@pytest.fixture
def clean_go_file(project_root: Path) -> Path:
    path = project_root / "product.go"
    path.write_text(CLEAN_MODEL, encoding="utf-8")
    return path
