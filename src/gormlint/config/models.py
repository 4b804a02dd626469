"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, gormlint.toml only contains
overrides.  A project needs no config file at all.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_MAX_PROBLEMS = 1000


class LintConfig(BaseModel):
    """[lint] section."""

    model_config = {"frozen": True}

    max_problems: int = Field(default=DEFAULT_MAX_PROBLEMS, ge=1)
    min_severity: Literal["warning", "error"] = "warning"
    include: list[str] = Field(default_factory=lambda: ["*.go"])
    exclude_dirs: list[str] = Field(default_factory=lambda: ["vendor", ".git", "node_modules"])


class ReportConfig(BaseModel):
    """[report] section — editor-facing diagnostics."""

    model_config = {"frozen": True}

    source: str = "GORM Tool"
    related_information: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".gormlint/plugins"


class GormlintConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    lint: LintConfig = Field(default_factory=LintConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
