"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``GORMLINT_*`` prefix
  3. TOML file    — ``gormlint.toml`` found by walking up to the Go module root
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from gormlint.config.discovery import find_config, find_module_root, read_toml
from gormlint.config.models import LintConfig, PluginsConfig, ReportConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``gormlint.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class GormlintSettings(BaseSettings):
    """Unified settings for the gormlint CLI.

    Stored in ``click.Context.obj`` at the CLI root level.

    Attributes:
        project_root: Parent of ``gormlint.toml``, or CWD if no config found.
        config_path: The config file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GORMLINT_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    lint: LintConfig = Field(default_factory=LintConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        max_problems: int | None = None,
        min_severity: str | None = None,
        plugins_enabled: bool | None = None,
        **cli_flags: Any,
    ) -> GormlintSettings:
        """Construct settings from a CLI invocation.

        Discovers the config file (or uses *config_path*) and layers CLI
        flags on top.  ``None`` lint and plugin overrides leave the file and
        env values alone.  Without an explicit *project_root* the root is
        the config file's directory, else the Go module root, else the CWD.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            if toml_path is not None:
                resolved_root = toml_path.resolve().parent
            else:
                resolved_root = find_module_root() or Path.cwd()

        sections = _section_overrides(
            max_problems=max_problems,
            min_severity=min_severity,
            plugins_enabled=plugins_enabled,
        )

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **sections,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None


def _section_overrides(
    *,
    max_problems: int | None,
    min_severity: str | None,
    plugins_enabled: bool | None,
) -> dict[str, dict[str, Any]]:
    """Nested ``{"lint": {...}, "plugins": {...}}`` for the flags that were given.

    Sources are deep-merged, so a partial section keeps the other keys from
    the TOML file and env vars.
    """
    sections: dict[str, dict[str, Any]] = {}
    lint = {
        k: v
        for k, v in (("max_problems", max_problems), ("min_severity", min_severity))
        if v is not None
    }
    if lint:
        sections["lint"] = lint
    if plugins_enabled is not None:
        sections["plugins"] = {"enabled": plugins_enabled}
    return sections
