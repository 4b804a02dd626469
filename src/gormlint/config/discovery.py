"""Locate gormlint.toml and the Go module it governs.

Lookup walks up from the starting directory but never leaves the Go module:
the directory holding ``go.mod`` is the last one searched, so a module
vendored inside another project does not pick up the outer project's rules.
``GORMLINT_CONFIG`` short-circuits the walk.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import click

from gormlint.config.models import GormlintConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("gormlint.toml", ".gormlint.toml")
CONFIG_ENV_VAR = "GORMLINT_CONFIG"
GO_MODULE_FILE = "go.mod"


def _ancestors(start: Path | None) -> list[Path]:
    here = (start or Path.cwd()).resolve()
    return [here, *here.parents]


def find_module_root(start: Path | None = None) -> Path | None:
    """Nearest directory at or above *start* that contains ``go.mod``."""
    for directory in _ancestors(start):
        if (directory / GO_MODULE_FILE).is_file():
            return directory
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Config file in effect for *start* (default: cwd), or None.

    ``GORMLINT_CONFIG`` wins when set; a missing file there is logged and
    treated as no config.  Otherwise each directory up to the module root is
    checked for ``gormlint.toml`` then ``.gormlint.toml``.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        if candidate.is_file():
            return candidate
        logger.warning("%s points to a missing file: %s", CONFIG_ENV_VAR, env_path)
        return None

    for directory in _ancestors(start):
        for name in CONFIG_FILENAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        if (directory / GO_MODULE_FILE).is_file():
            break
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; a syntax error becomes a ClickException naming the file."""
    raw = path.read_text(encoding="utf-8")
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> GormlintConfig:
    """Validated config from *path*, or from discovery under *cwd*.

    Built-in defaults when no file applies.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return GormlintConfig()
    return GormlintConfig.model_validate(read_toml(path))
