"""gormlint command line entry point.

Global options shape every subcommand: output mode, logging, config lookup,
and the lint defaults (problem cap, severity floor, plugin loading) that
``gormlint.toml`` would otherwise supply.
"""

from __future__ import annotations

from pathlib import Path

import click

from gormlint import __version__
from gormlint.commands import register_commands
from gormlint.commands._context import AppContext
from gormlint.config.settings import GormlintSettings

_EPILOG = (
    "Settings resolve as: these options, GORMLINT_* env vars, gormlint.toml "
    "(searched up to the go.mod directory), built-in defaults."
)


@click.group(invoke_without_command=True, epilog=_EPILOG)
@click.version_option(version=__version__, prog_name="gormlint")
@click.option("--json", "json_output", is_flag=True, help="Machine-readable JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="One line per problem, nothing else.")
@click.option("-v", "--verbose", is_flag=True, help="Tag text, timings and debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Use this gormlint.toml instead of searching for one.",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding local plugins and the config search start.",
)
@click.option(
    "--max-problems",
    type=click.IntRange(min=1),
    default=None,
    help="Default problem cap for every command ([lint] max_problems).",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default=None,
    help="Default severity floor ([lint] min_severity).",
)
@click.option(
    "--plugins/--no-plugins",
    "plugins_enabled",
    default=None,
    help="Load or skip tag-key and value-rule plugins ([plugins] enabled).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_root: Path | None,
    max_problems: int | None,
    min_severity: str | None,
    plugins_enabled: bool | None,
) -> None:
    """gormlint: find mistakes in GORM struct tags before GORM does."""
    settings = GormlintSettings.from_cli(
        config_path=config_path,
        project_root=project_root.resolve() if project_root else None,
        max_problems=max_problems,
        min_severity=min_severity,
        plugins_enabled=plugins_enabled,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
