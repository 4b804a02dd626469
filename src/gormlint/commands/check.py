"""Command: lint GORM struct tags in Go files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gormlint.commands._base import LintCommand, read_source

if TYPE_CHECKING:
    from gormlint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  gormlint check models/user.go
  gormlint check ./internal --errors-only
  gormlint check . --max-problems 50
  cat user.go | gormlint check -
  gormlint --json check models/""",
)
@click.argument("paths", nargs=-1, required=True)
@click.option(
    "--max-problems",
    type=click.IntRange(min=1),
    default=None,
    help="Stop reporting after N problems (default from [lint] max_problems).",
)
@click.option(
    "--min-severity",
    type=click.Choice(["warning", "error"]),
    default=None,
    help="Hide problems below this severity.",
)
@click.option("--errors-only", is_flag=True, help="Shortcut for --min-severity error.")
@click.pass_obj
def check(
    app: AppContext,
    paths: tuple[str, ...],
    max_problems: int | None,
    min_severity: str | None,
    errors_only: bool,
) -> None:
    """Check GORM tags in Go files and directories (``-`` reads stdin)."""
    threshold = "error" if errors_only else min_severity
    if paths == ("-",):
        result = app.service.lint_text(
            read_source("-"), max_problems=max_problems, min_severity=threshold
        )
    else:
        result = app.service.lint_paths(
            list(paths), max_problems=max_problems, min_severity=threshold
        )
    app.emit(result)
