"""Command: editor-ready diagnostics for one Go file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from gormlint.commands._base import LintCommand, read_source

if TYPE_CHECKING:
    from gormlint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  gormlint report models/user.go
  gormlint --json report models/user.go --uri file:///src/models/user.go
  gormlint --json report - < user.go""",
)
@click.argument("file")
@click.option("--uri", default=None, help="Document URI (default: file URI of FILE).")
@click.option(
    "--max-problems",
    type=click.IntRange(min=1),
    default=None,
    help="Cap on diagnostics (default from [lint] max_problems).",
)
@click.pass_obj
def report(app: AppContext, file: str, uri: str | None, max_problems: int | None) -> None:
    """Report diagnostics with ranges, severities and codes for FILE."""
    text = read_source(file)
    if uri is None:
        uri = "untitled:stdin" if file == "-" else Path(file).resolve().as_uri()
    app.emit(app.service.report(text, uri=uri, max_problems=max_problems))
