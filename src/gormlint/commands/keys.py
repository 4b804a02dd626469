"""Command: list the GORM tag keys gormlint knows about."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gormlint.commands._base import LintCommand

if TYPE_CHECKING:
    from gormlint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  gormlint keys
  gormlint keys --kind deprecated
  gormlint --json keys --kind caution""",
)
@click.option(
    "--kind",
    type=click.Choice(["recommended", "caution", "deprecated", "unknown"]),
    default=None,
    help="Only list keys of this classification.",
)
@click.pass_obj
def keys(app: AppContext, kind: str | None) -> None:
    """List tag keys by classification."""
    app.emit(app.service.keys(kind))
