"""Command: show where a struct field (or one of its tag keys) is declared."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from gormlint.commands._base import LintCommand, read_source

if TYPE_CHECKING:
    from gormlint.commands._context import AppContext


@click.command(
    cls=LintCommand,
    examples="""\
  gormlint locate models/user.go User Email
  gormlint locate models/user.go User Email --key uniqueIndex
  gormlint --json locate - User ID < user.go""",
)
@click.argument("file")
@click.argument("struct_name", metavar="STRUCT")
@click.argument("field_name", metavar="FIELD")
@click.option("--key", default=None, help="Tag key to highlight inside the gorm tag.")
@click.pass_obj
def locate(app: AppContext, file: str, struct_name: str, field_name: str, key: str | None) -> None:
    """Resolve the source range of STRUCT.FIELD in FILE (zero-based)."""
    app.emit(app.service.locate(read_source(file), struct_name, field_name, key))
