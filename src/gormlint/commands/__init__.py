"""Subcommand modules for gormlint.

register_commands() uses deferred imports so ``gormlint --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from gormlint.commands.check import check
    from gormlint.commands.keys import keys
    from gormlint.commands.locate import locate
    from gormlint.commands.report import report

    cli.add_command(check)
    cli.add_command(locate)
    cli.add_command(report)
    cli.add_command(keys)
