"""Pluggy hook specifications for gormlint.

Two setup-time hooks let plugins extend the tag vocabulary and the value
rules; one lint-time hook reports each linted document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from gormlint.domain.rules.values import ValueRule

PROJECT_NAME = "gormlint"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class GormlintHookSpec:
    """Hook specifications for the gormlint plugin system."""

    @hookspec
    def register_tag_keys(self) -> dict[str, str] | None:
        """Return ``key -> classification`` pairs to add to the vocabulary.

        Classification is one of ``recommended``, ``caution`` or ``deprecated``.
        """

    @hookspec
    def register_value_rules(self) -> dict[str, ValueRule] | None:
        """Return ``key -> rule`` pairs for keys without a built-in value rule."""

    @hookspec
    def post_lint(
        self,
        path: str,
        error_count: int,
        warning_count: int,
    ) -> None:
        """Called after each document is linted."""
