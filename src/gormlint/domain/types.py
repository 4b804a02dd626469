"""Severity and key-classification enums.

``KeyClass`` is the tagged classification stored in the vocabulary table
(see :mod:`gormlint.domain.vocabulary`).
"""

from __future__ import annotations

from enum import StrEnum


class Severity(StrEnum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


class KeyClass(StrEnum):
    """Classification tier of a GORM tag key."""

    RECOMMENDED = "recommended"
    CAUTION = "caution"  # valid relationship keys, use with care
    DEPRECATED = "deprecated"
    UNKNOWN = "unknown"

    @property
    def valid(self) -> bool:
        return self is not KeyClass.UNKNOWN

    @property
    def recommended(self) -> bool:
        return self is KeyClass.RECOMMENDED
