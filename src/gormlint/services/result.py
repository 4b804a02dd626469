"""ServiceResult: what every LintService operation hands back to the CLI.

``ok`` reports whether the operation ran, not whether the Go code is clean:
a lint that finds errors is still ``ok`` with ``data["healthy"] = False``.
Failures carry an :class:`ErrorCode` the CLI maps to exit status 1.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Operational failures; lint findings are never errors here."""

    NO_FILES = "NO_FILES"
    INVALID_KIND = "INVALID_KIND"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one operation (``lint``, ``report``, ``locate``, ``keys``).

    Attributes:
        data: Per-op payload; lint-like ops put their findings under
            ``diagnostics``.
        warnings: Problems with the run itself (unreadable file, failing
            plugin hook), shown on stderr and never counted as findings.
        meta: Telemetry span tree when ``--verbose`` is on.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        *,
        warnings: Iterable[str] = (),
        **detail: Any,
    ) -> ServiceResult:
        error = ServiceError(code=code.value, message=message, detail=detail)
        return cls(ok=False, op=op, error=error, warnings=list(warnings))

    @property
    def diagnostics(self) -> list[dict[str, Any]]:
        """Findings of a ``lint`` or ``report`` result, ``[]`` otherwise."""
        return list(self.data.get("diagnostics") or [])
