"""Lint run telemetry: timed spans that also count what was linted.

Off by default; ``--verbose`` turns it on.  A ``@traced`` service method
opens a root span, ``trace_span`` nests per-file spans under it, and
:func:`record` adds ``files`` / ``structs`` / ``diagnostics`` counts to
whichever span is active.  The finished tree, with per-span counts and
subtree totals, lands in ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections import Counter
from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from gormlint.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("gormlint_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("gormlint_span", default=None)

log = structlog.get_logger("gormlint.telemetry")


@dataclass
class Span:
    name: str
    children: list[Span] = field(default_factory=list)
    counts: Counter[str] = field(default_factory=Counter)
    annotations: dict[str, Any] = field(default_factory=dict)
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def count(self, key: str, n: int = 1) -> None:
        self.counts[key] += n

    def totals(self) -> dict[str, int]:
        """Counts summed over this span and all descendants."""
        total = Counter(self.counts)
        for child in self.children:
            total.update(child.totals())
        return dict(total)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.counts:
            data["counts"] = dict(self.counts)
        if self.annotations:
            data["annotations"] = self.annotations
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
            data["totals"] = self.totals()
        return data


def get_current_span() -> Span | None:
    """The active span, or None when telemetry is off."""
    return _active.get() if _enabled.get() else None


@contextmanager
def trace_span(name: str) -> Generator[Span | None]:
    """Child span of the active one; yields None outside a traced call."""
    parent = get_current_span()
    if parent is None:
        yield None
        return

    child = Span(name=name)
    parent.children.append(child)
    token = _active.set(child)
    try:
        yield child
    finally:
        child.end()
        _active.reset(token)


def record(**counts: int) -> None:
    """Add *counts* to the active span; no-op when telemetry is off."""
    span = get_current_span()
    if span is not None:
        for key, n in counts.items():
            span.count(key, n)


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the result's meta."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        token = _active.set(span)
        ok = False
        try:
            result = func(*args, **kwargs)
            ok = True
        finally:
            span.end()
            _active.reset(token)
            log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=ok,
                **span.totals(),
            )

        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper


def enable_telemetry() -> None:
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
