"""Tests for telemetry spans, lint counters and the @traced decorator."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from gormlint.config.settings import GormlintSettings
from gormlint.services.lint import LintService
from gormlint.services.result import ServiceResult
from gormlint.services.telemetry import (
    Span,
    disable_telemetry,
    enable_telemetry,
    get_current_span,
    record,
    trace_span,
    traced,
)
from tests.conftest import CLEAN_MODEL, USER_MODEL


@pytest.fixture
def _telemetry_on() -> Generator[None]:
    enable_telemetry()
    try:
        yield
    finally:
        disable_telemetry()


@traced
def _operation() -> ServiceResult:
    record(files=1)
    with trace_span("inner") as span:
        if span:
            span.annotate("matched", 2)
        record(structs=3, diagnostics=1)
    return ServiceResult(ok=True, op="lint", meta={"existing": 1})


@traced
def _failing() -> ServiceResult:
    raise RuntimeError("fail")


class TestSpan:
    def test_duration_zero_until_ended(self) -> None:
        span = Span(name="x")
        assert span.duration_ms == 0.0
        span.end()
        assert span.duration_ms >= 0.0

    def test_totals_sum_descendants(self) -> None:
        root = Span(name="root")
        child = Span(name="child")
        grandchild = Span(name="grandchild")
        root.count("files")
        child.count("structs", 2)
        grandchild.count("structs", 3)
        grandchild.count("diagnostics")
        child.children.append(grandchild)
        root.children.append(child)
        assert root.totals() == {"files": 1, "structs": 5, "diagnostics": 1}

    def test_to_dict(self) -> None:
        span = Span(name="root")
        span.children.append(Span(name="child"))
        span.annotate("k", "v")
        span.count("files", 2)
        data = span.to_dict()
        assert data["name"] == "root"
        assert data["annotations"] == {"k": "v"}
        assert data["counts"] == {"files": 2}
        assert data["totals"] == {"files": 2}
        assert data["children"] == [{"name": "child", "duration_ms": 0.0}]


class TestTraced:
    def test_disabled_is_passthrough(self) -> None:
        result = _operation()
        assert result.meta == {"existing": 1}
        assert get_current_span() is None

    def test_record_without_span_is_noop(self) -> None:
        record(files=1)
        assert get_current_span() is None

    @pytest.mark.usefixtures("_telemetry_on")
    def test_enabled_injects_meta(self) -> None:
        result = _operation()
        assert result.meta is not None
        assert result.meta["existing"] == 1
        telemetry = result.meta["telemetry"]
        assert telemetry["name"].endswith("_operation")
        assert telemetry["counts"] == {"files": 1}
        assert telemetry["totals"] == {"files": 1, "structs": 3, "diagnostics": 1}
        (inner,) = telemetry["children"]
        assert inner["name"] == "inner"
        assert inner["annotations"] == {"matched": 2}
        assert inner["counts"] == {"structs": 3, "diagnostics": 1}

    @pytest.mark.usefixtures("_telemetry_on")
    def test_exception_propagates_and_resets(self) -> None:
        with pytest.raises(RuntimeError):
            _failing()
        assert get_current_span() is None

    def test_trace_span_without_parent(self) -> None:
        with trace_span("orphan") as span:
            assert span is None


@pytest.mark.usefixtures("_telemetry_on")
class TestLintTelemetry:
    def test_lint_paths_counts_per_file(self, tmp_path: Path) -> None:
        (tmp_path / "user.go").write_text(USER_MODEL, encoding="utf-8")
        (tmp_path / "product.go").write_text(CLEAN_MODEL, encoding="utf-8")
        result = LintService(GormlintSettings()).lint_paths([str(tmp_path)])
        assert result.meta is not None
        telemetry = result.meta["telemetry"]
        assert telemetry["totals"] == {"files": 2, "structs": 2, "diagnostics": 1}
        names = [child["name"] for child in telemetry["children"]]
        assert names == ["collect_files", "lint:product.go", "lint:user.go"]
        assert telemetry["children"][0]["annotations"] == {"matched": 2}

    def test_lint_text_counts(self) -> None:
        result = LintService(GormlintSettings()).lint_text(USER_MODEL)
        assert result.meta is not None
        assert result.meta["telemetry"]["counts"] == {"files": 1, "structs": 1, "diagnostics": 1}
