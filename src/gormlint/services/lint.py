"""LintService — lint Go sources, resolve ranges, build editor reports.

The domain engine does the work; this layer adds file handling, severity
filtering, caps, plugin dispatch and the editor-facing diagnostic shape.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from gormlint.domain.extractor import extract_structs
from gormlint.domain.locator import find_range
from gormlint.domain.models import Diagnostic, Position, Range
from gormlint.domain.rules import validate_structs, validate_text
from gormlint.domain.types import KeyClass, Severity
from gormlint.domain.vocabulary import keys_by_class
from gormlint.services.base import BaseService
from gormlint.services.result import ErrorCode, ServiceResult
from gormlint.services.telemetry import record, trace_span, traced

logger = logging.getLogger(__name__)

STDIN_PATH = "<stdin>"

# LSP DiagnosticSeverity values.
_EDITOR_SEVERITY = {Severity.ERROR: 1, Severity.WARNING: 2}

_FALLBACK_RANGE = Range.on_line(0, 0, 10)


class LintService(BaseService):
    """Lint operations over text, files and directories."""

    @traced
    def lint_text(
        self,
        text: str,
        *,
        path: str = STDIN_PATH,
        max_problems: int | None = None,
        min_severity: str | None = None,
    ) -> ServiceResult:
        """Lint one in-memory document."""
        warnings: list[str] = []
        diagnostics, structs = self._lint_document(text)
        kept, truncated = self._select(diagnostics, max_problems, min_severity)
        items = [{**d.to_dict(), "path": path} for d in kept]
        record(files=1, structs=structs, diagnostics=len(kept))
        self._after_lint(path, kept, warnings)
        return ServiceResult(
            ok=True,
            op="lint",
            data=self._summary(items, truncated=truncated, structs=structs, files=[path]),
            warnings=warnings,
        )

    @traced
    def lint_paths(
        self,
        paths: Sequence[str],
        *,
        max_problems: int | None = None,
        min_severity: str | None = None,
    ) -> ServiceResult:
        """Lint files and directory trees.

        Directories are expanded with ``lint.include`` patterns, skipping
        ``lint.exclude_dirs``.  The problem cap applies across all files.
        """
        warnings: list[str] = []
        with trace_span("collect_files") as span:
            files = self._collect_files(paths, warnings)
            if span:
                span.annotate("matched", len(files))

        if not files:
            return ServiceResult.failure(
                "lint",
                ErrorCode.NO_FILES,
                "No Go files found to lint",
                warnings=warnings,
                paths=list(paths),
            )

        limit = self._limit(max_problems)
        items: list[dict[str, Any]] = []
        linted: list[str] = []
        structs = 0
        truncated = False
        for file in files:
            try:
                text = file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                warnings.append(f"Failed to read {file}: {exc}")
                continue

            with trace_span(f"lint:{file.name}"):
                diagnostics, found = self._lint_document(text)
                kept, _ = self._select(diagnostics, None, min_severity)
                record(files=1, structs=found, diagnostics=len(kept))
            structs += found
            linted.append(str(file))
            self._after_lint(str(file), kept, warnings)

            room = limit - len(items)
            if len(kept) > room:
                kept = kept[: max(0, room)]
                truncated = True
            items.extend({**d.to_dict(), "path": str(file)} for d in kept)

        return ServiceResult(
            ok=True,
            op="lint",
            data=self._summary(items, truncated=truncated, structs=structs, files=linted),
            warnings=warnings,
        )

    @traced
    def locate(
        self, text: str, struct_name: str, field_name: str, key: str | None = None
    ) -> ServiceResult:
        """Resolve the highlight range for a struct field (and tag key)."""
        rng = find_range(text, struct_name, field_name, key)
        return ServiceResult(
            ok=True,
            op="locate",
            data={
                "struct": struct_name,
                "field": field_name,
                "key": key,
                "range": rng.model_dump(),
                "text": rng.slice(text),
            },
        )

    @traced
    def report(
        self,
        text: str,
        *,
        uri: str = "untitled:document",
        max_problems: int | None = None,
    ) -> ServiceResult:
        """Editor-ready diagnostics for one document.

        Each entry has ``range``, ``severity`` (1 error, 2 warning),
        ``source``, ``code`` and ``message``; ``relatedInformation`` when
        ``report.related_information`` is on.
        """
        items: list[dict[str, Any]] = []
        try:
            diagnostics = validate_text(text, max_problems=self._limit(max_problems))
        except Exception as exc:
            logger.warning("Failed to parse Go structs in %s", uri, exc_info=True)
            items.append(self._parse_error(exc))
        else:
            items.extend(self._editor_diagnostic(text, uri, d) for d in diagnostics)
        record(diagnostics=len(items))

        return ServiceResult(
            ok=True,
            op="report",
            data={"uri": uri, "diagnostics": items, "count": len(items)},
        )

    @traced
    def keys(self, kind: str | None = None) -> ServiceResult:
        """The tag vocabulary, grouped by classification."""
        grouped = keys_by_class()
        if kind is not None:
            try:
                wanted = KeyClass(kind.lower())
            except ValueError:
                return ServiceResult.failure(
                    "keys",
                    ErrorCode.INVALID_KIND,
                    f"Unknown key classification: {kind}",
                    choices=[k.value for k in KeyClass],
                )
            grouped = {wanted: grouped.get(wanted, [])}

        classes = {k.value: names for k, names in grouped.items()}
        return ServiceResult(
            ok=True,
            op="keys",
            data={"classes": classes, "count": sum(len(v) for v in classes.values())},
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lint_document(self, text: str) -> tuple[list[Diagnostic], int]:
        if not text or not text.strip():
            return [], 0
        structs = extract_structs(text)
        return validate_structs(structs), len(structs)

    def _limit(self, max_problems: int | None) -> int:
        return max_problems if max_problems is not None else self._settings.lint.max_problems

    def _select(
        self,
        diagnostics: list[Diagnostic],
        max_problems: int | None,
        min_severity: str | None,
    ) -> tuple[list[Diagnostic], bool]:
        """Apply the severity floor, then the cap. Returns ``(kept, truncated)``."""
        floor = Severity(min_severity or self._settings.lint.min_severity)
        if floor is Severity.ERROR:
            diagnostics = [d for d in diagnostics if d.severity is Severity.ERROR]
        limit = self._limit(max_problems)
        return diagnostics[:limit], len(diagnostics) > limit

    def _after_lint(self, path: str, diagnostics: list[Diagnostic], warnings: list[str]) -> None:
        errors = sum(1 for d in diagnostics if d.severity is Severity.ERROR)
        self._dispatch_event(
            "post_lint",
            {"path": path, "error_count": errors, "warning_count": len(diagnostics) - errors},
            warnings,
        )

    @staticmethod
    def _summary(
        items: list[dict[str, Any]], *, truncated: bool, structs: int, files: list[str]
    ) -> dict[str, Any]:
        errors = sum(1 for d in items if d["severity"] == Severity.ERROR.value)
        return {
            "diagnostics": items,
            "count": len(items),
            "error_count": errors,
            "warning_count": len(items) - errors,
            "healthy": errors == 0,
            "truncated": truncated,
            "structs": structs,
            "files": files,
        }

    def _collect_files(self, paths: Iterable[str], warnings: list[str]) -> list[Path]:
        lint_cfg = self._settings.lint
        found: list[Path] = []
        for raw in paths:
            path = Path(raw)
            if path.is_file():
                found.append(path)
            elif path.is_dir():
                found.extend(_walk(path, lint_cfg.include, lint_cfg.exclude_dirs))
            else:
                warnings.append(f"Path not found: {raw}")

        unique: list[Path] = []
        seen: set[Path] = set()
        for path in found:
            resolved = path.resolve()
            if resolved not in seen:
                seen.add(resolved)
                unique.append(path)
        return unique

    def _editor_diagnostic(self, text: str, uri: str, diag: Diagnostic) -> dict[str, Any]:
        report_cfg = self._settings.report
        message = diag.message
        try:
            rng = editor_range(find_range(text, diag.struct_name, diag.field_name, diag.key))
        except Exception:
            logger.debug(
                "Range resolution failed for %s.%s",
                diag.struct_name,
                diag.field_name,
                exc_info=True,
            )
            rng = _FALLBACK_RANGE
            message = f"{message} (in struct: {diag.struct_name}, field: {diag.field_name})"

        item: dict[str, Any] = {
            "range": rng.model_dump(),
            "message": message,
            "severity": _EDITOR_SEVERITY[diag.severity],
            "source": report_cfg.source,
            "code": f"gorm-{diag.severity.value}",
        }
        if report_cfg.related_information:
            item["relatedInformation"] = [
                {
                    "location": {"uri": uri, "range": rng.model_dump()},
                    "message": f"In struct: {diag.struct_name}, field: {diag.field_name}",
                }
            ]
        return item

    def _parse_error(self, exc: Exception) -> dict[str, Any]:
        return {
            "range": Range().model_dump(),
            "message": f"Failed to parse Go structs: {exc}",
            "severity": _EDITOR_SEVERITY[Severity.ERROR],
            "source": self._settings.report.source,
            "code": "parse-error",
        }


def editor_range(rng: Range) -> Range:
    """Clamp negative coordinates; widen inverted or empty ranges to one character."""
    start = Position(line=max(0, rng.start.line), character=max(0, rng.start.character))
    end = Position(line=max(0, rng.end.line), character=max(0, rng.end.character))
    clamped = Range(start=start, end=end)
    if clamped.is_inverted or clamped.is_empty:
        return Range(start=start, end=Position(line=start.line, character=start.character + 1))
    return clamped


def _walk(root: Path, include: list[str], exclude_dirs: list[str]) -> list[Path]:
    matches: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in exclude_dirs)
        for name in sorted(filenames):
            if any(fnmatch.fnmatch(name, pattern) for pattern in include):
                matches.append(Path(dirpath) / name)
    return matches
