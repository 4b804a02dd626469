"""The rule engine — field-local pass, then struct-wide pass.

Output order is fixed: structs in source order; within a struct, fields in
declaration order and entries in tag order, then the struct-wide rules in
:data:`STRUCT_RULES` order.  The same text always yields the same list.
"""

from __future__ import annotations

import logging

from gormlint.domain.extractor import extract_structs
from gormlint.domain.models import Diagnostic, FieldDecl, StructDecl
from gormlint.domain.rules.combinations import FIELD_RULES, pair_conflicts
from gormlint.domain.rules.scan import FieldScan
from gormlint.domain.rules.structs import STRUCT_RULES, ScannedField
from gormlint.domain.rules.values import Finding, get_value_rule
from gormlint.domain.tags import TagEntry
from gormlint.domain.types import KeyClass, Severity
from gormlint.domain.vocabulary import classify_key

logger = logging.getLogger(__name__)


def validate_text(text: str, max_problems: int | None = None) -> list[Diagnostic]:
    """Extract structs from *text* and validate them.

    Blank text yields ``[]``.  With *max_problems*, only the first that many
    diagnostics are returned.
    """
    if not text or not text.strip():
        return []
    diagnostics = validate_structs(extract_structs(text))
    if max_problems is not None:
        return diagnostics[: max(0, max_problems)]
    return diagnostics


def validate_structs(structs: list[StructDecl]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for struct in structs:
        diagnostics.extend(validate_struct(struct))
    return diagnostics


def validate_struct(struct: StructDecl) -> list[Diagnostic]:
    """Validate one struct. Structs without any GORM tag are not models."""
    if not struct.has_tags:
        return []

    diagnostics: list[Diagnostic] = []
    scanned: list[ScannedField] = []
    for field in struct.fields:
        if not field.tag.strip():
            continue
        try:
            entries = field.entries()
            scanned.append((field, entries))
            diagnostics.extend(validate_field(struct, field, entries))
        except Exception as exc:
            logger.debug(
                "Tag processing failed for %s.%s", struct.name, field.name, exc_info=True
            )
            diagnostics.append(
                Diagnostic(
                    struct_name=struct.name,
                    field_name=field.name,
                    tag=field.tag,
                    message=f"Error parsing GORM tags: {exc}",
                    severity=Severity.ERROR,
                )
            )

    for rule in STRUCT_RULES:
        diagnostics.extend(rule(struct, scanned))
    return diagnostics


def validate_field(
    struct: StructDecl, field: FieldDecl, entries: list[TagEntry]
) -> list[Diagnostic]:
    """Field-local pass over *entries*; raises if any rule raises."""
    scan = FieldScan()
    findings: list[tuple[Finding, str]] = []

    for entry in entries:
        first = scan.observe(entry)
        if not first:
            findings.append(
                (_error(f"Duplicate GORM tag key '{entry.token}' in field"), entry.token)
            )

        key_class = classify_key(entry.key)
        if not key_class.valid:
            findings.append(
                (
                    _error(
                        f"Unknown GORM tag '{entry.token}'. "
                        "Check GORM documentation for valid tags."
                    ),
                    entry.token,
                )
            )
        elif key_class is not KeyClass.RECOMMENDED:
            findings.append(
                (
                    Finding(
                        Severity.WARNING,
                        f"GORM tag '{entry.token}' is deprecated or not recommended. "
                        "Consider using alternative approaches.",
                    ),
                    entry.token,
                )
            )

        rule = get_value_rule(entry.lowered)
        if rule is not None:
            findings.extend((f, f.key or entry.token) for f in rule(entry))

        if first:
            findings.extend((f, f.key or entry.token) for f in pair_conflicts(scan, entry))

    for field_rule in FIELD_RULES:
        findings.extend((f, f.key or "") for f in field_rule(scan))

    return [
        Diagnostic(
            struct_name=struct.name,
            field_name=field.name,
            tag=field.tag,
            message=finding.message,
            severity=finding.severity,
            key=key or None,
        )
        for finding, key in findings
    ]


def _error(message: str) -> Finding:
    return Finding(Severity.ERROR, message)
