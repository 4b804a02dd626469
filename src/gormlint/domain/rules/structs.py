"""Struct-wide rules, run after every field of a struct has been scanned."""

from __future__ import annotations

from gormlint.domain.models import Diagnostic, FieldDecl, StructDecl
from gormlint.domain.tags import TagEntry
from gormlint.domain.types import Severity

ScannedField = tuple[FieldDecl, list[TagEntry]]

INDEX_KEYS = ("index", "uniqueindex")


def _diag(
    struct: StructDecl,
    field: FieldDecl,
    message: str,
    severity: Severity,
    key: str | None,
) -> Diagnostic:
    return Diagnostic(
        struct_name=struct.name,
        field_name=field.name,
        tag=field.tag,
        message=message,
        severity=severity,
        key=key,
    )


def check_column_names(struct: StructDecl, scanned: list[ScannedField]) -> list[Diagnostic]:
    """A column name may be claimed by one field only; later claims are errors."""
    diagnostics: list[Diagnostic] = []
    owners: dict[str, str] = {}
    for field, entries in scanned:
        for entry in entries:
            if entry.lowered != "column" or not entry.value:
                continue
            owner = owners.get(entry.value)
            if owner is None:
                owners[entry.value] = field.name
            elif owner != field.name:
                diagnostics.append(
                    _diag(
                        struct,
                        field,
                        f"Duplicate column name '{entry.value}' already used by field "
                        f"'{owner}'. Each column name must be unique within the struct.",
                        Severity.ERROR,
                        entry.token,
                    )
                )
    return diagnostics


def check_primary_keys(struct: StructDecl, scanned: list[ScannedField]) -> list[Diagnostic]:
    """Every field marked ``primaryKey`` is reported when there is more than one."""
    pk_fields: list[tuple[FieldDecl, str]] = []
    for field, entries in scanned:
        token = next((e.token for e in entries if e.lowered == "primarykey"), None)
        if token is not None:
            pk_fields.append((field, token))
    if len(pk_fields) < 2:
        return []
    return [
        _diag(
            struct,
            field,
            "Multiple primary keys found in struct. Only one primary key is allowed.",
            Severity.ERROR,
            token,
        )
        for field, token in pk_fields
    ]


def index_name(value: str) -> str:
    """Index name part of an ``index``/``uniqueIndex`` value (``idx,sort:desc``)."""
    return value.split(",", 1)[0].strip()


def check_shared_indexes(struct: StructDecl, scanned: list[ScannedField]) -> list[Diagnostic]:
    """Warn every participant of an index name used by more than one field."""
    groups: dict[str, list[tuple[FieldDecl, str]]] = {}
    for field, entries in scanned:
        for entry in entries:
            if entry.lowered not in INDEX_KEYS or not entry.value:
                continue
            name = index_name(entry.value)
            if not name:
                continue
            members = groups.setdefault(name, [])
            if all(member is not field for member, _ in members):
                members.append((field, entry.token))

    diagnostics: list[Diagnostic] = []
    for name, members in groups.items():
        if len(members) < 2:
            continue
        names = ", ".join(f.name for f, _ in members)
        for field, token in members:
            diagnostics.append(
                _diag(
                    struct,
                    field,
                    f"Index '{name}' is used by multiple fields: {names}. "
                    "Ensure this is intended for composite index.",
                    Severity.WARNING,
                    token,
                )
            )
    return diagnostics


STRUCT_RULES = (check_column_names, check_primary_keys, check_shared_indexes)
