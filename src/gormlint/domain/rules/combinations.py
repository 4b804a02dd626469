"""Key combination rules within a single field.

``pair_conflicts`` runs per entry, as soon as the second key of a
conflicting pair shows up.  Everything in :data:`FIELD_RULES` runs once per
field after its last entry, against the complete set of keys seen.
"""

from __future__ import annotations

from collections.abc import Callable

from gormlint.domain.rules.scan import FieldScan
from gormlint.domain.rules.values import Finding, error, warning
from gormlint.domain.tags import TagEntry

PRIMARY_KEY = "primarykey"
UNIQUE = "unique"
IGNORE = "-"
PERMISSION_KEYS: tuple[str, ...] = ("<-", "->", "-")
EXCLUSIVE_PAIRS: tuple[tuple[str, str], ...] = ((PRIMARY_KEY, UNIQUE),)

FieldRule = Callable[[FieldScan], list[Finding]]


def pair_conflicts(scan: FieldScan, entry: TagEntry) -> list[Finding]:
    """One error per direction when *entry* completes an exclusive pair.

    Call only for the first occurrence of ``entry``'s key.
    """
    findings: list[Finding] = []
    for left, right in EXCLUSIVE_PAIRS:
        if entry.lowered == left:
            other = right
        elif entry.lowered == right:
            other = left
        else:
            continue
        if other not in scan.seen:
            continue
        earlier, current = scan.token(other), entry.token
        findings.append(error(f"'{earlier}' and '{current}' cannot be used together", earlier))
        findings.append(error(f"'{current}' and '{earlier}' cannot be used together", current))
    return findings


def primary_key_not_null(scan: FieldScan) -> list[Finding]:
    if not scan.has(PRIMARY_KEY, "not null"):
        return []
    pk = scan.token(PRIMARY_KEY)
    return [
        warning(
            f"'{pk}' automatically implies 'not null'. Remove 'not null' tag.",
            scan.token("not null"),
        )
    ]


def ignored_with_other_keys(scan: FieldScan) -> list[Finding]:
    if IGNORE not in scan.seen or len(scan.seen) < 2:
        return []
    others = [t for t in scan.tokens() if t != IGNORE]
    return [
        error(
            f"Field marked as ignored ('-') cannot have other tags: {', '.join(others)}. "
            "Remove conflicting tags.",
            IGNORE,
        )
    ]


def conflicting_permissions(scan: FieldScan) -> list[Finding]:
    found = scan.present(PERMISSION_KEYS)
    if len(found) < 2:
        return []
    return [
        error(
            f"Conflicting permission tags: {', '.join(found)}. "
            "Use only one permission control tag.",
            found[-1],
        )
    ]


def index_with_unique_index(scan: FieldScan) -> list[Finding]:
    if not scan.has("index", "uniqueindex"):
        return []
    return [
        warning(
            "Field has both 'index' and 'uniqueIndex'. Consider using only 'uniqueIndex'.",
            scan.token("index"),
        )
    ]


def foreign_key_without_references(scan: FieldScan) -> list[Finding]:
    if "foreignkey" not in scan.seen or "references" in scan.seen:
        return []
    return [
        warning(
            "'foreignKey' should be used together with 'references' "
            "for proper relationship definition.",
            scan.token("foreignkey"),
        )
    ]


def many2many_with_foreign_keys(scan: FieldScan) -> list[Finding]:
    if "many2many" not in scan.seen or not scan.present(("foreignkey", "references")):
        return []
    return [
        error(
            "'many2many' cannot be used with 'foreignKey' or 'references'. "
            "Use association struct instead.",
            scan.token("many2many"),
        )
    ]


def embedded_with_column(scan: FieldScan) -> list[Finding]:
    if not scan.has("embedded", "column"):
        return []
    return [
        error(
            "'embedded' fields expand into multiple columns, 'column' tag is not applicable.",
            scan.token("column"),
        )
    ]


def dual_time_tracking(scan: FieldScan) -> list[Finding]:
    if not scan.has("autocreatetime", "autoupdatetime"):
        return []
    # Not a conflict; surfaced as a reminder.
    return [
        warning(
            "Field has both creation and update time tracking. Ensure this is intentional.",
            scan.token("autoupdatetime"),
        )
    ]


FIELD_RULES: tuple[FieldRule, ...] = (
    primary_key_not_null,
    ignored_with_other_keys,
    conflicting_permissions,
    index_with_unique_index,
    foreign_key_without_references,
    many2many_with_foreign_keys,
    embedded_with_column,
    dual_time_tracking,
)
