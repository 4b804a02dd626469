"""Value-format rules, dispatched by tag key.

Each rule is a small callable taking a :class:`TagEntry` and returning the
findings for its value.  Rules live in :data:`VALUE_RULES`, keyed by the
case-folded tag key; adding support for a new key is a registration, not an
edit to the engine.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from gormlint.domain.rules.quotes import check_quote_balance, has_mixed_quotes
from gormlint.domain.tags import TagEntry
from gormlint.domain.types import Severity

_DIGITS = re.compile(r"^\d+$")


@dataclass(frozen=True)
class Finding:
    """A rule result before it is attached to a struct and field.

    ``key`` overrides the highlighted key; value rules leave it unset and the
    engine uses the entry's own key token.
    """

    severity: Severity
    message: str
    key: str | None = None


ValueRule = Callable[[TagEntry], list[Finding]]


def error(message: str, key: str | None = None) -> Finding:
    return Finding(Severity.ERROR, message, key)


def warning(message: str, key: str | None = None) -> Finding:
    return Finding(Severity.WARNING, message, key)


class DigitsRule:
    """Value, when present, must be all digits."""

    def __init__(self, label: str, noun: str | None = None) -> None:
        self.label = label
        self.noun = noun

    def __call__(self, entry: TagEntry) -> list[Finding]:
        if not entry.value or _DIGITS.match(entry.value):
            return []
        subject = self.noun or "Must"
        verb = " must" if self.noun else ""
        return [
            error(
                f"Invalid {self.label} value '{entry.value}'. "
                f"{subject}{verb} be a positive integer."
            )
        ]


class ChoiceRule:
    """Value, when present, must be one of *choices* (case-insensitive)."""

    def __init__(self, template: str, choices: Iterable[str]) -> None:
        self.template = template
        self.choices = tuple(choices)

    def __call__(self, entry: TagEntry) -> list[Finding]:
        if not entry.value or entry.value.lower() in self.choices:
            return []
        return [error(self.template.format(value=entry.value))]


class RequiredRule:
    """Value must be non-empty."""

    def __init__(self, message: str, severity: Severity = Severity.ERROR) -> None:
        self.message = message
        self.severity = severity

    def __call__(self, entry: TagEntry) -> list[Finding]:
        if entry.value.strip():
            return []
        return [Finding(self.severity, self.message)]


CONSTRAINT_OPTIONS = ("onupdate", "ondelete")


def constraint_rule(entry: TagEntry) -> list[Finding]:
    if not entry.value.strip():
        return [
            error(
                "Constraint tag requires constraint options "
                "(e.g., OnUpdate:CASCADE,OnDelete:SET NULL)."
            )
        ]
    findings: list[Finding] = []
    for part in entry.value.split(","):
        option = part.split(":", 1)[0].strip()
        if option and option.lower() not in CONSTRAINT_OPTIONS:
            findings.append(
                warning(f"Invalid constraint option '{option}'. Valid options: OnUpdate, OnDelete.")
            )
    return findings


def comment_rule(entry: TagEntry) -> list[Finding]:
    if not entry.value.strip():
        return [warning("Comment tag requires a comment text.")]
    findings: list[Finding] = []
    balance = check_quote_balance(entry.value)
    if not balance.balanced:
        kind = balance.unbalanced_kind
        findings.append(
            error(
                f"Comment value has unmatched {kind} quotes. "
                f"Found {balance.unbalanced_count} {kind} quotes, "
                "expected even number for proper closure."
            )
        )
    if has_mixed_quotes(entry.value):
        findings.append(
            warning(
                "Comment value contains both single and double quotes. "
                "Consider using consistent quote style or proper escaping."
            )
        )
    return findings


def default_rule(entry: TagEntry) -> list[Finding]:
    if has_mixed_quotes(entry.value):
        return [warning("Default value should use consistent quote style.")]
    return []


def _builtin_rules() -> dict[str, ValueRule]:
    return {
        # Numeric
        "size": DigitsRule("size", "Size"),
        "precision": DigitsRule("precision", "Precision"),
        "scale": DigitsRule("scale", "Scale"),
        "autoincrementincrement": DigitsRule("autoIncrementIncrement"),
        "length": DigitsRule("length", "Length"),
        "priority": DigitsRule("priority", "Priority"),
        # Enumerations
        "sort": ChoiceRule("Invalid sort value '{value}'. Valid options: asc, desc.", ("asc", "desc")),
        "serializer": ChoiceRule(
            "Invalid serializer '{value}'. Valid options: json, gob, unixtime.",
            ("json", "gob", "unixtime"),
        ),
        "autocreatetime": ChoiceRule(
            "Invalid time precision '{value}'. Valid options: '', 'nano', 'milli'.",
            ("nano", "milli"),
        ),
        "autoupdatetime": ChoiceRule(
            "Invalid time precision '{value}'. Valid options: '', 'nano', 'milli'.",
            ("nano", "milli"),
        ),
        "<-": ChoiceRule(
            "Invalid write permission '{value}'. Valid options: 'create', 'update', 'false'.",
            ("create", "update", "false"),
        ),
        "->": ChoiceRule("Invalid read permission '{value}'. Valid option: 'false'.", ("false",)),
        "-": ChoiceRule(
            "Invalid ignore option '{value}'. Valid options: '', 'all', 'migration'.",
            ("all", "migration"),
        ),
        # Required values
        "type": RequiredRule("Type tag requires a value."),
        "column": RequiredRule("Column tag requires a column name."),
        "check": RequiredRule("Check constraint requires a condition."),
        "foreignkey": RequiredRule("ForeignKey tag requires a field name."),
        "references": RequiredRule("References tag requires a field name."),
        "many2many": RequiredRule("Many2many tag requires a table name."),
        "joinforeignkey": RequiredRule("joinForeignKey tag requires a field name."),
        "joinreferences": RequiredRule("joinReferences tag requires a field name."),
        "embeddedprefix": RequiredRule(
            "EmbeddedPrefix tag requires a prefix value.", Severity.WARNING
        ),
        # Structured / free text
        "constraint": constraint_rule,
        "comment": comment_rule,
        "default": default_rule,
    }


VALUE_RULES: dict[str, ValueRule] = _builtin_rules()
_BUILTIN_RULE_KEYS = frozenset(VALUE_RULES)


def get_value_rule(key: str) -> ValueRule | None:
    return VALUE_RULES.get(key.lower())


def register_value_rule(key: str, rule: ValueRule) -> None:
    """Register a value rule for a key that has no built-in rule.

    Raises:
        ValueError: If *key* is empty, has a built-in rule, or already has a
            different rule registered.
        TypeError: If *rule* is not callable.
    """
    lowered = key.strip().lower()
    if not lowered:
        msg = "Rule key must not be empty"
        raise ValueError(msg)
    if not callable(rule):
        msg = f"Value rule for {key!r} must be callable"
        raise TypeError(msg)
    if lowered in _BUILTIN_RULE_KEYS:
        msg = f"Value rule {key!r} conflicts with a built-in rule"
        raise ValueError(msg)
    existing = VALUE_RULES.get(lowered)
    if existing is not None and existing is not rule:
        msg = f"Value rule {key!r} is already registered"
        raise ValueError(msg)
    VALUE_RULES[lowered] = rule


def unregister_value_rule(key: str) -> None:
    """Drop a registered rule. Built-in rules are left untouched."""
    lowered = key.strip().lower()
    if lowered not in _BUILTIN_RULE_KEYS:
        VALUE_RULES.pop(lowered, None)
