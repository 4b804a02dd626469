"""GORM tag vocabulary — the static key classification table.

Every key the engine may see is looked up here exactly once per entry.
The table maps the case-folded key to its :class:`KeyClass`; the canonical
(display) spelling of each key is kept alongside so messages can name keys
the way the GORM documentation writes them.

The table is built at import time and exposed read-only.  Plugins may add
*new* keys during startup through :func:`register_tag_key`; built-in keys
cannot be reclassified.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from gormlint.domain.types import KeyClass

TAG_NAMESPACE = "gorm"

# --- Recommended keys, grouped as in the GORM field-tag reference ---

GENERAL_KEYS: tuple[str, ...] = (
    "column",
    "type",
    "size",
    "primaryKey",
    "autoIncrement",
    "not null",
    "default",
    "unique",
    "embedded",
    "embeddedPrefix",
    "-",
)
INDEX_CONSTRAINT_KEYS: tuple[str, ...] = ("index", "uniqueIndex", "priority", "check", "constraint")
TIME_KEYS: tuple[str, ...] = ("autoCreateTime", "autoUpdateTime")
PRECISION_KEYS: tuple[str, ...] = ("precision", "scale", "autoIncrementIncrement")
PERMISSION_KEYS: tuple[str, ...] = ("<-", "->", "comment")
SERIALIZER_KEYS: tuple[str, ...] = ("serializer",)
INDEX_OPTION_KEYS: tuple[str, ...] = ("sort", "length", "class", "where", "option", "composite")

# --- Valid, but flagged ---

RELATIONSHIP_KEYS: tuple[str, ...] = (
    "foreignKey",
    "references",
    "many2many",
    "joinForeignKey",
    "joinReferences",
    "polymorphic",
    "polymorphicValue",
)
DEPRECATED_KEYS: tuple[str, ...] = (
    "primary_key",
    "foreign_key",
    "association_foreign_key",
    "association_save_reference",
    "auto_create_time",
    "auto_update_time",
    "foreignkey_tag",
    "association_foreignkey_tag",
)

# GORM v1 association keys that v2 no longer reads at all.
REMOVED_ASSOCIATION_KEYS: tuple[str, ...] = (
    "association_foreignkey",
    "associationForeignKey",
    "associationReferences",
    "joinColumn",
    "associationJoinColumn",
)


def _build_table() -> tuple[dict[str, KeyClass], dict[str, str]]:
    classes: dict[str, KeyClass] = {}
    names: dict[str, str] = {}
    groups: list[tuple[tuple[str, ...], KeyClass]] = [
        (GENERAL_KEYS, KeyClass.RECOMMENDED),
        (INDEX_CONSTRAINT_KEYS, KeyClass.RECOMMENDED),
        (TIME_KEYS, KeyClass.RECOMMENDED),
        (PRECISION_KEYS, KeyClass.RECOMMENDED),
        (PERMISSION_KEYS, KeyClass.RECOMMENDED),
        (SERIALIZER_KEYS, KeyClass.RECOMMENDED),
        (INDEX_OPTION_KEYS, KeyClass.RECOMMENDED),
        (RELATIONSHIP_KEYS, KeyClass.CAUTION),
        (DEPRECATED_KEYS, KeyClass.DEPRECATED),
        (REMOVED_ASSOCIATION_KEYS, KeyClass.UNKNOWN),
    ]
    for keys, key_class in groups:
        for key in keys:
            classes[key.lower()] = key_class
            names[key.lower()] = key
    return classes, names


_classes, _names = _build_table()
_BUILTIN_KEYS = frozenset(_classes)

KEY_CLASSIFICATIONS: Mapping[str, KeyClass] = MappingProxyType(_classes)
CANONICAL_NAMES: Mapping[str, str] = MappingProxyType(_names)


def classify_key(key: str) -> KeyClass:
    """Classify *key* (any casing). Keys not in the table are ``UNKNOWN``."""
    return KEY_CLASSIFICATIONS.get(key.strip().lower(), KeyClass.UNKNOWN)


def canonical_name(key: str) -> str:
    """Return the documented spelling of *key*, or *key* itself if unknown."""
    return CANONICAL_NAMES.get(key.strip().lower(), key.strip())


def register_tag_key(key: str, key_class: KeyClass | str) -> None:
    """Add a plugin-provided key to the vocabulary.

    Raises:
        ValueError: If the key is empty, is a built-in key, the class is
            ``unknown``, or the key is already registered with another class.
    """
    name = key.strip()
    if not name:
        msg = "Tag key must not be empty"
        raise ValueError(msg)
    lowered = name.lower()
    if lowered in _BUILTIN_KEYS:
        msg = f"Tag key {name!r} conflicts with a built-in key"
        raise ValueError(msg)
    resolved = KeyClass(key_class)
    if resolved is KeyClass.UNKNOWN:
        msg = f"Tag key {name!r} cannot be registered as unknown"
        raise ValueError(msg)
    existing = _classes.get(lowered)
    if existing is not None and existing is not resolved:
        msg = f"Tag key {name!r} is already registered as {existing.value}"
        raise ValueError(msg)
    _classes[lowered] = resolved
    _names[lowered] = name


def unregister_tag_key(key: str) -> None:
    """Remove a plugin-provided key. Built-in keys are left untouched."""
    lowered = key.strip().lower()
    if lowered in _BUILTIN_KEYS:
        return
    _classes.pop(lowered, None)
    _names.pop(lowered, None)


def keys_by_class() -> dict[KeyClass, list[str]]:
    """Canonical key names grouped by classification, in table order."""
    grouped: dict[KeyClass, list[str]] = {}
    for lowered, key_class in KEY_CLASSIFICATIONS.items():
        grouped.setdefault(key_class, []).append(CANONICAL_NAMES[lowered])
    return grouped
