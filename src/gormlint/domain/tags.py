"""Tag domain logic — decoding the ``gorm`` segment and splitting entries.

Pure functions, no infrastructure dependencies.  Neither function raises:
unparseable input degrades to an empty segment or to flag-only entries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gormlint.domain.vocabulary import TAG_NAMESPACE, canonical_name

ENTRY_SEPARATOR = ";"
VALUE_SEPARATOR = ":"

# Three historical conventions, tried in order:
#   gorm:"column:name"   gorm:'column:name'   gorm:column:name
_NS = rf"(?<![\w.-]){re.escape(TAG_NAMESPACE)}:"
_SEGMENT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(_NS + r'"((?:[^"\\]|\\.)*)"'),
    re.compile(_NS + r"'((?:[^'\\]|\\.)*)'"),
    re.compile(_NS + r"([^\s;`]+)"),
)


@dataclass(frozen=True)
class TagEntry:
    """One ``key[:value]`` entry of a GORM tag."""

    key: str  # display spelling (canonical when the key is known)
    value: str = ""
    original: str = ""  # key token exactly as written

    @property
    def lowered(self) -> str:
        return self.key.lower()

    @property
    def token(self) -> str:
        """The key as written, falling back to the display spelling."""
        return self.original or self.key


def decode_tag(literal: str) -> str:
    """Extract the ``gorm`` segment from a raw struct tag literal.

    Examples:
        >>> decode_tag('json:"id" gorm:"primaryKey;size:64"')
        'primaryKey;size:64'
        >>> decode_tag("gorm:'column:user_id'")
        'column:user_id'
        >>> decode_tag('gorm:embedded json:"-"')
        'embedded'
        >>> decode_tag('json:"name"')
        ''
    """
    if not literal or not literal.strip():
        return ""
    for pattern in _SEGMENT_PATTERNS:
        match = pattern.search(literal)
        if match:
            return match.group(1)
    return ""


def split_entry(part: str) -> tuple[str, str]:
    """Split one entry on its first ``:``.

    A colon in first position does not count as a separator, so ``":x"``
    stays a (malformed) key rather than vanishing.
    """
    idx = part.find(VALUE_SEPARATOR)
    if idx > 0:
        return part[:idx].strip(), part[idx + 1 :].strip()
    return part.strip(), ""


def parse_entries(segment: str) -> list[TagEntry]:
    """Split a decoded segment into ordered entries.

    Duplicates are preserved; detecting them is the rule engine's job.

    Examples:
        >>> [(e.key, e.value) for e in parse_entries("PRIMARYKEY; size:64 ;;")]
        [('primaryKey', ''), ('size', '64')]
    """
    entries: list[TagEntry] = []
    if not segment:
        return entries
    for raw in segment.split(ENTRY_SEPARATOR):
        part = raw.strip()
        if not part:
            continue
        token, value = split_entry(part)
        entries.append(TagEntry(key=canonical_name(token), value=value, original=token))
    return entries
