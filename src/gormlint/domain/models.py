"""Domain records — scanned structs, diagnostics and text ranges.

``StructDecl`` / ``FieldDecl`` are plain frozen dataclasses produced by the
extractor and thrown away after validation.  ``Diagnostic`` and ``Range``
cross the service boundary, so they are frozen pydantic models.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any

from pydantic import BaseModel

from gormlint.domain.tags import TagEntry, decode_tag, parse_entries
from gormlint.domain.types import Severity


@dataclass(frozen=True)
class FieldDecl:
    """One struct field and its raw tag literal (content between backticks)."""

    name: str
    declared_type: str
    raw_tag: str = ""

    @cached_property
    def tag(self) -> str:
        """The decoded ``gorm`` segment, ``""`` if absent."""
        return decode_tag(self.raw_tag)

    def entries(self) -> list[TagEntry]:
        return parse_entries(self.tag)


@dataclass(frozen=True)
class StructDecl:
    """A ``type X struct { ... }`` declaration with fields in source order."""

    name: str
    fields: tuple[FieldDecl, ...] = ()

    @property
    def has_tags(self) -> bool:
        return any(f.tag.strip() for f in self.fields)


class Diagnostic(BaseModel):
    """One reported issue, scoped to a struct field."""

    model_config = {"frozen": True}

    struct_name: str
    field_name: str
    tag: str
    message: str
    severity: Severity
    key: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class Position(BaseModel):
    """Zero-based line/character position."""

    model_config = {"frozen": True}

    line: int = 0
    character: int = 0


class Range(BaseModel):
    """Half-open text range between two positions."""

    model_config = {"frozen": True}

    start: Position = Position()
    end: Position = Position()

    @classmethod
    def on_line(cls, line: int, start: int, length: int) -> Range:
        return cls(
            start=Position(line=line, character=start),
            end=Position(line=line, character=start + length),
        )

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    @property
    def is_inverted(self) -> bool:
        return (self.end.line, self.end.character) < (self.start.line, self.start.character)

    def slice(self, text: str) -> str:
        """Return the text covered by a single-line range."""
        lines = text.split("\n")
        if self.start.line != self.end.line or self.start.line >= len(lines):
            return ""
        return lines[self.start.line][self.start.character : self.end.character]
