"""Map a diagnostic back to a text range for highlighting.

The extractor does not keep source offsets, so the locator re-scans the text
with plain substring searches.  Results are a reasonable highlight, not a
token-exact one: a field whose name prefixes an earlier field's name, or a
key that occurs twice in one tag, resolves to the first match.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from gormlint.domain.models import Position, Range
from gormlint.domain.vocabulary import TAG_NAMESPACE

_KEYWORD = f"{TAG_NAMESPACE}:"


def document_start() -> Range:
    return Range(start=Position(), end=Position())


def find_range(text: str, struct_name: str, field_name: str, key: str | None = None) -> Range:
    """Best-effort range for *key* in *field_name* of *struct_name*.

    Resolution order:

    1. the key's span inside the field's ``gorm:`` tag (when *key* is given),
    2. the field name on its declaration line,
    3. the struct name on its ``type ... struct`` line,
    4. an empty range at the start of the document.

    Never raises.
    """
    if not text or not struct_name:
        return document_start()

    lines = text.split("\n")
    header = re.compile(rf"\btype\s+{re.escape(struct_name)}\s+struct\b")

    struct_line = -1
    name_col = 0
    for i, line in enumerate(lines):
        match = header.search(line)
        if match is not None:
            struct_line = i
            name_col = line.find(struct_name, match.start() + len("type"))
            break
    if struct_line < 0:
        return document_start()

    if field_name:
        body = list(_struct_lines(lines, struct_line))
        # Direct fields first; nested anonymous struct fields only when no
        # direct field matches.
        ordered = [b for b in body if b[3] == 1] + [b for b in body if b[3] > 1]
        for line_no, offset, segment, _ in ordered:
            if not segment.strip().startswith(field_name):
                continue
            line = lines[line_no]
            if key:
                kw = line.find(_KEYWORD, offset)
                if kw != -1:
                    hit = line.find(key, kw + len(_KEYWORD))
                    if hit != -1:
                        return Range.on_line(line_no, hit, len(key))
            col = line.find(field_name, offset)
            return Range.on_line(line_no, col, len(field_name))

    return Range.on_line(struct_line, name_col, len(struct_name))


def _struct_lines(lines: list[str], struct_line: int) -> Iterator[tuple[int, int, str, int]]:
    """Yield ``(line_no, offset, segment, depth)`` for the struct's body lines.

    The first segment is the rest of the header line after ``{`` so one-line
    structs are searched too.  *depth* is the brace depth the line starts at:
    1 for direct fields, more inside nested anonymous structs.  Stops at the
    line that closes the struct.
    """
    header = lines[struct_line]
    brace = header.find("{")
    if brace == -1:
        return
    depth = 1
    for line_no in range(struct_line, len(lines)):
        offset = brace + 1 if line_no == struct_line else 0
        segment = lines[line_no][offset:]
        if line_no != struct_line and segment.strip() == "}" and depth <= 1:
            return
        yield line_no, offset, segment, depth
        depth += _depth_change(segment)
        if depth <= 0:
            return


def _depth_change(segment: str) -> int:
    outside = re.sub(r"`[^`]*`", "", segment)
    outside = outside.split("//", 1)[0]
    return outside.count("{") - outside.count("}")
