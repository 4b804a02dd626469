"""Struct and field extraction from raw Go source text.

No grammar: struct headers are found by pattern, bodies by a brace-depth
scan, and fields line by line.  Anything that does not look like a field is
skipped, never fatal, so half-typed editor buffers still produce results.
"""

from __future__ import annotations

import re

from gormlint.domain.models import FieldDecl, StructDecl

_STRUCT_HEADER = re.compile(r"\btype\s+(\w+)\s+struct\s*\{")

# Types: identifiers, qualified names, pointers, slices, maps, generics,
# and literal braces as in ``interface{}``.
_TYPE = r"[\w\[\]*.{}]+"
_NAMES = r"\w+(?:\s*,\s*\w+)*"
_FIELD_WITH_TAG = re.compile(rf"^({_NAMES})\s+({_TYPE})\s*`([^`]*)`")
_FIELD_NO_TAG = re.compile(rf"^({_NAMES})\s+({_TYPE})\s*$")
_EMBEDDED_WITH_TAG = re.compile(r"^(\*?[\w.]+)\s*`([^`]*)`")
_EMBEDDED_NO_TAG = re.compile(r"^(\*?[\w.]+)\s*$")
_NESTED_OPEN = re.compile(r"^(\w+)\s+(?:\[\]\*?|\*)?struct\s*\{\s*$")
_NESTED_CLOSE = re.compile(r"^\}\s*(?:`([^`]*)`)?")


def extract_structs(text: str) -> list[StructDecl]:
    """Return every ``type X struct {...}`` in *text*, in order of appearance.

    A struct whose closing brace is missing is still reported, with no
    fields.
    """
    structs: list[StructDecl] = []
    if not text or not text.strip():
        return structs

    pos = 0
    while True:
        match = _STRUCT_HEADER.search(text, pos)
        if match is None:
            break
        body_start = match.end()
        body_end = find_closing_brace(text, body_start)
        if body_end is None:
            structs.append(StructDecl(name=match.group(1)))
            pos = body_start
            continue
        fields = parse_fields(text[body_start:body_end])
        structs.append(StructDecl(name=match.group(1), fields=tuple(fields)))
        pos = body_end + 1
    return structs


def find_closing_brace(text: str, start: int) -> int | None:
    """Index of the ``}`` closing the group opened just before *start*.

    Braces inside raw strings, quoted literals and comments do not count.
    Returns None when the group never closes.
    """
    depth = 1
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "`":
            end = text.find("`", i + 1)
            if end == -1:
                return None
            i = end + 1
            continue
        if ch in "\"'":
            i = _skip_quoted(text, i)
            continue
        if text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end + 1
            continue
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                return None
            i = end + 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _skip_quoted(text: str, start: int) -> int:
    """Return the index just past the quoted literal starting at *start*.

    Literals never span lines; an unterminated one ends at the newline.
    """
    quote = text[start]
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote or ch == "\n":
            return i + 1
        i += 1
    return i


def parse_fields(body: str) -> list[FieldDecl]:
    """Decompose a struct body into fields, one line at a time.

    Fields of a nested anonymous struct are flattened into the result, in
    source order, ahead of the field that holds them (that field's tag sits
    on the closing ``}`` line).
    """
    fields: list[FieldDecl] = []
    nested_name: str | None = None
    nested_body: list[str] = []
    nested_depth = 0

    for line in body.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue

        if nested_depth > 0:
            nested_depth += _brace_delta(stripped)
            if nested_depth > 0:
                nested_body.append(stripped)
                continue
            fields.extend(parse_fields("\n".join(nested_body)))
            close = _NESTED_CLOSE.match(stripped)
            if nested_name is not None and close is not None:
                fields.append(FieldDecl(nested_name, "struct", close.group(1) or ""))
            nested_name = None
            nested_body = []
            nested_depth = 0
            continue

        opener = _NESTED_OPEN.match(stripped)
        if opener is not None:
            nested_name = opener.group(1)
            nested_depth = 1
            continue

        fields.extend(parse_field_line(stripped))

    # Unclosed nested block at the end of the body.
    if nested_body:
        fields.extend(parse_fields("\n".join(nested_body)))
    return fields


def parse_field_line(line: str) -> list[FieldDecl]:
    """Parse one trimmed field line; returns ``[]`` for anything else.

    ``A, B string`` yields two fields sharing type and tag.
    """
    if "`" not in line:
        line = line.split("//", 1)[0].rstrip()
        if not line:
            return []

    match = _FIELD_WITH_TAG.match(line)
    if match is not None:
        names, ftype, raw = match.group(1), match.group(2), match.group(3)
        return [FieldDecl(n.strip(), ftype, raw) for n in names.split(",")]

    match = _FIELD_NO_TAG.match(line)
    if match is not None:
        names, ftype = match.group(1), match.group(2)
        return [FieldDecl(n.strip(), ftype) for n in names.split(",")]

    match = _EMBEDDED_WITH_TAG.match(line)
    if match is not None:
        token = match.group(1)
        return [FieldDecl(token, token, match.group(2))]

    match = _EMBEDDED_NO_TAG.match(line)
    if match is not None and not line.startswith(("}", "{")):
        token = match.group(1)
        return [FieldDecl(token, token)]
    return []


def _brace_delta(line: str) -> int:
    """Net brace count of *line*, ignoring backtick literals and comments."""
    outside = re.sub(r"`[^`]*`", "", line)
    outside = outside.split("//", 1)[0]
    return outside.count("{") - outside.count("}")
