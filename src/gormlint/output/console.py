"""Rich Console factory and theme for gormlint output.

Consoles render to a StringIO buffer so ``format_result() -> str`` holds.
In non-TTY environments (tests, pipes) Rich disables color codes itself.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GORMLINT_THEME = Theme(
    {
        "gl.ok": "bold green",
        "gl.error": "bold red",
        "gl.warning": "bold yellow",
        "gl.op": "bold cyan",
        "gl.key": "dim",
        "gl.path": "dim",
        "gl.struct": "bold blue",
        "gl.field": "bold",
        "gl.tag": "magenta",
        "gl.class.recommended": "green",
        "gl.class.caution": "yellow",
        "gl.class.deprecated": "red",
        "gl.class.unknown": "dim",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "gl.error",
    "warning": "gl.warning",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=GORMLINT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    return _SEVERITY_STYLES.get(severity, "")


def style_for_class(key_class: str) -> str:
    return f"gl.class.{key_class}"
