"""Quote balance check for free-text tag values (``comment``)."""

from __future__ import annotations

from dataclasses import dataclass

ESCAPE = "\\"


@dataclass(frozen=True)
class QuoteBalance:
    """Outcome of :func:`check_quote_balance`."""

    single: int
    double: int

    @property
    def balanced(self) -> bool:
        return self.single % 2 == 0 and self.double % 2 == 0

    @property
    def unbalanced_kind(self) -> str | None:
        """``"single"`` or ``"double"`` (single checked first), None if balanced."""
        if self.single % 2:
            return "single"
        if self.double % 2:
            return "double"
        return None

    @property
    def unbalanced_count(self) -> int:
        return self.single if self.unbalanced_kind == "single" else self.double


def check_quote_balance(value: str) -> QuoteBalance:
    """Count unescaped quotes, tracking which kind of span is open.

    A quote of one kind inside a span of the other kind is literal text and
    is not counted; a quote directly after ``\\`` is ignored.

    Examples:
        >>> check_quote_balance("it's").balanced
        False
        >>> check_quote_balance("a\\\\'b").balanced
        True
        >>> check_quote_balance('"it\\'s"').balanced
        True
    """
    single = double = 0
    in_single = in_double = False
    for i, ch in enumerate(value):
        escaped = i > 0 and value[i - 1] == ESCAPE
        if ch == "'" and not in_double and not escaped:
            single += 1
            in_single = not in_single
        elif ch == '"' and not in_single and not escaped:
            double += 1
            in_double = not in_double
    return QuoteBalance(single=single, double=double)


def has_mixed_quotes(value: str) -> bool:
    return "'" in value and '"' in value
