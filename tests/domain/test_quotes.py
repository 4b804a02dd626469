"""Tests for the quote balance check."""

from __future__ import annotations

import pytest

from gormlint.domain.rules.quotes import QuoteBalance, check_quote_balance, has_mixed_quotes


class TestCheckQuoteBalance:
    def test_single_unescaped(self) -> None:
        balance = check_quote_balance("it's")
        assert not balance.balanced
        assert balance.unbalanced_kind == "single"
        assert balance.unbalanced_count == 1

    def test_escaped_quote_ignored(self) -> None:
        balance = check_quote_balance(r"a\'b")
        assert balance == QuoteBalance(single=0, double=0)
        assert balance.balanced

    def test_quote_inside_other_span_not_counted(self) -> None:
        assert check_quote_balance("\"it's\"").balanced

    def test_both_kinds_balanced(self) -> None:
        balance = check_quote_balance("'a' \"b\"")
        assert balance == QuoteBalance(single=2, double=2)

    def test_unbalanced_double(self) -> None:
        balance = check_quote_balance('say "hi')
        assert balance.unbalanced_kind == "double"
        assert balance.unbalanced_count == 1

    def test_single_reported_first(self) -> None:
        assert check_quote_balance("'").unbalanced_kind == "single"
        assert QuoteBalance(single=1, double=3).unbalanced_kind == "single"

    def test_balanced_kind_is_none(self) -> None:
        assert check_quote_balance("plain").unbalanced_kind is None


class TestHasMixedQuotes:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("'a' \"b\"", True), ("'a'", False), ('"b"', False), ("", False)],
    )
    def test_mixed(self, value: str, expected: bool) -> None:
        assert has_mixed_quotes(value) is expected
