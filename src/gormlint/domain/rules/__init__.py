"""Rule engine — value, combination and struct-wide GORM tag rules."""

from gormlint.domain.rules.engine import validate_struct, validate_structs, validate_text
from gormlint.domain.rules.quotes import QuoteBalance, check_quote_balance
from gormlint.domain.rules.values import (
    VALUE_RULES,
    Finding,
    ValueRule,
    register_value_rule,
    unregister_value_rule,
)

__all__ = [
    "VALUE_RULES",
    "Finding",
    "QuoteBalance",
    "ValueRule",
    "check_quote_balance",
    "register_value_rule",
    "unregister_value_rule",
    "validate_struct",
    "validate_structs",
    "validate_text",
]
