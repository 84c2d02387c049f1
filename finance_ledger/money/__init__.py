"""Money arithmetic package."""

from finance_ledger.money.arithmetic import (
    CENT,
    MAX_AMOUNT,
    ZERO,
    format_currency,
    parse_amount,
    round2,
    to_decimal,
)

__all__ = [
    "CENT",
    "MAX_AMOUNT",
    "ZERO",
    "format_currency",
    "parse_amount",
    "round2",
    "to_decimal",
]
