"""Balance-consistency engine package."""

from finance_ledger.engine.debts import DebtLifecycleEngine
from finance_ledger.engine.effects import (
    BalanceEffect,
    apply_effect,
    effect_of,
    ensure_affordable,
)
from finance_ledger.engine.transactions import TransactionEngine, build_record

__all__ = [
    "BalanceEffect",
    "DebtLifecycleEngine",
    "TransactionEngine",
    "apply_effect",
    "build_record",
    "effect_of",
    "ensure_affordable",
]
