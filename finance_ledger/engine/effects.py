"""
Balance Effects

DESIGN DECISION: Each collection kind has exactly one rule describing
how a record in it moves money. Adding a record applies that rule and
deleting it applies the same rule negated, so an add followed by a
delete always leaves the balances where they started.

    incomes   -> +amount on the record's account
    expenses  -> -amount on the record's account
    lent      -> -amount on cash (DEBT_ACCOUNT)
    borrowed  -> +amount on cash (DEBT_ACCOUNT)
"""

from decimal import Decimal, InvalidOperation
from typing import NamedTuple

from finance_ledger.errors import InsufficientFundsError, ValidationError
from finance_ledger.models import (
    DEBT_ACCOUNT,
    AnyRecord,
    CollectionKind,
    LedgerState,
    SourceType,
)
from finance_ledger.money import ZERO


class BalanceEffect(NamedTuple):
    """A signed change to one account."""
    account: SourceType
    delta: Decimal

    def inverse(self) -> "BalanceEffect":
        return BalanceEffect(self.account, -self.delta)


def effect_of(kind: CollectionKind, record: AnyRecord) -> BalanceEffect:
    """The balance effect a record had when it was added."""
    kind = CollectionKind(kind)

    if kind == CollectionKind.INCOMES:
        return BalanceEffect(record.source_type, record.amount)
    elif kind == CollectionKind.EXPENSES:
        return BalanceEffect(record.source_type, -record.amount)
    elif kind == CollectionKind.LENT:
        return BalanceEffect(DEBT_ACCOUNT, -record.amount)
    elif kind == CollectionKind.BORROWED:
        return BalanceEffect(DEBT_ACCOUNT, record.amount)

    raise ValueError(f"No balance rule for collection: {kind}")


def ensure_affordable(
    state: LedgerState,
    effect: BalanceEffect,
    message: str,
) -> None:
    """
    Reject an effect that would push its account below zero.

    Raises:
        InsufficientFundsError: If the account cannot cover the debit
    """
    if effect.delta >= ZERO:
        return

    available = state.balance(effect.account)
    requested = -effect.delta
    if requested > available:
        raise InsufficientFundsError(
            message,
            account=effect.account.value,
            requested=requested,
            available=available,
        )


def apply_effect(state: LedgerState, effect: BalanceEffect) -> None:
    """
    Apply an effect and round both balances.

    Raises:
        ValidationError: If the new balance has more digits than can be
            held to the cent
    """
    try:
        state.adjust_balance(effect.account, effect.delta)
    except InvalidOperation as e:
        raise ValidationError(
            f"The resulting {effect.account.label} balance is too large to record."
        ) from e
