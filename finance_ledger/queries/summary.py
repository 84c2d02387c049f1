"""
Derived Aggregates

DESIGN DECISION: Totals are recomputed from a full scan of the state every
time they are asked for. Nothing here is stored, so the numbers can never
disagree with the records. At personal-ledger scale the scans are trivial.
"""

from decimal import Decimal
from typing import Iterable

from finance_ledger.models import (
    UNCATEGORIZED,
    Debt,
    Expense,
    LedgerState,
    LedgerSummary,
    LedgerViews,
)
from finance_ledger.money import ZERO, round2


def _total(records: Iterable) -> Decimal:
    return round2(sum((record.amount for record in records), ZERO))


def _outstanding(debts: Iterable[Debt]) -> list[Debt]:
    return [debt for debt in debts if debt.is_outstanding]


def _newest_first(records: Iterable) -> list:
    # sorted() is stable, so same-day records keep insertion order
    return sorted(records, key=lambda record: record.date, reverse=True)


def expense_by_category(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """Sum expenses per category; a blank category counts as Uncategorized."""
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        category = expense.category or UNCATEGORIZED
        totals[category] = totals.get(category, ZERO) + expense.amount
    return {category: round2(amount) for category, amount in totals.items()}


def summarize(state: LedgerState) -> LedgerSummary:
    """Compute the dashboard figures for a state."""
    return LedgerSummary(
        cash_balance=state.cash_balance,
        bank_balance=state.bank_balance,
        total_balance=round2(state.cash_balance + state.bank_balance),
        total_income=_total(state.incomes),
        total_expense=_total(state.expenses),
        outstanding_lent=_total(_outstanding(state.lent)),
        outstanding_borrowed=_total(_outstanding(state.borrowed)),
        expense_by_category=expense_by_category(state.expenses),
    )


def build_views(state: LedgerState) -> LedgerViews:
    """
    Record lists in the order they are displayed.

    Incomes and expenses are shown newest first. Only outstanding
    debts are listed.
    """
    return LedgerViews(
        incomes=_newest_first(state.incomes),
        expenses=_newest_first(state.expenses),
        outstanding_lent=_newest_first(_outstanding(state.lent)),
        outstanding_borrowed=_newest_first(_outstanding(state.borrowed)),
    )
