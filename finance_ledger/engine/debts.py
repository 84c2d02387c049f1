"""
Debt Lifecycle Engine

State machine per debt:  outstanding --repay--> repaid  (terminal)

CRITICAL: Repaying an already-repaid debt is rejected, never re-applied.
Repaying a borrowed debt also records a "Debt Repayment" expense; the
balance change, the expense and the status change happen together or
not at all.
"""

from datetime import date
from typing import Callable, Optional, Union

from finance_ledger.engine.effects import BalanceEffect, apply_effect, ensure_affordable
from finance_ledger.engine.transactions import build_record
from finance_ledger.errors import NotFoundError
from finance_ledger.models import (
    CollectionKind,
    Debt,
    DebtStatus,
    Expense,
    ExpenseCategory,
    LedgerState,
    SourceType,
    ValidationIssue,
    new_id,
)
from finance_ledger.validation import CommandValidator


class DebtLifecycleEngine:
    """Moves lent and borrowed debts from outstanding to repaid."""

    def __init__(
        self,
        validator: Optional[CommandValidator] = None,
        id_factory: Callable[[], str] = new_id,
        clock: Callable[[], date] = date.today,
    ):
        self._validator = validator or CommandValidator()
        self._new_id = id_factory
        self._today = clock

    def _outstanding_debt(
        self,
        state: LedgerState,
        collection: CollectionKind,
        debt_id: str,
    ) -> Debt:
        """Find a debt that can still be repaid."""
        debt = state.find(collection, debt_id)
        if debt is None:
            raise NotFoundError(
                f"No {collection.value} debt with id {debt_id}.",
                collection=collection.value,
                record_id=debt_id,
            )
        if debt.status == DebtStatus.REPAID:
            raise NotFoundError(
                f"Debt with {debt.name or 'unknown'} is already repaid.",
                collection=collection.value,
                record_id=debt_id,
            )
        return debt

    def _account(self, via: Union[SourceType, str], field: str) -> SourceType:
        issues: list[ValidationIssue] = []
        account = self._validator.account(via, issues, field=field)
        self._validator.require(issues)
        return account

    def repay_lent(
        self,
        state: LedgerState,
        debt_id: str,
        received_via: Union[SourceType, str] = SourceType.CASH,
    ) -> tuple[Debt, SourceType]:
        """
        Mark money I lent as paid back and credit the receiving account.

        Returns the repaid debt and the account that was credited.

        Raises:
            ValidationError: If received_via is not cash or bank
            NotFoundError: If the debt is missing or already repaid
        """
        account = self._account(received_via, "received_via")
        debt = self._outstanding_debt(state, CollectionKind.LENT, debt_id)

        apply_effect(state, BalanceEffect(account, debt.amount))
        debt.status = DebtStatus.REPAID
        return debt, account

    def repay_borrowed(
        self,
        state: LedgerState,
        debt_id: str,
        paid_via: Union[SourceType, str] = SourceType.CASH,
    ) -> tuple[Debt, Expense]:
        """
        Pay back money I borrowed.

        Debits the paying account, records a "Debt Repayment" expense
        dated today and marks the debt repaid.

        Raises:
            ValidationError: If paid_via is not cash or bank
            NotFoundError: If the debt is missing or already repaid
            InsufficientFundsError: If the paying account cannot cover it
        """
        account = self._account(paid_via, "paid_via")
        debt = self._outstanding_debt(state, CollectionKind.BORROWED, debt_id)

        effect = BalanceEffect(account, -debt.amount)
        ensure_affordable(
            state,
            effect,
            f"Insufficient {account.label} Balance to repay the debt!",
        )

        expense = build_record(
            Expense,
            id=self._new_id(),
            amount=debt.amount,
            date=self._today(),
            category=ExpenseCategory.DEBT_REPAYMENT.value,
            location=debt.name,
            remark=f"Debt Repayment to {debt.name}",
            source_type=account,
        )

        apply_effect(state, effect)
        state.expenses.append(expense)
        debt.status = DebtStatus.REPAID
        return debt, expense
