"""
Transaction Engine

Applies income, expense and debt records to a LedgerState and reverses
them on delete.

DESIGN DECISION: Every operation validates everything first and only
then mutates. A rejected command leaves the state exactly as it was.
The engine never persists; the controller owns persistence.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Union

from pydantic import ValidationError as SchemaError

from finance_ledger.engine.effects import apply_effect, effect_of, ensure_affordable
from finance_ledger.errors import NotFoundError, ValidationError
from finance_ledger.models import (
    AnyRecord,
    CollectionKind,
    Debt,
    DebtKind,
    DebtStatus,
    Expense,
    Income,
    LedgerState,
    SourceType,
    ValidationIssue,
    ValidationResult,
    new_id,
)
from finance_ledger.validation import CommandValidator


def build_record(model: type, **fields) -> AnyRecord:
    """
    Construct a record, reporting schema failures as ValidationError.

    Catches limits the validator does not check itself
    (e.g. over-long remarks).
    """
    try:
        return model(**fields)
    except SchemaError as e:
        issues = [
            ValidationIssue(
                field=".".join(str(part) for part in err["loc"]) or "record",
                issue_type="schema",
                message=err["msg"],
                severity="error",
            )
            for err in e.errors()
        ]
        raise ValidationError(
            "; ".join(f"{i.field}: {i.message}" for i in issues),
            issues=issues,
        ) from e


class TransactionEngine:
    """
    Adds and deletes ledger records.

    Usage:
        engine = TransactionEngine()
        income, result = engine.add_income(state, "500", source_type="bank")
        engine.delete_transaction(state, CollectionKind.INCOMES, income.id)
    """

    def __init__(
        self,
        validator: Optional[CommandValidator] = None,
        id_factory: Callable[[], str] = new_id,
    ):
        self._validator = validator or CommandValidator()
        self._new_id = id_factory

    def set_balances(
        self,
        state: LedgerState,
        cash: object,
        bank: object,
    ) -> ValidationResult:
        """
        Overwrite both balances (manual correction, no reversal).

        Raises:
            ValidationError: If either value is non-numeric or negative
        """
        issues: list[ValidationIssue] = []
        cash_value = self._validator.amount(cash, issues, field="cash_balance", allow_zero=True)
        bank_value = self._validator.amount(bank, issues, field="bank_balance", allow_zero=True)
        result = self._validator.require(issues)

        state.set_balance(SourceType.CASH, cash_value)
        state.set_balance(SourceType.BANK, bank_value)
        return result

    def add_income(
        self,
        state: LedgerState,
        amount: object,
        date: Union[date, str, None] = None,
        source: str = "",
        remark: str = "",
        source_type: Union[SourceType, str] = SourceType.CASH,
    ) -> tuple[Income, ValidationResult]:
        """
        Record income and credit the chosen account.

        Raises:
            ValidationError: If amount is non-numeric or <= 0
        """
        issues: list[ValidationIssue] = []
        value = self._validator.amount(amount, issues)
        account = self._validator.account(source_type, issues)
        when = self._validator.transaction_date(date, issues)
        result = self._validator.require(issues)

        income = build_record(
            Income,
            id=self._new_id(),
            amount=value,
            date=when,
            source=self._validator.text(source),
            remark=self._validator.text(remark),
            source_type=account,
        )

        apply_effect(state, effect_of(CollectionKind.INCOMES, income))
        state.incomes.append(income)
        return income, result

    def add_expense(
        self,
        state: LedgerState,
        amount: object,
        date: Union[date, str, None] = None,
        category: str = "",
        location: str = "",
        remark: str = "",
        source_type: Union[SourceType, str] = SourceType.CASH,
    ) -> tuple[Expense, ValidationResult]:
        """
        Record an expense and debit the chosen account.

        Raises:
            ValidationError: If amount is invalid or category is empty
            InsufficientFundsError: If the account cannot cover the amount
        """
        issues: list[ValidationIssue] = []
        value = self._validator.amount(amount, issues)
        chosen_category = self._validator.category(category, issues)
        account = self._validator.account(source_type, issues)
        when = self._validator.transaction_date(date, issues)
        result = self._validator.require(issues)

        expense = build_record(
            Expense,
            id=self._new_id(),
            amount=value,
            date=when,
            category=chosen_category,
            location=self._validator.text(location),
            remark=self._validator.text(remark),
            source_type=account,
        )

        effect = effect_of(CollectionKind.EXPENSES, expense)
        ensure_affordable(state, effect, f"Insufficient {account.label} Balance!")

        apply_effect(state, effect)
        state.expenses.append(expense)
        return expense, result

    def add_debt(
        self,
        state: LedgerState,
        kind: Union[DebtKind, str],
        amount: object,
        date: Union[date, str, None] = None,
        name: str = "",
        remark: str = "",
    ) -> tuple[Debt, ValidationResult]:
        """
        Record money lent out or borrowed. Both settle against cash.

        Raises:
            ValidationError: If amount is non-numeric or <= 0
            InsufficientFundsError: If lending more cash than is on hand
        """
        issues: list[ValidationIssue] = []
        debt_kind = self._validator.debt_kind(kind, issues)
        value = self._validator.amount(amount, issues)
        when = self._validator.transaction_date(date, issues)
        result = self._validator.require(issues)

        debt = build_record(
            Debt,
            id=self._new_id(),
            amount=value,
            date=when,
            name=self._validator.text(name),
            remark=self._validator.text(remark),
            status=DebtStatus.OUTSTANDING,
        )

        collection = CollectionKind(debt_kind.value)
        effect = effect_of(collection, debt)
        ensure_affordable(state, effect, "Insufficient Cash to lend the amount!")

        apply_effect(state, effect)
        state.collection(collection).append(debt)
        return debt, result

    def delete_transaction(
        self,
        state: LedgerState,
        collection: Union[CollectionKind, str],
        record_id: str,
    ) -> AnyRecord:
        """
        Remove a record and reverse its balance effect.

        Returns the removed record.

        Raises:
            ValidationError: If the collection name is unknown
            NotFoundError: If the id is absent, or the debt is already repaid
            InsufficientFundsError: If reversing would make a balance negative
        """
        issues: list[ValidationIssue] = []
        kind = self._validator.collection(collection, issues)
        self._validator.require(issues)

        record = state.find(kind, record_id)
        if record is None:
            raise NotFoundError(
                "Item not found for deletion.",
                collection=kind.value,
                record_id=record_id,
            )

        # A repaid debt has already been settled by its repayment;
        # reversing only the original loan would double-count it.
        if isinstance(record, Debt) and not record.is_outstanding:
            raise NotFoundError(
                f"Debt with {record.name or 'unknown'} is already repaid and cannot be deleted.",
                collection=kind.value,
                record_id=record_id,
            )

        reversal = effect_of(kind, record).inverse()
        ensure_affordable(
            state,
            reversal,
            f"Cannot delete: reversing it would make the {reversal.account.label} balance negative.",
        )

        apply_effect(state, reversal)
        state.remove(kind, record_id)
        return record
