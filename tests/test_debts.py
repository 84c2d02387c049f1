"""Tests for debt repayment."""

from datetime import date
from decimal import Decimal

import pytest

from finance_ledger.errors import InsufficientFundsError, NotFoundError, ValidationError
from finance_ledger.models import DebtStatus, ExpenseCategory, SourceType


@pytest.fixture
def lent_state(transaction_engine, make_state):
    state = make_state("500", "200")
    debt, _ = transaction_engine.add_debt(state, "lent", "100", name="Alice")
    return state, debt


@pytest.fixture
def borrowed_state(transaction_engine, make_state):
    state = make_state("100", "0")
    debt, _ = transaction_engine.add_debt(state, "borrowed", "50", name="Bob")
    return state, debt


class TestRepayLent:

    def test_credits_bank(self, debt_engine, lent_state):
        state, debt = lent_state
        repaid, account = debt_engine.repay_lent(state, debt.id, received_via="bank")

        assert account == SourceType.BANK
        assert repaid.status == DebtStatus.REPAID
        assert state.bank_balance == Decimal("300.00")
        assert state.cash_balance == Decimal("400.00")

    def test_defaults_to_cash(self, debt_engine, lent_state):
        state, debt = lent_state
        debt_engine.repay_lent(state, debt.id)
        assert state.cash_balance == Decimal("500.00")

    def test_second_repayment_rejected(self, debt_engine, lent_state):
        """A repaid debt is never credited twice."""
        state, debt = lent_state
        debt_engine.repay_lent(state, debt.id)

        with pytest.raises(NotFoundError, match="already repaid"):
            debt_engine.repay_lent(state, debt.id)
        assert state.cash_balance == Decimal("500.00")

    def test_unknown_debt(self, debt_engine, lent_state):
        state, _ = lent_state
        with pytest.raises(NotFoundError):
            debt_engine.repay_lent(state, "missing")

    def test_borrowed_id_is_not_a_lent_debt(self, debt_engine, transaction_engine, lent_state):
        state, _ = lent_state
        borrowed, _ = transaction_engine.add_debt(state, "borrowed", "5", name="Carol")
        with pytest.raises(NotFoundError):
            debt_engine.repay_lent(state, borrowed.id)

    def test_unknown_account(self, debt_engine, lent_state):
        state, debt = lent_state
        with pytest.raises(ValidationError):
            debt_engine.repay_lent(state, debt.id, received_via="wallet")
        assert debt.status == DebtStatus.OUTSTANDING


class TestRepayBorrowed:

    def test_records_expense_and_marks_repaid(self, debt_engine, borrowed_state):
        state, debt = borrowed_state
        repaid, expense = debt_engine.repay_borrowed(state, debt.id, paid_via="cash")

        assert state.cash_balance == Decimal("100.00")
        assert repaid.status == DebtStatus.REPAID
        assert state.expenses == [expense]
        assert expense.category == ExpenseCategory.DEBT_REPAYMENT.value
        assert expense.amount == Decimal("50.00")
        assert expense.location == "Bob"
        assert expense.remark == "Debt Repayment to Bob"
        assert expense.source_type == SourceType.CASH
        assert expense.date == date(2024, 6, 15)

    def test_insufficient_funds_changes_nothing(self, debt_engine, borrowed_state):
        state, debt = borrowed_state
        with pytest.raises(InsufficientFundsError, match="Insufficient Bank Balance to repay the debt!"):
            debt_engine.repay_borrowed(state, debt.id, paid_via="bank")

        assert debt.status == DebtStatus.OUTSTANDING
        assert state.expenses == []
        assert state.cash_balance == Decimal("150.00")
        assert state.bank_balance == Decimal("0.00")

    def test_second_repayment_rejected(self, debt_engine, borrowed_state):
        state, debt = borrowed_state
        debt_engine.repay_borrowed(state, debt.id)

        with pytest.raises(NotFoundError):
            debt_engine.repay_borrowed(state, debt.id)
        assert len(state.expenses) == 1
        assert state.cash_balance == Decimal("100.00")
