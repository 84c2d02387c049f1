"""
Tests for Finance Ledger

Test strategy:
1. Unit tests for individual components (models, money, validators)
2. Engine tests against plain LedgerState objects
3. Controller tests with in-memory storage (no real files or APIs)
"""

import json
import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError as SchemaError

from finance_ledger.models import (
    SCHEMA_VERSION,
    CollectionKind,
    CommandResult,
    Debt,
    DebtStatus,
    ErrorKind,
    Expense,
    ExpenseCategory,
    Income,
    LedgerState,
    SourceType,
    ValidationIssue,
    ValidationResult,
    new_id,
)


class TestRecordModels:
    """Tests for ledger record models."""

    def test_income_creation(self):
        """Test Income model creation."""
        income = Income(
            amount=Decimal("500.00"),
            date=date(2024, 5, 1),
            source="Salary",
            source_type=SourceType.BANK,
        )
        assert income.amount == Decimal("500.00")
        assert income.source_type == SourceType.BANK
        assert income.id

    def test_income_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        income = Income(amount=Decimal("1"), source="  Gift  ", source_type="cash")
        assert income.source == "Gift"

    def test_record_rejects_zero_amount(self):
        """Test that amounts must be strictly positive."""
        with pytest.raises(SchemaError):
            Expense(amount=Decimal("0"), category="Other", source_type="cash")

    def test_record_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(SchemaError):
            Income(amount=Decimal("-100"), source_type="cash")

    def test_record_date_defaults_to_today(self):
        """Test that a missing date means today."""
        debt = Debt(amount=Decimal("10"), name="Alice")
        assert debt.date == date.today()

    def test_debt_defaults_to_outstanding(self):
        """Test that new debts are outstanding."""
        debt = Debt(amount=Decimal("100"), name="Alice")
        assert debt.status == DebtStatus.OUTSTANDING
        assert debt.is_outstanding is True

    def test_ids_are_unique(self):
        """Test that generated ids do not repeat."""
        ids = {new_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_source_type_labels(self):
        """Test account labels used in user messages."""
        assert SourceType.CASH.label == "Cash"
        assert SourceType.BANK.label == "Bank"


class TestLedgerState:
    """Tests for the LedgerState snapshot."""

    def test_zero_state(self):
        """Test the state used on first run."""
        state = LedgerState()
        assert state.cash_balance == Decimal("0")
        assert state.bank_balance == Decimal("0")
        assert state.incomes == []
        assert state.schema_version == SCHEMA_VERSION

    def test_blob_uses_camel_case_keys(self):
        """Test the persisted layout keeps the historical key names."""
        state = LedgerState(cash_balance=Decimal("10"))
        state.incomes.append(Income(id="i1", amount=Decimal("5"), source_type="bank"))

        data = json.loads(state.to_blob())

        assert "cashBalance" in data
        assert "bankBalance" in data
        assert "schemaVersion" in data
        assert data["incomes"][0]["sourceType"] == "bank"

    def test_blob_round_trip(self):
        """Test that a snapshot reloads field-for-field."""
        state = LedgerState(cash_balance=Decimal("700.00"), bank_balance=Decimal("12.34"))
        state.expenses.append(Expense(
            id="e1",
            amount=Decimal("300.00"),
            date=date(2024, 3, 2),
            category=ExpenseCategory.GROCERY.value,
            location="Market",
            source_type=SourceType.CASH,
        ))
        state.lent.append(Debt(id="d1", amount=Decimal("50"), name="Alice"))

        assert LedgerState.from_blob(state.to_blob()) == state

    def test_loads_legacy_blob_with_floats(self):
        """Test a snapshot written before schema versions and decimals."""
        legacy = json.dumps({
            "bankBalance": 200,
            "cashBalance": 0.30000000000000004,
            "incomes": [{
                "id": "lq3k9x",
                "amount": 500,
                "date": "2024-01-05",
                "source": "Job",
                "remark": "",
                "sourceType": "bank",
            }],
            "expenses": [],
            "lent": [{
                "id": "abc",
                "amount": 100,
                "date": "2024-01-06",
                "name": "Alice",
                "remark": "",
                "status": "repaid",
            }],
            "borrowed": [],
        })

        state = LedgerState.from_blob(legacy)

        assert state.schema_version == SCHEMA_VERSION
        assert state.cash_balance == Decimal("0.30")
        assert state.bank_balance == Decimal("200.00")
        assert state.incomes[0].source_type == SourceType.BANK
        assert state.lent[0].status == DebtStatus.REPAID

    def test_legacy_income_without_source_type(self):
        """Test that incomes saved before accounts existed count as bank."""
        legacy = json.dumps({
            "cashBalance": 0,
            "bankBalance": 500,
            "incomes": [{"id": "x1", "amount": 500, "date": "2023-12-01", "source": "Job"}],
        })

        state = LedgerState.from_blob(legacy)

        assert state.incomes[0].source_type == SourceType.BANK

    @pytest.mark.parametrize("raw,expected", [
        ("cash", SourceType.CASH),
        ("Cash", SourceType.CASH),
        ("bank", SourceType.BANK),
        ("upi", SourceType.BANK),
        (None, SourceType.BANK),
    ])
    def test_stored_source_type_normalization(self, raw, expected):
        """Test that anything other than cash is read as bank."""
        expense = Expense.model_validate({"amount": 1, "category": "Other", "sourceType": raw})
        assert expense.source_type == expected

    def test_blank_date_loads_as_today(self):
        """Test that a record saved with an empty date still loads."""
        legacy = json.dumps({
            "expenses": [{"id": "e1", "amount": 3, "date": "", "category": "Other", "sourceType": "cash"}],
        })

        state = LedgerState.from_blob(legacy)

        assert state.expenses[0].date == date.today()

    def test_negative_balance_rejected(self):
        """Test that a snapshot can never carry a negative balance."""
        with pytest.raises(SchemaError):
            LedgerState.from_blob(json.dumps({"cashBalance": -1}))

    def test_oversized_balance_rejected(self):
        """Test that a balance too large to hold to the cent is a schema error."""
        with pytest.raises(SchemaError):
            LedgerState.from_blob(json.dumps({"bankBalance": "1e30"}))

    def test_duplicate_ids_rejected(self):
        """Test that ids must be unique within a collection."""
        duplicated = json.dumps({
            "lent": [
                {"id": "d1", "amount": 5, "name": "Alice"},
                {"id": "d1", "amount": 7, "name": "Bob"},
            ],
        })
        with pytest.raises(SchemaError, match="Duplicate record ids in lent"):
            LedgerState.from_blob(duplicated)

    def test_same_id_in_different_collections_is_allowed(self):
        """Test that uniqueness is per collection."""
        state = LedgerState.from_blob(json.dumps({
            "lent": [{"id": "d1", "amount": 5}],
            "borrowed": [{"id": "d1", "amount": 5}],
        }))
        assert len(state.lent) == len(state.borrowed) == 1

    def test_adjust_balance_rounds(self):
        """Test that every adjustment lands on whole cents."""
        state = LedgerState()
        state.adjust_balance(SourceType.CASH, Decimal("0.1"))
        state.adjust_balance(SourceType.CASH, Decimal("0.2"))
        assert state.cash_balance == Decimal("0.30")

    def test_find_and_remove(self):
        """Test record lookup by collection kind."""
        state = LedgerState()
        state.borrowed.append(Debt(id="b1", amount=Decimal("5"), name="Bob"))

        assert state.find(CollectionKind.BORROWED, "b1").name == "Bob"
        assert state.find(CollectionKind.LENT, "b1") is None

        state.remove(CollectionKind.BORROWED, "b1")
        assert state.borrowed == []

    def test_collection_accepts_plain_string(self):
        """Test that collection names coerce to CollectionKind."""
        state = LedgerState()
        assert state.collection("expenses") is state.expenses


class TestResultModels:
    """Tests for validation and command result models."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ),
        ])
        assert result.has_errors is True
        assert result.is_valid is False
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="date",
                issue_type="future_date",
                message="Date in future",
                severity="warning",
            ),
        ])
        assert result.has_errors is False
        assert result.warnings == ["Date in future"]

    def test_validation_issue_severity_pattern(self):
        """Test that unknown severities are rejected."""
        with pytest.raises(SchemaError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")

    def test_command_result_failure(self):
        """Test a failed command result."""
        result = CommandResult(
            command="add_expense",
            success=False,
            message="Insufficient Cash Balance!",
            error_kind=ErrorKind.INSUFFICIENT_FUNDS,
        )
        assert result.error_kind.value == "insufficient_funds"
        assert result.record_id is None


class TestExpenseCategories:
    """Tests for expense category enum."""

    def test_all_categories_exist(self):
        """Test that expected categories exist."""
        expected = [
            "Food & Drink", "Grocery", "Transport", "Bills & Rent",
            "Shopping", "Entertainment", "Health", "Academic & Study",
            "Other", "Debt Repayment",
        ]
        for cat in expected:
            assert ExpenseCategory(cat) is not None

    def test_category_values(self):
        """Test category string values."""
        assert ExpenseCategory.DEBT_REPAYMENT.value == "Debt Repayment"
        assert ExpenseCategory.GROCERY.value == "Grocery"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
