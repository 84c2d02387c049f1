"""
Data Models Package

This package contains all Pydantic models used by the Finance Ledger.
All data flowing through the system must conform to these schemas.
"""

from finance_ledger.models.ledger import (
    DEBT_ACCOUNT,
    SCHEMA_VERSION,
    UNCATEGORIZED,
    AnyRecord,
    CollectionKind,
    Debt,
    DebtKind,
    DebtStatus,
    Expense,
    ExpenseCategory,
    Income,
    LedgerRecord,
    LedgerState,
    SourceType,
    new_id,
)
from finance_ledger.models.results import (
    CommandResult,
    ErrorKind,
    LedgerSummary,
    LedgerViews,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Ledger models
    "DEBT_ACCOUNT",
    "SCHEMA_VERSION",
    "UNCATEGORIZED",
    "AnyRecord",
    "CollectionKind",
    "Debt",
    "DebtKind",
    "DebtStatus",
    "Expense",
    "ExpenseCategory",
    "Income",
    "LedgerRecord",
    "LedgerState",
    "SourceType",
    "new_id",
    # Result models
    "CommandResult",
    "ErrorKind",
    "LedgerSummary",
    "LedgerViews",
    "ValidationIssue",
    "ValidationResult",
]
