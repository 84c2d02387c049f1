"""
Result Models

Validation outcomes, command outcomes and the read-only summaries
handed to views. None of these are persisted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_ledger.models.ledger import Debt, Expense, Income


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """Result of validating one command's input."""

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[str]:
        """Messages of non-blocking issues."""
        return [issue.message for issue in self.issues if issue.severity == "warning"]


# =============================================================================
# COMMAND MODELS
# =============================================================================

class ErrorKind(str, Enum):
    """Typed failure reported back to the UI layer."""
    VALIDATION = "validation"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


class CommandResult(BaseModel):
    """
    Outcome of one ledger command.

    Every command returns one of these; failures are never raised
    past the controller.
    """

    command_id: UUID = Field(
        default_factory=uuid4,
        description="Correlation id used in the logs for this command"
    )
    command: str = Field(
        ...,
        description="Name of the command that ran"
    )
    executed_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    success: bool
    message: str = Field(
        default="",
        description="Human-readable summary for the user"
    )
    error_kind: Optional[ErrorKind] = None
    record_id: Optional[str] = Field(
        default=None,
        description="Id of the record created or affected, if any"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking validation warnings"
    )


# =============================================================================
# READ MODELS
# =============================================================================

class LedgerSummary(BaseModel):
    """Aggregates derived from the current state. Never stored."""

    cash_balance: Decimal
    bank_balance: Decimal
    total_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    outstanding_lent: Decimal
    outstanding_borrowed: Decimal
    expense_by_category: dict[str, Decimal] = Field(default_factory=dict)


class LedgerViews(BaseModel):
    """Record lists in display order (newest first)."""

    incomes: list[Income] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    outstanding_lent: list[Debt] = Field(default_factory=list)
    outstanding_borrowed: list[Debt] = Field(default_factory=list)
