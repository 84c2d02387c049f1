"""
Command Input Validation

DESIGN DECISION: Validation collects issues instead of stopping at the
first one, so the user sees everything wrong with a form at once.

ERRORS block the command (bad amount, missing category, unknown account).
WARNINGS never block; they are returned with the result for the user to
double-check (future dates, unusual amounts, unknown categories).

IMPORTANT: Validation NEVER silently fixes issues beyond normalizing
amounts to whole cents.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from finance_ledger.config import LedgerSettings, get_settings
from finance_ledger.errors import ValidationError
from finance_ledger.models import (
    CollectionKind,
    DebtKind,
    ExpenseCategory,
    SourceType,
    ValidationIssue,
    ValidationResult,
)
from finance_ledger.money import MAX_AMOUNT, format_currency, parse_amount


KNOWN_CATEGORIES = {category.value for category in ExpenseCategory}


class CommandValidator:
    """
    Validates raw command input coming from the UI layer.

    Each check returns the parsed value (or None) and appends any
    issues to the list it is given. Call require() once all checks
    have run to raise on errors.
    """

    def __init__(self, settings: Optional[LedgerSettings] = None):
        self._settings = settings or get_settings().ledger

    def amount(
        self,
        value: object,
        issues: list[ValidationIssue],
        field: str = "amount",
        allow_zero: bool = False,
    ) -> Optional[Decimal]:
        """Parse an amount; must be numeric and positive (or >= 0 if allow_zero)."""
        parsed = parse_amount(value)

        if parsed is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message=f"Invalid {field.replace('_', ' ')} entered: {value!r} is not a valid amount",
                severity="error",
            ))
            return None

        if parsed > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field=field,
                issue_type="too_large",
                message=(
                    f"{field.replace('_', ' ').capitalize()} cannot exceed "
                    f"{format_currency(MAX_AMOUNT, self._settings.currency_symbol, self._settings.digit_grouping)}"
                ),
                severity="error",
            ))
            return None

        if parsed < 0 or (parsed == 0 and not allow_zero):
            bound = "zero or more" if allow_zero else "greater than zero"
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"{field.replace('_', ' ').capitalize()} must be {bound}",
                severity="error",
            ))
            return None

        max_amount = Decimal(str(self._settings.max_transaction_amount))
        if parsed > max_amount:
            issues.append(ValidationIssue(
                field=field,
                issue_type="suspicious_value",
                message=(
                    f"Amount ({format_currency(parsed, self._settings.currency_symbol, self._settings.digit_grouping)}) "
                    "seems unusually high"
                ),
                severity="warning",
            ))

        return parsed

    def account(
        self,
        value: object,
        issues: list[ValidationIssue],
        field: str = "source_type",
    ) -> Optional[SourceType]:
        """Resolve 'cash' / 'bank' into a SourceType."""
        try:
            if isinstance(value, str):
                value = value.strip().lower()
            return SourceType(value)
        except ValueError:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message=f"Unknown account {value!r}; expected 'cash' or 'bank'",
                severity="error",
            ))
            return None

    def transaction_date(
        self,
        value: object,
        issues: list[ValidationIssue],
        field: str = "date",
    ) -> Optional[date]:
        """
        Parse a transaction date.

        Accepts a date, a datetime or an ISO 'YYYY-MM-DD' string.
        An empty value means today, as the entry forms default to it.
        """
        today = date.today()

        if value is None or value == "":
            return today
        if isinstance(value, datetime):
            parsed = value.date()
        elif isinstance(value, date):
            parsed = value
        else:
            try:
                parsed = date.fromisoformat(str(value).strip())
            except ValueError:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_format",
                    message=f"Invalid date {value!r}; expected YYYY-MM-DD",
                    severity="error",
                ))
                return None

        max_future = today + timedelta(days=self._settings.future_date_tolerance_days)
        if parsed > max_future:
            issues.append(ValidationIssue(
                field=field,
                issue_type="future_date",
                message=f"Date ({parsed}) is in the future",
                severity="warning",
            ))

        return parsed

    def category(self, value: object, issues: list[ValidationIssue]) -> Optional[str]:
        """Expense category is required; unknown categories only warn."""
        if isinstance(value, ExpenseCategory):
            return value.value

        text = str(value).strip() if value is not None else ""
        if not text:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please select an expense category",
                severity="error",
            ))
            return None

        if text not in KNOWN_CATEGORIES:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"Category '{text}' is not one of the standard categories",
                severity="warning",
            ))
        return text

    def collection(
        self,
        value: object,
        issues: list[ValidationIssue],
    ) -> Optional[CollectionKind]:
        try:
            return CollectionKind(value)
        except ValueError:
            issues.append(ValidationIssue(
                field="collection",
                issue_type="invalid_value",
                message=f"Invalid list type: {value!r}",
                severity="error",
            ))
            return None

    def debt_kind(
        self,
        value: object,
        issues: list[ValidationIssue],
    ) -> Optional[DebtKind]:
        try:
            return DebtKind(value)
        except ValueError:
            issues.append(ValidationIssue(
                field="kind",
                issue_type="invalid_value",
                message=f"Unknown debt type {value!r}; expected 'lent' or 'borrowed'",
                severity="error",
            ))
            return None

    @staticmethod
    def text(value: object) -> str:
        """Normalize an optional free-text field."""
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def require(issues: list[ValidationIssue]) -> ValidationResult:
        """
        Finish validation.

        Raises:
            ValidationError: If any error-level issue was found
        """
        result = ValidationResult(issues=issues)
        if result.has_errors:
            message = "; ".join(issue.message for issue in result.errors)
            raise ValidationError(message, issues=result.issues)
        return result
