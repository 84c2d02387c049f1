"""
Ledger Errors

Every rejected command raises one of these before any mutation happens.
The controller turns them into failed CommandResults.
"""

from decimal import Decimal
from typing import Optional

from finance_ledger.models import ErrorKind, ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger commands."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(LedgerError):
    """Malformed or out-of-range command input."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class InsufficientFundsError(LedgerError):
    """A debit exceeds the balance of the account it draws on."""

    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(
        self,
        message: str,
        account: str,
        requested: Decimal,
        available: Decimal,
    ):
        super().__init__(message)
        self.account = account
        self.requested = requested
        self.available = available


class NotFoundError(LedgerError):
    """Record id absent from its collection, or debt already repaid."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, collection: str, record_id: str):
        super().__init__(message)
        self.collection = collection
        self.record_id = record_id


class PersistenceError(LedgerError):
    """The snapshot could not be written to storage."""

    kind = ErrorKind.PERSISTENCE
