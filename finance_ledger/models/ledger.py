"""
Core Data Models for Finance Ledger

These models define the strict schemas for the ledger state and its records.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the same JSON layout the ledger has always used
   (camelCase keys such as cashBalance and sourceType)

DESIGN DECISION: Amounts and balances are Decimal, never float.
Balance direction is decided by the collection a record lives in and its
source type; the amount itself is always positive.
"""

import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from finance_ledger.money import ZERO, round2


SCHEMA_VERSION = 1


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SourceType(str, Enum):
    """The liquid account a transaction touches."""
    CASH = "cash"
    BANK = "bank"

    @property
    def label(self) -> str:
        return "Cash" if self is SourceType.CASH else "Bank"


class DebtStatus(str, Enum):
    """
    Debt lifecycle status.

    CRITICAL: REPAID is terminal. A repaid debt is never credited twice.
    """
    OUTSTANDING = "outstanding"
    REPAID = "repaid"


class DebtKind(str, Enum):
    """Direction of a debt: money I lent out, or money I borrowed."""
    LENT = "lent"
    BORROWED = "borrowed"


class CollectionKind(str, Enum):
    """The four record collections held by the ledger state."""
    INCOMES = "incomes"
    EXPENSES = "expenses"
    LENT = "lent"
    BORROWED = "borrowed"


class ExpenseCategory(str, Enum):
    """
    Known expense categories.

    Expense.category stays a plain string so that older data with
    free-text categories still loads; the validator warns on unknown ones.
    """
    FOOD_AND_DRINK = "Food & Drink"
    GROCERY = "Grocery"
    TRANSPORT = "Transport"
    BILLS_AND_RENT = "Bills & Rent"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    ACADEMIC_AND_STUDY = "Academic & Study"
    OTHER = "Other"
    DEBT_REPAYMENT = "Debt Repayment"


UNCATEGORIZED = "Uncategorized"

# Both debt directions settle against cash when they are created.
DEBT_ACCOUNT = SourceType.CASH


def new_id() -> str:
    """Generate a record identifier, unique with overwhelming probability."""
    return uuid4().hex


# =============================================================================
# RECORDS
# =============================================================================

class LedgerRecord(BaseModel):
    """Fields shared by every ledger record."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Identifier, unique within its collection"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Always positive; direction comes from the collection"
    )
    date: datetime.date = Field(
        default_factory=datetime.date.today,
        description="Date the transaction happened"
    )
    remark: str = Field(
        default="",
        max_length=500,
        description="Free-text note"
    )

    @field_validator('date', mode='before')
    @classmethod
    def blank_date_means_today(cls, v):
        """Older snapshots hold an empty date when the form was left blank."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return datetime.date.today()
        return v


def _legacy_source_type(v):
    """Anything other than 'cash' has always been treated as bank."""
    if isinstance(v, SourceType):
        return v
    if isinstance(v, str) and v.strip().lower() == SourceType.CASH.value:
        return SourceType.CASH
    return SourceType.BANK


class Income(LedgerRecord):
    """Money received into cash or bank."""

    source: str = Field(
        default="",
        max_length=200,
        description="Where the money came from (salary, gift, ...)"
    )
    source_type: SourceType = Field(
        default=SourceType.BANK,
        description="Account credited; missing in the oldest snapshots"
    )

    @field_validator('source_type', mode='before')
    @classmethod
    def legacy_source_type(cls, v):
        return _legacy_source_type(v)


class Expense(LedgerRecord):
    """Money spent from cash or bank."""

    category: str = Field(
        default="",
        max_length=100,
        description="Expense category, see ExpenseCategory"
    )
    location: str = Field(
        default="",
        max_length=200,
        description="Where the money was spent"
    )
    source_type: SourceType = Field(
        default=SourceType.BANK,
        description="Account debited"
    )

    @field_validator('source_type', mode='before')
    @classmethod
    def legacy_source_type(cls, v):
        return _legacy_source_type(v)


class Debt(LedgerRecord):
    """
    Money lent to or borrowed from a person.

    The same model serves both directions; membership of the
    lent or borrowed collection decides which one it is.
    """

    name: str = Field(
        default="",
        max_length=200,
        description="Counterparty name"
    )
    status: DebtStatus = Field(
        default=DebtStatus.OUTSTANDING,
        description="Lifecycle status"
    )

    @property
    def is_outstanding(self) -> bool:
        return self.status == DebtStatus.OUTSTANDING


AnyRecord = Union[Income, Expense, Debt]


# =============================================================================
# LEDGER STATE
# =============================================================================

class LedgerState(BaseModel):
    """
    The complete ledger snapshot.

    This is the single unit of persistence: it is serialized as one blob
    and stored under a fixed key. Balances are only changed through
    adjust_balance / set_balance so that rounding is never skipped.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    schema_version: int = Field(
        default=SCHEMA_VERSION,
        ge=1,
        description="Layout version of the persisted snapshot"
    )
    cash_balance: Decimal = Field(default=ZERO, ge=0)
    bank_balance: Decimal = Field(default=ZERO, ge=0)

    incomes: list[Income] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    lent: list[Debt] = Field(default_factory=list)
    borrowed: list[Debt] = Field(default_factory=list)

    @field_validator('cash_balance', 'bank_balance')
    @classmethod
    def round_loaded_balance(cls, v: Decimal) -> Decimal:
        """Older snapshots stored float balances; bring them to cents."""
        try:
            return round2(v)
        except InvalidOperation:
            raise ValueError("balance is too large to hold to the cent")

    @model_validator(mode='after')
    def check_unique_ids(self) -> "LedgerState":
        """Record ids must be unique within each collection."""
        for kind in CollectionKind:
            ids = [record.id for record in self.collection(kind)]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate record ids in {kind.value}")
        return self

    def collection(self, kind: CollectionKind) -> list:
        """Return the live list backing a collection."""
        return getattr(self, CollectionKind(kind).value)

    def find(self, kind: CollectionKind, record_id: str) -> Optional[AnyRecord]:
        """Find a record by id in a collection, or None."""
        for record in self.collection(kind):
            if record.id == record_id:
                return record
        return None

    def remove(self, kind: CollectionKind, record_id: str) -> None:
        """Drop a record from its collection."""
        setattr(
            self,
            CollectionKind(kind).value,
            [r for r in self.collection(kind) if r.id != record_id],
        )

    def balance(self, account: SourceType) -> Decimal:
        if account == SourceType.CASH:
            return self.cash_balance
        return self.bank_balance

    def set_balance(self, account: SourceType, value: Decimal) -> None:
        if account == SourceType.CASH:
            self.cash_balance = round2(value)
        else:
            self.bank_balance = round2(value)

    def adjust_balance(self, account: SourceType, delta: Decimal) -> None:
        """Add a signed delta to one account and round both balances."""
        self.set_balance(account, self.balance(account) + delta)
        self.round_balances()

    def round_balances(self) -> None:
        self.cash_balance = round2(self.cash_balance)
        self.bank_balance = round2(self.bank_balance)

    def to_blob(self) -> str:
        """Serialize to the persisted JSON layout."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_blob(cls, blob: str) -> "LedgerState":
        """Parse a persisted JSON blob."""
        return cls.model_validate_json(blob)
