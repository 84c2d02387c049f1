"""Shared fixtures for Finance Ledger tests.

No test touches the real data file or a real Google account:
storage is in-memory, on tmp_path, or mocked.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from finance_ledger.config import LedgerSettings
from finance_ledger.engine import DebtLifecycleEngine, TransactionEngine
from finance_ledger.models import LedgerState
from finance_ledger.orchestrator import LedgerController
from finance_ledger.services import (
    InMemoryKeyValueStore,
    LedgerPersistenceGateway,
    StorageError,
)
from finance_ledger.validation import CommandValidator


FIXED_TODAY = date(2024, 6, 15)


class FailingStore(InMemoryKeyValueStore):
    """In-memory store whose writes can be switched to fail."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    def set(self, key: str, value: str) -> bool:
        if self.fail_writes:
            raise StorageError("disk full")
        return super().set(key, value)


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(
        currency_symbol="₹",
        digit_grouping="indian",
        future_date_tolerance_days=7,
        max_transaction_amount=10_000_000.0,
    )


@pytest.fixture
def validator(ledger_settings) -> CommandValidator:
    return CommandValidator(ledger_settings)


@pytest.fixture
def transaction_engine(validator) -> TransactionEngine:
    return TransactionEngine(validator)


@pytest.fixture
def debt_engine(validator) -> DebtLifecycleEngine:
    return DebtLifecycleEngine(validator, clock=lambda: FIXED_TODAY)


@pytest.fixture
def store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def gateway(store) -> LedgerPersistenceGateway:
    return LedgerPersistenceGateway(store, storage_key="test-ledger")


@pytest.fixture
def make_state():
    def _make(cash: str = "0", bank: str = "0") -> LedgerState:
        return LedgerState(cash_balance=Decimal(cash), bank_balance=Decimal(bank))
    return _make


@pytest.fixture
def make_controller(gateway, transaction_engine, debt_engine, ledger_settings, make_state):
    """Build a controller starting from the given balances."""
    def _make(cash: str = "0", bank: str = "0", state: Optional[LedgerState] = None) -> LedgerController:
        return LedgerController(
            gateway,
            transaction_engine=transaction_engine,
            debt_engine=debt_engine,
            ledger_settings=ledger_settings,
            initial_state=state if state is not None else make_state(cash, bank),
        )
    return _make
