"""
Main Orchestrator for Finance Ledger

This module ties together all the components and exposes the command
surface used by the UI layer:

    set_balances, add_income, add_expense, add_debt,
    delete_transaction, repay_lent, repay_borrowed

DESIGN DECISION: The controller enforces the boundaries:
- Each command runs against a copy of the state
- The copy replaces the current state only after it has been saved
- Views are notified only after a durable change

So a rejected command, or one whose save failed, leaves the ledger
exactly as it was before the command.
"""

from typing import Callable, Optional, Union

from finance_ledger.activity import ActivityLogger, configure_logging, create_correlation_id
from finance_ledger.config import LedgerSettings, Settings, get_settings
from finance_ledger.engine import DebtLifecycleEngine, TransactionEngine
from finance_ledger.errors import LedgerError, PersistenceError
from finance_ledger.models import (
    CollectionKind,
    CommandResult,
    DebtKind,
    LedgerState,
    LedgerSummary,
    LedgerViews,
    SourceType,
)
from finance_ledger.money import format_currency
from finance_ledger.queries import build_views, summarize
from finance_ledger.services import (
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    LedgerPersistenceGateway,
)
from finance_ledger.validation import CommandValidator


Observer = Callable[[LedgerState], None]

# A mutation returns (user message, affected record id, warnings)
Mutation = Callable[[LedgerState], tuple[str, Optional[str], list[str]]]


class LedgerController:
    """
    Owns the ledger state and runs commands against it.

    Flow for every command:
    1. Copy the current state
    2. Engine validates and mutates the copy (or raises)
    3. Gateway saves the copy (or raises PersistenceError)
    4. The copy becomes the current state
    5. Observers are notified with the new state
    """

    def __init__(
        self,
        gateway: LedgerPersistenceGateway,
        transaction_engine: Optional[TransactionEngine] = None,
        debt_engine: Optional[DebtLifecycleEngine] = None,
        activity_logger: Optional[ActivityLogger] = None,
        ledger_settings: Optional[LedgerSettings] = None,
        initial_state: Optional[LedgerState] = None,
    ):
        self._gateway = gateway
        self._settings = ledger_settings or get_settings().ledger

        validator = CommandValidator(self._settings)
        self._transactions = transaction_engine or TransactionEngine(validator)
        self._debts = debt_engine or DebtLifecycleEngine(validator)
        self._activity = activity_logger or ActivityLogger()

        if initial_state is None:
            initial_state = gateway.load() or LedgerState()
        self._state = initial_state
        self._observers: list[Observer] = []

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        """A copy of the current state; mutating it has no effect."""
        return self._state.model_copy(deep=True)

    def summary(self) -> LedgerSummary:
        return summarize(self._state)

    def views(self) -> LedgerViews:
        return build_views(self.state)

    def format_amount(self, amount: object) -> str:
        return format_currency(
            amount,
            symbol=self._settings.currency_symbol,
            grouping=self._settings.digit_grouping,
        )

    # -------------------------------------------------------------------------
    # Observers
    # -------------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a callback run with the new state after every
        successful command. Returns a function that unsubscribes it.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self.state)
            except Exception as e:
                # A broken view must not undo a saved command
                self._activity.log_observer_failed(
                    getattr(observer, "__qualname__", repr(observer)),
                    str(e),
                )

    # -------------------------------------------------------------------------
    # Command execution
    # -------------------------------------------------------------------------

    def _execute(self, command: str, mutate: Mutation) -> CommandResult:
        command_id = create_correlation_id()
        working = self._state.model_copy(deep=True)

        try:
            message, record_id, warnings = mutate(working)
            self._gateway.save(working)
        except PersistenceError as e:
            self._activity.log_persistence_failed(command, command_id, str(e))
            return CommandResult(
                command_id=command_id,
                command=command,
                success=False,
                message=str(e),
                error_kind=e.kind,
            )
        except LedgerError as e:
            self._activity.log_command_rejected(command, command_id, e.kind.value, str(e))
            return CommandResult(
                command_id=command_id,
                command=command,
                success=False,
                message=str(e),
                error_kind=e.kind,
            )

        self._state = working
        self._activity.log_command_succeeded(command, command_id, record_id, warnings)
        self._notify()

        return CommandResult(
            command_id=command_id,
            command=command,
            success=True,
            message=message,
            record_id=record_id,
            warnings=warnings,
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def set_balances(self, cash: object, bank: object) -> CommandResult:
        """Manually overwrite the cash and bank balances."""
        def mutate(state: LedgerState):
            result = self._transactions.set_balances(state, cash, bank)
            return "Balances updated successfully!", None, result.warnings

        return self._execute("set_balances", mutate)

    def add_income(
        self,
        amount: object,
        date: object = None,
        source: str = "",
        remark: str = "",
        source_type: Union[SourceType, str] = SourceType.CASH,
    ) -> CommandResult:
        def mutate(state: LedgerState):
            income, result = self._transactions.add_income(
                state, amount, date, source, remark, source_type
            )
            target = "Cash" if income.source_type == SourceType.CASH else "Bank Balance"
            message = f"Income of {self.format_amount(income.amount)} added to {target}."
            return message, income.id, result.warnings

        return self._execute("add_income", mutate)

    def add_expense(
        self,
        amount: object,
        date: object = None,
        category: str = "",
        location: str = "",
        remark: str = "",
        source_type: Union[SourceType, str] = SourceType.CASH,
    ) -> CommandResult:
        def mutate(state: LedgerState):
            expense, result = self._transactions.add_expense(
                state, amount, date, category, location, remark, source_type
            )
            message = (
                f"Expense of {self.format_amount(expense.amount)} "
                f"deducted from {expense.source_type.label}."
            )
            return message, expense.id, result.warnings

        return self._execute("add_expense", mutate)

    def add_debt(
        self,
        kind: Union[DebtKind, str],
        amount: object,
        date: object = None,
        name: str = "",
        remark: str = "",
    ) -> CommandResult:
        """Record money lent or borrowed; both directions use cash."""
        def mutate(state: LedgerState):
            debt, result = self._transactions.add_debt(state, kind, amount, date, name, remark)
            if DebtKind(kind) == DebtKind.LENT:
                message = f"{self.format_amount(debt.amount)} lent to {debt.name}. Cash deducted."
            else:
                message = f"{self.format_amount(debt.amount)} borrowed from {debt.name}. Cash added."
            return message, debt.id, result.warnings

        return self._execute("add_debt", mutate)

    def delete_transaction(
        self,
        collection: Union[CollectionKind, str],
        record_id: str,
    ) -> CommandResult:
        def mutate(state: LedgerState):
            record = self._transactions.delete_transaction(state, collection, record_id)
            return "Record deleted and balances reversed successfully!", record.id, []

        return self._execute("delete_transaction", mutate)

    def repay_lent(
        self,
        debt_id: str,
        received_via: Union[SourceType, str] = SourceType.CASH,
    ) -> CommandResult:
        def mutate(state: LedgerState):
            debt, account = self._debts.repay_lent(state, debt_id, received_via)
            message = f"Repayment of {self.format_amount(debt.amount)} added to {account.label} balance!"
            return message, debt.id, []

        return self._execute("repay_lent", mutate)

    def repay_borrowed(
        self,
        debt_id: str,
        paid_via: Union[SourceType, str] = SourceType.CASH,
    ) -> CommandResult:
        def mutate(state: LedgerState):
            debt, expense = self._debts.repay_borrowed(state, debt_id, paid_via)
            message = (
                f"Debt repaid and {self.format_amount(debt.amount)} "
                f"deducted from {expense.source_type.label}."
            )
            return message, debt.id, []

        return self._execute("repay_borrowed", mutate)


def create_store(settings: Optional[Settings] = None) -> KeyValueStoreInterface:
    """Build the key-value store selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    backend = settings.storage.backend

    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "google_sheets":
        return GoogleSheetsKeyValueStore()
    return JsonFileKeyValueStore(settings.storage.data_path)


def create_app_components(
    store: Optional[KeyValueStoreInterface] = None,
    settings: Optional[Settings] = None,
) -> tuple[LedgerController, KeyValueStoreInterface]:
    """
    Factory function to create all application components.

    Args:
        store: Key-value store to use. Defaults to the configured backend.
        settings: Settings to use. Defaults to get_settings().

    Returns:
        (controller, store)
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    ledger_settings = settings.ledger
    store = store or create_store(settings)
    activity_logger = ActivityLogger()

    gateway = LedgerPersistenceGateway(
        store,
        storage_key=settings.storage.storage_key,
        activity_logger=activity_logger,
    )

    controller = LedgerController(
        gateway,
        activity_logger=activity_logger,
        ledger_settings=ledger_settings,
    )

    return controller, store
