"""
Persistence Gateway

Loads and saves the whole LedgerState as one JSON blob under a fixed key.

DESIGN DECISION: Loading is forgiving and saving is strict.
- A missing or unreadable snapshot is logged and reported as "nothing
  stored", so the application always starts. An unparseable snapshot is
  copied aside first.
- A failed save is raised as PersistenceError, so the caller never
  believes a change is durable when it is not.
"""

from typing import Optional

from finance_ledger.activity import ActivityLogger
from finance_ledger.config import DEFAULT_STORAGE_KEY
from finance_ledger.errors import PersistenceError
from finance_ledger.models import LedgerState
from finance_ledger.services.storage import KeyValueStoreInterface, StorageError


class LedgerPersistenceGateway:
    """Reads and writes ledger snapshots through a key-value store."""

    def __init__(
        self,
        store: KeyValueStoreInterface,
        storage_key: str = DEFAULT_STORAGE_KEY,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self._store = store
        self._key = storage_key
        self._activity = activity_logger or ActivityLogger()

    @property
    def storage_key(self) -> str:
        return self._key

    @property
    def backup_key(self) -> str:
        """Where a snapshot that failed to parse is kept."""
        return f"{self._key}.unreadable"

    def load(self) -> Optional[LedgerState]:
        """
        Return the last saved snapshot.

        Returns None on first run, and also when the stored blob cannot
        be read or parsed (the failure is logged, never raised). A blob
        that fails to parse is first copied to backup_key, so the next
        save cannot destroy it.
        """
        try:
            blob = self._store.get(self._key)
        except StorageError as e:
            self._activity.log_state_load_failed(self._key, str(e))
            return None

        if not blob:
            return None

        try:
            state = LedgerState.from_blob(blob)
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            self._activity.log_state_load_failed(self._key, str(e))
            self._preserve_unreadable(blob)
            return None

        record_count = (
            len(state.incomes) + len(state.expenses) + len(state.lent) + len(state.borrowed)
        )
        self._activity.log_state_loaded(self._key, state.schema_version, record_count)
        return state

    def _preserve_unreadable(self, blob: str) -> None:
        try:
            self._store.set(self.backup_key, blob)
        except StorageError as e:
            self._activity.log_state_load_failed(self.backup_key, str(e))
            return
        self._activity.log_state_preserved(self._key, self.backup_key)

    def save(self, state: LedgerState) -> bool:
        """
        Persist a snapshot.

        Returns:
            True if saved successfully

        Raises:
            PersistenceError: If the store rejects the write
        """
        blob = state.to_blob()
        try:
            saved = self._store.set(self._key, blob)
        except StorageError as e:
            raise PersistenceError(f"Changes could not be saved: {e}") from e

        if not saved:
            raise PersistenceError("Changes could not be saved: storage refused the write")
        return True
