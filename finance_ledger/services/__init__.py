"""Services package."""

from finance_ledger.services.persistence import LedgerPersistenceGateway
from finance_ledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Persistence
    "LedgerPersistenceGateway",
    # Storage services
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "StorageConnectionError",
    "StorageError",
]
