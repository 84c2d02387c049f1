"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The local JSON file is the default backend; Google Sheets and in-memory
stores implement the same interface.
"""

from finance_ledger.services.storage.interface import (
    KeyValueStoreInterface,
    StorageConnectionError,
    StorageError,
)
from finance_ledger.services.storage.json_file import JsonFileKeyValueStore
from finance_ledger.services.storage.memory import InMemoryKeyValueStore
from finance_ledger.services.storage.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GoogleSheetsClient",
    "GoogleSheetsKeyValueStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
