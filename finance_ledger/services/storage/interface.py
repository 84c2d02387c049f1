"""
Abstract Storage Interface

DESIGN DECISION: The ledger is persisted as one opaque blob under one
fixed key, so storage only has to be a key-value store. This allows us to:
1. Swap the local JSON file for Google Sheets (or anything else)
2. Use in-memory storage for testing
3. Keep the engine decoupled from storage implementation

The interface is intentionally tiny - get, set, delete.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for key-value storage.

    Any storage implementation (JSON file, Google Sheets, etc.)
    must implement these methods. Values are strings.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The storage key

        Returns:
            The stored value, or None if the key was never written

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> bool:
        """
        Store a value under a key, replacing any previous value.

        Args:
            key: The storage key
            value: The serialized value

        Returns:
            True if saved successfully

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: The storage key

        Returns:
            True if the key existed and was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
