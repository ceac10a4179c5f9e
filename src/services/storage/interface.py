"""
Abstract Storage Interface

Durable storage is a small synchronous key/value contract, the same
shape as a browser's localStorage: string keys, string values,
read and written whole.

This allows us to:
1. Keep the store and preferences independent of the backend
2. Use in-memory storage for testing
3. Simulate quota and I/O failures deterministically

Values are opaque strings here. Encoding them (JSON for the
transaction list, plain words for preferences) is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Optional


# Well-known keys
TRANSACTIONS_KEY = "expense-manager-transactions"
THEME_KEY = "theme"
REMINDER_ENABLED_KEY = "expense-manager-daily-reminder-enabled"


class KeyValueStorage(ABC):
    """
    Abstract interface for durable key/value storage.

    Any storage implementation (files, memory, sqlite, etc.)
    must implement these methods.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous value.

        Args:
            key: Storage key
            value: String to store

        Raises:
            QuotaExceededError: If the value does not fit
            StorageWriteError: If the backend cannot be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is a no-op.

        Raises:
            StorageWriteError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written."""
    pass


class QuotaExceededError(StorageWriteError):
    """Writing would exceed the storage quota."""
    pass
