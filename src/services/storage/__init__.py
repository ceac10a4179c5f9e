"""
Storage Services Package

Provides the durable key/value interface and its implementations.
Local files back the app; memory backs the tests.
"""

from src.services.storage.interface import (
    REMINDER_ENABLED_KEY,
    THEME_KEY,
    TRANSACTIONS_KEY,
    KeyValueStorage,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from src.services.storage.local_file import LocalFileStorage
from src.services.storage.memory import MemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Keys
    "REMINDER_ENABLED_KEY",
    "THEME_KEY",
    "TRANSACTIONS_KEY",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "LocalFileStorage",
    "MemoryStorage",
]
