"""Services package."""

from src.services.storage import (
    KeyValueStorage,
    LocalFileStorage,
    MemoryStorage,
    QuotaExceededError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Storage services
    "KeyValueStorage",
    "LocalFileStorage",
    "MemoryStorage",
    "QuotaExceededError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
