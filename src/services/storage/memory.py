"""
In-Memory Storage Implementation

Dict-backed KeyValueStorage for tests and for running the app
without touching the disk. Read and write failures can be switched
on to exercise the fail-soft paths of the store.
"""

from typing import Optional

from src.services.storage.interface import (
    KeyValueStorage,
    QuotaExceededError,
    StorageReadError,
    StorageWriteError,
)


class MemoryStorage(KeyValueStorage):
    """Volatile implementation of KeyValueStorage."""

    def __init__(
        self,
        initial: Optional[dict[str, str]] = None,
        quota_bytes: Optional[int] = None,
    ):
        self._items: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes
        self.fail_reads = False
        self.fail_writes = False
        self.write_count = 0

    def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageReadError(f"Simulated read failure for '{key}'")
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Simulated write failure for '{key}'")

        if self._quota_bytes is not None:
            used = sum(
                len(v.encode("utf-8"))
                for k, v in self._items.items()
                if k != key
            )
            size = len(value.encode("utf-8"))
            if used + size > self._quota_bytes:
                raise QuotaExceededError(
                    f"Storing {size} bytes under '{key}' would exceed "
                    f"the {self._quota_bytes} byte quota"
                )

        self._items[key] = value
        self.write_count += 1

    def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Simulated write failure for '{key}'")
        self._items.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Copy of everything currently stored."""
        return dict(self._items)
