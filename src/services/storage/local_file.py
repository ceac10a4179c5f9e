"""
Local File Storage Implementation

Each key is stored as one UTF-8 file inside a data directory:

    .expense_manager/
        expense-manager-transactions
        theme
        expense-manager-daily-reminder-enabled

Writes go to a temporary file in the same directory and are moved
into place with os.replace, so a crash mid-write leaves the previous
value intact. A byte quota over the whole directory stands in for the
browser's localStorage limit.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from src.services.storage.interface import (
    KeyValueStorage,
    QuotaExceededError,
    StorageReadError,
    StorageWriteError,
)


_VALID_KEY = re.compile(r"^[A-Za-z0-9._-]+$")
_TEMP_SUFFIX = ".tmp"


class LocalFileStorage(KeyValueStorage):
    """
    File-per-key implementation of KeyValueStorage.

    The directory is created on first write.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        quota_bytes: Optional[int] = None,
    ):
        """
        Initialize file storage.

        Args:
            data_dir: Directory holding the key files
            quota_bytes: Maximum total size of all values.
                         None disables the check.
        """
        self._data_dir = Path(data_dir)
        self._quota_bytes = quota_bytes

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._data_dir / key

    def _used_bytes(self, excluding: Path) -> int:
        """Total size of stored values, not counting the key being replaced."""
        if not self._data_dir.is_dir():
            return 0
        total = 0
        for entry in self._data_dir.iterdir():
            if entry == excluding or entry.name.endswith(_TEMP_SUFFIX):
                continue
            if entry.is_file():
                total += entry.stat().st_size
        return total

    def get_item(self, key: str) -> Optional[str]:
        """Read a key's file; a missing file means the key is absent."""
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        """Atomically replace a key's file."""
        path = self._path_for(key)
        data = value.encode("utf-8")

        if self._quota_bytes is not None:
            try:
                used = self._used_bytes(excluding=path)
            except OSError as e:
                raise StorageWriteError(f"Failed to measure {self._data_dir}: {e}") from e
            if used + len(data) > self._quota_bytes:
                raise QuotaExceededError(
                    f"Storing {len(data)} bytes under '{key}' would exceed "
                    f"the {self._quota_bytes} byte quota ({used} bytes in use)"
                )

        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{key}.",
                suffix=_TEMP_SUFFIX,
            )
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def remove_item(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {path}: {e}") from e
