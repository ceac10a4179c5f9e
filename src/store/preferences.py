"""
User Preferences

Two small values kept next to the transactions in durable storage:
- "theme": "light" or "dark"
- "expense-manager-daily-reminder-enabled": "true" or "false"

Each value is read from storage once and then held in memory. Anything
unreadable or unrecognised falls back to the default (light theme,
reminder off). Failed writes are logged and reported through the return
value; the in-memory value still changes, so the session keeps what the
user chose and in_sync turns False until the next successful write.
"""

from enum import Enum
from typing import Optional

from src.audit import AuditLogger
from src.services.storage import (
    REMINDER_ENABLED_KEY,
    THEME_KEY,
    KeyValueStorage,
    StorageError,
)


class Theme(str, Enum):
    """Color scheme."""
    LIGHT = "light"
    DARK = "dark"

    def toggled(self) -> "Theme":
        return Theme.DARK if self == Theme.LIGHT else Theme.LIGHT


class PreferencesStore:
    """Reads and writes user preferences."""

    def __init__(
        self,
        storage: KeyValueStorage,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._theme: Optional[Theme] = None
        self._reminder_enabled: Optional[bool] = None
        self._in_sync = True

    @property
    def in_sync(self) -> bool:
        """False when the last write failed and storage lags behind memory."""
        return self._in_sync

    def _read(self, key: str) -> Optional[str]:
        try:
            return self._storage.get_item(key)
        except StorageError as e:
            self._audit_logger.log_storage_read_failed(key, str(e))
            return None

    def _write(self, key: str, value: str) -> bool:
        try:
            self._storage.set_item(key, value)
        except StorageError as e:
            self._in_sync = False
            self._audit_logger.log_storage_write_failed(key, str(e))
            return False
        self._in_sync = True
        return True

    # Theme

    def get_theme(self) -> Theme:
        if self._theme is None:
            try:
                self._theme = Theme(self._read(THEME_KEY))
            except ValueError:
                self._theme = Theme.LIGHT
        return self._theme

    def set_theme(self, theme: Theme) -> bool:
        self._theme = Theme(theme)
        saved = self._write(THEME_KEY, self._theme.value)
        self._audit_logger.log_theme_changed(self._theme.value)
        return saved

    def toggle_theme(self) -> Theme:
        """Flip between light and dark and return the new theme."""
        theme = self.get_theme().toggled()
        self.set_theme(theme)
        return theme

    # Daily reminder

    def is_reminder_enabled(self) -> bool:
        if self._reminder_enabled is None:
            self._reminder_enabled = self._read(REMINDER_ENABLED_KEY) == "true"
        return self._reminder_enabled

    def set_reminder_enabled(self, enabled: bool) -> bool:
        self._reminder_enabled = enabled
        saved = self._write(REMINDER_ENABLED_KEY, "true" if enabled else "false")
        self._audit_logger.log_reminder_toggled(enabled)
        return saved
