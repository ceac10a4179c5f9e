"""
Main Orchestrator for Expense Manager

This module ties together all the components and defines the
flows the screens call into:
1. Transactions (form → validate → build → upsert; delete)
2. Reports (totals, search/filter, category breakdown, CSV export)
3. Settings (theme, daily reminder)

The orchestrator enforces the boundaries:
- Nothing reaches the store without passing validation
- Every mutation is audited
- Screens never touch storage directly
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Optional, Union

from src.audit import AuditLogger
from src.config import Settings, get_settings
from src.export import export_filename, to_csv, write_csv
from src.models.transaction import (
    ALL_CATEGORIES,
    Category,
    CategoryTotal,
    Totals,
    Transaction,
    TransactionDraft,
    ValidationResult,
)
from src.queries import category_breakdown, filter_transactions, totals
from src.reminders import DailyReminder, ReminderNotification
from src.services.storage import KeyValueStorage, LocalFileStorage
from src.store import PreferencesStore, Theme, TransactionStore
from src.validation import TransactionValidator, new_transaction_id


Notifier = Callable[[ReminderNotification], None]


class TransactionFlow:
    """
    Orchestrates adding, editing and deleting transactions.

    Flow:
    1. Form → TransactionDraft
    2. Validate → field-level issues back to the form
    3. Build → Transaction with a new id, or the edited one's id
    4. Save → store.upsert
    """

    def __init__(
        self,
        store: TransactionStore,
        validator: Optional[TransactionValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        id_factory: Callable[[], str] = new_transaction_id,
    ):
        self._store = store
        self._validator = validator or TransactionValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._id_factory = id_factory

    def submit(
        self,
        draft: TransactionDraft,
        existing_id: Optional[str] = None,
    ) -> tuple[ValidationResult, Optional[Transaction]]:
        """
        Validate a form submission and save it.

        Args:
            draft: Form input
            existing_id: Id of the transaction being edited, None to add

        Returns:
            (validation, transaction). transaction is None when
            validation failed and nothing was saved.
        """
        validation = self._validator.validate(draft)

        if not validation.is_valid:
            self._audit_logger.log_validation_failed(
                [issue.model_dump() for issue in validation.issues]
            )
            return validation, None

        transaction = self._validator.build(
            draft,
            transaction_id=existing_id or self._id_factory(),
        )
        self._store.upsert(transaction)
        return validation, transaction

    def delete(self, transaction_id: str) -> None:
        self._store.delete(transaction_id)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._store.get(transaction_id)

    def draft_for(self, transaction_id: Optional[str]) -> TransactionDraft:
        """Form contents for editing, or an empty form for adding."""
        existing = self._store.get(transaction_id) if transaction_id else None
        if existing is None:
            return TransactionDraft()
        return TransactionDraft.from_transaction(existing)


class ReportFlow:
    """Read-only views of the store for the home and statistics screens."""

    def __init__(
        self,
        store: TransactionStore,
        audit_logger: Optional[AuditLogger] = None,
        export_dir: Union[str, Path] = "exports",
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._export_dir = Path(export_dir)

    @property
    def export_dir(self) -> Path:
        return self._export_dir

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._store.transactions

    def summary(self) -> Totals:
        return totals(self._store.transactions)

    def search(
        self,
        search_term: str = "",
        category: Union[Category, str] = ALL_CATEGORIES,
    ) -> list[Transaction]:
        return filter_transactions(self._store.transactions, search_term, category)

    def breakdown(self) -> list[CategoryTotal]:
        return category_breakdown(self._store.transactions)

    def export_csv(self, on_date: Optional[date] = None) -> tuple[str, str]:
        """
        Build the CSV download for every transaction, in store order.

        Returns:
            (filename, content)
        """
        transactions = self._store.transactions
        filename = export_filename(on_date)
        content = to_csv(transactions)
        self._audit_logger.log_csv_exported(filename, len(transactions))
        return filename, content

    def save_csv(
        self,
        directory: Optional[Union[str, Path]] = None,
        on_date: Optional[date] = None,
    ) -> Path:
        """Write the CSV export into a directory, the configured export_dir by default."""
        transactions = self._store.transactions
        path = write_csv(transactions, directory or self._export_dir, on_date)
        self._audit_logger.log_csv_exported(path.name, len(transactions))
        return path


class SettingsFlow:
    """
    Theme and daily reminder.

    The stored reminder flag and the running DailyReminder are kept in
    step: enabling persists "true" and starts the timer, disabling
    persists "false" and cancels it.
    """

    def __init__(
        self,
        preferences: PreferencesStore,
        reminder: Optional[DailyReminder] = None,
    ):
        self._preferences = preferences
        self._reminder = reminder

    @property
    def theme(self) -> Theme:
        return self._preferences.get_theme()

    def toggle_theme(self) -> Theme:
        return self._preferences.toggle_theme()

    @property
    def reminders_supported(self) -> bool:
        return self._reminder is not None

    @property
    def reminder_enabled(self) -> bool:
        return self._preferences.is_reminder_enabled()

    @property
    def reminder(self) -> Optional[DailyReminder]:
        return self._reminder

    def set_reminder_enabled(self, enabled: bool) -> bool:
        """
        Persist the flag and start or cancel the reminder.

        Returns False if reminders are unavailable and enabling
        was refused, True otherwise.
        """
        if enabled and self._reminder is None:
            return False

        self._preferences.set_reminder_enabled(enabled)
        if self._reminder is not None:
            if enabled:
                self._reminder.start()
            else:
                self._reminder.cancel()
        return True

    def toggle_reminder(self) -> bool:
        """Flip the reminder and return the new state."""
        enabled = not self.reminder_enabled
        if not self.set_reminder_enabled(enabled):
            return self.reminder_enabled
        return enabled

    def start(self) -> None:
        """Resume the reminder if the user left it on."""
        if self._reminder is not None and self.reminder_enabled:
            self._reminder.start()

    def shutdown(self) -> None:
        if self._reminder is not None:
            self._reminder.cancel()


@dataclass
class AppComponents:
    """Everything the front end needs, with one lifecycle."""

    store: TransactionStore
    preferences: PreferencesStore
    transaction_flow: TransactionFlow
    report_flow: ReportFlow
    settings_flow: SettingsFlow
    audit_logger: AuditLogger

    def start(self) -> None:
        """Load transactions and resume the reminder."""
        if not self.store.is_open:
            self.store.open()
        self.settings_flow.start()

    def shutdown(self) -> None:
        """Cancel the reminder and release the store."""
        self.settings_flow.shutdown()
        self.store.close()


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorage] = None,
    notifier: Optional[Notifier] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration; defaults to get_settings()
        storage: Durable storage; defaults to LocalFileStorage in the
                 configured data directory
        notifier: Callback that shows a reminder. Without one, daily
                  reminders are unavailable.
        audit_logger: Shared audit logger

    Returns:
        AppComponents, not yet started
    """
    settings = settings or get_settings()
    audit_logger = audit_logger or AuditLogger()

    if storage is None:
        storage_settings = settings.storage
        storage = LocalFileStorage(
            data_dir=storage_settings.data_dir,
            quota_bytes=storage_settings.quota_bytes,
        )

    store = TransactionStore(storage, audit_logger=audit_logger)
    preferences = PreferencesStore(storage, audit_logger=audit_logger)

    reminder = None
    if notifier is not None:
        reminder_settings = settings.reminder
        reminder = DailyReminder(
            notify=notifier,
            hour=reminder_settings.hour,
            title=reminder_settings.title,
            body=reminder_settings.body,
            audit_logger=audit_logger,
        )

    return AppComponents(
        store=store,
        preferences=preferences,
        transaction_flow=TransactionFlow(store, audit_logger=audit_logger),
        report_flow=ReportFlow(
            store,
            audit_logger=audit_logger,
            export_dir=settings.app.export_dir,
        ),
        settings_flow=SettingsFlow(preferences, reminder=reminder),
        audit_logger=audit_logger,
    )
