"""Flow tests: the screens' entry points over in-memory storage."""

import json
from datetime import date

import pytest

from src.config import Settings
from src.models.audit import AuditEventType
from src.models.transaction import Category, TransactionDraft, TransactionType
from src.orchestrator import (
    ReportFlow,
    SettingsFlow,
    TransactionFlow,
    create_app_components,
)
from src.services.storage import REMINDER_ENABLED_KEY, TRANSACTIONS_KEY, MemoryStorage
from src.store import PreferencesStore, Theme, TransactionStore
from src.validation import AMOUNT_MESSAGE, NOTE_MESSAGE


@pytest.fixture
def store(storage, audit_logger):
    store = TransactionStore(storage, audit_logger=audit_logger)
    store.open()
    return store


@pytest.fixture
def transaction_flow(store, audit_logger):
    ids = iter(f"id-{n}" for n in range(1, 100))
    return TransactionFlow(store, audit_logger=audit_logger, id_factory=lambda: next(ids))


@pytest.fixture
def report_flow(store, audit_logger):
    return ReportFlow(store, audit_logger=audit_logger)


def expense(amount="10", note="Coffee", category=Category.FOOD, when=date(2024, 5, 1)):
    return TransactionDraft(
        amount=amount,
        category=category,
        type=TransactionType.EXPENSE,
        note=note,
        date=when,
    )


class TestTransactionFlow:

    def test_submit_valid_saves(self, transaction_flow, store, storage):
        validation, tx = transaction_flow.submit(expense(amount="12.5"))

        assert validation.is_valid
        assert tx.id == "id-1"
        assert tx.amount == 12.5
        assert store.get("id-1") == tx
        assert json.loads(storage.get_item(TRANSACTIONS_KEY))[0]["amount"] == 12.5

    def test_submit_invalid_saves_nothing(self, transaction_flow, store, storage, recording_logger):
        validation, tx = transaction_flow.submit(expense(amount="0", note=" "))

        assert tx is None
        assert validation.messages_for("amount") == [AMOUNT_MESSAGE]
        assert validation.messages_for("note") == [NOTE_MESSAGE]
        assert len(store) == 0
        assert storage.write_count == 0
        assert AuditEventType.VALIDATION_FAILED.value in recording_logger.event_types()

    def test_edit_keeps_id(self, transaction_flow, store):
        _, original = transaction_flow.submit(expense(note="Coffee"))

        draft = transaction_flow.draft_for(original.id)
        draft = draft.model_copy(update={"note": "Tea", "amount": "4"})
        _, edited = transaction_flow.submit(draft, existing_id=original.id)

        assert edited.id == original.id
        assert len(store) == 1
        assert store.get(original.id).note == "Tea"
        assert store.get(original.id).amount == 4.0

    def test_draft_for_unknown_is_blank(self, transaction_flow):
        draft = transaction_flow.draft_for("missing")
        assert draft.amount == ""
        assert draft.note == ""

    def test_delete(self, transaction_flow, store):
        _, tx = transaction_flow.submit(expense())
        transaction_flow.delete(tx.id)
        assert transaction_flow.get(tx.id) is None
        assert len(store) == 0


class TestReportFlow:

    def test_summary_search_and_breakdown(self, transaction_flow, report_flow):
        transaction_flow.submit(TransactionDraft(
            amount="100",
            category=Category.SALARY,
            type=TransactionType.INCOME,
            note="Pay",
            date=date(2024, 5, 1),
        ))
        transaction_flow.submit(expense(amount="30", note="Groceries run", category=Category.GROCERIES))
        transaction_flow.submit(expense(amount="10", note="Bus", category=Category.TRAVEL))

        summary = report_flow.summary()
        assert (summary.income, summary.expense, summary.balance) == (100, 40, 60)

        assert [t.note for t in report_flow.search("bus")] == ["Bus"]
        assert [t.note for t in report_flow.search("", Category.GROCERIES)] == ["Groceries run"]

        breakdown = report_flow.breakdown()
        assert [c.category for c in breakdown] == [Category.GROCERIES, Category.TRAVEL]

    def test_export_csv(self, transaction_flow, report_flow, recording_logger):
        transaction_flow.submit(expense(amount="10", note='Say "hi"', when=date(2024, 5, 2)))

        filename, content = report_flow.export_csv(on_date=date(2024, 6, 1))

        assert filename == "transactions_2024-06-01.csv"
        assert content == (
            "ID,Date,Type,Category,Amount,Note\n"
            'id-1,2024-05-02,expense,Food,10,"Say ""hi"""'
        )
        assert AuditEventType.CSV_EXPORTED.value in recording_logger.event_types()

    def test_save_csv(self, transaction_flow, report_flow, tmp_path):
        transaction_flow.submit(expense())
        path = report_flow.save_csv(tmp_path, on_date=date(2024, 6, 1))
        assert path == tmp_path / "transactions_2024-06-01.csv"
        assert path.read_text(encoding="utf-8").startswith("ID,Date,Type")

    def test_save_csv_defaults_to_export_dir(self, store, transaction_flow, audit_logger, tmp_path):
        transaction_flow.submit(expense())
        flow = ReportFlow(store, audit_logger=audit_logger, export_dir=tmp_path / "exports")

        path = flow.save_csv(on_date=date(2024, 6, 1))

        assert path == tmp_path / "exports" / "transactions_2024-06-01.csv"
        assert path.exists()


class FakeReminder:

    def __init__(self):
        self.starts = 0
        self.cancels = 0

    def start(self):
        self.starts += 1

    def cancel(self):
        self.cancels += 1


class TestSettingsFlow:

    def test_theme_toggle(self, storage, audit_logger):
        flow = SettingsFlow(PreferencesStore(storage, audit_logger))
        assert flow.theme == Theme.LIGHT
        assert flow.toggle_theme() == Theme.DARK
        assert flow.theme == Theme.DARK

    def test_enable_without_reminder_is_refused(self, storage, audit_logger):
        flow = SettingsFlow(PreferencesStore(storage, audit_logger))

        assert flow.reminders_supported is False
        assert flow.set_reminder_enabled(True) is False
        assert flow.toggle_reminder() is False
        assert storage.get_item(REMINDER_ENABLED_KEY) is None

    def test_enable_and_disable_reminder(self, storage, audit_logger):
        reminder = FakeReminder()
        flow = SettingsFlow(PreferencesStore(storage, audit_logger), reminder=reminder)

        assert flow.toggle_reminder() is True
        assert storage.get_item(REMINDER_ENABLED_KEY) == "true"
        assert reminder.starts == 1

        assert flow.toggle_reminder() is False
        assert storage.get_item(REMINDER_ENABLED_KEY) == "false"
        assert reminder.cancels == 1

    def test_failed_write_still_lets_user_disable_reminder(self, storage, audit_logger):
        reminder = FakeReminder()
        flow = SettingsFlow(PreferencesStore(storage, audit_logger), reminder=reminder)
        storage.fail_writes = True

        assert flow.toggle_reminder() is True
        assert flow.reminder_enabled is True
        assert flow.toggle_reminder() is False
        assert flow.reminder_enabled is False
        assert (reminder.starts, reminder.cancels) == (1, 1)

    def test_failed_write_keeps_toggled_theme(self, storage, audit_logger):
        flow = SettingsFlow(PreferencesStore(storage, audit_logger))
        storage.fail_writes = True

        assert flow.toggle_theme() == Theme.DARK
        assert flow.theme == Theme.DARK

    def test_start_resumes_only_when_enabled(self, audit_logger):
        reminder = FakeReminder()
        off = SettingsFlow(PreferencesStore(MemoryStorage(), audit_logger), reminder=reminder)
        off.start()
        assert reminder.starts == 0

        on_storage = MemoryStorage({REMINDER_ENABLED_KEY: "true"})
        on = SettingsFlow(PreferencesStore(on_storage, audit_logger), reminder=reminder)
        on.start()
        assert reminder.starts == 1


class TestCreateAppComponents:

    def test_wires_shared_storage(self, storage, audit_logger):
        components = create_app_components(storage=storage, audit_logger=audit_logger)
        components.start()

        _, tx = components.transaction_flow.submit(expense())

        assert components.report_flow.transactions == (tx,)
        assert components.settings_flow.reminders_supported is False
        assert components.store.is_open

        components.shutdown()
        assert not components.store.is_open

    def test_loads_existing_data_on_start(self, audit_logger):
        payload = json.dumps([{
            "id": "a", "amount": 5, "category": "Food", "type": "expense",
            "note": "Tea", "date": "2024-05-02",
        }])
        components = create_app_components(
            storage=MemoryStorage({TRANSACTIONS_KEY: payload}),
            audit_logger=audit_logger,
        )
        components.start()
        assert [t.id for t in components.report_flow.transactions] == ["a"]
        components.shutdown()

    def test_notifier_enables_reminders(self, storage, audit_logger):
        components = create_app_components(
            storage=storage,
            notifier=lambda notification: None,
            audit_logger=audit_logger,
        )
        components.start()
        try:
            assert components.settings_flow.reminders_supported is True
            assert components.settings_flow.reminder.is_active is False

            components.settings_flow.set_reminder_enabled(True)
            assert components.settings_flow.reminder.is_active is True
        finally:
            components.shutdown()
        assert components.settings_flow.reminder.is_active is False

    def test_export_dir_comes_from_settings(self, storage, audit_logger, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "csv"))

        components = create_app_components(
            settings=Settings(),
            storage=storage,
            audit_logger=audit_logger,
        )
        components.start()
        components.transaction_flow.submit(expense())

        path = components.report_flow.save_csv(on_date=date(2024, 6, 1))

        assert path == tmp_path / "csv" / "transactions_2024-06-01.csv"
        components.shutdown()
