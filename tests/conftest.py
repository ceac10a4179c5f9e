"""
Shared fixtures.

No test touches the real data directory: storage is in memory or
under tmp_path, and audit events go to a recording logger.
"""

from datetime import date

import pytest

from src.audit import AuditLogger
from src.models.transaction import Category, Transaction, TransactionType
from src.services.storage import MemoryStorage


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.records = []

    def _record(self, level, event, **kwargs):
        self.records.append({"level": level, "event": event, **kwargs})

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def warning(self, event, **kwargs):
        self._record("warning", event, **kwargs)

    def error(self, event, **kwargs):
        self._record("error", event, **kwargs)

    def event_types(self):
        return [r["event_type"] for r in self.records]


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def audit_logger(recording_logger):
    return AuditLogger(logger=recording_logger)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def make_transaction():
    """Factory with sensible defaults; override any field by keyword."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "id": f"tx-{counter['n']}",
            "amount": 10.0,
            "category": Category.FOOD,
            "type": TransactionType.EXPENSE,
            "note": "Coffee",
            "date": date(2024, 5, 1),
        }
        fields.update(overrides)
        return Transaction(**fields)

    return _make
