"""
Transaction Store

Owns the canonical list of transactions and mirrors it to durable
storage under a single key, as a JSON array.

GUARANTEES:
- At most one transaction per id
- After every mutation the list is sorted by date, newest first;
  transactions on the same date keep their relative order
- Every mutation rewrites the whole collection
- Storage failures are logged, never raised; after a failed write the
  in-memory list stays authoritative and in_sync is False

The store does not validate transactions. TransactionValidator runs
before anything reaches it.
"""

from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from src.audit import AuditLogger
from src.models.transaction import Transaction
from src.services.storage import (
    TRANSACTIONS_KEY,
    KeyValueStorage,
    StorageError,
)


_TRANSACTION_LIST = TypeAdapter(list[Transaction])


class StoreClosedError(Exception):
    """The store was used before open() or after close()."""
    pass


def sort_by_date_desc(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Newest first. Python's sort is stable, so same-date ties keep their order."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


class TransactionStore:
    """
    In-memory transaction list backed by KeyValueStorage.

    Lifecycle:
        store = TransactionStore(storage)
        store.open()       # loads from storage
        store.upsert(tx)
        store.close()

    or as a context manager:
        with TransactionStore(storage) as store:
            ...
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        audit_logger: Optional[AuditLogger] = None,
        key: str = TRANSACTIONS_KEY,
    ):
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._key = key
        self._transactions: list[Transaction] = []
        self._is_open = False
        self._in_sync = True

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def open(self) -> list[Transaction]:
        """Load from storage and accept mutations."""
        self._is_open = True
        return self.load()

    def close(self) -> None:
        """Drop in-memory state. Storage is left as last written."""
        self._transactions = []
        self._is_open = False

    def __enter__(self) -> "TransactionStore":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def in_sync(self) -> bool:
        """False when the last write failed and storage lags behind memory."""
        return self._in_sync

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Read-only snapshot of the current list."""
        return tuple(self._transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def __len__(self) -> int:
        return len(self._transactions)

    def load(self) -> list[Transaction]:
        """
        Replace in-memory state with what storage holds.

        Missing key -> empty list.
        Unreadable storage or malformed data -> logged, empty list.
        """
        try:
            raw = self._storage.get_item(self._key)
        except StorageError as e:
            self._audit_logger.log_storage_read_failed(self._key, str(e))
            self._transactions = []
            return []

        if raw is None:
            self._transactions = []
            self._audit_logger.log_transactions_loaded(0)
            return []

        try:
            loaded = _TRANSACTION_LIST.validate_json(raw)
        except ValidationError as e:
            self._audit_logger.log_storage_data_corrupt(self._key, str(e))
            self._transactions = []
            return []

        # Collapse repeated ids: first position wins, last value wins
        by_id: dict[str, Transaction] = {}
        for transaction in loaded:
            by_id[transaction.id] = transaction
        if len(by_id) != len(loaded):
            self._audit_logger.log_error(
                error_type="duplicate_transaction_ids",
                error_message="Stored list repeats transaction ids",
                details={"stored": len(loaded), "unique": len(by_id)},
            )

        self._transactions = list(by_id.values())
        self._in_sync = True
        self._audit_logger.log_transactions_loaded(len(self._transactions))
        return list(self._transactions)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def upsert(self, transaction: Transaction) -> None:
        """Replace the transaction with the same id, or append it."""
        self._require_open()

        updated = list(self._transactions)
        replaced = False
        for idx, existing in enumerate(updated):
            if existing.id == transaction.id:
                updated[idx] = transaction
                replaced = True
                break
        if not replaced:
            updated.append(transaction)

        self._save(updated)
        self._audit_logger.log_transaction_saved(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=transaction.amount,
            replaced=replaced,
        )

    def delete(self, transaction_id: str) -> None:
        """Remove a transaction by id. Unknown ids are a no-op."""
        self._require_open()

        updated = [t for t in self._transactions if t.id != transaction_id]
        found = len(updated) != len(self._transactions)

        self._save(updated)
        self._audit_logger.log_transaction_deleted(transaction_id, found)

    def _save(self, transactions: list[Transaction]) -> bool:
        """Sort, adopt in memory, then persist. Returns True if the write succeeded."""
        ordered = sort_by_date_desc(transactions)
        self._transactions = ordered

        try:
            payload = _TRANSACTION_LIST.dump_json(ordered).decode("utf-8")
            self._storage.set_item(self._key, payload)
        except StorageError as e:
            self._in_sync = False
            self._audit_logger.log_storage_write_failed(self._key, str(e))
            return False

        self._in_sync = True
        return True

    def _require_open(self) -> None:
        if not self._is_open:
            raise StoreClosedError("TransactionStore is not open")
