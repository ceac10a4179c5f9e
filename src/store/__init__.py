"""Transaction and preference stores."""

from src.store.preferences import PreferencesStore, Theme
from src.store.transactions import (
    StoreClosedError,
    TransactionStore,
    sort_by_date_desc,
)

__all__ = [
    "PreferencesStore",
    "StoreClosedError",
    "Theme",
    "TransactionStore",
    "sort_by_date_desc",
]
