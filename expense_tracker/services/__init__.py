"""Services package."""

from expense_tracker.services.ids import ExpenseIdGenerator, epoch_millis
from expense_tracker.services.storage import (
    DEFAULT_KEY,
    ExpenseStoreInterface,
    FileKeyValueBackend,
    InMemoryExpenseStore,
    InMemoryKeyValueBackend,
    KeyValueBackend,
    KeyValueExpenseStore,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Identifiers
    "ExpenseIdGenerator",
    "epoch_millis",
    # Storage services
    "DEFAULT_KEY",
    "ExpenseStoreInterface",
    "FileKeyValueBackend",
    "InMemoryExpenseStore",
    "InMemoryKeyValueBackend",
    "KeyValueBackend",
    "KeyValueExpenseStore",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
