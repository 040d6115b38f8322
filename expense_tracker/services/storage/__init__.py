"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The expense list lives in a file-backed key-value slot by default, but the
store and the backend are both swappable.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStoreInterface,
    KeyValueBackend,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from expense_tracker.services.storage.backends import (
    FileKeyValueBackend,
    InMemoryKeyValueBackend,
)
from expense_tracker.services.storage.expense_store import (
    DEFAULT_KEY,
    InMemoryExpenseStore,
    KeyValueExpenseStore,
)

__all__ = [
    # Interfaces
    "ExpenseStoreInterface",
    "KeyValueBackend",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Backends
    "FileKeyValueBackend",
    "InMemoryKeyValueBackend",
    # Stores
    "DEFAULT_KEY",
    "InMemoryExpenseStore",
    "KeyValueExpenseStore",
]
