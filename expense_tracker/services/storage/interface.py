"""
Abstract Storage Interface

DESIGN DECISION: We define abstract interfaces for storage operations.
This allows us to:
1. Swap the file backend for something else later
2. Use in-memory storage for testing
3. Keep the presenter decoupled from how the list is persisted

There are two layers:
- KeyValueBackend: a durable string slot per key (the browser
  localStorage shape). Knows nothing about expenses.
- ExpenseStoreInterface: loads and saves the whole expense list.

The interface is intentionally tiny - the list is always read and
written as one unit, so there is no per-expense operation here.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

from expense_tracker.models.expense import Expense


class KeyValueBackend(ABC):
    """Durable string storage addressed by key."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under key.

        Returns:
            The stored text, or None if nothing is stored

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under key.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete the value stored under key (no-op if absent)."""
        pass


class ExpenseStoreInterface(ABC):
    """
    Abstract interface for the persisted expense list.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self) -> list[Expense]:
        """
        Read the full expense list, newest first.

        Never raises. Missing or unreadable data is an empty list.
        """
        pass

    @abstractmethod
    def save(self, expenses: Sequence[Expense]) -> None:
        """
        Replace the persisted list with expenses.

        Raises:
            StorageWriteError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """The backend could not be read."""
    pass


class StorageWriteError(StorageError):
    """The backend could not be written."""
    pass
