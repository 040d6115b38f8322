"""
Expense List Stores

The persisted form is one JSON array under one key:

    [{"id": 1704067200000, "category": "Food", "amount": 1200,
      "date": "2024-01-01", "memo": ""}, ...]

Newest entries come first. There is no schema version; a change to the
layout needs a migration outside this module.

Loading never fails: anything that is not a JSON array of expenses is
logged and treated as an empty list. Individual entries that do not
validate are left out of the loaded list, but saving writes them back
unchanged after the valid ones, so they are never lost.
"""

import json
from collections.abc import Sequence
from typing import Optional

from pydantic import ValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import (
    ExpenseStoreInterface,
    KeyValueBackend,
    StorageReadError,
)


DEFAULT_KEY = "expenses"


def _is_expense(item) -> bool:
    try:
        Expense.model_validate(item)
    except ValidationError:
        return False
    return True


class KeyValueExpenseStore(ExpenseStoreInterface):
    """Expense list stored as a JSON blob in a key-value backend."""

    def __init__(
        self,
        backend: KeyValueBackend,
        key: str = DEFAULT_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._backend = backend
        self._key = key
        self._audit_logger = audit_logger or AuditLogger()

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[Expense]:
        try:
            raw = self._backend.get_item(self._key)
        except StorageReadError as e:
            self._audit_logger.log_storage_read_corrupted(self._key, str(e))
            return []

        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            self._audit_logger.log_storage_read_corrupted(
                self._key, f"not valid JSON: {e}"
            )
            return []

        # A literal null is what an unset slot looks like in some writers
        if data is None:
            return []

        if not isinstance(data, list):
            self._audit_logger.log_storage_read_corrupted(
                self._key, f"expected a JSON array, found {type(data).__name__}"
            )
            return []

        expenses = []
        errors = []
        for index, item in enumerate(data):
            try:
                expenses.append(Expense.model_validate(item))
            except ValidationError as e:
                errors.append(f"entry {index}: {e.error_count()} error(s)")

        if errors:
            self._audit_logger.log_storage_read_corrupted(
                self._key, "; ".join(errors), skipped=len(errors)
            )

        return expenses

    def save(self, expenses: Sequence[Expense]) -> None:
        entries = [expense.model_dump(mode="json") for expense in expenses]
        entries.extend(self._unreadable_entries())
        payload = json.dumps(entries, ensure_ascii=False)
        self._backend.set_item(self._key, payload)

    def _unreadable_entries(self) -> list:
        """Raw entries of the current array that load() skips."""
        try:
            raw = self._backend.get_item(self._key)
            data = json.loads(raw) if raw is not None else None
        except (StorageReadError, ValueError):
            return []

        if not isinstance(data, list):
            return []
        return [item for item in data if not _is_expense(item)]


class InMemoryExpenseStore(ExpenseStoreInterface):
    """List-backed store for tests and storage-less runs."""

    def __init__(self, expenses: Optional[Sequence[Expense]] = None):
        self._expenses: list[Expense] = list(expenses or [])
        self.save_count = 0

    def load(self) -> list[Expense]:
        return list(self._expenses)

    def save(self, expenses: Sequence[Expense]) -> None:
        self._expenses = list(expenses)
        self.save_count += 1
