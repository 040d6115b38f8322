"""
Presenter for Expense Tracker

This module ties together the store, the validator and the view, and
defines the handling of each user action:
1. Add (form submit → validate → read → prepend → write → re-render)
2. Delete (delete click → read → filter → write → re-render)

DESIGN DECISION: Every mutation is a full read-modify-write of the list,
followed by a re-render from storage. Nothing is cached between actions,
so what is shown is always what was last persisted by this session.

There is no locking. Two sessions writing the same slot overwrite each
other; the last writer wins.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import ValidationError

from expense_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.expense import (
    AddExpense,
    DeleteExpense,
    Expense,
    ExpenseListView,
    ExpenseRow,
)
from expense_tracker.services.ids import ExpenseIdGenerator
from expense_tracker.services.storage import (
    ExpenseStoreInterface,
    FileKeyValueBackend,
    InMemoryKeyValueBackend,
    KeyValueExpenseStore,
    StorageError,
)
from expense_tracker.utils import format_amount, group_digits, today_iso
from expense_tracker.validation import ExpenseValidator


class ExpenseView(ABC):
    """
    What the presenter needs from a user interface.

    Implementations only draw; they never touch storage.
    """

    @abstractmethod
    def render(self, list_view: ExpenseListView) -> None:
        """Replace the displayed list and total."""
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Show a blocking notification. Form input must be left as is."""
        pass

    @abstractmethod
    def reset_form(self, default_date: str) -> None:
        """Clear the form fields and set the date field to default_date."""
        pass


class ExpensePresenter:
    """
    Turns user actions into store operations and re-renders the result.

    Flow for a submit:
    1. Validate raw input (reject → show_error, stop)
    2. Load the full list
    3. Prepend the new expense with a fresh id
    4. Save the full list
    5. Re-render from storage
    6. Reset the form to today's date
    """

    def __init__(
        self,
        store: ExpenseStoreInterface,
        view: ExpenseView,
        validator: Optional[ExpenseValidator] = None,
        id_generator: Optional[ExpenseIdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Optional[Callable[[], datetime]] = None,
        currency_symbol: Optional[str] = None,
        empty_message: Optional[str] = None,
        save_failed_message: Optional[str] = None,
    ):
        display = None
        if currency_symbol is None or empty_message is None or save_failed_message is None:
            display = get_settings().display

        self._store = store
        self._view = view
        self._validator = validator or ExpenseValidator()
        self._id_generator = id_generator or ExpenseIdGenerator()
        self._audit_logger = audit_logger or AuditLogger()
        self._today = today
        self._currency_symbol = currency_symbol if currency_symbol is not None else display.currency_symbol
        self._empty_message = empty_message if empty_message is not None else display.empty_message
        self._save_failed_message = (
            save_failed_message if save_failed_message is not None else display.save_failed_message
        )

    @property
    def store(self) -> ExpenseStoreInterface:
        return self._store

    def initialize(self) -> ExpenseListView:
        """First paint: default the date field to today and draw the list."""
        self._view.reset_form(today_iso(self._today))
        return self.render_all()

    def render_all(self) -> ExpenseListView:
        """Load the persisted list and push it to the view."""
        expenses = self._store.load()

        rows = [
            ExpenseRow(
                id=expense.id,
                date=expense.date,
                category=expense.category,
                memo=expense.memo or "",
                amount_display=format_amount(expense.amount, self._currency_symbol),
            )
            for expense in expenses
        ]
        total = sum(expense.amount for expense in expenses)

        list_view = ExpenseListView(
            rows=rows,
            total=total,
            total_display=group_digits(total),
            empty_message=self._empty_message if not rows else "",
        )
        self._view.render(list_view)
        return list_view

    def handle_submit(
        self,
        category: Optional[str],
        amount: Any,
        date: Optional[str],
        memo: Optional[str] = "",
    ) -> Optional[Expense]:
        """
        Add an expense from raw form values.

        Returns the stored Expense, or None if nothing was written.
        """
        return self.add_expense(AddExpense(
            category=category,
            amount=amount,
            date=date,
            memo=memo,
        ))

    def add_expense(self, command: AddExpense) -> Optional[Expense]:
        correlation_id = create_correlation_id()

        result = self._validator.validate(command)
        if not result.is_valid:
            self._audit_logger.log_validation_failed(
                fields=result.failed_fields,
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )
            self._view.show_error(result.message)
            return None

        expenses = self._store.load()
        expense = Expense(
            id=self._id_generator.next_id(e.id for e in expenses),
            category=result.category,
            amount=result.amount,
            date=result.date,
            memo=result.memo,
        )
        expenses.insert(0, expense)

        try:
            self._store.save(expenses)
        except StorageError as e:
            self._audit_logger.log_save_failed(
                error_message=str(e),
                expense_id=expense.id,
                correlation_id=correlation_id,
            )
            self._view.show_error(self._save_failed_message)
            return None

        self._audit_logger.log_expense_added(
            expense_id=expense.id,
            category=expense.category,
            amount=expense.amount,
            correlation_id=correlation_id,
        )

        self.render_all()
        self._view.reset_form(today_iso(self._today))
        return expense

    def handle_delete(self, expense_id: Union[int, str]) -> bool:
        """
        Remove the expense with this id.

        An unknown id is not an error: the list is rewritten
        unchanged and re-rendered. An id that is not a number cannot
        match anything, so nothing is written. Returns True if an
        entry was removed.
        """
        try:
            command = DeleteExpense(expense_id=expense_id)
        except ValidationError:
            self._audit_logger.log_delete_ignored(
                expense_id=expense_id,
                correlation_id=create_correlation_id(),
            )
            self.render_all()
            return False
        return self.delete_expense(command)

    def delete_expense(self, command: DeleteExpense) -> bool:
        correlation_id = create_correlation_id()

        expenses = self._store.load()
        remaining = [e for e in expenses if e.id != command.expense_id]
        removed = len(remaining) != len(expenses)

        try:
            self._store.save(remaining)
        except StorageError as e:
            self._audit_logger.log_save_failed(
                error_message=str(e),
                expense_id=command.expense_id,
                correlation_id=correlation_id,
            )
            self._view.show_error(self._save_failed_message)
            return False

        if removed:
            self._audit_logger.log_expense_deleted(
                expense_id=command.expense_id,
                remaining=len(remaining),
                correlation_id=correlation_id,
            )
        else:
            self._audit_logger.log_delete_ignored(
                expense_id=command.expense_id,
                correlation_id=correlation_id,
            )

        self.render_all()
        return removed

    def dispatch(self, command: Union[AddExpense, DeleteExpense]) -> Any:
        """Apply a command object; returns whatever its handler returns."""
        if isinstance(command, AddExpense):
            return self.add_expense(command)
        if isinstance(command, DeleteExpense):
            return self.delete_expense(command)
        raise TypeError(f"Unsupported command: {type(command).__name__}")


def create_store(
    settings: Optional[Settings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> KeyValueExpenseStore:
    """Build the configured key-value store."""
    storage_settings = (settings or get_settings()).storage

    if storage_settings.backend == "memory":
        backend = InMemoryKeyValueBackend()
    else:
        backend = FileKeyValueBackend(storage_settings.directory)

    return KeyValueExpenseStore(
        backend,
        key=storage_settings.key,
        audit_logger=audit_logger,
    )


def create_presenter(
    view: ExpenseView,
    settings: Optional[Settings] = None,
    store: Optional[ExpenseStoreInterface] = None,
) -> ExpensePresenter:
    """
    Factory function to create the presenter with its collaborators.

    Args:
        view: UI adapter to render into
        settings: Settings to use; defaults to get_settings()
        store: Pre-built store; defaults to the configured backend

    Returns:
        A presenter ready for initialize()
    """
    settings = settings or get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger()
    display = settings.display

    return ExpensePresenter(
        store=store or create_store(settings, audit_logger),
        view=view,
        validator=ExpenseValidator(display.validation_message),
        id_generator=ExpenseIdGenerator(),
        audit_logger=audit_logger,
        currency_symbol=display.currency_symbol,
        empty_message=display.empty_message,
        save_failed_message=display.save_failed_message,
    )
