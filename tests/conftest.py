"""
Shared fixtures.

Everything here is in-memory: the presenter is wired to an
InMemoryExpenseStore, a view that records what it was asked to draw,
and a clock that only moves when told to.
"""

from datetime import datetime, timezone

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.models.audit import AuditEvent
from expense_tracker.models.expense import ExpenseListView
from expense_tracker.presenter import ExpensePresenter, ExpenseView
from expense_tracker.services.ids import ExpenseIdGenerator
from expense_tracker.services.storage import InMemoryExpenseStore
from expense_tracker.validation import ExpenseValidator


VALIDATION_MESSAGE = "Please enter a category, amount, and date correctly."
SAVE_FAILED_MESSAGE = "The expense could not be saved."
EMPTY_MESSAGE = "No expenses yet."

# 2024-01-01T00:00:00Z
START_MILLIS = 1704067200000


class RecordingView(ExpenseView):
    def __init__(self):
        self.renders: list[ExpenseListView] = []
        self.errors: list[str] = []
        self.resets: list[str] = []

    @property
    def last(self) -> ExpenseListView:
        return self.renders[-1]

    def render(self, list_view: ExpenseListView) -> None:
        self.renders.append(list_view)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    def reset_form(self, default_date: str) -> None:
        self.resets.append(default_date)


class RecordingAuditLogger(AuditLogger):
    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


class FakeClock:
    """Epoch-millisecond clock that stands still unless advanced."""

    def __init__(self, start: int = START_MILLIS):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int = 1) -> None:
        self.now += millis


@pytest.fixture
def view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def store() -> InMemoryExpenseStore:
    return InMemoryExpenseStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def presenter(store, view, clock, audit_logger) -> ExpensePresenter:
    return ExpensePresenter(
        store=store,
        view=view,
        validator=ExpenseValidator(VALIDATION_MESSAGE),
        id_generator=ExpenseIdGenerator(clock=clock),
        audit_logger=audit_logger,
        today=lambda: datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc),
        currency_symbol="¥",
        empty_message=EMPTY_MESSAGE,
        save_failed_message=SAVE_FAILED_MESSAGE,
    )


@pytest.fixture
def fresh_settings():
    """Drop cached settings before and after a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
