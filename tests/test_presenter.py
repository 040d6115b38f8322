"""Tests for the presenter: add, delete and render flows."""

from datetime import datetime, timezone

import pytest

from conftest import (
    EMPTY_MESSAGE,
    SAVE_FAILED_MESSAGE,
    START_MILLIS,
    VALIDATION_MESSAGE,
    RecordingView,
)
from expense_tracker.audit import AuditLogger
from expense_tracker.config import get_settings
from expense_tracker.models.expense import AddExpense, DeleteExpense, Expense
from expense_tracker.presenter import ExpensePresenter, create_presenter, create_store
from expense_tracker.services.ids import ExpenseIdGenerator
from expense_tracker.services.storage import (
    FileKeyValueBackend,
    InMemoryExpenseStore,
    InMemoryKeyValueBackend,
    KeyValueExpenseStore,
    StorageWriteError,
)
from expense_tracker.validation import ExpenseValidator


def submit(presenter, category="Food", amount="1200", date="2024-01-01", memo=""):
    return presenter.handle_submit(category, amount, date, memo)


class TestRenderAll:
    """Tests for rendering the persisted list."""

    def test_empty_store_shows_placeholder(self, presenter, view):
        list_view = presenter.render_all()

        assert list_view is view.last
        assert list_view.is_empty
        assert list_view.empty_message == EMPTY_MESSAGE
        assert list_view.total_display == "0"

    def test_rows_and_total(self, presenter, store, view):
        store.save([
            Expense(id=2, category="Rent", amount=85000, date="2024-01-25", memo="January"),
            Expense(id=1, category="Food", amount=1200, date="2024-01-01"),
        ])

        list_view = presenter.render_all()

        assert [row.id for row in list_view.rows] == [2, 1]
        first = list_view.rows[0]
        assert first.date == "2024-01-25"
        assert first.category == "Rent"
        assert first.memo == "January"
        assert first.amount_display == "¥85,000"
        assert list_view.rows[1].memo == ""
        assert list_view.total == 86200
        assert list_view.total_display == "86,200"
        assert list_view.empty_message == ""

    def test_corrupt_storage_shows_placeholder(self, view, audit_logger):
        backend = InMemoryKeyValueBackend({"expenses": "not json"})
        presenter = ExpensePresenter(
            store=KeyValueExpenseStore(backend, audit_logger=audit_logger),
            view=view,
            audit_logger=audit_logger,
            currency_symbol="¥",
            empty_message=EMPTY_MESSAGE,
            save_failed_message=SAVE_FAILED_MESSAGE,
        )

        list_view = presenter.render_all()

        assert list_view.is_empty
        assert list_view.empty_message == EMPTY_MESSAGE
        assert view.errors == []

    def test_initialize_resets_form_then_renders(self, presenter, view):
        presenter.initialize()

        assert view.resets == ["2024-01-01"]
        assert len(view.renders) == 1


class TestHandleSubmit:
    """Tests for adding expenses."""

    def test_first_expense(self, presenter, store, view):
        expense = submit(presenter, category="Food", amount=1200, date="2024-01-01", memo="")

        assert expense is not None
        assert store.load() == [expense]
        assert expense.id == START_MILLIS
        assert view.last.total_display == "1,200"
        assert view.last.rows[0].amount_display == "¥1,200"

    def test_form_reset_to_today_after_success(self, presenter, view):
        submit(presenter, date="2023-12-24")
        assert view.resets == ["2024-01-01"]

    def test_newest_first(self, presenter, store, clock):
        submit(presenter, category="A")
        clock.advance(10)
        submit(presenter, category="B")
        clock.advance(10)
        submit(presenter, category="C")

        assert [e.category for e in store.load()] == ["C", "B", "A"]

    def test_insertion_order_not_date_order(self, presenter, store, clock):
        submit(presenter, category="later", date="2024-02-01")
        clock.advance()
        submit(presenter, category="earlier", date="2023-01-01")

        assert [e.category for e in store.load()] == ["earlier", "later"]

    def test_zero_amount_rejected(self, presenter, store, view):
        store.save([Expense(id=1, category="Food", amount=500, date="2024-01-01")])
        before = store.load()
        writes = store.save_count

        assert submit(presenter, amount=0) is None

        assert store.load() == before
        assert store.save_count == writes
        assert view.errors == [VALIDATION_MESSAGE]
        assert view.renders == []
        assert view.resets == []

    @pytest.mark.parametrize(
        "fields",
        [
            {"category": ""},
            {"amount": "abc"},
            {"amount": "-3"},
            {"amount": None},
            {"date": ""},
        ],
    )
    def test_invalid_input_shows_single_message(self, presenter, store, view, fields):
        assert submit(presenter, **fields) is None
        assert store.load() == []
        assert view.errors == [VALIDATION_MESSAGE]

    def test_rejection_is_audited(self, presenter, audit_logger):
        submit(presenter, amount=0)
        assert audit_logger.types() == ["validation_failed"]
        assert audit_logger.events[0].details["issues"][0]["field"] == "amount"

    def test_success_is_audited(self, presenter, audit_logger):
        expense = submit(presenter)
        assert audit_logger.types() == ["expense_added"]
        assert audit_logger.events[0].entity_id == expense.id

    def test_amount_is_truncated(self, presenter):
        assert submit(presenter, amount="1200.75").amount == 1200

    def test_memo_none_stored_as_empty(self, presenter, store):
        submit(presenter, memo=None)
        assert store.load()[0].memo == ""

    def test_same_millisecond_submissions_get_distinct_ids(self, presenter, store):
        first = submit(presenter)
        second = submit(presenter)

        assert first.id != second.id
        assert second.id > first.id
        assert len(store.load()) == 2

    def test_id_avoids_existing_entries(self, presenter, store):
        store.save([Expense(id=START_MILLIS, category="Old", amount=1, date="2024-01-01")])

        expense = submit(presenter)

        assert expense.id == START_MILLIS + 1

    def test_long_category_with_real_audit_logger(self, store, view, clock):
        """Logging must not interrupt a submit that has already been saved."""
        presenter = ExpensePresenter(
            store=store,
            view=view,
            validator=ExpenseValidator(VALIDATION_MESSAGE),
            id_generator=ExpenseIdGenerator(clock=clock),
            audit_logger=AuditLogger(),
            today=lambda: datetime(2024, 1, 1, tzinfo=timezone.utc),
            currency_symbol="¥",
            empty_message=EMPTY_MESSAGE,
            save_failed_message=SAVE_FAILED_MESSAGE,
        )

        expense = submit(presenter, category="x" * 600, amount="100")

        assert expense is not None
        assert store.load() == [expense]
        assert len(view.renders) == 1
        assert view.last.rows[0].category == "x" * 600
        assert view.resets == ["2024-01-01"]
        assert view.errors == []

    def test_save_failure_is_reported(self, view, audit_logger):
        class ReadOnlyStore(InMemoryExpenseStore):
            def save(self, expenses):
                raise StorageWriteError("read-only")

        presenter = ExpensePresenter(
            store=ReadOnlyStore(),
            view=view,
            audit_logger=audit_logger,
            currency_symbol="¥",
            empty_message=EMPTY_MESSAGE,
            save_failed_message=SAVE_FAILED_MESSAGE,
        )

        assert submit(presenter) is None
        assert view.errors == [SAVE_FAILED_MESSAGE]
        assert view.resets == []
        assert audit_logger.types() == ["save_failed"]


class TestHandleDelete:
    """Tests for deleting expenses."""

    def test_delete_by_id(self, presenter, store, view):
        store.save([
            Expense(id=1, category="Food", amount=500, date="2024-01-01"),
            Expense(id=2, category="Food", amount=300, date="2024-01-02"),
        ])

        assert presenter.handle_delete(1) is True

        assert store.load() == [Expense(id=2, category="Food", amount=300, date="2024-01-02")]
        assert view.last.total_display == "300"

    def test_delete_accepts_id_text(self, presenter, store):
        store.save([Expense(id=42, category="Food", amount=1, date="2024-01-01")])
        assert presenter.handle_delete("42") is True
        assert store.load() == []

    def test_unknown_id_is_silent(self, presenter, store, view, audit_logger):
        expenses = [Expense(id=1, category="Food", amount=500, date="2024-01-01")]
        store.save(expenses)

        assert presenter.handle_delete(999) is False

        assert store.load() == expenses
        assert view.errors == []
        assert view.last.total_display == "500"
        assert audit_logger.types() == ["delete_ignored"]

    def test_non_numeric_id_is_silent(self, presenter, store, view, audit_logger):
        expenses = [Expense(id=1, category="Food", amount=500, date="2024-01-01")]
        store.save(expenses)
        writes = store.save_count

        assert presenter.handle_delete("abc") is False

        assert store.load() == expenses
        assert store.save_count == writes
        assert view.errors == []
        assert view.last.total_display == "500"
        assert audit_logger.types() == ["delete_ignored"]
        assert audit_logger.events[0].details["requested_id"] == "abc"

    def test_delete_last_entry_shows_placeholder(self, presenter, store, view):
        store.save([Expense(id=1, category="Food", amount=500, date="2024-01-01")])
        presenter.handle_delete(1)
        assert view.last.is_empty

    def test_add_then_delete_restores_list(self, presenter, store, clock):
        store.save([
            Expense(id=2, category="Food", amount=300, date="2024-01-02"),
            Expense(id=1, category="Food", amount=500, date="2024-01-01", memo="x"),
        ])
        before = store.load()

        added = submit(presenter, category="Books", amount="2500")
        presenter.handle_delete(added.id)

        assert store.load() == before

    def test_total_tracks_persisted_list(self, presenter, store, view, clock):
        ids = []
        for amount in (100, 2500, 40, 999):
            ids.append(submit(presenter, amount=amount).id)
            clock.advance()
        presenter.handle_delete(ids[1])
        presenter.handle_delete(12345)
        submit(presenter, amount=1)

        expected = sum(e.amount for e in store.load())
        assert expected == 100 + 40 + 999 + 1
        assert view.last.total == expected
        assert view.last.total_display == f"{expected:,}"


class TestDispatch:

    def test_dispatch_add(self, presenter, store):
        expense = presenter.dispatch(AddExpense(
            category="Food", amount="1200", date="2024-01-01", memo="",
        ))
        assert store.load() == [expense]

    def test_dispatch_delete(self, presenter, store):
        store.save([Expense(id=1, category="Food", amount=500, date="2024-01-01")])
        assert presenter.dispatch(DeleteExpense(expense_id=1)) is True
        assert store.load() == []

    def test_dispatch_unknown_command(self, presenter):
        with pytest.raises(TypeError):
            presenter.dispatch("add")


class TestFactories:
    """Tests for wiring from settings."""

    def test_memory_backend(self, fresh_settings, monkeypatch):
        monkeypatch.setenv("EXPENSE_STORAGE_BACKEND", "memory")
        store = create_store(get_settings())
        store.save([Expense(id=1, category="Food", amount=1, date="2024-01-01")])
        assert len(store.load()) == 1

    def test_file_backend_uses_configured_directory(self, fresh_settings, monkeypatch, tmp_path):
        monkeypatch.setenv("EXPENSE_STORAGE_BACKEND", "file")
        monkeypatch.setenv("EXPENSE_STORAGE_DIRECTORY", str(tmp_path))
        monkeypatch.setenv("EXPENSE_STORAGE_KEY", "household")

        view = RecordingView()
        presenter = create_presenter(view)
        presenter.handle_submit("Food", "1200", "2024-01-01", "")

        assert (tmp_path / "household.json").exists()
        reopened = KeyValueExpenseStore(FileKeyValueBackend(tmp_path), key="household")
        assert [e.amount for e in reopened.load()] == [1200]

    def test_display_settings_flow_into_rendering(self, fresh_settings, monkeypatch):
        monkeypatch.setenv("EXPENSE_DISPLAY_CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("EXPENSE_DISPLAY_EMPTY_MESSAGE", "Nothing here")

        view = RecordingView()
        presenter = create_presenter(view, store=InMemoryExpenseStore())
        presenter.render_all()
        assert view.last.empty_message == "Nothing here"

        presenter.handle_submit("Food", "1200", "2024-01-01", "")
        assert view.last.rows[0].amount_display == "$1,200"
