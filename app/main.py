"""
Streamlit Frontend for Expense Tracker

A single page:
1. A form to record an expense (category, amount, date, memo)
2. The list of recorded expenses, newest first, each with a delete button
3. The running total

All state lives in the configured store. The page never keeps its own
copy of the list; every action goes through the presenter, which
re-renders from storage.

Run with:
    streamlit run app/main.py
"""

from datetime import date
from html import escape

import streamlit as st

from expense_tracker.models.expense import ExpenseListView
from expense_tracker.presenter import ExpensePresenter, ExpenseView, create_presenter


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💸",
    layout="centered",
)

st.markdown("""
<style>
    .expense-amount {
        text-align: right;
        font-weight: bold;
    }
    .expense-memo {
        color: #6c757d;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


FORM_KEYS = {
    "category": "form_category",
    "amount": "form_amount",
    "date": "form_date",
    "memo": "form_memo",
}


class StreamlitExpenseView(ExpenseView):
    """
    Renders into st.session_state.

    Presenter calls happen inside widget callbacks, before the script
    reruns, so the view only records what to draw; main() reads it.
    """

    def render(self, list_view: ExpenseListView) -> None:
        st.session_state.list_view = list_view

    def show_error(self, message: str) -> None:
        st.session_state.flash_error = message

    def reset_form(self, default_date: str) -> None:
        st.session_state[FORM_KEYS["category"]] = ""
        st.session_state[FORM_KEYS["amount"]] = ""
        st.session_state[FORM_KEYS["memo"]] = ""
        st.session_state[FORM_KEYS["date"]] = date.fromisoformat(default_date)


@st.cache_resource
def get_presenter() -> ExpensePresenter:
    """Get or create the presenter (cached across reruns)."""
    return create_presenter(StreamlitExpenseView())


def on_submit():
    selected_date = st.session_state.get(FORM_KEYS["date"])
    get_presenter().handle_submit(
        category=st.session_state.get(FORM_KEYS["category"]),
        amount=st.session_state.get(FORM_KEYS["amount"]),
        date=selected_date.isoformat() if selected_date else "",
        memo=st.session_state.get(FORM_KEYS["memo"]),
    )


def on_delete(expense_id: int):
    get_presenter().handle_delete(expense_id)


def draw_form():
    st.subheader("Add Expense")

    with st.form("expense_form", clear_on_submit=False):
        col1, col2 = st.columns(2)
        with col1:
            st.text_input(
                "Category",
                key=FORM_KEYS["category"],
                placeholder="e.g., Food",
            )
            st.date_input("Date", key=FORM_KEYS["date"])
        with col2:
            st.text_input(
                "Amount",
                key=FORM_KEYS["amount"],
                placeholder="e.g., 1200",
            )
            st.text_input("Memo", key=FORM_KEYS["memo"])

        st.form_submit_button("➕ Add", type="primary", on_click=on_submit)

    error = st.session_state.pop("flash_error", None)
    if error:
        st.error(error)


def draw_list(list_view: ExpenseListView):
    st.subheader("Expenses")

    if list_view.is_empty:
        st.info(list_view.empty_message)
    else:
        for row in list_view.rows:
            col_date, col_category, col_memo, col_amount, col_delete = st.columns(
                [2, 2, 3, 2, 1]
            )
            col_date.write(row.date)
            col_category.write(row.category)
            col_memo.markdown(
                f'<span class="expense-memo">{escape(row.memo)}</span>',
                unsafe_allow_html=True,
            )
            col_amount.markdown(
                f'<div class="expense-amount">{escape(row.amount_display)}</div>',
                unsafe_allow_html=True,
            )
            col_delete.button(
                "🗑️",
                key=f"delete_{row.id}",
                help="Delete",
                on_click=on_delete,
                args=(row.id,),
            )

    st.markdown("---")
    st.markdown("**Total**")
    st.markdown(
        f'<p class="big-number">{escape(list_view.total_display)}</p>',
        unsafe_allow_html=True,
    )


def main():
    """Main application entry point."""
    presenter = get_presenter()

    if "initialized" not in st.session_state:
        presenter.initialize()
        st.session_state.initialized = True
    else:
        presenter.render_all()

    st.title("💸 Expense Tracker")

    draw_form()
    st.markdown("---")
    draw_list(st.session_state.list_view)


if __name__ == "__main__":
    main()
