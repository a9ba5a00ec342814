"""Streamlit app for Expense Tracker Pro.

This module defines the user interface and wires it to the controller,
the aggregation helpers, the advisor and the exporter.  Every user
action runs through :class:`~expense_tracker.state.ExpenseController`
stored in ``st.session_state``; derived views are recomputed from the
controller's expense list on each script run.

To run the dashboard from the command line::

    streamlit run expense_tracker/dashboard.py

or use ``python run_dashboard.py`` from the project root.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from datetime import date
from typing import Any

import streamlit as st

# Conditional imports to support execution both as part of a package
# (``python -m expense_tracker.dashboard``) and directly as a script
# (``streamlit run expense_tracker/dashboard.py``).
if __package__:
    from . import config
    from . import data_processing as dp
    from . import visualization as viz
    from .advisor import InsightTask
    from .api_client import ExpenseClient
    from .exporter import export_bytes
    from .formatting import format_amount, format_currency
    from .models import ExpenseValidationError
    from .state import ExpenseController, FormState
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from expense_tracker import config  # type: ignore
    from expense_tracker import data_processing as dp  # type: ignore
    from expense_tracker import visualization as viz  # type: ignore
    from expense_tracker.advisor import InsightTask  # type: ignore
    from expense_tracker.api_client import ExpenseClient  # type: ignore
    from expense_tracker.exporter import export_bytes  # type: ignore
    from expense_tracker.formatting import format_amount, format_currency  # type: ignore
    from expense_tracker.models import ExpenseValidationError  # type: ignore
    from expense_tracker.state import ExpenseController, FormState  # type: ignore

logger = logging.getLogger(__name__)

CONTROLLER_KEY = "expense_controller"
ADVISOR_KEY = "insight_task"
SHOW_HISTORY_KEY = "show_history"
FORM_GENERATION_KEY = "form_generation"
ADVISOR_POLL_SECONDS = 0.5


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


def _ensure_session_state() -> ExpenseController:
    """Create the controller and advisor once per browser session."""
    state = st.session_state
    if CONTROLLER_KEY not in state:
        controller = ExpenseController(ExpenseClient(config.API_BASE_URL))
        state[CONTROLLER_KEY] = controller
        controller.refresh()
    if ADVISOR_KEY not in state:
        state[ADVISOR_KEY] = InsightTask(delay=config.ADVISOR_DELAY_SECONDS)
    if SHOW_HISTORY_KEY not in state:
        state[SHOW_HISTORY_KEY] = False
    return state[CONTROLLER_KEY]


def _show_notice(controller: ExpenseController) -> None:
    notice = controller.pop_notice()
    if notice is not None:
        st.toast(notice.message, icon="⚠️")


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


def _handle_delete(expense_id: Any) -> None:
    controller: ExpenseController = st.session_state[CONTROLLER_KEY]
    controller.delete_expense(expense_id)


def _toggle_history() -> None:
    st.session_state[SHOW_HISTORY_KEY] = not st.session_state.get(SHOW_HISTORY_KEY, False)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def render_header() -> None:
    st.title("Expense Tracker Pro")
    st.caption("Smart Financial Management")


def render_budget_input(controller: ExpenseController) -> None:
    value = st.number_input(
        f"💰 Monthly Budget ({config.CURRENCY_SYMBOL})",
        min_value=0.0,
        value=float(controller.state.budget),
        step=100.0,
        key="budget_input",
    )
    controller.set_budget(value)


def render_add_form(controller: ExpenseController) -> None:
    """Render the add-expense form and submit it through the controller.

    Widget keys carry a generation counter; bumping it after a successful
    submission redraws the form from the controller's (partially
    cleared) form state.
    """
    generation = st.session_state.get(FORM_GENERATION_KEY, 0)
    form = controller.state.form

    st.subheader("Add New Expense")
    with st.form(f"add_expense_form_{generation}"):
        amount = st.number_input(
            f"Amount ({config.CURRENCY_SYMBOL})",
            min_value=0.0,
            step=1.0,
            value=form.amount,
            key=f"form_amount_{generation}",
        )
        category = st.selectbox(
            "Category",
            options=list(config.CATEGORIES),
            index=config.CATEGORIES.index(form.category) if form.category in config.CATEGORIES else None,
            placeholder="Select Category",
            key=f"form_category_{generation}",
        )
        description = st.text_input(
            "Description",
            value=form.description,
            placeholder="Description (e.g. Starbucks)",
            key=f"form_description_{generation}",
        )
        picked = st.date_input("Date", value=date.fromisoformat(form.date), key=f"form_date_{generation}")
        submitted = st.form_submit_button("Add Transaction", use_container_width=True)

    if submitted:
        controller.state.form = FormState(
            description=description or "",
            amount=amount,
            category=category or "",
            date=(picked or date.today()).isoformat(),
        )
        try:
            controller.state.form.to_draft().validate()
        except ExpenseValidationError as exc:
            logger.info("Rejected expense draft: %s", exc)
            st.error(str(exc))
            return
        if controller.add_expense().ok:
            st.session_state[FORM_GENERATION_KEY] = generation + 1
            st.rerun()
        else:
            _show_notice(controller)


def render_category_chart(controller: ExpenseController) -> None:
    st.subheader("Where your money goes")
    frame = dp.expenses_to_frame(controller.state.expenses)
    totals = dp.aggregate_by_category(frame)
    if totals.empty:
        st.caption("Add expenses to see analysis")
        return
    st.plotly_chart(viz.create_category_pie_chart(totals), use_container_width=True)


def _poll_advisor(task: InsightTask, interval: float = ADVISOR_POLL_SECONDS) -> None:
    """Rerun the advisor fragment after ``interval`` while an analysis is pending."""
    if task.busy:
        time.sleep(interval)
        st.rerun(scope="fragment")


@st.fragment
def render_advisor_panel() -> None:
    """AI Financial Advisor panel.

    Runs as a fragment that reruns itself only while an analysis is
    pending, so a finished result appears without rerunning the whole
    page and an idle panel costs nothing.
    """
    controller: ExpenseController = st.session_state[CONTROLLER_KEY]
    task: InsightTask = st.session_state[ADVISOR_KEY]

    col_title, col_button = st.columns([3, 2])
    with col_title:
        st.subheader("✨ AI Financial Advisor")
    with col_button:
        if st.button(
            "Analyzing..." if task.busy else "Analyze Habits",
            disabled=task.busy,
            key="analyze_button",
        ):
            task.start(controller.state.expenses, controller.state.budget)
            st.rerun(scope="fragment")

    if task.result is not None:
        st.info(task.result.message)
    elif not task.busy:
        st.caption("Tap the button to get personalized saving advice based on your budget.")

    _poll_advisor(task)


def render_summary(controller: ExpenseController) -> None:
    spent = dp.total_spent(controller.state.expenses)
    budget = controller.state.budget
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Spent", format_currency(spent, decimals=2))
    col2.metric("Budget", format_currency(budget, decimals=2))
    col3.metric("Remaining", format_currency(budget - spent, decimals=2))


def _render_expense_row(expense, key_prefix: str, detailed: bool = True) -> None:
    col_text, col_amount, col_delete = st.columns([6, 2, 1])
    with col_text:
        if detailed:
            st.markdown(f"**{expense.description}**")
            st.caption(f"{expense.category} • {expense.date}")
        else:
            st.markdown(f"{expense.description} ({expense.category})")
    with col_amount:
        st.markdown(f"**{config.CURRENCY_SYMBOL}{format_amount(expense.amount)}**")
    with col_delete:
        st.button(
            "×",
            key=f"{key_prefix}_delete_{expense.id}",
            help="Delete expense",
            on_click=_handle_delete,
            args=(expense.id,),
        )


def render_recent_expenses(controller: ExpenseController) -> None:
    for expense in dp.recent_first(controller.state.expenses):
        _render_expense_row(expense, "recent")


def render_history(controller: ExpenseController) -> None:
    grouped = dp.group_by_year_month(controller.state.expenses)
    history = dp.sorted_history(grouped)
    buckets = [bucket for _, months in history for bucket in months]
    if len(buckets) > 1:
        st.plotly_chart(viz.create_monthly_totals_chart(buckets), use_container_width=True)
    for year, months in history:
        st.markdown(f"### {year}")
        for bucket in months:
            with st.expander(
                f"{bucket.month_name} | Total: {format_currency(bucket.total, decimals=2)}",
                expanded=True,
            ):
                for expense in bucket.items:
                    _render_expense_row(expense, f"history_{year}_{bucket.month}", detailed=False)


def render_expense_list(controller: ExpenseController) -> None:
    show_history = st.session_state.get(SHOW_HISTORY_KEY, False)
    expenses = controller.state.expenses

    col_title, col_export, col_toggle = st.columns([3, 1, 1])
    with col_title:
        st.subheader("Expense History" if show_history else "Recent Expenses")
    with col_export:
        st.download_button(
            "⬇️ Export CSV",
            data=export_bytes(expenses),
            file_name=config.EXPORT_FILENAME,
            mime="text/csv",
        )
    with col_toggle:
        st.button("View Recent" if show_history else "📜 View History", on_click=_toggle_history)

    if controller.state.loading:
        st.write("Loading...")
    elif not expenses:
        st.caption("No expenses yet.")
    elif show_history:
        render_history(controller)
    else:
        render_recent_expenses(controller)


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Expense Tracker Pro", page_icon="💰", layout="wide")
    config.configure_logging()

    controller = _ensure_session_state()
    _show_notice(controller)

    render_header()
    render_budget_input(controller)
    render_summary(controller)

    left, right = st.columns([1, 2], gap="large")
    with left:
        render_add_form(controller)
        render_category_chart(controller)
        render_advisor_panel()
    with right:
        if st.button("🔄 Refresh", key="refresh_button"):
            controller.refresh()
            st.rerun()
        render_expense_list(controller)


if __name__ == "__main__":  # pragma: no cover
    main()
