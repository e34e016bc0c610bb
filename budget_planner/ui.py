"""Streamlit components for the budget planner screen.

Each ``render_*`` method draws one card of the page.  Widgets write back to
the :class:`~budget_planner.budget_model.BudgetModel` through ``on_change``
callbacks, so the model (and, through its subscribers, storage and chart)
is already up to date when Streamlit reruns the script.
"""

from __future__ import annotations

import html
from typing import Any, Callable, Dict, Iterable

import streamlit as st
from streamlit.errors import StreamlitAPIException

from .budget_model import BudgetModel
from .config import RESET_PROMPT
from .formatting import (
    escape_dollar_for_markdown,
    escape_markdown,
    format_currency,
    leftover_message,
    leftover_status,
)
from .models import EXPENSES, INCOMES, Amount, LineItem
from .visualization import ExpenseChart

SECTION_LABELS: Dict[str, Dict[str, str]] = {
    INCOMES: {
        'title': "💵 Income",
        'add': "Add Income",
        'placeholder': "Name (e.g., Paycheck)",
    },
    EXPENSES: {
        'title': "🧾 Expenses",
        'add': "Add Expense",
        'placeholder': "Name (e.g., Rent)",
    },
}

TIPS = [
    "Your values are saved locally to your device.",
    "Add or remove any line items to match your real budget.",
    'Pro tip: Track savings as an "expense" to pay yourself first.',
]


def amount_text(amount: Amount) -> str:
    """Render a stored amount back into an input field.

    Example:
        >>> amount_text(1200.0)
        '1200'
        >>> amount_text('12abc')
        '12abc'
    """
    if isinstance(amount, str):
        return amount
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def _widget_key(kind: str, field: str, item_id: str) -> str:
    return f"{kind}_{field}_{item_id}"


def _on_field_change(model: BudgetModel, kind: str, item_id: str, field: str) -> None:
    value = st.session_state.get(_widget_key(kind, field, item_id))
    model.update_line_item(kind, item_id, {field: value})


def _on_note_change(model: BudgetModel) -> None:
    model.set_note(st.session_state.get('budget_note', ''))


def _forget_item_widgets(kind: str, items: Iterable[LineItem]) -> None:
    for item in items:
        for field in ('name', 'amount'):
            st.session_state.pop(_widget_key(kind, field, item.id), None)


def _on_remove(model: BudgetModel, kind: str, item_id: str) -> None:
    removed = [item for item in model.items(kind) if item.id == item_id]
    if model.remove_line_item(kind, item_id):
        _forget_item_widgets(kind, removed)


def legend_row_html(row: Dict[str, Any]) -> str:
    """Markup for one legend row; the user-typed name is escaped."""
    name = html.escape(escape_markdown(str(row['name'])), quote=False)
    return (
        f"<span style='display:inline-block;width:0.8em;height:0.8em;"
        f"border-radius:50%;background:{row['color']}'></span> "
        f"{name}: {escape_dollar_for_markdown(row['value'])} ({row['share']:.0f}%)"
    )


class BudgetPlannerUI:
    """UI components for the monthly budget planner."""
    _PAGE_CONFIGURED = False

    def __init__(self, *, configure_page: bool = False):
        """Initialize the budget planner UI.

        Args:
            configure_page: When True, call ``setup_page_config`` immediately.
        """
        if configure_page:
            self.setup_page_config()

    def setup_page_config(self) -> None:
        """Configure Streamlit page settings."""
        if BudgetPlannerUI._PAGE_CONFIGURED:
            return
        try:
            st.set_page_config(
                page_title="Monthly Budget Planner",
                page_icon="💰",
                layout="wide",
            )
        except StreamlitAPIException:
            # Already configured upstream; avoid raising to keep reruns smooth.
            pass
        finally:
            BudgetPlannerUI._PAGE_CONFIGURED = True

    def render_header(self, model: BudgetModel, rerun: Callable[[], None]) -> None:
        """Render the title bar with the reset control and its confirm step."""
        col1, col2 = st.columns([4, 1])
        with col1:
            st.title("💰 Monthly Budget Planner")
        with col2:
            if st.button("↺ Reset", help="Restore the starter budget"):
                st.session_state['confirm_reset'] = True

        if st.session_state.get('confirm_reset', False):
            st.warning(f"⚠️ {RESET_PROMPT} This discards every line item and the note.")
            col_a, col_b, _ = st.columns([1, 1, 4])
            with col_a:
                confirmed = st.button("✅ Confirm", key="confirm_reset_btn")
            with col_b:
                cancelled = st.button("❌ Cancel", key="cancel_reset_btn")
            if confirmed or cancelled:
                st.session_state['confirm_reset'] = False
                previous = model.state
                if model.reset(lambda _prompt: confirmed):
                    for kind in (INCOMES, EXPENSES):
                        _forget_item_widgets(kind, previous.items(kind))
                    st.session_state.pop('budget_note', None)
                rerun()

    def render_line_items(self, model: BudgetModel, kind: str) -> None:
        """Render one editable collection with add/remove controls."""
        labels = SECTION_LABELS[kind]
        state = model.state
        header, add_col = st.columns([3, 1])
        with header:
            st.subheader(labels['title'])
        with add_col:
            if st.button(labels['add'], key=f"add_{kind}"):
                model.add_line_item(kind)

        items = model.items(kind)
        if not items:
            st.caption("No line items yet.")
        for item in items:
            name_col, amount_col, remove_col = st.columns([3, 2, 1])
            with name_col:
                st.text_input(
                    "Name",
                    value=item.name,
                    key=_widget_key(kind, 'name', item.id),
                    placeholder=labels['placeholder'],
                    label_visibility="collapsed",
                    on_change=_on_field_change,
                    args=(model, kind, item.id, 'name'),
                )
            with amount_col:
                st.text_input(
                    f"Amount ({state.currency})",
                    value=amount_text(item.amount),
                    key=_widget_key(kind, 'amount', item.id),
                    label_visibility="collapsed",
                    on_change=_on_field_change,
                    args=(model, kind, item.id, 'amount'),
                )
                if isinstance(item.amount, str) and item.amount.strip():
                    st.caption("Not a number; counted as 0.")
            with remove_col:
                st.button(
                    "×",
                    key=f"remove_{kind}_{item.id}",
                    help=f"Remove {item.name}",
                    on_click=_on_remove,
                    args=(model, kind, item.id),
                )

    def render_summary(self, model: BudgetModel) -> None:
        """Render the three totals and the leftover message."""
        totals = model.compute_totals()
        currency = model.state.currency
        st.subheader("📊 Summary")
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Income", format_currency(totals.total_income, currency))
        with col2:
            st.metric("Expenses", format_currency(totals.total_expenses, currency))
        with col3:
            st.metric(
                "Leftover",
                format_currency(totals.leftover, currency),
                delta="Over budget" if totals.leftover < 0 else None,
                delta_color="inverse",
            )

        message = escape_dollar_for_markdown(leftover_message(totals.leftover, currency))
        status = leftover_status(totals.leftover)
        if status == 'negative':
            st.error(message)
        elif status == 'zero':
            st.info(message)
        else:
            st.success(message)

    def render_note(self, model: BudgetModel) -> None:
        st.text_area(
            "Notes",
            value=model.state.note,
            key='budget_note',
            placeholder="Any reminders or goals for this month (e.g., save $500, pay down Visa).",
            on_change=_on_note_change,
            args=(model,),
        )

    def render_chart(self, chart: ExpenseChart) -> None:
        """Render the expense donut chart and its legend."""
        st.subheader("🥧 Expense Breakdown")
        st.plotly_chart(chart.figure, use_container_width=True)
        for row in chart.legend():
            st.markdown(legend_row_html(row), unsafe_allow_html=True)

    def render_tips(self) -> None:
        st.divider()
        st.caption("  ".join(f"• {tip}" for tip in TIPS))

