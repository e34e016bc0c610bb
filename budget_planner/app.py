"""Monthly Budget Planner - main Streamlit page.

The page keeps one :class:`BudgetModel` per browser session in
``st.session_state``.  Storage and chart adapters subscribe to it once, when
the session starts; every later rerun only reads and renders.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from . import config
from .budget_model import BudgetModel
from .logging_utils import get_logger
from .models import EXPENSES, INCOMES
from .storage import BudgetStorage, attach_storage
from .ui import BudgetPlannerUI
from .visualization import ExpenseChart

logger = get_logger(__name__)

_SESSION_KEY = 'budget_session'


def create_session(storage: Optional[BudgetStorage] = None) -> Dict[str, Any]:
    """Restore the saved budget (or the starter one) and wire its adapters."""
    storage = storage or BudgetStorage()
    state = storage.load()
    if state is None:
        logger.info("No saved budget found; starting from defaults")
    model = BudgetModel(state)
    attach_storage(model, storage)
    chart = ExpenseChart(model.state.currency)
    chart.attach(model)
    if state is None:
        storage.save(model.state)
    return {'model': model, 'chart': chart, 'storage': storage}


def _ensure_session() -> Dict[str, Any]:
    session = st.session_state.get(_SESSION_KEY)
    if session is None:
        session = create_session()
        st.session_state[_SESSION_KEY] = session
    return session


def _rerun() -> None:
    rerun = getattr(st, 'rerun', None)
    if callable(rerun):
        rerun()
        return
    experimental = getattr(st, 'experimental_rerun', None)
    if callable(experimental):
        experimental()


def main() -> None:
    """Render the budget planner page."""
    ui = BudgetPlannerUI(configure_page=True)
    config.ensure_data_directories()

    session = _ensure_session()
    model: BudgetModel = session['model']
    chart: ExpenseChart = session['chart']

    ui.render_header(model, _rerun)

    income_col, expense_col = st.columns(2)
    with income_col:
        ui.render_line_items(model, INCOMES)
    with expense_col:
        ui.render_line_items(model, EXPENSES)

    summary_col, chart_col = st.columns(2)
    with summary_col:
        ui.render_summary(model)
        ui.render_note(model)
    with chart_col:
        ui.render_chart(chart)

    ui.render_tips()
