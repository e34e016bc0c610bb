"""Plotly visualisation helpers for the budget planner.

:func:`create_expense_pie_chart` turns the expense breakdown produced by
:func:`budget_planner.budget_model.compute_expense_breakdown` into a donut
chart.  :class:`ExpenseChart` keeps such a figure in sync with a
:class:`~budget_planner.budget_model.BudgetModel`, rebuilding it only when
the breakdown actually changes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .budget_model import compute_expense_breakdown, has_expenses
from .config import CHART_COLORS, DEFAULT_CURRENCY
from .formatting import format_currency
from .logging_utils import get_logger
from .models import BudgetState

logger = get_logger(__name__)


def segment_colors(count: int, palette: Sequence[str] = CHART_COLORS) -> List[str]:
    """Assign palette colors to ``count`` segments, cycling when needed."""
    return [palette[i % len(palette)] for i in range(count)]


def breakdown_to_dataframe(breakdown: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """Convert ``{name, value}`` rows into a frame with a Share column.

    Parameters
    ----------
    breakdown : sequence of dict
        Output of ``compute_expense_breakdown``.

    Returns
    -------
    pandas.DataFrame
        Columns ``Name``, ``Value``, ``Share`` (percent of the total) and
        ``Color``, in breakdown order.
    """
    df = pd.DataFrame(list(breakdown), columns=["name", "value"])
    df = df.rename(columns={"name": "Name", "value": "Value"})
    df["Value"] = df["Value"].astype(float)
    total = df["Value"].sum()
    df["Share"] = (df["Value"] / total * 100.0) if total > 0 else 0.0
    df["Color"] = segment_colors(len(df))
    return df


def create_expense_pie_chart(
    breakdown: Sequence[Dict[str, Any]],
    currency: str = DEFAULT_CURRENCY,
    title: str | None = None,
    *,
    placeholder: bool = False,
) -> go.Figure:
    """Generate a donut chart with one segment per breakdown row.

    Parameters
    ----------
    breakdown : sequence of dict
        ``{name, value}`` rows; never empty when produced by the model.
    currency : str
        Currency code used in hover labels.
    title : str, optional
        Title for the chart.
    placeholder : bool
        True when ``breakdown`` is the stand-in row for a budget without
        expenses; labels and hover text are hidden.

    Returns
    -------
    plotly.graph_objects.Figure
        Donut chart.
    """
    df = breakdown_to_dataframe(breakdown)
    if df.empty:
        fig = go.Figure()
        fig.update_layout(title="No data to display")
        return fig
    df["Label"] = [format_currency(value, currency) for value in df["Value"]]
    fig = px.pie(
        df,
        names="Name",
        values="Value",
        hole=0.5,
        color_discrete_sequence=list(df["Color"]),
        custom_data=["Label"],
    )
    fig.update_traces(
        sort=False,
        direction="clockwise",
        marker=dict(colors=list(df["Color"])),
    )
    if placeholder:
        fig.update_traces(textinfo="none", hoverinfo="skip")
    else:
        fig.update_traces(hovertemplate="%{label}: %{customdata[0]}<extra></extra>")
    fig.update_layout(title=title or "Expense breakdown", showlegend=False)
    return fig


class ExpenseChart:
    """Chart adapter that follows a budget model's expense breakdown."""

    def __init__(self, currency: str = DEFAULT_CURRENCY):
        self.currency = currency
        self.breakdown: List[Dict[str, Any]] = []
        self.placeholder = True
        self._figure: Optional[go.Figure] = None
        self.render_count = 0

    def attach(self, model) -> Any:
        """Render from the model's current state and follow its changes.

        Returns the unsubscribe callable.
        """
        self.on_state_changed(model.state)
        return model.subscribe(self.on_state_changed)

    def on_state_changed(self, state: BudgetState) -> None:
        breakdown = compute_expense_breakdown(state)
        placeholder = not has_expenses(state)
        if (
            self._figure is not None
            and breakdown == self.breakdown
            and placeholder == self.placeholder
            and state.currency == self.currency
        ):
            return
        self.breakdown = breakdown
        self.placeholder = placeholder
        self.currency = state.currency
        self._figure = create_expense_pie_chart(breakdown, self.currency, placeholder=placeholder)
        self.render_count += 1
        logger.debug("Rendered expense chart with %d segments", len(breakdown))

    @property
    def figure(self) -> go.Figure:
        if self._figure is None:
            # not attached yet: show the empty-budget placeholder
            self.on_state_changed(BudgetState(currency=self.currency))
        return self._figure

    def legend(self) -> List[Dict[str, Any]]:
        """Rows for a custom legend: name, formatted value, share and color."""
        df = breakdown_to_dataframe(self.breakdown)
        return [
            {
                'name': row.Name,
                'value': format_currency(row.Value, self.currency),
                'share': float(row.Share),
                'color': row.Color,
            }
            for row in df.itertuples(index=False)
        ]
