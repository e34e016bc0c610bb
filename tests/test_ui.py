import types
from contextlib import nullcontext

import pytest

from budget_planner import ui
from budget_planner.budget_model import BudgetModel
from budget_planner.models import EXPENSES, INCOMES, BudgetState, LineItem
from budget_planner.visualization import ExpenseChart


def _noop(*args, **kwargs):
    return None


def _fake_st(session_state, pressed=None, markdown_calls=None):
    pressed = pressed or {}

    def columns(spec, **kwargs):
        count = spec if isinstance(spec, int) else len(spec)
        return [nullcontext() for _ in range(count)]

    def button(label, key=None, **kwargs):
        return pressed.get(key or label, False)

    def markdown(body, **kwargs):
        if markdown_calls is not None:
            markdown_calls.append((body, kwargs))

    return types.SimpleNamespace(
        session_state=session_state,
        columns=columns,
        button=button,
        title=_noop,
        subheader=_noop,
        warning=_noop,
        caption=_noop,
        text_input=_noop,
        text_area=_noop,
        plotly_chart=_noop,
        markdown=markdown,
    )


def _model():
    return BudgetModel(BudgetState(
        incomes=(LineItem('i1', 'Paycheck', 3000.0),),
        expenses=(LineItem('e1', 'Rent', 1200.0), LineItem('e2', 'Groceries', 300.0)),
        note='save more',
    ))


def test_amount_text() -> None:
    assert ui.amount_text(1200.0) == '1200'
    assert ui.amount_text(12.5) == '12.5'
    assert ui.amount_text('3k') == '3k'


def test_field_change_keeps_raw_text(monkeypatch) -> None:
    model = _model()
    state = {'incomes_amount_i1': '3k'}
    monkeypatch.setattr(ui, 'st', _fake_st(state))
    ui._on_field_change(model, INCOMES, 'i1', 'amount')
    assert model.state.incomes[0].amount == '3k'
    assert model.compute_totals().total_income == 0


def test_field_change_updates_name(monkeypatch) -> None:
    model = _model()
    monkeypatch.setattr(ui, 'st', _fake_st({'expenses_name_e1': 'Mortgage'}))
    ui._on_field_change(model, EXPENSES, 'e1', 'name')
    assert model.state.expenses[0].name == 'Mortgage'


def test_note_change(monkeypatch) -> None:
    model = _model()
    monkeypatch.setattr(ui, 'st', _fake_st({'budget_note': 'pay down Visa'}))
    ui._on_note_change(model)
    assert model.state.note == 'pay down Visa'


def test_remove_forgets_widget_state(monkeypatch) -> None:
    model = _model()
    state = {'expenses_name_e1': 'Rent', 'expenses_amount_e1': '1200', 'expenses_name_e2': 'Groceries'}
    monkeypatch.setattr(ui, 'st', _fake_st(state))
    ui._on_remove(model, EXPENSES, 'e1')
    assert [item.id for item in model.state.expenses] == ['e2']
    assert state == {'expenses_name_e2': 'Groceries'}


def test_reset_button_only_asks_for_confirmation(monkeypatch) -> None:
    model = _model()
    before = model.state
    state = {}
    reruns = []
    monkeypatch.setattr(ui, 'st', _fake_st(state, pressed={'↺ Reset': True}))
    ui.BudgetPlannerUI().render_header(model, lambda: reruns.append(1))
    assert state['confirm_reset'] is True
    assert model.state is before
    assert reruns == []


def test_reset_cancel_leaves_state_untouched(monkeypatch) -> None:
    model = _model()
    before = model.state
    seen = []
    model.subscribe(seen.append)
    state = {'confirm_reset': True, 'budget_note': 'save more'}
    reruns = []
    monkeypatch.setattr(ui, 'st', _fake_st(state, pressed={'cancel_reset_btn': True}))
    ui.BudgetPlannerUI().render_header(model, lambda: reruns.append(1))
    assert model.state is before
    assert seen == []
    assert state == {'confirm_reset': False, 'budget_note': 'save more'}
    assert reruns == [1]


def test_reset_confirm_restores_defaults_and_clears_widgets(monkeypatch) -> None:
    model = _model()
    state = {
        'confirm_reset': True,
        'budget_note': 'save more',
        'incomes_amount_i1': '3000',
        'expenses_name_e2': 'Groceries',
    }
    reruns = []
    monkeypatch.setattr(ui, 'st', _fake_st(state, pressed={'confirm_reset_btn': True}))
    ui.BudgetPlannerUI().render_header(model, lambda: reruns.append(1))
    assert [item.name for item in model.state.incomes] == ['Primary Paycheck']
    assert len(model.state.expenses) == 7
    assert model.state.note == ''
    assert state == {'confirm_reset': False}
    assert reruns == [1]


@pytest.mark.parametrize(
    "name, unexpected",
    [
        ('<img src=x onerror=alert(1)>', '<img'),
        ('<b', '<b'),
    ],
)
def test_legend_row_escapes_names(name, unexpected) -> None:
    markup = ui.legend_row_html({'name': name, 'value': '$10', 'share': 100.0, 'color': '#0ea5e9'})
    assert unexpected not in markup
    assert '&lt;' in markup
    assert '\\$10' in markup
    assert markup.startswith("<span style='display:inline-block")


def test_render_chart_sends_escaped_legend(monkeypatch) -> None:
    model = BudgetModel(BudgetState(expenses=(LineItem('e1', '<script>x</script>', 50.0),)))
    chart = ExpenseChart()
    chart.attach(model)
    calls = []
    monkeypatch.setattr(ui, 'st', _fake_st({}, markdown_calls=calls))
    ui.BudgetPlannerUI().render_chart(chart)
    assert len(calls) == 1
    body, kwargs = calls[0]
    assert '<script>' not in body
    assert '&lt;script&gt;' in body
    assert kwargs == {'unsafe_allow_html': True}
