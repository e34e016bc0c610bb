"""Top-level package for the Monthly Budget Planner.

The primary modules are:

* ``models`` – line items, budget state and amount coercion
* ``budget_model`` – state transitions, derived totals and change notification
* ``storage`` – local key/value persistence of the budget snapshot
* ``visualization`` – the Plotly expense breakdown chart
* ``app`` – the Streamlit page that ties everything together

To run the planner from the command line you can execute:

```bash
python run_budget_planner.py
```
"""

from .budget_model import BudgetModel  # noqa: F401  # re-exported for convenience
from .models import BudgetState, DerivedTotals, LineItem  # noqa: F401
from .storage import BudgetStorage, LocalStorage  # noqa: F401

__all__ = [
    "BudgetModel",
    "BudgetState",
    "BudgetStorage",
    "DerivedTotals",
    "LineItem",
    "LocalStorage",
]
