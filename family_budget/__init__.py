"""Top-level package for the Family Budget planner.

The primary modules are:

* ``income`` - projects income sources onto the five planner weeks
* ``expenses`` - flattens monthly and annual expenses for the planner
* ``planner`` - weekly allocations, status flags and cash flow
* ``state`` - the budget state value and its reducers
* ``storage`` - JSON persistence of the budget document
* ``calculator`` - currency calculator helpers
* ``dashboard`` - a Streamlit page that ties everything together

To run the planner page from the command line you can execute:

```bash
streamlit run family_budget/dashboard.py
```
"""

from . import calculator  # noqa: F401  # re-exported for convenience
from . import expenses  # noqa: F401  # re-exported for convenience
from . import income  # noqa: F401  # re-exported for convenience
from . import planner  # noqa: F401  # re-exported for convenience
from . import state  # noqa: F401  # re-exported for convenience
from . import storage  # noqa: F401  # re-exported for convenience
from .models import BudgetMonth, Expense, IncomeSource, NormalizedExpense, PlannerEntry
from .planner import InvalidWeekIndex, PlannerReconciler

# Streamlit may not be installed in all environments (e.g. during unit
# testing), so the page is imported only when available.
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = [
    "BudgetMonth",
    "Expense",
    "IncomeSource",
    "InvalidWeekIndex",
    "NormalizedExpense",
    "PlannerEntry",
    "PlannerReconciler",
    "calculator",
    "dashboard",
    "expenses",
    "income",
    "planner",
    "state",
    "storage",
]
