"""Top-level package for Expense Tracker Pro.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``api_client`` – HTTP client for the external ``/expenses`` service
* ``data_processing`` – totals, category sums and year/month groupings
* ``advisor`` – rule-based budget insights
* ``exporter`` – ``expenses.csv`` export
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run expense_tracker/dashboard.py
```
"""

from . import advisor  # noqa: F401  # re-exported for convenience
from . import data_processing  # noqa: F401  # re-exported for convenience
from . import exporter  # noqa: F401  # re-exported for convenience
from .api_client import ClientResult, ExpenseClient  # noqa: F401
from .models import Expense, ExpenseDraft, ExpenseValidationError  # noqa: F401

__all__ = [
    "advisor",
    "data_processing",
    "exporter",
    "ClientResult",
    "Expense",
    "ExpenseClient",
    "ExpenseDraft",
    "ExpenseValidationError",
]
