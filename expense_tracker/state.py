"""Application state and the controller that owns it.

All changes to the expense list, the budget and the add form go through
:class:`ExpenseController`.  Network calls run outside the state lock;
their completions are applied under it, in arrival order.  A refresh
that was issued before another mutation landed is discarded so it cannot
overwrite newer state.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, List, Optional

try:  # Allow both package and script execution contexts
    from .api_client import ClientResult, ExpenseClient
    from .config import DEFAULT_BUDGET
    from .models import Expense, ExpenseDraft
except ImportError:  # pragma: no cover - fallback for direct execution
    from api_client import ClientResult, ExpenseClient
    from config import DEFAULT_BUDGET
    from models import Expense, ExpenseDraft

logger = logging.getLogger(__name__)


@dataclass
class FormState:
    description: str = ""
    amount: Optional[float] = None
    category: str = ""
    date: str = field(default_factory=lambda: date.today().isoformat())

    def to_draft(self) -> ExpenseDraft:
        return ExpenseDraft(
            description=self.description,
            amount=self.amount,
            category=self.category,
            date=self.date,
        )


@dataclass
class Notice:
    level: str  # streamlit alert kind, e.g. "error"
    message: str


@dataclass
class AppState:
    expenses: List[Expense] = field(default_factory=list)
    budget: float = DEFAULT_BUDGET
    loading: bool = True
    form: FormState = field(default_factory=FormState)
    notice: Optional[Notice] = None


class ExpenseController:
    """Single writer for :class:`AppState`."""

    def __init__(self, client: ExpenseClient, state: Optional[AppState] = None):
        self.client = client
        self.state = state or AppState()
        self._lock = threading.Lock()
        self._sequence = 0

    def _next_sequence(self) -> int:
        with self._lock:
            self._sequence += 1
            return self._sequence

    def _fail(self, result: ClientResult) -> None:
        self.state.notice = Notice("error", result.error or "Request failed")

    def refresh(self) -> ClientResult[List[Expense]]:
        """Reload the collection; on failure the current list is kept."""
        issued = self._next_sequence()
        result = self.client.list_expenses()
        with self._lock:
            if not result.ok:
                self._fail(result)
                return result
            if self._sequence != issued:
                logger.info("Discarding stale expense list (request %d, now %d)", issued, self._sequence)
                return result
            self.state.expenses = list(result.value or [])
            self.state.loading = False
        return result

    def add_expense(self, draft: Optional[ExpenseDraft] = None) -> ClientResult[Expense]:
        """Create an expense and append the backend's record.

        On success only ``description`` and ``amount`` are cleared from the
        form; ``category`` and ``date`` keep their values for the next entry.
        """
        draft = draft or self.state.form.to_draft()
        result = self.client.create_expense(draft)
        with self._lock:
            if not result.ok:
                self._fail(result)
                return result
            self._sequence += 1
            self.state.expenses = [*self.state.expenses, result.value]
            self.state.form = replace(self.state.form, description="", amount=None)
            self.state.notice = None
        return result

    def delete_expense(self, expense_id: Any) -> ClientResult[None]:
        """Delete remotely, then drop exactly that id from local state."""
        result = self.client.delete_expense(expense_id)
        with self._lock:
            if not result.ok:
                self._fail(result)
                return result
            self._sequence += 1
            self.state.expenses = [e for e in self.state.expenses if e.id != expense_id]
            self.state.notice = None
        return result

    def set_budget(self, value: float) -> None:
        budget = float(value)
        if budget < 0:
            raise ValueError("Budget cannot be negative")
        self.state.budget = budget

    def pop_notice(self) -> Optional[Notice]:
        """Return and clear the transient notice."""
        notice, self.state.notice = self.state.notice, None
        return notice
