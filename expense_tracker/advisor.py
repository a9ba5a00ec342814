"""Rule-based budget advisor.

:func:`build_insight` is a fixed decision table over the amount spent
and the budget; it has no memory and the same inputs always give the
same message.  :class:`InsightTask` runs it after a cosmetic delay on a
background timer so the dashboard can show an "Analyzing..." state
without blocking anything else.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence

try:  # Allow both package and script execution contexts
    from .config import ADVISOR_DELAY_SECONDS, CURRENCY_SYMBOL, WARNING_THRESHOLD_PERCENT
    from .data_processing import category_totals, largest_category, total_spent
    from .formatting import format_amount, format_currency, round_half_up
    from .models import Expense
except ImportError:  # pragma: no cover - fallback for direct execution
    from config import ADVISOR_DELAY_SECONDS, CURRENCY_SYMBOL, WARNING_THRESHOLD_PERCENT
    from data_processing import category_totals, largest_category, total_spent
    from formatting import format_amount, format_currency, round_half_up
    from models import Expense

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "Please add some expenses first so I can analyze your habits!"


class InsightTier(str, Enum):
    EMPTY = "empty"
    OVER_BUDGET = "over_budget"
    WARNING = "warning"
    ON_TRACK = "on_track"


@dataclass(frozen=True)
class Insight:
    tier: InsightTier
    message: str
    total_spent: float = 0.0
    budget: float = 0.0
    remaining: float = 0.0
    percentage_used: int = 0
    top_category: Optional[str] = None
    top_category_total: float = 0.0


def percentage_of_budget(spent: float, budget: float) -> int:
    """Whole percentage of the budget used; a zero budget counts as 0%."""
    if budget <= 0:
        return 0
    return round_half_up(spent / budget * 100)


def evaluate(spent: float, budget: float, totals: Dict[str, float]) -> Insight:
    """Pick the message tier for ``spent`` against ``budget``."""
    remaining = budget - spent
    percentage_used = percentage_of_budget(spent, budget)
    top = largest_category(totals)
    top_name, top_total = top if top else (None, 0.0)

    if spent > budget:
        tier = InsightTier.OVER_BUDGET
        message = (
            f"🚨 Alert: You've exceeded your budget by {format_currency(abs(remaining))}! "
            f"Your biggest expense was {top_name} ({CURRENCY_SYMBOL}{format_amount(top_total)})."
        )
    elif percentage_used > WARNING_THRESHOLD_PERCENT:
        tier = InsightTier.WARNING
        message = (
            f"⚠️ Careful! You've used {percentage_used}% of your budget. "
            f"You only have {format_currency(remaining)} left for the month."
        )
    else:
        tier = InsightTier.ON_TRACK
        message = (
            f"✅ You're doing great! You've used {percentage_used}% of your budget. "
            f"You have {format_currency(remaining)} safely remaining."
        )

    return Insight(
        tier=tier,
        message=message,
        total_spent=spent,
        budget=budget,
        remaining=remaining,
        percentage_used=percentage_used,
        top_category=top_name,
        top_category_total=top_total,
    )


def build_insight(expenses: Sequence[Expense], budget: float) -> Insight:
    """Budget-status insight for the current expense list."""
    if not expenses:
        return Insight(tier=InsightTier.EMPTY, message=EMPTY_MESSAGE, budget=budget)
    return evaluate(total_spent(expenses), budget, category_totals(expenses))


class InsightTask:
    """One pending insight computation at a time, behind a busy flag.

    ``start`` snapshots the expenses and budget, then computes the
    insight after ``delay`` seconds on a ``threading.Timer``.  A zero
    delay computes synchronously.  Each run carries a generation number;
    a run superseded by ``cancel`` or a later ``start`` never publishes
    its result.
    """

    def __init__(self, delay: float = ADVISOR_DELAY_SECONDS):
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._busy = False
        self._generation = 0
        self.result: Optional[Insight] = None

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    def start(self, expenses: Sequence[Expense], budget: float) -> bool:
        """Schedule an analysis; returns ``False`` if one is already pending."""
        snapshot = list(expenses)
        with self._lock:
            if self._busy:
                logger.debug("Insight already pending; ignoring request")
                return False
            self._busy = True
            self._generation += 1
            generation = self._generation
            if self.delay > 0:
                self._timer = threading.Timer(self.delay, self._complete, args=(generation, snapshot, budget))
                self._timer.daemon = True
                self._timer.start()
                return True
        self._complete(generation, snapshot, budget)
        return True

    def cancel(self) -> None:
        """Drop a pending analysis, keeping the previous result."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
            self._busy = False

    def wait(self, timeout: Optional[float] = None) -> Optional[Insight]:
        """Block until the pending timer fires (used by scripts and tests)."""
        with self._lock:
            timer = self._timer
        if timer is not None:
            timer.join(timeout)
        return self.result

    def _complete(self, generation: int, expenses: Sequence[Expense], budget: float) -> None:
        insight = build_insight(expenses, budget)
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping superseded insight run %d", generation)
                return
            self.result = insight
            self._busy = False
            self._timer = None
        logger.info("Generated %s insight", insight.tier.value)
