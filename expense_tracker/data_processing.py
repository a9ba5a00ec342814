"""Aggregation helpers over the in-memory expense list.

This module contains pure functions that derive totals, category
breakdowns and year/month groupings from a sequence of
:class:`~expense_tracker.models.Expense` records.  They are recomputed on
every script run and never stored, and they operate independently of
any user interface so that they can be unit tested and reused in other
contexts (e.g. command-line scripts).

Every function accepts an empty sequence and returns a zero total or an
empty structure in that case.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

try:  # Allow both package and script execution contexts
    from .models import Expense
except ImportError:  # pragma: no cover - fallback for direct execution
    from models import Expense

FRAME_COLUMNS = ["id", "date", "description", "category", "amount"]


@dataclass
class MonthBucket:
    year: int
    month: int  # 0-based, January is 0
    total: float = 0.0
    items: List[Expense] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month + 1]

    def add(self, expense: Expense) -> None:
        self.items.append(expense)
        self.total += expense.amount


YearMonthGroups = Dict[int, Dict[int, MonthBucket]]


# ---------------------------------------------------------------------------
# Totals
# ---------------------------------------------------------------------------


def total_spent(expenses: Iterable[Expense]) -> float:
    """Sum of ``amount`` over all records."""
    return sum((expense.amount for expense in expenses), 0.0)


def category_totals(expenses: Iterable[Expense]) -> Dict[str, float]:
    """Summed amount per category, keyed in first-seen category order."""
    totals: Dict[str, float] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, 0.0) + expense.amount
    return totals


def largest_category(totals: Dict[str, float]) -> Optional[Tuple[str, float]]:
    """Return the ``(category, total)`` with the highest total.

    Ties resolve to the category seen first, since ``sorted`` is stable
    in descending order as well.
    """
    if not totals:
        return None
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return ranked[0]


# ---------------------------------------------------------------------------
# History grouping
# ---------------------------------------------------------------------------


def group_by_year_month(expenses: Iterable[Expense]) -> YearMonthGroups:
    """Group records as ``{year: {month_index: MonthBucket}}``.

    Items inside a bucket keep arrival order, not date order.
    """
    grouped: YearMonthGroups = {}
    for expense in expenses:
        day = expense.day
        months = grouped.setdefault(day.year, {})
        bucket = months.get(day.month - 1)
        if bucket is None:
            bucket = months[day.month - 1] = MonthBucket(year=day.year, month=day.month - 1)
        bucket.add(expense)
    return grouped


def sorted_history(grouped: YearMonthGroups) -> List[Tuple[int, List[MonthBucket]]]:
    """Years newest first, each with its month buckets newest first."""
    return [
        (year, [grouped[year][month] for month in sorted(grouped[year], reverse=True)])
        for year in sorted(grouped, reverse=True)
    ]


def recent_first(expenses: Sequence[Expense]) -> List[Expense]:
    """Records in reverse arrival order, as shown in the recent view."""
    return list(reversed(expenses))


# ---------------------------------------------------------------------------
# Tabular views
# ---------------------------------------------------------------------------


def expenses_to_frame(expenses: Iterable[Expense]) -> pd.DataFrame:
    """Convert records into a DataFrame for tables and charts."""
    rows = [expense.to_dict() for expense in expenses]
    if not rows:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def aggregate_by_category(frame: pd.DataFrame) -> pd.Series:
    """Sum ``amount`` by ``category`` keeping first-seen category order."""
    if frame.empty:
        return pd.Series(dtype=float, name="amount")
    series = frame.groupby("category", sort=False)["amount"].sum()
    series.index.name = "category"
    return series
