"""Delimited-text export of the expense list.

Only the description is quoted (with embedded quotes doubled); date,
category and amount are written as-is.  Rows follow the in-memory
order, not the date order.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

try:  # Allow both package and script execution contexts
    from .config import EXPORT_FILENAME, EXPORT_HEADER
    from .formatting import format_amount
    from .models import Expense
except ImportError:  # pragma: no cover - fallback for direct execution
    from config import EXPORT_FILENAME, EXPORT_HEADER
    from formatting import format_amount
    from models import Expense

__all__ = ["EXPORT_FILENAME", "build_csv", "export_bytes", "write_csv"]


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def _row(expense: Expense) -> str:
    return ",".join(
        [expense.date, _quote(expense.description), expense.category, format_amount(expense.amount)]
    )


def build_csv(expenses: Iterable[Expense]) -> str:
    """Header line plus one line per record, joined by ``\\n``."""
    return "\n".join([EXPORT_HEADER, *(_row(expense) for expense in expenses)])


def export_bytes(expenses: Iterable[Expense]) -> bytes:
    return build_csv(expenses).encode("utf-8")


def write_csv(expenses: Iterable[Expense], path: Union[str, Path, None] = None) -> Path:
    """Write the export to ``path`` (``expenses.csv`` by default)."""
    target = Path(path or EXPORT_FILENAME)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(export_bytes(expenses))
    return target
