"""Domain records for the expense tracker.

``Expense`` mirrors the JSON objects served by the backend's
``/expenses`` endpoints.  ``ExpenseDraft`` is what the add form submits
before the backend has assigned an identifier.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping

try:  # Allow both package and script execution contexts
    from .config import CATEGORIES
except ImportError:  # pragma: no cover - fallback for direct execution
    from config import CATEGORIES


class ExpenseValidationError(ValueError):
    """Raised when a draft or backend record cannot be turned into an expense."""


def _parse_amount(value: Any) -> float:
    if value is None or value == "":
        raise ExpenseValidationError("Amount is required.")
    if isinstance(value, bool):
        raise ExpenseValidationError(f"Invalid amount: {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ExpenseValidationError(f"Invalid amount: {value!r}") from None
    if amount != amount or amount < 0:
        raise ExpenseValidationError(f"Amount must be a non-negative number, got {value!r}")
    return amount


def _parse_date(value: Any) -> str:
    if isinstance(value, date):
        return value.isoformat()
    text = str(value or "").strip()
    try:
        # Timestamps such as "2024-01-05T00:00:00" keep only the calendar day
        return date.fromisoformat(text[:10]).isoformat()
    except ValueError:
        raise ExpenseValidationError(f"Invalid date: {value!r}") from None


@dataclass(frozen=True)
class Expense:
    id: Any
    description: str
    amount: float
    category: str
    date: str  # ISO-8601, e.g. "2024-01-05"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Expense":
        """Build an expense from a backend JSON object."""
        if not isinstance(data, Mapping):
            raise ExpenseValidationError(f"Expected an object, got {type(data).__name__}")
        if data.get("id") is None:
            raise ExpenseValidationError("Expense record is missing its 'id'")
        return cls(
            id=data["id"],
            description=str(data.get("description") or ""),
            amount=_parse_amount(data.get("amount")),
            category=str(data.get("category") or ""),
            date=_parse_date(data.get("date")),
        )

    @property
    def day(self) -> date:
        return date.fromisoformat(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
        }


@dataclass(frozen=True)
class ExpenseDraft:
    description: str
    amount: Any
    category: str
    date: Any

    def validate(self) -> "ExpenseDraft":
        """Return a normalized copy or raise :class:`ExpenseValidationError`."""
        description = (self.description or "").strip()
        if not description:
            raise ExpenseValidationError("Description is required.")
        if self.category not in CATEGORIES:
            raise ExpenseValidationError(f"Select a category ({', '.join(CATEGORIES)}).")
        return ExpenseDraft(
            description=description,
            amount=_parse_amount(self.amount),
            category=self.category,
            date=_parse_date(self.date),
        )

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for ``POST /expenses``."""
        draft = self.validate()
        return {
            "description": draft.description,
            "amount": draft.amount,
            "category": draft.category,
            "date": draft.date,
        }
