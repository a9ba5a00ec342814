"""HTTP client for the external ``/expenses`` CRUD service.

Every call returns a :class:`ClientResult` instead of raising.  Network
errors, error statuses and undecodable payloads are logged and reported
as failures; nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, List, Optional, TypeVar

import requests

try:  # Allow both package and script execution contexts
    from .config import API_BASE_URL, REQUEST_TIMEOUT, expenses_url
    from .models import Expense, ExpenseDraft, ExpenseValidationError
except ImportError:  # pragma: no cover - fallback for direct execution
    from config import API_BASE_URL, REQUEST_TIMEOUT, expenses_url
    from models import Expense, ExpenseDraft, ExpenseValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ClientResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "ClientResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "ClientResult[T]":
        return cls(ok=False, error=error)


class ExpenseClient:
    """Thin wrapper around a ``requests.Session`` bound to one base URL."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def collection_url(self) -> str:
        return expenses_url(self.base_url)

    def list_expenses(self) -> ClientResult[List[Expense]]:
        """Fetch the full collection in backend order.

        Records that cannot be parsed are logged and skipped; only a
        failed request or a payload that is not a list fails the call.
        """
        try:
            response = self.session.get(self.collection_url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, list):
                raise ExpenseValidationError(f"Expected a list of expenses, got {type(payload).__name__}")
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error fetching expenses: %s", exc)
            return ClientResult.failure(f"Could not load expenses: {exc}")
        expenses = []
        for item in payload:
            try:
                expenses.append(Expense.from_dict(item))
            except ExpenseValidationError as exc:
                logger.warning("Skipping malformed expense record %r: %s", item, exc)
        logger.debug("Fetched %d expenses from %s", len(expenses), self.collection_url)
        return ClientResult.success(expenses)

    def create_expense(self, draft: ExpenseDraft) -> ClientResult[Expense]:
        """Persist a draft and return the stored record with its backend id."""
        try:
            payload = draft.to_payload()
        except ExpenseValidationError as exc:
            return ClientResult.failure(str(exc))
        try:
            response = self.session.post(self.collection_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            expense = Expense.from_dict(response.json())
        except (requests.RequestException, ValueError) as exc:
            logger.error("Error creating expense %r: %s", payload.get("description"), exc)
            return ClientResult.failure(f"Could not add expense: {exc}")
        logger.info("Created expense %s (%s)", expense.id, expense.category)
        return ClientResult.success(expense)

    def delete_expense(self, expense_id: Any) -> ClientResult[None]:
        """Remove one record; the response body is ignored."""
        url = f"{self.collection_url}/{expense_id}"
        try:
            response = self.session.delete(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Error deleting expense %s: %s", expense_id, exc)
            return ClientResult.failure(f"Could not delete expense: {exc}")
        logger.info("Deleted expense %s", expense_id)
        return ClientResult.success()
