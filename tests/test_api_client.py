import pytest
import requests

from expense_tracker.api_client import ClientResult, ExpenseClient
from expense_tracker.models import Expense, ExpenseDraft, ExpenseValidationError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []

    def _handle(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def delete(self, url, **kwargs):
        return self._handle("DELETE", url, **kwargs)


def _client(session):
    return ExpenseClient("http://backend.test/api/", session=session, timeout=3)


def test_list_expenses_parses_records_in_order():
    session = FakeSession(FakeResponse(payload=[
        {"id": 7, "description": "Tea", "amount": 20, "category": "Food", "date": "2024-01-02"},
        {"id": 3, "description": "Metro", "amount": "45.5", "category": "Transport", "date": "2024-01-01T08:00:00"},
    ]))
    result = _client(session).list_expenses()

    assert result.ok
    assert [e.id for e in result.value] == [7, 3]
    assert result.value[1].amount == 45.5
    assert result.value[1].date == "2024-01-01"
    assert session.calls == [("GET", "http://backend.test/api/expenses", {"timeout": 3})]


def test_list_expenses_failure_is_reported_not_raised():
    session = FakeSession(error=requests.ConnectionError("refused"))
    result = _client(session).list_expenses()
    assert not result.ok
    assert result.value is None
    assert "refused" in result.error


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse(status_code=500),
        FakeResponse(invalid_json=True),
        FakeResponse(payload={"not": "a list"}),
    ],
)
def test_list_expenses_bad_responses(response):
    assert not _client(FakeSession(response)).list_expenses().ok


def test_list_expenses_skips_malformed_records(caplog):
    session = FakeSession(FakeResponse(payload=[
        {"id": 1, "description": "Tea", "amount": 20, "category": "Food", "date": "2024-01-02"},
        {"id": 2, "description": "No date", "amount": 5, "category": "Food", "date": None},
        {"description": "missing id", "amount": 1, "category": "Food", "date": "2024-01-01"},
        "not an object",
        {"id": 3, "description": "Bus", "amount": 30, "category": "Transport", "date": "2024-01-03"},
    ]))
    with caplog.at_level("WARNING", logger="expense_tracker.api_client"):
        result = _client(session).list_expenses()

    assert result.ok
    assert [e.id for e in result.value] == [1, 3]
    assert sum("Skipping malformed expense record" in r.message for r in caplog.records) == 3


def test_create_expense_posts_payload_and_returns_backend_id():
    session = FakeSession(FakeResponse(status_code=201, payload={
        "id": "srv-42", "description": "Pizza", "amount": 350, "category": "Food", "date": "2024-02-10",
    }))
    draft = ExpenseDraft(description="  Pizza ", amount="350", category="Food", date="2024-02-10")
    result = _client(session).create_expense(draft)

    assert result.ok
    assert result.value == Expense(id="srv-42", description="Pizza", amount=350.0, category="Food", date="2024-02-10")
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "http://backend.test/api/expenses")
    assert kwargs["json"] == {"description": "Pizza", "amount": 350.0, "category": "Food", "date": "2024-02-10"}


def test_create_expense_invalid_draft_skips_network():
    session = FakeSession()
    result = _client(session).create_expense(ExpenseDraft(description="", amount=5, category="Food", date="2024-01-01"))
    assert not result.ok
    assert session.calls == []


def test_create_expense_http_error():
    session = FakeSession(FakeResponse(status_code=400))
    draft = ExpenseDraft(description="Pizza", amount=1, category="Food", date="2024-01-01")
    assert not _client(session).create_expense(draft).ok


def test_delete_expense_targets_record_url():
    session = FakeSession(FakeResponse(status_code=204))
    result = _client(session).delete_expense(9)
    assert result == ClientResult.success()
    assert session.calls[0][:2] == ("DELETE", "http://backend.test/api/expenses/9")


def test_delete_expense_failure():
    session = FakeSession(error=requests.Timeout("slow"))
    assert not _client(session).delete_expense(9).ok


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"description": "  "}, "Description"),
        ({"amount": -1}, "non-negative"),
        ({"amount": "abc"}, "Invalid amount"),
        ({"category": "Travel"}, "category"),
        ({"date": "05/01/2024"}, "Invalid date"),
    ],
)
def test_draft_validation(kwargs, message):
    fields = {"description": "Lunch", "amount": 10, "category": "Food", "date": "2024-01-05"}
    fields.update(kwargs)
    with pytest.raises(ExpenseValidationError, match=message):
        ExpenseDraft(**fields).validate()
