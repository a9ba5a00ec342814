import pytest

from expense_tracker.api_client import ClientResult
from expense_tracker.models import Expense, ExpenseDraft
from expense_tracker.state import AppState, ExpenseController, FormState


def _expense(id, amount=10.0, category="Food"):
    return Expense(id=id, description=f"item {id}", amount=amount, category=category, date="2024-01-01")


class StubClient:
    """In-memory stand-in for ExpenseClient with scripted results."""

    def __init__(self, expenses=None):
        self.listing = ClientResult.success(list(expenses or []))
        self.create_result = None
        self.delete_result = ClientResult.success()
        self.on_list = None
        self.created = []
        self.deleted = []

    def list_expenses(self):
        if self.on_list is not None:
            self.on_list()
        return self.listing

    def create_expense(self, draft):
        self.created.append(draft)
        return self.create_result

    def delete_expense(self, expense_id):
        self.deleted.append(expense_id)
        return self.delete_result


def test_refresh_loads_collection():
    controller = ExpenseController(StubClient([_expense(1), _expense(2)]))
    assert controller.state.loading
    assert controller.refresh().ok
    assert [e.id for e in controller.state.expenses] == [1, 2]
    assert not controller.state.loading


def test_refresh_failure_keeps_previous_list():
    client = StubClient([_expense(1)])
    controller = ExpenseController(client)
    controller.refresh()
    client.listing = ClientResult.failure("Could not load expenses: boom")

    assert not controller.refresh().ok
    assert [e.id for e in controller.state.expenses] == [1]
    assert controller.pop_notice().message == "Could not load expenses: boom"
    assert controller.pop_notice() is None


def test_add_appends_backend_record_and_partially_clears_form():
    client = StubClient([_expense(1)])
    controller = ExpenseController(client)
    controller.refresh()
    controller.state.form = FormState(description="Pizza", amount=350.0, category="Food", date="2024-02-10")
    client.create_result = ClientResult.success(
        Expense(id="srv-9", description="Pizza", amount=350.0, category="Food", date="2024-02-10")
    )

    assert controller.add_expense().ok
    assert [e.id for e in controller.state.expenses] == [1, "srv-9"]
    assert controller.state.form == FormState(description="", amount=None, category="Food", date="2024-02-10")
    assert client.created[0] == ExpenseDraft(description="Pizza", amount=350.0, category="Food", date="2024-02-10")


def test_add_failure_leaves_state_and_form():
    client = StubClient()
    client.create_result = ClientResult.failure("Could not add expense: 500")
    controller = ExpenseController(client)
    form = FormState(description="Pizza", amount=350.0, category="Food", date="2024-02-10")
    controller.state.form = form

    assert not controller.add_expense().ok
    assert controller.state.expenses == []
    assert controller.state.form == form
    assert controller.state.notice.level == "error"


def test_delete_removes_only_that_record():
    controller = ExpenseController(StubClient([_expense(1), _expense(2), _expense(3)]))
    controller.refresh()
    assert controller.delete_expense(2).ok
    assert [e.id for e in controller.state.expenses] == [1, 3]


def test_delete_failure_keeps_record():
    client = StubClient([_expense(1), _expense(2)])
    controller = ExpenseController(client)
    controller.refresh()
    client.delete_result = ClientResult.failure("Could not delete expense: 404")

    assert not controller.delete_expense(2).ok
    assert [e.id for e in controller.state.expenses] == [1, 2]


def test_stale_refresh_does_not_overwrite_newer_mutation():
    client = StubClient([_expense(1), _expense(2)])
    controller = ExpenseController(client, AppState(expenses=[_expense(1), _expense(2)], loading=False))

    # a delete lands while the list request is still in flight
    client.on_list = lambda: controller.delete_expense(2)
    controller.refresh()

    assert [e.id for e in controller.state.expenses] == [1]


def test_set_budget_rejects_negative():
    controller = ExpenseController(StubClient())
    assert controller.state.budget == 2000
    controller.set_budget(1500)
    assert controller.state.budget == 1500.0
    with pytest.raises(ValueError):
        controller.set_budget(-1)
