from expense_tracker.exporter import EXPORT_FILENAME, build_csv, export_bytes, write_csv
from expense_tracker.models import Expense


def test_header_only_for_empty_list():
    assert build_csv([]) == "Date,Description,Category,Amount"


def test_description_quotes_are_doubled():
    expense = Expense(id="a1", description='Coffee "Deluxe"', amount=150, category="Food", date="2024-01-05")
    lines = build_csv([expense]).split("\n")
    assert lines == [
        "Date,Description,Category,Amount",
        '2024-01-05,"Coffee ""Deluxe""",Food,150',
    ]


def test_rows_follow_collection_order_and_keep_fractions():
    expenses = [
        Expense(id=2, description="Taxi", amount=12.5, category="Transport", date="2024-03-02"),
        Expense(id=1, description="Rent, March", amount=900.0, category="Utilities", date="2024-03-01"),
    ]
    assert build_csv(expenses).split("\n")[1:] == [
        '2024-03-02,"Taxi",Transport,12.5',
        '2024-03-01,"Rent, March",Utilities,900',
    ]


def test_export_is_utf8(tmp_path):
    expenses = [Expense(id=1, description="Chai ☕", amount=20, category="Food", date="2024-01-01")]
    assert export_bytes(expenses).decode("utf-8").endswith('"Chai ☕",Food,20')

    target = write_csv(expenses, tmp_path / EXPORT_FILENAME)
    assert target.name == "expenses.csv"
    assert target.read_text(encoding="utf-8") == build_csv(expenses)


def test_amounts_are_written_unrounded():
    expenses = [
        Expense(id=1, description="Fuel", amount=12.345, category="Transport", date="2024-04-01"),
        Expense(id=2, description="Fee", amount=0.001, category="Other", date="2024-04-02"),
    ]
    assert build_csv(expenses).split("\n")[1:] == [
        '2024-04-01,"Fuel",Transport,12.345',
        '2024-04-02,"Fee",Other,0.001',
    ]
