#!/usr/bin/env python3
"""Fetch all expenses from the backend and write them to ``expenses.csv``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from expense_tracker import config
from expense_tracker.api_client import ExpenseClient
from expense_tracker.data_processing import category_totals, total_spent
from expense_tracker.exporter import write_csv
from expense_tracker.formatting import format_currency


def main(argv: Optional[List[str]] = None, client: Optional[ExpenseClient] = None) -> int:
    parser = argparse.ArgumentParser(description='Export expenses from the backend to a CSV file.')
    parser.add_argument('--base-url', default=config.API_BASE_URL, help='Backend base URL')
    parser.add_argument('--output', '-o', default=config.EXPORT_FILENAME, help='Destination file')
    args = parser.parse_args(argv)

    config.configure_logging()
    client = client or ExpenseClient(args.base_url)
    result = client.list_expenses()
    if not result.ok:
        print(result.error, file=sys.stderr)
        return 1

    expenses = result.value or []
    target = write_csv(expenses, args.output)
    print(f"Wrote {len(expenses)} expenses to {target}")
    for category, amount in category_totals(expenses).items():
        print(f"  {category}: {format_currency(amount, decimals=2)}")
    print(f"Total: {format_currency(total_spent(expenses), decimals=2)}")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
