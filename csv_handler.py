"""
CSV export and import functionality for ExpenseSplitter
"""
from __future__ import annotations
import csv
from typing import List

from models import Expense, Split

CSV_COLUMNS = ['id', 'date', 'description', 'amount', 'paid_by', 'splits']


def format_splits(splits) -> str:
    """Serialize splits as participantId:percentage pairs joined by ';'"""
    return ';'.join(f"{s.participant_id}:{s.percentage}" for s in splits)


def parse_splits(text: str) -> tuple:
    """Inverse of format_splits; malformed pairs raise ValueError"""
    splits = []
    for pair in (text or '').split(';'):
        pair = pair.strip()
        if not pair:
            continue
        if ':' not in pair:
            raise ValueError(f"Malformed split: {pair!r}")
        k, v = pair.rsplit(':', 1)
        splits.append(Split(k.strip(), float(v.strip())))
    return tuple(splits)


def export_expenses_to_csv(expenses: List[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    CSV columns: id, date, description, amount, paid_by, splits
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for e in expenses:
            writer.writerow([
                e.id,
                e.date,
                e.description,
                e.amount,
                e.paid_by,
                format_splits(e.splits),
            ])


def import_expenses_from_csv(filepath: str) -> List[Expense]:
    """
    Import expenses list from CSV file
    Returns list of Expense objects
    """
    expenses = []

    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        missing = set(CSV_COLUMNS) - set(reader.fieldnames or [])
        if missing:
            raise ValueError(f"CSV is missing columns: {', '.join(sorted(missing))}")

        for row in reader:
            expenses.append(Expense(
                id=row['id'],
                date=row['date'],
                description=row['description'],
                amount=float(row['amount']),
                paid_by=row['paid_by'],
                splits=parse_splits(row['splits']),
            ))

    return expenses
