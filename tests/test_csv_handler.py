from __future__ import annotations

import pytest

from csv_handler import export_expenses_to_csv, import_expenses_from_csv, parse_splits
from models import Expense, Split


def test_export_then_import(tmp_path, lunch):
    other = Expense("e2", "Museum, tickets", 42.5, "b", "2024-03-02", (Split("a", 100 / 3), Split("b", 200 / 3)))
    path = str(tmp_path / "expenses.csv")

    export_expenses_to_csv([lunch, other], path)

    assert import_expenses_from_csv(path) == [lunch, other]


def test_import_requires_columns(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("id,date,amount\n1,2024-01-01,5\n", encoding="utf-8")
    with pytest.raises(ValueError, match="description"):
        import_expenses_from_csv(str(path))


def test_parse_splits():
    assert parse_splits("a:50; b:50;") == (Split("a", 50.0), Split("b", 50.0))
    assert parse_splits("") == ()
    with pytest.raises(ValueError):
        parse_splits("a-50")
