from __future__ import annotations
from datetime import date

import pytest

from config import PARTICIPANT_COLORS, JsonStore
from errors import (
    ExpenseNotFoundError,
    ParticipantInUseError,
    ParticipantNotFoundError,
    UnknownCurrencyError,
    ValidationError,
)
from computations import filter_expenses_by_date
from csv_handler import export_expenses_to_csv, import_expenses_from_csv
from models import Expense, Ledger, Settlement, Split
from session import LedgerSession
from utils import CounterIds


def test_add_participant_assigns_ids_and_palette_colors(session):
    a = session.add_participant("  Alice ")
    b = session.add_participant("Bob")
    c = session.add_participant("Carol", color="#000000")

    assert (a.id, a.name, a.color) == ("id1", "Alice", PARTICIPANT_COLORS[0])
    assert (b.id, b.color) == ("id2", PARTICIPANT_COLORS[1])
    assert c.color == "#000000"
    assert session.ledger.participants == [a, b, c]


def test_participant_names_are_unique_case_insensitively(session):
    session.add_participant("Alice")

    with pytest.raises(ValidationError) as exc:
        session.add_participant("alice")
    assert exc.value.errors == {"name": "Name already exists"}

    with pytest.raises(ValidationError) as exc:
        session.add_participant("   ")
    assert exc.value.errors == {"name": "Name is required"}
    assert len(session.ledger.participants) == 1


def test_rename_keeps_id(session):
    a = session.add_participant("Alice")
    session.add_participant("Bob")

    renamed = session.rename_participant(a.id, "ALICE")
    assert renamed.id == a.id
    assert session.ledger.participants[0].name == "ALICE"

    with pytest.raises(ValidationError):
        session.rename_participant(a.id, "bob")
    with pytest.raises(ParticipantNotFoundError):
        session.rename_participant("nope", "Zed")


def test_remove_participant_guarded_by_expense_references(session):
    a = session.add_participant("Alice")
    b = session.add_participant("Bob")
    c = session.add_participant("Carol")
    session.save_expense("Taxi", 30, a.id, "2024-01-02", [Split(a.id, 100), Split(b.id, 0)])

    with pytest.raises(ParticipantInUseError):
        session.remove_participant(a.id)
    with pytest.raises(ParticipantInUseError):
        session.remove_participant(b.id)

    assert session.remove_participant(c.id) == c
    assert [p.id for p in session.ledger.participants] == [a.id, b.id]


def test_save_expense_defaults_to_equal_split(session):
    a = session.add_participant("Alice")
    b = session.add_participant("Bob")

    e = session.save_expense(" Dinner ", "100", a.id, "2024-01-05")

    assert e.id == "id3"
    assert e.description == "Dinner"
    assert e.amount == 100.0
    assert e.splits == (Split(a.id, 50.0), Split(b.id, 50.0))
    assert session.settlements() == [Settlement(b.id, a.id, 50.0)]
    assert session.total() == 100.0


def test_save_expense_rejects_bad_input(session):
    a = session.add_participant("Alice")
    b = session.add_participant("Bob")

    with pytest.raises(ValidationError) as exc:
        session.save_expense("", "abc", "", "01/02/2024", [Split(a.id, 60), Split(b.id, 30)])
    assert set(exc.value.errors) == {"description", "amount", "paid_by", "date", "splits"}

    for amount in (0, -5, "nan"):
        with pytest.raises(ValidationError) as exc:
            session.save_expense("x", amount, a.id, "2024-01-01")
        assert set(exc.value.errors) == {"amount"}

    with pytest.raises(ValidationError) as exc:
        session.save_expense("x", 10, a.id, "2024-01-01", [Split("ghost", 100)])
    assert set(exc.value.errors) == {"splits"}

    assert session.ledger.expenses == []


def test_custom_split_tolerance(session):
    a = session.add_participant("Alice")
    b = session.add_participant("Bob")
    c = session.add_participant("Carol")

    e = session.save_expense("Hotel", 90, a.id, "2024-01-01",
                             [Split(a.id, 33.33), Split(b.id, 33.33), Split(c.id, 33.34)])
    assert len(e.splits) == 3

    with pytest.raises(ValidationError):
        session.save_expense("Hotel", 90, a.id, "2024-01-01",
                             [Split(a.id, 33.3), Split(b.id, 33.3), Split(c.id, 33.3)])


def test_equal_split_needs_participants(session):
    with pytest.raises(ValidationError) as exc:
        session.save_expense("Snacks", 10, "", "2024-01-01")
    assert "splits" in exc.value.errors


def test_edit_replaces_by_id_in_place(session):
    a = session.add_participant("Alice")
    b = session.add_participant("Bob")
    first = session.save_expense("One", 10, a.id, "2024-01-01")
    second = session.save_expense("Two", 20, a.id, "2024-01-02")

    edited = session.save_expense("One (fixed)", 40, b.id, "2024-01-01",
                                  [Split(a.id, 100)], expense_id=first.id)

    assert edited.id == first.id
    assert session.ledger.expenses == [edited, second]
    net = {pid: bal.balance for pid, bal in session.balances().items()}
    assert net == {a.id: -30.0, b.id: 30.0}

    with pytest.raises(ExpenseNotFoundError):
        session.save_expense("x", 1, a.id, "2024-01-01", expense_id="missing")


def test_delete_expense(session):
    a = session.add_participant("Alice")
    e = session.save_expense("Solo", 10, a.id, "2024-01-01")

    assert session.delete_expense(e.id) == e
    assert session.ledger.expenses == []
    with pytest.raises(ExpenseNotFoundError):
        session.delete_expense(e.id)
    # no longer referenced, so removable
    session.remove_participant(a.id)


def test_set_currency(session):
    assert session.set_currency("eur").code == "EUR"
    assert session.ledger.currency.symbol == "€"
    with pytest.raises(UnknownCurrencyError):
        session.set_currency("XYZ")


def test_mutations_are_persisted(tmp_path):
    store = JsonStore(str(tmp_path / "state.json"))
    session = LedgerSession(store.load_ledger_state(), id_factory=CounterIds("p"), store=store)

    a = session.add_participant("Alice")
    b = session.add_participant("Bob")
    session.save_expense("Lunch", 100, a.id, "2024-03-01", [Split(a.id, 50), Split(b.id, 50)])
    session.set_currency("GBP")

    reloaded = store.load_ledger_state()
    assert reloaded.participants == session.ledger.participants
    assert reloaded.expenses == session.ledger.expenses
    assert reloaded.currency.code == "GBP"
    assert store.get("participants")[0] == {"id": "p1", "name": "Alice", "color": PARTICIPANT_COLORS[0]}


@pytest.fixture
def pair_session(alice, bob):
    return LedgerSession(Ledger(participants=[alice, bob]), id_factory=CounterIds("id"))


def test_replace_expenses(pair_session, lunch):
    other = Expense("e2", "Taxi", 20.0, "b", "2024-03-02", (Split("a", 50.0), Split("b", 50.0)))

    pair_session.replace_expenses([lunch])
    pair_session.replace_expenses([other], append=True)
    assert pair_session.ledger.expenses == [lunch, other]

    pair_session.replace_expenses([])
    assert pair_session.ledger.expenses == []


def test_imported_expenses_are_validated(tmp_path, alice):
    session = LedgerSession(Ledger(participants=[alice]), id_factory=CounterIds("id"))
    path = str(tmp_path / "bad.csv")
    good = Expense("x0", "Fine", 10.0, "a", "2024-01-01", (Split("a", 100.0),))
    bad = Expense("x1", "Broken", -20.0, "ghost", "not-a-date", (Split("ghost", 250.0),))
    export_expenses_to_csv([good, bad], path)

    with pytest.raises(ValidationError) as exc:
        session.replace_expenses(import_expenses_from_csv(path), append=True)

    assert list(exc.value.errors) == ["expense 2"]
    message = exc.value.errors["expense 2"]
    for fragment in ("x1", "Valid amount is required", "Payer is not a participant",
                     "Date must be YYYY-MM-DD", "Split refers to an unknown participant"):
        assert fragment in message
    # nothing admitted, so reports still work
    assert session.ledger.expenses == []
    assert filter_expenses_by_date(session.ledger.expenses, date(2024, 1, 1), None) == []


def test_imported_expense_ids_must_be_unique(pair_session, lunch):
    pair_session.replace_expenses([lunch])

    with pytest.raises(ValidationError) as exc:
        pair_session.replace_expenses([lunch], append=True)
    assert "Duplicate expense id e1" in exc.value.errors["expense 1"]

    with pytest.raises(ValidationError) as exc:
        pair_session.replace_expenses([lunch, lunch])
    assert list(exc.value.errors) == ["expense 2"]

    assert pair_session.ledger.expenses == [lunch]
    pair_session.delete_expense("e1")
    assert pair_session.ledger.expenses == []


def test_split_participants_must_be_distinct(session):
    a = session.add_participant("Alice")
    b = session.add_participant("Bob")

    with pytest.raises(ValidationError) as exc:
        session.save_expense("Dup", 100, b.id, "2024-01-01", [Split(a.id, 50), Split(a.id, 50)])
    assert exc.value.errors == {"splits": "Each participant may appear only once"}
    assert session.ledger.expenses == []
