from __future__ import annotations
import json

import pytest

from config import (
    CURRENCIES,
    JsonStore,
    default_currency,
    dict_to_ledger,
    find_currency,
    get_default_ledger,
    ledger_to_dict,
    load_ledger_file,
    save_ledger_file,
)


def test_ledger_dict_uses_storage_field_names(ledger):
    d = ledger_to_dict(ledger)

    assert set(d) == {"version", "participants", "expenses", "currency"}
    assert d["currency"] == {"code": "USD", "symbol": "$", "name": "US Dollar"}
    assert d["expenses"][0] == {
        "id": "e1",
        "description": "Lunch",
        "amount": 100.0,
        "paidBy": "a",
        "date": "2024-03-01",
        "splits": [
            {"participantId": "a", "percentage": 50.0},
            {"participantId": "b", "percentage": 50.0},
        ],
    }
    assert dict_to_ledger(d) == ledger


def test_ledger_file_roundtrip(tmp_path, ledger):
    path = str(tmp_path / "group.json")
    save_ledger_file(ledger, path)
    assert load_ledger_file(path) == ledger


def test_dict_to_ledger_defaults():
    ledger = dict_to_ledger({})
    assert ledger.participants == []
    assert ledger.expenses == []
    assert ledger.currency == default_currency()
    assert get_default_ledger().currency == default_currency()


def test_find_currency():
    assert find_currency(" usd ").symbol == "$"
    assert find_currency("XYZ") is None
    assert len({c.code for c in CURRENCIES}) == len(CURRENCIES)


def test_store_keys(tmp_path, ledger):
    store = JsonStore(str(tmp_path / "state.json"))
    assert store.get("participants", []) == []

    store.save_ledger_state(ledger)
    store.set("extra", 1)

    with open(store.path, encoding="utf-8") as f:
        raw = json.load(f)
    assert set(raw) == {"participants", "expenses", "currency", "extra"}
    assert store.load_ledger_state() == ledger


def test_failed_write_keeps_previous_state(tmp_path, ledger):
    store = JsonStore(str(tmp_path / "state.json"))
    store.save_ledger_state(ledger)

    with pytest.raises(TypeError):
        store.set("bad", object())

    assert not (tmp_path / "state.json.tmp").exists()
    assert store.load_ledger_state() == ledger
    store.set("extra", 1)
    assert store.get("extra") == 1


def test_store_rejects_non_object(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        JsonStore(str(path)).load_ledger_state()


def test_store_defaults_to_app_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("EXPENSE_SPLITTER_HOME", str(tmp_path / "home"))
    store = JsonStore()
    assert store.path == str(tmp_path / "home" / "state.json")
    assert (tmp_path / "home").is_dir()
