"""
Configuration and data loading/saving for ExpenseSplitter
"""
from __future__ import annotations
import json
import logging
import os
from typing import Any, Dict, List, Mapping, Optional

from models import Currency, Expense, Ledger, Participant, Split
from utils import app_dir

logger = logging.getLogger(__name__)

CURRENCIES: List[Currency] = [
    Currency("USD", "$", "US Dollar"),
    Currency("EUR", "€", "Euro"),
    Currency("GBP", "£", "British Pound"),
    Currency("INR", "₹", "Indian Rupee"),
    Currency("JPY", "¥", "Japanese Yen"),
    Currency("CAD", "C$", "Canadian Dollar"),
    Currency("AUD", "A$", "Australian Dollar"),
]

PARTICIPANT_COLORS: List[str] = [
    "#ef4444",
    "#f97316",
    "#eab308",
    "#22c55e",
    "#06b6d4",
    "#3b82f6",
    "#8b5cf6",
    "#ec4899",
    "#f43f5e",
    "#84cc16",
]

DEFAULT_CURRENCY_CODE = os.getenv("EXPENSE_SPLITTER_CURRENCY", "INR").upper()
LOG_LEVEL = os.getenv("EXPENSE_SPLITTER_LOG_LEVEL", "WARNING").upper()
STATE_FILENAME = "state.json"

# Logical storage keys
PARTICIPANTS_KEY = "participants"
EXPENSES_KEY = "expenses"
CURRENCY_KEY = "currency"


def find_currency(code: str) -> Optional[Currency]:
    """Look up a known currency by its code"""
    code = (code or "").strip().upper()
    return next((c for c in CURRENCIES if c.code == code), None)


def default_currency() -> Currency:
    """Configured default currency, falling back to the first known one"""
    return find_currency(DEFAULT_CURRENCY_CODE) or CURRENCIES[0]


def get_default_ledger() -> Ledger:
    """Create an empty ledger in the default currency"""
    return Ledger(participants=[], expenses=[], currency=default_currency())


def participant_to_dict(p: Participant) -> dict:
    return {"id": p.id, "name": p.name, "color": p.color}


def expense_to_dict(e: Expense) -> dict:
    return {
        "id": e.id,
        "description": e.description,
        "amount": e.amount,
        "paidBy": e.paid_by,
        "date": e.date,
        "splits": [
            {"participantId": s.participant_id, "percentage": s.percentage}
            for s in e.splits
        ],
    }


def currency_to_dict(c: Currency) -> dict:
    return {"code": c.code, "symbol": c.symbol, "name": c.name}


def dict_to_participant(d: Mapping[str, Any]) -> Participant:
    return Participant(id=str(d["id"]), name=str(d["name"]), color=str(d.get("color", "")))


def dict_to_expense(d: Mapping[str, Any]) -> Expense:
    splits = tuple(
        Split(str(s["participantId"]), float(s["percentage"]))
        for s in d.get("splits", [])
    )
    return Expense(
        id=str(d["id"]),
        description=str(d["description"]),
        amount=float(d["amount"]),
        paid_by=str(d["paidBy"]),
        date=str(d["date"]),
        splits=splits,
    )


def dict_to_currency(d: Optional[Mapping[str, Any]]) -> Currency:
    if not d:
        return default_currency()
    return Currency(code=d["code"], symbol=d["symbol"], name=d["name"])


def ledger_to_dict(ledger: Ledger) -> dict:
    """Convert Ledger object to dictionary for JSON serialization"""
    return {
        "version": ledger.version,
        PARTICIPANTS_KEY: [participant_to_dict(p) for p in ledger.participants],
        EXPENSES_KEY: [expense_to_dict(e) for e in ledger.expenses],
        CURRENCY_KEY: currency_to_dict(ledger.currency),
    }


def dict_to_ledger(d: Mapping[str, Any]) -> Ledger:
    """Convert dictionary from JSON to Ledger object"""
    return Ledger(
        version=d.get("version", 1),
        participants=[dict_to_participant(p) for p in d.get(PARTICIPANTS_KEY, [])],
        expenses=[dict_to_expense(e) for e in d.get(EXPENSES_KEY, [])],
        currency=dict_to_currency(d.get(CURRENCY_KEY)),
    )


def load_ledger_file(path: str) -> Ledger:
    """Load a ledger from a JSON file"""
    with open(path, "r", encoding="utf-8") as f:
        return dict_to_ledger(json.load(f))


def save_ledger_file(ledger: Ledger, path: str) -> None:
    """Write a ledger to a JSON file"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(ledger_to_dict(ledger), f, ensure_ascii=False, indent=2)


class JsonStore:
    """Key-value store persisted as a single JSON object on disk"""

    def __init__(self, path: Optional[str] = None):
        self.path = path or os.path.join(app_dir(), STATE_FILENAME)

    def _read_all(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path}: expected a JSON object")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.update({key: value})

    def update(self, values: Mapping[str, Any]) -> None:
        """Write several keys at once"""
        data = self._read_all()
        data.update(values)
        tmp = self.path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
        logger.debug("Saved keys %s to %s", sorted(values), self.path)

    def save_ledger_state(self, ledger: Ledger) -> None:
        """Persist participants, expenses and currency under their logical keys"""
        d = ledger_to_dict(ledger)
        self.update({k: d[k] for k in (PARTICIPANTS_KEY, EXPENSES_KEY, CURRENCY_KEY)})

    def load_ledger_state(self) -> Ledger:
        """Rebuild the ledger from stored keys; missing keys fall back to defaults"""
        data = self._read_all()
        logger.debug("Loaded keys %s from %s", sorted(data), self.path)
        return dict_to_ledger(data)
