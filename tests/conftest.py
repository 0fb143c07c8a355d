from __future__ import annotations

import pytest

from config import find_currency
from models import Expense, Ledger, Participant, Split
from session import LedgerSession
from utils import CounterIds


@pytest.fixture
def alice():
    return Participant("a", "Alice", "#ef4444")


@pytest.fixture
def bob():
    return Participant("b", "Bob", "#f97316")


@pytest.fixture
def lunch():
    return Expense("e1", "Lunch", 100.0, "a", "2024-03-01", (Split("a", 50.0), Split("b", 50.0)))


@pytest.fixture
def ledger(alice, bob, lunch):
    return Ledger(participants=[alice, bob], expenses=[lunch], currency=find_currency("USD"))


@pytest.fixture
def session():
    return LedgerSession(Ledger(currency=find_currency("USD")), id_factory=CounterIds("id"))
