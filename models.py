"""
Data models for ExpenseSplitter
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Participant:
    """Member of the group sharing expenses"""
    id: str
    name: str
    color: str = ""  # hex color, cosmetic only


@dataclass(frozen=True)
class Split:
    """One participant's share of an expense"""
    participant_id: str
    percentage: float  # parts per hundred


@dataclass(frozen=True)
class Expense:
    """Single shared expense"""
    id: str
    description: str
    amount: float
    paid_by: str  # participant id
    date: str  # YYYY-MM-DD
    splits: Tuple[Split, ...] = ()


@dataclass(frozen=True)
class Currency:
    """Display currency descriptor"""
    code: str
    symbol: str
    name: str


@dataclass(frozen=True)
class Balance:
    """Derived net position of one participant"""
    participant_id: str
    total_paid: float = 0.0
    total_owed: float = 0.0

    @property
    def balance(self) -> float:
        # positive -> should receive; negative -> should pay
        return self.total_paid - self.total_owed


@dataclass(frozen=True)
class Settlement:
    """Recommended transfer: from_id pays amount to to_id"""
    from_id: str
    to_id: str
    amount: float


@dataclass
class Ledger:
    """Complete durable state of one group"""
    participants: List[Participant] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    currency: Currency = Currency("INR", "₹", "Indian Rupee")
    version: int = 1
