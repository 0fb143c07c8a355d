"""
Exceptions raised by ExpenseSplitter ledger operations
"""
from __future__ import annotations
from typing import Dict


class LedgerError(Exception):
    """Base class for rejected ledger operations"""


class ValidationError(LedgerError):
    """Form input rejected; errors maps field name -> message"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()))


class ParticipantNotFoundError(LedgerError):
    pass


class ParticipantInUseError(LedgerError):
    """Participant is referenced by an expense and cannot be removed"""


class ExpenseNotFoundError(LedgerError):
    pass


class UnknownCurrencyError(LedgerError):
    pass
