"""
Ledger session: participant/expense state transitions and recomputation
"""
from __future__ import annotations
import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence

from computations import aggregate, equal_splits, net_balances, plan_settlements, total_expenses
from config import PARTICIPANT_COLORS, JsonStore, find_currency, get_default_ledger
from errors import (
    ExpenseNotFoundError,
    ParticipantInUseError,
    ParticipantNotFoundError,
    UnknownCurrencyError,
    ValidationError,
)
from models import Balance, Expense, Ledger, Participant, Settlement, Split
from utils import today_str, uuid_ids
from validation import expense_field_errors, validate_expense_fields, validate_participant_name

logger = logging.getLogger(__name__)


class LedgerSession:
    """
    Owns the durable ledger state of one group.

    Every mutation validates its input, replaces the affected values and,
    when a store is attached, persists the ledger. Balances and settlements
    are recomputed from scratch on every query.
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
        id_factory: Callable[[], str] = uuid_ids,
        store: Optional[JsonStore] = None,
    ):
        self.ledger = ledger if ledger is not None else get_default_ledger()
        self.id_factory = id_factory
        self.store = store

    def _persist(self) -> None:
        if self.store is not None:
            self.store.save_ledger_state(self.ledger)

    # ---------- Participants ----------
    def get_participant(self, participant_id: str) -> Participant:
        p = next((x for x in self.ledger.participants if x.id == participant_id), None)
        if p is None:
            raise ParticipantNotFoundError(f"Unknown participant: {participant_id}")
        return p

    def participant_name(self, participant_id: str) -> str:
        """Display name, or the raw id for stale references"""
        p = next((x for x in self.ledger.participants if x.id == participant_id), None)
        return p.name if p else participant_id

    def add_participant(self, name: str, color: Optional[str] = None) -> Participant:
        """Add a participant; color defaults to the next palette entry"""
        name = validate_participant_name(name, self.ledger.participants)
        if not color:
            color = PARTICIPANT_COLORS[len(self.ledger.participants) % len(PARTICIPANT_COLORS)]
        p = Participant(id=self.id_factory(), name=name, color=color)
        self.ledger.participants.append(p)
        logger.info("Added participant %s (%s)", p.name, p.id)
        self._persist()
        return p

    def rename_participant(self, participant_id: str, name: str) -> Participant:
        old = self.get_participant(participant_id)
        name = validate_participant_name(name, self.ledger.participants, exclude_id=participant_id)
        new = replace(old, name=name)
        self.ledger.participants = [new if p.id == participant_id else p for p in self.ledger.participants]
        logger.info("Renamed participant %s: %s -> %s", participant_id, old.name, name)
        self._persist()
        return new

    def is_participant_referenced(self, participant_id: str) -> bool:
        """Whether any expense names the participant as payer or split target"""
        return any(
            e.paid_by == participant_id or any(s.participant_id == participant_id for s in e.splits)
            for e in self.ledger.expenses
        )

    def remove_participant(self, participant_id: str) -> Participant:
        p = self.get_participant(participant_id)
        if self.is_participant_referenced(participant_id):
            raise ParticipantInUseError(f"{p.name} has associated expenses.")
        self.ledger.participants = [x for x in self.ledger.participants if x.id != participant_id]
        logger.info("Removed participant %s (%s)", p.name, p.id)
        self._persist()
        return p

    # ---------- Expenses ----------
    def get_expense(self, expense_id: str) -> Expense:
        e = next((x for x in self.ledger.expenses if x.id == expense_id), None)
        if e is None:
            raise ExpenseNotFoundError(f"Unknown expense: {expense_id}")
        return e

    def save_expense(
        self,
        description: str,
        amount,
        paid_by: str,
        date: Optional[str] = None,
        splits: Optional[Sequence[Split]] = None,
        expense_id: Optional[str] = None,
    ) -> Expense:
        """
        Add a new expense, or replace the one with expense_id.
        splits=None splits the amount equally among all current participants.
        """
        if expense_id is not None:
            self.get_expense(expense_id)

        participants = self.ledger.participants
        if splits is None:
            if not participants:
                raise ValidationError({"splits": "Add at least one participant first"})
            splits = equal_splits(participants)
        date = today_str() if date is None else date.strip()

        validate_expense_fields(
            description, amount, paid_by, date, splits, {p.id for p in participants}
        )

        expense = Expense(
            id=expense_id or self.id_factory(),
            description=description.strip(),
            amount=float(amount),
            paid_by=paid_by,
            date=date,
            splits=tuple(Split(s.participant_id, float(s.percentage)) for s in splits),
        )
        if expense_id is None:
            self.ledger.expenses.append(expense)
            logger.info("Added expense %s (%s)", expense.description, expense.id)
        else:
            self.ledger.expenses = [expense if e.id == expense_id else e for e in self.ledger.expenses]
            logger.info("Updated expense %s (%s)", expense.description, expense.id)
        self._persist()
        return expense

    def delete_expense(self, expense_id: str) -> Expense:
        e = self.get_expense(expense_id)
        self.ledger.expenses = [x for x in self.ledger.expenses if x.id != expense_id]
        logger.info("Deleted expense %s (%s)", e.description, e.id)
        self._persist()
        return e

    def replace_expenses(self, expenses: List[Expense], append: bool = False) -> None:
        """
        Bulk import: append to or replace the current expenses.
        Every expense is validated and ids must stay unique; on any problem
        nothing is admitted and ValidationError names the offending entries.
        """
        participant_ids = {p.id for p in self.ledger.participants}
        seen = {e.id for e in self.ledger.expenses} if append else set()
        errors: Dict[str, str] = {}
        for n, e in enumerate(expenses, 1):
            problems = expense_field_errors(
                e.description, e.amount, e.paid_by, e.date, e.splits, participant_ids
            )
            if not e.id:
                problems["id"] = "Missing expense id"
            elif e.id in seen:
                problems["id"] = f"Duplicate expense id {e.id}"
            seen.add(e.id)
            if problems:
                errors[f"expense {n}"] = f"expense {n} ({e.id or '?'}): " + "; ".join(problems.values())
        if errors:
            raise ValidationError(errors)

        if append:
            self.ledger.expenses.extend(expenses)
        else:
            self.ledger.expenses = list(expenses)
        logger.info("%s %d expenses", "Appended" if append else "Replaced with", len(expenses))
        self._persist()

    # ---------- Settings ----------
    def set_currency(self, code: str):
        c = find_currency(code)
        if c is None:
            raise UnknownCurrencyError(f"Unknown currency: {code}")
        self.ledger.currency = c
        self._persist()
        return c

    def load(self, ledger: Ledger) -> None:
        """Swap in a whole ledger (New/Open)"""
        self.ledger = ledger
        self._persist()

    # ---------- Derived ----------
    def balances(self) -> Dict[str, Balance]:
        return aggregate(self.ledger.participants, self.ledger.expenses)

    def settlements(self) -> List[Settlement]:
        return plan_settlements(net_balances(self.balances()))

    def total(self) -> float:
        return total_expenses(self.ledger.expenses)
