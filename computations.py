"""
Balance accounting and settlement computations for ExpenseSplitter
"""
from __future__ import annotations
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from models import Balance, Expense, Participant, Settlement, Split
from utils import parse_date

# Smallest amount worth settling; also absorbs float noise.
EPSILON = 0.01


def equal_split_percentage(n: int) -> float:
    """Percentage each of n participants carries in an equal split (n must be > 0)"""
    return 100.0 / n


def equal_splits(participants: Sequence[Participant]) -> Tuple[Split, ...]:
    """Build an equal split over all given participants"""
    pct = equal_split_percentage(len(participants))
    return tuple(Split(p.id, pct) for p in participants)


def split_total(splits: Iterable[Split]) -> float:
    """Sum of split percentages"""
    return sum(float(s.percentage) for s in splits)


def is_equal_split(expense: Expense, participant_count: int) -> bool:
    """Whether every split of expense matches the equal share for participant_count people"""
    if participant_count <= 0 or len(expense.splits) != participant_count:
        return False
    pct = equal_split_percentage(participant_count)
    return all(abs(s.percentage - pct) < EPSILON for s in expense.splits)


def total_expenses(expenses: Iterable[Expense]) -> float:
    """Total amount spent across expenses"""
    return sum(float(e.amount) for e in expenses)


def filter_expenses_by_date(
    expenses: List[Expense],
    start: Optional[date],
    end: Optional[date]
) -> List[Expense]:
    """Filter expenses by inclusive date range"""
    out = []
    for e in expenses:
        ed = parse_date(e.date)
        if start and ed < start:
            continue
        if end and ed > end:
            continue
        out.append(e)
    return out


def aggregate(
    participants: Sequence[Participant],
    expenses: Iterable[Expense]
) -> Dict[str, Balance]:
    """
    Compute each participant's total paid, total owed and net balance.
    Payers or split targets that do not resolve to a participant are skipped.
    Returns dict mapping participant id -> Balance, in participant order.
    """
    paid = {p.id: 0.0 for p in participants}
    owed = {p.id: 0.0 for p in participants}

    for e in expenses:
        amount = float(e.amount)
        if e.paid_by in paid:
            paid[e.paid_by] += amount
        for s in e.splits:
            if s.participant_id in owed:
                owed[s.participant_id] += amount * float(s.percentage) / 100.0

    return {pid: Balance(pid, paid[pid], owed[pid]) for pid in paid}


def net_balances(balances: Mapping[str, Balance]) -> Dict[str, float]:
    """Project aggregated balances onto participant id -> net balance"""
    return {pid: b.balance for pid, b in balances.items()}


def plan_settlements(balances: Mapping[str, float], eps: float = EPSILON) -> List[Settlement]:
    """
    Compute transfers to settle debts.
    Greedy settlement: each debtor, in input order, pays creditors in input order.
    net>0 creditor; net<0 debtor. The number of transfers is not minimized.
    """
    debtors = [(p, -v) for p, v in balances.items() if v < -eps]
    creditors = [[p, v] for p, v in balances.items() if v > eps]

    transfers = []
    for dname, remaining in debtors:
        for creditor in creditors:
            if remaining <= eps:
                break
            cname, camt = creditor
            if camt <= eps:
                continue
            x = min(remaining, camt)
            if x > eps:
                transfers.append(Settlement(dname, cname, x))
                remaining -= x
                creditor[1] = camt - x

    return transfers


def balance_status(balance: float, eps: float = EPSILON) -> str:
    """Describe a net balance: 'gets back', 'owes' or 'settled'"""
    if balance > eps:
        return "gets back"
    if balance < -eps:
        return "owes"
    return "settled"
