"""
Form validation for participants and expenses
"""
from __future__ import annotations
import math
from typing import Collection, Dict, Optional, Sequence

from computations import EPSILON, split_total
from errors import ValidationError
from models import Participant, Split
from utils import parse_date, safe_float


def validate_participant_name(
    name: str,
    participants: Sequence[Participant],
    exclude_id: Optional[str] = None
) -> str:
    """Return the trimmed name, or raise ValidationError if empty or taken"""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError({"name": "Name is required"})
    lowered = trimmed.lower()
    if any(p.id != exclude_id and p.name.lower() == lowered for p in participants):
        raise ValidationError({"name": "Name already exists"})
    return trimmed


def expense_field_errors(
    description: str,
    amount,
    paid_by: str,
    date: str,
    splits: Sequence[Split],
    participant_ids: Collection[str]
) -> Dict[str, str]:
    """Check expense form fields; returns field -> message for every problem found"""
    errors: Dict[str, str] = {}

    if not (description or "").strip():
        errors["description"] = "Description is required"

    amt = safe_float(amount, None)
    if amt is None or not math.isfinite(amt) or amt <= 0:
        errors["amount"] = "Valid amount is required"

    if not paid_by:
        errors["paid_by"] = "Please select who paid"
    elif paid_by not in participant_ids:
        errors["paid_by"] = "Payer is not a participant"

    try:
        parse_date(date or "")
    except ValueError:
        errors["date"] = "Date must be YYYY-MM-DD"

    if not splits:
        errors["splits"] = "At least one participant must share the expense"
    elif any(s.participant_id not in participant_ids for s in splits):
        errors["splits"] = "Split refers to an unknown participant"
    elif len({s.participant_id for s in splits}) != len(splits):
        errors["splits"] = "Each participant may appear only once"
    elif any(s.percentage < 0 for s in splits):
        errors["splits"] = "Split percentages cannot be negative"
    elif abs(split_total(splits) - 100.0) > EPSILON:
        errors["splits"] = "Split percentages must total 100%"

    return errors


def validate_expense_fields(
    description: str,
    amount,
    paid_by: str,
    date: str,
    splits: Sequence[Split],
    participant_ids: Collection[str]
) -> None:
    """Raise ValidationError unless the expense form is acceptable"""
    errors = expense_field_errors(description, amount, paid_by, date, splits, participant_ids)
    if errors:
        raise ValidationError(errors)
