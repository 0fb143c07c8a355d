"""
Utility functions for ExpenseSplitter application
"""
from __future__ import annotations
import itertools
import os
import uuid
from datetime import date, datetime
from typing import Optional, Tuple


def today_str() -> str:
    """Get today's date as ISO string"""
    return date.today().isoformat()


def parse_date(s: str) -> date:
    """Parse YYYY-MM-DD date string"""
    return datetime.strptime(s.strip(), "%Y-%m-%d").date()


def parse_date_range(start: str, end: str) -> Tuple[Optional[date], Optional[date]]:
    """Parse optional YYYY-MM-DD bounds; blank means open-ended"""
    bounds = []
    for label, s in (("Start", start), ("End", end)):
        s = (s or "").strip()
        try:
            bounds.append(parse_date(s) if s else None)
        except ValueError:
            raise ValueError(f"{label} date must be YYYY-MM-DD.") from None
    return bounds[0], bounds[1]


def safe_float(x: str, default: float = 0.0) -> float:
    """Convert string to float safely, returning default on error"""
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def uuid_ids() -> str:
    """Default identifier factory: random UUID4 string"""
    return str(uuid.uuid4())


class CounterIds:
    """Deterministic identifier factory: prefix plus a monotonic counter"""

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


def app_dir() -> str:
    """
    Get application data directory.
    EXPENSE_SPLITTER_HOME wins; otherwise ~/.expense_splitter.
    Creates directory if it doesn't exist.
    """
    path = os.getenv("EXPENSE_SPLITTER_HOME") or os.path.join(
        os.path.expanduser("~"), ".expense_splitter"
    )
    os.makedirs(path, exist_ok=True)
    return path
