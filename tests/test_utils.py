from __future__ import annotations
from datetime import date

import pytest

from utils import CounterIds, parse_date_range, safe_float


def test_parse_date_range_blank_is_open_ended():
    assert parse_date_range("", "  ") == (None, None)
    assert parse_date_range(None, None) == (None, None)


def test_parse_date_range_parses_bounds():
    assert parse_date_range("2024-01-01", " 2024-01-31 ") == (date(2024, 1, 1), date(2024, 1, 31))
    assert parse_date_range("", "2024-01-31") == (None, date(2024, 1, 31))


def test_parse_date_range_rejects_bad_start():
    with pytest.raises(ValueError, match="Start date"):
        parse_date_range("bad-date", "2024-01-31")


def test_parse_date_range_rejects_bad_end():
    with pytest.raises(ValueError, match="End date"):
        parse_date_range("2024-01-01", "31/01/2024")


def test_safe_float():
    assert safe_float("2.5") == 2.5
    assert safe_float("x") == 0.0
    assert safe_float(None, None) is None


def test_counter_ids():
    ids = CounterIds("p")
    assert [ids(), ids()] == ["p1", "p2"]
