from __future__ import annotations
from datetime import date

from models import Expense, Participant, Split
from report import export_html, money, render_html, summary_text, whatsapp_share_url


def test_summary_text(ledger):
    text = summary_text(ledger)

    assert "Total Expenses: $100.00" in text
    assert "- Alice: gets back $50.00" in text
    assert "- Bob: owes $50.00" in text
    assert "- Bob pays $50.00 to Alice" in text
    assert "- Lunch: $100.00 (paid by Alice)" in text


def test_summary_text_when_settled(ledger):
    ledger.expenses = [Expense("e2", "Coffee", 4.0, "a", "2024-03-01", (Split("a", 100.0),))]
    text = summary_text(ledger)

    assert "- Alice: is settled" in text
    assert "- Bob: is settled" in text
    assert "Settlements Needed" not in text


def test_money(ledger):
    assert money(ledger.currency, 3.14159) == "$3.14"


def test_whatsapp_share_url():
    assert whatsapp_share_url("a b\nc&d") == "https://wa.me/?text=a%20b%0Ac%26d"


def test_render_html(ledger):
    html = render_html(ledger, today=date(2024, 3, 5))

    assert html.startswith("<!DOCTYPE html>")
    assert "2024-03-05" in html
    assert "Settlement Required" in html
    assert "<strong>Bob</strong> owes <strong>Alice</strong>: <strong>$50.00</strong>" in html
    assert '<span class="positive">$50.00 to receive</span>' in html
    assert '<span class="negative">$50.00 owes</span>' in html


def test_render_html_escapes_and_reports_settled(ledger):
    ledger.participants.append(Participant("c", "<Carol & co>"))
    ledger.expenses = [Expense("e2", "<script>", 4.0, "c", "2024-03-01", (Split("c", 100.0),))]
    html = render_html(ledger, today=date(2024, 3, 5))

    assert "<script>" not in html
    assert "&lt;Carol &amp; co&gt;" in html
    assert "All Settled!" in html


def test_render_html_empty_ledger(ledger):
    ledger.expenses = []
    html = render_html(ledger)
    assert "All Settled!" not in html
    assert "Expense Details" not in html


def test_export_html(tmp_path, ledger):
    path = tmp_path / "summary.html"
    export_html(ledger, str(path), today=date(2024, 3, 5))
    assert path.read_text(encoding="utf-8") == render_html(ledger, today=date(2024, 3, 5))
