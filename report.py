"""
Text and HTML summaries for sharing and export
"""
from __future__ import annotations
from datetime import date
from html import escape
from typing import Dict, Optional
from urllib.parse import quote

from computations import EPSILON, aggregate, balance_status, net_balances, plan_settlements, total_expenses
from models import Currency, Ledger

WHATSAPP_URL = "https://wa.me/?text="


def money(currency: Currency, amount: float) -> str:
    """Format an amount with the currency symbol and two decimals"""
    return f"{currency.symbol}{amount:.2f}"


def _names(ledger: Ledger) -> Dict[str, str]:
    return {p.id: p.name for p in ledger.participants}


def summary_text(ledger: Ledger) -> str:
    """Plain-text summary used for the clipboard and share links"""
    cur = ledger.currency
    names = _names(ledger)
    net = net_balances(aggregate(ledger.participants, ledger.expenses))
    settlements = plan_settlements(net)

    lines = ["Expense Summary", f"Total Expenses: {money(cur, total_expenses(ledger.expenses))}", ""]

    lines.append("Participants:")
    for p in ledger.participants:
        bal = net[p.id]
        status = balance_status(bal)
        if status == "settled":
            lines.append(f"- {p.name}: is settled")
        else:
            lines.append(f"- {p.name}: {status} {money(cur, abs(bal))}")

    if settlements:
        lines += ["", "Settlements Needed:"]
        for s in settlements:
            lines.append(
                f"- {names.get(s.from_id, s.from_id)} pays {money(cur, s.amount)} "
                f"to {names.get(s.to_id, s.to_id)}"
            )

    lines += ["", "Expense Details:"]
    for e in ledger.expenses:
        lines.append(
            f"- {e.description}: {money(cur, e.amount)} (paid by {names.get(e.paid_by, e.paid_by)})"
        )

    return "\n".join(lines) + "\n"


def whatsapp_share_url(text: str) -> str:
    """Share link that opens WhatsApp with text prefilled"""
    return WHATSAPP_URL + quote(text, safe="")


_HTML_STYLE = """
    body { font-family: Arial, sans-serif; margin: 20px; line-height: 1.6; }
    .header { text-align: center; color: #333; border-bottom: 2px solid #eee; padding-bottom: 10px; }
    .section { margin: 20px 0; }
    .settlement { background: #f8f9fa; padding: 10px; border-radius: 5px; margin: 5px 0; }
    .expense { background: #fff; border: 1px solid #ddd; padding: 10px; margin: 5px 0; border-radius: 5px; }
    .balance { display: flex; justify-content: space-between; padding: 5px 0; }
    .positive { color: #16a34a; }
    .negative { color: #dc2626; }
    .neutral { color: #6b7280; }
"""


def render_html(ledger: Ledger, today: Optional[date] = None) -> str:
    """Render a standalone HTML page summarizing the ledger"""
    today = today or date.today()
    cur = ledger.currency
    names = {pid: escape(n) for pid, n in _names(ledger).items()}
    net = net_balances(aggregate(ledger.participants, ledger.expenses))
    settlements = plan_settlements(net)

    def m(amount: float) -> str:
        return escape(money(cur, amount))

    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        "<title>Expense Split Summary</title>",
        f"<style>{_HTML_STYLE}</style>",
        "</head>",
        "<body>",
        '<div class="header">',
        "<h1>Expense Split Summary</h1>",
        f"<p>{today.isoformat()}</p>",
        "</div>",
        '<div class="section">',
        "<h2>Overview</h2>",
        f"<p><strong>Total Expenses:</strong> {m(total_expenses(ledger.expenses))}</p>",
        f"<p><strong>Participants:</strong> {len(ledger.participants)}</p>",
        "</div>",
    ]

    if settlements:
        parts += ['<div class="section">', "<h2>Settlement Required</h2>"]
        for s in settlements:
            parts.append(
                f'<div class="settlement"><strong>{names.get(s.from_id, escape(s.from_id))}</strong> owes '
                f"<strong>{names.get(s.to_id, escape(s.to_id))}</strong>: <strong>{m(s.amount)}</strong></div>"
            )
        parts.append("</div>")
    elif ledger.expenses:
        parts += ['<div class="section">', "<h2>All Settled!</h2>", "<p>No payments needed.</p>", "</div>"]

    parts += ['<div class="section">', "<h2>Balance Summary</h2>"]
    for p in ledger.participants:
        bal = net[p.id]
        if bal > EPSILON:
            css, label = "positive", "to receive"
        elif bal < -EPSILON:
            css, label = "negative", "owes"
        else:
            css, label = "neutral", "settled"
        parts.append(
            f'<div class="balance"><span><strong>{names[p.id]}:</strong></span>'
            f'<span class="{css}">{m(abs(bal))} {label}</span></div>'
        )
    parts.append("</div>")

    if ledger.expenses:
        parts += ['<div class="section">', "<h2>Expense Details</h2>"]
        for e in ledger.expenses:
            parts.append(
                f'<div class="expense"><strong>{escape(e.description)}</strong><br>'
                f"Amount: {m(e.amount)}<br>"
                f"Paid by: {names.get(e.paid_by, escape(e.paid_by))}<br>"
                f"Date: {escape(e.date)}</div>"
            )
        parts.append("</div>")

    parts += ["</body>", "</html>"]
    return "\n".join(parts) + "\n"


def export_html(ledger: Ledger, filepath: str, today: Optional[date] = None) -> None:
    """Write the HTML summary to filepath"""
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(render_html(ledger, today))
