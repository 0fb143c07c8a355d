"""
Excel export functionality for ExpenseSplitter
"""
from __future__ import annotations
from datetime import date
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Ledger
from computations import (
    aggregate,
    balance_status,
    filter_expenses_by_date,
    net_balances,
    plan_settlements,
    total_expenses,
)


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F81BD")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def export_excel(
    ledger: Ledger,
    filepath: str,
    start: Optional[date] = None,
    end: Optional[date] = None
) -> None:
    """
    Export ledger to Excel file with three sheets:
    - Summary: paid, owed and net balance per participant
    - Settlements: who pays whom
    - Expenses: one row per expense with each participant's share
    """
    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    participants = ledger.participants
    names = {p.id: p.name for p in participants}
    exps = filter_expenses_by_date(ledger.expenses, start, end)
    balances = aggregate(participants, exps)
    money_fmt = f'"{ledger.currency.symbol}"#,##0.00'

    # Summary sheet
    ws = wb.create_sheet("Summary")
    ws.append(["Participant", "Paid", "Owed", "Balance", "Status"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for p in participants:
        b = balances[p.id]
        ws.append([p.name, b.total_paid, b.total_owed, b.balance, balance_status(b.balance)])
    ws.append(["TOTAL", total_expenses(exps)])
    ws.cell(ws.max_row, 1).font = Font(bold=True)
    for r in range(2, ws.max_row + 1):
        for c in range(2, 5):
            ws.cell(r, c).number_format = money_fmt
    _autosize_columns(ws)

    # Settlements sheet
    ws = wb.create_sheet("Settlements")
    ws.append(["From (Debtor)", "To (Creditor)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for s in plan_settlements(net_balances(balances)):
        ws.append([names.get(s.from_id, s.from_id), names.get(s.to_id, s.to_id), s.amount])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 3).number_format = money_fmt
    _autosize_columns(ws)

    # Expenses sheet: share columns hold each participant's owed amount
    ws = wb.create_sheet("Expenses")
    headers = ["date", "description", "paid by", "amount"] + [p.name for p in participants]
    ws.append(headers)
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in sorted(exps, key=lambda x: x.date):
        shares = {p.id: 0.0 for p in participants}
        for s in e.splits:
            if s.participant_id in shares:
                shares[s.participant_id] += e.amount * s.percentage / 100.0
        ws.append(
            [e.date, e.description, names.get(e.paid_by, e.paid_by), e.amount]
            + [shares[p.id] for p in participants]
        )
    if ws.max_row >= 2:
        last = ws.max_row
        ws.append(["TOTALS"] + [""] * (len(headers) - 1))
        trow = ws.max_row
        ws.cell(trow, 1).font = Font(bold=True)
        for col in range(4, len(headers) + 1):
            letter = get_column_letter(col)
            ws.cell(trow, col).value = f"=SUM({letter}2:{letter}{last})"
    for r in range(2, ws.max_row + 1):
        for c in range(4, len(headers) + 1):
            ws.cell(r, c).number_format = money_fmt
    _autosize_columns(ws)

    wb.save(filepath)
