"""
Dialog windows for ExpenseSplitter GUI
"""
from __future__ import annotations
from typing import Dict, List, Optional

try:
    import tkinter as tk
    from tkinter import ttk, messagebox
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None

from computations import equal_split_percentage, is_equal_split
from errors import ValidationError
from models import Expense, Participant, Split
from session import LedgerSession
from utils import today_str, safe_float

_Toplevel = tk.Toplevel if tk is not None else object


class SplitEditor(_Toplevel):
    """Dialog for editing custom split percentages"""

    def __init__(self, master, participants: List[Participant], splits: Dict[str, float]):
        super().__init__(master)
        self.title("Custom Split (%)")
        self.resizable(False, False)
        self.participants = participants
        self.vars: Dict[str, tk.StringVar] = {}
        self.result: Optional[Dict[str, float]] = None

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        ttk.Label(frm, text="Enter each participant's percentage (must total 100).").grid(
            row=0, column=0, columnspan=3, sticky="w", pady=(0, 8)
        )

        for i, p in enumerate(participants):
            ttk.Label(frm, text=p.name).grid(row=i + 1, column=0, sticky="w")
            v = tk.StringVar(value=f"{splits.get(p.id, 0.0):g}")
            self.vars[p.id] = v
            ttk.Entry(frm, textvariable=v, width=10).grid(row=i + 1, column=1, sticky="w")

        self.sum_var = tk.StringVar(value="")
        ttk.Label(frm, textvariable=self.sum_var).grid(row=1, column=2, rowspan=max(1, len(participants)), sticky="n")

        btns = ttk.Frame(frm)
        btns.grid(row=len(participants) + 2, column=0, columnspan=3, sticky="ew", pady=(10, 0))
        ttk.Button(btns, text="Equal", command=self._equal).grid(row=0, column=0, padx=3)
        ttk.Button(btns, text="Clear", command=self._clear).grid(row=0, column=1, padx=3)
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=2, padx=12)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=3, padx=3)

        for v in self.vars.values():
            v.trace_add("write", lambda *_: self._update_sum())
        self._update_sum()

        self.grab_set()
        self.transient(master)

    def _read(self) -> Dict[str, float]:
        """Read current percentages from inputs"""
        return {pid: safe_float(v.get(), 0.0) for pid, v in self.vars.items()}

    def _update_sum(self):
        """Update sum label"""
        self.sum_var.set(f"Total: {sum(self._read().values()):.2f}%")

    def _equal(self):
        """Give every participant the same percentage"""
        pct = equal_split_percentage(len(self.participants))
        for v in self.vars.values():
            v.set(f"{pct:g}")

    def _clear(self):
        for v in self.vars.values():
            v.set("0")

    def _ok(self):
        self.result = self._read()
        self.destroy()

    def _cancel(self):
        self.result = None
        self.destroy()


class ExpenseDialog(_Toplevel):
    """Dialog for adding/editing an expense"""

    def __init__(self, master, session: LedgerSession, expense: Optional[Expense] = None):
        super().__init__(master)
        self.title("Add Expense" if expense is None else "Edit Expense")
        self.resizable(False, False)
        self.session = session
        self.expense = expense
        self.result: Optional[Expense] = None

        self._bind_enter_to_ok()

        participants = session.ledger.participants
        self.name_to_id = {p.name: p.id for p in participants}
        names = list(self.name_to_id)

        frm = ttk.Frame(self, padding=10)
        frm.grid(row=0, column=0, sticky="nsew")

        self.v_description = tk.StringVar(value=expense.description if expense else "")
        self.v_amount = tk.StringVar(value=f"{expense.amount:g}" if expense else "")
        self.v_payer = tk.StringVar(
            value=session.participant_name(expense.paid_by) if expense else ""
        )
        self.v_date = tk.StringVar(value=expense.date if expense else today_str())

        equal = expense is None or is_equal_split(expense, len(participants))
        self.v_split_type = tk.StringVar(value="equal" if equal else "custom")
        self.custom: Dict[str, float] = (
            {} if equal else {s.participant_id: s.percentage for s in expense.splits}
        )

        r = 0
        ttk.Label(frm, text="Description").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_description, width=28).grid(row=r, column=1, sticky="w")
        r += 1

        ttk.Label(frm, text=f"Amount ({session.ledger.currency.symbol})").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_amount, width=18).grid(row=r, column=1, sticky="w")
        r += 1

        ttk.Label(frm, text="Paid by").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Combobox(frm, textvariable=self.v_payer, values=names,
                     width=16, state="readonly").grid(row=r, column=1, sticky="w")
        r += 1

        ttk.Label(frm, text="Date (YYYY-MM-DD)").grid(row=r, column=0, sticky="w", pady=2)
        ttk.Entry(frm, textvariable=self.v_date, width=18).grid(row=r, column=1, sticky="w")
        r += 1

        split_frame = ttk.Frame(frm)
        split_frame.grid(row=r, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        ttk.Radiobutton(split_frame, text="Split equally", value="equal",
                        variable=self.v_split_type, command=self._refresh_split_label).grid(row=0, column=0, sticky="w")
        ttk.Radiobutton(split_frame, text="Custom split", value="custom",
                        variable=self.v_split_type, command=self._edit_custom).grid(row=0, column=1, sticky="w")
        ttk.Button(split_frame, text="Edit Percentages…", command=self._edit_custom).grid(row=0, column=2, padx=6)
        r += 1

        self.split_label = ttk.Label(frm, text="")
        self.split_label.grid(row=r, column=0, columnspan=2, sticky="w", pady=(4, 0))
        self._refresh_split_label()
        r += 1

        btns = ttk.Frame(frm)
        btns.grid(row=r, column=0, columnspan=2, sticky="e", pady=(10, 0))
        ttk.Button(btns, text="OK", command=self._ok).grid(row=0, column=0, padx=4)
        ttk.Button(btns, text="Cancel", command=self._cancel).grid(row=0, column=1, padx=4)

        self.grab_set()
        self.transient(master)

    def _bind_enter_to_ok(self):
        """Bind Enter/Return to OK"""

        def on_enter(event=None):
            self._ok()
            return "break"

        self.bind("<Return>", on_enter)
        self.bind("<KP_Enter>", on_enter)

    def _splits(self) -> Optional[List[Split]]:
        """None means equal split over everyone"""
        if self.v_split_type.get() == "equal":
            return None
        return [Split(pid, pct) for pid, pct in self.custom.items()]

    def _refresh_split_label(self):
        participants = self.session.ledger.participants
        if self.v_split_type.get() == "equal":
            text = f"Equal split among {len(participants)} participant(s)"
        else:
            text = "  ".join(f"{p.name}:{self.custom.get(p.id, 0.0):.2f}%" for p in participants)
        self.split_label.config(text=text)

    def _edit_custom(self):
        """Open split editor; starts from an equal split"""
        participants = self.session.ledger.participants
        self.v_split_type.set("custom")
        if not self.custom:
            pct = equal_split_percentage(len(participants))
            self.custom = {p.id: pct for p in participants}
        dlg = SplitEditor(self, participants, self.custom)
        self.wait_window(dlg)
        if dlg.result is not None:
            self.custom = dlg.result
        self._refresh_split_label()

    def _ok(self):
        """Validate and save expense"""
        try:
            self.result = self.session.save_expense(
                description=self.v_description.get(),
                amount=self.v_amount.get(),
                paid_by=self.name_to_id.get(self.v_payer.get(), ""),
                date=self.v_date.get(),
                splits=self._splits(),
                expense_id=self.expense.id if self.expense else None,
            )
        except ValidationError as ex:
            messagebox.showerror("Invalid expense", "\n".join(ex.errors.values()), parent=self)
            return
        self.destroy()

    def _cancel(self):
        self.result = None
        self.destroy()
