"""
Main application window for ExpenseSplitter GUI
"""
from __future__ import annotations
import logging
import os
import webbrowser
from datetime import date
from typing import Optional, Tuple

try:
    import tkinter as tk
    from tkinter import ttk, messagebox, filedialog
except ModuleNotFoundError:
    tk = None
    ttk = None
    messagebox = None
    filedialog = None

from config import CURRENCIES, get_default_ledger, load_ledger_file, save_ledger_file
from computations import aggregate, balance_status, filter_expenses_by_date, net_balances, plan_settlements
from csv_handler import export_expenses_to_csv, import_expenses_from_csv
from errors import LedgerError, ValidationError
from excel_export import export_excel
from gui_dialogs import ExpenseDialog
from report import export_html, summary_text, whatsapp_share_url
from session import LedgerSession
from utils import parse_date_range

logger = logging.getLogger(__name__)

_Frame = ttk.Frame if ttk is not None else object


class ExpenseSplitterApp(_Frame):
    """Main application window"""

    def __init__(self, master: tk.Tk, session: LedgerSession):
        super().__init__(master, padding=8)
        self.master = master
        self.master.title("ExpenseSplitter")
        self.master.geometry("1000x620")
        self.grid(row=0, column=0, sticky="nsew")
        self.master.rowconfigure(0, weight=1)
        self.master.columnconfigure(0, weight=1)

        self.ledger_path: Optional[str] = None
        self.session = session

        self._build_menu()
        self._build_ui()
        self.refresh_all()

    # ---------- Menu ----------
    def _build_menu(self):
        """Build application menu bar"""
        menubar = tk.Menu(self.master)
        filem = tk.Menu(menubar, tearoff=0)
        filem.add_command(label="New", command=self.new_ledger)
        filem.add_command(label="Open…", command=self.open_ledger)
        filem.add_command(label="Save", command=self.save_ledger)
        filem.add_command(label="Save As…", command=self.save_as_ledger)
        filem.add_separator()
        filem.add_command(label="Export CSV…", command=self.export_csv_dialog)
        filem.add_command(label="Import CSV…", command=self.import_csv_dialog)
        filem.add_separator()
        filem.add_command(label="Export Excel…", command=self.export_excel_dialog)
        filem.add_command(label="Export HTML…", command=self.export_html_dialog)
        filem.add_separator()
        filem.add_command(label="Exit", command=self.master.destroy)
        menubar.add_cascade(label="File", menu=filem)

        sharem = tk.Menu(menubar, tearoff=0)
        sharem.add_command(label="Copy Summary", command=self.copy_summary)
        sharem.add_command(label="Share via WhatsApp", command=self.share_whatsapp)
        menubar.add_cascade(label="Share", menu=sharem)

        self.master.config(menu=menubar)

    # ---------- UI ----------
    def _build_ui(self):
        """Build main UI with tabs"""
        nb = ttk.Notebook(self)
        nb.grid(row=0, column=0, sticky="nsew")
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.tab_expenses = ttk.Frame(nb, padding=8)
        self.tab_people = ttk.Frame(nb, padding=8)
        self.tab_reports = ttk.Frame(nb, padding=8)

        nb.add(self.tab_expenses, text="Expenses")
        nb.add(self.tab_people, text="Participants")
        nb.add(self.tab_reports, text="Summary")

        self._build_expenses_tab()
        self._build_people_tab()
        self._build_reports_tab()

    def _build_expenses_tab(self):
        """Build expenses tab"""
        top = ttk.Frame(self.tab_expenses)
        top.grid(row=0, column=0, sticky="ew")
        self.tab_expenses.columnconfigure(0, weight=1)

        ttk.Button(top, text="Add", command=self.add_expense).pack(side="left", padx=3)
        ttk.Button(top, text="Edit", command=self.edit_selected_expense).pack(side="left", padx=3)
        ttk.Button(top, text="Delete", command=self.delete_selected_expense).pack(side="left", padx=3)

        ttk.Separator(self.tab_expenses, orient="horizontal").grid(row=1, column=0, sticky="ew", pady=6)

        cols = ("date", "description", "paid_by", "amount", "splits")
        self.exp_tree = ttk.Treeview(self.tab_expenses, columns=cols, show="headings", height=18)
        for c, w in zip(cols, [95, 240, 120, 100, 420]):
            self.exp_tree.heading(c, text=c)
            self.exp_tree.column(c, width=w, anchor="w")
        self.exp_tree.grid(row=2, column=0, sticky="nsew")
        self.tab_expenses.rowconfigure(2, weight=1)

        yscroll = ttk.Scrollbar(self.tab_expenses, orient="vertical", command=self.exp_tree.yview)
        self.exp_tree.configure(yscroll=yscroll.set)
        yscroll.grid(row=2, column=1, sticky="ns")

    def _build_people_tab(self):
        """Build participant management tab"""
        self.tab_people.columnconfigure(0, weight=1)
        frm = ttk.Frame(self.tab_people)
        frm.grid(row=0, column=0, sticky="nsew")

        ttk.Label(frm, text="Participants:").grid(row=0, column=0, sticky="w")
        self.people_list = tk.Listbox(frm, height=18)
        self.people_list.grid(row=1, column=0, sticky="nsew", pady=6)
        frm.rowconfigure(1, weight=1)
        frm.columnconfigure(0, weight=1)

        controls = ttk.Frame(frm)
        controls.grid(row=2, column=0, sticky="ew")
        self.new_person_var = tk.StringVar()
        ttk.Entry(controls, textvariable=self.new_person_var, width=18).pack(side="left")
        ttk.Button(controls, text="Add", command=self.add_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Rename Selected", command=self.rename_selected_person).pack(side="left", padx=4)
        ttk.Button(controls, text="Remove Selected", command=self.remove_selected_person).pack(side="left", padx=4)

        ttk.Label(frm, text="Note: participants referenced by an expense cannot be removed.").grid(
            row=3, column=0, sticky="w", pady=(8, 0))

    def _build_reports_tab(self):
        """Build summary tab"""
        self.tab_reports.columnconfigure(0, weight=1)

        filt = ttk.Frame(self.tab_reports)
        filt.grid(row=0, column=0, sticky="ew")
        ttk.Label(filt, text="Currency").pack(side="left")
        self.currency_var = tk.StringVar(value=self.session.ledger.currency.code)
        cur_box = ttk.Combobox(filt, textvariable=self.currency_var, values=[c.code for c in CURRENCIES],
                               width=6, state="readonly")
        cur_box.pack(side="left", padx=(4, 12))
        cur_box.bind("<<ComboboxSelected>>", lambda *_: self._change_currency())

        ttk.Label(filt, text="Start (YYYY-MM-DD)").pack(side="left")
        self.rep_start = tk.StringVar(value="")
        ttk.Entry(filt, textvariable=self.rep_start, width=12).pack(side="left", padx=4)
        ttk.Label(filt, text="End (YYYY-MM-DD)").pack(side="left")
        self.rep_end = tk.StringVar(value="")
        ttk.Entry(filt, textvariable=self.rep_end, width=12).pack(side="left", padx=4)

        ttk.Button(filt, text="Refresh", command=self.refresh_reports).pack(side="left", padx=8)
        ttk.Button(filt, text="Export Excel…", command=self.export_excel_dialog).pack(side="left", padx=3)

        self.report_note = tk.StringVar(value="")
        ttk.Label(self.tab_reports, textvariable=self.report_note).grid(row=1, column=0, sticky="w", pady=(6, 0))

        cols = ("participant", "paid", "owed", "balance", "status")
        self.sum_tree = ttk.Treeview(self.tab_reports, columns=cols, show="headings", height=10)
        for c, w in zip(cols, [140, 120, 120, 120, 120]):
            self.sum_tree.heading(c, text=c)
            self.sum_tree.column(c, width=w, anchor="w")
        self.sum_tree.grid(row=2, column=0, sticky="nsew", pady=6)
        self.tab_reports.rowconfigure(2, weight=1)

        ttk.Label(self.tab_reports, text="Settlements:").grid(row=3, column=0, sticky="w", pady=(10, 0))
        tcols = ("from", "to", "amount")
        self.tr_tree = ttk.Treeview(self.tab_reports, columns=tcols, show="headings", height=10)
        for c, w in zip(tcols, [140, 140, 120]):
            self.tr_tree.heading(c, text=c)
            self.tr_tree.column(c, width=w, anchor="w")
        self.tr_tree.grid(row=4, column=0, sticky="nsew")
        self.tab_reports.rowconfigure(4, weight=1)

    # ---------- CRUD: Expenses ----------
    def add_expense(self):
        """Add new expense"""
        if not self.session.ledger.participants:
            messagebox.showerror("No participants", "Please add at least one participant first.")
            return
        dlg = ExpenseDialog(self.master, self.session, None)
        self.master.wait_window(dlg)
        if dlg.result:
            self.refresh_all()

    def edit_selected_expense(self):
        """Edit selected expense"""
        sel = self.exp_tree.selection()
        if not sel:
            messagebox.showinfo("Edit", "Select an expense row first.")
            return
        try:
            e = self.session.get_expense(sel[0])
        except LedgerError as ex:
            messagebox.showerror("Edit", str(ex))
            return
        dlg = ExpenseDialog(self.master, self.session, e)
        self.master.wait_window(dlg)
        if dlg.result:
            self.refresh_all()

    def delete_selected_expense(self):
        """Delete selected expense"""
        sel = self.exp_tree.selection()
        if not sel:
            messagebox.showinfo("Delete", "Select an expense row first.")
            return
        if messagebox.askyesno("Delete", "Delete selected expense?"):
            try:
                self.session.delete_expense(sel[0])
            except LedgerError as ex:
                messagebox.showerror("Delete", str(ex))
            self.refresh_all()

    # ---------- CRUD: Participants ----------
    def _selected_participant_id(self) -> Optional[str]:
        sel = self.people_list.curselection()
        if not sel:
            return None
        return self.session.ledger.participants[sel[0]].id

    def add_person(self):
        """Add new participant"""
        try:
            self.session.add_participant(self.new_person_var.get())
        except LedgerError as ex:
            messagebox.showinfo("Participants", str(ex))
            return
        self.new_person_var.set("")
        self.refresh_all()

    def rename_selected_person(self):
        """Rename selected participant to the name in the entry box"""
        pid = self._selected_participant_id()
        if pid is None:
            return
        try:
            self.session.rename_participant(pid, self.new_person_var.get())
        except LedgerError as ex:
            messagebox.showinfo("Participants", str(ex))
            return
        self.new_person_var.set("")
        self.refresh_all()

    def remove_selected_person(self):
        """Remove selected participant"""
        pid = self._selected_participant_id()
        if pid is None:
            return
        name = self.session.participant_name(pid)
        if messagebox.askyesno("Remove participant", f"Remove '{name}'?"):
            try:
                self.session.remove_participant(pid)
            except LedgerError as ex:
                messagebox.showerror("Cannot Remove", str(ex))
                return
            self.refresh_all()

    def _change_currency(self):
        try:
            self.session.set_currency(self.currency_var.get())
        except LedgerError as ex:
            messagebox.showerror("Currency", str(ex))
        self.refresh_all()

    # ---------- File ops ----------
    def new_ledger(self):
        """Create new ledger"""
        if messagebox.askyesno("New", "Start a new ledger (unsaved changes will be lost)?"):
            self.session.load(get_default_ledger())
            self.ledger_path = None
            self.refresh_all()

    def open_ledger(self):
        """Open ledger from file"""
        fp = filedialog.askopenfilename(
            title="Open ledger JSON",
            filetypes=[("Ledger JSON", "*.json"), ("All files", "*.*")]
        )
        if not fp:
            return
        try:
            self.session.load(load_ledger_file(fp))
            self.ledger_path = fp
            self.refresh_all()
        except (OSError, ValueError, KeyError) as ex:
            logger.exception("Open failed: %s", fp)
            messagebox.showerror("Open failed", str(ex))

    def save_ledger(self):
        """Save ledger to file"""
        if not self.ledger_path:
            return self.save_as_ledger()
        try:
            save_ledger_file(self.session.ledger, self.ledger_path)
            self.master.title(f"ExpenseSplitter - {os.path.basename(self.ledger_path)}")
        except OSError as ex:
            logger.exception("Save failed: %s", self.ledger_path)
            messagebox.showerror("Save failed", str(ex))

    def save_as_ledger(self):
        """Save ledger to new file"""
        fp = filedialog.asksaveasfilename(
            title="Save ledger JSON",
            defaultextension=".json",
            filetypes=[("Ledger JSON", "*.json")]
        )
        if not fp:
            return
        self.ledger_path = fp
        self.save_ledger()

    def export_excel_dialog(self):
        """Export to Excel file"""
        dates = self._get_report_dates()
        if dates is None:
            return
        start, end = dates
        fp = filedialog.asksaveasfilename(
            title="Export Excel",
            defaultextension=".xlsx",
            filetypes=[("Excel Workbook", "*.xlsx")]
        )
        if not fp:
            return
        try:
            export_excel(self.session.ledger, fp, start, end)
            messagebox.showinfo("Export", f"Exported: {fp}")
        except OSError as ex:
            logger.exception("Excel export failed: %s", fp)
            messagebox.showerror("Export failed", str(ex))

    def export_html_dialog(self):
        """Export the summary as an HTML page"""
        fp = filedialog.asksaveasfilename(
            title="Export HTML",
            defaultextension=".html",
            initialfile=f"expense-summary-{date.today().isoformat()}.html",
            filetypes=[("HTML", "*.html")]
        )
        if not fp:
            return
        try:
            export_html(self.session.ledger, fp)
            messagebox.showinfo("Export", f"Exported: {fp}")
        except OSError as ex:
            logger.exception("HTML export failed: %s", fp)
            messagebox.showerror("Export failed", str(ex))

    # ---------- Share ----------
    def copy_summary(self):
        """Copy the text summary to the clipboard"""
        self.master.clipboard_clear()
        self.master.clipboard_append(summary_text(self.session.ledger))
        messagebox.showinfo("Copied", "Expense summary copied to clipboard.")

    def share_whatsapp(self):
        webbrowser.open(whatsapp_share_url(summary_text(self.session.ledger)))

    # ---------- Refresh ----------
    def refresh_all(self):
        """Refresh all UI elements"""
        self.currency_var.set(self.session.ledger.currency.code)
        self.refresh_expenses()
        self.refresh_people()
        self.refresh_reports()

    def refresh_expenses(self):
        """Refresh expenses tree view"""
        for iid in self.exp_tree.get_children():
            self.exp_tree.delete(iid)

        symbol = self.session.ledger.currency.symbol
        exps = list(self.session.ledger.expenses)
        exps.sort(key=lambda e: (e.date, e.description))
        for e in exps:
            split_txt = ", ".join(
                f"{self.session.participant_name(s.participant_id)}:{s.percentage:.2f}%" for s in e.splits
            )
            values = (
                e.date, e.description, self.session.participant_name(e.paid_by),
                f"{symbol}{e.amount:.2f}", split_txt
            )
            self.exp_tree.insert("", "end", iid=e.id, values=values)

    def refresh_people(self):
        """Refresh participant list"""
        self.people_list.delete(0, tk.END)
        for i, p in enumerate(self.session.ledger.participants):
            self.people_list.insert(tk.END, p.name)
            if p.color:
                self.people_list.itemconfig(i, foreground=p.color)

    def _get_report_dates(self) -> Optional[Tuple[Optional[date], Optional[date]]]:
        """Parse report date range from inputs; None when a bound is invalid"""
        try:
            return parse_date_range(self.rep_start.get(), self.rep_end.get())
        except ValueError as ex:
            messagebox.showerror("Invalid date", str(ex))
            return None

    def refresh_reports(self):
        """Refresh summary tab"""
        dates = self._get_report_dates()
        if dates is None:
            return
        start, end = dates

        ledger = self.session.ledger
        symbol = ledger.currency.symbol
        exps = filter_expenses_by_date(ledger.expenses, start, end)
        self.report_note.set(
            f"Date filter: {start.isoformat() if start else '—'} to {end.isoformat() if end else '—'}; "
            f"{len(exps)} expense(s)"
        )

        for iid in self.sum_tree.get_children():
            self.sum_tree.delete(iid)
        balances = aggregate(ledger.participants, exps)
        for p in ledger.participants:
            b = balances[p.id]
            self.sum_tree.insert("", "end", values=(
                p.name,
                f"{symbol}{b.total_paid:.2f}",
                f"{symbol}{b.total_owed:.2f}",
                f"{symbol}{b.balance:.2f}",
                balance_status(b.balance),
            ))

        for iid in self.tr_tree.get_children():
            self.tr_tree.delete(iid)
        for s in plan_settlements(net_balances(balances)):
            self.tr_tree.insert("", "end", values=(
                self.session.participant_name(s.from_id),
                self.session.participant_name(s.to_id),
                f"{symbol}{s.amount:.2f}",
            ))

    # ---------- CSV Import/Export ----------
    def export_csv_dialog(self):
        """Export current expenses to CSV file"""
        if not self.session.ledger.expenses:
            messagebox.showinfo("Export CSV", "No expenses to export.")
            return

        fp = filedialog.asksaveasfilename(
            title="Export Expenses to CSV",
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")]
        )
        if not fp:
            return

        try:
            export_expenses_to_csv(self.session.ledger.expenses, fp)
            messagebox.showinfo("Export CSV", f"Exported {len(self.session.ledger.expenses)} expenses to:\n{fp}")
        except OSError as ex:
            logger.exception("CSV export failed: %s", fp)
            messagebox.showerror("Export failed", str(ex))

    def import_csv_dialog(self):
        """Import expenses from CSV file"""
        fp = filedialog.askopenfilename(
            title="Import Expenses from CSV",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")]
        )
        if not fp:
            return

        try:
            imported_expenses = import_expenses_from_csv(fp)
        except (OSError, ValueError, KeyError) as ex:
            logger.exception("CSV import failed: %s", fp)
            messagebox.showerror("Import failed", str(ex))
            return
        if not imported_expenses:
            messagebox.showinfo("Import CSV", "No expenses found in CSV file.")
            return

        choice = messagebox.askyesnocancel(
            "Import CSV",
            f"Found {len(imported_expenses)} expenses in CSV.\n\n"
            "Yes: Append to current expenses\n"
            "No: Replace current expenses\n"
            "Cancel: Cancel import"
        )
        if choice is None:
            return
        try:
            self.session.replace_expenses(imported_expenses, append=choice)
        except ValidationError as ex:
            messagebox.showerror("Import failed", "\n".join(ex.errors.values()))
            return
        messagebox.showinfo(
            "Import CSV",
            f"{'Appended' if choice else 'Replaced with'} {len(imported_expenses)} expenses."
        )
        self.refresh_all()
