"""
ExpenseSplitter GUI
- Record shared expenses, who paid, and how each one is split by percentage.
- See every participant's balance and the transfers that settle the group.
- Export to Excel, CSV or HTML, or share a text summary.

Run:
  python expense_splitter_gui.py

Dependencies:
  pip install openpyxl
(Tkinter ships with most Python distributions; on some Linux you may need: sudo apt-get install python3-tk)
"""
from __future__ import annotations
import logging

try:
    import tkinter as tk
except ModuleNotFoundError:
    tk = None

from config import LOG_LEVEL, JsonStore
from main_app import ExpenseSplitterApp
from session import LedgerSession


def main():
    """Main entry point for the application"""
    if tk is None:
        raise RuntimeError(
            'tkinter is not available. Install it (e.g., on Ubuntu: sudo apt-get install python3-tk) '
            'and re-run to use the GUI.'
        )
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = JsonStore()
    session = LedgerSession(store.load_ledger_state(), store=store)

    root = tk.Tk()
    ExpenseSplitterApp(root, session)
    root.mainloop()


if __name__ == "__main__":
    main()
