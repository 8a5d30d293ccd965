"""
Dialog asking for a start/end house number when no numbers could be found.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional, Tuple


class ManualEntryDialog(tk.Toplevel):
    """
    Collects a start/end pair.

    ``on_submit(start, end)`` returns an error message or None; on error the
    dialog stays open so the user can retry.
    """

    def __init__(self, parent: tk.Misc, title: str,
                 on_submit: Callable[[str, str], Optional[str]]) -> None:
        super().__init__(parent)
        self.title(title)
        self.resizable(False, False)
        self.result: Tuple[str, str] | None = None
        self._on_submit = on_submit

        frm = ttk.Frame(self, padding=12)
        frm.grid(sticky="nsew")
        ttk.Label(frm, text="Start:").grid(row=0, column=0, sticky="w")
        self.start_var = tk.StringVar()
        start = ttk.Entry(frm, textvariable=self.start_var, width=8)
        start.grid(row=0, column=1, padx=(4, 12))
        ttk.Label(frm, text="End:").grid(row=0, column=2, sticky="w")
        self.end_var = tk.StringVar()
        ttk.Entry(frm, textvariable=self.end_var, width=8).grid(row=0, column=3, padx=(4, 0))

        self.error_var = tk.StringVar()
        ttk.Label(frm, textvariable=self.error_var, foreground="#b00020").grid(
            row=1, column=0, columnspan=4, sticky="w", pady=(6, 0)
        )

        btns = ttk.Frame(frm); btns.grid(row=2, column=0, columnspan=4, sticky="e", pady=(8, 0))
        ttk.Button(btns, text="Cancel", command=self.destroy).grid(row=0, column=0, padx=(0, 6))
        ttk.Button(btns, text="Apply", command=self._apply).grid(row=0, column=1)

        self.bind("<Return>", lambda _e: self._apply())
        self.transient(parent); self.grab_set(); start.focus_set()
        self.protocol("WM_DELETE_WINDOW", self.destroy)

    def _apply(self) -> None:
        start, end = self.start_var.get().strip(), self.end_var.get().strip()
        error = self._on_submit(start, end)
        if error:
            self.error_var.set(error)
            return
        self.result = (start, end)
        self.destroy()
