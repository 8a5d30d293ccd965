"""
Dialog to add a street (name, municipality, optional range and parity).
"""

from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Dict, Optional

from leafleter.models.street import Interval


class AddStreetDialog(tk.Toplevel):
    def __init__(self, parent: tk.Misc,
                 on_submit: Callable[..., Optional[str]]) -> None:
        super().__init__(parent)
        self.title("Add street")
        self.resizable(False, False)
        self._on_submit = on_submit
        self.saved = False

        frm = ttk.Frame(self, padding=12)
        frm.grid(sticky="nsew")

        self.vars: Dict[str, tk.StringVar] = {}
        for row, (key, label) in enumerate([
            ("name", "Street name"),
            ("municipality", "Municipality"),
            ("start", "Start (optional)"),
            ("end", "End (optional)"),
        ]):
            ttk.Label(frm, text=label).grid(row=row, column=0, sticky="w", pady=2)
            var = tk.StringVar()
            ttk.Entry(frm, textvariable=var, width=32).grid(row=row, column=1, sticky="ew", pady=2)
            self.vars[key] = var

        ttk.Label(frm, text="Interval").grid(row=4, column=0, sticky="w", pady=2)
        self.interval_var = tk.StringVar(value=Interval.ALL.value)
        ttk.Combobox(
            frm, textvariable=self.interval_var, state="readonly",
            values=[iv.value for iv in Interval], width=10,
        ).grid(row=4, column=1, sticky="w", pady=2)

        self.error_var = tk.StringVar()
        ttk.Label(frm, textvariable=self.error_var, foreground="#b00020").grid(
            row=5, column=0, columnspan=2, sticky="w"
        )

        btns = ttk.Frame(frm); btns.grid(row=6, column=0, columnspan=2, sticky="e", pady=(8, 0))
        ttk.Button(btns, text="Cancel", command=self.destroy).grid(row=0, column=0, padx=(0, 6))
        ttk.Button(btns, text="Add", command=self._ok).grid(row=0, column=1)

        self.transient(parent); self.grab_set()
        self.protocol("WM_DELETE_WINDOW", self.destroy)

    def _form(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {k: v.get().strip() for k, v in self.vars.items()}
        data["interval"] = self.interval_var.get()
        return data

    def _ok(self) -> None:
        error = self._on_submit(**self._form())
        if error:
            self.error_var.set(error)
            return
        self.saved = True
        self.destroy()
