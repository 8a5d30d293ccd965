"""
SectorDialog – list, add/update and delete sectors.

Saving a sector with an existing name + note updates its colour in place.
"""

from __future__ import annotations

import tkinter as tk
from tkinter import colorchooser, messagebox, ttk

from leafleter.controllers.street_controller import StreetController
from leafleter.models.sector import DEFAULT_SECTOR_COLOR


class SectorDialog(tk.Toplevel):
    COLS = ("name", "note", "color")

    def __init__(self, parent: tk.Misc, controller: StreetController) -> None:
        super().__init__(parent)
        self.title("Sectors")
        self.resizable(True, True)
        self._ctl = controller
        self.changed = False

        frm = ttk.Frame(self, padding=10)
        frm.grid(sticky="nsew")
        self.columnconfigure(0, weight=1); self.rowconfigure(0, weight=1)
        frm.columnconfigure(1, weight=1); frm.rowconfigure(0, weight=1)

        self.tree = ttk.Treeview(frm, columns=self.COLS, show="headings", height=10, selectmode="browse")
        for c, w in [("name", 160), ("note", 260), ("color", 90)]:
            self.tree.heading(c, text=c.capitalize())
            self.tree.column(c, width=w, anchor="w", stretch=(c == "note"))
        self.tree.grid(row=0, column=0, columnspan=4, sticky="nsew")
        self.tree.bind("<<TreeviewSelect>>", self._on_select)

        ttk.Label(frm, text="Name").grid(row=1, column=0, sticky="w", pady=(8, 2))
        self.name_var = tk.StringVar()
        ttk.Entry(frm, textvariable=self.name_var).grid(row=1, column=1, columnspan=3, sticky="ew", pady=(8, 2))
        ttk.Label(frm, text="Note").grid(row=2, column=0, sticky="w", pady=2)
        self.note_var = tk.StringVar()
        ttk.Entry(frm, textvariable=self.note_var).grid(row=2, column=1, columnspan=3, sticky="ew", pady=2)
        ttk.Label(frm, text="Color").grid(row=3, column=0, sticky="w", pady=2)
        self.color_var = tk.StringVar(value=DEFAULT_SECTOR_COLOR)
        ttk.Entry(frm, textvariable=self.color_var, width=10).grid(row=3, column=1, sticky="w", pady=2)
        ttk.Button(frm, text="Pick…", command=self._pick_color).grid(row=3, column=2, sticky="w")

        btns = ttk.Frame(frm); btns.grid(row=4, column=0, columnspan=4, sticky="e", pady=(8, 0))
        ttk.Button(btns, text="Delete", command=self._delete).grid(row=0, column=0, padx=(0, 6))
        ttk.Button(btns, text="Save", command=self._save).grid(row=0, column=1, padx=(0, 6))
        ttk.Button(btns, text="Close", command=self.destroy).grid(row=0, column=2)

        self._reload()
        self.transient(parent); self.grab_set()
        self.protocol("WM_DELETE_WINDOW", self.destroy)

    def _reload(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for s in self._ctl.list_sectors():
            self.tree.insert("", "end", iid=s.id, values=(s.name, s.note, s.color))

    def _on_select(self, _event=None) -> None:
        sel = self.tree.selection()
        if not sel:
            return
        name, note, color = self.tree.item(sel[0], "values")
        self.name_var.set(name); self.note_var.set(note); self.color_var.set(color)

    def _pick_color(self) -> None:
        _rgb, hex_color = colorchooser.askcolor(color=self.color_var.get() or None, parent=self)
        if hex_color:
            self.color_var.set(hex_color)

    def _save(self) -> None:
        ok, err = self._ctl.save_sector(self.name_var.get(), self.note_var.get(), self.color_var.get().strip() or None)
        if not ok:
            messagebox.showerror("Sectors", err or "Could not save sector.", parent=self)
            return
        self.changed = True
        self._reload()

    def _delete(self) -> None:
        sel = self.tree.selection()
        if not sel:
            return
        if not messagebox.askyesno("Sectors", "Delete the selected sector? Streets assigned to it lose their sector.", parent=self):
            return
        ok, err = self._ctl.delete_sector(sel[0])
        if not ok:
            messagebox.showerror("Sectors", err or "Could not delete sector.", parent=self)
            return
        self.changed = True
        self._reload()
