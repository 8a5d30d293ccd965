"""
===============================================================================
LeafleterMainView – streets by municipality, house numbers, notes, sectors
-------------------------------------------------------------------------------
Layout:
    [ Add street | Sectors | Export | Import ]                  (toolbar)
    [ municipality/street tree ] [ street panel: sector, numbers,
                                   address notes, street notes ]
    [ status bar ]

Network lookups run on daemon threads; their results come back through a
queue polled by ``after`` so that only the Tk thread touches widgets and the
data file.
===============================================================================
"""
from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
import webbrowser
from tkinter import messagebox, ttk
from typing import Callable, Dict, List, Optional

from leafleter.controllers.street_controller import StreetController
from leafleter.exceptions.errors import LookupFailedError
from leafleter.gui.dialogs.add_street_dialog import AddStreetDialog
from leafleter.gui.dialogs.manual_entry_dialog import ManualEntryDialog
from leafleter.gui.dialogs.sector_dialog import SectorDialog
from leafleter.logic.services.house_number_resolver import Resolution, ResolutionState
from leafleter.models.street import Street

logger = logging.getLogger(__name__)

POLL_MS = 100
NO_SECTOR = "(no sector)"
NOTE_MARK = " •"


class LeafleterMainView(ttk.Frame):
    def __init__(self, parent: tk.Misc, controller: StreetController) -> None:
        super().__init__(parent)
        self._ctl = controller
        self._streets: Dict[str, Street] = {}
        self._current: Optional[Street] = None
        self._numbers: List[int] = []
        self._notes_ids: List[str] = []
        self._street_note_ids: List[str] = []
        self._sector_ids: List[Optional[str]] = []
        self._results: "queue.Queue[Callable[[], None]]" = queue.Queue()

        self._build_toolbar()
        self._build_body()
        self.status_var = tk.StringVar(value="")
        ttk.Label(self, textvariable=self.status_var, anchor="w").grid(row=2, column=0, sticky="ew", padx=6)

        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

        self._ctl.seed()
        self.reload_tree()
        self.after(POLL_MS, self._poll_results)

    # ------------------------------------------------------------------ #
    # Layout
    # ------------------------------------------------------------------ #
    def _build_toolbar(self) -> None:
        bar = ttk.Frame(self, padding=(6, 6))
        bar.grid(row=0, column=0, sticky="ew")
        ttk.Button(bar, text="Add street…", command=self._add_street).pack(side="left", padx=(0, 6))
        ttk.Button(bar, text="Sectors…", command=self._edit_sectors).pack(side="left", padx=(0, 6))
        ttk.Button(bar, text="Export", command=self._export).pack(side="left", padx=(0, 6))
        ttk.Button(bar, text="Import", command=self._import).pack(side="left")

    def _build_body(self) -> None:
        body = ttk.PanedWindow(self, orient="horizontal")
        body.grid(row=1, column=0, sticky="nsew", padx=6)

        left = ttk.Frame(body)
        self.tree = ttk.Treeview(left, show="tree", selectmode="browse")
        self.tree.pack(fill="both", expand=True)
        self.tree.bind("<<TreeviewSelect>>", self._on_tree_select)
        body.add(left, weight=1)

        right = ttk.Frame(body, padding=(8, 0))
        right.columnconfigure(0, weight=1)
        body.add(right, weight=2)

        self.title_var = tk.StringVar(value="Select a street")
        ttk.Label(right, textvariable=self.title_var, font=("TkDefaultFont", 12, "bold")).grid(
            row=0, column=0, sticky="w"
        )

        sec = ttk.Frame(right); sec.grid(row=1, column=0, sticky="ew", pady=(6, 0))
        ttk.Label(sec, text="Sector:").pack(side="left")
        self.sector_var = tk.StringVar()
        self.sector_box = ttk.Combobox(sec, textvariable=self.sector_var, state="readonly", width=28)
        self.sector_box.pack(side="left", padx=(4, 0))
        self.sector_box.bind("<<ComboboxSelected>>", self._on_sector_chosen)

        nums = ttk.LabelFrame(right, text="House numbers", padding=6)
        nums.grid(row=2, column=0, sticky="nsew", pady=(8, 0))
        nums.columnconfigure(0, weight=1)
        self.numbers_list = tk.Listbox(nums, height=10, exportselection=False)
        self.numbers_list.grid(row=0, column=0, columnspan=3, sticky="nsew")
        self.numbers_list.bind("<<ListboxSelect>>", self._on_number_select)
        self.lookup_var = tk.StringVar()
        ttk.Label(nums, textvariable=self.lookup_var, foreground="#888").grid(row=1, column=0, sticky="w")
        self.manual_btn = ttk.Button(nums, text="Manual entry", command=self._manual_entry, state="disabled")
        self.manual_btn.grid(row=1, column=1, padx=(6, 0))
        self.retry_btn = ttk.Button(nums, text="Retry lookup", command=self._retry_lookup, state="disabled")
        self.retry_btn.grid(row=1, column=2, padx=(6, 0))
        ttk.Button(nums, text="Show on map", command=self._show_on_map).grid(row=2, column=0, sticky="w", pady=(6, 0))

        self.notes_list, self.note_var = self._note_box(
            right, 3, "Address notes", self._add_note, self._delete_note
        )
        self.street_notes_list, self.street_note_var = self._note_box(
            right, 4, "Street notes", self._add_street_note, self._delete_street_note
        )
        right.rowconfigure(2, weight=1)

    def _note_box(self, parent: ttk.Frame, row: int, title: str,
                  on_add: Callable[[], None], on_delete: Callable[[], None]):
        frame = ttk.LabelFrame(parent, text=title, padding=6)
        frame.grid(row=row, column=0, sticky="nsew", pady=(8, 0))
        frame.columnconfigure(0, weight=1)
        lst = tk.Listbox(frame, height=4, exportselection=False)
        lst.grid(row=0, column=0, columnspan=3, sticky="nsew")
        var = tk.StringVar()
        entry = ttk.Entry(frame, textvariable=var)
        entry.grid(row=1, column=0, sticky="ew", pady=(4, 0))
        entry.bind("<Return>", lambda _e: on_add())
        ttk.Button(frame, text="Add note", command=on_add).grid(row=1, column=1, padx=(6, 0), pady=(4, 0))
        ttk.Button(frame, text="Delete", command=on_delete).grid(row=1, column=2, padx=(6, 0), pady=(4, 0))
        return lst, var

    # ------------------------------------------------------------------ #
    # Tree
    # ------------------------------------------------------------------ #
    def reload_tree(self) -> None:
        self.tree.delete(*self.tree.get_children())
        self._streets.clear()
        for municipality, rows in self._ctl.grouped_streets().items():
            parent = self.tree.insert("", "end", text=municipality, open=False)
            for row in rows:
                tags: tuple = ()
                if row.sector is not None:
                    tag = f"sector-{row.sector.id}"
                    self.tree.tag_configure(tag, foreground=row.sector.color)
                    tags = (tag,)
                self.tree.insert(parent, "end", iid=row.street.id, text=row.label, tags=tags)
                self._streets[row.street.id] = row.street
        self._reload_sector_choices()

    def _on_tree_select(self, _event=None) -> None:
        sel = self.tree.selection()
        street = self._streets.get(sel[0]) if sel else None
        if street is None:
            return
        self._current = street
        self.title_var.set(f"{street.label}, {street.municipality}")
        self._show_sector()
        self._render_street_notes()
        self._render_notes(None)
        self._expand(street)

    # ------------------------------------------------------------------ #
    # House numbers
    # ------------------------------------------------------------------ #
    def _expand(self, street: Street) -> None:
        res = self._ctl.initial_numbers(street)
        if res.state is ResolutionState.DEFERRED:
            self._render_resolution(Resolution(ResolutionState.DEFERRED, message="Loading house numbers from OSM..."))
            self._start_lookup(street)
        else:
            self._render_resolution(res)

    def _start_lookup(self, street: Street) -> None:
        def worker() -> None:
            try:
                result = self._ctl.fetch_house_numbers(street)
            except LookupFailedError as ex:
                result = ex
            self._results.put(lambda: self._on_lookup_done(street, result))

        threading.Thread(target=worker, daemon=True).start()

    def _poll_results(self) -> None:
        while True:
            try:
                job = self._results.get_nowait()
            except queue.Empty:
                break
            job()
        self.after(POLL_MS, self._poll_results)

    def _on_lookup_done(self, street: Street, result) -> None:
        res = self._ctl.finish_lookup(street, result)
        # a panel switched to another street meanwhile just drops the answer
        if self._current is not None and self._current.id == street.id:
            self._render_resolution(res)

    def _render_resolution(self, res: Resolution) -> None:
        self._numbers = list(res.numbers)
        self.numbers_list.delete(0, "end")
        street = self._current
        for n in self._numbers:
            mark = NOTE_MARK if street is not None and self._ctl.has_notes(street, n) else ""
            self.numbers_list.insert("end", f"{n}{mark}")
        self.lookup_var.set(res.message)
        self.manual_btn.configure(state="normal" if res.allows_manual_entry or res.is_resolved else "disabled")
        self.retry_btn.configure(state="normal" if res.state is ResolutionState.LOOKUP_FAILED else "disabled")

    def _retry_lookup(self) -> None:
        if self._current is not None:
            self.lookup_var.set("Loading house numbers from OSM...")
            self.retry_btn.configure(state="disabled")
            self._start_lookup(self._current)

    def _manual_entry(self) -> None:
        street = self._current
        if street is None:
            return
        outcome: Dict[str, Resolution] = {}

        def submit(start: str, end: str) -> Optional[str]:
            res, err = self._ctl.apply_manual_range(street, start, end)
            if res is not None:
                outcome["res"] = res
            return err

        dlg = ManualEntryDialog(self, f"House numbers for {street.name}", submit)
        self.wait_window(dlg)
        if "res" in outcome and self._current is not None and self._current.id == street.id:
            self._render_resolution(outcome["res"])

    def _selected_number(self) -> Optional[int]:
        sel = self.numbers_list.curselection()
        return self._numbers[sel[0]] if sel else None

    def _on_number_select(self, _event=None) -> None:
        self._render_notes(self._selected_number())

    def _show_on_map(self) -> None:
        street = self._current
        if street is None:
            return
        number = self._selected_number()
        self.status_var.set("Locating…")

        def worker() -> None:
            url = self._ctl.locate(street, number)
            self._results.put(lambda: self._on_located(street, number, url))

        threading.Thread(target=worker, daemon=True).start()

    def _on_located(self, street: Street, number: Optional[int], url: Optional[str]) -> None:
        where = f"{street.name} {number}" if number is not None else street.name
        if url is None:
            self.status_var.set(f"{where}: location not found, showing the default area")
            webbrowser.open(self._ctl.default_map_url())
            return
        self.status_var.set(f"{where}: opened in browser")
        webbrowser.open(url)

    # ------------------------------------------------------------------ #
    # Notes
    # ------------------------------------------------------------------ #
    def _render_notes(self, number: Optional[int]) -> None:
        self.notes_list.delete(0, "end")
        self._notes_ids = []
        if self._current is None or number is None:
            return
        for note in self._ctl.list_notes(self._current, number):
            self.notes_list.insert("end", note.text)
            self._notes_ids.append(note.id)
        self._refresh_number_mark(number)

    def _refresh_number_mark(self, number: int) -> None:
        if self._current is None or number not in self._numbers:
            return
        idx = self._numbers.index(number)
        mark = NOTE_MARK if self._notes_ids else ""
        self.numbers_list.delete(idx)
        self.numbers_list.insert(idx, f"{number}{mark}")
        self.numbers_list.selection_set(idx)

    def _add_note(self) -> None:
        number = self._selected_number()
        if self._current is None or number is None:
            return
        ok, err = self._ctl.add_note(self._current, number, self.note_var.get())
        if err:
            messagebox.showerror("Notes", err, parent=self)
        if ok:
            self.note_var.set("")
            self._render_notes(number)

    def _delete_note(self) -> None:
        sel = self.notes_list.curselection()
        if not sel:
            return
        number = self._selected_number()
        self._ctl.delete_note(self._notes_ids[sel[0]])
        self._render_notes(number)

    def _render_street_notes(self) -> None:
        self.street_notes_list.delete(0, "end")
        self._street_note_ids = []
        if self._current is None:
            return
        for note in self._ctl.list_street_notes(self._current):
            self.street_notes_list.insert("end", note.text)
            self._street_note_ids.append(note.id)

    def _add_street_note(self) -> None:
        if self._current is None:
            return
        ok, err = self._ctl.add_street_note(self._current, self.street_note_var.get())
        if err:
            messagebox.showerror("Notes", err, parent=self)
        if ok:
            self.street_note_var.set("")
            self._render_street_notes()

    def _delete_street_note(self) -> None:
        sel = self.street_notes_list.curselection()
        if sel:
            self._ctl.delete_street_note(self._street_note_ids[sel[0]])
            self._render_street_notes()

    # ------------------------------------------------------------------ #
    # Sectors
    # ------------------------------------------------------------------ #
    def _reload_sector_choices(self) -> None:
        sectors = self._ctl.list_sectors()
        self._sector_ids = [None] + [s.id for s in sectors]
        self.sector_box.configure(values=[NO_SECTOR] + [s.name for s in sectors])
        self._show_sector()

    def _show_sector(self) -> None:
        if self._current is None:
            self.sector_var.set("")
            return
        sector = self._ctl.current_sector(self._current)
        idx = self._sector_ids.index(sector.id) if sector and sector.id in self._sector_ids else 0
        self.sector_box.current(idx)
        self.status_var.set(f"Sector note: {sector.note}" if sector and sector.note else "")

    def _on_sector_chosen(self, _event=None) -> None:
        if self._current is None:
            return
        sector_id = self._sector_ids[self.sector_box.current()]
        ok, err = self._ctl.assign_sector(self._current, sector_id)
        if not ok:
            messagebox.showerror("Sectors", err or "Assignment failed.", parent=self)
        self._reload_tree_keep_selection()

    def _edit_sectors(self) -> None:
        dlg = SectorDialog(self, self._ctl)
        self.wait_window(dlg)
        if dlg.changed:
            self._reload_tree_keep_selection()

    def _reload_tree_keep_selection(self) -> None:
        current = self._current
        self.reload_tree()
        if current is not None and self.tree.exists(current.id):
            self.tree.see(current.id)
            self.tree.selection_set(current.id)

    # ------------------------------------------------------------------ #
    # Toolbar actions
    # ------------------------------------------------------------------ #
    def _add_street(self) -> None:
        def submit(**form) -> Optional[str]:
            ok, err = self._ctl.add_street(**form)
            return None if ok else (err or "Failed to add street")

        dlg = AddStreetDialog(self, submit)
        self.wait_window(dlg)
        if dlg.saved:
            self.reload_tree()

    def _export(self) -> None:
        ok, msg = self._ctl.export_document()
        if ok:
            messagebox.showinfo("Export", f"Exported to: {msg}", parent=self)
        elif msg:
            messagebox.showerror("Export", f"Export failed: {msg}", parent=self)

    def _import(self) -> None:
        ok, msg = self._ctl.import_document()
        if ok:
            self._current = None
            self.title_var.set("Select a street")
            self._render_resolution(Resolution(ResolutionState.DEFERRED))
            self.reload_tree()
            messagebox.showinfo("Import", "Import completed", parent=self)
        elif msg:
            messagebox.showerror("Import", f"Import failed: {msg}", parent=self)
