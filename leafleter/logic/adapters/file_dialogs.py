"""
===============================================================================
File Dialogs Adapter – tiny wrapper around Tk file dialogs
-------------------------------------------------------------------------------
Purpose:
    Keep tkinter UI imports out of services and provide a single place to
    configure filters and parent handling. Both functions return a filesystem
    path, or None if the user cancelled.
===============================================================================
"""
from __future__ import annotations
from typing import Optional, Any

import tkinter as tk
from tkinter import filedialog

JSON_FILETYPES = [("JSON files", "*.json"), ("All files", "*.*")]
DEFAULT_EXPORT_NAME = "leafleter-export.json"


def _parent_if_valid(parent: Any | None):
    return parent if isinstance(parent, tk.Misc) else None


def ask_save_json(parent: Any | None = None) -> Optional[str]:
    """Show a 'save as' dialog for the export file."""
    return filedialog.asksaveasfilename(
        parent=_parent_if_valid(parent),
        title="Export data",
        defaultextension=".json",
        initialfile=DEFAULT_EXPORT_NAME,
        filetypes=JSON_FILETYPES,
    ) or None


def ask_open_json(parent: Any | None = None) -> Optional[str]:
    """Show an 'open file' dialog for an import file."""
    return filedialog.askopenfilename(
        parent=_parent_if_valid(parent),
        title="Import data",
        filetypes=JSON_FILETYPES,
    ) or None
