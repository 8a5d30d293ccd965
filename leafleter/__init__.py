"""
Leafleter feature package initializer.

Factory functions for a main window / feature loader, so callers never need
to know the internals of the street view.
"""

from typing import Optional
import tkinter as tk

from core.config.config_service import config_service


def get_feature_name() -> str:
    """Human readable feature name (navigation label, window title)."""
    return config_service.general.app_name


def create_feature_view(parent: tk.Misc, app_context: Optional[object] = None) -> tk.Frame:
    """
    Factory for the main street view.

    Args:
        parent (tk.Misc): Tk container to mount the view onto.
        app_context (LeafleterContext, optional): Prebuilt context; a default
            one is built from configuration when omitted.

    Returns:
        tk.Frame: The fully wired view.
    """
    from leafleter.controllers.street_controller import StreetController
    from leafleter.gui.main_view import LeafleterMainView
    from leafleter.logic.context import build_context

    ctx = app_context if app_context is not None else build_context(dialog_parent=parent)
    return LeafleterMainView(parent, StreetController(ctx))
