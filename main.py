import logging
import tkinter as tk

from core.config.config_service import config_service
from core.logging.setup import configure_logging
from leafleter import create_feature_view, get_feature_name
from leafleter.logic.context import build_context

logger = logging.getLogger(__name__)


class MainWindow(tk.Tk):
    def __init__(self):
        super().__init__()
        general = config_service.general
        self.title(f"{get_feature_name()} {general.version}")
        self.geometry("1100x750")

        ctx = build_context(dialog_parent=self)
        self.view = create_feature_view(self, ctx)
        self.view.pack(fill="both", expand=True)


def main() -> None:
    configure_logging()
    origin = config_service.meta_source("Storage", "data_file") or {}
    logger.info(
        "Starting %s, data file %s (%s)",
        config_service.general.app_name, config_service.storage.data_file, origin.get("layer", "code"),
    )
    app = MainWindow()
    app.mainloop()


if __name__ == "__main__":
    main()
