"""
core/logging/setup.py
=====================

One-time configuration of the standard library root logger.

Feature modules only ever do ``logger = logging.getLogger(__name__)``; the
entry point calls :func:`configure_logging` once before the UI starts.
"""

from __future__ import annotations

import logging
from typing import Optional

from core.config.config_service import config_service

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Attach a stream handler to the root logger.

    Args:
        level: Level name; defaults to ``[General] log_level`` from config.
    """
    global _configured
    if _configured:
        return
    name = (level or config_service.general.log_level or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )
    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _configured = True
