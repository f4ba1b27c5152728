"""Logging bootstrap for the portal."""

from __future__ import annotations

import logging

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    """Attach a stream handler to the ``portal`` logger once and apply LOG_LEVEL."""
    level = getattr(logging, settings.log_level, logging.INFO)
    root = logging.getLogger("portal")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
