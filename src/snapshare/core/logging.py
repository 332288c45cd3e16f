"""Logging setup shared by the API process and maintenance scripts."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stdout handler on the ``snapshare`` logger tree."""
    root = logging.getLogger("snapshare")
    root.setLevel(level if isinstance(level, int) else level.upper())

    for handler in root.handlers:
        if getattr(handler, "_snapshare_handler", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._snapshare_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
