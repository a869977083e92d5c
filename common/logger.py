"""Logging setup shared by the autopilot, boards and tools."""

from __future__ import annotations

import logging
import os

ROOT_LOGGER = "autopilot"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        level = os.environ.get("AUTOPILOT_LOG_LEVEL", "INFO").upper()
        root.setLevel(getattr(logging, level, logging.INFO))
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a child of the ``autopilot`` logger, configuring it on first use."""
    root = _configure_root()
    if name == ROOT_LOGGER:
        return root
    return root.getChild(name)


__all__ = ["get_logger"]
