"""Logging helpers."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)8s | %(name)s | %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger()
    if root.handlers:
        # Streamlit installs its own handlers; only adjust the package level.
        logging.getLogger("cointape").setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
