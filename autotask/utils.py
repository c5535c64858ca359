"""Utility helpers for logging."""
from __future__ import annotations

from pathlib import Path
import logging
import sys


def setup_logging(log_path: Path | None = None, *, verbose: bool = False) -> logging.Logger:
    """Configure the ``autotask`` logger for console and optional file output."""
    logger = logging.getLogger("autotask")
    if logger.handlers:
        return logger

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    # Open the file first so a bad path leaves the logger untouched.
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_path is not None:
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
