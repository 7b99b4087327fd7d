"""
Logging setup for the API process.

`setup_logging` attaches a single console handler to the root logger. It is
safe to call more than once (tests create the app repeatedly).
"""

from __future__ import annotations

import logging
import os


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip() or "INFO"


def setup_logging(level: str | None = None) -> None:
    logger = logging.getLogger()
    if logger.handlers:
        return

    numeric_level = getattr(logging, (level or log_level()).upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
