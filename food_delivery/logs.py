"""Logging setup: a debug file plus Textual's devtools console."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.logging import TextualHandler

from food_delivery.config import DEBUG, DEBUG_LOG_PATH

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s %(message)s"

_configured = False


def setup_logging(level: int = logging.INFO, log_path: str | None = None) -> logging.Logger:
    """
    Configure the package logger once.

    Records go to the debug log file and to `textual console` while the app
    runs. A log file that cannot be opened is skipped.
    """
    global _configured
    logger = logging.getLogger("food_delivery")
    if _configured:
        return logger

    if DEBUG:
        level = logging.DEBUG
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    path = Path(log_path or DEBUG_LOG_PATH)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        file_handler = None
    if file_handler is not None:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    textual_handler = TextualHandler(stderr=False)
    textual_handler.setFormatter(formatter)
    logger.addHandler(textual_handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _configured = True
    return logger
