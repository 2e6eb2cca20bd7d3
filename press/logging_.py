"""Logging utilities.

Standard `logging` with a single line format shared by console and file
output. Every module logs through ``logging.getLogger(__name__)``; only the
CLI calls ``setup_logging``.

- Logs go to: `<log_dir>/press-build.log` when a log directory is configured
- Console output goes to stderr
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

_HANDLER_MARK = "_press_handler"


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level name for the ``press`` logger hierarchy
        log_dir: Directory for the build log file (console only if None)
    """
    logger = logging.getLogger("press")
    logger.setLevel(level.upper())

    # Re-running the CLI in one process must not stack handlers
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            logger.removeHandler(handler)
            handler.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    setattr(ch, _HANDLER_MARK, True)
    logger.addHandler(ch)

    # File
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(os.path.join(log_dir, "press-build.log"), encoding="utf-8")
        fh.setFormatter(fmt)
        setattr(fh, _HANDLER_MARK, True)
        logger.addHandler(fh)
