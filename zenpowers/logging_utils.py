"""File logging for ``zenpowers`` CLI runs.

Every invocation gets its own ``zenpowers-<timestamp>.log`` so the polls,
timeouts and cancellations of one run can be read in isolation. Set
``ZENPOWERS_LOG_DIR`` to collect them somewhere other than ``./logs``.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_ENV_VAR = "ZENPOWERS_LOG_DIR"
LOG_FILE_PREFIX = "zenpowers"
LOG_TIME_FORMAT = "%Y%m%d-%H%M%S%f"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_current_log_file: Optional[Path] = None


def resolve_log_directory() -> Path:
    """Return ``$ZENPOWERS_LOG_DIR`` (or the checkout's ``logs``), creating it."""
    override = os.getenv(LOG_ENV_VAR)
    if override:
        log_dir = Path(override).expanduser()
    else:
        log_dir = Path(__file__).resolve().parent.parent / "logs"

    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir.resolve()


def _detach_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_logging() -> Path:
    """Route the waiter, event and CLI loggers into a new run log."""
    global _current_log_file

    timestamp = datetime.now().strftime(LOG_TIME_FORMAT)
    log_path = resolve_log_directory() / f"{LOG_FILE_PREFIX}-{timestamp}.log"

    logger = logging.getLogger("zenpowers")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    _detach_handlers(logger)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)

    _current_log_file = log_path
    logger.debug("Initialized logging; writing to %s", log_path)
    return log_path


def get_current_log_file() -> Optional[Path]:
    return _current_log_file
