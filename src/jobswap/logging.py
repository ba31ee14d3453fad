"""Logging configuration for jobswap.

Sets up standard logging to stderr with a consistent format.  Modules
log through ``logging.getLogger(__name__)``, which nests under the
``jobswap`` logger configured here.

Call :func:`configure_file_logging` to add a timestamped file handler
under ``data/logs/`` when a run needs to be diagnosed afterwards (for
instance to tell remote-scored results from fallback-scored ones).
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

logger = logging.getLogger("jobswap")
logger.setLevel(logging.INFO)

handler = logging.StreamHandler(sys.stderr)
handler.setLevel(logging.INFO)

# Shared between stderr and file handlers
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT)
handler.setFormatter(formatter)

logger.addHandler(handler)

DEFAULT_LOG_DIR = "data/logs"


def set_verbosity(verbose: bool) -> None:
    """Switch the stderr handler between INFO and DEBUG."""
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    handler.setLevel(level)


def configure_file_logging(
    log_dir: str = DEFAULT_LOG_DIR,
    *,
    level: int = logging.INFO,
) -> logging.FileHandler:
    """Add a timestamped file handler to the logger.

    Creates ``log_dir`` if it does not exist.  Returns the handler so
    callers (or tests) can remove it later.
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    filename = log_path / f"jobswap_{timestamp}.log"

    file_handler = logging.FileHandler(str(filename), encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATEFMT))

    if level < logger.level:
        logger.setLevel(level)

    logger.addHandler(file_handler)
    return file_handler


__all__ = ["configure_file_logging", "logger", "set_verbosity"]
