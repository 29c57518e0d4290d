"""Log file wiring for gitraffe.

The terminal belongs to the TUI, so records only go to a rotating file.
GITRAFFE_LOG_FILE names the file, GITRAFFE_LOG_DIR its directory and
GITRAFFE_LOG_LEVEL the threshold.

// [LAW:single-enforcer] Handler wiring for the gitraffe logger happens here only.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_NAME = "gitraffe.log"
_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"

_LOG_PATH: str | None = None


def _log_level() -> int:
    level = logging.getLevelName(os.environ.get("GITRAFFE_LOG_LEVEL", "INFO").strip().upper())
    # getLevelName hands back a "Level X" string for names it does not know
    return level if isinstance(level, int) else logging.INFO


def _resolve_path(file_path: str | None) -> Path:
    if file_path or os.environ.get("GITRAFFE_LOG_FILE"):
        return Path(file_path or os.environ["GITRAFFE_LOG_FILE"])
    log_dir = os.environ.get("GITRAFFE_LOG_DIR") or os.path.expanduser("~/.local/share/gitraffe/logs")
    return Path(log_dir) / LOG_NAME


def configure(file_path: str | None = None) -> str:
    """Attach the rotating file handler to the gitraffe logger; return its path.

    Only the first call does anything. Later calls return the same path.
    """
    global _LOG_PATH
    if _LOG_PATH is not None:
        return _LOG_PATH

    path = _resolve_path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    level = _log_level()

    handler = RotatingFileHandler(path, maxBytes=20 * 1024 * 1024, backupCount=5, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    logger = logging.getLogger("gitraffe")
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()
    logger.addHandler(handler)
    logging.captureWarnings(True)

    _LOG_PATH = str(path)
    return _LOG_PATH


def log_file_name() -> str:
    """Short name of the log file for user-facing hints."""
    return os.path.basename(_LOG_PATH) if _LOG_PATH is not None else LOG_NAME
