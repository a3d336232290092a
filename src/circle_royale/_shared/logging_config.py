# Area: Shared
"""
circle_royale._shared.logging_config — Process logging setup
============================================================

Every module logs under the ``circle_royale`` logger tree
(``circle_royale.zone``, ``circle_royale.spawner`` ...). setup_logging()
attaches two handlers to that tree:

    stdout      one coloured line per record, short timestamp
    log file    one JSON object per line, for post-match inspection

Gameplay entries (JOIN, ELIMINATED, WINNER ...) do not go here; they
belong to the per-event match log in match_log.py.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "circle_royale"

# Record attributes that are always present and never exported as extras
_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class TerminalFormatter(logging.Formatter):
    """Colours the level name; works on a copy so other handlers see plain text."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2;36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"{color}{record.levelname:<7}{self.RESET}"
        return super().format(tinted)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    log_file_path: Optional[str] = "circle_royale.log",
    level: int = logging.INFO,
) -> None:
    """
    Route the package logger to the terminal and, optionally, a JSON file.

    Calling it again replaces the previous handlers. The package logger
    stops propagating so records are not printed twice by a root
    handler the host may have configured.

    Parameters
    ----------
    log_file_path : str or None
        JSON-lines log destination; parent directories are created.
        None disables the file handler.
    level : int
        Threshold for both handlers.
    """
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
        handler.close()
    pkg_logger.handlers.clear()
    pkg_logger.setLevel(level)
    pkg_logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(TerminalFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(console)

    if log_file_path is None:
        return
    try:
        path = Path(log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        pkg_logger.warning("Log file disabled, cannot open %s: %s", log_file_path, e)
        return
    file_handler.setFormatter(JSONFormatter())
    pkg_logger.addHandler(file_handler)
