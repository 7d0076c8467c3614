from __future__ import annotations

import hashlib
import logging
import sys
import time
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from . import config

LOGGER = logging.getLogger("econnect")
_LOGGER_INITIALISED = False
_CURRENT_LOG_FILE: Path = config.LOG_FILE

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s - %(message)s"


def _configure_logger(log_path: Path) -> None:
    """Configure the shared application logger to write to ``log_path``.

    The file handler rolls over at midnight and keeps dated copies alongside
    the live log file.
    """

    global _LOGGER_INITIALISED, _CURRENT_LOG_FILE

    log_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in list(LOGGER.handlers):
        LOGGER.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # noqa: BLE001
            continue

    formatter = logging.Formatter(fmt=LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    file_handler = TimedRotatingFileHandler(log_path, when="midnight", encoding="utf-8")
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setFormatter(formatter)

    LOGGER.setLevel(logging.INFO)
    LOGGER.addHandler(stream_handler)
    LOGGER.addHandler(file_handler)
    LOGGER.propagate = False

    _CURRENT_LOG_FILE = log_path
    _LOGGER_INITIALISED = True


def _ensure_logger() -> None:
    """Initialise the logger lazily using the default log file."""

    if _LOGGER_INITIALISED:
        return
    _configure_logger(config.LOG_FILE)


def setup_run_logger(log_dir: Path | None = None) -> logging.Logger:
    """Initialise file + console logging once per process and return the logger."""

    log_path = Path(log_dir) / config.LOG_FILE.name if log_dir else config.LOG_FILE
    if not _LOGGER_INITIALISED or log_path != _CURRENT_LOG_FILE:
        _configure_logger(log_path)
        LOGGER.info("Logging to %s", log_path)
    return LOGGER


def get_current_log_path() -> Path:
    """Return the path to the log file currently receiving log lines."""

    _ensure_logger()
    return _CURRENT_LOG_FILE


def ensure_dirs(output_dir: Path) -> None:
    """Ensure that the run's output directory exists."""

    Path(output_dir).mkdir(parents=True, exist_ok=True)


def log_line(message: str) -> None:
    """Write a log line to stdout and the active log file."""

    _ensure_logger()
    LOGGER.info(message)


def run_timestamp(now: datetime | None = None) -> str:
    """Return the ``yyyyMMdd_HHmmss`` stamp used in output file names."""

    return (now or datetime.now()).strftime("%Y%m%d_%H%M%S")


def fingerprint(markup: str | None) -> str:
    """Return a cheap comparable digest of ``markup``."""

    return hashlib.sha1((markup or "").encode("utf-8")).hexdigest()


def wait_seconds(seconds: float | None) -> None:
    """Sleep for ``seconds`` when positive."""

    if seconds is None or seconds <= 0:
        return
    time.sleep(seconds)


__all__ = [
    "LOGGER",
    "setup_run_logger",
    "get_current_log_path",
    "ensure_dirs",
    "log_line",
    "run_timestamp",
    "fingerprint",
    "wait_seconds",
]
