"""
Logging setup for Harvester.

One root configuration per process: a stdout handler and a dated log file
under the run's log directory. Modules take a named logger with
``get_logger(__name__)``; the pipeline tags its lines with the run id
through ``run_logger``.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty at DEBUG and never useful for a harvest
QUIET_LOGGERS = ("asyncio",)


def dated_log_path(log_dir: Optional[Path] = None, now: Optional[datetime] = None) -> Path:
    """
    Path of the day's log file.

    Example:
        >>> dated_log_path(Path("logs"), datetime(2026, 10, 19))
        PosixPath('logs/harvest_20261019.log')
    """
    stamp = (now or datetime.now()).strftime("%Y%m%d")
    return Path(log_dir or "logs") / f"harvest_{stamp}.log"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure the root logger for a harvest process.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Explicit log file; default is <log_dir>/harvest_YYYYMMDD.log
        console: Also log to stdout
        log_dir: Directory for the dated log file (default: logs)

    Returns:
        Configured root logger

    Example:
        >>> setup_logging(level="DEBUG", log_dir=Path("logs"))
        >>> get_logger("harvester").info("Harvest started")
    """
    numeric = getattr(logging, level.upper())
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(numeric)
    root.handlers.clear()

    if console:
        root.addHandler(_handler(logging.StreamHandler(sys.stdout), numeric, formatter))

    log_path = Path(log_file) if log_file else dated_log_path(log_dir)
    log_path.parent.mkdir(exist_ok=True, parents=True)
    root.addHandler(_handler(logging.FileHandler(log_path, encoding="utf-8"), numeric, formatter))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric, logging.WARNING))

    root.info(f"Logging initialized - Level: {level}, File: {log_path}")
    return root


def get_logger(name: str) -> logging.Logger:
    """Named logger for a module (pass __name__)."""
    return logging.getLogger(name)


class RunLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with a short run id."""

    def process(self, msg, kwargs):
        return f"[run {self.extra['run_id'][:8]}] {msg}", kwargs


def run_logger(name: str, run_id: str) -> RunLoggerAdapter:
    """
    Logger whose lines carry the harvest run id.

    Example:
        >>> run_logger("harvester.crawler.pipeline", "3f2c9a1b77e0").info("started")
        # ... - INFO - [run 3f2c9a1b] started
    """
    return RunLoggerAdapter(get_logger(name), {"run_id": run_id})


def init_harvest_logging(
    verbose: bool = False,
    log_dir: Optional[Path] = None,
    level: Optional[str] = None,
) -> logging.Logger:
    """
    Initialize logging for the command-line harvester.

    Args:
        verbose: Force DEBUG regardless of level
        log_dir: Directory for the dated log file
        level: Level used when not verbose (default: INFO)

    Returns:
        Configured root logger
    """
    return setup_logging(level="DEBUG" if verbose else (level or DEFAULT_LOG_LEVEL), log_dir=log_dir)
