# File: daypilot/utils/logger.py
"""
Centralized logging configuration for DayPilot.

Console output goes to stdout; a dated log file under DAYPILOT_LOG_DIR is
added unless DAYPILOT_LOG_TO_FILE is switched off.
"""

import logging
import os
import sys
from pathlib import Path
from datetime import datetime

LOG_DIR = Path(os.getenv("DAYPILOT_LOG_DIR", "logs"))

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d | %(message)s'


def _file_logging_enabled() -> bool:
    return os.getenv("DAYPILOT_LOG_TO_FILE", "true").strip().lower() in ("1", "true", "yes", "on")


def _default_level() -> int:
    level_name = os.getenv("DAYPILOT_LOG_LEVEL", "INFO").strip().upper()
    return getattr(logging, level_name, logging.INFO)


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt='%H:%M:%S'))
    return handler


def _file_handler() -> logging.Handler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / f"daypilot_{datetime.now():%Y%m%d}.log"
    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    return handler


def setup_logger(name: str = "daypilot", level: int = None) -> logging.Logger:
    """
    Return the named logger, attaching handlers on first use.

    Args:
        name: Logger name, usually the module's __name__
        level: Console level (default: DAYPILOT_LOG_LEVEL or INFO)
    """
    logger = logging.getLogger(name)

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.addHandler(_console_handler(_default_level() if level is None else level))
    if _file_logging_enabled():
        logger.addHandler(_file_handler())

    return logger


class LoggerMixin:
    """Gives a class a lazily created `logger` named after its module and class."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = setup_logger(f"{type(self).__module__}.{type(self).__name__}")
        return self._logger
