from __future__ import annotations

import logging
import sys

"""Labeled console logging for the ledger CLI.

Lines read ``LABEL message``; WARNING prints as ``WARN`` and row store
results go out on the custom SUMMARY level. Package modules log through
``logging.getLogger(__name__)`` and reach the single stdout handler on the
``sample_inventory`` logger.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
]

APP_LOGGER_NAME = "sample_inventory"
SUMMARY_LEVEL = 25  # between INFO and WARNING

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUMMARY_LEVEL: "SUMMARY",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _stdout_handler() -> logging.Handler:
    # bound to the sys.stdout current at setup time
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging() -> logging.Logger:
    """Attach the stdout handler to the package logger once and return it."""
    global _logger
    if _logger is None:
        logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
        logger = logging.getLogger(APP_LOGGER_NAME)
        logger.setLevel(logging.INFO)
        logger.handlers.clear()
        logger.addHandler(_stdout_handler())
        logger.propagate = False
        _logger = logger
    return _logger


def get_logger() -> logging.Logger:
    return setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup rebinds stdout."""
    global _logger
    _logger = None
