"""Logging setup for ZenGen.

The ``zengen`` logger writes to the console at ``LOG_LEVEL`` and to the
per-run log file at ``FILE_LOG_LEVEL``. Python warnings and the chatter of
gradio and httpx (web mode) go to the log file only, never to the console.
Calling ``setup_logging`` again replaces the handlers instead of stacking them.
"""

from __future__ import annotations

import logging

from .config import AppConfig

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
FILE_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(module)s:%(lineno)d | "
    "%(funcName)s | %(message)s"
)
FILE_ONLY_LOGGERS = {
    "py.warnings": logging.DEBUG,
    "gradio": logging.INFO,
    "httpx": logging.INFO,
}


def _reset_handlers(logger: logging.Logger, *handlers: logging.Handler) -> None:
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)


def setup_logging(config: AppConfig) -> logging.Logger:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
    file_handler.setLevel(config.file_log_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))

    logger = logging.getLogger("zengen")
    logger.setLevel(logging.DEBUG)
    _reset_handlers(logger, console_handler, file_handler)

    logging.captureWarnings(True)
    for name, level in FILE_ONLY_LOGGERS.items():
        routed = logging.getLogger(name)
        routed.setLevel(level)
        _reset_handlers(routed, file_handler)
    return logger
