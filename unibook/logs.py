"""
Logging setup for UniBook.

All modules log through children of the "unibook" logger (see get_logger).
init() attaches the handlers once the configuration is known:
- console: WARNING and above by default, "[LEVEL] message"
- rotating file: everything at the configured level, with timestamps
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from unibook.config import Config


ROOT_LOGGER_NAME = "unibook"
MAX_BYTES = 1_000_000
BACKUP_COUNT = 3

_handlers: list[logging.Handler] = []


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger below the "unibook" logger, e.g. "unibook.app".
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _remove_handlers(logger: logging.Logger) -> None:
    while _handlers:
        handler = _handlers.pop()
        logger.removeHandler(handler)
        handler.close()


def init(config: "Config", console_level: Optional[int] = None) -> None:
    """
    (Re)configure the "unibook" logger from config.

    Calling init() again replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    _remove_handlers(logger)

    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level if console_level is not None else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)
    _handlers.append(console_handler)

    if config.log_file_path is not None:
        log_path = Path(config.log_file_path)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
            )
        except OSError as e:
            logger.warning("Cannot write log file %s: %s", log_path, e)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            logger.addHandler(file_handler)
            _handlers.append(file_handler)
