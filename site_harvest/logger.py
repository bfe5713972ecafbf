# site_harvest/logger.py
"""
Логирование SiteHarvest.

Все модули пишут в логгер ``SiteHarvest`` или его потомков
(``SiteHarvest.renderer``, ``SiteHarvest.storage``...), поэтому один вызов
:func:`init_logging` из CLI настраивает вывод для всего обхода::

    from site_harvest.logger import logger
    logger.info("Crawling: %s", url)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

LOGGER_NAME: Final[str] = "SiteHarvest"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_FILE_BACKUPS: Final[int] = 3


def init_logging(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Заменяет обработчики логгера проекта: stdout и, если задан log_file,
    файл с ротацией. Сообщения не уходят в корневой логгер.
    """
    formatter = logging.Formatter(log_format)
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    lg.addHandler(console)

    if log_file is not None:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=_LOG_FILE_MAX_BYTES,
            backupCount=_LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        lg.addHandler(file_handler)

    lg.propagate = False
    return lg


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """``get_logger("storage")`` -> ``SiteHarvest.storage``."""
    return logging.getLogger(f"{LOGGER_NAME}.{component}" if component else LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "get_logger", "LOGGER_NAME", "DEFAULT_FORMAT"]
