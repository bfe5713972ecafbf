# File: site_harvest/engine.py
"""site_harvest.engine: Orchestration layer для запуска обхода из CLI и тестов."""

from __future__ import annotations

import asyncio
from typing import Optional

from site_harvest.config import CrawlerConfig, load_config
from site_harvest.crawler.crawler import CrawlController, CrawlResult
from site_harvest.logger import logger

__all__ = ["Engine", "start_crawl"]


async def start_crawl(config: CrawlerConfig, timeout: Optional[float] = None) -> CrawlResult:
    """Запускает CrawlController; timeout (или config.crawl_timeout) ограничивает весь обход."""
    controller = CrawlController(config)
    limit = timeout if timeout is not None else config.crawl_timeout
    if limit is None:
        return await controller.crawl()
    try:
        return await asyncio.wait_for(controller.crawl(), timeout=limit)
    except asyncio.TimeoutError:
        logger.error("Crawl did not finish within %s seconds", limit)
        raise


class Engine:
    """Синхронный фасад: загрузка конфига и запуск обхода."""

    @staticmethod
    def load_config(path: Optional[str]) -> CrawlerConfig:
        """Загружает конфиг из YAML/JSON."""
        return load_config(path)

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config

    def run(self) -> CrawlResult:
        """Запускает обход в новом event loop и возвращает CrawlResult."""
        logger.info("Starting crawl…")
        try:
            return asyncio.run(start_crawl(self.config))
        except Exception as exc:
            logger.error("Crawl failed: %s", exc)
            raise
