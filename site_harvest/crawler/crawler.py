# === FILE: site_harvest/crawler/crawler.py ===
"""
Crawl controller: depth-first, same-origin, budgeted page harvesting.

One renderer surface is reused for every page, so only one URL is ever in
flight. Pending work is an explicit stack of link iterators; popping it gives
the same visiting order as recursing into each link before its next sibling.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional
from urllib.parse import urlsplit

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.extractor import ContentExtractor
from site_harvest.crawler.link_extractor import LinkDiscoverer
from site_harvest.crawler.models import VisitedSet
from site_harvest.crawler.renderer import Renderer, open_renderer
from site_harvest.crawler.urls import origin_of
from site_harvest.errors import NavigationError, SessionError, WriteError
from site_harvest.logger import logger
from site_harvest.storage import ArtifactWriter

__all__ = ("CrawlController", "CrawlResult", "CrawlSession")


@dataclass(slots=True)
class CrawlSession:
    """Mutable state of a single crawl; owned by the controller for its duration."""

    renderer: Renderer
    base_origin: str
    max_pages: int
    visited: VisitedSet = field(default_factory=VisitedSet)
    saved: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def budget_exhausted(self) -> bool:
        return self.visited.is_full(self.max_pages)


@dataclass(slots=True)
class CrawlResult:
    """Итог обхода."""

    seed_url: str
    visited: List[str]
    saved: List[str]
    failed: Dict[str, str]
    duration: float = 0.0

    @property
    def page_count(self) -> int:
        return len(self.saved)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed_url": self.seed_url,
            "page_count": self.page_count,
            "visited": list(self.visited),
            "saved": list(self.saved),
            "failed": dict(self.failed),
            "duration": round(self.duration, 3),
        }


class CrawlController:
    """Drives a renderer over a site and stores one text file per page."""

    def __init__(
        self,
        config: CrawlerConfig,
        renderer_factory: Callable[[CrawlerConfig], Any] = open_renderer,
        extractor: Optional[ContentExtractor] = None,
        discoverer: Optional[LinkDiscoverer] = None,
        writer: Optional[ArtifactWriter] = None,
    ) -> None:
        self.config = config
        self.renderer_factory = renderer_factory
        self.extractor = extractor or ContentExtractor(
            config.content_selectors, config.strip_selectors
        )
        self.discoverer = discoverer or LinkDiscoverer()
        self.writer = writer or ArtifactWriter(config.output_dir, config.file_extension)
        self.logger = logger

    async def crawl(self, seed_url: Optional[str] = None, max_pages: Optional[int] = None) -> CrawlResult:
        seed = seed_url or str(self.config.start_url)
        limit = self.config.max_pages if max_pages is None else max_pages
        if limit < 1:
            raise ValueError(f"max_pages must be >= 1, got {limit}")
        if urlsplit(seed).scheme.lower() not in ("http", "https"):
            raise ValueError(f"seed URL must be absolute http(s): {seed!r}")
        base_origin = origin_of(seed)

        self.writer.ensure_dir()
        self.logger.info("Старт обхода: %s (лимит %d страниц)", seed, limit)
        start = time.monotonic()
        try:
            async with self.renderer_factory(self.config) as renderer:
                session = CrawlSession(renderer=renderer, base_origin=base_origin, max_pages=limit)
                await self._run(session, seed)
        except SessionError as exc:
            self.logger.error("Renderer unavailable, crawl aborted: %s", exc)
            raise

        result = CrawlResult(
            seed_url=seed,
            visited=list(session.visited),
            saved=list(session.saved),
            failed=dict(session.failed),
            duration=time.monotonic() - start,
        )
        self.logger.info(
            "Crawling completed. Total pages collected: %d (visited %d, failed %d, %.2f s)",
            result.page_count,
            len(result.visited),
            len(result.failed),
            result.duration,
        )
        return result

    async def _run(self, session: CrawlSession, seed: str) -> None:
        stack: List[Iterator[str]] = [iter([seed])]
        while stack and not session.budget_exhausted:
            url = next(stack[-1], None)
            if url is None:
                stack.pop()
                continue
            links = await self._visit(session, url)
            if links:
                stack.append(iter(links))

    async def _visit(self, session: CrawlSession, url: str) -> List[str]:
        """Process one URL; returns the links to expand next (empty on skip/failure)."""
        if not session.visited.admit(url, session.max_pages):
            return []

        self.logger.info("Crawling: %s", url)
        renderer = session.renderer
        try:
            await renderer.navigate(url)
            content = await self.extractor.extract(renderer)
        except NavigationError as exc:
            self._record_failure(session, url, exc.reason)
            return []
        except Exception as exc:
            self._record_failure(session, url, f"{type(exc).__name__}: {exc}")
            return []

        await self._save(session, url, content)

        try:
            links = await self.discoverer.discover(renderer, session.base_origin)
        except Exception as exc:
            self.logger.warning("Link discovery failed on %s: %s", url, exc)
            return []
        self.logger.info("Discovered %d links on %s", len(links), url)
        return links

    async def _save(self, session: CrawlSession, url: str, content: str) -> None:
        try:
            path = await self.writer.save(url, content)
        except WriteError as exc:
            session.failed[url] = exc.reason
            self.logger.error("Failed to save content for %s: %s", url, exc.reason)
            return
        except Exception as exc:
            session.failed[url] = f"{type(exc).__name__}: {exc}"
            self.logger.error("Failed to save content for %s: %s", url, session.failed[url])
            return
        session.saved.append(url)
        self.logger.info("Saved content to %s", path)

    def _record_failure(self, session: CrawlSession, url: str, reason: str) -> None:
        session.failed[url] = reason
        self.logger.error("Failed to crawl %s: %s", url, reason)
