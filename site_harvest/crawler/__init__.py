"""
Crawl core: URL scoping, visitation bookkeeping, page policies and the controller.
"""
from site_harvest.crawler.crawler import CrawlController, CrawlResult, CrawlSession
from site_harvest.crawler.extractor import ContentExtractor
from site_harvest.crawler.link_extractor import LinkDiscoverer
from site_harvest.crawler.models import VisitedSet
from site_harvest.crawler.renderer import PlaywrightRenderer, Renderer, StaticRenderer, open_renderer

__all__ = [
    "CrawlController",
    "CrawlResult",
    "CrawlSession",
    "ContentExtractor",
    "LinkDiscoverer",
    "VisitedSet",
    "Renderer",
    "PlaywrightRenderer",
    "StaticRenderer",
    "open_renderer",
]
