# site_harvest/crawler/link_extractor.py
"""
Link discovery policy for SiteHarvest.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from site_harvest.crawler.renderer import COLLECT_HREFS, Renderer
from site_harvest.crawler.urls import remove_duplicates, resolve_href
from site_harvest.logger import get_logger

logger = get_logger("links")


def filter_links(hrefs: Iterable[Optional[str]], base_origin: str) -> List[str]:
    """
    Resolve raw hrefs against *base_origin* and keep same-origin ones.

    Document order is kept and repeats collapse to their first occurrence.
    Unresolvable hrefs are dropped without complaint.
    """
    resolved = []
    for href in hrefs:
        url = resolve_href(href, base_origin)
        if url is None:
            logger.debug("Dropped href %r", href)
            continue
        resolved.append(url)
    return remove_duplicates(resolved)


class LinkDiscoverer:
    """Collects anchor targets from the rendered page."""

    async def discover(self, renderer: Renderer, base_origin: str) -> List[str]:
        hrefs = await renderer.run_in_page(COLLECT_HREFS)
        if not isinstance(hrefs, list):
            return []
        return filter_links(
            (h if isinstance(h, str) else None for h in hrefs),
            base_origin,
        )
