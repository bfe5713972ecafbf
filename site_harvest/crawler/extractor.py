# site_harvest/crawler/extractor.py
"""
Content extraction policy: which part of a rendered page counts as its text.
"""
from __future__ import annotations

from typing import Optional, Sequence

from site_harvest.config import DEFAULT_CONTENT_SELECTORS, DEFAULT_STRIP_SELECTORS
from site_harvest.crawler.renderer import EXTRACT_CONTENT, Renderer


class ContentExtractor:
    """
    Removes page chrome, then returns the text of the first selector that
    matches with non-empty text, falling back to the whole document.

    The strip step runs against the live document, so stripped elements are
    also invisible to link discovery on the same page.
    """

    def __init__(
        self,
        selectors: Optional[Sequence[str]] = None,
        strip_selectors: Optional[Sequence[str]] = None,
    ) -> None:
        self.selectors = list(DEFAULT_CONTENT_SELECTORS if selectors is None else selectors)
        self.strip_selectors = list(
            DEFAULT_STRIP_SELECTORS if strip_selectors is None else strip_selectors
        )

    async def extract(self, renderer: Renderer) -> str:
        text = await renderer.run_in_page(
            EXTRACT_CONTENT,
            {"selectors": self.selectors, "strip": self.strip_selectors},
        )
        return text if isinstance(text, str) else ""
