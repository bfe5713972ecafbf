# site_harvest/crawler/models.py
"""
Data models for the SiteHarvest crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator


@dataclass(slots=True)
class VisitedSet:
    """
    URLs already dispatched for crawling, in admission order.

    Grows only. :meth:`admit` is the single check-and-mark step, so a URL is
    scheduled at most once and never past the page budget.
    """

    _urls: Dict[str, None] = field(default_factory=dict)

    def admit(self, url: str, limit: int) -> bool:
        if len(self._urls) >= limit or url in self._urls:
            return False
        self._urls[url] = None
        return True

    def is_full(self, limit: int) -> bool:
        return len(self._urls) >= limit

    def __contains__(self, url: object) -> bool:
        return url in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)
