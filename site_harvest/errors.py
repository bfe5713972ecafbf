# site_harvest/errors.py
"""
Exception hierarchy for SiteHarvest.

Per-URL failures (:class:`NavigationError`, :class:`WriteError`) are caught by
the crawl controller and recorded; only :class:`SessionError` aborts a crawl.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class HarvestError(Exception):
    """Base class for all SiteHarvest errors."""


class NavigationError(HarvestError):
    """The renderer could not load *url* (timeout, DNS, non-HTML resource...)."""

    def __init__(self, url: str, reason: Union[str, BaseException]) -> None:
        self.url = url
        self.reason = str(reason)
        super().__init__(f"navigation to {url} failed: {self.reason}")


class WriteError(HarvestError):
    """The artifact for *url* could not be written to *path*."""

    def __init__(self, url: str, path: Optional[Path], reason: Union[str, BaseException]) -> None:
        self.url = url
        self.path = path
        self.reason = str(reason)
        super().__init__(f"cannot write {path} for {url}: {self.reason}")


class SessionError(HarvestError):
    """The renderer session could not be established at all."""


__all__ = ["HarvestError", "NavigationError", "WriteError", "SessionError"]
