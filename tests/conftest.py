# File: tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.renderer import COLLECT_HREFS, EXTRACT_CONTENT
from site_harvest.errors import NavigationError

ORIGIN = "https://example.test"


class FakeRenderer:
    """
    In-memory renderer over a dict ``url -> {"links": [...], "text": "..."}``.
    URLs missing from *pages* or listed in *fail* raise NavigationError.
    """

    def __init__(self, pages: Dict[str, dict], fail: Iterable[str] = ()) -> None:
        self.pages = pages
        self.fail = set(fail)
        self.navigations: List[str] = []
        self.scripts: List[tuple] = []
        self.current: Optional[str] = None
        self.entered = False
        self.closed = False

    async def __aenter__(self) -> "FakeRenderer":
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def navigate(self, url: str) -> None:
        self.navigations.append(url)
        self.current = None
        if url in self.fail:
            raise NavigationError(url, "Timeout 30000ms exceeded")
        if url not in self.pages:
            raise NavigationError(url, "net::ERR_NAME_NOT_RESOLVED")
        self.current = url

    async def run_in_page(self, script_id: str, args: Optional[dict] = None):
        self.scripts.append((script_id, args))
        page = self.pages[self.current]
        if script_id == COLLECT_HREFS:
            return list(page.get("links", []))
        if script_id == EXTRACT_CONTENT:
            return page.get("text", f"text of {self.current}")
        raise ValueError(script_id)

    async def close(self) -> None:
        self.closed = True


def site(graph: Dict[str, List[str]], origin: str = ORIGIN) -> Dict[str, dict]:
    """``{"/": ["/a"], "/a": []}`` -> FakeRenderer pages keyed by absolute URL."""
    return {origin + path: {"links": links, "text": f"  body of {path}  \n"} for path, links in graph.items()}


@pytest.fixture()
def output_dir(tmp_path) -> Path:
    return tmp_path / "output"


@pytest.fixture()
def basic_config(output_dir) -> CrawlerConfig:
    """
    Return a basic valid CrawlerConfig for crawler tests.
    """
    return CrawlerConfig(
        start_url=f"{ORIGIN}/",
        max_pages=10,
        output_dir=output_dir,
        renderer="static",
        navigation_timeout=2.0,
        user_agent="TestAgent/1.0",
    )
