# site_harvest/crawler/renderer.py
"""
Page renderers: load a URL and answer a small, fixed set of in-page queries.

The crawl core never ships code into the page: it names one of the scripts
in :data:`SCRIPT_IDS` and gets a JSON value back.

* :class:`PlaywrightRenderer` drives headless Chromium and reuses one page for
  the whole crawl, so client-side rendered sites come out populated.
* :class:`StaticRenderer` downloads HTML with aiohttp and evaluates the same
  scripts over a BeautifulSoup tree. No JavaScript, no browser install.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup
from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from soupsieve import SelectorSyntaxError

from site_harvest.config import CrawlerConfig
from site_harvest.errors import NavigationError, SessionError
from site_harvest.logger import get_logger

logger = get_logger("renderer")

COLLECT_HREFS = "collect_hrefs"
EXTRACT_CONTENT = "extract_content"
SCRIPT_IDS = frozenset({COLLECT_HREFS, EXTRACT_CONTENT})

_JS_SCRIPTS: Dict[str, str] = {
    COLLECT_HREFS: """
        () => Array.from(document.querySelectorAll("a")).map((el) => el.getAttribute("href"))
    """,
    EXTRACT_CONTENT: """
        ({selectors, strip}) => {
            for (const sel of strip) {
                const el = document.querySelector(sel);
                if (el && el.parentNode) {
                    el.parentNode.removeChild(el);
                }
            }
            for (const sel of selectors) {
                let el = null;
                try {
                    el = document.querySelector(sel);
                } catch (e) {
                    continue;
                }
                if (el && el.textContent) {
                    return el.textContent;
                }
            }
            const root = document.body || document.documentElement;
            return (root && root.textContent) || "";
        }
    """,
}

_HTML_TYPES = ("text/html", "application/xhtml+xml")


@runtime_checkable
class Renderer(Protocol):
    """What the crawl controller needs from a page-loading engine."""

    async def navigate(self, url: str) -> None:
        """Load *url*; raise NavigationError if it does not finish loading."""

    async def run_in_page(self, script_id: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """Run a named script against the loaded document and return its JSON result."""

    async def close(self) -> None:
        """Release the underlying resources. Safe to call twice."""


def _check_script(script_id: str) -> None:
    if script_id not in SCRIPT_IDS:
        raise ValueError(f"unknown in-page script: {script_id!r}")


class PlaywrightRenderer:
    """Chromium via async Playwright, one browser context and one page."""

    def __init__(self, config: CrawlerConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._current_url: Optional[str] = None

    async def __aenter__(self) -> PlaywrightRenderer:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def start(self) -> None:
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
            self._context = await self._browser.new_context(user_agent=self.config.user_agent)
            self._page = await self._context.new_page()
        except (PlaywrightError, OSError) as exc:
            await self.close()
            raise SessionError(f"cannot start Chromium: {exc}") from exc
        logger.debug("Chromium started (headless=%s)", self.config.headless)

    async def navigate(self, url: str) -> None:
        if self._page is None:
            raise RuntimeError("Renderer not started")
        timeout_ms = self.config.navigation_timeout * 1000
        self._current_url = url
        try:
            await self._page.goto(url, wait_until=self.config.wait_until, timeout=timeout_ms)
            # client-side routers may keep fetching after the first idle
            await self._page.wait_for_load_state(self.config.wait_until, timeout=timeout_ms)
        except PlaywrightError as exc:
            raise NavigationError(url, exc) from exc

    async def run_in_page(self, script_id: str, args: Optional[Dict[str, Any]] = None) -> Any:
        _check_script(script_id)
        if self._page is None:
            raise RuntimeError("Renderer not started")
        try:
            return await self._page.evaluate(_JS_SCRIPTS[script_id], args or {})
        except PlaywrightError as exc:
            raise NavigationError(self._current_url or "", exc) from exc

    async def close(self) -> None:
        for name in ("_page", "_context", "_browser"):
            resource = getattr(self, name)
            setattr(self, name, None)
            if resource is None:
                continue
            try:
                await resource.close()
            except PlaywrightError as exc:
                logger.debug("Ignoring error while closing %s: %s", name.lstrip("_"), exc)
        if self._playwright is not None:
            playwright, self._playwright = self._playwright, None
            await playwright.stop()


class StaticRenderer:
    """Plain HTTP renderer: aiohttp download plus BeautifulSoup queries."""

    def __init__(self, config: CrawlerConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._soup: Optional[BeautifulSoup] = None
        self._current_url: Optional[str] = None

    async def __aenter__(self) -> StaticRenderer:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.navigation_timeout),
                headers={"User-Agent": self.config.user_agent},
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def navigate(self, url: str) -> None:
        if not self.session:
            raise RuntimeError("Session not initialized")
        self._soup = None
        self._current_url = url
        try:
            async with self.session.get(url) as resp:
                if resp.status >= 400:
                    raise NavigationError(url, f"HTTP {resp.status}")
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime not in _HTML_TYPES:
                    raise NavigationError(url, f"not an HTML document ({mime or 'no content type'})")
                text = await resp.text()
        except (ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            raise NavigationError(url, str(exc) or type(exc).__name__) from exc
        self._soup = BeautifulSoup(text, "html.parser")

    async def run_in_page(self, script_id: str, args: Optional[Dict[str, Any]] = None) -> Any:
        _check_script(script_id)
        if self._soup is None:
            raise RuntimeError("No page loaded")
        args = args or {}
        if script_id == COLLECT_HREFS:
            return [a.get("href") for a in self._soup.find_all("a")]
        return self._extract_content(args.get("selectors", []), args.get("strip", []))

    def _extract_content(self, selectors, strip) -> str:
        soup = self._soup
        for sel in strip:
            el = self._select(sel)
            if el is not None:
                el.decompose()
        for sel in selectors:
            el = self._select(sel)
            if el is None:
                continue
            text = el.get_text()
            if text:
                return text
        root = soup.body or soup
        return root.get_text()

    def _select(self, selector: str):
        try:
            return self._soup.select_one(selector)
        except SelectorSyntaxError:
            return None

    async def close(self) -> None:
        self._soup = None
        if self.session is not None and self._owns_session and not self.session.closed:
            await self.session.close()


def open_renderer(config: CrawlerConfig):
    """Build the renderer named by ``config.renderer`` (not started yet)."""
    if config.renderer == "static":
        return StaticRenderer(config)
    return PlaywrightRenderer(config)


__all__ = [
    "Renderer",
    "PlaywrightRenderer",
    "StaticRenderer",
    "open_renderer",
    "COLLECT_HREFS",
    "EXTRACT_CONTENT",
    "SCRIPT_IDS",
]
