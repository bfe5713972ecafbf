# File: tests/test_static_renderer.py
# End-to-end crawl through the aiohttp/BeautifulSoup renderer
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from site_harvest.config import CrawlerConfig
from site_harvest.crawler.crawler import CrawlController
from site_harvest.crawler.renderer import COLLECT_HREFS, EXTRACT_CONTENT, StaticRenderer
from site_harvest.engine import start_crawl
from site_harvest.errors import NavigationError
from site_harvest.storage import url_to_filename

#: seconds the slow handler sleeps; well past the navigation timeout used with it
SLOW_SLEEP: float = 1.5

ROOT_HTML = """
<html><body>
  <header><a href="/login">Sign in</a> Site banner</header>
  <main>Welcome <a href="/p1">first</a> <a href="/data.json">data</a></main>
  <footer><a href="https://elsewhere.test/">partner</a></footer>
</body></html>
"""

P1_HTML = """
<html><body>
  <div id="__next"><div>Page one <a href="/">home</a> <a href="/missing">gone</a> <a href="#top">top</a></div></div>
</body></html>
"""


async def _serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest_asyncio.fixture
async def test_server(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()

    async def handle_root(_):
        return web.Response(text=ROOT_HTML, content_type="text/html")

    async def handle_p1(_):
        return web.Response(text=P1_HTML, content_type="text/html")

    async def handle_login(_):
        return web.Response(text="<main>login form</main>", content_type="text/html")

    async def handle_data(_):
        return web.json_response({"not": "html"})

    app.router.add_get("/", handle_root)
    app.router.add_get("/p1", handle_p1)
    app.router.add_get("/login", handle_login)
    app.router.add_get("/data.json", handle_data)

    async for url in _serve_app(app, unused_tcp_port):
        yield url


def make_config(base: str, output_dir, **extra) -> CrawlerConfig:
    return CrawlerConfig(
        start_url=base,
        output_dir=output_dir,
        renderer="static",
        navigation_timeout=2.0,
        user_agent="TestAgent/1.0",
        **extra,
    )


@pytest.mark.asyncio()
async def test_static_crawl_end_to_end(test_server: str, tmp_path):
    out = tmp_path / "out"
    result = await CrawlController(make_config(test_server, out)).crawl()

    root = f"{test_server}/"
    assert result.visited == [root, f"{test_server}/p1", f"{test_server}/missing", f"{test_server}/data.json"]
    assert result.saved == [root, f"{test_server}/p1"]
    assert "HTTP 404" in result.failed[f"{test_server}/missing"]
    assert "not an HTML document" in result.failed[f"{test_server}/data.json"]
    # the stripped header took its link with it
    assert f"{test_server}/login" not in result.visited

    root_text = (out / url_to_filename(root)).read_text(encoding="utf-8")
    assert root_text == f"URL: {root}\n\nContent:\nWelcome first data"
    p1_text = (out / url_to_filename(f"{test_server}/p1")).read_text(encoding="utf-8")
    assert p1_text.endswith("Content:\nPage one home gone top")


@pytest.mark.asyncio()
async def test_static_crawl_respects_budget(test_server: str, tmp_path):
    result = await start_crawl(make_config(test_server, tmp_path, max_pages=2, crawl_timeout=10))
    assert len(result.visited) == 2
    assert result.page_count == 2


@pytest.mark.asyncio()
async def test_header_kept_when_not_stripped(test_server: str, tmp_path):
    cfg = make_config(test_server, tmp_path, strip_selectors=[], content_selectors=["body"])
    async with StaticRenderer(cfg) as renderer:
        await renderer.navigate(f"{test_server}/")
        text = await renderer.run_in_page(EXTRACT_CONTENT, {"selectors": ["body"], "strip": []})
        hrefs = await renderer.run_in_page(COLLECT_HREFS)

    assert "Site banner" in text
    assert hrefs == ["/login", "/p1", "/data.json", "https://elsewhere.test/"]


@pytest.mark.asyncio()
async def test_selector_fallback_chain(test_server: str, tmp_path):
    cfg = make_config(test_server, tmp_path)
    async with StaticRenderer(cfg) as renderer:
        await renderer.navigate(f"{test_server}/p1")
        # invalid and missing selectors are skipped
        text = await renderer.run_in_page(
            EXTRACT_CONTENT, {"selectors": ["main", "[[bad", "#__next > div"], "strip": ["nav"]}
        )
    assert text.strip() == "Page one home gone top"


@pytest.mark.asyncio()
async def test_unreachable_host_raises_navigation_error(tmp_path, unused_tcp_port: int):
    cfg = make_config(f"http://localhost:{unused_tcp_port}", tmp_path)
    async with StaticRenderer(cfg) as renderer:
        with pytest.raises(NavigationError):
            await renderer.navigate(f"http://localhost:{unused_tcp_port}/")


@pytest.mark.asyncio()
async def test_unknown_script_rejected(test_server: str, tmp_path):
    async with StaticRenderer(make_config(test_server, tmp_path)) as renderer:
        await renderer.navigate(f"{test_server}/")
        with pytest.raises(ValueError):
            await renderer.run_in_page("document.cookie")


@pytest.mark.asyncio()
async def test_session_closed_on_exit(test_server: str, tmp_path):
    renderer = StaticRenderer(make_config(test_server, tmp_path))
    async with renderer:
        assert renderer.session is not None
    assert renderer.session.closed


@pytest.mark.asyncio()
async def test_navigation_deadline_is_a_page_failure(tmp_path, unused_tcp_port: int):
    app = web.Application()

    async def root(_):
        return web.Response(text='<main><a href="/slow">S</a> <a href="/fast">F</a></main>', content_type="text/html")

    async def slow(_):
        await asyncio.sleep(SLOW_SLEEP)
        return web.Response(text="<main>too late</main>", content_type="text/html")

    async def fast(_):
        return web.Response(text="<main>in time</main>", content_type="text/html")

    app.router.add_get("/", root)
    app.router.add_get("/slow", slow)
    app.router.add_get("/fast", fast)

    async for base in _serve_app(app, unused_tcp_port):
        cfg = make_config(base, tmp_path).with_overrides(navigation_timeout=0.3)
        result = await CrawlController(cfg).crawl()

    assert result.visited == [f"{base}/", f"{base}/slow", f"{base}/fast"]
    assert f"{base}/slow" in result.failed
    assert result.saved == [f"{base}/", f"{base}/fast"]
