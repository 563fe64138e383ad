"""
Tests for BrowserSession: launch options, navigation, user agent and
shutdown.

Stub Playwright handles cover the wiring and the shutdown path; one test
drives real Chromium against a local HTTP server and is skipped when the
browser build is not installed.
"""

import asyncio
import logging
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from docs_scraper import browser as browser_mod
from docs_scraper.browser import BrowserSession
from docs_scraper.run_config import ScraperConfig

TEST_UA = "DocsScraperTest/1.0 (pytest)"


# ====================================================================
# Stub Playwright handles
# ====================================================================

class StubPage:
    def __init__(self):
        self.nav_timeout = None
        self.visits = []

    def set_default_navigation_timeout(self, timeout):
        self.nav_timeout = timeout

    async def goto(self, url, wait_until=None):
        self.visits.append((url, wait_until))

    async def evaluate(self, script, arg=None):
        return {"script": script, "arg": arg}


class StubContext:
    def __init__(self, fail_close=False):
        self.page = StubPage()
        self.fail_close = fail_close
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True
        if self.fail_close:
            raise RuntimeError("Target page, context or browser has been closed")


class StubBrowser:
    def __init__(self, context, fail_close=False):
        self.context = context
        self.fail_close = fail_close
        self.context_kwargs = None
        self.closed = False

    async def new_context(self, **kwargs):
        self.context_kwargs = kwargs
        return self.context

    async def close(self):
        self.closed = True
        if self.fail_close:
            raise RuntimeError("Browser has been closed")


class StubPlaywright:
    def __init__(self, browser):
        self.browser = browser
        self.launch_kwargs = None
        self.stopped = False
        self.chromium = self

    async def launch(self, **kwargs):
        self.launch_kwargs = kwargs
        return self.browser

    async def stop(self):
        self.stopped = True


def _install_stubs(monkeypatch, context_fails=False, browser_fails=False):
    context = StubContext(fail_close=context_fails)
    pw = StubPlaywright(StubBrowser(context, fail_close=browser_fails))

    class _Starter:
        async def start(self):
            return pw

    monkeypatch.setattr(browser_mod, "async_playwright", lambda: _Starter())
    return pw


# ====================================================================
# 1. Launch + navigation wiring
# ====================================================================

class TestLaunch:

    def test_context_carries_user_agent(self, monkeypatch):
        pw = _install_stubs(monkeypatch)
        session = BrowserSession(ScraperConfig(user_agent=TEST_UA))
        asyncio.run(session.launch())

        assert pw.browser.context_kwargs == {"user_agent": TEST_UA}
        assert pw.launch_kwargs["headless"] is True

    def test_navigation_timeout_disabled_by_default(self, monkeypatch):
        pw = _install_stubs(monkeypatch)
        asyncio.run(BrowserSession(ScraperConfig()).launch())
        assert pw.browser.context.page.nav_timeout == 0

    def test_navigation_timeout_configured(self, monkeypatch):
        pw = _install_stubs(monkeypatch)
        asyncio.run(BrowserSession(ScraperConfig(nav_timeout_ms=45000)).launch())
        assert pw.browser.context.page.nav_timeout == 45000

    def test_goto_waits_for_network_idle(self, monkeypatch):
        pw = _install_stubs(monkeypatch)
        session = BrowserSession(ScraperConfig())

        async def go():
            await session.launch()
            await session.goto("https://docs.example.com/docs/intro/")
            return await session.evaluate("(sel) => sel", {"link": "a"})

        result = asyncio.run(go())
        assert pw.browser.context.page.visits == [
            ("https://docs.example.com/docs/intro/", "networkidle"),
        ]
        assert result == {"script": "(sel) => sel", "arg": {"link": "a"}}

    def test_page_before_launch_raises(self):
        with pytest.raises(RuntimeError):
            BrowserSession(ScraperConfig()).page


# ====================================================================
# 2. Shutdown
# ====================================================================

class TestClose:

    def test_releases_every_handle(self, monkeypatch):
        pw = _install_stubs(monkeypatch)
        session = BrowserSession(ScraperConfig())

        async def go():
            await session.launch()
            await session.close()
            await session.close()

        asyncio.run(go())
        assert pw.browser.context.closed
        assert pw.browser.closed
        assert pw.stopped
        assert session._context is None
        assert session._browser is None
        assert session._playwright is None
        assert session._page is None

    def test_context_close_error_still_stops_browser(self, monkeypatch, caplog):
        """A failing context close must not leave Chromium or the driver running."""
        pw = _install_stubs(monkeypatch, context_fails=True, browser_fails=True)
        session = BrowserSession(ScraperConfig())

        async def go():
            await session.launch()
            await session.close()

        with caplog.at_level(logging.WARNING):
            asyncio.run(go())

        assert pw.browser.closed
        assert pw.stopped
        assert session._context is None
        assert session._browser is None
        assert session._playwright is None
        assert "has been closed" in caplog.text


# ====================================================================
# 3. Real Chromium
# ====================================================================

_PAGE = b"<html><body><article><h1>Served</h1></article></body></html>"


class _RecordingHandler(BaseHTTPRequestHandler):
    user_agents = []

    def do_GET(self):
        _RecordingHandler.user_agents.append(self.headers.get("User-Agent"))
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.send_header("Content-Length", str(len(_PAGE)))
        self.end_headers()
        self.wfile.write(_PAGE)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def local_server():
    _RecordingHandler.user_agents = []
    server = HTTPServer(("127.0.0.1", 0), _RecordingHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}/docs/intro"
    server.shutdown()
    server.server_close()


_NO_BROWSER = object()


def test_real_chromium_session(local_server):
    session = BrowserSession(ScraperConfig(user_agent=TEST_UA))

    async def go():
        try:
            await session.launch()
        except Exception as e:
            await session.close()
            if "Executable doesn't exist" not in str(e):
                raise
            return _NO_BROWSER
        try:
            await session.goto(local_server)
            ua = await session.evaluate("() => navigator.userAgent")
            title = await session.evaluate("() => document.querySelector('h1').textContent")
            return ua, title
        finally:
            await session.close()

    result = asyncio.run(go())
    if result is _NO_BROWSER:
        pytest.skip("Chromium is not installed for Playwright")

    ua, title = result
    assert ua == TEST_UA
    assert title == "Served"
    assert _RecordingHandler.user_agents
    assert all(agent == TEST_UA for agent in _RecordingHandler.user_agents)
    assert session._context is None
    assert session._browser is None
    assert session._playwright is None
