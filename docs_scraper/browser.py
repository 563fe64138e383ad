"""
Browser Session
===============
Thin async wrapper around a single Playwright Chromium page.

One browser, one context, one page, reused serially for every navigation.
The context carries the configured user agent so every request the page
makes is tagged with it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from playwright.async_api import async_playwright, Browser, BrowserContext, Page

from .run_config import ScraperConfig

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Owns the Playwright handles for one crawl.

    Usage::

        session = BrowserSession(config)
        await session.launch()
        await session.goto("https://docs.example.com/")
        data = await session.evaluate("() => document.title")
        await session.close()
    """

    def __init__(self, config: ScraperConfig):
        self.config = config
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session is not launched")
        return self._page

    async def launch(self) -> None:
        """Start Playwright, launch Chromium and open the working page."""
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(
            headless=self.config.headless,
            args=[
                '--no-sandbox',
                '--disable-dev-shm-usage',
            ],
        )
        self._context = await self._browser.new_context(
            user_agent=self.config.user_agent,
        )
        self._page = await self._context.new_page()
        # 0 disables Playwright's default 30s navigation timeout
        self._page.set_default_navigation_timeout(self.config.nav_timeout_ms)
        logger.info(
            f"Playwright browser initialized (headless={self.config.headless}, "
            f"user_agent={self.config.user_agent!r})"
        )

    async def goto(self, url: str) -> None:
        """Navigate and wait for the configured load state."""
        await self.page.goto(url, wait_until=self.config.wait_until)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    async def close(self) -> None:
        """
        Close context, browser and Playwright.  Safe to call twice.

        Each step runs even if an earlier one fails; failures are logged
        and every handle is cleared.
        """
        if self._context:
            try:
                await self._context.close()
            except Exception as e:
                logger.warning(f"Error closing browser context: {e}")
            self._context = None
            self._page = None
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None
        logger.debug("Browser closed")
