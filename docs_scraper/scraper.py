"""
Docs Scraper
============
Sequential crawl driver.

Flow:
1. Ensure the output directory exists
2. Launch one browser page and load the seed URL
3. Enumerate the navigation-menu links once
4. For every link: navigate → extract → persist → throttle
5. Close the browser and return a ``CrawlReport``

A failure on one link is logged and recorded as a ``failed`` outcome; the
loop moves on to the next link.  Failures before the loop starts (output
directory, browser launch, seed navigation, link discovery) propagate to
the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Optional

from .browser import BrowserSession
from .extractors import get_all_doc_links, scrape_doc_page
from .models import (
    CrawlReport,
    Link,
    LinkOutcome,
    STATUS_FAILED,
    STATUS_NO_ARTICLE,
    STATUS_SAVED,
)
from .run_config import ScraperConfig
from .utils import FilenameAllocator, RateLimiter, ensure_dir, write_page_record

logger = logging.getLogger(__name__)


class DocsScraper:
    """
    Crawl a documentation site's menu and save one JSON file per page.

    Usage::

        scraper = DocsScraper(ScraperConfig(out_dir="docs"))
        report = await scraper.crawl()

        # Or from sync code:
        report = scraper.run()
    """

    def __init__(
        self,
        config: ScraperConfig = None,
        session_factory: Callable[[ScraperConfig], BrowserSession] = BrowserSession,
    ):
        self.config = config or ScraperConfig()
        self._session_factory = session_factory
        self.rate_limiter = RateLimiter(self.config.rate_limit_s)

    def run(self) -> CrawlReport:
        """Sync wrapper: run the async crawl from synchronous code."""
        return asyncio.run(self.crawl())

    async def crawl(self) -> CrawlReport:
        cfg = self.config
        start_time = time.time()
        report = CrawlReport(start_url=cfg.initial_url)
        allocator = FilenameAllocator()

        out_dir = ensure_dir(cfg.out_dir)

        session = self._session_factory(cfg)
        try:
            await session.launch()
            await session.goto(cfg.initial_url)
            logger.info(f"Started scraping from: {cfg.initial_url}")

            links = await get_all_doc_links(session, cfg.selectors)
            report.links_found = len(links)
            logger.info(f"Found {len(links)} documentation pages")

            for index, link in enumerate(links, 1):
                logger.info(f"Scraping {index}/{len(links)}: {link.text}")
                outcome = await self._process_link(session, link, out_dir, allocator)
                report.add(outcome)

                if index < len(links):
                    await self.rate_limiter.wait()
        finally:
            await self._close_session(session)

        report.elapsed_sec = time.time() - start_time
        logger.info("\n" + report.format_summary())
        logger.info("Scraping completed!")
        return report

    async def _process_link(
        self,
        session: BrowserSession,
        link: Link,
        out_dir: Path,
        allocator: FilenameAllocator,
    ) -> LinkOutcome:
        """Visit one link.  Never raises: errors become a ``failed`` outcome."""
        try:
            await session.goto(link.url)
            record = await scrape_doc_page(session, self.config.selectors)

            if record is None:
                logger.info(f"  No article container on {link.url}, skipped")
                return LinkOutcome(link=link, status=STATUS_NO_ARTICLE)

            filename = allocator.filename_for(link.text, link.url)
            path = write_page_record(record, out_dir / filename)
            logger.info(f"  Scraped: {record.metadata.title or '(untitled)'} -> {filename}")
            return LinkOutcome(
                link=link,
                status=STATUS_SAVED,
                path=path,
                title=record.metadata.title,
            )
        except Exception as e:
            logger.error(f"Error scraping {link.url}: {e}")
            return LinkOutcome(link=link, status=STATUS_FAILED, reason=str(e))

    async def _close_session(self, session: Optional[BrowserSession]) -> None:
        try:
            await session.close()
        except Exception as e:
            logger.error(f"Error closing browser: {e}")
