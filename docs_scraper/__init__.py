"""
Docs Scraper Package
Headless-browser scraper that walks a documentation site's navigation menu
and saves each article as a JSON file.

CLI Usage:
    python -m docs_scraper [options]

    Options:
        --url            Seed URL (default: Crustdata docs intro page)
        --out-dir        Output directory (default: ./docs)
        --rate-limit-ms  Delay between pages (default: 2000)
        --user-agent     User-Agent header
        --report         Write a JSON crawl report
"""

from .models import Link, PageMetadata, PageRecord, LinkOutcome, CrawlReport
from .run_config import ScraperConfig
from .utils import slugify, ensure_dir, write_page_record, FilenameAllocator, RateLimiter
from .extractors import get_all_doc_links, scrape_doc_page
from .browser import BrowserSession
from .scraper import DocsScraper

__all__ = [
    'Link',
    'PageMetadata',
    'PageRecord',
    'LinkOutcome',
    'CrawlReport',
    'ScraperConfig',
    'slugify',
    'ensure_dir',
    'write_page_record',
    'FilenameAllocator',
    'RateLimiter',
    'get_all_doc_links',
    'scrape_doc_page',
    'BrowserSession',
    'DocsScraper',
]

__version__ = '1.0.0'
