#!/usr/bin/env python3
"""
Command-line entry point for the docs scraper
==============================================
With no arguments the scraper runs with the built-in defaults from
``ScraperConfig``.  ``DOCS_SCRAPER_*`` variables (optionally from a ``.env``
file) and the flags below override individual values.

Run with: python -m docs_scraper
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .run_config import ScraperConfig
from .scraper import DocsScraper

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s | %(levelname)s | %(message)s'
LOG_DATEFMT = '%H:%M:%S'


class _MaxLevelFilter(logging.Filter):
    """Pass records strictly below ``level``."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(level: int = logging.INFO) -> None:
    """
    Progress goes to stdout, warnings and errors go to stderr.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(_MaxLevelFilter(logging.WARNING))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(logging.WARNING)

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)
    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)

    logging.getLogger("playwright").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='docs-scraper',
        description='Scrape a documentation site menu into one JSON file per page',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m docs_scraper                                   # built-in defaults
  python -m docs_scraper --url https://docs.example.com/docs/intro/
  python -m docs_scraper --out-dir out --rate-limit-ms 500 --report report.json
        """
    )
    parser.add_argument('--url', type=str, help='Seed URL whose menu is crawled')
    parser.add_argument('--out-dir', type=str, help='Output directory for page JSON files')
    parser.add_argument('--rate-limit-ms', type=int, help='Delay between pages in milliseconds')
    parser.add_argument('--user-agent', type=str, help='User-Agent sent with every request')
    parser.add_argument('--nav-timeout-ms', type=int,
                        help='Per-navigation timeout in milliseconds (default: none)')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    parser.add_argument('--report', type=str, metavar='PATH',
                        help='Write a JSON crawl report to PATH')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def build_config(args: argparse.Namespace) -> ScraperConfig:
    """Defaults → environment → flags."""
    cfg = ScraperConfig.from_env()
    return cfg.with_overrides(
        initial_url=args.url,
        out_dir=args.out_dir,
        rate_limit_ms=args.rate_limit_ms,
        user_agent=args.user_agent,
        nav_timeout_ms=args.nav_timeout_ms,
        headless=False if args.headed else None,
    )


def export_report(report, filepath: str) -> str:
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
    return str(path.absolute())


def main(argv=None) -> int:
    """Run the scraper.  Returns the process exit code."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        cfg = build_config(args)
        cfg.log_summary()
        report = DocsScraper(cfg).run()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    if args.report:
        try:
            logger.info(f"Report written: {export_report(report, args.report)}")
        except OSError as e:
            logger.error(f"Report export failed: {e}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
