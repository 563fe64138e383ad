"""
Run Configuration
=================
Single source of truth for scraper defaults.

``ScraperConfig`` is immutable: the CLI, ``.env`` overrides and tests all
build a new instance rather than mutating one.  The driver receives it at
construction time.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Canonical defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "initial_url": "https://docs.crustdata.com/docs/intro/",
    "out_dir": "./docs",
    "rate_limit_ms": 2000,
    "user_agent": "DocsScraper/1.0 (Research Purpose)",
    "wait_until": "networkidle",
    "headless": True,
    "nav_timeout_ms": 0,             # 0 = no navigation timeout
    # Docusaurus markup
    "link_selector": "a.menu__link",
    "article_selector": "article",
    "title_selector": "h1",
    "breadcrumb_selector": "nav.breadcrumbs li",
}

# Environment variable → field name
ENV_OVERRIDES = {
    "DOCS_SCRAPER_URL": "initial_url",
    "DOCS_SCRAPER_OUT_DIR": "out_dir",
    "DOCS_SCRAPER_RATE_LIMIT_MS": "rate_limit_ms",
    "DOCS_SCRAPER_USER_AGENT": "user_agent",
}

_WAIT_STATES = ("load", "domcontentloaded", "networkidle", "commit")


@dataclass(frozen=True)
class ScraperConfig:
    """
    Immutable configuration consumed by ``DocsScraper``.

    Populate via:
      - ``ScraperConfig()``                     → all defaults
      - ``ScraperConfig(out_dir="out")``        → override one value
      - ``ScraperConfig.from_env(os.environ)``  → DOCS_SCRAPER_* variables
      - ``cfg.with_overrides(rate_limit_ms=0)`` → copy with changes
    """

    initial_url: str = _DEFAULTS["initial_url"]
    out_dir: str = _DEFAULTS["out_dir"]
    rate_limit_ms: int = _DEFAULTS["rate_limit_ms"]
    user_agent: str = _DEFAULTS["user_agent"]

    # ---- Browser ----
    wait_until: str = _DEFAULTS["wait_until"]
    headless: bool = _DEFAULTS["headless"]
    nav_timeout_ms: int = _DEFAULTS["nav_timeout_ms"]

    # ---- Selectors ----
    link_selector: str = _DEFAULTS["link_selector"]
    article_selector: str = _DEFAULTS["article_selector"]
    title_selector: str = _DEFAULTS["title_selector"]
    breadcrumb_selector: str = _DEFAULTS["breadcrumb_selector"]

    def __post_init__(self):
        if not self.initial_url:
            raise ValueError("initial_url must not be empty")
        if urlparse(self.initial_url).scheme not in ("http", "https"):
            raise ValueError(f"initial_url must be http(s): {self.initial_url!r}")
        if not self.out_dir:
            raise ValueError("out_dir must not be empty")
        if self.rate_limit_ms < 0:
            raise ValueError(f"rate_limit_ms must be >= 0, got {self.rate_limit_ms}")
        if self.nav_timeout_ms < 0:
            raise ValueError(f"nav_timeout_ms must be >= 0, got {self.nav_timeout_ms}")
        if self.wait_until not in _WAIT_STATES:
            raise ValueError(f"wait_until must be one of {_WAIT_STATES}, got {self.wait_until!r}")

    @property
    def rate_limit_s(self) -> float:
        return self.rate_limit_ms / 1000.0

    @property
    def selectors(self) -> dict:
        """Selectors passed into the page for in-browser extraction."""
        return {
            'link': self.link_selector,
            'article': self.article_selector,
            'title': self.title_selector,
            'breadcrumb': self.breadcrumb_selector,
        }

    # -----------------------------------------------------------------------
    # Factory helpers
    # -----------------------------------------------------------------------
    def with_overrides(self, **overrides) -> "ScraperConfig":
        """Return a copy with non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ScraperConfig":
        """Build config from DOCS_SCRAPER_* environment variables."""
        environ = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        kwargs = {}
        for var, name in ENV_OVERRIDES.items():
            value = environ.get(var)
            if not value:
                continue
            if types[name] in (int, "int"):
                try:
                    kwargs[name] = int(value)
                except ValueError:
                    raise ValueError(f"{var} must be an integer, got {value!r}")
            else:
                kwargs[name] = value
        return cls(**kwargs)

    # -----------------------------------------------------------------------
    # Logging helper
    # -----------------------------------------------------------------------
    def log_summary(self) -> None:
        """Emit a structured summary to the logger."""
        logger.info("=" * 60)
        logger.info("SCRAPER RUN CONFIG")
        logger.info("=" * 60)
        logger.info(f"  URL:              {self.initial_url}")
        logger.info(f"  Output Dir:       {self.out_dir}")
        logger.info(f"  Rate Limit:       {self.rate_limit_ms}ms between pages")
        logger.info(f"  User Agent:       {self.user_agent}")
        logger.info(f"  Wait Until:       {self.wait_until}")
        logger.info(f"  Headless:         {self.headless}")
        if self.nav_timeout_ms:
            logger.info(f"  Nav Timeout:      {self.nav_timeout_ms}ms")
        logger.info(f"  Menu Links:       {self.link_selector}")
        logger.info(f"  Article:          {self.article_selector}")
        logger.info("=" * 60)
