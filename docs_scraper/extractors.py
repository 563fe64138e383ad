"""
In-Page Extractors
==================
Link enumeration and article extraction.

Both run inside the browser's document context via ``page.evaluate``.
They are plain JavaScript source strings and only receive JSON-serialisable
arguments (the selector dict from ``ScraperConfig.selectors``), so nothing
from the Python process is shared with the page.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .models import Link, PageRecord

logger = logging.getLogger(__name__)


# Every navigation-menu anchor, in document order.  ``link.href`` is the
# resolved absolute URL; same-page anchors (containing '#') are dropped.
LINKS_SCRIPT = """
(sel) => {
    const anchors = Array.from(document.querySelectorAll(sel.link));
    return anchors
        .map((a) => ({
            url: a.href || '',
            text: (a.textContent || '').trim(),
        }))
        .filter((link) => link.url && !link.url.includes('#'));
}
"""

# Article container → content + metadata, or null when the page has none.
PAGE_SCRIPT = """
(sel) => {
    const article = document.querySelector(sel.article);
    if (!article) return null;

    const heading = document.querySelector(sel.title);
    return {
        content: article.innerHTML,
        metadata: {
            title: heading ? (heading.textContent || '') : '',
            url: window.location.href,
            timestamp: new Date().toISOString(),
            breadcrumbs: Array.from(document.querySelectorAll(sel.breadcrumb))
                .map((item) => item.textContent || ''),
        },
    };
}
"""


async def get_all_doc_links(page, selectors: dict) -> List[Link]:
    """Enumerate the documentation links in the page's navigation menu."""
    raw = await page.evaluate(LINKS_SCRIPT, selectors)
    links = [Link.from_dict(item) for item in raw or []]
    logger.debug(f"[LINKS] {len(links)} menu links matched {selectors.get('link')!r}")
    return links


async def scrape_doc_page(page, selectors: dict) -> Optional[PageRecord]:
    """Extract the article on the current page, or ``None`` if there is none."""
    raw = await page.evaluate(PAGE_SCRIPT, selectors)
    if raw is None:
        return None
    return PageRecord.from_dict(raw)
