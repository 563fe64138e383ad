"""
Utility Functions
Filename slugs, output directory handling, JSON persistence and rate limiting.
"""

import asyncio
import hashlib
import json
import logging
import re
from pathlib import Path
from typing import Dict, Union

from .models import PageRecord

logger = logging.getLogger(__name__)

_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """
    Turn link text into a filename stem.

    Lower-cases, collapses every run of characters outside ``[a-z0-9]``
    into a single hyphen and strips leading/trailing hyphens.

    Examples:
        "Getting Started!" -> "getting-started"
        "API / Reference"  -> "api-reference"
    """
    return _NON_SLUG_CHARS.sub('-', (text or '').lower()).strip('-')


def url_digest(url: str, length: int = 8) -> str:
    return hashlib.sha1(url.encode('utf-8')).hexdigest()[:length]


class FilenameAllocator:
    """
    Assigns output filenames to links for the duration of one crawl.

    The first link with a given slug gets ``<slug>.json``.  A later link
    with the same slug but a different URL gets a suffix derived from its
    URL.  Links without usable text fall back to ``page-<digest>``.
    """

    def __init__(self):
        self._owners: Dict[str, str] = {}   # filename -> url

    def filename_for(self, text: str, url: str) -> str:
        stem = slugify(text)
        if not stem:
            stem = f"page-{url_digest(url)}"
            logger.warning(f"No usable link text for {url}, using {stem}.json")

        name = f"{stem}.json"
        owner = self._owners.get(name)
        if owner is not None and owner != url:
            name = f"{stem}-{url_digest(url)}.json"
            logger.warning(
                f"Filename collision on {stem}.json ({owner} vs {url}), using {name}"
            )
        self._owners[name] = url
        return name


def ensure_dir(dir_path: Union[str, Path]) -> Path:
    """Create ``dir_path`` (and parents).  An existing directory is fine."""
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_page_record(record: PageRecord, filepath: Union[str, Path]) -> str:
    """Write one page record as indented JSON.  Returns the absolute path."""
    path = Path(filepath)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(record.to_dict(), f, indent=2, ensure_ascii=False)
    return str(path.absolute())


class RateLimiter:
    """
    Fixed delay between consecutive page visits.

    ``wait()`` is a cooperative ``asyncio.sleep`` so the event loop stays
    responsive while the crawl is paused.
    """

    def __init__(self, delay_s: float):
        self.delay_s = max(0.0, delay_s)

    async def wait(self) -> None:
        if self.delay_s > 0:
            logger.debug(f"Rate limiting: waiting {self.delay_s:.2f}s")
            await asyncio.sleep(self.delay_s)
