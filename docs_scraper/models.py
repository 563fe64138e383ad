"""
Data Model
==========
Values produced and consumed by the docs scraper.

- ``Link``        : one navigation-menu entry (URL + display text)
- ``PageRecord``  : extracted article content + metadata, one per saved file
- ``LinkOutcome`` : what happened to a single link during a crawl
- ``CrawlReport`` : ordered outcomes for a whole crawl
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

STATUS_SAVED = "saved"
STATUS_NO_ARTICLE = "no_article"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class Link:
    """A documentation link discovered in the navigation menu."""
    url: str
    text: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Link":
        return cls(url=data.get("url") or "", text=data.get("text") or "")


@dataclass(frozen=True)
class PageMetadata:
    title: str
    url: str
    timestamp: str
    breadcrumbs: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'url': self.url,
            'timestamp': self.timestamp,
            'breadcrumbs': list(self.breadcrumbs),
        }


@dataclass(frozen=True)
class PageRecord:
    """Article HTML plus metadata, serialised as one JSON file."""
    content: str
    metadata: PageMetadata

    def to_dict(self) -> dict:
        return {'content': self.content, 'metadata': self.metadata.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageRecord":
        meta = data.get("metadata") or {}
        return cls(
            content=data.get("content") or "",
            metadata=PageMetadata(
                title=meta.get("title") or "",
                url=meta.get("url") or "",
                timestamp=meta.get("timestamp") or "",
                breadcrumbs=tuple(b or "" for b in meta.get("breadcrumbs") or []),
            ),
        )


@dataclass(frozen=True)
class LinkOutcome:
    """Result of processing one link: saved, no article, or failed."""
    link: Link
    status: str
    path: Optional[str] = None
    title: str = ""
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            'url': self.link.url,
            'text': self.link.text,
            'status': self.status,
            'path': self.path,
            'title': self.title,
            'reason': self.reason,
        }


@dataclass
class CrawlReport:
    """Outcomes of a crawl, in link discovery order."""
    start_url: str = ""
    links_found: int = 0
    outcomes: List[LinkOutcome] = field(default_factory=list)
    elapsed_sec: float = 0.0

    def add(self, outcome: LinkOutcome) -> None:
        self.outcomes.append(outcome)

    def _count(self, status: str) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def saved(self) -> int:
        return self._count(STATUS_SAVED)

    @property
    def no_article(self) -> int:
        return self._count(STATUS_NO_ARTICLE)

    @property
    def failed(self) -> int:
        return self._count(STATUS_FAILED)

    @property
    def errors(self) -> List[LinkOutcome]:
        return [o for o in self.outcomes if o.status == STATUS_FAILED]

    def to_dict(self) -> dict:
        return {
            'start_url': self.start_url,
            'stats': {
                'links_found': self.links_found,
                'saved': self.saved,
                'no_article': self.no_article,
                'failed': self.failed,
                'elapsed_sec': round(self.elapsed_sec, 2),
            },
            'outcomes': [o.to_dict() for o in self.outcomes],
        }

    def format_summary(self) -> str:
        """Human-readable summary block."""
        lines = [
            "=" * 65,
            "  SCRAPE SUMMARY",
            "=" * 65,
            f"  Start URL:           {self.start_url}",
            f"  Links found:         {self.links_found}",
            f"  Pages saved:         {self.saved}",
            f"  No article:          {self.no_article}",
            f"  Failed:              {self.failed}",
            f"  Elapsed time:        {self.elapsed_sec:.1f} s",
            "=" * 65,
        ]
        return "\n".join(lines)
