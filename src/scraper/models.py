"""Records produced by the extraction pipeline."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Metadata:
    """Best-effort page metadata; empty values mean "not found"."""

    title: str = ""
    author: str = ""
    published_date: Optional[datetime] = None


@dataclass
class Article:
    """Readable representation of a fetched web page."""

    url: str
    title: str
    content: str
    excerpt: str
    author: str
    published_date: Optional[datetime]
    word_count: int
    reading_time: int
    domain: str
    read_status: bool = False
    tags: List[str] = field(default_factory=list)
    thumbnail_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["published_date"] = (
            self.published_date.isoformat() if self.published_date else None
        )
        return payload


__all__ = ["Article", "Metadata"]
