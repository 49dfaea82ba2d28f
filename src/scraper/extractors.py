"""Metadata and main-content extraction over a parsed :class:`Document`."""
from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Callable, Iterable, Optional, Tuple

from dateutil.parser import isoparse

from .document import Document
from .models import Metadata

logger = logging.getLogger(__name__)

# (selector, attribute) pairs; attribute ``None`` means "element text".
Source = Tuple[str, Optional[str]]

TITLE_SOURCES: Tuple[Source, ...] = (
    ("title", None),
    ("h1", None),
)

AUTHOR_SOURCES: Tuple[Source, ...] = (
    ('meta[name="author"]', "content"),
    ('[rel="author"]', None),
    (".author", None),
)

PUBLISHED_DATE_SOURCES: Tuple[Source, ...] = (
    ('meta[property="article:published_time"]', "content"),
    ('meta[name="date"]', "content"),
    ("time[datetime]", "datetime"),
)

BOILERPLATE_SELECTORS: Tuple[str, ...] = (
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "aside",
    ".advertisement",
    ".ads",
    ".social-share",
)

# Priority order; the first selector with any match wins.
CONTENT_SELECTORS: Tuple[str, ...] = (
    "article",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".content",
    "main",
    "#content",
    ".main-content",
)

_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]([01]\d|2[0-3]):\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)
_LINE_BREAKS_RE = re.compile(r"[\r\n\t]")
_SPACES_RE = re.compile(r" {2,}")


def first_match(values: Iterable[str], accept: Callable[[str], object] = str.strip) -> str:
    """Return the first value ``accept`` approves, else an empty string."""
    for value in values:
        if accept(value):
            return value
    return ""


def _read_sources(doc: Document, sources: Iterable[Source]) -> Iterable[str]:
    for selector, attribute in sources:
        if attribute is None:
            yield doc.text(selector)
        else:
            yield doc.attr(selector, attribute)


def parse_rfc3339(value: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp, returning ``None`` for anything else."""
    value = value.strip()
    if not _RFC3339_RE.match(value):
        return None
    try:
        return isoparse(value.upper())
    except (ValueError, OverflowError):
        return None


def extract_metadata(doc: Document) -> Metadata:
    """Read title, author and publication date without modifying ``doc``."""
    title = first_match(_read_sources(doc, TITLE_SOURCES))
    author = first_match(_read_sources(doc, AUTHOR_SOURCES))
    published_raw = first_match(_read_sources(doc, PUBLISHED_DATE_SOURCES))

    published_date = parse_rfc3339(published_raw) if published_raw else None
    if published_raw and published_date is None:
        logger.debug(
            "Ignoring unparseable publication date %r",
            published_raw,
            extra={"event": "extract.bad_date"},
        )

    return Metadata(title=title.strip(), author=author.strip(), published_date=published_date)


def normalize_whitespace(text: str) -> str:
    text = _LINE_BREAKS_RE.sub(" ", text)
    text = _SPACES_RE.sub(" ", text)
    return text.strip()


def extract_main_content(doc: Document) -> str:
    """Strip boilerplate from ``doc`` in place and return the main article text."""
    removed = doc.remove(BOILERPLATE_SELECTORS)

    content = ""
    for selector in CONTENT_SELECTORS:
        element = doc.select_first(selector)
        if element is not None:
            content = doc.element_text(element)
            logger.debug(
                "Content container matched %s",
                selector,
                extra={"event": "extract.container", "selector": selector, "removed": removed},
            )
            break

    if not content:
        content = doc.body_text()

    return normalize_whitespace(content)


__all__ = [
    "AUTHOR_SOURCES",
    "BOILERPLATE_SELECTORS",
    "CONTENT_SELECTORS",
    "PUBLISHED_DATE_SOURCES",
    "TITLE_SOURCES",
    "extract_main_content",
    "extract_metadata",
    "first_match",
    "normalize_whitespace",
    "parse_rfc3339",
]
