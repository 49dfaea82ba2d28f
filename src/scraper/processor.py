"""Fetch → parse → extract → derive pipeline producing :class:`Article` records."""
from __future__ import annotations

import logging
import time
from typing import Optional

from src.config.settings import AppSettings
from src.telemetry import metrics

from .derive import extract_domain, generate_excerpt, reading_time_minutes, word_count
from .document import parse_document
from .errors import ProcessingError
from .extractors import extract_main_content, extract_metadata
from .fetcher import HTMLFetcher
from .models import Article

logger = logging.getLogger(__name__)


class ContentProcessor:
    """Turn a URL into a readable :class:`Article`.

    Fetch and parse failures propagate to the caller as
    :class:`~src.scraper.errors.ProcessingError` subclasses; the extraction and
    derivation stages only ever degrade to empty values. Every call builds and
    discards its own document, so one processor may serve many callers.
    """

    def __init__(self, fetcher: Optional[HTMLFetcher] = None, settings: Optional[AppSettings] = None) -> None:
        settings = settings or AppSettings()
        self._fetcher = fetcher or HTMLFetcher(settings.fetcher)

    def process(self, url: str) -> Article:
        start_time = time.perf_counter()
        try:
            article = self._process(url)
        except ProcessingError as exc:
            metrics.record_extraction(url, status=exc.kind, duration_seconds=time.perf_counter() - start_time)
            logger.warning(
                "Failed to process %s: %s",
                url,
                exc,
                extra={"event": "process.failed", "url": url, "error": exc.kind},
            )
            raise

        duration = time.perf_counter() - start_time
        metrics.record_extraction(
            url, status="success", duration_seconds=duration, word_count=article.word_count
        )
        logger.info(
            "Extracted %d words from %s",
            article.word_count,
            url,
            extra={"event": "process.done", "url": url, "domain": article.domain, "duration": duration},
        )
        return article

    def _process(self, url: str) -> Article:
        markup = self._fetcher.fetch(url)
        doc = parse_document(markup)

        # Content extraction prunes the tree, so metadata is read first.
        metadata = extract_metadata(doc)
        content = extract_main_content(doc)

        words = word_count(content)
        return Article(
            url=url,
            title=metadata.title,
            content=content,
            excerpt=generate_excerpt(content),
            author=metadata.author,
            published_date=metadata.published_date,
            word_count=words,
            reading_time=reading_time_minutes(words),
            domain=extract_domain(url),
            read_status=False,
            tags=[],
        )


def process(url: str, settings: Optional[AppSettings] = None) -> Article:
    """Process ``url`` with a throwaway :class:`ContentProcessor`."""
    return ContentProcessor(settings=settings).process(url)


__all__ = ["ContentProcessor", "process"]
