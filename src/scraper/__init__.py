"""Readable-article extraction: fetch a page, pick out the article, measure it."""

from .errors import (
    DecodeError,
    FetchTimeoutError,
    HTTPStatusError,
    NetworkError,
    ParseError,
    ProcessingError,
    ResponseTooLargeError,
)
from .fetcher import HTMLFetcher
from .models import Article, Metadata
from .processor import ContentProcessor, process

__all__ = [
    "Article",
    "ContentProcessor",
    "DecodeError",
    "FetchTimeoutError",
    "HTMLFetcher",
    "HTTPStatusError",
    "Metadata",
    "NetworkError",
    "ParseError",
    "ProcessingError",
    "ResponseTooLargeError",
    "process",
]
