"""Metrics derived from extracted article text."""
from __future__ import annotations

from urllib.parse import urlsplit

WORDS_PER_MINUTE = 200
EXCERPT_WORDS = 50
EXCERPT_MARKER = "..."


def word_count(content: str) -> int:
    return len(content.split())


def reading_time_minutes(words: int) -> int:
    """Whole minutes at ``WORDS_PER_MINUTE``, never less than one."""
    return max(1, words // WORDS_PER_MINUTE)


def generate_excerpt(content: str) -> str:
    words = content.split()
    if len(words) <= EXCERPT_WORDS:
        return content
    return " ".join(words[:EXCERPT_WORDS]) + EXCERPT_MARKER


def extract_domain(url: str) -> str:
    """Return the host (and port, if any) of ``url``; empty when it cannot be parsed."""
    try:
        netloc = urlsplit(url).netloc
    except ValueError:
        return ""
    return netloc.rpartition("@")[2]


__all__ = [
    "EXCERPT_MARKER",
    "EXCERPT_WORDS",
    "WORDS_PER_MINUTE",
    "extract_domain",
    "generate_excerpt",
    "reading_time_minutes",
    "word_count",
]
