from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.scraper import Article, ContentProcessor
from src.scraper.errors import HTTPStatusError, NetworkError, ParseError
from src.telemetry import metrics


class StubFetcher:
    def __init__(self, html: str = "", error: Exception | None = None) -> None:
        self.html = html
        self.error = error
        self.urls: list[str] = []

    def fetch(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.html


def test_process_builds_article(article_html: str) -> None:
    fetcher = StubFetcher(article_html)

    article = ContentProcessor(fetcher=fetcher).process("https://example.com/a/b")

    assert isinstance(article, Article)
    assert fetcher.urls == ["https://example.com/a/b"]
    assert article.url == "https://example.com/a/b"
    assert article.title == "Example Story"
    assert article.author == "Jane Reporter"
    assert article.published_date == datetime(2024, 3, 5, 8, 30, tzinfo=timezone.utc)
    assert article.content == "Example Story First paragraph of the story. Second paragraph spans lines."
    assert article.excerpt == article.content
    assert article.word_count == len(article.content.split()) == 11
    assert article.reading_time == 1
    assert article.domain == "example.com"
    assert article.read_status is False
    assert article.tags == []


def test_long_article_metrics() -> None:
    words = [f"word{i}" for i in range(450)]
    html = "<html><body><article><p>" + "</p>\n<p>".join(words) + "</p></article></body></html>"

    article = ContentProcessor(fetcher=StubFetcher(html)).process("https://blog.example.org/post")

    assert article.word_count == 450
    assert article.reading_time == 2
    assert article.excerpt == " ".join(words[:50]) + "..."
    assert article.domain == "blog.example.org"


def test_empty_page_yields_minimal_article() -> None:
    article = ContentProcessor(fetcher=StubFetcher("<html><body></body></html>")).process(
        "https://example.com/"
    )

    assert article.content == ""
    assert article.excerpt == ""
    assert article.word_count == 0
    assert article.reading_time == 1
    assert article.title == ""
    assert article.published_date is None


def test_http_status_error_propagates_without_article() -> None:
    processor = ContentProcessor(fetcher=StubFetcher(error=HTTPStatusError(404, "Not Found")))

    with pytest.raises(HTTPStatusError) as excinfo:
        processor.process("https://example.com/missing")

    assert excinfo.value.status_code == 404
    assert metrics.last_extraction is not None
    assert metrics.last_extraction.status == "http_status"


def test_network_error_propagates_unmodified() -> None:
    error = NetworkError("connection reset")
    processor = ContentProcessor(fetcher=StubFetcher(error=error))

    with pytest.raises(NetworkError) as excinfo:
        processor.process("https://example.com")

    assert excinfo.value is error


@pytest.mark.parametrize("body", ["", "   \n", "<!-- only a comment -->"])
def test_empty_body_yields_empty_article(body: str) -> None:
    article = ContentProcessor(fetcher=StubFetcher(body)).process("https://example.com/blank")

    assert article.content == ""
    assert article.word_count == 0
    assert article.reading_time == 1
    assert article.domain == "example.com"


def test_parse_error_short_circuits(monkeypatch) -> None:
    def reject(markup):
        raise ParseError("Unable to parse HTML")

    monkeypatch.setattr("src.scraper.processor.parse_document", reject)

    with pytest.raises(ParseError):
        ContentProcessor(fetcher=StubFetcher("<p>x</p>")).process("https://example.com")
    assert metrics.last_extraction.status == "parse"


def test_success_is_recorded_in_metrics(article_html: str) -> None:
    ContentProcessor(fetcher=StubFetcher(article_html)).process("https://example.com/a")

    event = metrics.last_extraction
    assert event is not None
    assert event.status == "success"
    assert event.word_count == 11
    assert event.duration_seconds >= 0


def test_invalid_url_does_not_fail_metrics_derivation(article_html: str) -> None:
    article = ContentProcessor(fetcher=StubFetcher(article_html)).process("http://[::1/broken")
    assert article.domain == ""


def test_to_dict_is_json_friendly(article_html: str) -> None:
    payload = ContentProcessor(fetcher=StubFetcher(article_html)).process("https://example.com/a").to_dict()

    assert payload["published_date"] == "2024-03-05T08:30:00+00:00"
    assert payload["reading_time"] == 1
    assert payload["tags"] == []
    assert payload["thumbnail_url"] == ""
