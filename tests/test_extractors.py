from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.scraper.document import parse_document
from src.scraper.extractors import (
    extract_main_content,
    extract_metadata,
    normalize_whitespace,
    parse_rfc3339,
)


def test_metadata_from_primary_sources(article_html: str) -> None:
    metadata = extract_metadata(parse_document(article_html))

    assert metadata.title == "Example Story"
    assert metadata.author == "Jane Reporter"
    assert metadata.published_date == datetime(2024, 3, 5, 8, 30, tzinfo=timezone.utc)


def test_metadata_fallback_chain() -> None:
    doc = parse_document(
        "<html><head><meta name='date' content='2023-11-02T10:15:30.250+02:00'></head>"
        "<body><h1> Headline </h1><a rel='author' href='/me'> Pat Doe </a>"
        "<span class='author'>Ignored</span><time datetime='2020-01-01T00:00:00Z'></time></body></html>"
    )

    metadata = extract_metadata(doc)

    assert metadata.title == "Headline"
    assert metadata.author == "Pat Doe"
    assert metadata.published_date == datetime(
        2023, 11, 2, 10, 15, 30, 250000, tzinfo=timezone(timedelta(hours=2))
    )


def test_metadata_uses_author_class_and_time_element() -> None:
    doc = parse_document(
        "<body><p class='author'>By Sam</p><time datetime='2021-06-07T12:00:00-05:00'>June</time></body>"
    )

    metadata = extract_metadata(doc)

    assert metadata.title == ""
    assert metadata.author == "By Sam"
    assert metadata.published_date == datetime(2021, 6, 7, 17, 0, tzinfo=timezone.utc)


def test_malformed_published_date_is_absent() -> None:
    doc = parse_document(
        "<head><meta property='article:published_time' content='March 5th, 2024'></head><body></body>"
    )
    assert extract_metadata(doc).published_date is None


def test_blank_title_falls_back_to_h1() -> None:
    doc = parse_document("<head><title>   </title></head><body><h1>Real title</h1></body>")
    assert extract_metadata(doc).title == "Real title"


@pytest.mark.parametrize(
    "value",
    [
        "2024-03-05",
        "2024-03-05T08:30:00",
        "2024-03-05 08:30:00Z",
        "2024-13-05T08:30:00Z",
        "2024-01-01T24:00:00Z",
        "",
    ],
)
def test_parse_rfc3339_rejects_non_conforming_values(value: str) -> None:
    assert parse_rfc3339(value) is None


def test_parse_rfc3339_accepts_lowercase_separators() -> None:
    assert parse_rfc3339("2024-03-05t08:30:00z") == datetime(2024, 3, 5, 8, 30, tzinfo=timezone.utc)


def test_content_prefers_article_and_strips_boilerplate(article_html: str) -> None:
    content = extract_main_content(parse_document(article_html))

    assert content == "Example Story First paragraph of the story. Second paragraph spans lines."


def test_article_tag_beats_content_class() -> None:
    doc = parse_document(
        "<body><div class='content'>Sidebar-ish content</div><article>The real story</article></body>"
    )
    assert extract_main_content(doc) == "The real story"


def test_first_matching_selector_wins_over_later_ones() -> None:
    doc = parse_document(
        "<body><main>Main text</main><div class='post-content'>Post text</div>"
        "<div class='post-content'>Second post</div></body>"
    )
    assert extract_main_content(doc) == "Post text"


def test_falls_back_to_normalized_body_text() -> None:
    doc = parse_document(
        "<body>\n  <div>Just\tsome</div>\n\n<p>body   text</p>\n<footer>bye</footer></body>"
    )
    assert extract_main_content(doc) == "Just some body text"


def test_metadata_survives_when_read_before_content(article_html: str) -> None:
    doc = parse_document(article_html)
    metadata = extract_metadata(doc)
    extract_main_content(doc)

    assert metadata.title == "Example Story"
    assert doc.select_all("script") == []


@pytest.mark.parametrize(
    "text",
    ["  a\n\nb\t\tc  ", "already clean", "", "x \r\n y"],
)
def test_whitespace_normalization_is_idempotent(text: str) -> None:
    once = normalize_whitespace(text)
    assert normalize_whitespace(once) == once
    assert "  " not in once
    assert "\n" not in once and "\t" not in once
