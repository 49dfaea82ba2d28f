from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from src.telemetry import metrics


@pytest.fixture(autouse=True)
def _reset_metrics() -> None:
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture()
def article_html() -> str:
    return """<!DOCTYPE html>
<html>
<head>
  <title>  Example Story  </title>
  <meta name="author" content="Jane Reporter">
  <meta property="article:published_time" content="2024-03-05T08:30:00Z">
  <script>var tracking = "should not appear";</script>
</head>
<body>
  <header>Site masthead</header>
  <nav>Home | World | Sport</nav>
  <article>
    <h1>Example Story</h1>
    <p>First paragraph of the story.</p>
    <div class="social-share">Share this</div>
    <p>Second\tparagraph
       spans lines.</p>
  </article>
  <aside>Related links</aside>
  <footer>Copyright</footer>
</body>
</html>
"""
