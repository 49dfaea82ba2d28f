"""Command-line entrypoint: extract readable articles from URLs as JSON lines."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from src.config.settings import SettingsError, load_settings
from src.scraper import ContentProcessor, ProcessingError
from src.telemetry import configure_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gocket-extract",
        description="Fetch web pages and print their readable article content as JSON lines.",
    )
    parser.add_argument("urls", nargs="+", metavar="URL")
    parser.add_argument("--settings", type=Path, default=None, help="Path to a settings YAML file.")
    parser.add_argument("--log-level", default=None, help="Overrides GOCKET_LOG_LEVEL.")
    return parser


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(level=args.log_level)

    try:
        settings = load_settings(args.settings)
    except SettingsError as exc:
        logger.error("Invalid settings: %s", exc, extra={"event": "cli.settings_error"})
        return 2

    processor = ContentProcessor(settings=settings)
    failures = 0
    for url in args.urls:
        try:
            article = processor.process(url)
        except ProcessingError as exc:
            failures += 1
            logger.error("Could not process %s (%s)", url, exc.kind, extra={"event": "cli.failed", "url": url})
            continue
        out.write(json.dumps(article.to_dict(), ensure_ascii=False) + "\n")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
