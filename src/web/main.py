"""ASGI entrypoint: ``uvicorn src.web.main:app``."""
from __future__ import annotations

from src.config.settings import load_settings
from src.scraper import ContentProcessor
from src.telemetry import configure_logging, configure_metrics_from_env
from .app import create_app

configure_logging()
_settings = load_settings()
configure_metrics_from_env(_settings.metrics_port)

app = create_app(ContentProcessor(settings=_settings))

__all__ = ["app"]
