"""Factory for the Gocket extraction API."""
from __future__ import annotations

from fastapi import FastAPI

from src.scraper import ContentProcessor

from .routes import articles, health


def create_app(processor: ContentProcessor) -> FastAPI:
    """Create a configured FastAPI application instance."""

    app = FastAPI(title="Gocket", version="0.1.0")
    app.state.processor = processor

    app.include_router(health.router)
    app.include_router(articles.router, prefix="/api/articles")

    return app


__all__ = ["create_app"]
