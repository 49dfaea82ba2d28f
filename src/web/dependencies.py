"""Shared FastAPI dependencies."""
from __future__ import annotations

from fastapi import Request

from src.scraper import ContentProcessor


def get_processor(request: Request) -> ContentProcessor:
    return request.app.state.processor


__all__ = ["get_processor"]
