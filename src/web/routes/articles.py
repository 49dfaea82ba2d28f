"""JSON endpoints that run the extraction pipeline."""
from __future__ import annotations

import logging
from typing import Any, Dict
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from src.scraper import ContentProcessor, ProcessingError
from src.web.dependencies import get_processor

logger = logging.getLogger(__name__)

router = APIRouter()


class ExtractRequest(BaseModel):
    url: str


def _validate_url(url: str) -> str:
    url = url.strip()
    try:
        parts = urlsplit(url)
    except ValueError:
        parts = None
    if parts is None or parts.scheme not in {"http", "https"} or not parts.netloc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="URL must be an absolute http(s) address",
        )
    return url


@router.post("/extract")
def extract_article(
    payload: ExtractRequest,
    processor: ContentProcessor = Depends(get_processor),
) -> Dict[str, Any]:
    url = _validate_url(payload.url)
    try:
        article = processor.process(url)
    except ProcessingError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": "Failed to process URL", "url": url, "error": exc.kind},
        ) from exc
    return article.to_dict()


__all__ = ["router"]
