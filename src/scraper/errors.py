"""Failure kinds raised by the fetch and parse stages of the pipeline."""
from __future__ import annotations

from typing import Optional


class ProcessingError(RuntimeError):
    """Base class for failures that prevent an article from being produced."""

    kind = "processing"

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class NetworkError(ProcessingError):
    """Transport-level failure: DNS, refused or reset connections."""

    kind = "network"


class FetchTimeoutError(NetworkError):
    """The request did not complete within the configured deadline."""

    kind = "timeout"


class HTTPStatusError(ProcessingError):
    """The server answered with something other than ``200 OK``."""

    kind = "http_status"

    def __init__(self, status_code: int, reason: str = "", url: Optional[str] = None) -> None:
        message = f"HTTP {status_code}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, url=url)
        self.status_code = status_code
        self.reason = reason


class ResponseTooLargeError(ProcessingError):
    """The response body exceeded the configured size cap."""

    kind = "too_large"

    def __init__(self, limit: int, url: Optional[str] = None) -> None:
        super().__init__(f"Response body exceeds {limit} bytes", url=url)
        self.limit = limit


class DecodeError(ProcessingError):
    """The response body could not be decoded with its declared or inferred charset."""

    kind = "decode"


class ParseError(ProcessingError):
    """The HTML parser rejected the document outright."""

    kind = "parse"


__all__ = [
    "DecodeError",
    "FetchTimeoutError",
    "HTTPStatusError",
    "NetworkError",
    "ParseError",
    "ProcessingError",
    "ResponseTooLargeError",
]
