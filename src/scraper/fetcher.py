"""HTTP retrieval of article HTML."""
from __future__ import annotations

import logging
import socket
import threading
import time
from typing import Callable, Optional

import requests
from charset_normalizer import from_bytes
from requests.models import DEFAULT_REDIRECT_LIMIT
from urllib3.exceptions import ReadTimeoutError

from src.config.settings import FetcherSettings

from .errors import DecodeError, FetchTimeoutError, HTTPStatusError, NetworkError, ResponseTooLargeError

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "utf-8"


def _is_read_timeout(exc: requests.ConnectionError) -> bool:
    # requests re-raises urllib3 read timeouts hit while streaming as ConnectionError.
    return any(isinstance(arg, ReadTimeoutError) for arg in exc.args)


def _declared_encoding(response: requests.Response) -> Optional[str]:
    content_type = response.headers.get("Content-Type", "")
    if "charset=" not in content_type.lower():
        return None
    return response.encoding


def _content_length(response: requests.Response) -> Optional[int]:
    value = response.headers.get("Content-Length")
    if value is None or not value.strip().isdigit():
        return None
    return int(value)


def _response_socket(response: requests.Response) -> Optional[socket.socket]:
    raw = getattr(response, "raw", None)
    connection = getattr(raw, "_connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        fp = getattr(getattr(raw, "_fp", None), "fp", None)
        sock = getattr(getattr(fp, "raw", None), "_sock", None)
    return sock


class _Deadline:
    """Wall-clock budget shared by every phase of one fetch."""

    def __init__(self, seconds: float) -> None:
        self._expires_at = time.monotonic() + seconds
        self.expired = threading.Event()

    def remaining(self) -> float:
        return max(0.0, self._expires_at - time.monotonic())

    def passed(self) -> bool:
        return self.expired.is_set() or self.remaining() <= 0


class HTMLFetcher:
    """Download a page and return its decoded HTML.

    A single deadline of ``timeout_seconds`` covers connecting, every redirect
    hop, waiting for headers and streaming the body. Each socket operation gets
    the remaining budget as its timeout, and a watchdog shuts the connection
    down if the body is still arriving when the budget runs out. Nothing is
    retried.
    """

    def __init__(
        self,
        settings: Optional[FetcherSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or FetcherSettings()
        self._session = session
        self._headers = {"User-Agent": self._settings.user_agent}

    @property
    def settings(self) -> FetcherSettings:
        return self._settings

    def fetch(self, url: str) -> str:
        """Fetch ``url`` and return the response body as text."""
        deadline = _Deadline(self._settings.timeout_seconds)
        session = self._session or requests.Session()
        try:
            logger.debug("Fetching %s", url, extra={"event": "fetch.start", "url": url})
            response = self._open(session, url, deadline)
            watchdog = self._arm_watchdog(response, deadline)
            try:
                if response.status_code != 200:
                    logger.warning(
                        "Unexpected status %s for %s",
                        response.status_code,
                        url,
                        extra={"event": "fetch.bad_status", "url": url, "status_code": response.status_code},
                    )
                    raise HTTPStatusError(response.status_code, response.reason or "", url=url)
                body = self._read_body(response, url, deadline)
                encoding = _declared_encoding(response)
            finally:
                watchdog.cancel()
                response.close()
        finally:
            if self._session is None:
                session.close()

        text = self._decode(body, encoding, url)
        logger.info(
            "Fetched %s (%d bytes)",
            url,
            len(body),
            extra={"event": "fetch.done", "url": url, "bytes": len(body)},
        )
        return text

    def _open(self, session: requests.Session, url: str, deadline: _Deadline) -> requests.Response:
        """Send the request and follow redirects by hand so every hop shares ``deadline``."""
        response = self._send(
            lambda timeout: session.get(
                url,
                headers=self._headers,
                timeout=timeout,
                stream=True,
                allow_redirects=False,
            ),
            url,
            deadline,
        )
        max_redirects = getattr(session, "max_redirects", DEFAULT_REDIRECT_LIMIT)
        hops = 0
        while response.is_redirect and response.next is not None:
            next_request = response.next
            response.close()
            hops += 1
            if hops > max_redirects:
                raise NetworkError(f"Exceeded {max_redirects} redirects fetching {url}", url=url)
            response = self._send(
                lambda timeout: session.send(
                    next_request, timeout=timeout, stream=True, allow_redirects=False
                ),
                url,
                deadline,
            )
        return response

    def _send(
        self,
        send: Callable[[float], requests.Response],
        url: str,
        deadline: _Deadline,
    ) -> requests.Response:
        remaining = deadline.remaining()
        if remaining <= 0:
            raise FetchTimeoutError(f"Timed out fetching {url}", url=url)
        try:
            return send(remaining)
        except requests.Timeout as exc:
            logger.warning("Timed out fetching %s: %s", url, exc, extra={"event": "fetch.timeout", "url": url})
            raise FetchTimeoutError(f"Timed out fetching {url}", url=url) from exc
        except requests.RequestException as exc:
            logger.warning("Failed to download %s: %s", url, exc, extra={"event": "fetch.network_error", "url": url})
            raise NetworkError(f"Failed to download {url}: {exc}", url=url) from exc

    def _arm_watchdog(self, response: requests.Response, deadline: _Deadline) -> threading.Timer:
        watchdog = threading.Timer(deadline.remaining(), self._abort, args=(response, deadline))
        watchdog.daemon = True
        watchdog.start()
        return watchdog

    @staticmethod
    def _abort(response: requests.Response, deadline: _Deadline) -> None:
        deadline.expired.set()
        sock = _response_socket(response)
        if sock is None:
            return
        try:
            # Shutdown, unlike close, wakes a recv blocked in the reading thread.
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            logger.debug("Connection already closed when deadline expired", extra={"event": "fetch.abort"})

    def _read_body(self, response: requests.Response, url: str, deadline: _Deadline) -> bytes:
        limit = self._settings.max_body_bytes
        declared = _content_length(response)
        if declared is not None and declared > limit:
            raise ResponseTooLargeError(limit, url=url)

        body = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=self._settings.chunk_size):
                if deadline.passed():
                    raise FetchTimeoutError(f"Timed out reading {url}", url=url)
                body.extend(chunk)
                if len(body) > limit:
                    raise ResponseTooLargeError(limit, url=url)
        except requests.ConnectionError as exc:
            if deadline.passed() or _is_read_timeout(exc):
                raise FetchTimeoutError(f"Timed out reading {url}", url=url) from exc
            raise NetworkError(f"Connection lost reading {url}: {exc}", url=url) from exc
        except requests.RequestException as exc:
            if deadline.passed():
                raise FetchTimeoutError(f"Timed out reading {url}", url=url) from exc
            raise NetworkError(f"Failed to read body of {url}: {exc}", url=url) from exc

        # A watchdog shutdown can look like a clean end of stream.
        if deadline.expired.is_set():
            raise FetchTimeoutError(f"Timed out reading {url}", url=url)
        return bytes(body)

    def _decode(self, body: bytes, encoding: Optional[str], url: str) -> str:
        if not encoding:
            best = from_bytes(body).best()
            encoding = best.encoding if best is not None else FALLBACK_ENCODING
        try:
            return body.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            logger.warning(
                "Could not decode %s as %s",
                url,
                encoding,
                extra={"event": "fetch.decode_error", "url": url, "encoding": encoding},
            )
            raise DecodeError(f"Could not decode body of {url} as {encoding}: {exc}", url=url) from exc


__all__ = ["HTMLFetcher"]
