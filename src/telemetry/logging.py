"""Structured logging configuration utilities."""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}

_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON documents.

    Every line carries ``event`` (``"log"`` when the call site gave none) and,
    for per-page records, the ``url`` being extracted. Remaining ``extra``
    values are grouped under ``fields``. Exceptions add ``error_type`` next to
    the formatted traceback.
    """

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_FIELDS and not key.startswith("_")
        }
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": extras.pop("event", "log"),
            "message": record.getMessage(),
        }
        if "url" in extras:
            payload["url"] = extras.pop("url")
        if extras:
            payload["fields"] = extras

        if record.exc_info and record.exc_info[0] is not None:
            payload["error_type"] = record.exc_info[0].__name__
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info

        return json.dumps(payload, ensure_ascii=False, default=str)


def _resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Configure root logging.

    Explicit arguments win over ``GOCKET_LOG_LEVEL`` / ``GOCKET_LOG_FORMAT``.
    ``fmt`` is ``plain`` (default) or ``json``.
    """

    level_value = _resolve_level(level or os.getenv("GOCKET_LOG_LEVEL", "INFO"))
    fmt_value = (fmt or os.getenv("GOCKET_LOG_FORMAT", "plain")).lower()

    handler = logging.StreamHandler()
    if fmt_value in {"json", "structured"}:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    root_logger.handlers = [handler]

    if level_value > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["configure_logging", "StructuredFormatter"]
