"""Prometheus metrics for the extraction pipeline."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)


@dataclass
class ExtractionEvent:
    url: str
    status: str
    duration_seconds: float
    word_count: int = 0


class MetricsCollector:
    """Centralised metrics registry for article extraction."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self._registry = registry
        self._exporter_started = False

        self._extractions = Counter(
            "gocket_extractions_total",
            "Number of URLs processed, labelled by outcome",
            labelnames=("status",),
            registry=registry,
        )
        self._extraction_duration = Histogram(
            "gocket_extraction_duration_seconds",
            "Duration of fetch, parse and extraction in seconds",
            labelnames=("status",),
            buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60),
            registry=registry,
        )
        self._extracted_words = Histogram(
            "gocket_extracted_words",
            "Word count of successfully extracted articles",
            buckets=(0, 50, 200, 500, 1000, 2000, 5000, 10000),
            registry=registry,
        )

        self.last_extraction: Optional[ExtractionEvent] = None

    def enable_exporter(self, port: int) -> bool:
        """Start the Prometheus HTTP exporter once."""

        if self._exporter_started:
            return True
        start_http_server(port, registry=self._registry)
        self._exporter_started = True
        logger.info("Prometheus metrics exporter started", extra={"event": "metrics.started", "port": port})
        return True

    def record_extraction(self, url: str, *, status: str, duration_seconds: float, word_count: int = 0) -> None:
        self.last_extraction = ExtractionEvent(url, status, duration_seconds, word_count)
        self._extractions.labels(status=status).inc()
        self._extraction_duration.labels(status=status).observe(duration_seconds)
        if status == "success":
            self._extracted_words.observe(word_count)

    def reset(self) -> None:
        """Reset cached inspection state (primarily for tests)."""

        self.last_extraction = None


metrics = MetricsCollector()


def configure_metrics_from_env(default_port: Optional[int] = None) -> None:
    """Start the exporter on ``GOCKET_METRICS_PORT`` or ``default_port`` when either is set."""

    port_value = os.getenv("GOCKET_METRICS_PORT")
    if not port_value:
        if default_port:
            metrics.enable_exporter(default_port)
        return
    try:
        port = int(port_value)
    except ValueError:
        logger.warning(
            "Invalid GOCKET_METRICS_PORT value; expected integer",
            extra={"event": "metrics.invalid_port", "value": port_value},
        )
        return
    metrics.enable_exporter(port)


__all__ = ["configure_metrics_from_env", "ExtractionEvent", "metrics", "MetricsCollector"]
