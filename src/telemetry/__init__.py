"""Logging and metrics helpers shared by the API, CLI and pipeline."""

from .logging import StructuredFormatter, configure_logging
from .metrics import MetricsCollector, configure_metrics_from_env, metrics

__all__ = [
    "MetricsCollector",
    "StructuredFormatter",
    "configure_logging",
    "configure_metrics_from_env",
    "metrics",
]
