"""
Prometheus metrics collection.

In-memory counters; Prometheus handles storage.
"""

from typing import Optional

import structlog
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Info

from .. import __version__

logger = structlog.get_logger(__name__)


class MetricsCollector:
    """
    Centralized metrics collection for logbridge.

    Pass a dedicated registry to keep several collectors apart (tests).
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        registry = registry if registry is not None else REGISTRY

        # Service info
        self.service_info = Info(
            "logbridge_service",
            "logbridge information",
            registry=registry,
        )
        self.service_info.info({
            "version": __version__,
            "service": "logbridge",
        })

        # Forwarding metrics
        self.records_forwarded_total = Counter(
            "logbridge_records_forwarded_total",
            "Total log records handed to the ingestion client",
            ["level"],
            registry=registry,
        )

        # Caller context metrics
        self.stack_context_total = Counter(
            "logbridge_stack_context_total",
            "Caller context resolutions by outcome",
            ["outcome"],
            registry=registry,
        )

    def record_forwarded(self, level: str) -> None:
        """Record a forwarded log record."""
        self.records_forwarded_total.labels(level=level).inc()

    def record_stack_context(self, outcome: str) -> None:
        """Record a caller context resolution (resolved or unavailable)."""
        self.stack_context_total.labels(outcome=outcome).inc()


# Global collector instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create global metrics collector."""
    global _metrics

    if _metrics is None:
        _metrics = MetricsCollector()
        logger.debug("Metrics collector created")

    return _metrics
