"""
One-call setup wiring both stdlib logging and structlog to an ingestion client.
"""

import logging
from typing import Optional

import structlog

from .adapters import IngestionHandler, IngestionProcessor
from .config import Settings, get_settings
from .core.client import IngestionClient
from .core.metrics import MetricsCollector


def configure_logging(
    client: IngestionClient,
    settings: Optional[Settings] = None,
    metrics: Optional[MetricsCollector] = None,
    logger: Optional[logging.Logger] = None,
) -> IngestionHandler:
    """
    Forward stdlib and structlog output to ``client``.

    Args:
        client: Ingestion client receiving every record
        settings: Settings to use instead of the cached ones
        metrics: Optional metrics collector
        logger: stdlib logger to attach to (root logger by default)

    Returns:
        The installed handler, so callers can remove it again.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper())

    # stdlib logging
    handler = IngestionHandler(client, level=level, settings=settings.stream, metrics=metrics)
    target = logger if logger is not None else logging.getLogger()
    target.addHandler(handler)
    target.setLevel(level)

    # structlog
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            IngestionProcessor(client, settings=settings.stream, metrics=metrics),
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

    structlog.get_logger(__name__).info(
        "Log forwarding configured",
        client=type(client).__name__,
        log_level=settings.log_level,
    )
    return handler
