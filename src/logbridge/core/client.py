"""
Ingestion client contract and a base class that attaches caller context.

Transport, batching and retries belong to concrete clients; this module only
shapes the outgoing record.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import structlog

from ..config import ClientSettings, ContextSettings, get_settings
from ..models.context import SystemContext, get_system_context
from .context import get_stack_context
from .levels import FrameworkLevel, LogLevel, to_log_level
from .metrics import MetricsCollector

logger = structlog.get_logger(__name__)


@runtime_checkable
class IngestionClient(Protocol):
    """Anything that accepts ``log(message, level, context)``."""

    def log(
        self,
        message: str,
        level: LogLevel = LogLevel.INFO,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        ...


class ContextualClient(ABC):
    """
    Base for ingestion clients.

    ``log()`` resolves the caller's location, merges the caller-supplied
    context over it and hands the finished record to ``submit()``. Extra
    context fields end up at the top level of the record.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        context_settings: Optional[ContextSettings] = None,
        system: Optional[SystemContext] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        if settings is None or context_settings is None:
            app_settings = get_settings()
            settings = settings or app_settings.client
            context_settings = context_settings or app_settings.context

        # Opaque to logbridge, read by subclasses
        self.batch_size = settings.batch_size
        self.batch_interval_ms = settings.batch_interval_ms

        self.include_stack_context = context_settings.enabled
        self.ignore_modules = tuple(context_settings.ignore_modules)
        if system is None:
            if context_settings.main_file:
                system = SystemContext.from_process(context_settings.main_file)
            else:
                system = get_system_context()
        self.system = system
        self.metrics = metrics

        logger.info(
            "Ingestion client initialized",
            client=type(self).__name__,
            batch_size=self.batch_size,
            batch_interval_ms=self.batch_interval_ms,
            stack_context=self.include_stack_context,
        )

    def log(
        self,
        message: str,
        level: FrameworkLevel = LogLevel.INFO,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build a record and submit it.

        Returns:
            The submitted record.
        """
        fields: Dict[str, Any] = {}

        if self.include_stack_context:
            stack_context = get_stack_context(
                self,
                system=self.system,
                ignore_modules=self.ignore_modules,
            )
            fields.update(stack_context)

            if self.metrics:
                self.metrics.record_stack_context("resolved" if stack_context else "unavailable")

        if context:
            fields.update(context)

        record = {
            "dt": datetime.now(timezone.utc).isoformat(),
            **fields,
            "level": to_log_level(level).value,
            "message": message,
        }

        self.submit(record)
        return record

    @abstractmethod
    def submit(self, record: Dict[str, Any]) -> None:
        """Queue or send a finished record."""

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.log(message, LogLevel.DEBUG, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.log(message, LogLevel.INFO, context)

    def warn(self, message: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.log(message, LogLevel.WARN, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.log(message, LogLevel.ERROR, context)
