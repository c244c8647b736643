"""
structlog processor that forwards event dicts to an ingestion client.
"""

from typing import Any, Optional

from structlog.typing import EventDict, WrappedLogger

from ..config import StreamSettings
from ..core.client import IngestionClient
from ..core.metrics import MetricsCollector
from .stream import IngestionStream


class IngestionProcessor:
    """
    Forward every event to an ingestion client and pass it on unchanged.

    Place it before the renderer:

        structlog.configure(processors=[
            structlog.processors.add_log_level,
            IngestionProcessor(client),
            structlog.dev.ConsoleRenderer(),
        ])
    """

    def __init__(
        self,
        client: IngestionClient,
        settings: Optional[StreamSettings] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self.stream = IngestionStream(client, settings=settings, metrics=metrics)

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        fields = dict(event_dict)
        message: Any = fields.pop("event", "")
        level = fields.pop("level", method_name)

        self.stream.submit("" if message is None else str(message), level, fields)
        return event_dict
