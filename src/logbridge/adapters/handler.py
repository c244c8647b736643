"""
stdlib logging handler that forwards records to an ingestion client.
"""

import logging
from typing import Any, Dict, Optional

from ..config import StreamSettings
from ..core.client import IngestionClient
from ..core.metrics import MetricsCollector
from .stream import IngestionStream

# Attributes every LogRecord carries; anything else came in through extra=
RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_exception_formatter = logging.Formatter()


class IngestionHandler(logging.Handler):
    """
    Handler that forwards each record to an ingestion client.

    Extra fields passed through ``extra=`` are forwarded unchanged at the top
    level of the outgoing record.

    Usage:
        handler = IngestionHandler(client)
        logging.getLogger().addHandler(handler)
    """

    def __init__(
        self,
        client: IngestionClient,
        level: int = logging.NOTSET,
        settings: Optional[StreamSettings] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        super().__init__(level)
        self.stream = IngestionStream(client, settings=settings, metrics=metrics)

    @property
    def client(self) -> IngestionClient:
        return self.stream.client

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self.formatter is not None:
                message = self.format(record)
            else:
                message = record.getMessage()

            fields = self.extra_fields(record)
            # A formatter already renders the traceback into the message
            if record.exc_info and self.formatter is None:
                fields["exception"] = _exception_formatter.formatException(record.exc_info)

            self.stream.submit(message, record.levelno, fields)
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    @staticmethod
    def extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
        """Fields set on the record beyond the standard LogRecord attributes."""
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in RESERVED_ATTRS
        }
