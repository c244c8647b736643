"""
Writable stream adapter.

Translates finalized framework records into ``client.log()`` calls.
Success or failure of delivery is entirely up to the client.
"""

import json
import threading
from typing import Any, Dict, Mapping, Optional, Union

import structlog

from ..config import StreamSettings, get_settings
from ..core.client import IngestionClient
from ..core.exceptions import InvalidClientError
from ..core.levels import FrameworkLevel, parse_default_level, to_log_level
from ..core.metrics import MetricsCollector
from ..models.record import LogRecord

logger = structlog.get_logger(__name__)

# Set while a record is being handed to a client in this thread
_local = threading.local()


class IngestionStream:
    """
    File-like stream that forwards each record to an ingestion client.

    Accepts mappings as well as JSON lines, so it can be handed to anything
    that writes to a file object.
    """

    def __init__(
        self,
        client: IngestionClient,
        settings: Optional[StreamSettings] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        if not isinstance(client, IngestionClient) or not callable(getattr(client, "log", None)):
            raise InvalidClientError(client)

        settings = settings or get_settings().stream

        self.client = client
        self.metrics = metrics
        self.default_level = parse_default_level(settings.default_level)
        self.message_keys = tuple(settings.message_keys)
        self.level_keys = tuple(settings.level_keys)

        logger.info(
            "Ingestion stream initialized",
            client=type(client).__name__,
            default_level=self.default_level.value,
        )

    def write(self, record: Union[Mapping[str, Any], str, bytes]) -> None:
        """Forward one finalized record."""
        if isinstance(record, bytes):
            record = record.decode("utf-8", errors="replace")

        if isinstance(record, str):
            text = record.strip()
            # print() writes the line terminator separately
            if not text:
                return
            record = _parse_line(text)

        parsed = LogRecord.from_mapping(record, self.message_keys, self.level_keys)
        self.submit(parsed.message, parsed.level, parsed.fields)

    def submit(
        self,
        message: str,
        level: FrameworkLevel,
        fields: Optional[Dict[Any, Any]] = None,
    ) -> None:
        """Map the level and hand the record to the client."""
        if getattr(_local, "forwarding", False):
            return

        _local.forwarding = True
        try:
            mapped = to_log_level(level, default=self.default_level)
            self.client.log(message, mapped, dict(fields or {}))

            if self.metrics:
                self.metrics.record_forwarded(mapped.value)
        finally:
            _local.forwarding = False

    def flush(self) -> None:
        """Nothing is buffered here."""

    def writable(self) -> bool:
        return True


def _parse_line(text: str) -> Mapping[str, Any]:
    try:
        decoded = json.loads(text)
    except ValueError:
        return {"msg": text}
    if not isinstance(decoded, dict):
        return {"msg": text}
    return decoded
