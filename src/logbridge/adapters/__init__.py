"""
Bindings between Python logging frameworks and an ingestion client.

- IngestionStream: file-like writable stream (mappings or JSON lines)
- IngestionHandler: stdlib logging.Handler
- IngestionProcessor: structlog processor
"""

from .handler import IngestionHandler
from .processor import IngestionProcessor
from .stream import IngestionStream

__all__ = ["IngestionHandler", "IngestionProcessor", "IngestionStream"]
