"""
logbridge - forward Python log records to a log-ingestion client

Adapters for stdlib logging and structlog that hand each finalized record to
an ingestion client, plus caller-location metadata resolved from the stack.
"""

__version__ = "0.1.0"

from .adapters import IngestionHandler, IngestionProcessor, IngestionStream
from .bootstrap import configure_logging
from .core.client import ContextualClient, IngestionClient
from .core.context import get_stack_context
from .core.levels import LogLevel, to_log_level

__all__ = [
    "ContextualClient",
    "IngestionClient",
    "IngestionHandler",
    "IngestionProcessor",
    "IngestionStream",
    "LogLevel",
    "configure_logging",
    "get_stack_context",
    "to_log_level",
]
