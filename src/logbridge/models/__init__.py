"""
Pydantic data models package.

Contains the data shapes passed between adapters and clients:
- Framework log records as handed to the stream adapter
- Caller and process context attached to outgoing records
"""

from .context import CallerContext, SystemContext, get_system_context
from .record import LogRecord

__all__ = [
    # Record models
    "LogRecord",

    # Context models
    "CallerContext",
    "SystemContext",
    "get_system_context",
]
