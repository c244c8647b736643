"""
Severity mapping between Python logging levels and the ingestion client's levels.

The client has four tiers; CRITICAL/fatal collapses onto ERROR.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

import structlog

logger = structlog.get_logger(__name__)


class LogLevel(str, Enum):
    """Severity levels understood by the ingestion client."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


# Level names emitted by stdlib logging and structlog method names
LEVEL_NAMES: Dict[str, LogLevel] = {
    "trace": LogLevel.DEBUG,
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "error": LogLevel.ERROR,
    "exception": LogLevel.ERROR,
    "critical": LogLevel.ERROR,
    "fatal": LogLevel.ERROR,
}

# Highest threshold first; anything below INFO is DEBUG
LEVEL_THRESHOLDS: List[Tuple[int, LogLevel]] = [
    (logging.ERROR, LogLevel.ERROR),
    (logging.WARNING, LogLevel.WARN),
    (logging.INFO, LogLevel.INFO),
]

FrameworkLevel = Union[LogLevel, int, float, str, None]


def level_from_number(levelno: Union[int, float]) -> LogLevel:
    """Map a numeric level to the nearest defined level at or below it."""
    for threshold, level in LEVEL_THRESHOLDS:
        if levelno >= threshold:
            return level
    return LogLevel.DEBUG


def to_log_level(level: FrameworkLevel, default: LogLevel = LogLevel.INFO) -> LogLevel:
    """
    Map a framework level (name or number) to a client LogLevel.

    Args:
        level: stdlib level number, level name, structlog method name or LogLevel
        default: Level used when the record carries no level at all

    Returns:
        The mapped LogLevel. Unrecognized values fall back to DEBUG.
    """
    if level is None:
        return default

    if isinstance(level, LogLevel):
        return level

    if isinstance(level, (int, float)) and not isinstance(level, bool):
        return level_from_number(level)

    if isinstance(level, str):
        name = level.strip().lower()
        if name in LEVEL_NAMES:
            return LEVEL_NAMES[name]

        if name.lstrip("-").isdigit():
            try:
                return level_from_number(int(name))
            except ValueError:
                # "--5", "²" or past the int digit limit
                pass

        # Custom levels registered through logging.addLevelName()
        registered: Any = logging.getLevelName(name.upper())
        if isinstance(registered, int):
            return level_from_number(registered)

    logger.debug("Unrecognized log level, using lowest tier", level=repr(level))
    return LogLevel.DEBUG


def parse_default_level(name: Optional[str]) -> LogLevel:
    """Resolve a configured default level name."""
    return to_log_level(name, default=LogLevel.INFO)
