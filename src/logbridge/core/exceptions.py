"""
Custom exceptions for logbridge.

Forwarding itself raises nothing new; these cover setup mistakes only.
"""

from typing import Any, Dict, Optional


class LogBridgeException(Exception):
    """Base exception for logbridge."""

    def __init__(
        self,
        message: str,
        error_code: str = "internal_error",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(LogBridgeException):
    """Raised when settings or the config file cannot be loaded."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            message=message,
            error_code="configuration_error",
            details=details,
        )


class InvalidClientError(ConfigurationError):
    """Raised when an adapter is given an object without a usable log() method."""

    def __init__(self, client: Any) -> None:
        super().__init__(
            message=f"{type(client).__name__} does not provide a callable log(message, level, context)",
            details={"client_type": type(client).__name__},
        )
