"""
Configuration management.

Uses Pydantic Settings for environment variable handling and validation,
with an optional YAML file providing defaults.
"""

import json
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ConfigurationError


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        # Look for a config file in common locations
        possible_paths = [
            "logbridge.yaml",
            "config.yaml",
        ]

        for path in possible_paths:
            if os.path.exists(path):
                config_path = path
                break
        else:
            return {}

    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            try:
                config_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Invalid YAML in {config_path}",
                    details={"path": config_path, "error": str(e)},
                ) from e
            if not isinstance(config_data, dict):
                raise ConfigurationError(
                    f"Top level of {config_path} must be a mapping",
                    details={"path": config_path},
                )
            return config_data
    return {}


class ContextSettings(BaseSettings):
    """Caller-context resolution configuration."""

    enabled: bool = Field(default=True, description="Attach caller location metadata to records")
    main_file: Optional[str] = Field(
        default=None,
        description="Entry file used as the relative-path anchor (defaults to __main__.__file__)",
    )
    ignore_modules: List[str] = Field(
        default_factory=list,
        description="Extra module prefixes treated as logging machinery when scanning the stack",
    )

    model_config = SettingsConfigDict(env_prefix="LOGBRIDGE_CONTEXT_")


class StreamSettings(BaseSettings):
    """Stream adapter configuration."""

    default_level: str = Field(default="info", description="Level used when a record carries none")
    message_keys: List[str] = Field(
        default=["msg", "message", "event"],
        description="Record keys searched, in order, for the message",
    )
    level_keys: List[str] = Field(
        default=["level", "levelname"],
        description="Record keys searched, in order, for the severity",
    )

    @field_validator("message_keys", "level_keys")
    def validate_keys(cls, v: List[str]) -> List[str]:
        """At least one key is required."""
        if not v:
            raise ValueError("At least one key must be configured")
        return v

    model_config = SettingsConfigDict(env_prefix="LOGBRIDGE_STREAM_")


class ClientSettings(BaseSettings):
    """
    Ingestion client configuration.

    Passed through to client implementations; batching itself is the
    client's concern.
    """

    batch_size: int = Field(default=1000, ge=1, description="Maximum records per batch")
    batch_interval_ms: int = Field(default=1000, ge=0, description="Maximum batch wait in milliseconds")

    model_config = SettingsConfigDict(env_prefix="LOGBRIDGE_CLIENT_")


class Settings(BaseSettings):
    """Main settings."""

    log_level: str = Field(default="INFO", description="Level for the installed handler and structlog")

    # Component settings
    context: ContextSettings = Field(default_factory=ContextSettings)
    stream: StreamSettings = Field(default_factory=StreamSettings)
    client: ClientSettings = Field(default_factory=ClientSettings)

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Only stdlib level names are accepted."""
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="LOGBRIDGE_", case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance with config file and env support."""

    # Load config file data
    config_data = load_config_file()

    # Config file provides defaults, env vars override
    if config_data:
        _set_env_from_config(config_data)

    return Settings()


def _set_env_from_config(config_data: Dict[str, Any]) -> None:
    """Set environment variables from config file if not already set."""
    mappings = {
        ("logging", "level"): "LOGBRIDGE_LOG_LEVEL",
        ("context", "enabled"): "LOGBRIDGE_CONTEXT_ENABLED",
        ("context", "main_file"): "LOGBRIDGE_CONTEXT_MAIN_FILE",
        ("stream", "default_level"): "LOGBRIDGE_STREAM_DEFAULT_LEVEL",
        ("client", "batch_size"): "LOGBRIDGE_CLIENT_BATCH_SIZE",
        ("client", "batch_interval_ms"): "LOGBRIDGE_CLIENT_BATCH_INTERVAL_MS",
    }

    for (section, key), env_var in mappings.items():
        if env_var not in os.environ:
            value = (config_data.get(section) or {}).get(key)
            if value is not None:
                os.environ[env_var] = str(value)

    # List values are passed as JSON strings
    list_mappings = {
        ("context", "ignore_modules"): "LOGBRIDGE_CONTEXT_IGNORE_MODULES",
        ("stream", "message_keys"): "LOGBRIDGE_STREAM_MESSAGE_KEYS",
        ("stream", "level_keys"): "LOGBRIDGE_STREAM_LEVEL_KEYS",
    }

    for (section, key), env_var in list_mappings.items():
        if env_var not in os.environ:
            value = (config_data.get(section) or {}).get(key)
            if value:
                os.environ[env_var] = json.dumps(value)


def reload_settings() -> Settings:
    """Reload settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
