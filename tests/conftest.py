"""
Pytest configuration and shared fixtures.

Contains a recording ingestion client and settings isolation for all test modules.
"""

import logging
import os
from typing import Any, Dict, Generator, List

import pytest
import structlog
from prometheus_client import CollectorRegistry

from logbridge.config import ClientSettings, ContextSettings, StreamSettings, get_settings, reload_settings
from logbridge.core.client import ContextualClient
from logbridge.core.metrics import MetricsCollector
from logbridge.models.context import SystemContext


class RecordingClient(ContextualClient):
    """Client that batches records in memory instead of sending them."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.pending: List[Dict[str, Any]] = []
        self.batches: List[List[Dict[str, Any]]] = []

    def submit(self, record: Dict[str, Any]) -> None:
        self.pending.append(record)
        if len(self.pending) >= self.batch_size:
            self.sync()

    def sync(self) -> None:
        if self.pending:
            self.batches.append(self.pending)
            self.pending = []

    @property
    def records(self) -> List[Dict[str, Any]]:
        return [record for batch in self.batches for record in batch] + self.pending


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop LOGBRIDGE_* env vars and the settings cache around each test."""
    for key in list(os.environ):
        if key.startswith("LOGBRIDGE_"):
            monkeypatch.delenv(key, raising=False)
    reload_settings()
    yield
    # Values copied from a config file into os.environ
    for key in list(os.environ):
        if key.startswith("LOGBRIDGE_"):
            os.environ.pop(key, None)
    get_settings.cache_clear()


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry, avoids duplicate metric names across tests."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> MetricsCollector:
    """Metrics collector on the test registry."""
    return MetricsCollector(registry=registry)


@pytest.fixture
def stream_settings() -> StreamSettings:
    return StreamSettings()


@pytest.fixture
def system_context() -> SystemContext:
    """System context anchored at this directory."""
    return SystemContext(pid=4242, main_file=os.path.abspath(__file__))


def make_client(batch_size: int = 1, main_file: str = "", **kwargs: Any) -> RecordingClient:
    """RecordingClient with explicit settings, anchored at ``main_file``."""
    system = kwargs.pop("system", None)
    if system is None:
        system = SystemContext.from_process(main_file or None)
    return RecordingClient(
        settings=ClientSettings(batch_size=batch_size, batch_interval_ms=1),
        context_settings=kwargs.pop("context_settings", ContextSettings()),
        system=system,
        **kwargs,
    )


@pytest.fixture
def recording_client() -> RecordingClient:
    return make_client()


@pytest.fixture
def clean_logging() -> Generator[logging.Logger, None, None]:
    """A dedicated stdlib logger, emptied and reset after the test."""
    test_logger = logging.getLogger("tests.app")
    test_logger.propagate = False
    yield test_logger
    for handler in list(test_logger.handlers):
        test_logger.removeHandler(handler)
    test_logger.setLevel(logging.NOTSET)
    test_logger.propagate = True
    structlog.reset_defaults()
