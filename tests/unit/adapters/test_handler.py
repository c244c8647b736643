"""
Tests for the stdlib IngestionHandler.
"""

import logging
from unittest.mock import Mock

import pytest

from logbridge.adapters.handler import IngestionHandler
from logbridge.config import StreamSettings
from logbridge.core.levels import LogLevel


@pytest.fixture
def client() -> Mock:
    return Mock(spec=["log"])


@pytest.fixture
def app_logger(clean_logging: logging.Logger, client: Mock) -> logging.Logger:
    clean_logging.addHandler(IngestionHandler(client, settings=StreamSettings()))
    clean_logging.setLevel(logging.DEBUG)
    return clean_logging


class TestIngestionHandler:
    """Test record translation in emit()."""

    @pytest.mark.parametrize(
        "method, expected",
        [
            ("debug", LogLevel.DEBUG),
            ("info", LogLevel.INFO),
            ("warning", LogLevel.WARN),
            ("error", LogLevel.ERROR),
            ("critical", LogLevel.ERROR),
        ],
    )
    def test_levels(self, app_logger: logging.Logger, client: Mock, method: str, expected: LogLevel) -> None:
        """Test each logger method reaches the client at the mapped level."""
        getattr(app_logger, method)("Something to do with something")
        client.log.assert_called_once_with("Something to do with something", expected, {})

    def test_custom_numeric_level(self, app_logger: logging.Logger, client: Mock) -> None:
        """Test numeric levels between thresholds map downwards."""
        app_logger.log(35, "between warning and error")
        client.log.assert_called_once_with("between warning and error", LogLevel.WARN, {})

    def test_extra_fields(self, app_logger: logging.Logger, client: Mock) -> None:
        """Test extra= fields arrive unchanged at the top level."""
        app_logger.info("i am the message", extra={"foo": "bar", "some": {"nested": "stuff"}})
        client.log.assert_called_once_with(
            "i am the message",
            LogLevel.INFO,
            {"foo": "bar", "some": {"nested": "stuff"}},
        )

    def test_message_arguments_formatted(self, app_logger: logging.Logger, client: Mock) -> None:
        """Test %-style arguments are merged into the message."""
        app_logger.info("user %s logged in", "ada")
        assert client.log.call_args.args[0] == "user ada logged in"

    def test_formatter_used_when_set(self, clean_logging: logging.Logger, client: Mock) -> None:
        """Test a configured formatter shapes the message."""
        handler = IngestionHandler(client, settings=StreamSettings())
        handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
        clean_logging.addHandler(handler)
        clean_logging.warning("formatted")
        assert client.log.call_args.args[0] == "[tests.app] formatted"

    def test_exception_info(self, app_logger: logging.Logger, client: Mock) -> None:
        """Test exception tracebacks are forwarded as a field."""
        try:
            raise ValueError("bad value")
        except ValueError:
            app_logger.exception("failed")

        message, level, fields = client.log.call_args.args
        assert message == "failed"
        assert level is LogLevel.ERROR
        assert "ValueError: bad value" in fields["exception"]

    def test_formatter_renders_exception_once(self, clean_logging: logging.Logger, client: Mock) -> None:
        """Test a formatter keeps the traceback in the message and no exception field is added."""
        handler = IngestionHandler(client, settings=StreamSettings())
        handler.setFormatter(logging.Formatter("%(message)s"))
        clean_logging.addHandler(handler)
        try:
            raise ValueError("bad value")
        except ValueError:
            clean_logging.exception("failed")

        message, level, fields = client.log.call_args.args
        assert message.startswith("failed\n")
        assert "ValueError: bad value" in message
        assert "exception" not in fields

    def test_handler_level_filters(self, clean_logging: logging.Logger, client: Mock) -> None:
        """Test records below the handler level are not forwarded."""
        clean_logging.addHandler(IngestionHandler(client, level=logging.WARNING, settings=StreamSettings()))
        clean_logging.setLevel(logging.DEBUG)
        clean_logging.info("dropped")
        clean_logging.warning("kept")
        client.log.assert_called_once_with("kept", LogLevel.WARN, {})

    def test_client_failure_handled(self, app_logger: logging.Logger, client: Mock, monkeypatch) -> None:
        """Test client errors go to handleError instead of the caller."""
        client.log.side_effect = RuntimeError("down")
        handled = []
        handler = app_logger.handlers[0]
        monkeypatch.setattr(handler, "handleError", lambda record: handled.append(record))

        app_logger.error("still fine")
        assert len(handled) == 1

    def test_extra_fields_helper(self) -> None:
        """Test standard LogRecord attributes are not treated as extras."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", (), None)
        record.request_id = "abc"
        assert IngestionHandler.extra_fields(record) == {"request_id": "abc"}
