"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- All LoggerProtocol methods (debug, info, warning, error, critical)
- Exception flattening on error/critical
- Context binding
- Renderer and level configuration

Architecture:
- Unit tests with mocked structlog
- NO real logging output
"""

import logging
from unittest.mock import MagicMock, patch

import pytest

from src.infrastructure.logging.console_adapter import ConsoleAdapter

STRUCTLOG = "src.infrastructure.logging.console_adapter.structlog"


@pytest.fixture
def mock_structlog():
    with patch(STRUCTLOG) as mock_structlog:
        mock_structlog.get_logger.return_value = MagicMock()
        yield mock_structlog


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_level_methods_forward_context(self, mock_structlog, level):
        """Test each level forwards the event and its structured context."""
        adapter = ConsoleAdapter()

        getattr(adapter, level)("route_completed", route="Item", duration_ms=12)

        getattr(mock_structlog.get_logger.return_value, level).assert_called_once_with(
            "route_completed", route="Item", duration_ms=12
        )

    def test_logs_with_no_context(self, mock_structlog):
        """Test logging with no additional context."""
        ConsoleAdapter().info("facade_started")

        mock_structlog.get_logger.return_value.info.assert_called_once_with("facade_started")

    def test_error_flattens_exception(self, mock_structlog):
        """Test error() turns an exception into type and message fields."""
        ConsoleAdapter().error("store_failed", error=TimeoutError("read timed out"), route="Feed")

        mock_structlog.get_logger.return_value.error.assert_called_once_with(
            "store_failed",
            route="Feed",
            error_type="TimeoutError",
            error_message="read timed out",
        )

    def test_critical_flattens_exception(self, mock_structlog):
        """Test critical() flattens exceptions like error()."""
        ConsoleAdapter().critical("startup_failed", error=ValueError("bad routes"))

        mock_structlog.get_logger.return_value.critical.assert_called_once_with(
            "startup_failed",
            error_type="ValueError",
            error_message="bad routes",
        )

    def test_error_without_exception(self, mock_structlog):
        """Test error() without an exception adds no error fields."""
        ConsoleAdapter().error("usage_storage_unavailable", backend="redis")

        mock_structlog.get_logger.return_value.error.assert_called_once_with(
            "usage_storage_unavailable", backend="redis"
        )


@pytest.mark.unit
class TestConsoleAdapterContextBinding:
    """Test ConsoleAdapter.bind()."""

    def test_bind_returns_new_adapter_with_bound_logger(self, mock_structlog):
        """Test bind() wraps the bound structlog logger in a new adapter."""
        mock_logger = mock_structlog.get_logger.return_value
        mock_bound_logger = MagicMock()
        mock_logger.bind.return_value = mock_bound_logger

        adapter = ConsoleAdapter()
        bound_adapter = adapter.bind(trace_id="trace-789")
        bound_adapter.info("First message")
        bound_adapter.info("Second message")

        mock_logger.bind.assert_called_once_with(trace_id="trace-789")
        assert bound_adapter is not adapter
        assert mock_bound_logger.info.call_count == 2
        mock_logger.info.assert_not_called()


@pytest.mark.unit
class TestConsoleAdapterConfiguration:
    """Test structlog configuration."""

    def test_json_renderer_outside_development(self, mock_structlog):
        """Test use_json selects the JSON renderer."""
        ConsoleAdapter(use_json=True)

        processors = mock_structlog.configure.call_args.kwargs["processors"]
        assert processors[-1] is mock_structlog.processors.JSONRenderer.return_value
        mock_structlog.dev.ConsoleRenderer.assert_not_called()

    def test_console_renderer_in_development(self, mock_structlog):
        """Test the default selects the colored console renderer."""
        ConsoleAdapter()

        processors = mock_structlog.configure.call_args.kwargs["processors"]
        assert processors[-1] is mock_structlog.dev.ConsoleRenderer.return_value
        assert processors[0] is mock_structlog.contextvars.merge_contextvars

    @pytest.mark.parametrize(
        ("log_level", "expected"),
        [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("LOUD", logging.INFO)],
    )
    def test_log_level_filtering(self, mock_structlog, log_level, expected):
        """Test the level name maps to the filtering bound logger."""
        ConsoleAdapter(log_level=log_level)

        mock_structlog.make_filtering_bound_logger.assert_called_once_with(expected)
