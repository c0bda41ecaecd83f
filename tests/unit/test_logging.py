"""Tests for the graphrun.logging module."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest
import structlog

from graphrun.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_logging_default(self) -> None:
        """Test default logging configuration (console output)."""
        configure_logging()

        root_logger = logging.getLogger()
        assert root_logger.level == logging.INFO

    def test_configure_logging_json_via_env(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test JSON lines on stderr when GRAPHRUN_LOG_FORMAT=json."""
        with patch.dict(os.environ, {"GRAPHRUN_LOG_FORMAT": "json"}):
            configure_logging()

        get_logger("graphrun.test").warning("json line", node="fetch")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert '"event": "json line"' in captured.err
        assert '"node": "fetch"' in captured.err

    def test_configure_logging_custom_level(self) -> None:
        """Test setting custom log level."""
        configure_logging(level=logging.DEBUG)

        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG

    def test_configure_logging_level_from_env(self) -> None:
        """Test log level from GRAPHRUN_LOG_LEVEL env var."""
        with patch.dict(os.environ, {"GRAPHRUN_LOG_LEVEL": "ERROR"}):
            configure_logging()

            root_logger = logging.getLogger()
            assert root_logger.level == logging.ERROR

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging()
        configure_logging(force_json=True)

        assert len(logging.getLogger().handlers) == 1


class TestLogOutput:
    """Tests for messages reaching the stdlib logging tree."""

    def test_structured_fields_are_rendered(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        log = get_logger("graphrun.test")
        log.warning("node failed", node="fetch_user")

        assert "node failed" in caplog.text
        assert "fetch_user" in caplog.text

    def test_level_filtering(self, caplog: pytest.LogCaptureFixture) -> None:
        log = get_logger("graphrun.test")
        log.debug("hidden trace")
        log.log(logging.INFO, "hidden info")
        log.log(logging.ERROR, "visible error")

        assert "hidden" not in caplog.text
        assert "visible error" in caplog.text


class TestContextBinding:
    """Tests for context binding functions."""

    def test_bind_context(self) -> None:
        clear_context()
        bind_context(run_id="abc123", node="start")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx == {"run_id": "abc123", "node": "start"}

    def test_clear_context(self) -> None:
        bind_context(run_id="abc123")
        clear_context()

        assert structlog.contextvars.get_contextvars() == {}

    def test_context_propagation_in_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        bind_context(run_id="abc123")

        get_logger("graphrun.test").warning("with context")

        assert "abc123" in caplog.text
