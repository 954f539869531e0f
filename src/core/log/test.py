"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import get_logger, resolve_level, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "form-builder"

    @pytest.mark.unit
    def test_setup_logging_writes_to_stream(self) -> None:
        """Configured stream receives formatted records."""
        stream = StringIO()
        setup_logging(level=logging.DEBUG, stream=stream)
        get_logger("test_setup").debug("schema saved")

        output = stream.getvalue()
        assert "test_setup" in output
        assert "DEBUG" in output
        assert "schema saved" in output

    @pytest.mark.unit
    def test_setup_logging_accepts_level_name(self) -> None:
        """Level names are accepted as well as numbers."""
        stream = StringIO()
        setup_logging(level="warning", stream=stream)
        get_logger("test_names").info("hidden")
        get_logger("test_names").warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "shown" in output

    @pytest.mark.unit
    def test_http_client_quiet_unless_debug(self) -> None:
        """httpx request lines only show at DEBUG."""
        setup_logging(level=logging.INFO, stream=StringIO())
        assert logging.getLogger("httpx").level == logging.WARNING

        setup_logging(level=logging.DEBUG, stream=StringIO())
        assert logging.getLogger("httpx").level == logging.DEBUG


class TestResolveLevel:
    """Tests for level name resolution."""

    @pytest.mark.unit
    def test_numeric_passthrough(self) -> None:
        """Numeric levels are returned unchanged."""
        assert resolve_level(logging.ERROR) == logging.ERROR

    @pytest.mark.unit
    def test_name_case_insensitive(self) -> None:
        """Names resolve regardless of case."""
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Warning ") == logging.WARNING

    @pytest.mark.unit
    def test_unknown_name_defaults_to_info(self) -> None:
        """Unknown names fall back to INFO."""
        assert resolve_level("chatty") == logging.INFO
