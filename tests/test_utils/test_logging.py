"""Tests for logging utilities."""

import json
import logging
import logging.handlers

import pytest

from spanfmt.config.settings import Settings
from spanfmt.utils.logging import (
    PACKAGE_LOGGER,
    TRACE_LEVEL,
    JSONFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Restore the package logger after each test."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    original_handlers = list(package_logger.handlers)
    yield package_logger
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        if handler not in original_handlers:
            handler.close()
    for handler in original_handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(logging.NOTSET)


def make_record(msg="test message", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="spanfmt.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestTraceLevel:
    """Test TRACE level functionality."""

    def test_trace_level_name(self):
        """Test TRACE level name is registered."""
        assert TRACE_LEVEL == 5
        assert logging.getLevelName(TRACE_LEVEL) == "TRACE"

    def test_trace_method_logging(self, caplog):
        """Test trace method logs correctly."""
        logger = get_logger("spanfmt.test.trace")

        with caplog.at_level(TRACE_LEVEL, logger="spanfmt.test.trace"):
            logger.trace("Test trace message")  # type: ignore[attr-defined]

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == TRACE_LEVEL

    def test_trace_method_disabled_by_level(self, caplog):
        """Test trace method respects log level."""
        logger = get_logger("spanfmt.test.trace")

        with caplog.at_level(logging.DEBUG, logger="spanfmt.test.trace"):
            logger.trace("Test trace message")  # type: ignore[attr-defined]

        assert len(caplog.records) == 0


class TestJSONFormatter:
    """Test JSONFormatter class."""

    def test_basic_fields(self):
        """Test the standard fields of a record."""
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "spanfmt.test"
        assert entry["message"] == "test message"
        assert entry["line"] == 10
        assert "timestamp" in entry
        assert "context" not in entry

    def test_extra_fields_become_context(self):
        """Test fields passed through extra are collected."""
        record = make_record(breakdown={"hours": 1, "minutes": 23})
        entry = json.loads(JSONFormatter().format(record))

        assert entry["context"] == {"breakdown": {"hours": 1, "minutes": 23}}

    def test_non_ascii_preserved(self):
        """Test unit suffixes survive serialization."""
        entry = json.loads(JSONFormatter().format(make_record("rendered 5μs")))
        assert entry["message"] == "rendered 5μs"

    def test_exception_info(self):
        """Test exception details are included."""
        try:
            raise ValueError("boom")
        except ValueError:
            import sys

            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert entry["exception"]["type"] == "ValueError"
        assert entry["exception"]["message"] == "boom"
        assert "Traceback" in entry["exception"]["traceback"]

    def test_exception_info_excluded(self):
        """Test tracebacks can be disabled."""
        try:
            raise ValueError("boom")
        except ValueError:
            import sys

            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter(include_traceback=False).format(record))
        assert "exception" not in entry


class TestSetupLogging:
    """Test setup_logging function."""

    def test_no_outputs_installs_null_handler(self):
        """Test the package logger is silent by default."""
        package_logger = setup_logging()

        assert package_logger.name == PACKAGE_LOGGER
        assert len(package_logger.handlers) == 1
        assert isinstance(package_logger.handlers[0], logging.NullHandler)

    def test_file_logging_writes_json(self, tmp_path):
        """Test records are written as JSON lines to the log file."""
        log_dir = tmp_path / "logs"
        setup_logging(log_level="DEBUG", log_dir=log_dir)

        get_logger("spanfmt.test").debug("hello", extra={"unit": "ms"})

        lines = (log_dir / "spanfmt.log").read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[-1])
        assert entry["message"] == "hello"
        assert entry["context"] == {"unit": "ms"}

    def test_file_logging_plain_text(self, tmp_path):
        """Test the plain text file format."""
        setup_logging(log_level="INFO", log_dir=tmp_path, json_format=False)

        get_logger("spanfmt.test").info("plain message")

        content = (tmp_path / "spanfmt.log").read_text(encoding="utf-8")
        assert "spanfmt.test - INFO - plain message" in content

    def test_rotation_settings(self, tmp_path):
        """Test the rotating handler receives size limits."""
        package_logger = setup_logging(
            log_dir=tmp_path, max_file_size=1024, backup_count=2
        )

        handler = package_logger.handlers[0]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.maxBytes == 1024
        assert handler.backupCount == 2

    def test_console_output(self):
        """Test a console handler is added on request."""
        package_logger = setup_logging(console_output=True)

        assert any(
            type(handler) is logging.StreamHandler
            for handler in package_logger.handlers
        )

    def test_trace_level(self):
        """Test the TRACE level name is understood."""
        assert setup_logging(log_level="trace").level == TRACE_LEVEL

    def test_unknown_level_falls_back_to_info(self):
        """Test unknown level names fall back to INFO."""
        assert setup_logging(log_level="chatty").level == logging.INFO

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        """Test calling setup twice does not duplicate handlers."""
        setup_logging(log_dir=tmp_path)
        package_logger = setup_logging(log_dir=tmp_path)

        assert len(package_logger.handlers) == 1

    def test_root_logger_untouched(self):
        """Test the root logger keeps its handlers."""
        root_handlers = list(logging.getLogger().handlers)
        setup_logging(console_output=True)
        assert logging.getLogger().handlers == root_handlers

    def test_setup_from_settings(self, tmp_path):
        """Test configuration from Settings."""
        settings = Settings(log_level="DEBUG", log_dir=tmp_path, log_file="x.log")
        package_logger = setup_logging_from_settings(settings)

        assert package_logger.level == logging.DEBUG
        handler = package_logger.handlers[0]
        assert isinstance(handler, logging.handlers.RotatingFileHandler)
        assert handler.baseFilename == str(tmp_path / "x.log")
