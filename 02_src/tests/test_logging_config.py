"""Tests for logging configuration."""

import json
import logging
import sys

import pytest

from scripttrace.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after setup_logging()."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="scripttrace.session",
            level=logging.WARNING,
            pathname=__file__,
            lineno=10,
            msg="Failed to start trace session: %s",
            args=("unsupported",),
            exc_info=None,
        )
        record.__dict__.update(extra)
        return record

    def test_format_fields(self):
        """Test the JSON payload."""
        data = json.loads(JSONFormatter().format(self._record()))
        assert data["level"] == "WARNING"
        assert data["logger"] == "scripttrace.session"
        assert data["message"] == "Failed to start trace session: unsupported"
        assert data["line"] == 10
        assert "timestamp" in data

    def test_format_context(self):
        """Test that extra context is included."""
        data = json.loads(JSONFormatter().format(self._record(context={"targets": ["a:B.c"]})))
        assert data["context"] == {"targets": ["a:B.c"]}

    def test_format_exception(self):
        """Test that exception info is included."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = self._record(exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_writes_json_file(self, tmp_path, restore_root_logger):
        """Test that records land in the log file as JSON."""
        log_file = tmp_path / "logs" / "trace.log"
        setup_logging(log_level="debug", log_file=str(log_file))

        get_logger("scripttrace.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert any(entry["message"] == "hello" for entry in entries)
        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self, tmp_path, monkeypatch, restore_root_logger):
        """Test LOG_LEVEL environment variable."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        setup_logging(log_file=str(tmp_path / "trace.log"))
        assert logging.getLogger().level == logging.WARNING

    def test_console_quieter_than_file(self, tmp_path, monkeypatch, restore_root_logger):
        """Test that stderr only shows warnings while the file gets everything."""
        monkeypatch.delenv("LOG_CONSOLE_LEVEL", raising=False)
        setup_logging(log_level="DEBUG", log_file=str(tmp_path / "trace.log"))

        levels = {type(h).__name__: h.level for h in logging.getLogger().handlers}
        assert levels["StreamHandler"] == logging.WARNING
        assert levels["RotatingFileHandler"] == logging.NOTSET

    def test_console_level_from_env(self, tmp_path, monkeypatch, restore_root_logger):
        """Test LOG_CONSOLE_LEVEL environment variable."""
        monkeypatch.setenv("LOG_CONSOLE_LEVEL", "debug")
        setup_logging(log_file=str(tmp_path / "trace.log"))

        console = next(h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler)
        assert console.level == logging.DEBUG
