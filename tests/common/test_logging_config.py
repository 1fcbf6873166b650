"""
Tests for the logging configuration helpers.
"""

import json
import logging
import logging.handlers

import pytest

from tempnet.common.logging_config import (
    ROOT_LOGGER_NAME,
    ENV_LOG_LEVEL,
    ENV_LOG_CONSOLE,
    JSONFormatter,
    LoggingTimer,
    get_logger,
    setup_logging,
    log_performance_metric
)


class TestSetupLogging:
    """Test configuration of the tempnet root logger."""

    def test_returns_root_logger(self):
        logger = setup_logging(level="DEBUG", force_setup=True)
        assert logger.name == ROOT_LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_console_handler_installed(self):
        logger = setup_logging(console=True, force_setup=True)
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_no_file_handler_by_default(self, monkeypatch):
        monkeypatch.delenv("TEMPNET_LOG_FILE", raising=False)
        monkeypatch.delenv("TEMPNET_LOG_DIR", raising=False)
        logger = setup_logging(force_setup=True)
        assert not any(
            isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers
        )

    def test_log_dir_creates_file(self, tmp_path):
        log_dir = tmp_path / "logs"
        logger = setup_logging(log_dir=str(log_dir), console=False, force_setup=True)
        get_logger("tempnet.timeseries").info("written to file")
        for handler in logger.handlers:
            handler.flush()

        content = (log_dir / "tempnet.log").read_text(encoding="utf-8")
        assert "written to file" in content

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            setup_logging(level="LOUD", force_setup=True)

    def test_existing_configuration_kept(self):
        first = setup_logging(level="WARNING", force_setup=True)
        handlers = list(first.handlers)
        second = setup_logging(level="DEBUG")
        assert second.handlers == handlers
        assert second.level == logging.WARNING

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "ERROR")
        monkeypatch.setenv(ENV_LOG_CONSOLE, "false")
        logger = setup_logging(force_setup=True)
        assert logger.level == logging.ERROR
        assert logger.handlers == []

    def test_parameters_override_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_LOG_LEVEL, "ERROR")
        logger = setup_logging(level="INFO", force_setup=True)
        assert logger.level == logging.INFO


class TestJSONFormatter:
    """Test structured log output."""

    def test_record_fields(self):
        record = logging.LogRecord(
            name="tempnet.analysis", level=logging.INFO, pathname=__file__,
            lineno=10, msg="computed %d nodes", args=(4,), exc_info=None
        )
        record.duration = 0.5
        payload = json.loads(JSONFormatter().format(record))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "tempnet.analysis"
        assert payload["message"] == "computed 4 nodes"
        assert payload["duration"] == 0.5


class TestPerformanceLogging:
    """Test timing helpers."""

    def test_timer_records_duration(self):
        with LoggingTimer("extract_two_paths", {"time_steps": 3}) as timer:
            pass
        assert timer.duration is not None
        assert timer.duration >= 0

    def test_performance_metric_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="tempnet.performance"):
            log_performance_metric("shuffle_edges", 1.25, {"pairs": 10})
        assert "shuffle_edges completed in 1.250s" in caplog.text
        assert "pairs=10" in caplog.text
