"""Tests for logging setup."""

import io
import json
import logging
from pathlib import Path

import pytest

from core.logging.setup import (
    NOISY_LOGGERS,
    get_log_file_path,
    parse_log_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestParseLogLevel:

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            ("WARN", logging.WARNING),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_known_names(self, name, expected):
        assert parse_log_level(name) == expected

    def test_default_when_empty(self):
        assert parse_log_level(None) == logging.INFO
        assert parse_log_level("") == logging.INFO

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            parse_log_level("VERBOSE")


class TestSetupLogging:

    def test_console_writes_to_given_stream(self):
        stream = io.StringIO()
        setup_logging("INFO", stream=stream)

        logging.getLogger("soracom_mcp.test").info("hello")

        assert "hello" in stream.getvalue()

    def test_level_filters_debug(self):
        stream = io.StringIO()
        setup_logging("WARN", stream=stream)

        logging.getLogger("soracom_mcp.test").info("quiet")

        assert "quiet" not in stream.getvalue()

    def test_suppresses_noisy_loggers(self):
        setup_logging("DEBUG", stream=io.StringIO())
        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_file_handler_writes_json(self, tmp_path: Path):
        setup_logging("INFO", log_dir=tmp_path, stream=io.StringIO())

        logging.getLogger("soracom_mcp.test").info("to file", extra={"coverage": "jp"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        files = list(tmp_path.rglob("*.log"))
        assert len(files) == 1
        entry = json.loads(files[0].read_text().strip().splitlines()[-1])
        assert entry["message"] == "to file"
        assert entry["coverage"] == "jp"


class TestLogFilePath:

    def test_path_layout(self, tmp_path: Path):
        path = get_log_file_path(tmp_path, "soracom-mcp")
        assert path.parent.parent == tmp_path
        assert path.name.startswith("soracom-mcp_")
        assert path.suffix == ".log"
