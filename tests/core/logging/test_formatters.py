"""Tests for JSON and console log formatters."""

import json
import logging
import sys

import pytest

from core.logging.context import clear_log_context, set_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter


def _make_record(
    msg="test message",
    level=logging.INFO,
    name="test.logger",
    exc_info=None,
    **extras,
):
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extras.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def clear_context():
    clear_log_context()
    yield
    clear_log_context()


class TestJSONFormatter:

    def test_formats_basic_json_with_required_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["level"] == "INFO"
        assert output["logger"] == "test.logger"
        assert output["message"] == "test message"
        assert output["ts"].endswith("Z")

    def test_includes_invocation_context(self):
        set_log_context(tool_name="Sim_getSim", request_id="abc123", coverage="jp")
        output = json.loads(JSONFormatter().format(_make_record()))

        assert output["tool_name"] == "Sim_getSim"
        assert output["request_id"] == "abc123"
        assert output["coverage"] == "jp"

    def test_omits_empty_context_fields(self):
        output = json.loads(JSONFormatter().format(_make_record()))

        assert "tool_name" not in output
        assert "request_id" not in output
        assert "coverage" not in output

    def test_extra_field_overrides_context(self):
        set_log_context(coverage="jp")
        output = json.loads(JSONFormatter().format(_make_record(coverage="g")))

        assert output["coverage"] == "g"

    def test_file_location_only_for_debug_and_error(self):
        formatter = JSONFormatter()
        assert "file" in json.loads(formatter.format(_make_record(level=logging.DEBUG)))
        assert "file" in json.loads(formatter.format(_make_record(level=logging.ERROR)))
        assert "file" not in json.loads(formatter.format(_make_record(level=logging.INFO)))

    def test_extracts_extra_fields(self):
        record = _make_record(
            api_method="GET",
            api_endpoint="/sims",
            http_status=200,
            duration_ms=12.5,
            operator_id="OP0123456789",
        )
        output = json.loads(JSONFormatter().format(record))

        assert output["api_method"] == "GET"
        assert output["api_endpoint"] == "/sims"
        assert output["http_status"] == 200
        assert output["duration_ms"] == 12.5
        assert output["operator_id"] == "OP0123456789"

    def test_ignores_unknown_extras(self):
        output = json.loads(JSONFormatter().format(_make_record(auth_key="S1")))
        assert "auth_key" not in output

    def test_coerces_numeric_fields(self):
        output = json.loads(JSONFormatter().format(_make_record(http_status="401", count="3")))

        assert output["http_status"] == 401
        assert output["count"] == 3

    def test_unconvertible_numeric_becomes_null(self):
        output = json.loads(JSONFormatter().format(_make_record(duration_ms="fast")))
        assert output["duration_ms"] is None

    def test_redacts_sensitive_query_params(self):
        record = _make_record(http_url="https://api.soracom.io/v1/sims?token=abc&limit=10")
        output = json.loads(JSONFormatter().format(record))

        assert "abc" not in output["http_url"]
        assert "token=[REDACTED]" in output["http_url"]
        assert "limit=10" in output["http_url"]

    def test_includes_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _make_record(level=logging.ERROR, exc_info=sys.exc_info())

        output = json.loads(JSONFormatter().format(record))

        assert output["exception"]["type"] == "ValueError"
        assert output["exception"]["message"] == "boom"
        assert "Traceback" in output["exception"]["stacktrace"]


class TestConsoleFormatter:

    @pytest.fixture
    def formatter(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = False
        return formatter

    def test_plain_message(self, formatter):
        output = formatter.format(_make_record())
        assert output.endswith("INFO - test message")

    def test_prefix_includes_tool_and_coverage(self, formatter):
        set_log_context(tool_name="Sim_listSims", coverage="g")
        output = formatter.format(_make_record())

        assert "[Sim_listSims]" in output
        assert "[g]" in output

    def test_tags_include_request_id_and_status(self, formatter):
        set_log_context(request_id="0123456789ab")
        output = formatter.format(_make_record(http_status=401))

        assert "[01234567]" in output
        assert "[http:401]" in output

    def test_colors_level_when_enabled(self):
        formatter = ConsoleFormatter()
        formatter._use_colors = True
        output = formatter.format(_make_record(level=logging.ERROR))

        assert "\033[31mERROR\033[0m" in output
