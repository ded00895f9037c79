"""Tests for logging configuration."""

import json
import logging

from users_api.infrastructure.telemetry.logging import (
    StructuredFormatter,
    TextFormatter,
    clear_request_context,
    get_logger,
    request_id_var,
    set_request_context,
    user_id_var,
)


def _record(msg: str = "Test message", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test StructuredFormatter class."""

    def test_formats_as_json(self):
        """Test that logs are formatted as JSON."""
        parsed = json.loads(StructuredFormatter(service_name="users-api").format(_record()))

        assert parsed["level"] == "info"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "test"
        assert parsed["service"] == "users-api"
        assert "ts" in parsed

    def test_includes_context_variables(self):
        """Test that context variables are included."""
        set_request_context(request_id="req_123", user_id="user_456")
        try:
            parsed = json.loads(StructuredFormatter().format(_record()))
        finally:
            clear_request_context()

        assert parsed["request_id"] == "req_123"
        assert parsed["user_id"] == "user_456"

    def test_includes_extra_fields(self):
        """Test that extra fields passed via logger extra= are included."""
        parsed = json.loads(StructuredFormatter().format(_record(error_code="CONFLICT")))

        assert parsed["error_code"] == "CONFLICT"
        assert "args" not in parsed

    def test_omits_missing_context(self):
        parsed = json.loads(StructuredFormatter().format(_record()))

        assert "request_id" not in parsed
        assert "service" not in parsed


class TestTextFormatter:
    """Test TextFormatter class."""

    def test_includes_context_and_extras(self):
        set_request_context(request_id="abcdefgh1234")
        try:
            line = TextFormatter().format(_record(user_id="u-1"))
        finally:
            clear_request_context()

        assert "INFO" in line
        assert "req=abcdefgh" in line
        assert "user_id=u-1" in line


class TestRequestContext:
    """Test context helpers."""

    def test_clear_resets_all(self):
        set_request_context(request_id="r", user_id="u")
        clear_request_context()

        assert request_id_var.get() is None
        assert user_id_var.get() is None


class TestContextLogger:
    """Test get_logger adapter."""

    def test_bound_extra_is_merged(self, caplog):
        logger = get_logger("users_api.test", component="tests")

        with caplog.at_level(logging.INFO, logger="users_api.test"):
            logger.info("hello", extra={"user_id": "u-1"})

        record = caplog.records[-1]
        assert record.component == "tests"
        assert record.user_id == "u-1"
