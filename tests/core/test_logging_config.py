"""
Tests for structured logging configuration.
"""
import json
import logging

from reflector.core.logging_config import JSONFormatter, request_id_context


def make_record(level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="reflector.test",
        level=level,
        pathname="/app/reflector/test.py",
        lineno=42,
        msg="Unlocked badge '%s'",
        args=("streak_7",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSON log entries."""

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "reflector.test"
        assert entry["message"] == "Unlocked badge 'streak_7'"
        assert "timestamp" in entry
        assert "source" not in entry

    def test_structured_extra_fields(self):
        record = make_record(user_id="user-1", badge_id="streak_7", unrelated="x")
        entry = json.loads(JSONFormatter().format(record))

        assert entry["user_id"] == "user-1"
        assert entry["badge_id"] == "streak_7"
        assert "unrelated" not in entry

    def test_error_includes_source(self):
        entry = json.loads(JSONFormatter().format(make_record(level=logging.ERROR)))
        assert entry["source"] == "/app/reflector/test.py:42"

    def test_request_id_from_context(self):
        token = request_id_context.set("req-123")
        try:
            entry = json.loads(JSONFormatter().format(make_record()))
        finally:
            request_id_context.reset(token)

        assert entry["request_id"] == "req-123"
