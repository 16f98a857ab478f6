"""Tests for structured logging helpers and formatters."""

import json
import logging
import sys

import pytest

from relay.logging import (
    HumanReadableFormatter,
    StructuredJSONFormatter,
    clear_log_context,
    get_log_context,
    set_log_context,
)


@pytest.fixture(autouse=True)
def reset_log_context():
    clear_log_context()
    yield
    clear_log_context()


def make_record(msg="hello", level=logging.INFO, exc_info=None):
    return logging.LogRecord(
        name="relay",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_set_log_context_merges_fields():
    set_log_context(connection_id="abcd1234")
    set_log_context(client="127.0.0.1:5000")

    assert get_log_context() == {
        "connection_id": "abcd1234",
        "client": "127.0.0.1:5000",
    }


def test_clear_log_context():
    set_log_context(connection_id="abcd1234")
    clear_log_context()

    assert get_log_context() == {}


def test_json_formatter_includes_context():
    set_log_context(connection_id="abcd1234", client="127.0.0.1:5000")

    data = json.loads(StructuredJSONFormatter().format(make_record()))

    assert data["message"] == "hello"
    assert data["level"] == "INFO"
    assert data["connection_id"] == "abcd1234"
    assert data["client"] == "127.0.0.1:5000"
    assert "environment" in data


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad frame")
    except ValueError:
        record = make_record(level=logging.ERROR, exc_info=sys.exc_info())

    data = json.loads(StructuredJSONFormatter().format(record))

    assert "ValueError: bad frame" in data["exception"]


def test_json_formatter_truncates_long_messages(monkeypatch):
    monkeypatch.setattr("relay.logging.LOKI_MAX_LOG_SIZE_BYTES", 2000)

    data = json.loads(StructuredJSONFormatter().format(make_record("x" * 5000)))

    assert data["message"].endswith("... [TRUNCATED]")
    assert len(data["message"]) < 5000


def test_human_readable_formatter_uses_connection_id():
    set_log_context(connection_id="abcd1234")

    line = HumanReadableFormatter().format(make_record())

    assert "[abcd1234]" in line
    assert line.endswith("INFO: hello")


def test_human_readable_formatter_outside_connection():
    line = HumanReadableFormatter().format(make_record(level=logging.WARNING))

    assert "[-]" in line
    assert "WARNING" in line
