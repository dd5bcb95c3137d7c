"""
Tests for basecore log formatters.
"""

import json
import logging

from basecore.logging import ConsoleFormatter, JSONFormatter


def make_record(**extra):
    record = logging.LogRecord(
        name="messaging_inapp.cache",
        level=logging.ERROR,
        pathname=__file__,
        lineno=10,
        msg="Failed to store %s",
        args=("messages",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context():
    output = json.loads(JSONFormatter().format(make_record(provider="push", key="push_inAppMessages")))

    assert output["level"] == "ERROR"
    assert output["logger"] == "messaging_inapp.cache"
    assert output["message"] == "Failed to store messages"
    assert output["provider"] == "push"
    assert output["key"] == "push_inAppMessages"
    assert "stream" not in output


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        import sys

        record = make_record()
        record.exc_info = sys.exc_info()

    output = json.loads(JSONFormatter().format(record))

    assert "ValueError: boom" in output["exception"]


def test_console_formatter():
    line = ConsoleFormatter().format(make_record(provider="push"))

    assert "ERROR" in line
    assert "[provider=push]" in line
    assert line.endswith("- Failed to store messages")
