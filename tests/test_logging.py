from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from tracker_insights.logging import JSONFormatter, log_extras, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="tracker_insights.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_log_extras_prefixes_keys() -> None:
    assert log_extras(entry_count=3) == {"insights_entry_count": 3}


def test_json_formatter_includes_prefixed_extras() -> None:
    record = _record("Built report", **log_extras(entry_count=3), unrelated="skip")
    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Built report"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "tracker_insights.test"
    assert payload["entry_count"] == 3
    assert "unrelated" not in payload


def test_json_formatter_includes_exception() -> None:
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in payload["exception"]


def test_setup_logging_json(restore_root_logger: logging.Logger) -> None:
    stream = io.StringIO()
    setup_logging("json", logging.INFO, stream=stream)
    logging.getLogger("tracker_insights.demo").info("hello", extra=log_extras(block_id="b1"))

    line = stream.getvalue().strip()
    assert json.loads(line)["block_id"] == "b1"
    assert len(restore_root_logger.handlers) == 1


def test_setup_logging_text(restore_root_logger: logging.Logger) -> None:
    stream = io.StringIO()
    setup_logging("text", "WARNING", stream=stream)
    logging.getLogger("tracker_insights.demo").info("hidden")
    logging.getLogger("tracker_insights.demo").warning("shown")

    output = stream.getvalue()
    assert "hidden" not in output
    assert "WARNING tracker_insights.demo: shown" in output
