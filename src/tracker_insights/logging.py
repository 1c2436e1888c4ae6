"""Structured logging for the insights engine and its CLI.

Controlled via INSIGHTS_LOG_FORMAT env var: "json" (default) or "text".
Structured fields travel as ``insights_*`` record extras; build them with
``log_extras`` so the prefix stays consistent.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, TextIO

EXTRA_PREFIX = "insights_"


def log_extras(**fields: Any) -> dict[str, Any]:
    """Prefix structured fields for ``logger.info(..., extra=...)``."""
    return {f"{EXTRA_PREFIX}{key}": value for key, value in fields.items()}


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
        }

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        for key, value in record.__dict__.items():
            if key.startswith(EXTRA_PREFIX):
                log_entry[key[len(EXTRA_PREFIX):]] = value

        return json.dumps(log_entry, default=str)


def setup_logging(
    log_format: str,
    level: int | str = logging.INFO,
    *,
    stream: TextIO | None = None,
) -> None:
    """Configure root logger with either JSON or plaintext format on stderr."""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicate output
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root.addHandler(handler)
