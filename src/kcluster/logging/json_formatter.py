"""Simple JSON formatter for Python's standard logging.

Emits one JSON object per record so clustering runs can be
collected by log aggregators.
"""

from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class JSONFormatter(logging.Formatter):
    """JSON formatter for standard Python logging."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_location: bool = False,
        extra_fields: Optional[Dict[str, Any]] = None,
    ):
        """Initialize JSON formatter.

        Args:
            include_timestamp: Include timestamp in logs
            include_location: Include file/line information
            extra_fields: Extra fields to include in all logs
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log line
        """
        log_entry: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(record.created).isoformat()

        if self.include_location:
            log_entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS:
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        log_entry.update(self.extra_fields)

        return json.dumps(log_entry, default=str)
