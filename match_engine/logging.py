"""Logging setup for match-engine runs.

Engine code attaches match context (anchor id, pair ids, counters) to log
records with :func:`log_fields`. Both formatters render that context: the
standard one as trailing ``key=value`` pairs, the JSON one as top-level keys.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

FIELDS_ATTR = "match_fields"

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
STANDARD_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Store, sink and generator libraries only log at WARNING and above
QUIET_LOGGERS = ("confluent_kafka", "psycopg", "faker")


def log_fields(**fields: Any) -> dict[str, Any]:
    """Build the ``extra`` mapping that carries match context on a record.

    Example
    -------
    >>> logger.info("Recalculated %s", anchor, extra=log_fields(anchor_id=anchor))
    """
    return {FIELDS_ATTR: fields}


def _record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, FIELDS_ATTR, None) or {}


class KeyValueFormatter(logging.Formatter):
    """Human-readable lines with match context appended as ``key=value``."""

    def __init__(self) -> None:
        super().__init__(fmt=STANDARD_FORMAT, datefmt=STANDARD_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _record_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        head, sep, tail = line.partition("\n")
        return f"{head} | {pairs}{sep}{tail}"


class JsonFormatter(logging.Formatter):
    """One JSON object per record; match context keys sit beside the core keys."""

    CORE_KEYS = ("timestamp", "level", "logger", "message")

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            key: value
            for key, value in _record_fields(record).items()
            if key not in self.CORE_KEYS
        }
        payload.update(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> None:
    """Route all match-engine logging to a single stream handler.

    Parameters
    ----------
    level : str
        Level name; unknown names fall back to INFO.
    format_type : str
        "json" for :class:`JsonFormatter`, anything else for
        :class:`KeyValueFormatter`.
    stream : TextIO, optional
        Destination stream, stdout when omitted.
    """
    log_level = _resolve_level(level)
    formatter: logging.Formatter = JsonFormatter() if format_type == "json" else KeyValueFormatter()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    logging.getLogger("match_engine").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
