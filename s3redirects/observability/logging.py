"""
Structured Logging for Redirect Runs

Every line a run emits carries the run's identity (run_id, bucket,
prefix) without each call site passing it along:

    log = StructuredLogger("s3redirects.run")
    with log.context(run_id="3f2a9c", bucket="docs-bucket", prefix="pr-1"):
        log.info("Processed 50.0%: docs/index.html", processed=1, total=2)

Two output shapes:
- JSON lines for CI log collection (default)
- "time | LEVEL | logger | message key=value ..." for terminals
"""

from __future__ import annotations

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Optional, TextIO


class LogLevel(IntEnum):
    """CLI-selectable log levels."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name!r}") from None


# Fields bound by StructuredLogger.context(), visible to every formatter
_run_fields: ContextVar[dict[str, Any]] = ContextVar("s3redirects_run_fields", default={})

# Attributes every logging.LogRecord has; anything else came in via extra=
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "taskName",
}

# Libraries that log every request at INFO/DEBUG
_CHATTY_LOGGERS = ("botocore", "aiobotocore", "aioboto3", "urllib3", "httpx", "httpcore", "asyncio")


def _fields(record: logging.LogRecord) -> dict[str, Any]:
    """Run fields first, then per-call extras (which win on conflict)."""
    fields = dict(_run_fields.get())
    fields.update(
        (key, value)
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    )
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "@timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_fields(record))
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable line with fields appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        head, newline, tail = line.partition("\n")
        return f"{head} {pairs}{newline}{tail}"


class StructuredLogger:
    """
    Thin wrapper over a stdlib logger that takes fields as keyword
    arguments instead of an extra= dict.

    Field names must not collide with LogRecord attributes
    (name, created, module, ...); logging raises KeyError if they do.
    """

    __slots__ = ("_logger",)

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, message: str, **fields: Any) -> None:
        self._logger.debug(message, extra=fields)

    def info(self, message: str, **fields: Any) -> None:
        self._logger.info(message, extra=fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._logger.warning(message, extra=fields)

    def error(self, message: str, **fields: Any) -> None:
        self._logger.error(message, extra=fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._logger.error(message, exc_info=True, extra=fields)

    @staticmethod
    def context(**fields: Any) -> _RunContext:
        """Bind fields to every record logged inside the with-block."""
        return _RunContext(fields)


class _RunContext:
    __slots__ = ("_fields", "_token")

    def __init__(self, fields: dict[str, Any]) -> None:
        self._fields = fields
        self._token = None

    def __enter__(self) -> _RunContext:
        self._token = _run_fields.set({**_run_fields.get(), **self._fields})
        return self

    def __exit__(self, *exc: Any) -> None:
        if self._token is not None:
            _run_fields.reset(self._token)
            self._token = None


def setup_logging(
    level: LogLevel = LogLevel.INFO,
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Install a single root handler.

    Args:
        level: Minimum level for s3redirects records.
        json_output: JSON lines when True, console lines otherwise.
        stream: Destination (default: stderr, so stdout stays free for
            --dry-run output).
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else ConsoleFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.value)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level.value, logging.WARNING))
