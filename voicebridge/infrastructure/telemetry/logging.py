"""Structured logging for voicebridge.

Log lines carry three correlation ids pulled from context variables:
`request_id` (one HTTP request), `session_id` (one /ws/live connection) and
`turn_id` (one listening turn inside a session). Fields passed through
`extra=` are appended to the line as-is.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
session_id_var: ContextVar[str | None] = ContextVar("session_id", default=None)
turn_id_var: ContextVar[str | None] = ContextVar("turn_id", default=None)

# (field name, variable, short label used by the text format)
_CORRELATION = (
    ("request_id", request_id_var, "req"),
    ("session_id", session_id_var, "session"),
    ("turn_id", turn_id_var, "turn"),
)

_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}

# Third-party loggers that are chatty at INFO
_QUIET_LOGGERS = ("asyncio", "httpx", "httpcore", "uvicorn.access", "websockets")


def set_request_context(
    request_id: str | None = None,
    session_id: str | None = None,
    turn_id: str | None = None,
) -> None:
    """Bind correlation ids for the current context. `None` leaves a field untouched."""
    values = {"request_id": request_id, "session_id": session_id, "turn_id": turn_id}
    for field_name, var, _ in _CORRELATION:
        if values[field_name] is not None:
            var.set(values[field_name])


def clear_request_context() -> None:
    for _, var, _ in _CORRELATION:
        var.set(None)


def correlation_ids() -> dict[str, str]:
    """Correlation ids currently bound, by field name."""
    return {name: value for name, var, _ in _CORRELATION if (value := var.get())}


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, UTC)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": _timestamp(record).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            **correlation_ids(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        entry.update(
            (key, value) for key, value in _extra_fields(record).items() if value is not None
        )
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Single-line human format for local development."""

    def format(self, record: logging.LogRecord) -> str:
        ids = correlation_ids()
        tags = [f"{label}={ids[name][:8]}" for name, _, label in _CORRELATION if name in ids]

        line = "{ts} | {level:8} | {name}{tags} | {msg}".format(
            ts=_timestamp(record).strftime("%Y-%m-%d %H:%M:%S"),
            level=record.levelname,
            name=record.name,
            tags=f" [{', '.join(tags)}]" if tags else "",
            msg=record.getMessage(),
        )

        extra = _extra_fields(record)
        if extra:
            line += " | " + " ".join(f"{key}={value}" for key, value in extra.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """Adapter whose bound fields are merged under each call's `extra`."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **(kwargs.get("extra") or {})}
        return msg, kwargs


def configure_logging(level: str = "INFO", format_type: str = "json") -> None:
    """Install one stdout handler on the root logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        format_type: 'json' or 'text'
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if format_type == "json" else TextFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """Logger for `name` that adds `extra` to every record."""
    return ContextLogger(logging.getLogger(name), extra)
