"""Structured JSON logging with per-operation trace ids.

Every record is rendered as one JSON object carrying ``timestamp``, ``level``,
``message``, ``trace_id``, ``error_code`` and ``provider``; any other bound or
keyword fields land under ``context``. :func:`log_context` opens a trace for
one operation (a refresh generation, a boundary call) so all records emitted
while it is active, including those from the provider client, share its id.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger

from fxlive.core.logging.config import LogConfig

_TRACE_ID: ContextVar[str | None] = ContextVar("fxlive_trace_id", default=None)
_FIELDS: ContextVar[dict[str, Any]] = ContextVar("fxlive_log_fields", default={})

_TOP_LEVEL_FIELDS = ("trace_id", "error_code", "provider")


def _inject_context(record: dict[str, Any]) -> None:
    extra = record["extra"]
    for key, value in _FIELDS.get().items():
        if extra.get(key) is None:
            extra[key] = value
    if not extra.get("trace_id"):
        extra["trace_id"] = _TRACE_ID.get()


def render_record(record: dict[str, Any]) -> str:
    """Render a loguru record as a single JSON line (without newline)."""

    extra = record["extra"]
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
    }
    payload.update({key: extra.get(key) for key in _TOP_LEVEL_FIELDS})
    context = {key: value for key, value in extra.items() if key not in _TOP_LEVEL_FIELDS}
    if context:
        payload["context"] = context
    if record["exception"] is not None:
        payload["exception"] = str(record["exception"].value)
    return json.dumps(payload, default=str)


class JsonLineSink:
    """Loguru sink appending JSON lines to a file, or writing them to a stream.

    Without a path or stream, records go to whatever ``sys.stderr`` is when
    they are written.
    """

    def __init__(self, stream: IO[str] | None = None, path: str | Path | None = None) -> None:
        self._stream = stream
        self._path = Path(path) if path else None
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)

    def __call__(self, message: Any) -> None:
        line = render_record(message.record) + "\n"
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as file:
                file.write(line)
            return
        stream = self._stream or sys.stderr
        stream.write(line)
        stream.flush()


def configure_logging(level: str = "INFO", **kwargs: Any) -> LogConfig:
    """Replace all loguru handlers with JSON sinks built from a :class:`LogConfig`."""

    config = LogConfig(level=level, **kwargs)
    handlers: list[dict[str, Any]] = []
    if config.console_output:
        handlers.append({"sink": JsonLineSink(stream=config.console_stream), "level": config.level.upper()})
    if config.file_output and config.file_path:
        handlers.append({"sink": JsonLineSink(path=config.file_path), "level": config.level.upper()})
    logger.configure(handlers=handlers, patcher=_inject_context, extra=dict(config.extra))
    return config


def get_logger(name: str | None = None):
    """Return the logger, bound to ``name`` when given."""

    if name:
        return logger.bind(logger_name=name)
    return logger


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Open a trace for one operation and attach ``fields`` to its records.

    Yields the active trace id; a fresh one is generated unless given.
    """

    active_trace = trace_id or uuid4().hex
    fields_token = _FIELDS.set({**_FIELDS.get(), **fields})
    trace_token = _TRACE_ID.set(active_trace)
    try:
        yield active_trace
    finally:
        _TRACE_ID.reset(trace_token)
        _FIELDS.reset(fields_token)


def current_trace_id() -> str | None:
    """Return the trace id of the innermost open :func:`log_context`, if any."""

    return _TRACE_ID.get()


configure_logging()


__all__ = [
    "JsonLineSink",
    "configure_logging",
    "current_trace_id",
    "get_logger",
    "log_context",
    "logger",
    "render_record",
]
