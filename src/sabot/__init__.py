"""Sabot - context-propagated structured JSON logging.

Fields accumulate on an immutable ``Context`` as it flows down a call chain;
each log call merges them with its own fields and writes one JSON object per
line.

Quick Start:
    >>> from sabot import Context, Sabot, stderr_sink
    >>>
    >>> lgr = Sabot(stderr_sink(), max_len=999)
    >>> ctx = lgr.with_fields(Context.background(), "request_id", "r-42")
    >>> lgr.info(ctx, "request received", path="/users")
    >>> try:
    ...     1 / 0
    ... except ZeroDivisionError as exc:
    ...     lgr.error(ctx, "request failed", exc)

Configuration from the environment (SABOT_MAX_LEN, SABOT_ENABLE_DEBUG, ...):
    >>> from sabot.config import get_settings
    >>> lgr = get_settings().new()
"""

from __future__ import annotations

__version__ = "0.3.0"

from .context import LOG_KEY, Context, LogKey, current, get_fields, use_context, with_fields
from .errors import FieldError, SabotError, SingletonAlreadySetError, SingletonUndefinedError
from .fields import (
    KEYVALS_KEY,
    LOG_ERROR_KEY,
    TRUNCATION_MARKER,
    Fields,
    FieldValue,
    new_fields,
    normalize,
    truncate,
)
from .handler import SabotHandler
from .logger import ERROR_KEY, LEVEL_KEY, MSG_KEY, TS_KEY, Sabot, render_error, timestamp
from .singleton import get_singleton, install, reset_singleton
from .sinks import MemorySink, NullSink, Sink, StreamSink, stderr_sink

__all__ = [
    # Context
    "Context",
    "LOG_KEY",
    "LogKey",
    "current",
    "get_fields",
    "use_context",
    "with_fields",
    # Fields
    "Fields",
    "FieldValue",
    "KEYVALS_KEY",
    "LOG_ERROR_KEY",
    "TRUNCATION_MARKER",
    "new_fields",
    "normalize",
    "truncate",
    # Logger
    "ERROR_KEY",
    "LEVEL_KEY",
    "MSG_KEY",
    "TS_KEY",
    "Sabot",
    "render_error",
    "timestamp",
    # Sinks
    "MemorySink",
    "NullSink",
    "Sink",
    "StreamSink",
    "stderr_sink",
    # Integration
    "SabotHandler",
    # Singleton
    "get_singleton",
    "install",
    "reset_singleton",
    # Errors
    "FieldError",
    "SabotError",
    "SingletonAlreadySetError",
    "SingletonUndefinedError",
]
