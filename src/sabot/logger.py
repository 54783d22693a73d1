"""Event logger: merges context and call-site fields into one JSON line.

Quick Start:
    >>> from sabot import Context, Sabot, stderr_sink
    >>>
    >>> lgr = Sabot(stderr_sink(), max_len=999)
    >>> ctx = lgr.with_fields(Context.background(), "run_id", "123123123")
    >>> lgr.info(ctx, "starting", "workers", 4)
    # => {"workers":4,"run_id":"123123123","msg":"starting","level":"info","ts":"2024-01-03T10:30:45.123456789Z"}

Precedence on key collision, lowest to highest:
    call-site fields < context fields < msg/level/ts

Logging is best effort: emission never raises. Bad fields become
``logerror``/``keyvals`` diagnostics, a failed write is reported to
``alt_writer`` when one is set, and anything past that is dropped.
"""

from __future__ import annotations

import time
import traceback
from contextlib import suppress
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sabot.context import current, get_fields, with_fields
from sabot.fields import LOG_ERROR_KEY, dumps, new_fields, pairs, safe_repr, truncate

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sabot.context import Context
    from sabot.fields import Fields
    from sabot.sinks import Sink

MSG_KEY = "msg"
LEVEL_KEY = "level"
TS_KEY = "ts"
ERROR_KEY = "error"


@dataclass(frozen=True, slots=True)
class Sabot:
    """Structured JSON logger writing one event per line to ``writer``.

    Immutable after construction and safe to share across threads; the sink
    is responsible for serializing concurrent writes.

    Attributes:
        writer: Primary sink.
        alt_writer: Receives a diagnostic line when ``writer`` fails.
        max_len: Longest string value emitted; 0 disables truncation.
        enable_debug: Emit ``debug`` events.
        enable_trace: Emit ``trace`` events.
    """

    writer: Sink
    alt_writer: Sink | None = None
    max_len: int = 0
    enable_debug: bool = False
    enable_trace: bool = False

    def info(self, ctx: Context | None, msg: str, /, *kv: object, **kw: object) -> None:
        self.emit(ctx, "info", msg, pairs(kv, kw))

    def error(self, ctx: Context | None, msg: str, err: object, /, *kv: object, **kw: object) -> None:
        """Log at error level with a full rendering of ``err`` under ``error``."""
        self.emit(ctx, "error", msg, (*pairs(kv, kw), ERROR_KEY, render_error(err)))

    def debug(self, ctx: Context | None, msg: str, /, *kv: object, **kw: object) -> None:
        if not self.enable_debug:
            return
        self.emit(ctx, "debug", msg, pairs(kv, kw))

    def trace(self, ctx: Context | None, msg: str, /, *kv: object, **kw: object) -> None:
        if not self.enable_trace:
            return
        self.emit(ctx, "trace", msg, pairs(kv, kw))

    def with_fields(self, ctx: Context, /, *kv: object, **kw: object) -> Context:
        """Derive a context carrying additional fields."""
        return with_fields(ctx, *kv, **kw)

    def get_fields(self, ctx: Context) -> Fields:
        """Fields carried by ``ctx``."""
        return get_fields(ctx)

    def install(self) -> Sabot:
        """Make this logger the process-wide one (see ``sabot.singleton``)."""
        from sabot.singleton import install

        install(self)
        return self

    def emit(self, ctx: Context | None, level: str, msg: str, kv: Sequence[object]) -> None:
        """Merge, truncate, serialize and write one event. Never raises."""
        fields = new_fields(kv)
        fields.update(get_fields(current() if ctx is None else ctx))
        fields[MSG_KEY] = msg
        fields[LEVEL_KEY] = level
        fields[TS_KEY] = timestamp()
        truncate(fields, self.max_len)

        try:
            data = dumps(fields)
        except Exception as exc:
            data = dumps({
                LOG_ERROR_KEY: f"failed to marshal log message: {exc}",
                MSG_KEY: safe_repr(fields),
            })

        self._write(data + b"\n", fields)

    def _write(self, data: bytes, fields: Fields) -> None:
        try:
            self.writer.write(data)
        except Exception as exc:
            if self.alt_writer is None:
                return
            line = f"{LOG_ERROR_KEY}: failed to write: {exc!r} with fields {safe_repr(fields)}\n"
            with suppress(Exception):
                self.alt_writer.write(line.encode("utf-8", errors="replace"))


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def timestamp() -> str:
    """Current UTC time, RFC 3339 with nanoseconds."""
    secs, nanos = divmod(time.time_ns(), 1_000_000_000)
    return f"{datetime.fromtimestamp(secs, tz=UTC):%Y-%m-%dT%H:%M:%S}.{nanos:09d}Z"


def render_error(err: object) -> str:
    """Full rendering of an error: traceback and chained causes for exceptions."""
    if isinstance(err, BaseException):
        with suppress(Exception):
            return "".join(traceback.format_exception(err)).rstrip("\n")
    try:
        return str(err)
    except Exception:
        return safe_repr(err)
