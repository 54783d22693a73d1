"""Python logging handler adapter for sabot.

Routes stdlib ``logging`` records through a ``Sabot`` so third-party
libraries end up in the same JSON stream, with the ambient context's fields.

Example:
    >>> import logging
    >>> from sabot import Sabot, SabotHandler, stderr_sink
    >>>
    >>> logging.getLogger().addHandler(SabotHandler(Sabot(stderr_sink())))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sabot.logger import ERROR_KEY, render_error

if TYPE_CHECKING:
    from sabot.logger import Sabot

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class SabotHandler(logging.Handler):
    """Logging handler that emits records through a ``Sabot``.

    Level mapping: below DEBUG is trace, DEBUG is debug, INFO and WARNING are
    info, ERROR and above are error. Debug and trace still honor the logger's
    enablement flags.
    """

    def __init__(self, sabot: Sabot, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._sabot = sabot

    def emit(self, record: logging.LogRecord) -> None:
        level = _level_tag(record.levelno)
        if level == "debug" and not self._sabot.enable_debug:
            return
        if level == "trace" and not self._sabot.enable_trace:
            return

        kv: list[object] = ["logger", record.name]
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and not key.startswith("_"):
                kv.extend((key, value))

        if record.exc_info and record.exc_info[1] is not None:
            kv.extend((ERROR_KEY, render_error(record.exc_info[1])))

        try:
            msg = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        self._sabot.emit(None, level, msg, kv)


def _level_tag(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "error"
    if levelno > logging.DEBUG:
        return "info"
    if levelno == logging.DEBUG:
        return "debug"
    return "trace"
