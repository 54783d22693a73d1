"""Output sinks: anything that accepts a byte string.

A sink signals failure by raising. ``io.BytesIO`` and binary files already
satisfy the protocol; ``StreamSink`` adapts text streams such as stderr.
"""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass, field
from typing import IO, Protocol, runtime_checkable

import orjson


@runtime_checkable
class Sink(Protocol):
    """Protocol for log output destinations."""

    def write(self, data: bytes) -> object: ...


class StreamSink:
    """Writes to a text or binary stream, one whole line per lock hold."""

    __slots__ = ("_stream", "_lock", "_text")

    def __init__(self, stream: IO[str] | IO[bytes]) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self._text = not _is_binary(stream)

    def write(self, data: bytes) -> int:
        with self._lock:
            if self._text:
                self._stream.write(data.decode("utf-8", errors="replace"))  # type: ignore[arg-type]
            else:
                self._stream.write(data)  # type: ignore[arg-type]
            self._stream.flush()
        return len(data)


@dataclass(slots=True)
class MemorySink:
    """Keeps written lines in memory. Handy for tests and inspection."""

    lines: list[bytes] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def write(self, data: bytes) -> int:
        with self._lock:
            self.lines.extend(line for line in data.splitlines() if line)
        return len(data)

    def records(self) -> list[dict[str, object]]:
        """Decode each line as a JSON object."""
        return [orjson.loads(line) for line in self.lines]

    def clear(self) -> None:
        with self._lock:
            self.lines.clear()


@dataclass(slots=True)
class NullSink:
    """Discards everything."""

    def write(self, data: bytes) -> int:
        return len(data)


def stderr_sink() -> StreamSink:
    """Sink over the current ``sys.stderr``."""
    return StreamSink(sys.stderr)


def _is_binary(stream: object) -> bool:
    mode = getattr(stream, "mode", "")
    if isinstance(mode, str) and "b" in mode:
        return True
    return not hasattr(stream, "encoding")
