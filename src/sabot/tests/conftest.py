"""Shared fixtures for sabot tests."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

import orjson
import pytest

from sabot import Context, MemorySink, Sabot, reset_singleton

_TS_PATTERN = re.compile(r"^\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{9}Z$")


class FailSink:
    """Sink whose every write fails."""

    def __init__(self, message: str = "oops") -> None:
        self.message = message
        self.attempts = 0

    def write(self, data: bytes) -> int:
        self.attempts += 1
        raise OSError(self.message)


def delog(sink: MemorySink) -> dict[str, object]:
    """Decode the single logged line, checking and normalizing volatile parts.

    ``ts`` is verified to be recent and replaced with "nowish"; ``logerror`` is
    cut to its first line and ``keyvals`` replaced with a placeholder.
    """
    if not sink.lines:
        return {}
    assert len(sink.lines) == 1
    logged: dict[str, object] = orjson.loads(sink.lines[0])

    ts = logged["ts"]
    assert isinstance(ts, str) and _TS_PATTERN.match(ts), ts
    logged_at = datetime.fromisoformat(ts[:26]).replace(tzinfo=UTC)
    assert abs(datetime.now(UTC) - logged_at) < timedelta(seconds=5)
    logged["ts"] = "nowish"

    return replace(logged)


def replace(logged: dict[str, object]) -> dict[str, object]:
    if "logerror" in logged:
        logged["logerror"] = str(logged["logerror"]).split("\n")[0]
    if "keyvals" in logged:
        logged["keyvals"] = "keyvals replaced for test"
    return logged


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def lgr(sink: MemorySink) -> Sabot:
    return Sabot(writer=sink)


@pytest.fixture
def ctx() -> Context:
    return Context.background()


@pytest.fixture(autouse=True)
def clean_singleton() -> object:
    """Reset the process-wide logger before and after each test."""
    reset_singleton()
    yield
    reset_singleton()
