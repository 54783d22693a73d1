"""Tests for the process-wide logger accessor."""

from __future__ import annotations

import pytest

from sabot import (
    Context,
    MemorySink,
    Sabot,
    SabotError,
    SingletonAlreadySetError,
    SingletonUndefinedError,
    get_singleton,
    install,
    reset_singleton,
)


def test_undefined_raises() -> None:
    with pytest.raises(SingletonUndefinedError, match="singleton logger is undefined"):
        get_singleton()


def test_install_and_get(lgr: Sabot, sink: MemorySink) -> None:
    assert lgr.install() is lgr
    assert get_singleton() is lgr

    get_singleton().info(Context.background(), "via singleton")
    assert sink.records()[0]["msg"] == "via singleton"


def test_reinstall_same_instance_is_noop(lgr: Sabot) -> None:
    install(lgr)
    install(lgr)
    assert get_singleton() is lgr


def test_install_different_instance_raises(lgr: Sabot) -> None:
    install(lgr)
    with pytest.raises(SingletonAlreadySetError) as exc_info:
        install(Sabot(writer=MemorySink()))
    assert isinstance(exc_info.value, SabotError)
    assert get_singleton() is lgr


def test_reset_allows_new_install(lgr: Sabot) -> None:
    install(lgr)
    reset_singleton()
    other = Sabot(writer=MemorySink())
    install(other)
    assert get_singleton() is other
