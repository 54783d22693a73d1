"""Optional process-wide logger.

Prefer passing a ``Sabot`` to the components that need it. This accessor is
for call sites where that is impractical:

    >>> Sabot(stderr_sink()).install()
    >>> get_singleton().info(None, "hello")
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from sabot.errors import SingletonAlreadySetError, SingletonUndefinedError

if TYPE_CHECKING:
    from sabot.logger import Sabot

_singleton: Sabot | None = None
_lock = threading.Lock()


def install(lgr: Sabot) -> None:
    """Set the process-wide logger once.

    Raises:
        SingletonAlreadySetError: a different logger is already installed.
    """
    global _singleton
    with _lock:
        if _singleton is not None and _singleton is not lgr:
            raise SingletonAlreadySetError()
        _singleton = lgr


def get_singleton() -> Sabot:
    """The installed logger.

    Raises:
        SingletonUndefinedError: nothing has been installed.
    """
    lgr = _singleton
    if lgr is None:
        raise SingletonUndefinedError()
    return lgr


def reset_singleton() -> None:
    """Forget the installed logger (for tests)."""
    global _singleton
    with _lock:
        _singleton = None
