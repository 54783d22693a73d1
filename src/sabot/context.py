"""Immutable context chain carrying log fields through a call stack.

A ``Context`` is a linked list of key/value bindings. Deriving one never
touches its parent, so contexts branched from a shared ancestor (one per
request, thread or task) never observe each other's fields.

Example:
    >>> ctx = with_fields(Context.background(), "request_id", "r-42")
    >>> child = with_fields(ctx, "user", "ann")
    >>> get_fields(child)
    {'request_id': 'r-42', 'user': 'ann'}
    >>> get_fields(ctx)
    {'request_id': 'r-42'}

For code that cannot thread a context explicitly, ``use_context`` scopes an
ambient one that ``current()`` returns (and that emission uses when passed
``None``).
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sabot.fields import LOG_ERROR_KEY, Fields, new_fields, pairs, safe_repr

if TYPE_CHECKING:
    from collections.abc import Hashable
    from types import TracebackType


class LogKey:
    """Reserved context key under which the field store is attached."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "LogKey"


LOG_KEY = LogKey()
_UNSET = object()


@dataclass(frozen=True, slots=True)
class Context:
    """Immutable binding of one key to one value, chained to a parent."""

    parent: Context | None = None
    key: Hashable = _UNSET
    val: object = None

    @staticmethod
    def background() -> Context:
        """Empty root context."""
        return _BACKGROUND

    def with_value(self, key: Hashable, val: object) -> Context:
        """Derive a child context binding ``key`` to ``val``."""
        return Context(self, key, val)

    def value(self, key: Hashable) -> object | None:
        """Nearest value bound to ``key`` along the chain, or None."""
        node: Context | None = self
        while node is not None:
            if node.key is not _UNSET and node.key == key:
                return node.val
            node = node.parent
        return None


_BACKGROUND = Context()


# ─────────────────────────────────────────────────────────────────────────────
# Accumulation
# ─────────────────────────────────────────────────────────────────────────────


def _stored(ctx: Context) -> Fields:
    val = ctx.value(LOG_KEY)
    if val is None:
        return Fields()
    if not isinstance(val, Fields):
        return Fields({LOG_ERROR_KEY: f"failed to assert type Fields on {safe_repr(val)}"})
    return val


def get_fields(ctx: Context) -> Fields:
    """Fields attached to ``ctx``; a private copy, safe to modify."""
    return _stored(ctx).copy()


def with_fields(ctx: Context, /, *kv: object, **kw: object) -> Context:
    """Derive a context whose fields are ``ctx``'s plus ``kv`` (new pairs win)."""
    fields = get_fields(ctx)
    fields.update(new_fields(pairs(kv, kw)))
    return ctx.with_value(LOG_KEY, fields)


# ─────────────────────────────────────────────────────────────────────────────
# Ambient context
# ─────────────────────────────────────────────────────────────────────────────


_current: ContextVar[Context] = ContextVar("sabot_context", default=_BACKGROUND)


def current() -> Context:
    """Context set by the innermost active ``use_context``, else background."""
    return _current.get()


class use_context:
    """Scope an ambient context for code that calls ``current()``.

    Example:
        >>> with use_context(with_fields(current(), "job", "nightly")):
        ...     lgr.info(None, "started")  # includes job=nightly
    """

    __slots__ = ("_ctx", "_token")

    def __init__(self, ctx: Context) -> None:
        self._ctx = ctx
        self._token: Token[Context] | None = None

    def __enter__(self) -> Context:
        self._token = _current.set(self._ctx)
        return self._ctx

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._token is not None:
            _current.reset(self._token)
            self._token = None
