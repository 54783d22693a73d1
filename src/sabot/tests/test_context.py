"""Tests for context accumulation and the ambient context."""

from __future__ import annotations

import threading

from sabot import LOG_KEY, Context, current, get_fields, use_context, with_fields
from sabot.fields import Fields


# ─────────────────────────────────────────────────────────────────────────────
# Context chain
# ─────────────────────────────────────────────────────────────────────────────


def test_background_is_empty() -> None:
    ctx = Context.background()
    assert ctx is Context.background()
    assert ctx.value("anything") is None


def test_with_value_shadows_parent() -> None:
    root = Context.background()
    a = root.with_value("k", 1)
    b = a.with_value("k", 2)
    c = b.with_value("other", 3)

    assert a.value("k") == 1
    assert b.value("k") == 2
    assert c.value("k") == 2
    assert c.value("other") == 3
    assert root.value("k") is None


# ─────────────────────────────────────────────────────────────────────────────
# Getting and storing fields
# ─────────────────────────────────────────────────────────────────────────────


def test_get_fields_nothing_in_ctx(ctx: Context) -> None:
    assert get_fields(ctx) == Fields()


def test_get_fields_something_stored(ctx: Context) -> None:
    ctx = with_fields(ctx, "foo", "bar")
    assert get_fields(ctx) == {"foo": "bar"}


def test_with_fields_accumulates(ctx: Context) -> None:
    ctx = with_fields(ctx, "foo", "bar")
    ctx = with_fields(ctx, "another", "thing")
    assert get_fields(ctx) == {"foo": "bar", "another": "thing"}


def test_with_fields_keywords(ctx: Context) -> None:
    ctx = with_fields(ctx, "foo", "bar", user_id=42, ctx="allowed")
    assert get_fields(ctx) == {"foo": "bar", "user_id": 42, "ctx": "allowed"}


def test_with_fields_later_value_wins(ctx: Context) -> None:
    ctx = with_fields(ctx, "foo", "bar")
    ctx = with_fields(ctx, "foo", "baz", "foo", "qux")
    assert get_fields(ctx) == {"foo": "qux"}


def test_with_fields_is_copy_on_write(ctx: Context) -> None:
    """Deriving never changes what the parent context reports."""
    parent = with_fields(ctx, "app_id", "testo")
    before = get_fields(parent)

    child = with_fields(parent, "app_id", "producto", "worker", 7)

    assert get_fields(parent) == before == {"app_id": "testo"}
    assert get_fields(child) == {"app_id": "producto", "worker": 7}


def test_get_fields_is_idempotent_and_private(ctx: Context) -> None:
    ctx = with_fields(ctx, "foo", "bar")
    first = get_fields(ctx)
    first["foo"] = "mutated"
    first["extra"] = "junk"
    assert get_fields(ctx) == get_fields(ctx) == {"foo": "bar"}


def test_with_fields_odd_count(ctx: Context) -> None:
    ctx = with_fields(ctx, "foo", "bar", "odd")
    fields = get_fields(ctx)
    assert fields["logerror"] == "cannot create fields from odd count"
    assert "keyvals" in fields
    assert "foo" not in fields


def test_with_fields_bad_call_keeps_earlier_fields(ctx: Context) -> None:
    ctx = with_fields(ctx, "request_id", "r-1")
    ctx = with_fields(ctx, 88, "bar")
    fields = get_fields(ctx)
    assert fields["request_id"] == "r-1"
    assert fields["logerror"] == "non-string field key: 88"


def test_get_fields_foreign_value_under_log_key(ctx: Context) -> None:
    ctx = ctx.with_value(LOG_KEY, "garbage")
    assert get_fields(ctx) == {"logerror": "failed to assert type Fields on 'garbage'"}


def test_get_fields_plain_dict_is_foreign(ctx: Context) -> None:
    ctx = ctx.with_value(LOG_KEY, {"foo": "bar"})
    assert set(get_fields(ctx)) == {"logerror"}


def test_branches_from_shared_ancestor_are_isolated(ctx: Context) -> None:
    """Concurrent derivations from one parent never see each other's fields."""
    parent = with_fields(ctx, "app_id", "testo")
    results: dict[int, Fields] = {}

    def work(n: int) -> None:
        mine = parent
        for i in range(50):
            mine = with_fields(mine, "worker", n, f"step_{n}", i)
        results[n] = get_fields(mine)

    threads = [threading.Thread(target=work, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert get_fields(parent) == {"app_id": "testo"}
    for n, fields in results.items():
        assert fields == {"app_id": "testo", "worker": n, f"step_{n}": 49}


# ─────────────────────────────────────────────────────────────────────────────
# Ambient context
# ─────────────────────────────────────────────────────────────────────────────


def test_current_defaults_to_background() -> None:
    assert current() is Context.background()


def test_use_context_scopes_and_restores(ctx: Context) -> None:
    outer = with_fields(ctx, "job", "nightly")
    inner = with_fields(outer, "step", "load")

    with use_context(outer) as entered:
        assert entered is outer
        assert current() is outer
        with use_context(inner):
            assert get_fields(current()) == {"job": "nightly", "step": "load"}
        assert current() is outer

    assert current() is Context.background()


def test_use_context_restores_on_error(ctx: Context) -> None:
    scoped = with_fields(ctx, "job", "nightly")
    try:
        with use_context(scoped):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert current() is Context.background()
