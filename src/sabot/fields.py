"""Field store: normalized key-value pairs carried by contexts and log events.

Values are normalized when they enter a store, so a store can always be
serialized. Anything that is not a cheap primitive is rendered to a JSON
string up front:

    >>> new_fields(["user", "ann", "roles", ["admin", "ops"]])
    {'user': 'ann', 'roles': '["admin","ops"]'}

Malformed input never raises; it degrades to a pair of diagnostic fields:

    >>> new_fields(["foo", "bar", "odd"])
    {'logerror': 'cannot create fields from odd count', 'keyvals': "['foo', 'bar', 'odd']"}
"""

from __future__ import annotations

import base64
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from itertools import chain
from typing import Union

import orjson
from pydantic import BaseModel

from sabot.errors import FieldError

LOG_ERROR_KEY = "logerror"
KEYVALS_KEY = "keyvals"
TRUNCATION_MARKER = "--truncated--"

FieldValue = Union[str, bytes, int, float, bool, datetime, timedelta]

_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1
_OPTIONS = orjson.OPT_UTC_Z | orjson.OPT_NON_STR_KEYS | orjson.OPT_SERIALIZE_NUMPY


class Fields(dict[str, FieldValue]):
    """Mapping of field name to normalized value.

    Immutable by convention once attached to a context: derive a new store
    with ``copy()`` and modify that instead.
    """

    __slots__ = ()

    def copy(self) -> Fields:
        return Fields(self)


# ─────────────────────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────────────────────


def json_default(obj: object) -> object:
    """orjson fallback for types it does not serialize natively."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, timedelta):
        return obj.total_seconds()
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    raise TypeError(f"unsupported type: {type(obj).__name__}")


def dumps(obj: object) -> bytes:
    """Serialize to JSON bytes with sabot's options."""
    return orjson.dumps(obj, default=json_default, option=_OPTIONS)


def _is_native(value: object) -> bool:
    if isinstance(value, int):
        return _INT_MIN <= value <= _INT_MAX
    return isinstance(value, (str, bytes, float, datetime, timedelta))


def normalize(value: object) -> FieldValue:
    """Pass primitives through; render anything else as a JSON string.

    Raises:
        FieldError: the value cannot be rendered as JSON.
    """
    if _is_native(value):
        return value  # type: ignore[return-value]
    try:
        return dumps(value).decode()
    except Exception as exc:
        raise FieldError(f"failed to marshal {safe_repr(value)}: {exc}", value) from exc


def safe_repr(obj: object) -> str:
    """repr() that cannot raise."""
    try:
        return repr(obj)
    except Exception as exc:
        return f"<unrepresentable {type(obj).__name__}: {exc}>"


def log_error_fields(message: str, kv: Sequence[object]) -> Fields:
    """Diagnostic pair standing in for fields that could not be built."""
    return Fields({LOG_ERROR_KEY: message, KEYVALS_KEY: safe_repr(list(kv))})


def pairs(kv: Sequence[object], kw: Mapping[str, object]) -> tuple[object, ...]:
    """Flatten positional key-values and keyword fields into one list."""
    return (*kv, *chain.from_iterable(kw.items()))


def new_fields(kv: Sequence[object]) -> Fields:
    """Build a store from alternating keys and values.

    An odd count or a non-string key replaces the whole call with diagnostic
    fields. A value that cannot be normalized replaces only its own key.
    """
    if len(kv) % 2 != 0:
        return log_error_fields("cannot create fields from odd count", kv)

    fields = Fields()
    for i in range(0, len(kv), 2):
        key = kv[i]
        if not isinstance(key, str):
            return log_error_fields(f"non-string field key: {safe_repr(key)}", kv)
        try:
            fields[key] = normalize(kv[i + 1])
        except FieldError as exc:
            fields.pop(key, None)
            fields.update(log_error_fields(str(exc), kv))
    return fields


# ─────────────────────────────────────────────────────────────────────────────
# Truncation
# ─────────────────────────────────────────────────────────────────────────────


def truncate(fields: Fields, max_len: int) -> None:
    """Cut string values so they fit in ``max_len`` characters, in place.

    A cut value ends with ``TRUNCATION_MARKER``. No-op when ``max_len`` leaves
    no room beyond the marker.
    """
    limit = max_len - len(TRUNCATION_MARKER)
    if limit < 1:
        return
    for key, value in fields.items():
        if isinstance(value, str) and len(value) > limit:
            fields[key] = value[:limit] + TRUNCATION_MARKER
