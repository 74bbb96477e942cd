"""Serialization helpers used at the message boundary.

Every payload leaving the relay must be JSON-safe.  Bundler stats and
failure callbacks can carry raw exception objects, which are converted
here into plain dictionaries before they reach a handler or the socket.
"""

from __future__ import annotations

import json
import traceback
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Encode a wire batch (or any JSON-safe value) as compact, key-sorted
    ASCII JSON.

    Two batches are the same on the wire exactly when their encodings are
    equal.  Raises ``TypeError`` for values that did not go through
    :func:`to_transport_safe`.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def serialize_error(error: BaseException) -> dict[str, Any]:
    """Convert an exception into a JSON-safe dictionary.

    The result carries the exception class name, its message and the
    formatted traceback (empty when the exception was never raised).
    A chained ``__cause__`` is serialized recursively.
    """
    data: dict[str, Any] = {
        "name": type(error).__name__,
        "message": str(error),
        "stack": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }
    if error.__cause__ is not None:
        data["cause"] = serialize_error(error.__cause__)
    return data


def to_transport_safe(value: Any) -> Any:
    """Recursively make *value* safe to put into a message payload.

    Exceptions go through :func:`serialize_error`, pydantic models are
    dumped in JSON mode, paths become strings, tuples and sets become
    lists.  Anything else that ``json`` cannot encode falls back to
    ``str()``.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, BaseException):
        return serialize_error(value)
    if isinstance(value, Mapping):
        return {str(k): to_transport_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_transport_safe(v) for v in value]
    if isinstance(value, PurePath):
        return str(value)
    model_dump = getattr(value, "model_dump", None)
    if callable(model_dump):
        return to_transport_safe(model_dump(mode="json"))
    return str(value)
