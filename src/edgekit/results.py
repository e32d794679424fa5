"""Handler return variants.

A handler (or a short-circuiting middleware) returns one of three
things, and the normalizer treats each differently:

- ``Response`` — fully built; sent untouched
- ``Shaped``   — explicit status / headers / body
- ``Plain``    — a bare value that becomes the JSON body

Handlers may construct ``Shaped`` and ``Plain`` directly. Bare return
values are classified once by ``as_result()``::

    return {"ok": True}                                    # Plain
    return {"status": 201, "data": {"id": 7}}              # Shaped
    return Shaped(status=201, headers={"X-Id": "7"}, body={"ok": True})
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Final, TypeAlias

from edgekit.http.response import Response

SHAPE_KEYS: Final = frozenset({"status", "headers", "body"})


class _Undefined:
    """Absent-value marker; scrubbed to ``""`` before anything is sent."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Final = _Undefined()


@dataclass(frozen=True, slots=True)
class Shaped:
    """A result with explicit HTTP shape.

    ``status`` defaults to 200 and ``headers`` are merged over the
    default JSON + CORS set when normalized. ``body`` left ``UNDEFINED``
    serializes as an empty string.
    """

    status: int | None = None
    headers: Mapping[str, str] | None = None
    body: Any = UNDEFINED


@dataclass(frozen=True, slots=True)
class Plain:
    """A bare value; the whole thing is the response body."""

    value: Any = field(default=None)


HandlerResult: TypeAlias = Response | Shaped | Plain


def as_result(value: Any) -> HandlerResult:
    """Classify a handler's return value into one of the three variants.

    A mapping with any of ``status``, ``headers`` or ``body`` is shaped;
    its body is the ``body`` key if present, else the ``data`` key, else
    the mapping minus ``status`` and ``headers``.
    """
    match value:
        case Response() | Shaped() | Plain():
            return value
        case Mapping() if not SHAPE_KEYS.isdisjoint(value.keys()):
            if "body" in value:
                body = value["body"]
            elif "data" in value:
                body = value["data"]
            else:
                body = {k: v for k, v in value.items() if k not in ("status", "headers")}
            return Shaped(
                status=value.get("status"),
                headers=value.get("headers"),
                body=body,
            )
        case _:
            return Plain(value)
