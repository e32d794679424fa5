"""Response normalization — every handler result collapses to one ``Response``.

Rules, in order:

1. ``Response``          -> returned unmodified (no CORS merge, no schema check)
2. ``UNDEFINED`` values  -> replaced by ``""`` at any depth
3. ``Shaped``            -> status (default 200), headers merged over defaults
4. ``Plain``             -> the whole value is the body, status 200
5. response schema       -> body validated; failure is a 500
6. serialization         -> strings/bytes verbatim, everything else JSON
"""

from __future__ import annotations

import dataclasses
import json as json_module
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from edgekit.cors import DEFAULT_CORS, CORSConfig, cors_headers
from edgekit.errors import ResponseValidationError
from edgekit.http.forms import UploadFile
from edgekit.http.response import Response
from edgekit.results import UNDEFINED, Plain, Shaped, as_result

if TYPE_CHECKING:
    from edgekit.validation import Validator

JSON_CONTENT_TYPE = "application/json"


def scrub_undefined(value: Any) -> Any:
    """Replace every ``UNDEFINED`` with ``""``, descending into containers.

    Mappings come back as ``dict`` and sequences as ``list``; any other
    value is returned as-is.
    """
    if value is UNDEFINED:
        return ""
    if isinstance(value, Mapping):
        return {k: scrub_undefined(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [scrub_undefined(v) for v in value]
    return value


def default_headers(cors: CORSConfig = DEFAULT_CORS) -> dict[str, str]:
    return {"Content-Type": JSON_CONTENT_TYPE, **cors_headers(cors)}


def merge_headers(base: Mapping[str, str], overrides: Mapping[str, str] | None) -> dict[str, str]:
    """Merge *overrides* over *base*; names compare case-insensitively.

    An overriding header takes the spelling the caller used.

    Raises:
        ValueError: If an overriding value cannot be sent as latin-1.
    """
    merged = dict(base)
    if not overrides:
        return merged
    lowered = {name.lower(): name for name in merged}
    for name, value in overrides.items():
        existing = lowered.get(name.lower())
        if existing is not None:
            del merged[existing]
        text = str(value)
        try:
            name.encode("latin-1")
            text.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise ValueError(f"Header {name!r} is not latin-1 encodable") from exc
        merged[name] = text
        lowered[name.lower()] = name
    return merged


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, UploadFile):
        return value.filename
    if isinstance(value, (set, frozenset)):
        return list(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return to_jsonable_python(value, fallback=str)


def dumps(value: Any, *, indent: int | None = 2) -> str:
    """JSON-encode a response body (pydantic models, dataclasses included)."""
    return json_module.dumps(value, indent=indent, default=_json_default, ensure_ascii=False)


def serialize_body(body: Any, *, indent: int | None = 2) -> str | bytes:
    if isinstance(body, (str, bytes)):
        return body
    return dumps(body, indent=indent)


def normalize(
    result: Any,
    *,
    response_schema: Any = None,
    validator: Validator | None = None,
    cors: CORSConfig = DEFAULT_CORS,
    indent: int | None = 2,
) -> Response:
    """Turn whatever the middleware chain produced into a ``Response``.

    Raises:
        ResponseValidationError: If *response_schema* rejects the body.
    """
    variant = as_result(result)
    if isinstance(variant, Response):
        return variant

    status = 200
    headers = default_headers(cors)
    match variant:
        case Shaped(status=shaped_status, headers=shaped_headers, body=body):
            if shaped_status is not None and shaped_status is not UNDEFINED:
                status = shaped_status
            if shaped_headers:
                headers = merge_headers(headers, scrub_undefined(shaped_headers))
        case Plain(value=body):
            pass
    body = scrub_undefined(body)

    if response_schema is not None and validator is not None:
        checked = validator.validate(response_schema, body)
        if not checked:
            raise ResponseValidationError(checked.issues)
        body = checked.value

    return Response(
        body=serialize_body(body, indent=indent),
        status=status,
        headers=tuple(headers.items()),
    )
