"""Error envelopes — every failure leaves as the same JSON shape.

::

    {"success": false, "error": "<message>", "issues": [...]}

``issues`` appears only when the error carries structured diagnostics;
each issue is ``{"path", "message"}``, with its ``code`` in debug mode.
CORS headers are always attached so browser clients can read the error.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from edgekit.cors import DEFAULT_CORS, CORSConfig
from edgekit.errors import HandlerError, HTTPError
from edgekit.http.request import Request
from edgekit.http.response import Response
from edgekit.normalize import default_headers, dumps, merge_headers
from edgekit.validation.result import Issue

logger = logging.getLogger("edgekit.server")


def envelope(
    message: str,
    issues: Sequence[Issue] | None = None,
    *,
    debug: bool = False,
    **extra: Any,
) -> dict[str, Any]:
    """Build the error body (``success`` is always ``False``)."""
    body: dict[str, Any] = {"success": False, "error": message}
    if issues is not None:
        body["issues"] = [issue.to_dict(debug=debug) for issue in issues]
    body.update(extra)
    return body


def error_response(
    message: str,
    status: int,
    issues: Sequence[Issue] | None = None,
    *,
    headers: Iterable[tuple[str, str]] = (),
    cors: CORSConfig = DEFAULT_CORS,
    indent: int | None = 2,
    debug: bool = False,
    **extra: Any,
) -> Response:
    """Render an error envelope as a JSON response with CORS headers."""
    merged = merge_headers(default_headers(cors), dict(headers))
    return Response(
        body=dumps(envelope(message, issues, debug=debug, **extra), indent=indent),
        status=status,
        headers=tuple(merged.items()),
    )


def handle_http_error(
    exc: HTTPError,
    request: Request,
    *,
    cors: CORSConfig = DEFAULT_CORS,
    indent: int | None = 2,
    debug: bool = False,
) -> Response:
    """Map an HTTPError raised anywhere in the pipeline to its envelope."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    return error_response(
        exc.detail or f"Error {exc.status}",
        exc.status,
        exc.issues,
        headers=exc.headers,
        cors=cors,
        indent=indent,
        debug=debug,
    )


def handle_internal_error(
    exc: Exception,
    request: Request,
    *,
    cors: CORSConfig = DEFAULT_CORS,
    indent: int | None = 2,
    debug: bool = False,
) -> Response:
    """Handle unexpected exceptions as 500 errors.

    The exception message becomes the envelope's ``error``; in debug mode
    the exception type name is added as ``exception``.
    """
    logger.exception("500 %s %s", request.method, request.path)
    err = HandlerError.wrap(exc)
    extra: dict[str, Any] = {"exception": type(exc).__name__} if debug else {}
    return error_response(err.detail, err.status, cors=cors, indent=indent, debug=debug, **extra)
