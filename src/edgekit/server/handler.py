"""ASGI handler — translates ASGI scope/messages to edgekit types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through routing, middleware,
extraction and normalization, and sends the Response back through
ASGI send().

This is also the single error boundary: nothing below ``dispatch()``
catches, every failure surfaces here and leaves as a JSON envelope.
"""

import logging

from edgekit._internal.asgi import Receive, Scope, Send
from edgekit._internal.invoke import invoke
from edgekit.config import AppConfig
from edgekit.context import RequestContext
from edgekit.cors import preflight_response
from edgekit.errors import HTTPError
from edgekit.extraction import extract
from edgekit.http.request import Request
from edgekit.http.response import Response
from edgekit.middleware.chain import run_chain
from edgekit.normalize import normalize
from edgekit.routing.router import Router
from edgekit.server.errors import handle_http_error, handle_internal_error
from edgekit.server.sender import send_response
from edgekit.validation import Validator

logger = logging.getLogger("edgekit.server")


async def dispatch(
    request: Request,
    *,
    router: Router,
    validator: Validator,
    config: AppConfig,
) -> Response:
    """Run one request through the full pipeline and return its Response.

    ``OPTIONS`` is answered with the CORS preflight before routing, so it
    succeeds on any path. Every other request is matched, passed through
    the route's middleware chain (whose terminal action extracts and
    calls the handler) and normalized. Errors never escape.
    """
    if request.method == "OPTIONS":
        return preflight_response(config.cors)

    try:
        route = router.match(request.method, request.path)
        ctx = RequestContext.from_request(request)

        async def terminal() -> object:
            await extract(request, route, ctx, validator)
            return await invoke(route.handler, ctx)

        result = await run_chain(route.middlewares, request, ctx, terminal)
        return normalize(
            result,
            response_schema=route.response_schema,
            validator=validator,
            cors=config.cors,
            indent=config.json_indent,
        )
    except HTTPError as exc:
        return handle_http_error(
            exc, request, cors=config.cors, indent=config.json_indent, debug=config.debug
        )
    except Exception as exc:
        return handle_internal_error(
            exc, request, cors=config.cors, indent=config.json_indent, debug=config.debug
        )


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    validator: Validator,
    config: AppConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive, max_body=config.max_content_length)
    response = await dispatch(request, router=router, validator=validator, config=config)
    logger.debug("%d %s %s", response.status, request.method, request.path)
    await send_response(response, send)
