"""Single-handler endpoints.

For functions that serve exactly one handler, with no routing table.
Every path reaches the handler; the response always uses the success
envelope::

    {"success": true, "data": <handler result>}

Usage::

    async def greet(ctx):
        return {"greeting": f"hello {ctx.params['name']}"}

    app = endpoint(greet, methods=["GET"], require_params=["name"])

A handler customizes status and headers by returning ``Shaped`` or a
mapping with any of ``data``, ``status`` or ``headers``::

    return {"status": 201, "headers": {"X-Id": "7"}, "data": {"id": 7}}
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from edgekit._internal.asgi import Receive, Scope, Send
from edgekit._internal.invoke import invoke
from edgekit.config import AppConfig
from edgekit.context import RequestContext
from edgekit.cors import cors_headers, preflight_response
from edgekit.errors import (
    HTTPError,
    MethodNotAllowedError,
    MissingParameterError,
    ResponseValidationError,
)
from edgekit.extraction import extract
from edgekit.http.request import Request
from edgekit.http.response import Response
from edgekit.normalize import JSON_CONTENT_TYPE, dumps, merge_headers, scrub_undefined
from edgekit.results import UNDEFINED, Shaped
from edgekit.routing.route import Handler, RouteDefinition, coerce_methods
from edgekit.server.errors import handle_http_error, handle_internal_error
from edgekit.server.sender import send_response
from edgekit.validation import PydanticValidator, Validator

logger = logging.getLogger("edgekit.server")

_ENVELOPE_KEYS = frozenset({"data", "status", "headers"})


def _unpack(result: Any) -> tuple[Any, int, Mapping[str, str]]:
    """Split a handler result into ``(data, status, headers)``."""
    match result:
        case Shaped(status=status, headers=headers, body=body):
            return body, status or 200, headers or {}
        case Mapping() if not _ENVELOPE_KEYS.isdisjoint(result.keys()):
            return (
                result.get("data", UNDEFINED),
                result.get("status") or 200,
                result.get("headers") or {},
            )
        case _:
            return result, 200, {}


class Endpoint:
    """An ASGI app serving one handler on every path.

    Pipeline: ``OPTIONS`` preflight, method check (405), required query
    parameters (400, only when no query schema is declared), extraction,
    handler, optional response-schema check on ``data`` (500), envelope.
    """

    __slots__ = ("config", "require_params", "route", "validator")

    def __init__(
        self,
        handler: Handler,
        *,
        methods: Iterable[str] | None = None,
        require_params: Iterable[str] = (),
        query_schema: Any = None,
        headers_schema: Any = None,
        body_schema: Any = None,
        response_schema: Any = None,
        validator: Validator | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.route = RouteDefinition(
            path="/",
            handler=handler,
            methods=coerce_methods(methods),
            query_schema=query_schema,
            headers_schema=headers_schema,
            body_schema=body_schema,
            response_schema=response_schema,
        )
        self.require_params: tuple[str, ...] = tuple(require_params)
        self.validator: Validator = validator or PydanticValidator()
        self.config: AppConfig = config or AppConfig()

    async def dispatch(self, request: Request) -> Response:
        """Run *request* through the endpoint pipeline."""
        cors = self.config.cors
        indent = self.config.json_indent
        if request.method == "OPTIONS":
            return preflight_response(cors)

        route = self.route
        try:
            if not route.answers(request.method):
                raise MethodNotAllowedError(route.methods or frozenset())
            if route.query_schema is None:
                for name in self.require_params:
                    if name not in request.query:
                        raise MissingParameterError(name)

            ctx = await extract(request, route, RequestContext.from_request(request), self.validator)
            data, status, headers = _unpack(await invoke(route.handler, ctx))

            if isinstance(data, Response):
                return data
            data = scrub_undefined(data) if data is not UNDEFINED else UNDEFINED
            if route.response_schema is not None and data is not UNDEFINED:
                checked = self.validator.validate(route.response_schema, data)
                if not checked:
                    raise ResponseValidationError(checked.issues)
                data = checked.value

            envelope: dict[str, Any] = {"success": True}
            if data is not UNDEFINED:
                envelope["data"] = data
            merged = merge_headers(
                merge_headers(cors_headers(cors), scrub_undefined(headers)),
                {"Content-Type": JSON_CONTENT_TYPE},
            )
            return Response(
                body=dumps(envelope, indent=indent), status=status, headers=tuple(merged.items())
            )
        except HTTPError as exc:
            return handle_http_error(exc, request, cors=cors, indent=indent, debug=self.config.debug)
        except Exception as exc:
            return handle_internal_error(
                exc, request, cors=cors, indent=indent, debug=self.config.debug
            )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            while True:
                message = await receive()
                if message["type"] == "lifespan.startup":
                    await send({"type": "lifespan.startup.complete"})
                elif message["type"] == "lifespan.shutdown":
                    await send({"type": "lifespan.shutdown.complete"})
                    return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive, max_body=self.config.max_content_length)
        response = await self.dispatch(request)
        logger.debug("%d %s %s", response.status, request.method, request.path)
        await send_response(response, send)


def endpoint(handler: Handler, **options: Any) -> Endpoint:
    """Wrap *handler* as a single-handler ASGI app. See ``Endpoint``."""
    return Endpoint(handler, **options)
