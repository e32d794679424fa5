"""Route groups — the registration surface.

A group carries a path prefix and a middleware list. Sub-groups compose
both: prefixes concatenate, and a sub-group starts with a copy of its
parent's middleware. A route copies its group's middleware at
registration time, so ``use()`` only affects routes registered after it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Self

from edgekit.middleware.protocol import Middleware
from edgekit.routing.route import Handler, RouteDefinition, coerce_methods, coerce_options
from edgekit.routing.router import Router, join_path, normalize_path


class RouteGroup:
    """Registers routes under a shared prefix and middleware stack.

    Verb helpers work directly or as decorators::

        api = app.group("/api")
        api.use(BearerAuth(token))

        api.get("/health", lambda ctx: {"ok": True})

        @api.post("/items", body_schema=NewItem)
        async def create_item(ctx):
            return {"status": 201, "data": ctx.body}
    """

    __slots__ = ("_middleware", "_router", "prefix")

    def __init__(
        self,
        router: Router,
        prefix: str = "/",
        middleware: Iterable[Middleware] = (),
    ) -> None:
        self._router = router
        self.prefix = normalize_path(prefix)
        self._middleware: list[Middleware] = list(middleware)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        return tuple(self._middleware)

    def use(self, middleware: Middleware) -> Self:
        """Append *middleware* to this group's stack."""
        self._middleware.append(middleware)
        return self

    def group(self, prefix: str) -> RouteGroup:
        """Return a sub-group under ``self.prefix + prefix``."""
        return RouteGroup(self._router, join_path(self.prefix, prefix), self._middleware)

    def base(self, prefix: str) -> RouteGroup:
        """Alias for ``group()``."""
        return self.group(prefix)

    def register(
        self,
        methods: str | Iterable[str] | None,
        path: str,
        definition: Handler | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> RouteDefinition:
        """Register a route and return its definition.

        *definition* is a bare handler or a mapping with ``handler`` and
        optional ``query_schema``, ``headers_schema``, ``body_schema``,
        ``response_schema`` and ``middlewares`` (camelCase spellings are
        accepted too). Keyword *options* override mapping entries.
        """
        opts = coerce_options(definition, **options)
        route = RouteDefinition(
            path=join_path(self.prefix, path),
            handler=opts["handler"],
            methods=coerce_methods(methods),
            headers_schema=opts.get("headers_schema"),
            query_schema=opts.get("query_schema"),
            body_schema=opts.get("body_schema"),
            response_schema=opts.get("response_schema"),
            middlewares=(*self._middleware, *opts.get("middlewares", ())),
            name=opts.get("name"),
        )
        return self._router.add(route)

    def route(
        self,
        path: str,
        definition: Handler | Mapping[str, Any] | None = None,
        *,
        methods: str | Iterable[str] | None = None,
        **options: Any,
    ) -> Any:
        """Register for *methods* (default: every method).

        Returns the group for chaining when a handler is given, otherwise
        a decorator that registers the decorated function.
        """
        if definition is not None or "handler" in options:
            self.register(methods, path, definition, **options)
            return self

        def decorator(func: Handler) -> Handler:
            self.register(methods, path, func, **options)
            return func

        return decorator

    def get(self, path: str, definition: Handler | Mapping[str, Any] | None = None, **options: Any) -> Any:
        return self.route(path, definition, methods="GET", **options)

    def post(self, path: str, definition: Handler | Mapping[str, Any] | None = None, **options: Any) -> Any:
        return self.route(path, definition, methods="POST", **options)

    def put(self, path: str, definition: Handler | Mapping[str, Any] | None = None, **options: Any) -> Any:
        return self.route(path, definition, methods="PUT", **options)

    def patch(self, path: str, definition: Handler | Mapping[str, Any] | None = None, **options: Any) -> Any:
        return self.route(path, definition, methods="PATCH", **options)

    def delete(self, path: str, definition: Handler | Mapping[str, Any] | None = None, **options: Any) -> Any:
        return self.route(path, definition, methods="DELETE", **options)
