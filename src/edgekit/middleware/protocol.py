"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, ctx: RequestContext, next: Next) -> Any: ...

No base class required. ``next()`` runs the rest of the chain (and, at
its end, extraction plus the handler) and returns whatever that
produced. Returning without calling ``next()`` short-circuits: the
middleware's own return value becomes the result.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from edgekit.context import RequestContext
from edgekit.http.request import Request

# The remainder of the chain
Next: TypeAlias = Callable[[], Awaitable[Any]]


class Middleware(Protocol):
    """Protocol for edgekit middleware.

    Accepts both functions and callable objects, sync or async::

        # Function middleware
        async def timing(request, ctx, next):
            start = time.monotonic()
            result = await next()
            log.info("%s took %.3fs", request.path, time.monotonic() - start)
            return result

        # Class middleware
        class RequireApiKey:
            async def __call__(self, request, ctx, next):
                if "apikey" not in ctx.headers:
                    return Shaped(status=401, body={"message": "Missing apikey"})
                return await next()
    """

    def __call__(self, request: Request, ctx: RequestContext, next: Next) -> Any: ...
