"""Continuation-passing middleware chain.

``build_chain`` turns an ordered middleware sequence plus a terminal
action into ``dispatch(index)``:

- ``dispatch(i)`` for ``i < len(middleware)`` calls
  ``middleware[i](request, ctx, lambda: dispatch(i + 1))``
- ``dispatch(len(middleware))`` runs the terminal action

Links do not catch errors from deeper links; exceptions travel up to
the dispatcher. Calling ``next()`` more than once re-runs the remainder
of the chain and is not guarded against.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeAlias

from edgekit._internal.invoke import invoke
from edgekit.context import RequestContext
from edgekit.http.request import Request
from edgekit.middleware.protocol import Middleware

Dispatch: TypeAlias = Callable[[int], Awaitable[Any]]


def build_chain(
    middleware: Sequence[Middleware],
    request: Request,
    ctx: RequestContext,
    terminal: Callable[[], Awaitable[Any]],
) -> Dispatch:
    """Compose *middleware* around *terminal* for one request."""

    async def dispatch(index: int) -> Any:
        if index < len(middleware):
            return await invoke(middleware[index], request, ctx, lambda: dispatch(index + 1))
        return await terminal()

    return dispatch


async def run_chain(
    middleware: Sequence[Middleware],
    request: Request,
    ctx: RequestContext,
    terminal: Callable[[], Awaitable[Any]],
) -> Any:
    """Run the full chain from its first link and return its result."""
    return await build_chain(middleware, request, ctx, terminal)(0)
