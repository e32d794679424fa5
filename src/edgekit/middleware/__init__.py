"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, ctx: RequestContext, next: Next) -> Any

Built-in middleware:
    BearerAuth -- reject requests without the expected bearer token
"""

from edgekit.middleware.auth import BearerAuth
from edgekit.middleware.chain import build_chain, run_chain
from edgekit.middleware.protocol import Middleware, Next

__all__ = [
    "BearerAuth",
    "Middleware",
    "Next",
    "build_chain",
    "run_chain",
]
