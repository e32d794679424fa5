"""Bearer-token guard.

Short-circuits with ``401 {"message": "Unauthorized"}`` unless the
request carries ``Authorization: Bearer <token>``. The handler (and
everything after this link) never runs for rejected requests::

    api = app.group("/api")
    api.use(BearerAuth(os.environ["API_TOKEN"]))
"""

import hmac
from typing import Any

from edgekit.context import RequestContext
from edgekit.errors import ConfigurationError
from edgekit.http.request import Request
from edgekit.middleware.protocol import Next
from edgekit.results import Shaped


class BearerAuth:
    """Require a fixed bearer token on every request through this link."""

    __slots__ = ("_expected", "message")

    def __init__(self, token: str, *, message: str = "Unauthorized") -> None:
        if not token:
            msg = "BearerAuth requires a non-empty token."
            raise ConfigurationError(msg)
        self._expected = f"Bearer {token}"
        self.message = message

    async def __call__(self, request: Request, ctx: RequestContext, next: Next) -> Any:
        supplied = request.headers.get("authorization") or ""
        if not hmac.compare_digest(supplied.encode(), self._expected.encode()):
            return Shaped(status=401, body={"message": self.message})
        return await next()
