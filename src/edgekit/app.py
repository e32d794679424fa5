"""Edgekit application class.

Mutable during setup (route registration, middleware).
Frozen at runtime when ``__call__()`` or ``dispatch()`` is first invoked.
"""

import threading

from edgekit._internal.asgi import Receive, Scope, Send
from edgekit.config import AppConfig
from edgekit.http.request import Request
from edgekit.http.response import Response
from edgekit.routing.group import RouteGroup
from edgekit.routing.route import RouteDefinition
from edgekit.routing.router import Router
from edgekit.server.handler import dispatch, handle_request
from edgekit.validation import PydanticValidator, Validator


class App(RouteGroup):
    """The edgekit application: a root route group plus an ASGI entry point.

    Usage::

        app = App()
        app.use(BearerAuth(os.environ["API_TOKEN"]))

        @app.post("/items", body_schema=NewItem)
        async def create_item(ctx):
            return {"status": 201, "data": ctx.body}

    Thread safety:
        Registration happens at import time, single-threaded. The freeze
        transition uses a Lock + double-check so exactly one thread
        compiles the route table even when several workers receive their
        first request concurrently. After the freeze the table is
        read-only; registering another route raises ``RuntimeError``.
    """

    __slots__ = ("_freeze_lock", "_frozen", "config", "validator")

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        validator: Validator | None = None,
    ) -> None:
        super().__init__(Router())
        self.config: AppConfig = config or AppConfig()
        self.validator: Validator = validator or PydanticValidator()
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    @property
    def router(self) -> Router:
        return self._router

    @property
    def routes(self) -> list[RouteDefinition]:
        """Registered routes in registration order."""
        return self._router.routes

    # -- Dispatch --

    async def dispatch(self, request: Request) -> Response:
        """Run *request* through the pipeline without an ASGI server."""
        self._ensure_frozen()
        return await dispatch(
            request,
            router=self._router,
            validator=self.validator,
            config=self.config,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            validator=self.validator,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup, then acknowledge startup and shutdown."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._router.compile()
            self._frozen = True
