"""Immutable HTTP request.

Frozen metadata with async body access. The body stream is consumed at
most once: ``body()`` caches the bytes and ``form()`` caches the parse,
so JSON parsing, multipart parsing and any middleware that peeks at the
payload all share the same read.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from edgekit._internal.asgi import Receive, Scope
from edgekit.errors import PayloadTooLargeError
from edgekit.http.forms import FormData, is_multipart, parse_multipart
from edgekit.http.headers import Headers
from edgekit.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: byte limit enforced while reading the body (0 = unlimited)
    _max_body: int = field(default=0, repr=False, compare=False)

    # Private: mutable cache for body and parsed form data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def is_multipart(self) -> bool:
        return is_multipart(self.content_type)

    @property
    def url(self) -> str:
        """Path plus query string."""
        qs = urlencode(self.query.items_list())
        return f"{self.path}?{qs}" if qs else self.path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached: the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.

        Raises:
            PayloadTooLargeError: If the body grows past the configured limit.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        total = 0
        async for chunk in self.stream():
            total += len(chunk)
            if self._max_body and total > self._max_body:
                raise PayloadTooLargeError(self._max_body)
            chunks.append(chunk)
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks, straight from the transport.

        Bypasses the cache; prefer ``body()`` unless you own the request.
        """
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON.

        Raises:
            ValueError: If the body is empty or not valid JSON.
        """
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> FormData:
        """Parse the body as ``multipart/form-data``.

        Result is cached; later calls return the same ``FormData``.

        Raises:
            ValueError: If Content-Type is not multipart or the payload
                cannot be parsed.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        if not self.is_multipart:
            msg = f"Unsupported form content type: {self.content_type!r}"
            raise ValueError(msg)

        raw = await self.body()
        result = parse_multipart(raw, self.content_type or "")
        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive, *, max_body: int = 0) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers.from_raw(tuple(scope.get("headers", ()))),
            query=QueryParams.parse(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
            _max_body=max_body,
        )
