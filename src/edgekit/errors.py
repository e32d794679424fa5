"""Edgekit exception hierarchy.

Shared across Router, Extractor, Normalizer, and the dispatcher so every
module raises and catches the same types. Nothing below the dispatcher
catches these: ``server.handler`` is the single boundary that turns them
into the JSON error envelope.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from edgekit.validation.result import Issue


class EdgekitError(Exception):
    """Base for all edgekit-specific errors."""


class ConfigurationError(EdgekitError):
    """Raised when a route or app is registered with invalid settings.

    Surfaces during registration, never while serving a request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(EdgekitError):
    """An error that maps directly to an HTTP status code.

    ``detail`` becomes the ``error`` field of the envelope, ``issues``
    the optional structured diagnostics, ``headers`` extra response
    headers (e.g. ``Allow`` on a 405).
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    issues: tuple[Issue, ...] | None = None

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class RouteNotFoundError(HTTPError):
    """404 — no registered route has this pathname."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowedError(HTTPError):
    """405 — the pathname is registered, but not for this method.

    Carries an ``Allow`` header listing the methods that are registered
    at the path.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "Method Not Allowed") -> None:
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", ", ".join(sorted(allowed))),),
        )


# Conventional short names
NotFound = RouteNotFoundError
MethodNotAllowed = MethodNotAllowedError


class RequestValidationError(HTTPError):
    """400 — one request segment failed its schema.

    ``kind`` names the failing segment: ``"query"``, ``"headers"`` or
    ``"body"``.
    """

    kind: str = ""

    def __init__(self, detail: str, issues: Sequence[Issue] | None = None) -> None:
        super().__init__(
            status=400,
            detail=detail,
            issues=tuple(issues) if issues is not None else None,
        )


class QueryValidationError(RequestValidationError):
    kind = "query"

    def __init__(self, issues: Sequence[Issue]) -> None:
        super().__init__("Invalid query parameters", issues)


class HeaderValidationError(RequestValidationError):
    kind = "headers"

    def __init__(self, issues: Sequence[Issue]) -> None:
        super().__init__("Invalid headers", issues)


class BodyValidationError(RequestValidationError):
    kind = "body"

    def __init__(self, issues: Sequence[Issue]) -> None:
        super().__init__("Invalid request body", issues)


class MalformedBodyError(RequestValidationError):
    """The payload could not be decoded at all (bad JSON, broken multipart).

    Carries a single root issue instead of a schema issue list.
    """

    kind = "body"

    def __init__(self, reason: str = "", *, encoding: str = "JSON") -> None:
        from edgekit.validation.result import Issue

        message = f"Malformed {encoding}: {reason}" if reason else f"Malformed {encoding}"
        detail = (
            "Invalid or missing JSON body" if encoding == "JSON" else f"Invalid {encoding} body"
        )
        super().__init__(
            detail,
            [Issue(path=(), message=message, code=f"invalid_{encoding.lower()}")],
        )


class MissingParameterError(RequestValidationError):
    """A query parameter listed in ``require_params`` is absent."""

    kind = "query"

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required query parameter: {name}")


class PayloadTooLargeError(HTTPError):
    """413 — the request body exceeds ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")


class ResponseValidationError(HTTPError):
    """500 — the handler's own result broke its declared response schema."""

    def __init__(self, issues: Sequence[Issue]) -> None:
        super().__init__(status=500, detail="Invalid response data", issues=tuple(issues))


class HandlerError(HTTPError):
    """500 — an unexpected exception escaped a middleware or the handler.

    The original exception is kept as ``__cause__``.
    """

    def __init__(self, detail: str = "") -> None:
        super().__init__(status=500, detail=detail or "Internal server error")

    @classmethod
    def wrap(cls, exc: BaseException) -> HandlerError:
        err = cls(str(exc))
        err.__cause__ = exc
        return err
