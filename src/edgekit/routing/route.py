"""RouteDefinition frozen dataclass and definition coercion."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from edgekit.errors import ConfigurationError
from edgekit.middleware.protocol import Middleware

Handler: TypeAlias = Callable[..., Any]

# Accepted spellings for definition mappings
_OPTION_ALIASES: dict[str, str] = {
    "handler": "handler",
    "headers_schema": "headers_schema",
    "headersSchema": "headers_schema",
    "query_schema": "query_schema",
    "querySchema": "query_schema",
    "body_schema": "body_schema",
    "bodySchema": "body_schema",
    "response_schema": "response_schema",
    "responseSchema": "response_schema",
    "middlewares": "middlewares",
    "middleware": "middlewares",
    "name": "name",
}


@dataclass(frozen=True, slots=True)
class RouteDefinition:
    """A registered route. Immutable once added to the router.

    ``methods`` of ``None`` answers every verb at ``path``. Schemas left
    as ``None`` mean the segment passes through unvalidated.
    ``middlewares`` is already flattened: enclosing groups first
    (outermost to innermost), then the route's own.
    """

    path: str
    handler: Handler
    methods: frozenset[str] | None = None
    headers_schema: Any = None
    query_schema: Any = None
    body_schema: Any = None
    response_schema: Any = None
    middlewares: tuple[Middleware, ...] = ()
    name: str | None = None

    def answers(self, method: str) -> bool:
        """True if this definition handles *method* (case-sensitive)."""
        return self.methods is None or method in self.methods


def coerce_options(definition: Handler | Mapping[str, Any] | None, **options: Any) -> dict[str, Any]:
    """Fold a bare handler or an options mapping, plus keyword options, into one dict.

    Raises:
        ConfigurationError: On unknown option names or a missing handler.
    """
    merged: dict[str, Any] = {}
    if isinstance(definition, Mapping):
        raw: Mapping[str, Any] = definition
    elif definition is not None:
        raw = {"handler": definition}
    else:
        raw = {}

    for key, value in (*raw.items(), *options.items()):
        target = _OPTION_ALIASES.get(key)
        if target is None:
            msg = f"Unknown route option {key!r}."
            raise ConfigurationError(msg)
        merged[target] = value

    handler = merged.get("handler")
    if handler is None or not callable(handler):
        msg = "A route definition needs a callable 'handler'."
        raise ConfigurationError(msg)
    return merged


def coerce_methods(methods: str | Iterable[str] | None) -> frozenset[str] | None:
    """``None`` or empty means every method; a string is a single verb."""
    if methods is None:
        return None
    if isinstance(methods, str):
        return frozenset({methods})
    result = frozenset(methods)
    return result or None
