"""Route registry with first-match lookup over registration order.

Paths match as exact strings: no parameters, no wildcards, and a
trailing slash is significant. Overlapping definitions are not ranked
by specificity; whichever was registered first wins.
"""

import logging

from edgekit.errors import MethodNotAllowedError, RouteNotFoundError
from edgekit.routing.route import RouteDefinition

logger = logging.getLogger("edgekit.routing")


def normalize_path(path: str) -> str:
    """Prefix *path* with ``/`` if it lacks one."""
    return path if path.startswith("/") else "/" + path


def join_path(prefix: str, path: str) -> str:
    """Join a group prefix and a sub-path with exactly one ``/``.

    A sub-path of ``""`` or ``"/"`` collapses to the prefix itself::

        join_path("/api", "users")  -> "/api/users"
        join_path("/api", "/")      -> "/api"
        join_path("/", "users")     -> "/users"
    """
    prefix = normalize_path(prefix)
    if path in ("", "/"):
        return prefix
    return prefix.rstrip("/") + "/" + path.lstrip("/")


class Router:
    """Append-only route registry.

    Usage::

        router = Router()
        router.add(RouteDefinition("/users", list_users, frozenset({"GET"})))
        router.compile()
        route = router.match("GET", "/users")
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[RouteDefinition] = []
        self._compiled = False

    @property
    def routes(self) -> list[RouteDefinition]:
        """All registered routes, in registration order."""
        return list(self._routes)

    @property
    def compiled(self) -> bool:
        return self._compiled

    def add(self, route: RouteDefinition) -> RouteDefinition:
        """Append a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        self._routes.append(route)
        logger.debug(
            "registered %s %s",
            ",".join(sorted(route.methods)) if route.methods else "*",
            route.path,
        )
        return route

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteDefinition:
        """Return the first route whose path equals *path* and answers *method*.

        Raises ``RouteNotFoundError`` if no route has this path.
        Raises ``MethodNotAllowedError`` if routes have this path but none
        answers the method.
        """
        path = normalize_path(path)
        allowed: set[str] = set()
        for route in self._routes:
            if route.path != path:
                continue
            if route.answers(method):
                return route
            # methods is never None here: a None method set answers everything
            allowed.update(route.methods or ())

        if allowed:
            raise MethodNotAllowedError(frozenset(allowed))
        raise RouteNotFoundError()
