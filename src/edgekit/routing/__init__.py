"""Routing — exact-path route registry with first-match lookup.

Routes are registered during setup (directly or through nested groups)
and the registry becomes read-only when the app freezes.
"""

from edgekit.routing.group import RouteGroup
from edgekit.routing.route import RouteDefinition
from edgekit.routing.router import Router, join_path, normalize_path

__all__ = ["RouteDefinition", "RouteGroup", "Router", "join_path", "normalize_path"]
