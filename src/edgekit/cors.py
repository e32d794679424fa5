"""CORS header set and preflight handling.

Every response leaving the dispatcher carries the same CORS headers,
including error envelopes and ``OPTIONS`` preflight answers. Origins are
not negotiated per request: the configured set is applied as-is.
"""

from dataclasses import dataclass

from edgekit.http.response import Response


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS header values.

    Defaults open the API to any origin, which is what browser clients
    of edge functions expect. Narrow what you need::

        CORSConfig(allow_origin="https://example.com")
    """

    allow_origin: str = "*"
    allow_headers: tuple[str, ...] = ("authorization", "x-client-info", "apikey", "content-type")
    allow_methods: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE", "OPTIONS")


DEFAULT_CORS = CORSConfig()


def cors_headers(config: CORSConfig = DEFAULT_CORS) -> dict[str, str]:
    """Return the CORS header set as an ordered mapping."""
    return {
        "Access-Control-Allow-Origin": config.allow_origin,
        "Access-Control-Allow-Headers": ", ".join(config.allow_headers),
        "Access-Control-Allow-Methods": ", ".join(config.allow_methods),
    }


def preflight_response(config: CORSConfig = DEFAULT_CORS) -> Response:
    """Answer an ``OPTIONS`` request: 204, no body, CORS headers only."""
    return Response(body=b"", status=204).with_headers(cors_headers(config))
