"""Per-request context handed to middleware and handlers.

Created when a route matches, holding the raw query and headers so
middleware can inspect them; the extractor then replaces those with
validated values and fills in the body before the handler runs.
Discarded with the response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from edgekit.http.forms import FormData, UploadFile
    from edgekit.http.request import Request


@dataclass(slots=True)
class RequestContext:
    """What a handler sees.

    ``params`` and ``headers`` are the validated (or raw) query and
    lower-cased header mappings. ``body`` is the validated JSON payload,
    or ``None`` when no body schema is declared. ``files``, ``fields``
    and ``form_data`` are set only for ``multipart/form-data`` requests.
    """

    request: Request
    params: Any
    headers: Any
    body: Any = None
    files: list[tuple[str, UploadFile]] | None = None
    fields: dict[str, str] | None = None
    form_data: FormData | None = None

    @classmethod
    def from_request(cls, request: Request) -> RequestContext:
        """Seed a context with the raw, unvalidated query and headers."""
        return cls(
            request=request,
            params=request.query.to_dict(),
            headers=request.headers.to_dict(),
        )
