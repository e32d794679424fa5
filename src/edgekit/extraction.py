"""Extraction — pull query, headers and body out of a request and validate them.

Runs as the terminal link of the middleware chain, just before the
handler. Segments are processed in order and the first failure stops
the request:

1. **query**: flat ``name -> value`` mapping, validated if a query schema
   is declared, passed through raw otherwise
2. **headers**: lower-cased ``name -> value`` mapping, same rule
3. **body**:

   - ``multipart/form-data``: parsed once into files and fields; the
     merged mapping is validated only when a body schema is declared
   - any other content type with a body schema: parsed as JSON
     (unparseable -> ``MalformedBodyError``) then validated
   - no body schema: left ``None``; the payload is not read

Each validator failure raises the segment's ``RequestValidationError``
subclass carrying the validator's issue list.
"""

from typing import Any

from edgekit.context import RequestContext
from edgekit.errors import (
    BodyValidationError,
    HeaderValidationError,
    MalformedBodyError,
    QueryValidationError,
    RequestValidationError,
)
from edgekit.http.request import Request
from edgekit.routing.route import RouteDefinition
from edgekit.validation import Validator


def _check(
    validator: Validator,
    schema: Any,
    value: Any,
    error: type[RequestValidationError],
) -> Any:
    if schema is None:
        return value
    result = validator.validate(schema, value)
    if not result:
        raise error(result.issues)  # type: ignore[call-arg]
    return result.value


def extract_query(request: Request, route: RouteDefinition, validator: Validator) -> Any:
    return _check(validator, route.query_schema, request.query.to_dict(), QueryValidationError)


def extract_headers(request: Request, route: RouteDefinition, validator: Validator) -> Any:
    return _check(validator, route.headers_schema, request.headers.to_dict(), HeaderValidationError)


async def extract_body(
    request: Request,
    route: RouteDefinition,
    ctx: RequestContext,
    validator: Validator,
) -> None:
    """Fill ``ctx.body`` (and the multipart views) from the payload.

    The payload is read at most once: the request caches both the raw
    bytes and the multipart parse.
    """
    if request.is_multipart:
        try:
            form = await request.form()
        except ValueError as exc:
            raise MalformedBodyError(str(exc), encoding="multipart") from exc
        ctx.form_data = form
        ctx.files = form.files
        ctx.fields = form.fields()
        if route.body_schema is not None:
            ctx.body = _check(validator, route.body_schema, form.to_dict(), BodyValidationError)
        return

    if route.body_schema is None:
        return

    try:
        payload = await request.json()
    except ValueError as exc:
        raise MalformedBodyError(str(exc)) from exc
    ctx.body = _check(validator, route.body_schema, payload, BodyValidationError)


async def extract(
    request: Request,
    route: RouteDefinition,
    ctx: RequestContext,
    validator: Validator,
) -> RequestContext:
    """Validate every segment into *ctx* and return it.

    Raises:
        QueryValidationError, HeaderValidationError, BodyValidationError,
        MalformedBodyError: On the first failing segment.
    """
    ctx.params = extract_query(request, route, validator)
    ctx.headers = extract_headers(request, route, validator)
    await extract_body(request, route, ctx, validator)
    return ctx

