"""Edgekit — request dispatch for serverless HTTP functions.

Routes, middleware, schema-validated extraction and JSON response
normalization behind a single ASGI callable.

Basic usage::

    from edgekit import App

    app = App()

    @app.get("/health")
    def health(ctx):
        return {"ok": True}

Single-handler functions::

    from edgekit import endpoint

    app = endpoint(handler, methods=["POST"], body_schema=NewItem)
"""

__version__ = "0.1.0"
__all__ = [
    "UNDEFINED",
    "App",
    "AppConfig",
    "BearerAuth",
    "BodyValidationError",
    "CORSConfig",
    "ConfigurationError",
    "EdgekitError",
    "Endpoint",
    "HTTPError",
    "HandlerError",
    "HeaderValidationError",
    "Issue",
    "MalformedBodyError",
    "MethodNotAllowed",
    "MethodNotAllowedError",
    "Middleware",
    "MissingParameterError",
    "Next",
    "NotFound",
    "PayloadTooLargeError",
    "Plain",
    "PydanticValidator",
    "QueryValidationError",
    "Request",
    "RequestContext",
    "RequestValidationError",
    "Response",
    "ResponseValidationError",
    "RouteDefinition",
    "RouteGroup",
    "RouteNotFoundError",
    "RulesValidator",
    "Shaped",
    "UploadFile",
    "ValidationResult",
    "Validator",
    "endpoint",
]

_ERRORS = frozenset(
    {
        "BodyValidationError",
        "ConfigurationError",
        "EdgekitError",
        "HTTPError",
        "HandlerError",
        "HeaderValidationError",
        "MalformedBodyError",
        "MethodNotAllowed",
        "MethodNotAllowedError",
        "MissingParameterError",
        "NotFound",
        "PayloadTooLargeError",
        "QueryValidationError",
        "RequestValidationError",
        "ResponseValidationError",
        "RouteNotFoundError",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import edgekit`` cheap while providing a clean top-level API.
    """
    if name == "App":
        from edgekit.app import App

        return App

    if name == "AppConfig":
        from edgekit.config import AppConfig

        return AppConfig

    if name == "CORSConfig":
        from edgekit.cors import CORSConfig

        return CORSConfig

    if name in ("Endpoint", "endpoint"):
        from edgekit import endpoints

        return getattr(endpoints, name)

    if name == "Request":
        from edgekit.http.request import Request

        return Request

    if name == "Response":
        from edgekit.http.response import Response

        return Response

    if name == "UploadFile":
        from edgekit.http.forms import UploadFile

        return UploadFile

    if name == "RequestContext":
        from edgekit.context import RequestContext

        return RequestContext

    if name in ("Shaped", "Plain", "UNDEFINED"):
        from edgekit import results

        return getattr(results, name)

    if name in ("Middleware", "Next", "BearerAuth"):
        from edgekit import middleware

        return getattr(middleware, name)

    if name in ("RouteDefinition", "RouteGroup"):
        from edgekit import routing

        return getattr(routing, name)

    if name in ("Issue", "PydanticValidator", "RulesValidator", "ValidationResult", "Validator"):
        from edgekit import validation

        return getattr(validation, name)

    if name in _ERRORS:
        from edgekit import errors

        return getattr(errors, name)

    msg = f"module 'edgekit' has no attribute {name!r}"
    raise AttributeError(msg)
