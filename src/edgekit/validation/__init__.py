"""Validation capability — the seam between the pipeline and any schema engine.

The pipeline only needs one operation::

    validator.validate(schema, value) -> ValidationResult

``ValidationResult`` is either a success carrying the normalized value
or a failure carrying structured ``Issue``s (field path + message).
Any object with that method plugs in; two ship with edgekit:

- ``PydanticValidator`` (default) — schemas are pydantic-adaptable types
- ``RulesValidator`` — schemas are ``dict[field, list[rule]]``
"""

from typing import Any, Protocol, runtime_checkable

from edgekit.validation.pydantic_validator import PydanticValidator
from edgekit.validation.result import Issue, ValidationResult
from edgekit.validation.rules import (
    RulesValidator,
    email,
    integer,
    matches,
    max_length,
    min_length,
    number,
    one_of,
    optional,
    required,
    url,
)

__all__ = [
    "Issue",
    "PydanticValidator",
    "RulesValidator",
    "ValidationResult",
    "Validator",
    "email",
    "integer",
    "matches",
    "max_length",
    "min_length",
    "number",
    "one_of",
    "optional",
    "required",
    "url",
]


@runtime_checkable
class Validator(Protocol):
    """Anything that can check a value against a schema."""

    def validate(self, schema: Any, value: Any) -> ValidationResult: ...
