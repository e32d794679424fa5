"""Pydantic-backed validator — the default schema engine.

A schema is anything pydantic can build a ``TypeAdapter`` for: a
``BaseModel`` subclass, a ``TypedDict``, a dataclass, or a plain type
expression such as ``dict[str, int]``. Adapters are built on first use
and cached per schema, so the per-request cost is the validation alone.

Uploaded files validate as ``UploadFile`` instances, no extra model
config needed::

    class Upload(BaseModel):
        file: UploadFile
        name: str
"""

import threading
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from edgekit.validation.result import Issue, ValidationResult


def issues_from_pydantic(exc: PydanticValidationError) -> list[Issue]:
    """Translate pydantic's error list into edgekit issues."""
    return [
        Issue(path=tuple(error["loc"]), message=error["msg"], code=error["type"])
        for error in exc.errors(include_url=False)
    ]


class PydanticValidator:
    """Validate values with pydantic ``TypeAdapter``s.

    Thread-safe: the adapter cache is guarded by a lock, and adapters
    themselves are immutable once built.
    """

    __slots__ = ("_adapters", "_lock")

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}
        self._lock = threading.Lock()

    def adapter(self, schema: Any) -> TypeAdapter[Any]:
        """Return the cached adapter for *schema*, building it on first use."""
        adapter = self._adapters.get(schema)
        if adapter is not None:
            return adapter
        with self._lock:
            adapter = self._adapters.get(schema)
            if adapter is None:
                adapter = TypeAdapter(schema)
                self._adapters[schema] = adapter
        return adapter

    def validate(self, schema: Any, value: Any) -> ValidationResult:
        try:
            validated = self.adapter(schema).validate_python(value)
        except PydanticValidationError as exc:
            return ValidationResult.failure(issues_from_pydantic(exc))
        return ValidationResult.success(validated)

