"""Validation result — immutable container for a normalized value or issues."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Issue:
    """One structured diagnostic: where the value went wrong and why.

    ``path`` locates the offending field (``("user", "email")``,
    ``("items", 2)``); an empty path points at the value as a whole.
    """

    path: tuple[str | int, ...]
    message: str
    code: str | None = None

    def to_dict(self, *, debug: bool = False) -> dict[str, Any]:
        """Wire form: ``{"path", "message"}``, plus ``code`` in debug mode."""
        data: dict[str, Any] = {"path": list(self.path), "message": self.message}
        if debug and self.code is not None:
            data["code"] = self.code
        return data


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating a value against a schema.

    The result is falsy when invalid, so you can write::

        result = validator.validate(schema, value)
        if not result:
            raise BodyValidationError(result.issues)
        body = result.value
    """

    ok: bool
    value: Any = None
    issues: tuple[Issue, ...] = ()

    @classmethod
    def success(cls, value: Any) -> ValidationResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, issues: Sequence[Issue]) -> ValidationResult:
        return cls(ok=False, issues=tuple(issues))

    def __bool__(self) -> bool:
        """Falsy when invalid, enabling the ``if not result:`` pattern."""
        return self.ok
