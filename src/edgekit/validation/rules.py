"""Rule-based validator — composable string checks, no schema library.

A rule is a callable with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

A schema is a ``dict`` mapping field names to lists of rules; the
cleaned mapping (declared fields only) is the normalized value::

    schema = {
        "title": [required, max_length(200)],
        "email": [required, email],
    }
    RulesValidator().validate(schema, {"title": "Hi", "email": "a@b.co"})

Handy for query strings and headers, where every value is a string.
"""

import re
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from edgekit.validation.result import Issue, ValidationResult

Rule: TypeAlias = Callable[[str], str | None]
RuleSchema: TypeAlias = Mapping[str, list[Rule]]


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(value: str) -> str | None:
    """Field must be present and non-empty."""
    if not value or not value.strip():
        return "This field is required"
    return None


def optional(value: str) -> str | None:
    """Marker rule: an empty value skips the remaining rules for the field."""
    return None


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def max_length(n: int) -> Rule:
    """String must be at most *n* characters."""

    def check(value: str) -> str | None:
        if len(value) > n:
            return f"Must be at most {n} characters"
        return None

    return check


def min_length(n: int) -> Rule:
    """String must be at least *n* characters."""

    def check(value: str) -> str | None:
        if len(value) < n:
            return f"Must be at least {n} characters"
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")
_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def email(value: str) -> str | None:
    """Value must look like an email address (structure only)."""
    if not _EMAIL_RE.match(value):
        return "Must be a valid email address"
    return None


def url(value: str) -> str | None:
    """Value must be an http(s) URL."""
    if not _URL_RE.match(value):
        return "Must be a valid URL"
    return None


def matches(pattern: str, message: str | None = None) -> Rule:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: str) -> str | None:
        if not compiled.match(value):
            return message or f"Must match pattern: {pattern}"
        return None

    return check


def one_of(*choices: str) -> Rule:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)

    def check(value: str) -> str | None:
        if value not in allowed:
            return f"Must be one of: {', '.join(sorted(allowed))}"
        return None

    return check


def integer(value: str) -> str | None:
    """Value must be a whole number."""
    try:
        int(value)
    except (ValueError, TypeError):
        return "Must be a whole number"
    return None


def number(value: str) -> str | None:
    """Value must be an int or float."""
    try:
        float(value)
    except (ValueError, TypeError):
        return "Must be a number"
    return None


class RulesValidator:
    """Validate string mappings against ``dict[field, list[rule]]`` schemas.

    Every field is checked and every failing rule reported, except that
    a ``required`` failure stops that field's remaining rules, and an
    ``optional`` field that is empty is accepted without running them.
    Non-mapping values fail with a single root issue.
    """

    __slots__ = ()

    def validate(self, schema: RuleSchema, value: Any) -> ValidationResult:
        if not isinstance(value, Mapping):
            return ValidationResult.failure(
                [Issue(path=(), message="Expected an object", code="invalid_type")]
            )

        issues: list[Issue] = []
        cleaned: dict[str, str] = {}

        for field_name, rules in schema.items():
            raw = value.get(field_name)
            text = "" if raw is None else str(raw)
            if optional in rules and not text:
                continue

            failed = False
            for rule in rules:
                error = rule(text)
                if error is None:
                    continue
                failed = True
                issues.append(Issue(path=(field_name,), message=error, code=rule.__name__))
                # Presence failed; nothing else to check on an empty value
                if rule is required:
                    break

            if not failed:
                cleaned[field_name] = text

        if issues:
            return ValidationResult.failure(issues)
        return ValidationResult.success(cleaned)
