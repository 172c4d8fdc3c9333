"""Built-in validation rules.

Each validator is a callable with the signature::

    def rule(value: Any) -> str | None:
        '''Return error message, or None if valid.'''

Values come straight from a parsed body or query, so they are not always
strings: JSON bodies carry numbers, booleans, lists, and ``None``.

Validators may carry an ``error_type`` (a dotted code such as
``"string.max"``) and a ``context`` mapping; both end up in the
``details`` of a validation error response. Custom validators only need
the call signature; they report as ``"any.custom"``.
"""

import re
from collections.abc import Callable
from typing import Any, TypeAlias

# Type alias for a validator function
Validator: TypeAlias = Callable[[Any], str | None]


def _tag(check: Callable[[Any], str | None], error_type: str, **context: Any) -> Validator:
    check.error_type = error_type  # type: ignore[attr-defined]
    check.context = context  # type: ignore[attr-defined]
    return check


def _length_error(value: Any) -> str | None:
    if not isinstance(value, str):
        return "Must be a string"
    return None


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def is_missing(value: Any) -> bool:
    """``None``, an empty string, or whitespace only."""
    return value is None or (isinstance(value, str) and not value.strip())


def required(value: Any) -> str | None:
    """Field must be present and non-empty."""
    if is_missing(value):
        return "This field is required"
    return None


_tag(required, "any.required")


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def string(value: Any) -> str | None:
    """Value must be a string."""
    return _length_error(value)


_tag(string, "string.base")


def max_length(n: int) -> Validator:
    """String must be at most *n* characters."""

    def check(value: Any) -> str | None:
        if error := _length_error(value):
            return error
        if len(value) > n:
            return f"Must be at most {n} characters"
        return None

    return _tag(check, "string.max", limit=n)


def min_length(n: int) -> Validator:
    """String must be at least *n* characters."""

    def check(value: Any) -> str | None:
        if error := _length_error(value):
            return error
        if len(value) < n:
            return f"Must be at least {n} characters"
        return None

    return _tag(check, "string.min", limit=n)


# Basic email pattern, structure only
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(value: Any) -> str | None:
    """Value must be a valid email address (basic format check)."""
    if not isinstance(value, str) or not _EMAIL_RE.match(value):
        return "Must be a valid email address"
    return None


_tag(email, "string.email")


_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def url(value: Any) -> str | None:
    """Value must be a valid URL (http/https)."""
    if not isinstance(value, str) or not _URL_RE.match(value):
        return "Must be a valid URL"
    return None


_tag(url, "string.uri")


def matches(pattern: str, message: str | None = None) -> Validator:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: Any) -> str | None:
        if not isinstance(value, str) or not compiled.match(value):
            return message or f"Must match pattern: {pattern}"
        return None

    return _tag(check, "string.pattern.base", regex=pattern)


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: Any) -> Validator:
    """Value must be one of the given choices."""
    allowed = tuple(choices)

    def check(value: Any) -> str | None:
        if value not in allowed:
            options = ", ".join(str(choice) for choice in allowed)
            return f"Must be one of: {options}"
        return None

    return _tag(check, "any.only", valids=list(allowed))


# ---------------------------------------------------------------------------
# Numbers and booleans
# ---------------------------------------------------------------------------


def integer(value: Any) -> str | None:
    """Value must be a whole number, or a string holding one."""
    if isinstance(value, bool):
        return "Must be a whole number"
    if isinstance(value, int):
        return None
    if isinstance(value, float):
        return None if value.is_integer() else "Must be a whole number"
    try:
        int(value)
    except (ValueError, TypeError):
        return "Must be a whole number"
    return None


_tag(integer, "number.integer")


def number(value: Any) -> str | None:
    """Value must be a number (int or float), or a string holding one."""
    if isinstance(value, bool):
        return "Must be a number"
    if isinstance(value, (int, float)):
        return None
    try:
        float(value)
    except (ValueError, TypeError):
        return "Must be a number"
    return None


_tag(number, "number.base")


def boolean(value: Any) -> str | None:
    """Value must be ``true`` or ``false``."""
    if not isinstance(value, bool):
        return "Must be true or false"
    return None


_tag(boolean, "boolean.base")
