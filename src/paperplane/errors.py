"""Paperplane exception hierarchy.

Every failure the request pipeline knows how to describe is one of these
types. Foreign exceptions (from validation or HTTP-error libraries) are
converted into them by ``paperplane.server.errors.adapt_error`` before
they reach the normalizer.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class PaperplaneError(Exception):
    """Base for all paperplane-specific errors."""


class ConfigurationError(PaperplaneError):
    """Raised when a route table or config value is invalid.

    Surfaces at construction time, never per request.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PaperplaneError):
    """A failure that maps directly to an HTTP status code.

    Raise it from a handler to declare the response status::

        raise HTTPError(418, "I'm a teapot")

    ``name`` ends up in the JSON error body next to ``message``.
    """

    status: int
    message: str = ""
    name: str = "Error"
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.message:
            return f"{self.status}: {self.message}"
        return str(self.status)


class MalformedInput(HTTPError):
    """400 — the request body or target could not be decoded."""

    def __init__(self, message: str = "Bad Request", *, status: int = 400) -> None:
        super().__init__(status=status, message=message, name="BadRequestError")


class UnsupportedMediaType(MalformedInput):
    """415 — the body declares a charset we cannot decode."""

    def __init__(self, message: str = "Unsupported Media Type") -> None:
        HTTPError.__init__(self, status=415, message=message, name="UnsupportedMediaTypeError")


class PayloadTooLarge(MalformedInput):
    """413 — the body exceeds the configured size limit."""

    def __init__(self, limit: int, length: int | None = None) -> None:
        message = "request entity too large"
        if length is not None:
            message = f"{message} ({length} > {limit} bytes)"
        HTTPError.__init__(self, status=413, message=message, name="PayloadTooLargeError")


class NotFound(HTTPError):  # noqa: N818
    """404 — no route matched the request."""

    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(status=404, message=message, name="NotFoundError")


@dataclass(frozen=True, slots=True)
class ValidationDetail:
    """One field-level validation failure."""

    message: str
    path: str
    type: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "path": self.path,
            "type": self.type,
            "context": dict(self.context),
        }


class ValidationFailure(HTTPError):  # noqa: N818
    """400 — structured validation failure carrying field-level details."""

    details: tuple[ValidationDetail, ...]

    def __init__(
        self,
        details: tuple[ValidationDetail, ...] | list[ValidationDetail],
        message: str = "",
        name: str = "ValidationError",
    ) -> None:
        details = tuple(details)
        if not message:
            message = ". ".join(d.message for d in details) or "Validation failed"
        super().__init__(status=400, message=message, name=name)
        object.__setattr__(self, "details", details)
